from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from rainbow_playlists.extraction import DEFAULT_MAX_DIMENSION
from rainbow_playlists.resolver import DEFAULT_IMAGE_TIMEOUT
from rainbow_playlists.scheduler import DEFAULT_BATCH_DELAY, DEFAULT_BATCH_SIZE


def load_local_env_file(env_path: str = ".env") -> list[str]:
    """Load key=value pairs from a local .env file into process env.

    Variables already set in the environment win over the file.  Returns
    the names that were actually loaded.
    """

    path = Path(env_path)
    if not path.exists():
        return []

    loaded: list[str] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = (part.strip() for part in line.split("=", 1))
        value = value.strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value
            loaded.append(key)
    return loaded


def env_int(name: str, fallback: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return fallback
    try:
        return int(raw)
    except ValueError:
        return fallback


def env_float(name: str, fallback: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return fallback
    try:
        return float(raw)
    except ValueError:
        return fallback


@dataclass(slots=True)
class RainbowSettings:
    batch_size: int = DEFAULT_BATCH_SIZE
    batch_delay: float = DEFAULT_BATCH_DELAY
    max_image_dimension: int = DEFAULT_MAX_DIMENSION
    image_timeout: float = DEFAULT_IMAGE_TIMEOUT

    @classmethod
    def from_env(cls) -> RainbowSettings:
        return cls(
            batch_size=max(1, env_int("RAINBOW_BATCH_SIZE", DEFAULT_BATCH_SIZE)),
            batch_delay=max(0.0, env_float("RAINBOW_BATCH_DELAY", DEFAULT_BATCH_DELAY)),
            max_image_dimension=max(1, env_int("RAINBOW_MAX_IMAGE_DIMENSION", DEFAULT_MAX_DIMENSION)),
            image_timeout=env_float("RAINBOW_IMAGE_TIMEOUT", DEFAULT_IMAGE_TIMEOUT),
        )
