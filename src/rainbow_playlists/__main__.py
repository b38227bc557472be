"""Serve the Rainbow Playlists API with uvicorn."""
import os

import uvicorn

from rainbow_playlists.api import app
from rainbow_playlists.config import env_int

if __name__ == "__main__":
    uvicorn.run(
        app,
        host=os.getenv("HOST", "127.0.0.1"),
        port=env_int("PORT", 8000),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
