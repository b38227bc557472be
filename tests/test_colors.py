import unittest

from rainbow_playlists.colors import classify_color, classify_track, hue_category, rgb_to_hsl
from rainbow_playlists.models import Categorized, ColorCategory, HSLColor, RGBColor


class RgbToHslTests(unittest.TestCase):
    def test_pure_red(self) -> None:
        hue, saturation, lightness = rgb_to_hsl(RGBColor(255, 0, 0))
        self.assertEqual(hue, 0.0)
        self.assertEqual(saturation, 1.0)
        self.assertEqual(lightness, 0.5)

    def test_gray_has_no_saturation(self) -> None:
        hue, saturation, lightness = rgb_to_hsl((128, 128, 128))
        self.assertEqual(hue, 0.0)
        self.assertEqual(saturation, 0.0)
        self.assertAlmostEqual(lightness, 128 / 255)

    def test_primary_hues(self) -> None:
        self.assertAlmostEqual(rgb_to_hsl((0, 255, 0)).hue, 1 / 3)
        self.assertAlmostEqual(rgb_to_hsl((0, 0, 255)).hue, 2 / 3)

    def test_red_max_with_blue_above_green_wraps_hue(self) -> None:
        hsl = rgb_to_hsl((255, 0, 128))
        self.assertGreater(hsl.hue, 0.9)
        self.assertLess(hsl.hue, 1.0)

    def test_light_color_uses_upper_saturation_formula(self) -> None:
        hsl = rgb_to_hsl((255, 128, 128))
        self.assertGreater(hsl.lightness, 0.5)
        self.assertAlmostEqual(hsl.saturation, 1.0)


class HueCategoryTests(unittest.TestCase):
    def test_red_wraps_around(self) -> None:
        self.assertEqual(hue_category(0.0), ColorCategory.RED)
        self.assertEqual(hue_category(0.999), ColorCategory.RED)
        self.assertEqual(hue_category(0.975), ColorCategory.RED)

    def test_range_boundaries(self) -> None:
        self.assertEqual(hue_category(0.025), ColorCategory.RED_ORANGE)
        self.assertEqual(hue_category(0.1), ColorCategory.ORANGE)
        self.assertEqual(hue_category(0.2), ColorCategory.YELLOW)
        self.assertEqual(hue_category(0.3), ColorCategory.GREEN)
        self.assertEqual(hue_category(0.5), ColorCategory.LIGHT_BLUE)
        self.assertEqual(hue_category(0.6), ColorCategory.BLUE)
        self.assertEqual(hue_category(0.974), ColorCategory.MAGENTA)


class ClassifyColorTests(unittest.TestCase):
    def test_bright_unsaturated_is_white_not_grayscale(self) -> None:
        result = classify_color(HSLColor(0.5, 0.1, 0.95))
        self.assertTrue(result.is_white)
        self.assertFalse(result.is_grayscale)

    def test_mid_gray_is_grayscale(self) -> None:
        result = classify_color(HSLColor(0.5, 0.1, 0.5))
        self.assertFalse(result.is_white)
        self.assertTrue(result.is_grayscale)

    def test_bright_but_slightly_tinted_is_grayscale(self) -> None:
        result = classify_color(HSLColor(0.5, 0.18, 0.95))
        self.assertFalse(result.is_white)
        self.assertTrue(result.is_grayscale)

    def test_vivid_color_is_categorized(self) -> None:
        result = classify_color(HSLColor(0.6, 0.8, 0.5))
        self.assertEqual(result.bucket, Categorized(ColorCategory.BLUE))
        self.assertFalse(result.is_white)
        self.assertFalse(result.is_grayscale)

    def test_classify_track_keeps_record_and_color(self) -> None:
        track = {"id": "t1"}
        classified = classify_track(track, HSLColor(0.0, 1.0, 0.5))
        self.assertIs(classified.track, track)
        self.assertEqual(classified.color_category, 0)
        self.assertEqual(classified.saturation, 1.0)


if __name__ == "__main__":
    unittest.main()
