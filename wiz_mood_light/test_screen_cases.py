"""test_screen_cases.py

Synthetic, deterministic tests for the dominant-color reduction.
These tests avoid real screen capture.
"""

import os
import sys
import unittest
from unittest import mock

import numpy as np

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))
from screen.screen_sampler import ScreenSampler, dominant_color, quantize
from utils import Color, FALLBACK_COLOR


def _make_solid_frame(rgb, w=64, h=36):
    img = np.zeros((h, w, 3), dtype=np.uint8)
    img[:, :, :] = np.array(rgb, dtype=np.uint8)
    return img


def _make_split_frame(first_rgb, second_rgb, first_share, w=10, h=10):
    """Top rows first_rgb, remaining rows second_rgb."""
    img = _make_solid_frame(second_rgb, w, h)
    img[: int(h * first_share), :, :] = np.array(first_rgb, dtype=np.uint8)
    return img


class TestQuantization(unittest.TestCase):
    def test_quantized_channels_are_multiples_of_32_and_never_exceed_input(self):
        rng = np.random.default_rng(123)
        img = rng.integers(0, 256, size=(36, 64, 3), dtype=np.uint8)
        q = quantize(img)
        allowed = {0, 32, 64, 96, 128, 160, 192, 224}
        self.assertTrue(set(np.unique(q).tolist()) <= allowed)
        self.assertTrue(np.all(q <= img))
        self.assertTrue(np.all(img - q < 32))

    def test_channel_edges(self):
        q = quantize(np.array([[[0, 31, 32]], [[255, 224, 223]]], dtype=np.uint8))
        self.assertEqual(q[0, 0].tolist(), [0, 0, 32])
        self.assertEqual(q[1, 0].tolist(), [224, 224, 192])


class TestDominantColor(unittest.TestCase):
    def test_solid_frame_returns_quantized_color(self):
        self.assertEqual(dominant_color(_make_solid_frame([200, 100, 50])), Color(192, 96, 32))

    def test_plurality_bucket_wins(self):
        img = _make_split_frame([200, 40, 40], [40, 200, 40], 0.6)
        self.assertEqual(dominant_color(img, stride=1), Color(192, 32, 32))

    def test_near_identical_pixels_share_a_bucket(self):
        # 40% exact red vs 60% of slightly different oranges that all floor to one bucket
        img = _make_split_frame([250, 10, 10], [130, 70, 5], 0.4)
        img[6:, :5, :] = np.array([140, 90, 20], dtype=np.uint8)
        self.assertEqual(dominant_color(img, stride=1), Color(128, 64, 0))

    def test_repeated_calls_are_deterministic(self):
        rng = np.random.default_rng(7)
        img = rng.integers(0, 256, size=(90, 160, 3), dtype=np.uint8)
        first = dominant_color(img, stride=3)
        for _ in range(5):
            self.assertEqual(dominant_color(img, stride=3), first)

    def test_empty_grid_returns_fallback(self):
        self.assertEqual(dominant_color(np.zeros((0, 0, 3), dtype=np.uint8)), FALLBACK_COLOR)
        self.assertEqual(dominant_color(np.zeros((0, 10, 3), dtype=np.uint8)), FALLBACK_COLOR)

    def test_near_black_frame_returns_fallback_not_black(self):
        out = dominant_color(_make_solid_frame([5, 5, 5]))
        self.assertEqual(out, FALLBACK_COLOR)
        self.assertNotEqual(out, Color(0, 0, 0))

    def test_dark_letterbox_does_not_dominate(self):
        # 90% black bars, 10% blue picture
        img = _make_split_frame([0, 0, 200], [0, 0, 0], 0.1)
        self.assertEqual(dominant_color(img, stride=1), Color(0, 0, 192))

    def test_brightness_floor_is_configurable(self):
        img = _make_solid_frame([40, 40, 40])
        self.assertEqual(dominant_color(img, brightness_floor=0.1), Color(32, 32, 32))
        self.assertEqual(dominant_color(img, brightness_floor=0.2), FALLBACK_COLOR)

    def test_tie_goes_to_first_color_in_column_major_order(self):
        red, green = [200, 0, 0], [0, 200, 0]
        img = np.zeros((2, 2, 3), dtype=np.uint8)
        img[1, 0] = red    # x=0, y=1: second in column-major order
        img[0, 1] = green  # x=1, y=0: second in row-major order
        self.assertEqual(dominant_color(img, stride=1), Color(192, 0, 0))

    def test_stride_controls_sampled_points(self):
        img = _make_solid_frame([0, 200, 0], w=4, h=4)
        img[::2, ::2] = np.array([200, 0, 0], dtype=np.uint8)
        self.assertEqual(dominant_color(img, stride=1), Color(0, 192, 0))
        self.assertEqual(dominant_color(img, stride=2), Color(192, 0, 0))

    def test_stride_larger_than_frame_samples_origin(self):
        img = _make_solid_frame([0, 200, 0], w=8, h=8)
        img[0, 0] = np.array([200, 0, 200], dtype=np.uint8)
        self.assertEqual(dominant_color(img, stride=50), Color(192, 0, 192))

    def test_invalid_stride_rejected(self):
        with self.assertRaises(ValueError):
            dominant_color(_make_solid_frame([10, 10, 10]), stride=0)

    def test_malformed_grid_returns_fallback(self):
        self.assertEqual(dominant_color(np.zeros((10, 10), dtype=np.uint8)), FALLBACK_COLOR)
        self.assertEqual(dominant_color(np.zeros((10, 10, 2), dtype=np.uint8)), FALLBACK_COLOR)

    def test_alpha_channel_is_ignored(self):
        img = np.zeros((4, 4, 4), dtype=np.uint8)
        img[..., :3] = np.array([100, 150, 250], dtype=np.uint8)
        img[..., 3] = 255
        self.assertEqual(dominant_color(img), Color(96, 128, 224))

    def test_random_frames_always_in_range(self):
        rng = np.random.default_rng(99)
        for _ in range(50):
            img = rng.integers(0, 256, size=(36, 64, 3), dtype=np.uint8)
            out = dominant_color(img, stride=int(rng.integers(1, 10)))
            self.assertEqual(len(out), 3)
            self.assertTrue(all(0 <= c <= 255 and c % 32 == 0 or c == 255 for c in out))


class TestScreenSampler(unittest.TestCase):
    def setUp(self):
        self.sampler = ScreenSampler(stride=1, brightness_floor=0.1)

    def test_screen_failure_reuses_last_color(self):
        self.sampler.last_color = Color(64, 32, 0)
        with mock.patch.object(self.sampler, 'capture_screen', return_value=None):
            self.assertEqual(self.sampler.get_screen_color(), Color(64, 32, 0))

    def test_first_failure_uses_fallback(self):
        with mock.patch.object(self.sampler, 'capture_screen', return_value=None):
            self.assertEqual(self.sampler.get_screen_color(), FALLBACK_COLOR)

    def test_captured_frame_is_reduced_and_remembered(self):
        frame = _make_solid_frame([0, 130, 250])
        with mock.patch.object(self.sampler, 'capture_screen', return_value=frame):
            self.assertEqual(self.sampler.get_screen_color(), Color(0, 128, 224))
        self.assertEqual(self.sampler.last_color, Color(0, 128, 224))

    def test_capture_converts_bgra_to_rgb(self):
        shot = np.zeros((2, 2, 4), dtype=np.uint8)
        shot[..., 0] = 10   # B
        shot[..., 1] = 20   # G
        shot[..., 2] = 30   # R
        sct = mock.MagicMock()
        sct.__enter__.return_value = sct
        sct.monitors = [{}, {"left": 0, "top": 0, "width": 2, "height": 2}]
        sct.grab.return_value = shot
        with mock.patch('mss.mss', return_value=sct):
            img = self.sampler.capture_screen()
        self.assertEqual(img[0, 0].tolist(), [30, 20, 10])
        self.assertTrue(self.sampler.last_capture_success)

    def test_capture_grabs_the_configured_monitor_rectangle(self):
        second = {"left": 1920, "top": 0, "width": 4, "height": 3}
        sct = mock.MagicMock()
        sct.__enter__.return_value = sct
        sct.monitors = [{}, {"left": 0, "top": 0, "width": 2, "height": 2}, second]
        sct.grab.return_value = np.zeros((3, 4, 4), dtype=np.uint8)
        sampler = ScreenSampler(monitor_index=2)
        with mock.patch('mss.mss', return_value=sct):
            self.assertEqual(sampler.monitor_bounds(), second)
            img = sampler.capture_screen()
        sct.grab.assert_called_with(second)
        self.assertEqual(img.shape, (3, 4, 3))

    def test_grab_region_returns_rgb_grid_for_rectangle(self):
        rect = {"left": 10, "top": 20, "width": 2, "height": 1}
        shot = np.zeros((1, 2, 4), dtype=np.uint8)
        shot[0, 1, :3] = [224, 0, 0]  # BGR blue
        sct = mock.MagicMock()
        sct.__enter__.return_value = sct
        sct.grab.return_value = shot
        with mock.patch('mss.mss', return_value=sct):
            img = self.sampler.grab_region(rect)
        sct.grab.assert_called_once_with(rect)
        self.assertEqual(img[0, 1].tolist(), [0, 0, 224])

    def test_capture_failure_is_reported_not_raised(self):
        with mock.patch('mss.mss', side_effect=RuntimeError("no display")):
            self.assertIsNone(self.sampler.capture_screen())
        self.assertFalse(self.sampler.last_capture_success)


if __name__ == '__main__':
    unittest.main()
