"""
screen_sampler.py

Captures the screen and reduces it to a single dominant color for the bulb.

The reduction samples a sparse grid of pixels, quantizes every channel to a
multiple of 32 (at most 512 buckets), drops samples whose HSL lightness is at
or below the brightness floor, and returns the most frequent bucket. Ties go
to the bucket seen first in column-major scan order (x outer, y inner).
"""

import numpy as np
import mss
import cv2
import time

from utils import Color, FALLBACK_COLOR

QUANT_STEP = 32
DEFAULT_STRIDE = 5
DEFAULT_BRIGHTNESS_FLOOR = 0.1


def quantize(grid):
    """Floor every channel to the nearest lower multiple of 32."""
    grid = np.clip(np.asarray(grid), 0, 255).astype(np.uint8)
    return (grid // QUANT_STEP) * QUANT_STEP


def lightness(rgb):
    """
    HSL lightness, (max + min) / 2, normalized to 0-1.
    Args:
        rgb: uint8 array of shape (h, w, 3).
    Returns:
        np.ndarray: float32 array of shape (h, w).
    """
    hls = cv2.cvtColor(np.ascontiguousarray(rgb, dtype=np.uint8), cv2.COLOR_RGB2HLS)
    return hls[..., 1].astype(np.float32) / 255.0


def _is_well_formed(grid):
    return grid.ndim == 3 and grid.shape[2] >= 3 and grid.shape[0] > 0 and grid.shape[1] > 0


def dominant_color(grid, stride=DEFAULT_STRIDE, brightness_floor=DEFAULT_BRIGHTNESS_FLOOR):
    """
    Reduce a pixel grid to its most frequent quantized color.
    Args:
        grid: RGB array indexed grid[y, x], shape (height, width, >=3).
        stride: Pixels skipped between samples on both axes (>= 1).
        brightness_floor: Samples with lightness <= this value are ignored.
    Returns:
        Color: The dominant color, or FALLBACK_COLOR when no sample survives.
    """
    if int(stride) < 1:
        raise ValueError(f"stride must be >= 1, got {stride}")
    grid = np.asarray(grid)
    if not _is_well_formed(grid):
        return FALLBACK_COLOR

    samples = quantize(grid[::stride, ::stride, :3])
    keep = lightness(samples) > brightness_floor

    # Column-major flattening gives the x-outer, y-inner scan order.
    colors = samples.transpose(1, 0, 2).reshape(-1, 3)[keep.T.reshape(-1)]
    if colors.shape[0] == 0:
        return FALLBACK_COLOR

    keys = (colors[:, 0].astype(np.int32) << 16) | (colors[:, 1].astype(np.int32) << 8) | colors[:, 2]
    _, first_seen, counts = np.unique(keys, return_index=True, return_counts=True)
    winner = int(keys[first_seen[counts == counts.max()].min()])
    return Color((winner >> 16) & 0xFF, (winner >> 8) & 0xFF, winner & 0xFF)


class ScreenSampler:
    def __init__(self, stride=DEFAULT_STRIDE, brightness_floor=DEFAULT_BRIGHTNESS_FLOOR, monitor_index=1):
        """
        Initialize the screen sampler.
        Args:
            stride: Sample stride in pixels.
            brightness_floor: Lightness floor for dark-pixel filtering.
            monitor_index: mss monitor index (1 = primary display).
        """
        self.stride = stride
        self.brightness_floor = brightness_floor
        self.monitor_index = monitor_index
        self.last_color = FALLBACK_COLOR
        self.last_capture_success = True

    def monitor_bounds(self):
        """
        Bounding rectangle of the configured display.
        Returns:
            dict: mss monitor dict with left, top, width and height.
        """
        with mss.mss() as sct:
            return dict(sct.monitors[self.monitor_index])

    def grab_region(self, rect):
        """
        Capture one rectangle of the desktop.
        Args:
            rect: dict with left, top, width and height.
        Returns:
            np.ndarray: RGB image of shape (height, width, 3).
        """
        with mss.mss() as sct:
            img = np.array(sct.grab(rect))
        # Convert BGRA to RGB
        return img[..., :3][..., ::-1]

    def capture_screen(self):
        """
        Capture the configured display using mss.
        Returns:
            np.ndarray: Captured image in RGB format, or None if failed.
        """
        try:
            img = self.grab_region(self.monitor_bounds())
            self.last_capture_success = True
            return img
        except Exception as e:
            # Handle screen capture failure gracefully
            print(f"[SCREEN] Screen capture failed: {e}")
            self.last_capture_success = False
            return None

    def get_screen_color(self):
        """
        Main entry point: capture the display and reduce it to one color.
        Returns:
            Color: Dominant color of the current frame, or the previous one
            if the capture failed.
        """
        img = self.capture_screen()
        if img is None:
            print("[SCREEN] Screen capture unavailable, reusing last color.")
            return self.last_color
        self.last_color = dominant_color(img, self.stride, self.brightness_floor)
        return self.last_color


if __name__ == "__main__":
    sampler = ScreenSampler()
    while True:
        start = time.time()
        color = sampler.get_screen_color()
        print(f"Dominant RGB: {tuple(color)} ({(time.time() - start) * 1000:.1f} ms)")
        time.sleep(1.5)
