"""soak_test_synthetic_frames.py

Long-run synthetic stress test for the sample-and-send loop.
- Generates deterministic synthetic frames (no real screen capture)
- Runs a real session against a local fake bulb on 127.0.0.1
- Validates every setPilot datagram the fake bulb receives

Usage:
  python tools/soak_test_synthetic_frames.py --seconds 180 --fps 25
"""

import argparse
import json
import time

import numpy as np

# Ensure local imports work when run from repo root.
import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'wiz_mood_light')))

from config import Config
from fake_bulb import FakeBulb
from screen.screen_sampler import ScreenSampler
from session import MoodLightSession


def make_frame_pattern(t: float, w: int = 160, h: int = 90) -> np.ndarray:
    """Cycle through frames that stress the dominant-color reduction."""
    phase = int(t) % 10

    if phase in (0, 1):
        # Solid primaries
        colors = ([255, 0, 0], [0, 255, 0], [0, 0, 255])
        img = np.zeros((h, w, 3), dtype=np.uint8)
        img[:, :, :] = np.array(colors[int(t * 2) % len(colors)], dtype=np.uint8)
        return img

    if phase == 2:
        # Near-black scene (must fall back to white, never black)
        img = np.zeros((h, w, 3), dtype=np.uint8)
        img[:, :, :] = 5
        return img

    if phase in (3, 4):
        # Letterboxed movie: black bars top and bottom, teal picture
        img = np.zeros((h, w, 3), dtype=np.uint8)
        img[h // 8: h - h // 8, :, :] = np.array([20, 140, 150], dtype=np.uint8)
        return img

    if phase in (5, 6):
        # Smooth gradient sweep
        img = np.zeros((h, w, 3), dtype=np.uint8)
        x = np.linspace(0, 1, w, dtype=np.float32)
        img[:, :, 0] = (255 * (0.5 + 0.5 * np.sin(2 * np.pi * (x + 0.05 * t)))).astype(np.uint8)[None, :]
        img[:, :, 1] = (255 * (0.5 + 0.5 * np.sin(2 * np.pi * (x + 0.05 * t + 0.33)))).astype(np.uint8)[None, :]
        img[:, :, 2] = (255 * (0.5 + 0.5 * np.sin(2 * np.pi * (x + 0.05 * t + 0.66)))).astype(np.uint8)[None, :]
        return img

    if phase == 7:
        # Empty frame
        return np.zeros((0, 0, 3), dtype=np.uint8)

    # Random-but-deterministic noise block
    rng = np.random.default_rng(int(t * 1000) & 0xFFFF)
    return rng.integers(0, 256, size=(h, w, 3), dtype=np.uint8)


class SyntheticSampler(ScreenSampler):
    """ScreenSampler whose capture returns synthetic frames instead of the display."""

    def __init__(self, clock, **kwargs):
        super().__init__(**kwargs)
        self.clock = clock

    def capture_screen(self):
        return make_frame_pattern(self.clock())


def validate_set_pilot(msg, dimming):
    if msg.get("id") != 1 or msg.get("method") != "setPilot":
        raise AssertionError(f"Bad envelope: {json.dumps(msg)}")
    params = msg.get("params", {})
    if list(params) != ["r", "g", "b", "dimming"]:
        raise AssertionError(f"Bad params: {json.dumps(params)}")
    for key in ("r", "g", "b"):
        if not 0 <= int(params[key]) <= 255:
            raise AssertionError(f"{key} out of range: {params[key]}")
    if params["dimming"] != dimming:
        raise AssertionError(f"Unexpected dimming {params['dimming']}")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument('--seconds', type=float, default=180.0)
    ap.add_argument('--fps', type=float, default=25.0)
    ap.add_argument('--stride', type=int, default=5)
    ap.add_argument('--no-smooth', action='store_true')
    ap.add_argument('--json-out', type=str, default=None)
    args = ap.parse_args()

    bulb = FakeBulb().start()
    cfg = Config()
    cfg.bulb_ip = '127.0.0.1'
    cfg.bulb_port = bulb.port
    cfg.update_interval_ms = 100
    cfg.sample_stride = args.stride
    cfg.dimming = 70
    cfg.smooth_transitions = not args.no_smooth

    started_at = time.time()
    sampler = SyntheticSampler(lambda: time.time() - started_at, stride=args.stride)
    session = MoodLightSession(cfg, sampler=sampler)
    if not session.start():
        bulb.stop()
        raise SystemExit("Fake bulb did not answer the probe")

    dt = 1.0 / max(args.fps, 1e-3)
    end = started_at + args.seconds
    ticks = 0
    errors = 0
    fallbacks = 0
    last_print = time.time()

    try:
        while time.time() < end:
            result = session.tick()
            ticks += 1
            if result.error is not None:
                errors += 1
            if tuple(result.sampled) == (255, 255, 255):
                fallbacks += 1

            now = time.time()
            if now - last_print > 5.0:
                print(f"t={now - started_at:6.1f}s sampled={tuple(result.sampled)} sent={tuple(result.sent)} "
                      f"ticks={ticks} errors={errors}")
                last_print = now
            time.sleep(dt)
    finally:
        session.stop()
        bulb.wait_for(ticks, 'setPilot', timeout=1.0)
        bulb.stop()

    received = bulb.messages('setPilot')
    for msg in received:
        validate_set_pilot(msg, cfg.dimming)

    summary = {
        "seconds": args.seconds,
        "fps": args.fps,
        "stride": args.stride,
        "smooth": cfg.smooth_transitions,
        "ticks": ticks,
        "send_errors": errors,
        "fallback_frames": fallbacks,
        "datagrams_received": len(received),
    }
    if args.json_out:
        with open(args.json_out, 'w', encoding='utf-8') as f:
            json.dump(summary, f, indent=2)
    print(f"DONE. {json.dumps(summary)}")
    if errors:
        raise SystemExit(1)


if __name__ == '__main__':
    main()
