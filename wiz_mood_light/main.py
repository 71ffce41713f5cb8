"""
main.py
Headless entry point: mirror the primary display's dominant color on a WiZ bulb.

Usage:
    python main.py --ip 192.168.0.107 --interval 1500 --stride 5 --dim 80
"""

import argparse
import sys
import time

from config import Config, DIMMING_RANGE, INTERVAL_MS_RANGE
from session import MoodLightSession
from ticker import Ticker


def build_config(argv=None):
    cfg = Config()
    ap = argparse.ArgumentParser(description="Sync a WiZ bulb to the dominant screen color.")
    ap.add_argument("--ip", default=cfg.bulb_ip, help="Bulb IP address or hostname.")
    ap.add_argument("--port", type=int, default=cfg.bulb_port)
    ap.add_argument("--interval", type=int, default=cfg.update_interval_ms,
                    help="Update interval in ms (%d-%d)." % INTERVAL_MS_RANGE)
    ap.add_argument("--stride", type=int, default=cfg.sample_stride, help="Pixels between samples.")
    ap.add_argument("--dim", type=int, default=cfg.dimming, help="Bulb brightness (%d-%d)." % DIMMING_RANGE)
    ap.add_argument("--floor", type=float, default=cfg.brightness_floor,
                    help="Ignore samples with lightness at or below this (0-1).")
    ap.add_argument("--monitor", type=int, default=cfg.monitor_index, help="mss monitor index.")
    ap.add_argument("--no-smooth", action="store_true", help="Jump straight to each new color.")
    ap.add_argument("--steps", type=int, default=cfg.transition_steps, help="Cross-fade steps.")
    ap.add_argument("--max-failures", type=int, default=cfg.max_consecutive_failures,
                    help="Stop after this many failed sends in a row (0 = never).")
    ap.add_argument("--debug", action="store_true", help="Print outgoing packets (rate-limited).")
    args = ap.parse_args(argv)

    cfg.bulb_ip = args.ip
    cfg.bulb_port = args.port
    cfg.update_interval_ms = args.interval
    cfg.sample_stride = args.stride
    cfg.dimming = args.dim
    cfg.brightness_floor = args.floor
    cfg.monitor_index = args.monitor
    cfg.smooth_transitions = not args.no_smooth
    cfg.transition_steps = args.steps
    cfg.max_consecutive_failures = args.max_failures
    cfg.debug_udp_packets = args.debug
    return cfg


def main(argv=None):
    config = build_config(argv)
    session = MoodLightSession(config)
    try:
        started = session.start()
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        return 2
    if not started:
        return 1

    ticker = Ticker(config.update_interval_ms, session.tick)
    ticker.start()
    last_status = None
    interrupted = False
    try:
        while session.running:
            if session.status != last_status:
                print(session.status)
                last_status = session.status
            time.sleep(0.1)
    except KeyboardInterrupt:
        print("Exiting...")
        interrupted = True
    finally:
        ticker.stop()
        if session.running:
            session.stop()
    if not interrupted:
        # The session stopped itself after repeated send failures
        print(session.status)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
