"""
session.py
One mood-lighting session: probe the bulb, then sample-and-send on every tick.

The running flag and the UDP socket belong to the session instance. Any tick
source (Ticker thread, QTimer, a test loop) calls tick(); a tick that sees the
session stopped does nothing at all.
"""

import threading
from typing import NamedTuple, Optional

from bulb_client import BulbClient, BulbTarget, TransmitError
from screen.screen_sampler import ScreenSampler
from transition import ColorTransition
from utils import Color


class TickResult(NamedTuple):
    tick: int
    sampled: Color
    sent: Color
    error: Optional[TransmitError] = None


class MoodLightSession:
    def __init__(self, config, sampler=None, client_factory=None):
        self.config = config
        self.sampler = sampler
        self.client_factory = client_factory or BulbClient
        self.client = None
        self.transition = None
        self.tick_count = 0
        self.consecutive_failures = 0
        self.last_error = None
        self.last_color = None
        self.status = "Ready"
        self._running = threading.Event()
        self._lock = threading.Lock()

    @property
    def running(self):
        return self._running.is_set()

    def start(self):
        """
        Validate the config, open the socket and probe the bulb once.
        Returns:
            bool: True if the bulb answered and the session is now running.
        """
        if self.running:
            return True
        cfg = self.config.validate()
        if self.sampler is None:
            self.sampler = ScreenSampler(cfg.sample_stride, cfg.brightness_floor, cfg.monitor_index)
        else:
            self.sampler.stride = cfg.sample_stride
            self.sampler.brightness_floor = cfg.brightness_floor

        target = BulbTarget(cfg.bulb_ip.strip(), int(cfg.bulb_port))
        client = self.client_factory(target, receive_timeout=cfg.probe_timeout_s,
                                     debug_packets=cfg.debug_udp_packets)
        try:
            client.open()
        except OSError as e:
            self.status = f"Could not open UDP socket for {target.host}:{target.port}: {e}"
            print(f"[SESSION] {self.status}")
            return False
        self.status = f"Testing connection to WiZ bulb at {target.host}..."
        print(f"[SESSION] {self.status}")
        if not client.test_connection(cfg.probe_timeout_s):
            client.close()
            self.status = (f"Could not connect to WiZ bulb at {target.host}. Check the IP address "
                           f"and that the bulb is on the same network.")
            print(f"[SESSION] {self.status}")
            return False

        with self._lock:
            self.client = client
            self.transition = ColorTransition(cfg.transition_steps) if cfg.smooth_transitions else None
            self.tick_count = 0
            self.consecutive_failures = 0
            self.last_error = None
            self.last_color = None
            self._running.set()
        self.status = "Mood lighting active - analyzing screen colors..."
        print(f"[SESSION] {self.status}")
        return True

    def stop(self, reason="Mood lighting stopped"):
        self._running.clear()
        # Waits for an in-flight send; the datagram itself cannot be recalled.
        with self._lock:
            client, self.client = self.client, None
            if client is not None:
                client.close()
            if self.transition is not None:
                self.transition.reset()
        self.status = reason
        print(f"[SESSION] {reason}")

    def tick(self):
        """
        Sample once and send once.
        Returns:
            TickResult, or None when the session is not running.
        """
        if not self.running:
            return None
        sampled = self.sampler.get_screen_color()
        with self._lock:
            if not self.running or self.client is None:
                return None
            sent = self.transition.update(sampled) if self.transition is not None else sampled
            self.tick_count += 1
            try:
                self.client.set_color(sent, self.config.dimming)
            except TransmitError as e:
                self.consecutive_failures += 1
                self.last_error = e
                self.status = f"Error: {e}"
                print(f"[TICK] {self.status}")
                result = TickResult(self.tick_count, sampled, sent, e)
            else:
                self.consecutive_failures = 0
                self.last_color = sent
                self.status = f"{self.tick_count} Color updated: R={sent.r}, G={sent.g}, B={sent.b}"
                result = TickResult(self.tick_count, sampled, sent)

        limit = int(self.config.max_consecutive_failures)
        if limit and self.consecutive_failures >= limit:
            self.stop(f"Stopped after {self.consecutive_failures} failed updates: {self.last_error}")
        return result
