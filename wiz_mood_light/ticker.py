"""
ticker.py
Background-thread tick source: calls a function every interval, never overlapping.
"""

import threading


class Ticker:
    def __init__(self, interval_ms, callback, name="mood-light-ticker"):
        self.interval_s = interval_ms / 1000.0
        self.callback = callback
        self.name = name
        self._stop = threading.Event()
        self._thread = None

    @property
    def alive(self):
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.alive:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def stop(self, timeout=None):
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run(self):
        # The wait starts after the callback returns, so a slow tick delays the next one.
        while not self._stop.wait(self.interval_s):
            try:
                self.callback()
            except Exception as e:
                print(f"[TICK] Tick failed: {e}")
