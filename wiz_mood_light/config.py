"""
config.py
Configuration for the WiZ mood light screen-sync application.
"""

# WiZ bulbs listen for JSON control datagrams on this UDP port.
WIZ_PORT = 38899

INTERVAL_MS_RANGE = (100, 5000)
STRIDE_RANGE = (5, 50)  # panel bounds; the sampler itself accepts any stride >= 1
DIMMING_RANGE = (10, 100)


class ConfigError(ValueError):
    pass


class Config:
    def __init__(self):
        # Bulb / UDP settings
        self.bulb_ip = '192.168.0.107'
        self.bulb_port = WIZ_PORT
        self.probe_timeout_s = 1.0
        self.debug_udp_packets = False
        # Tick cadence
        self.update_interval_ms = 1500
        # Sampling settings
        self.sample_stride = 5
        # HSL lightness (0-1); quantized samples at or below this are ignored
        self.brightness_floor = 0.1
        self.monitor_index = 1  # mss: 0 = all monitors, 1 = primary
        # Bulb brightness percentage sent with every setPilot
        self.dimming = 100
        # Cross-fade between successive dominant colors
        self.smooth_transitions = True
        self.transition_steps = 3
        # Stop the session after this many failed sends in a row (0 = never)
        self.max_consecutive_failures = 0

    def validate(self):
        """Raise ConfigError listing every out-of-range setting."""
        problems = []
        if not str(self.bulb_ip or '').strip():
            problems.append("bulb IP address is empty")
        if not 0 < int(self.bulb_port) < 65536:
            problems.append(f"bulb port {self.bulb_port} is not a valid UDP port")
        low, high = INTERVAL_MS_RANGE
        if not low <= int(self.update_interval_ms) <= high:
            problems.append(f"update interval {self.update_interval_ms} ms outside {low}-{high} ms")
        if int(self.sample_stride) < 1:
            problems.append(f"sample stride {self.sample_stride} must be >= 1")
        low, high = DIMMING_RANGE
        if not low <= int(self.dimming) <= high:
            problems.append(f"dimming {self.dimming} outside {low}-{high}")
        if not 0.0 <= float(self.brightness_floor) < 1.0:
            problems.append(f"brightness floor {self.brightness_floor} outside [0, 1)")
        if int(self.transition_steps) < 1:
            problems.append(f"transition steps {self.transition_steps} must be >= 1")
        if float(self.probe_timeout_s) <= 0:
            problems.append(f"probe timeout {self.probe_timeout_s} s must be positive")
        if int(self.max_consecutive_failures) < 0:
            problems.append("max consecutive failures must be >= 0")
        if problems:
            raise ConfigError("; ".join(problems))
        return self
