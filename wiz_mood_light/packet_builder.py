"""
packet_builder.py
Builds and parses the JSON datagrams of the WiZ UDP control protocol.

Requests always carry id 1; the bulb does not need distinct ids here.
    {"id":1,"method":"getPilot","params":{}}
    {"id":1,"method":"setPilot","params":{"r":R,"g":G,"b":B,"dimming":D}}
"""
import json

from config import DIMMING_RANGE

REQUEST_ID = 1


class PacketBuilder:
    def _encode(self, method, params):
        msg = {"id": REQUEST_ID, "method": method, "params": params}
        return json.dumps(msg, separators=(",", ":")).encode("utf-8")

    def build_get_pilot(self):
        return self._encode("getPilot", {})

    def build_set_pilot(self, color, dimming):
        r, g, b = (int(c) for c in color)
        for name, value in (("r", r), ("g", g), ("b", b)):
            if not 0 <= value <= 255:
                raise ValueError(f"{name}={value} outside 0-255")
        low, high = DIMMING_RANGE
        if not low <= int(dimming) <= high:
            raise ValueError(f"dimming={dimming} outside {low}-{high}")
        return self._encode("setPilot", {"r": r, "g": g, "b": b, "dimming": int(dimming)})

    @staticmethod
    def parse_response(payload):
        """Decode a reply datagram; None unless it is a JSON object."""
        try:
            msg = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            return None
        return msg if isinstance(msg, dict) else None
