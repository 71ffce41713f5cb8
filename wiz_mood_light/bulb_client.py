"""
bulb_client.py
UDP client for a single WiZ bulb: reachability probe and fire-and-forget color updates.
"""

import socket
import time
from typing import NamedTuple

from config import WIZ_PORT
from packet_builder import PacketBuilder

RECV_BUFFER = 4096


class BulbTarget(NamedTuple):
    host: str
    port: int = WIZ_PORT


class ProtocolError(Exception):
    pass


class TransmitError(ProtocolError):
    """A setPilot datagram could not be handed to the network."""


class BulbClient:
    def __init__(self, target, receive_timeout=1.0, debug_packets=False):
        self.target = target
        self.receive_timeout = receive_timeout
        self.debug_packets = debug_packets
        self.packet_builder = PacketBuilder()
        self.sock = None
        self._last_debug_print = 0.0

    @property
    def is_open(self):
        return self.sock is not None

    def open(self):
        if self.sock is None:
            self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        return self

    def close(self):
        sock, self.sock = self.sock, None
        if sock is not None:
            sock.close()

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _debug(self, packet):
        # Rate-limited so a fast ticker does not flood the console
        if not self.debug_packets:
            return
        now = time.time()
        if now - self._last_debug_print > 1.0:
            print(f"[BULB] -> {self.target.host}:{self.target.port} {packet.decode('utf-8')}")
            self._last_debug_print = now

    def test_connection(self, timeout=None):
        """
        Send getPilot and wait for one reply.
        Returns:
            bool: True iff a reply arrived within the timeout and carries a
            "result" field. Never raises.
        """
        timeout = self.receive_timeout if timeout is None else timeout
        try:
            self.open()
            packet = self.packet_builder.build_get_pilot()
            self._debug(packet)
            self.sock.settimeout(timeout)
            try:
                self.sock.sendto(packet, (self.target.host, self.target.port))
                payload, _ = self.sock.recvfrom(RECV_BUFFER)
            finally:
                if self.sock is not None:
                    self.sock.settimeout(None)
            reply = self.packet_builder.parse_response(payload)
            return reply is not None and "result" in reply
        except Exception as e:
            print(f"[BULB] No reply from {self.target.host}:{self.target.port}: {e}")
            return False

    def set_color(self, color, dimming):
        """Send one setPilot datagram without waiting for a reply."""
        packet = self.packet_builder.build_set_pilot(color, dimming)
        sock = self.sock
        if sock is None:
            raise TransmitError("socket is closed")
        self._debug(packet)
        try:
            sock.sendto(packet, (self.target.host, self.target.port))
        except OSError as e:
            raise TransmitError(f"Failed to set bulb color: {e}") from e
