"""
fake_bulb.py
Local stand-in for a WiZ bulb: answers getPilot/setPilot on a UDP port.

Used by the unit tests and the synthetic soak tool; can also be run directly
to point the app at 127.0.0.1 without real hardware.
"""

import argparse
import json
import socket
import threading
import time


class FakeBulb:
    def __init__(self, host='127.0.0.1', port=0, respond=True, reply_payload=None):
        """
        Args:
            host, port: Address to bind (port 0 picks a free port).
            respond: If False, datagrams are recorded but never answered.
            reply_payload: Raw bytes to answer every request with, instead of
                the normal pilot reply.
        """
        self.respond = respond
        self.reply_payload = reply_payload
        self.received = []
        self.state = {"state": True, "r": 0, "g": 0, "b": 0, "dimming": 100}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind((host, port))
        self.sock.settimeout(0.05)
        self.address = self.sock.getsockname()
        self._thread = threading.Thread(target=self._serve, name="fake-bulb", daemon=True)

    @property
    def port(self):
        return self.address[1]

    def start(self):
        self._thread.start()
        return self

    def stop(self):
        self._stop.set()
        self._thread.join(1.0)
        self.sock.close()

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    def messages(self, method=None):
        with self._lock:
            return [m for m in self.received if method is None or m.get("method") == method]

    def wait_for(self, count, method=None, timeout=1.0):
        end = time.time() + timeout
        while time.time() < end:
            if len(self.messages(method)) >= count:
                return True
            time.sleep(0.005)
        return len(self.messages(method)) >= count

    def _reply(self, msg):
        if self.reply_payload is not None:
            return self.reply_payload
        method = msg.get("method")
        if method == "getPilot":
            result = dict(self.state, mac="a8bb50000000", rssi=-60)
        elif method == "setPilot":
            self.state.update(msg.get("params", {}))
            result = {"success": True}
        else:
            return json.dumps({"id": msg.get("id", 1), "error": {"code": -32601, "message": "Method not found"}}).encode()
        return json.dumps({"method": method, "env": "pro", "result": result}).encode()

    def _serve(self):
        while not self._stop.is_set():
            try:
                data, addr = self.sock.recvfrom(4096)
            except socket.timeout:
                continue
            except OSError:
                break
            try:
                msg = json.loads(data.decode("utf-8"))
            except ValueError:
                continue
            with self._lock:
                self.received.append(msg)
                reply = self._reply(msg) if self.respond else None
            if reply is not None:
                self.sock.sendto(reply, addr)


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Run a fake WiZ bulb on a local UDP port.")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=38899)
    ap.add_argument("--silent", action="store_true", help="Record datagrams but never reply.")
    args = ap.parse_args()

    bulb = FakeBulb(args.host, args.port, respond=not args.silent).start()
    print(f"Fake bulb listening on {bulb.address[0]}:{bulb.port}")
    seen = 0
    try:
        while True:
            msgs = bulb.messages()
            for msg in msgs[seen:]:
                print(json.dumps(msg))
            seen = len(msgs)
            time.sleep(0.1)
    except KeyboardInterrupt:
        print("Exiting...")
    finally:
        bulb.stop()
