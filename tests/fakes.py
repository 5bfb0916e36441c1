"""Test doubles for the network side of the transport."""

import socket
import threading


class FakeProjector:
    """Far end of a socketpair standing in for the projector."""

    def __init__(self):
        self.client_sock, self.sock = socket.socketpair()
        self.sock.settimeout(5.0)
        self.requests = []

    def read_exactly(self, length):
        data = b""
        while len(data) < length:
            chunk = self.sock.recv(length - len(data))
            if not chunk:
                raise ConnectionError("client closed the connection")
            data += chunk
        return data

    def read_request(self):
        header = self.read_exactly(10)
        frame = header + self.read_exactly(header[9])
        self.requests.append(frame)
        return frame

    def serve(self, *responses):
        """Answers one request per response, in a background thread.

        A response of None reads the request and sends nothing. The string "close"
        reads the request and closes the connection.
        """
        def run():
            for response in responses:
                self.read_request()
                if response == "close":
                    self.sock.close()
                    return
                if response is not None:
                    self.sock.sendall(response)

        thread = threading.Thread(target=run, daemon=True)
        thread.start()
        return thread

    def close(self):
        for sock in (self.sock, self.client_sock):
            try:
                sock.close()
            except OSError:
                pass


class FakeNetwork:
    """Replaces socket.create_connection; each connect creates a new FakeProjector."""

    def __init__(self):
        self.connects = []
        self.projectors = []
        self.error = None

    def create_connection(self, address, timeout=None, *args, **kwargs):
        self.connects.append((address, timeout))
        if self.error is not None:
            raise self.error
        projector = FakeProjector()
        self.projectors.append(projector)
        return projector.client_sock

    @property
    def projector(self):
        return self.projectors[-1]


def response_frame(item_number, payload, community=b"SONY", operation=0x01):
    """Builds a response frame by hand, independent of the package's encoder."""
    return (
        b"\x02\x0a" + community + bytes([operation]) + item_number.to_bytes(2, "big")
        + bytes([len(payload)]) + payload
    )
