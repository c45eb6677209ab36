import socket
import threading
from typing import Dict, List, Optional, Tuple

import pytest

from ftpput import FileTransferClient, Timeout

# What a well-behaved server says to each command; "DONE" is the reply
# sent after the data connection closes and "ABORTED" the one after a reset.
defaults = {
    "USER": "331 need password",
    "PASS": "230 logged in",
    "TYPE": "200 type set to A",
    "PORT": "200 PORT command successful",
    "STOR": "150 about to open data connection",
    "DONE": "226 transfer complete",
    "ABORTED": "426 connection closed; transfer aborted",
    "QUIT": "221 goodbye",
}


def decode(argument: str) -> Tuple[str, int]:
    parts = [int(part) for part in argument.split(",")]
    return ".".join(str(part) for part in parts[:4]), parts[4] * 256 + parts[5]


class ScriptedServer:
    """
    One-shot FTP server that answers from a script.

    Accepts a single control connection, records every command line and
    replies with the scripted text. On a 150 STOR reply it dials back to
    the PORT address and keeps whatever arrives in `received`; a reset
    data connection sets `aborted` and gets the 426 reply. A reply of
    None hangs up instead of answering.
    """

    def __init__(self, greeting: str = "220 ready", **replies: Optional[str]) -> None:
        self.greeting = greeting
        self.replies: Dict[str, Optional[str]] = dict(defaults, **replies)
        self.commands: List[str] = []
        self.received = b""
        self.aborted = False
        self.data_address: Optional[Tuple[str, int]] = None
        self.connection: Optional[socket.socket] = None

        self.listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.listener.bind(("127.0.0.1", 0))
        self.listener.listen(1)
        self.listener.settimeout(10)
        self.port = self.listener.getsockname()[1]
        self.thread = threading.Thread(target=self.serve, daemon=True)

    def start(self) -> "ScriptedServer":
        self.thread.start()
        return self

    def close(self) -> None:
        self.listener.close()
        if self.connection is not None:
            try:
                self.connection.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
        self.thread.join(5)

    def client(self) -> FileTransferClient:
        return FileTransferClient(port=self.port, timeout=Timeout(connect=5, read=5, data=5))

    def serve(self) -> None:
        try:
            connection, _ = self.listener.accept()
        except OSError:
            return
        self.connection = connection
        with connection, connection.makefile("rb") as reader:
            try:
                self.send(connection, self.greeting)
                for raw in reader:
                    line = raw.decode("utf-8").rstrip("\r\n")
                    self.commands.append(line)
                    verb = line.split(" ", 1)[0].upper()
                    if verb == "PORT":
                        self.data_address = decode(line[5:])

                    reply = self.replies.get(verb, "502 command not implemented")
                    if reply is None:
                        break
                    self.send(connection, reply)

                    if verb == "STOR" and reply.startswith("150"):
                        self.receive()
                        self.send(connection, self.replies["ABORTED" if self.aborted else "DONE"])
                    if verb == "QUIT":
                        break
            except OSError:
                pass

    def send(self, connection: socket.socket, text: str) -> None:
        connection.sendall(f"{text}\r\n".encode("utf-8"))

    def receive(self) -> None:
        chunks = []
        with socket.create_connection(self.data_address, timeout=10) as data:
            while True:
                try:
                    block = data.recv(65536)
                except ConnectionResetError:
                    self.aborted = True
                    break
                if not block:
                    break
                chunks.append(block)
        self.received = b"".join(chunks)


@pytest.fixture
def server():
    """Factory fixture: server(**replies) starts a ScriptedServer."""
    servers = []

    def start(**kwargs) -> ScriptedServer:
        scripted = ScriptedServer(**kwargs).start()
        servers.append(scripted)
        return scripted

    yield start
    for scripted in servers:
        scripted.close()
