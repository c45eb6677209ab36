from .replies import Reply

# Socket level failures are raised by the networking stack as-is
# (ConnectionRefusedError, ConnectionResetError, socket.timeout, ...).
TransportError = OSError


class ProtocolError(Exception):
    """
    The server answered a command with a reply code we weren't expecting.

    The string form is the raw reply line so callers can log or show
    exactly what the server said, e.g. "530 login incorrect".

    Attributes:
        reply: The offending Reply
        expected: The code the command required
    """

    def __init__(self, reply: Reply, expected: str) -> None:
        super().__init__(reply.line)
        self.reply = reply
        self.expected = expected

    @property
    def line(self) -> str:
        return self.reply.line

    @property
    def code(self) -> str:
        return self.reply.code


class ReplyTooLong(ConnectionError):
    """The server sent a reply line longer than the client will buffer."""
