import re
from dataclasses import dataclass
from typing import Optional

# FTP response codes - what the server is trying to tell you
codes = {
    # 1xx - "Hold on, I'm working on it"
    120: "Service ready in n minutes",
    125: "Data connection already open; transfer starting",
    150: "File status okay; about to open data connection",
    # 2xx - "Success! Everything went great"
    200: "Command okay",
    202: "Command not implemented, superfluous at this site",
    220: "Service ready for new user",
    221: "Service closing control connection",
    226: "Closing data connection",
    230: "User logged in, proceed",
    # 3xx - "I need more info from you"
    331: "User name okay, need password",
    332: "Need account for login",
    # 4xx - "Something's wrong, but we can try again"
    421: "Service not available, closing control connection",
    425: "Can't open data connection",
    426: "Connection closed; transfer aborted",
    450: "Requested file action not taken",
    451: "Requested action aborted: local error in processing",
    452: "Requested action not taken; insufficient storage space",
    # 5xx - "Nope, that's not going to work"
    500: "Syntax error, command unrecognized",
    501: "Syntax error in parameters or arguments",
    502: "Command not implemented",
    503: "Bad sequence of commands",
    504: "Command not implemented for that parameter",
    530: "Not logged in",
    532: "Need account for storing files",
    550: "Requested action not taken; file unavailable",
    552: "Requested file action aborted; exceeded storage allocation",
    553: "Requested action not taken; file name not allowed",
}

# Three ASCII digits and a space. "NNN-" continuation lines don't match.
pattern = re.compile(r"[0-9]{3} ")


@dataclass(frozen=True)
class Reply:
    """
    One status line read off the control connection.

    Attributes:
        code: The three digit status code, kept as a string ("220").
        line: The whole reply line exactly as received, minus the CRLF.
    """

    code: str
    line: str

    @property
    def message(self) -> str:
        """Free-form text the server put after the code."""
        return self.line[4:]

    @property
    def description(self) -> str:
        """Standard meaning of the code, for humans reading error output."""
        return codes.get(int(self.code), "Unknown reply code")

    def __str__(self) -> str:
        return self.line


def parse(line: str) -> Optional[Reply]:
    """Turn a control channel line into a Reply, or None if it isn't one.

    Only lines that start with three digits followed by a space count.
    Banner text, blank lines and dash continuation lines all come back
    as None so the caller can skip them.

    Args:
        line: A single line with the line terminator already stripped

    Returns:
        The parsed Reply, or None for noise
    """
    if not pattern.match(line):
        return None
    return Reply(code=line[:3], line=line)
