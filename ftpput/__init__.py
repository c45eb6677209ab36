__version__ = "1.0.0"
__author__ = "Andrew Hernandez"
__email__ = "andromedeyz@hotmail.com"
__license__ = "MIT"
__description__ = "A small blocking FTP client for logging in and uploading text files in active mode."
__url__ = "http://github.com/ApaxPhoenix/FtpPut"

# The main FtpPut class - build clients from one endpoint URL
from .ftp import FtpPut

# The heart of FtpPut - the login/upload state machine
from .core import (
    FileTransferClient,  # Log in and push ASCII files over active mode data connections
    port_argument,  # Build the h1,h2,h3,h4,p1,p2 argument for PORT
)

# What the server says back
from .replies import (
    Reply,  # One status line: code plus the raw text
    codes,  # Standard meanings of reply codes
)

# What can go wrong
from .errors import (
    ProtocolError,  # The server replied with the wrong code
    TransportError,  # Socket level failure, just OSError
    ReplyTooLong,  # Server sent a runaway reply line
)

# Fine-tune how your FTP connections behave
from .config import (
    Timeout,  # Set how long to wait for connections, replies and data
)

# Different ways to log in
from .auth import (
    Basic,  # Classic username and password login
    Guest,  # Anonymous login for public servers
)

# Everything you can import and use
__all__ = [
    # The main class you'll work with
    "FtpPut",
    # Core functionality
    "FileTransferClient",
    "port_argument",
    "Reply",
    "codes",
    # Errors
    "ProtocolError",
    "TransportError",
    "ReplyTooLong",
    # Configuration options
    "Timeout",
    # Authentication types
    "Basic",
    "Guest",
    # Package info
    "__version__",
    "__author__",
    "__email__",
    "__license__",
    "__description__",
    "__url__",
]

# Make sure you're running a modern Python version
import sys

if sys.version_info < (3, 9):
    raise RuntimeError("FtpPut needs Python 3.9 or newer to work properly")
