import io
import ipaddress
import logging
import socket
import struct
import warnings
from types import TracebackType
from typing import (
    Optional,
    Dict,
    Union,
    Callable,
    IO,
    Any,
    Type,
)
from .config import Timeout
from .errors import ProtocolError, ReplyTooLong
from .replies import Reply, parse

logger = logging.getLogger(__name__)

# Enhanced type definitions for improved type safety and clarity
Content = Union[str, IO[str], IO[bytes]]
HookType = Callable[..., Any]

# How much content to pull from the caller's stream per write
chunk = 8192

# Longest reply line we'll buffer, terminator included
maxline = 8192


def ipv4(address: str) -> ipaddress.IPv4Address:
    """Get the IPv4 address a PORT command can carry.

    Dual-stack sockets report IPv4 peers as "::ffff:a.b.c.d", so those get
    unwrapped. Anything else that isn't IPv4 can't be expressed in PORT.

    Raises:
        ValueError: If the address isn't IPv4 or IPv4-mapped IPv6
    """
    ip = ipaddress.ip_address(address)
    if isinstance(ip, ipaddress.IPv6Address):
        if ip.ipv4_mapped is None:
            raise ValueError(f"Active mode needs an IPv4 address, got {address}")
        return ip.ipv4_mapped
    return ip


def port_argument(address: str, port: int) -> str:
    """Build the "h1,h2,h3,h4,p1,p2" argument of a PORT command.

    The four address bytes come first, then the port split big-endian
    into its high and low byte. For example ("192.168.10.20", 1027)
    gives "192,168,10,20,4,3" since 1027 = 4 * 256 + 3.

    Args:
        address: Local IPv4 address the server should dial back to
        port: Local listening port

    Returns:
        The comma separated argument string

    Raises:
        ValueError: If the address isn't IPv4 or the port is out of range
    """
    if not 0 < port <= 0xFFFF:
        raise ValueError(f"Port must be between 1 and 65535, got {port}")
    octets = list(ipv4(address).packed) + [port >> 8 & 0xFF, port & 0xFF]
    return ",".join(str(octet) for octet in octets)


def close(resource: Any) -> None:
    """Close a socket or stream and ignore whatever goes wrong. We're cleaning up."""
    if resource is None:
        return
    try:
        resource.close()
    except Exception as error:
        logger.debug("Ignoring error while closing %r: %s", resource, error)


def abort(connection: socket.socket) -> None:
    """Close a data connection with a reset so the server discards the partial file."""
    try:
        connection.setsockopt(socket.SOL_SOCKET, socket.SO_LINGER, struct.pack("ii", 1, 0))
    except OSError as error:
        logger.debug("Couldn't set SO_LINGER on %r: %s", connection, error)
    close(connection)


class FileTransferClient:
    """
    Small blocking FTP client that logs in and pushes text files in active mode.

    Every command goes out on the control connection and waits for its one
    expected reply before anything else happens, so there's never more than
    one command in flight. Uploads open a fresh listener, tell the server
    where it is with PORT, and let the server dial in to collect the data.

    The client isn't thread safe. Use one instance per thread, or serialize
    calls yourself.
    """

    def __init__(
        self,
        port: int = 21,
        timeout: Optional[Timeout] = None,
        encoding: str = "utf-8",
        hooks: Optional[Dict[str, HookType]] = None,
    ) -> None:
        """Set up the client. Nothing touches the network until connect().

        Args:
            port: Command port on the server, 21 unless the server says otherwise
            timeout: Connect, read and data timeouts; blocks forever by default
            encoding: Text encoding for commands, replies and text content
            hooks: Callbacks for "connect", "upload" and "disconnect" events
        """
        self.port = port
        self.timeout = timeout or Timeout()
        self.encoding = encoding
        self.hooks = hooks or {}

        # Control connection state; all None while disconnected
        self.host: Optional[str] = None
        self.socket: Optional[socket.socket] = None
        self.reader: Optional[IO[bytes]] = None
        self.writer: Optional[IO[bytes]] = None

    @property
    def connected(self) -> bool:
        return self.socket is not None

    def __enter__(self) -> "FileTransferClient":
        return self

    def __exit__(
        self,
        kind: Optional[Type[BaseException]],
        error: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        """Disconnect on the way out without hiding an error from the block."""
        if kind is None:
            self.disconnect()
            return
        try:
            self.disconnect()
        except (ProtocolError, OSError) as problem:
            logger.debug("Ignoring disconnect failure after %s: %s", kind.__name__, problem)

    def connect(self, host: str, username: str, password: str) -> Reply:
        """Open the control connection and log in.

        Reads the 220 greeting, then sends USER (expects 331) and PASS
        (expects 230). If any step fails the control connection is closed
        before the error is raised, so the client is always either fully
        logged in or fully disconnected.

        Args:
            host: DNS name or IP address of the FTP server
            username: Sent with USER
            password: Sent with PASS

        Returns:
            Reply: The 230 login reply

        Raises:
            RuntimeError: If the client is already connected
            ProtocolError: If the server answers any step with the wrong code
            OSError: If the connection can't be opened or drops
        """
        if self.socket is not None:
            raise RuntimeError("Client already connected. Call disconnect() first.")

        logger.info("Connecting to %s:%s", host, self.port)
        self.socket = socket.create_connection(
            (host, self.port), timeout=self.timeout.connect
        )
        self.host = host

        try:
            self.socket.settimeout(self.timeout.read)
            self.reader = self.socket.makefile("rb")
            self.writer = self.socket.makefile("wb")

            self.response("220")
            self.command(f"USER {username}", "331")
            reply = self.command(f"PASS {password}", "230")
        except BaseException:
            self.cleanup()
            raise

        logger.info("Logged in to %s:%s as %s", host, self.port, username)
        self.fire("connect", self)
        return reply

    def disconnect(self) -> None:
        """Say QUIT and tear down the control connection.

        The connection is torn down whether or not QUIT gets its 221, and
        teardown itself never raises. A QUIT that fails is still reported
        once everything is closed. Disconnecting a client that isn't
        connected does nothing.

        Raises:
            ProtocolError: If the server answers QUIT with something other than 221
            OSError: If the control connection failed while sending QUIT
        """
        if self.socket is None:
            return
        try:
            self.command("QUIT", "221")
        finally:
            self.cleanup()
            logger.info("Disconnected from %s:%s", self.host, self.port)
            self.fire("disconnect", self)

    def cleanup(self) -> None:
        """Close the reader, writer and socket, suppressing every error."""
        close(self.reader)
        self.reader = None
        close(self.writer)
        self.writer = None
        close(self.socket)
        self.socket = None

    def require(self) -> None:
        if self.socket is None:
            raise RuntimeError("Client not connected. Call connect() first.")

    def command(self, line: str, expected: str) -> Reply:
        """Send one command and wait for its reply.

        Args:
            line: The command without its CRLF, like "TYPE A"
            expected: Reply code the command must get back

        Returns:
            Reply: The matching reply

        Raises:
            ValueError: If the command has a line break in it
            ProtocolError: If the reply code doesn't match
        """
        self.require()
        if "\r" in line or "\n" in line:
            raise ValueError(f"Command cannot contain line breaks: {line!r}")

        logger.debug("-> %s", "PASS ****" if line.startswith("PASS ") else line)
        self.writer.write(f"{line}\r\n".encode(self.encoding))
        self.writer.flush()
        return self.response(expected)

    def response(self, expected: str) -> Reply:
        """Read lines until a reply turns up and check its code.

        Anything that isn't "NNN " at the start of a line gets thrown away,
        which takes care of banners. Multi-line replies that use "NNN-"
        aren't parsed; their lines are skipped like any other noise until
        the closing "NNN " line.

        Args:
            expected: The three digit code the reply must carry

        Returns:
            Reply: The reply that matched

        Raises:
            ProtocolError: If the reply has a different code
            ReplyTooLong: If a line runs past maxline bytes
            ConnectionError: If the server closes the connection first
        """
        reply = self.scan(expected)
        if reply.code != expected:
            raise ProtocolError(reply, expected)
        return reply

    def scan(self, expected: str) -> Reply:
        """Return the next reply line, whatever its code."""
        self.require()
        while True:
            raw = self.reader.readline(maxline + 1)
            if len(raw) > maxline:
                raise ReplyTooLong(
                    f"Reply line from {self.host}:{self.port} is longer than {maxline} bytes"
                )
            if not raw:
                raise ConnectionError(
                    f"Connection to {self.host}:{self.port} closed "
                    f"while waiting for a {expected} reply"
                )
            line = raw.decode(self.encoding, errors="replace").rstrip("\r\n")
            reply = parse(line)
            if reply is not None:
                break
            logger.debug("Skipping non-reply line: %r", line)

        logger.debug("<- %s", line)
        return reply

    def settle(self) -> None:
        """Consume the reply to an aborted transfer so the next command gets its own."""
        try:
            reply = self.scan("226")
        except Exception as error:
            logger.debug("No reply after aborted transfer: %s", error)
            return
        logger.debug("Aborted transfer ended with: %s", reply.line)

    def upload_file(self, name: str, content: Content) -> Reply:
        """Store content on the server as an ASCII file.

        Switches to ASCII with TYPE A, opens a listener on a port the OS
        picks, announces it with PORT, asks for STOR and then waits for the
        server to connect. The listener is closed as soon as that one
        connection arrives. Content goes over untouched, in order, and the
        data connection is closed to mark the end of the file.

        The listener and the data connection are always closed, even if a
        command fails halfway. If reading the content fails mid-transfer the
        data connection is reset rather than closed, so the server throws
        the partial file away, and its reply to the aborted transfer is
        read and discarded before the error is raised.

        Args:
            name: Filename to create on the server
            content: The text itself, or a stream to read it from. Streams
                     returning bytes are sent as they are.

        Returns:
            Reply: The 226 transfer complete reply

        Raises:
            RuntimeError: If the client isn't connected
            ProtocolError: If TYPE, PORT, STOR or the final reply goes wrong
            ValueError: If the control connection isn't IPv4
            OSError: If a socket fails along the way
        """
        self.require()
        if isinstance(content, str):
            content = io.StringIO(content)

        self.command("TYPE A", "200")

        # The address the server sees us on is the one it has to dial back
        local = str(ipv4(self.socket.getsockname()[0]))

        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            listener.bind((local, 0))
            listener.listen(1)
            listener.settimeout(self.timeout.data)
            port = listener.getsockname()[1]

            self.command(f"PORT {port_argument(local, port)}", "200")
            self.command(f"STOR {name}", "150")

            connection, peer = listener.accept()
        finally:
            close(listener)

        logger.debug("Data connection from %s:%s", peer[0], peer[1])
        try:
            connection.settimeout(self.timeout.data)
            size = self.send(connection, content)
        except BaseException:
            # A clean close would make the server store a truncated file
            abort(connection)
            self.settle()
            raise
        close(connection)

        reply = self.response("226")
        logger.info("Uploaded %s bytes to %s", size, name)
        self.fire("upload", name, size)
        return reply

    def send(self, connection: socket.socket, content: IO) -> int:
        """Copy the whole stream onto the data connection and return the byte count."""
        size = 0
        while True:
            block = content.read(chunk)
            if not block:
                break
            if isinstance(block, str):
                block = block.encode(self.encoding)
            connection.sendall(block)
            size += len(block)
        return size

    def fire(self, event: str, *args: Any) -> None:
        """Run a hook if there is one. Hook failures shouldn't break transfers."""
        hook = self.hooks.get(event)
        if hook is None:
            return
        try:
            hook(*args)
        except Exception as error:
            warnings.warn(f"{event.capitalize()} hook failed: {error}")
