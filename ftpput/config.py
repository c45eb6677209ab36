import warnings
from dataclasses import dataclass
from typing import Optional


@dataclass
class Timeout:
    """
    Timeout configuration for the control and data connections.

    Every value is in seconds. None means the socket blocks forever,
    which is the default: a transfer takes as long as it takes, and
    callers who need a deadline opt into one here.

    Attributes:
        connect: Time to wait while opening the control connection.
                 Covers DNS resolution and the TCP handshake.
        read: Time to wait for each reply line on the control connection.
              A slow server that goes quiet past this raises socket.timeout.
        data: Time to wait for the server to dial back into our listener,
              and for each write on the data connection after that.
    """

    connect: Optional[float] = None  # Time to wait for the control connection
    read: Optional[float] = None  # Time to wait for a reply line
    data: Optional[float] = None  # Time to wait on the data connection

    def __post_init__(self) -> None:
        """
        Validate timeout configuration after initialization.

        Returns:
            None

        Raises:
            ValueError: If a timeout is set but isn't positive.
        """
        if self.connect is not None and self.connect <= 0:
            raise ValueError("Connect timeout must be positive")
        if self.read is not None and self.read <= 0:
            raise ValueError("Read timeout must be positive")
        if self.data is not None and self.data <= 0:
            raise ValueError("Data timeout must be positive")

        if self.connect is not None and self.connect < 1:
            warnings.warn(
                f"Connect timeout ({self.connect}s) is unusually short. "
                "Slow DNS or a busy server may fail to answer in time.",
                UserWarning,
                stacklevel=3,
            )
