import warnings
from dataclasses import dataclass

Username = str
Password = str


@dataclass
class Basic:
    """
    Username and password login for an FTP server.

    FTP sends both in the clear over the control connection with the
    USER and PASS commands, so only use this on networks you trust.

    Attributes:
        user: Username sent with USER.
        password: Password sent with PASS.
    """

    user: Username
    password: Password

    def __post_init__(self) -> None:
        """
        Validate the credentials.

        Returns:
            None

        Raises:
            ValueError: If the username is empty, or either value contains
                        a line break that would split the command.
        """
        if not self.user.strip():
            raise ValueError("Username cannot be empty or whitespace")

        if any(char in value for value in (self.user, self.password) for char in "\r\n"):
            raise ValueError("Credentials cannot contain line breaks")

        if not self.password:
            warnings.warn(
                "Password is empty. "
                "Most servers will refuse the login unless it is anonymous.",
                UserWarning,
                stacklevel=3,
            )


@dataclass
class Guest:
    """
    Anonymous login for public FTP servers.

    By convention the user is "anonymous" and the password is an e-mail
    address the server can log, which is all a Guest carries.

    Attributes:
        email: Sent as the password. Servers rarely check it.
    """

    email: str = "anonymous@"

    def __post_init__(self) -> None:
        if any(char in self.email for char in "\r\n"):
            raise ValueError("Guest e-mail cannot contain line breaks")

    @property
    def user(self) -> Username:
        return "anonymous"

    @property
    def password(self) -> Password:
        return self.email
