"""Error taxonomy for the RCON client."""


class RconError(RuntimeError):
    """Base class for every failure raised by the RCON client."""


class RconConnectionError(RconError, ConnectionError):
    """Raised when the TCP connection cannot be established in time."""


class AuthenticationError(RconError):
    """Raised when the server answers with the bad-login sentinel."""


class StateError(RconError):
    """Raised when an operation is invoked in the wrong connection state."""


class PacketTooLargeError(RconError):
    """Raised before any I/O when an encoded request would exceed the wire ceiling."""


class ProtocolError(RconError):
    """Raised on a truncated or malformed response."""
