class PingError(Exception):
    """Base class for every failure a status probe can report."""


class ServerConnectionError(PingError, ConnectionError):
    pass


class PingTimeout(PingError, TimeoutError):
    pass


class MalformedVarInt(PingError):
    pass


class IncompleteVarInt(MalformedVarInt):
    # not enough bytes yet; the reassembler waits for more
    pass


class OversizedPacket(PingError):
    pass


class NoJsonFound(PingError):
    pass


class InvalidJson(PingError, ValueError):
    pass
