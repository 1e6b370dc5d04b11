import asyncio
import logging
from enum import Enum
from mcsearch.errors import PingTimeout, ServerConnectionError
from mcsearch.protocol import (
    MAX_PACKET_SIZE, PacketReassembler, build_handshake, build_status_request,
)
from mcsearch.render import render_full
from mcsearch.status import parse_status

log = logging.getLogger(__name__)

DEFAULT_PROTOCOL_VERSION = 765
DEFAULT_TIMEOUT = 5.0
READ_CHUNK_SIZE = 4096


class SessionState(Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    HANDSHAKE_SENT = "handshake_sent"
    STATUS_REQUESTED = "status_requested"
    RECEIVING = "receiving"
    COMPLETE = "complete"
    FAILED = "failed"


class ProbeSession:
    """One status exchange with one server over one connection.

    ``run`` resolves once, with the rendered status text or a ``PingError``.
    The connection is closed on every exit path, including timeout and
    cancellation.
    """

    def __init__(self, host: str, port: int,
                 protocol_version: int = DEFAULT_PROTOCOL_VERSION,
                 timeout: float = DEFAULT_TIMEOUT,
                 max_packet_size: int = MAX_PACKET_SIZE):
        self.host = host
        self.port = port
        self.protocol_version = protocol_version
        self.timeout = timeout
        self.max_packet_size = max_packet_size
        self.state = SessionState.IDLE

    async def run(self) -> str:
        if self.state is not SessionState.IDLE:
            raise RuntimeError("ProbeSession can only be run once")
        try:
            return await asyncio.wait_for(self._exchange(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            self._set_state(SessionState.FAILED)
            raise PingTimeout(
                f"{self.host}:{self.port} did not answer within {self.timeout}s") from e
        except BaseException:
            self._set_state(SessionState.FAILED)
            raise

    async def _exchange(self) -> str:
        self._set_state(SessionState.CONNECTING)
        # bad hostnames fail IDNA encoding and bad ports overflow before any socket call
        try:
            reader, writer = await asyncio.open_connection(self.host, self.port)
        except (OSError, UnicodeError, OverflowError) as e:
            raise ServerConnectionError(
                f"cannot connect to {self.host}:{self.port}: {e}") from e
        reassembler = PacketReassembler(self.max_packet_size)
        try:
            try:
                writer.write(build_handshake(self.protocol_version, self.host, self.port))
                self._set_state(SessionState.HANDSHAKE_SENT)
                writer.write(build_status_request())
                await writer.drain()
            except OSError as e:
                raise ServerConnectionError(
                    f"failed to send request to {self.host}:{self.port}: {e}") from e
            self._set_state(SessionState.STATUS_REQUESTED)
            packet = await self._receive(reader, reassembler)
            text = render_full(parse_status(packet), self.host, self.port)
            self._set_state(SessionState.COMPLETE)
            return text
        finally:
            reassembler.clear()
            await self._close(writer)

    async def _receive(self, reader: asyncio.StreamReader,
                       reassembler: PacketReassembler) -> bytes:
        self._set_state(SessionState.RECEIVING)
        while True:
            try:
                chunk = await reader.read(READ_CHUNK_SIZE)
            except OSError as e:
                raise ServerConnectionError(
                    f"connection to {self.host}:{self.port} failed: {e}") from e
            if not chunk:
                raise ServerConnectionError(
                    f"{self.host}:{self.port} closed the connection after "
                    f"{reassembler.pending} bytes")
            packet = reassembler.feed(chunk)
            if packet is not None:
                return packet

    async def _close(self, writer: asyncio.StreamWriter) -> None:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            log.debug("error while closing %s:%s: %s", self.host, self.port, e)

    def _set_state(self, state: SessionState) -> None:
        log.debug("%s:%s %s -> %s", self.host, self.port, self.state.value, state.value)
        self.state = state


async def probe(host: str, port: int,
                protocol_version: int = DEFAULT_PROTOCOL_VERSION,
                timeout: float = DEFAULT_TIMEOUT) -> str:
    return await ProbeSession(host, port, protocol_version, timeout).run()
