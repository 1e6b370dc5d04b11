import struct
from typing import Optional, Tuple
from mcsearch.errors import MalformedVarInt, IncompleteVarInt, OversizedPacket

VARINT_MAX_BYTES = 5
MAX_PACKET_SIZE = 4 * 1024 * 1024

HANDSHAKE_PACKET_ID = 0x00
STATUS_REQUEST_PACKET_ID = 0x00
NEXT_STATE_STATUS = 1

def write_varint(value: int) -> bytes:
    if value < -(1 << 31) or value > 0xFFFFFFFF:
        raise ValueError(f"VarInt out of range: {value}")
    value &= 0xFFFFFFFF
    out = b""
    while True:
        temp = value & 0b01111111
        value >>= 7
        if value != 0:
            out += struct.pack("B", temp | 0b10000000)
        else:
            out += struct.pack("B", temp)
            break
    return out

def read_varint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    num_read, result = 0, 0
    while True:
        if num_read >= VARINT_MAX_BYTES:
            raise MalformedVarInt(f"VarInt longer than {VARINT_MAX_BYTES} bytes")
        if offset + num_read >= len(data):
            raise IncompleteVarInt("VarInt truncated")
        byte = data[offset + num_read]
        result |= (byte & 0b01111111) << (7 * num_read)
        num_read += 1
        if (byte & 0b10000000) == 0:
            return result, num_read

def write_string(value: str) -> bytes:
    raw = value.encode("utf-8")
    return write_varint(len(raw)) + raw

def build_handshake(protocol_version: int, address: str, port: int) -> bytes:
    data = b""
    data += write_varint(HANDSHAKE_PACKET_ID)
    data += write_varint(protocol_version)
    data += write_string(address)
    data += struct.pack(">H", port)
    data += write_varint(NEXT_STATE_STATUS)
    return write_varint(len(data)) + data

def build_status_request() -> bytes:
    data = write_varint(STATUS_REQUEST_PACKET_ID)
    return write_varint(len(data)) + data


class PacketReassembler:
    """Collects socket chunks until one length-prefixed packet is complete.

    The leading VarInt is decoded as soon as it is terminated or five bytes
    are buffered. Bytes past the end of a finished packet stay buffered for
    the next call.
    """

    def __init__(self, max_packet_size: int = MAX_PACKET_SIZE):
        self.max_packet_size = max_packet_size
        self._buffer = bytearray()
        self._expected: Optional[int] = None

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def clear(self) -> None:
        self._buffer = bytearray()
        self._expected = None

    def feed(self, chunk: bytes) -> Optional[bytes]:
        if chunk:
            self._buffer += chunk
        if self._expected is None and not self._read_length():
            return None
        if len(self._buffer) < self._expected:
            return None
        packet = bytes(self._buffer[:self._expected])
        del self._buffer[:self._expected]
        self._expected = None
        return packet

    def _read_length(self) -> bool:
        try:
            length, consumed = read_varint(self._buffer)
        except IncompleteVarInt:
            return False
        if length > self.max_packet_size:
            raise OversizedPacket(
                f"declared packet length {length} exceeds limit of {self.max_packet_size} bytes")
        self._expected = length + consumed
        return True
