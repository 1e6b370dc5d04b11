import json
from typing import Any, List, NamedTuple, Optional, Tuple, Union
from mcsearch.errors import NoJsonFound, InvalidJson


class PlayerSample(NamedTuple):
    name: str
    id: str


class Players(NamedTuple):
    online: int
    max: int
    sample: Optional[List[PlayerSample]] = None


class TextDescription(NamedTuple):
    text: str


class Segment(NamedTuple):
    text: str
    extra: Tuple["Segment", ...] = ()


class ComponentDescription(NamedTuple):
    component: Segment


Description = Union[TextDescription, ComponentDescription]


class StatusResponse(NamedTuple):
    players: Players
    description: Description
    version_name: Optional[str] = None
    protocol: Optional[int] = None


def parse_status(packet: bytes) -> StatusResponse:
    """Decode the JSON document carried by a status response packet.

    The JSON text is found by scanning for the first ``{`` rather than by
    trusting the string length prefix in front of it.
    """
    start = packet.find(b"{")
    if start == -1:
        raise NoJsonFound("no JSON object in status response")
    try:
        obj = json.loads(packet[start:].decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise InvalidJson(f"status response is not valid JSON: {e}") from e
    if not isinstance(obj, dict):
        raise InvalidJson("status response JSON is not an object")
    version = obj.get("version")
    if not isinstance(version, dict):
        version = {}
    protocol = version.get("protocol")
    return StatusResponse(
        players=_parse_players(obj.get("players")),
        description=_parse_description(obj.get("description")),
        version_name=version.get("name"),
        protocol=protocol if isinstance(protocol, int) else None,
    )

def _parse_players(raw: Any) -> Players:
    if not isinstance(raw, dict):
        raise InvalidJson("status response has no players object")
    online, mx = raw.get("online"), raw.get("max")
    if not isinstance(online, int) or not isinstance(mx, int):
        raise InvalidJson("players.online and players.max must be integers")
    sample = raw.get("sample")
    if sample is None:
        return Players(online, mx)
    if not isinstance(sample, list):
        raise InvalidJson("players.sample must be a list")
    players = []
    for entry in sample:
        if not isinstance(entry, dict):
            raise InvalidJson("players.sample entries must be objects")
        players.append(PlayerSample(str(entry.get("name", "")), str(entry.get("id", ""))))
    return Players(online, mx, players)

def _parse_description(raw: Any) -> Description:
    if raw is None:
        return TextDescription("")
    if isinstance(raw, str):
        return TextDescription(raw)
    if isinstance(raw, (dict, list)):
        return ComponentDescription(_parse_segment(raw))
    raise InvalidJson(f"unsupported description type: {type(raw).__name__}")

def _parse_segment(raw: Any) -> Segment:
    # a component is a string, a list of components, or an object with "text" and "extra"
    if isinstance(raw, str):
        return Segment(raw)
    if isinstance(raw, list):
        return Segment("", tuple(_parse_segment(c) for c in raw))
    if isinstance(raw, dict):
        text = raw.get("text", "")
        extra = raw.get("extra") or []
        if not isinstance(extra, list):
            raise InvalidJson("description extra must be a list")
        return Segment(text if isinstance(text, str) else str(text),
                       tuple(_parse_segment(c) for c in extra))
    if isinstance(raw, (int, float)):
        return Segment(str(raw))
    raise InvalidJson(f"unsupported description component: {type(raw).__name__}")
