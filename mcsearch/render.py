import re
from mcsearch.status import (
    ComponentDescription, Description, Players, Segment, StatusResponse, TextDescription,
)

FORMAT_CODE_RE = re.compile(r"§[0-9a-fk-or]", re.IGNORECASE)

MOTD_LABEL = "Motd:"
ADDRESS_LABEL = "地址:"

def strip_formatting_codes(text: str) -> str:
    return FORMAT_CODE_RE.sub("", text)

def flatten_component(segment: Segment) -> str:
    """Concatenate the text of a chat component and its children in order."""
    return segment.text + "".join(flatten_component(child) for child in segment.extra)

def render_description(description: Description) -> str:
    if isinstance(description, TextDescription):
        return strip_formatting_codes(description.text)
    if isinstance(description, ComponentDescription):
        return strip_formatting_codes(flatten_component(description.component))
    raise TypeError(f"unknown description variant: {type(description).__name__}")

def render_players(players: Players) -> str:
    result = f"{players.online}/{players.max}"
    if players.online != 0 and players.sample is not None:
        result += "\n"
        for index, player in enumerate(players.sample):
            result += f"{index + 1}.{strip_formatting_codes(player.name)}\n"
    return result

def render_full(status: StatusResponse, host: str, port: int) -> str:
    return (f"({render_players(status.players)})\n"
            f"{MOTD_LABEL}{render_description(status.description)}\n"
            f"{ADDRESS_LABEL}{host}:{port}")
