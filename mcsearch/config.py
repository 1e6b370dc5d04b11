import os
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from mcsearch.raw_ping import DEFAULT_PROTOCOL_VERSION, DEFAULT_TIMEOUT

DEFAULT_PORT = 25565
DEFAULT_CONFIG_PATH = "config.json"


class ServerTarget(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    nickname: str
    ip: str
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)
    # discord guild id the result is cached under
    group: str


class Settings(BaseModel):
    discord_token: str = ""
    command_prefix: str = "!"
    interval: float = Field(10.0, gt=0)
    ping_timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    ping_workers: int = Field(100, ge=1)
    protocol_version: int = DEFAULT_PROTOCOL_VERSION
    targets: List[ServerTarget] = Field(default_factory=list)


def load_settings(path: Optional[str] = None) -> Settings:
    """Read settings from a JSON file; a missing file yields the defaults.

    ``MCSEARCH_CONFIG`` picks the file when no path is given and
    ``DISCORD_TOKEN`` overrides the stored token.
    """
    path = path or os.getenv("MCSEARCH_CONFIG", DEFAULT_CONFIG_PATH)
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            settings = Settings.model_validate_json(f.read())
    else:
        settings = Settings()
    token = os.getenv("DISCORD_TOKEN")
    if token:
        settings = settings.model_copy(update={"discord_token": token})
    return settings

def save_settings(settings: Settings, path: str = DEFAULT_CONFIG_PATH) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(settings.model_dump_json(indent=2))
