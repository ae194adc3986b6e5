# tinymud/config.py

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .game.errors import ConfigError

log = logging.getLogger(__name__)

VERSION = "2.0.0"


@dataclass
class Config:
    host: str = "0.0.0.0"
    port: int = 4000
    prompt: str = "> "
    initial_room: int = 1000
    max_password_attempts: int = 3
    # seconds between periodic messages
    message_interval: float = 60
    # longest wait for socket activity, in seconds
    tick: float = 0.5
    player_dir: str = "./players/"
    player_ext: str = ".player"
    messages_file: str = "./system/messages.txt"
    control_file: str = "./system/control.txt"
    rooms_file: str = "./rooms/rooms.txt"
    read_chunk: int = 1000
    write_chunk: int = 512
    # stop writing while the transport holds this much unsent data
    write_high_water: int = 65536
    # a peer sending this many bytes without a newline is disconnected
    max_input: int = 4096
    periodic_message: str = "You hear creepy noises ...\n"


def load_config(path: Optional[Path] = None, **overrides) -> Config:
    """
    Build a Config from the defaults, then the YAML file at `path` (if
    any), then keyword overrides that are not None.
    """
    values = {}

    if path is not None:
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Could not read config file {path}: {e}")
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse config file {path}: {e}")

        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        values.update(raw)

    values.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(Config)}
    config_args = {}
    for key, value in values.items():
        if key not in known:
            log.warning("Ignoring unknown config key %r", key)
            continue
        config_args[key] = value

    try:
        return Config(**config_args)
    except TypeError as e:
        raise ConfigError(str(e))
