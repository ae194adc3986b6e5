# tinymud/game/control.py

import logging
from pathlib import Path
from typing import Iterable, Set

log = logging.getLogger(__name__)


class ControlRegistry:
    """Directions, forbidden names and blocked addresses from the control file."""

    def __init__(
        self,
        directions: Iterable[str] = (),
        bad_names: Iterable[str] = (),
        blocked_ips: Iterable[str] = (),
    ):
        self.directions: Set[str] = {d.lower() for d in directions}
        self.bad_names: Set[str] = {n.lower() for n in bad_names}
        self.blocked_ips: Set[str] = set(blocked_ips)

    def is_direction(self, word: str) -> bool:
        return word.lower() in self.directions

    def is_bad_name(self, name: str) -> bool:
        return name.lower() in self.bad_names

    def is_blocked(self, address: str) -> bool:
        return address in self.blocked_ips


def load_control(path) -> ControlRegistry:
    """
    Read the control file: line 1 directions, line 2 names new players may
    not take, line 3 IP addresses refused at connect time.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        log.error("Could not open control file %s: %s", path, e)
        return ControlRegistry()

    lines += [""] * (3 - len(lines))
    registry = ControlRegistry(lines[0].split(), lines[1].split(), lines[2].split())
    log.info(
        "Loaded %d directions, %d forbidden names, %d blocked addresses",
        len(registry.directions),
        len(registry.bad_names),
        len(registry.blocked_ips),
    )
    return registry
