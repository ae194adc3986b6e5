# tinymud/game/world.py

import logging
from pathlib import Path
from typing import Dict, Iterator, Optional

from .control import ControlRegistry, load_control
from .messages import expand_newlines, load_messages
from .models import Room, World
from .players import PlayerStore

log = logging.getLogger(__name__)


def _leading_int(line: Optional[str]) -> int:
    """First whitespace-delimited token as an integer, or 0."""
    if not line:
        return 0
    parts = line.split(None, 1)
    if not parts:
        return 0
    try:
        return int(parts[0])
    except ValueError:
        return 0


def _parse_exits(line: str, room_id: int, control: ControlRegistry) -> Dict[str, int]:
    """
    Exits are `<dir> <room> <dir> <room> ...`, e.g. `n 1001 s 1002`.
    """
    exits: Dict[str, int] = {}
    tokens = line.split()
    for i in range(0, len(tokens), 2):
        direction = tokens[i].lower()
        if i + 1 >= len(tokens):
            log.warning("Bad room number for exit %s for room %d", direction, room_id)
            break
        try:
            dest = int(tokens[i + 1])
        except ValueError:
            log.warning("Bad room number for exit %s for room %d", direction, room_id)
            continue

        if not control.is_direction(direction):
            log.warning(
                "Direction %s for room %d not in list of directions in control file",
                direction,
                room_id,
            )
            continue

        if dest <= 0:
            break

        exits[direction] = dest
    return exits


def load_rooms(world: World, path) -> None:
    """
    Read room records into `world`. Each record is three lines: the room
    number, the description and the exits. Reading stops at the first
    record without a number or description.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            lines: Iterator[str] = iter(f.read().splitlines())
    except (OSError, UnicodeDecodeError) as e:
        log.error("Could not open rooms file %s: %s", path, e)
        return

    while True:
        room_id = _leading_int(next(lines, None))
        description = next(lines, "").rstrip()
        if room_id <= 0 or not description.strip():
            break
        exit_line = next(lines, "")

        if world.has_room(room_id):
            log.warning("Room %d appears more than once in room file", room_id)
            continue

        world.add_room(
            Room(
                id=room_id,
                description=expand_newlines(description) + "\n",
                exits=_parse_exits(exit_line, room_id, world.control),
            )
        )

    for room in world.rooms.values():
        for direction, dest in room.exits.items():
            if not world.has_room(dest):
                log.warning(
                    "Exit %s from room %d leads to missing room %d",
                    direction,
                    room.id,
                    dest,
                )

    log.info("Loaded %d rooms", len(world.rooms))


def load_world(config) -> World:
    """
    Load everything the game reads at startup (control file first, since
    the rooms need the direction list).
    """
    control = load_control(config.control_file)
    messages = load_messages(config.messages_file)
    store = PlayerStore(config.player_dir, config.player_ext)

    world = World(config, messages=messages, control=control, store=store)
    load_rooms(world, config.rooms_file)
    if not world.has_room(config.initial_room):
        log.error("Initial room %d does not exist, nobody will be able to play", config.initial_room)
    return world
