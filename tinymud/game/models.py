# tinymud/game/models.py

from collections.abc import MutableSet
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional

from .errors import WorldError


class ConnState(Enum):
    AWAITING_NAME = "AwaitingName"
    AWAITING_PASSWORD = "AwaitingPassword"
    AWAITING_NEW_NAME = "AwaitingNewName"
    AWAITING_NEW_PASSWORD = "AwaitingNewPassword"
    CONFIRM_PASSWORD = "ConfirmPassword"
    PLAYING = "Playing"


class FlagSet(MutableSet):
    """
    Set of flag names with case-insensitive membership.
    The spelling used when a flag was first added is the one kept.
    """

    def __init__(self, flags: Iterable[str] = ()):
        self._flags: Dict[str, str] = {}
        for flag in flags:
            self.add(flag)

    def __contains__(self, flag) -> bool:
        return isinstance(flag, str) and flag.lower() in self._flags

    def __iter__(self) -> Iterator[str]:
        return iter(self._flags.values())

    def __len__(self) -> int:
        return len(self._flags)

    def __repr__(self) -> str:
        return f"FlagSet({sorted(self._flags.values(), key=str.lower)!r})"

    def add(self, flag: str) -> None:
        self._flags.setdefault(flag.lower(), flag)

    def discard(self, flag: str) -> None:
        self._flags.pop(flag.lower(), None)


@dataclass
class Room:
    id: int
    description: str
    exits: Dict[str, int] = field(default_factory=dict)


@dataclass
class Player:
    name: str
    password: str = ""
    room: int = 0
    flags: FlagSet = field(default_factory=FlagSet)

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags


class World:
    """
    Shared state every handler works against: the rooms, the canned
    messages, the control lists, player storage and the live sessions.

    The session list itself belongs to the server; the world only reads it.
    """

    def __init__(self, config, messages=None, control=None, store=None):
        from .control import ControlRegistry
        from .messages import MessageCatalog
        from .players import PlayerStore

        self.config = config
        self.rooms: Dict[int, Room] = {}
        self.messages = messages if messages is not None else MessageCatalog()
        self.control = control if control is not None else ControlRegistry()
        self.store = store if store is not None else PlayerStore(
            config.player_dir, config.player_ext
        )
        # live connections, in connection order
        self.sessions: List[object] = []
        self.stop_requested: bool = False

    # ---- Rooms ----
    def add_room(self, room: Room) -> None:
        self.rooms[room.id] = room

    def get_room(self, room_id: int) -> Room:
        room = self.rooms.get(room_id)
        if room is None:
            raise WorldError(f"Room number {room_id} does not exist.")
        return room

    def has_room(self, room_id: int) -> bool:
        return room_id in self.rooms

    # ---- Sessions ----
    def find_playing(self, name: str) -> Optional[object]:
        key = name.lower()
        for session in self.sessions:
            if session.is_playing and session.player.name.lower() == key:
                return session
        return None

    def find_in_game(self, name: str) -> Optional[object]:
        """
        Any session that owns `name` in the game, including one that has
        quit or lost its connection but has not been reaped (and saved) yet.
        """
        key = name.lower()
        for session in self.sessions:
            if session.state is ConnState.PLAYING and session.player.name.lower() == key:
                return session
        return None

    def sessions_in_room(self, room_id: int) -> List[object]:
        return [s for s in self.sessions if s.is_playing and s.room == room_id]

    def send_to_all(self, message: str, except_session=None, room: Optional[int] = None) -> None:
        """
        Queue `message` for every playing session, optionally skipping one
        session and optionally only those standing in `room`.
        """
        for session in self.sessions:
            if not session.is_playing or session is except_session:
                continue
            if room is not None and session.room != room:
                continue
            session.enqueue(message)

    def request_shutdown(self) -> None:
        self.stop_requested = True
