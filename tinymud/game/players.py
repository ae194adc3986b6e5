# tinymud/game/players.py

import logging
import re
from pathlib import Path

from .errors import PlayerError
from .models import FlagSet, Player

log = logging.getLogger(__name__)

VALID_NAME = re.compile(r"^[A-Za-z0-9_-]+$")


def is_valid_name(name: str) -> bool:
    """Names (and flags) may only use letters, digits, '_' and '-'."""
    return bool(VALID_NAME.match(name))


def to_capitals(name: str) -> str:
    """
    'aLiCe' -> 'Alice', 'big-bob' -> 'Big-Bob': every run of letters and
    digits starts with a capital, the rest is lower case.
    """
    out = []
    upper = True
    for ch in name:
        out.append(ch.upper() if upper else ch.lower())
        upper = not ch.isalnum()
    return "".join(out)


class PlayerStore:
    """
    One file per player: `<dir>/<Name><ext>` holding the password, the room
    number and the flags, one per line.
    """

    def __init__(self, player_dir, ext: str = ".player"):
        self.player_dir = Path(player_dir)
        self.ext = ext

    def path_for(self, name: str) -> Path:
        return self.player_dir / f"{to_capitals(name)}{self.ext}"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def load(self, name: str, default_room: int) -> Player:
        path = self.path_for(name)
        try:
            with path.open("r", encoding="utf-8") as f:
                lines = f.read().splitlines()
        except FileNotFoundError:
            raise PlayerError("That player does not exist, type 'new' to create a new one.")
        except (OSError, UnicodeDecodeError) as e:
            log.error("Could not read file for player %s: %s", name, e)
            raise PlayerError("That player does not exist, type 'new' to create a new one.")

        lines += [""] * (3 - len(lines))
        password_words = lines[0].split()
        room_words = lines[1].split()

        room = default_room
        if room_words:
            try:
                room = int(room_words[0])
            except ValueError:
                log.warning("Bad room number %r in %s", room_words[0], path)

        return Player(
            name=to_capitals(name),
            password=password_words[0] if password_words else "",
            room=room,
            flags=FlagSet(self._valid_flags(lines[2].split(), path)),
        )

    @staticmethod
    def _valid_flags(words, path):
        for flag in words:
            if is_valid_name(flag):
                yield flag
            else:
                log.warning("Skipping bad flag %r in %s", flag, path)

    def save(self, player: Player) -> bool:
        path = self.path_for(player.name)
        flags = " ".join(sorted(player.flags, key=str.lower))
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                f.write(f"{player.password}\n{player.room}\n{flags}\n")
        except OSError as e:
            log.error("Could not write to file for player %s: %s", player.name, e)
            return False
        return True
