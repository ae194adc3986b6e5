"""Pytest fixtures."""

import pytest

from tinymud.config import Config
from tinymud.game.control import ControlRegistry
from tinymud.game.messages import MessageCatalog
from tinymud.game.models import Room, World
from tinymud.game.players import PlayerStore


@pytest.fixture
def config(tmp_path):
    return Config(
        player_dir=str(tmp_path / "players"),
        messages_file=str(tmp_path / "messages.txt"),
        control_file=str(tmp_path / "control.txt"),
        rooms_file=str(tmp_path / "rooms.txt"),
    )


@pytest.fixture
def world(config):
    """Two rooms joined north/south, and a third with no exits."""
    messages = MessageCatalog(
        {
            "welcome": "Hello there.\n",
            "motd": "Be nice.\n",
            "new_player": "Welcome, newcomer.\n",
            "existing_player": "Welcome back.\n",
            "help": "No help for you.\n",
        }
    )
    control = ControlRegistry("n s e w u d".split(), ["new", "admin"], ["10.0.0.66"])
    w = World(config, messages=messages, control=control, store=PlayerStore(config.player_dir, config.player_ext))
    w.add_room(Room(1000, "Room one.\n", {"n": 1001}))
    w.add_room(Room(1001, "Room two.\n", {"s": 1000}))
    w.add_room(Room(1002, "A closet.\n", {}))
    return w
