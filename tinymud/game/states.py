# tinymud/game/states.py
#
# Connection states before (and including) play. Each handler gets the
# session and the line it typed.

import logging
from typing import Callable, Dict

from .commands import do_command, process_command
from .errors import ErrorKind, InputError, MudError, PermissionDenied, PlayerError
from .models import ConnState, Player
from .parsing import Arguments
from .players import is_valid_name, to_capitals

log = logging.getLogger(__name__)

StateHandler = Callable[[object, Arguments], None]

NAME_PROMPT = "Enter your name, or 'new' to create a new character ...  "
PASSWORD_PROMPT = "Enter your password ... "
NEW_NAME_PROMPT = "Please choose a name for your new character ... "
CONFIRM_PROMPT = "Re-enter password to confirm it ... "


def new_password_prompt(name: str) -> str:
    return f"Choose a password for {name} ... "


def enter_game(session, message: str) -> None:
    """The player is in: greet them, show the room and tell everyone else."""
    world = session.world
    player = session.player

    if not world.has_room(player.room):
        log.warning(
            "Player %s was in missing room %d, moving to room %d",
            player.name,
            player.room,
            world.config.initial_room,
        )
        player.room = world.config.initial_room

    # nowhere to put them
    world.get_room(player.room)

    session.state = ConnState.PLAYING
    session.prompt = world.config.prompt

    session.enqueue(f"Welcome, {player.name}\n\n")
    session.enqueue(message)
    session.enqueue(world.messages["motd"])

    do_command(session, "look")

    world.send_to_all(
        f"Player {player.name} has joined the game from {session.address}.\n",
        except_session=session,
    )
    log.info("Player %s has joined the game.", player.name)


def process_player_name(session, args: Arguments) -> None:
    world = session.world
    name = args.word()

    if not name:
        raise InputError("Name cannot be blank.")

    if name.lower() == "new":
        session.state = ConnState.AWAITING_NEW_NAME
        session.prompt = NEW_NAME_PROMPT
        return

    if world.find_in_game(name):
        raise PlayerError(f"{to_capitals(name)} is already connected.")

    if not is_valid_name(name):
        raise PlayerError("That player name contains disallowed characters.")

    session.player = world.store.load(name, world.config.initial_room)
    session.state = ConnState.AWAITING_PASSWORD
    session.prompt = PASSWORD_PROMPT
    session.bad_password_count = 0


def process_player_password(session, args: Arguments) -> None:
    world = session.world
    player = session.player

    # someone else may have logged in under this name meanwhile
    if world.find_in_game(player.name):
        session.reset()
        raise PlayerError(f"{player.name} is already connected.")

    try:
        password = args.word()

        if not password:
            raise InputError("Password cannot be blank.")

        if password != player.password:
            raise PlayerError("That password is incorrect.")

        if player.has_flag("blocked"):
            log.info("Blocked player %s refused", player.name)
            session.close()
            session.prompt = "Goodbye.\n"
            raise PermissionDenied("You are not permitted to connect.")

        enter_game(session, world.messages["existing_player"])

    except MudError as e:
        if session.closing or e.kind is ErrorKind.WORLD:
            raise
        session.bad_password_count += 1
        if session.bad_password_count >= world.config.max_password_attempts:
            log.info("Too many password attempts for %s from %s", player.name, session.address)
            session.enqueue("Too many attempts to guess the password!\n")
            session.reset()
        raise


def process_new_player_name(session, args: Arguments) -> None:
    world = session.world
    name = args.word()

    if not name:
        raise InputError("Name cannot be blank.")

    if not is_valid_name(name):
        raise PlayerError("That player name contains disallowed characters.")

    if world.control.is_bad_name(name):
        raise PlayerError("That name is not permitted.")

    # on disk, or playing without having been saved yet
    if world.store.exists(name) or world.find_in_game(name):
        raise PlayerError("That player already exists, please choose another name.")

    session.player = Player(name=to_capitals(name), room=world.config.initial_room)
    session.state = ConnState.AWAITING_NEW_PASSWORD
    session.prompt = new_password_prompt(session.player.name)
    session.bad_password_count = 0


def process_new_password(session, args: Arguments) -> None:
    password = args.word()

    if not password:
        raise InputError("Password cannot be blank.")

    session.player.password = password
    session.state = ConnState.CONFIRM_PASSWORD
    session.prompt = CONFIRM_PROMPT


def process_confirm_password(session, args: Arguments) -> None:
    world = session.world
    player = session.player
    password = args.word()

    if password != player.password:
        session.state = ConnState.AWAITING_NEW_PASSWORD
        session.prompt = new_password_prompt(player.name)
        raise InputError("Password and confirmation do not agree.")

    # the name may have been taken while we were choosing a password
    if world.store.exists(player.name) or world.find_in_game(player.name):
        session.state = ConnState.AWAITING_NEW_NAME
        session.prompt = NEW_NAME_PROMPT
        raise PlayerError("That player already exists, please choose another name.")

    enter_game(session, world.messages["new_player"])


STATE_HANDLERS: Dict[ConnState, StateHandler] = {
    ConnState.AWAITING_NAME: process_player_name,
    ConnState.AWAITING_PASSWORD: process_player_password,
    ConnState.AWAITING_NEW_NAME: process_new_player_name,
    ConnState.AWAITING_NEW_PASSWORD: process_new_password,
    ConnState.CONFIRM_PASSWORD: process_confirm_password,
    ConnState.PLAYING: process_command,
}
