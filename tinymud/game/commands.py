# tinymud/game/commands.py

import logging
from typing import Callable, Dict

from .actions import get_message, get_player, need_no_flag, player_to_room, show_room
from .admincommands import ADMIN_COMMANDS
from .errors import InputError
from .models import ConnState
from .parsing import Arguments

log = logging.getLogger(__name__)

CommandHandler = Callable[[object, Arguments], None]

QUOTES = ('"', "'")

# Player Commands

def cmd_look(session, args: Arguments) -> None:
    """Describe the current room."""
    args.no_more()
    show_room(session)


def cmd_quit(session, args: Arguments) -> None:
    args.no_more()

    # only announce players who made it into the game
    if session.state is ConnState.PLAYING:
        name = session.player.name
        session.enqueue("See you next time!\n")
        log.info("Player %s has left the game.", name)
        session.world.send_to_all(f"Player {name} has left the game.\n", except_session=session)

    session.close()


def cmd_say(session, args: Arguments) -> None:
    """Speak to everyone in the same room."""
    need_no_flag(session, "gagged")
    what = get_message(args, "Say what?")

    session.enqueue(f'You say, "{what}"\n')
    session.world.send_to_all(
        f'{session.player.name} says, "{what}"\n',
        except_session=session,
        room=session.room,
    )


def cmd_tell(session, args: Arguments) -> None:
    """tell <who> <message>"""
    need_no_flag(session, "gagged")
    target = get_player(session, args, "Tell whom?", not_me=True)
    what = get_message(args, f"Tell {target.player.name} what?")

    session.enqueue(f'You tell {target.player.name}, "{what}"\n')
    target.enqueue(f'{session.player.name} tells you, "{what}"\n')


def cmd_help(session, args: Arguments) -> None:
    args.no_more()
    session.enqueue(session.world.messages["help"])

# End Player Commands


def do_direction(session, direction: str) -> None:
    """Walk through the exit called `direction`, if there is one."""
    room = session.world.get_room(session.room)
    dest = room.exits.get(direction)
    if dest is None:
        raise InputError("You cannot go that way.")

    name = session.player.name
    player_to_room(
        session,
        dest,
        f"You go {direction}\n",
        f"{name} goes {direction}\n",
        f"{name} enters.\n",
    )


# Command dispatch table
BASE_COMMANDS: Dict[str, CommandHandler] = {
    "look": cmd_look,
    "l": cmd_look,
    "quit": cmd_quit,
    "say": cmd_say,
    '"': cmd_say,
    "'": cmd_say,
    "tell": cmd_tell,
    "help": cmd_help,
}
COMMANDS: Dict[str, CommandHandler] = {
    **BASE_COMMANDS,
    **ADMIN_COMMANDS,
}


def process_command(session, args: Arguments) -> None:
    """
    Handle one line from a playing session: a direction moves, anything
    else is looked up in COMMANDS.
    """
    text = args.peek_rest()

    # "hello and 'hello are both say, with or without a space
    if text[:1] in QUOTES:
        verb = text[0]
        args = Arguments(text[1:])
    else:
        verb = args.word().lower()

    if not verb:
        return

    if session.world.control.is_direction(verb):
        do_direction(session, verb)
        return

    handler = COMMANDS.get(verb)
    if handler is None:
        raise InputError("Huh?")

    handler(session, args)


def do_command(session, command: str) -> None:
    """Run `command` as if the player had typed it (no prompt)."""
    process_command(session, Arguments(command))
