# tinymud/game/admincommands.py

import logging
from typing import Callable, Dict

from .actions import get_flag, get_player, need_flag, player_to_room
from .errors import InputError
from .parsing import Arguments

log = logging.getLogger(__name__)

CommandHandler = Callable[[object, Arguments], None]


def cmd_goto(session, args: Arguments) -> None:
    """goto <room>"""
    need_flag(session, "can_goto")

    room = args.integer()
    if room is None:
        raise InputError("Go to which room?")
    args.no_more()

    name = session.player.name
    player_to_room(
        session,
        room,
        f"You go to room {room}\n",
        f"{name} disappears in a puff of smoke!\n",
        f"{name} appears in a puff of smoke!\n",
    )


def cmd_transfer(session, args: Arguments) -> None:
    """transfer <who> [room], defaulting to the caller's room."""
    need_flag(session, "can_transfer")

    target = get_player(session, args, "Usage: transfer <who> [ where ] (default is here)", not_me=True)
    room = args.integer()
    if room is None:
        room = session.room
    args.no_more()

    session.world.get_room(room)

    tname = target.player.name
    session.enqueue(f"You transfer {tname} to room {room}\n")
    player_to_room(
        target,
        room,
        f"{session.player.name} transfers you to another room!\n",
        f"{tname} is yanked away by unseen forces!\n",
        f"{tname} appears breathlessly!\n",
    )


def cmd_setflag(session, args: Arguments) -> None:
    """setflag <who> <flag>"""
    need_flag(session, "can_setflag")

    target = get_player(session, args, "Usage: setflag <who> <flag>")
    flag = get_flag(args, "Set which flag?")
    args.no_more()

    if target.player.has_flag(flag):
        raise InputError("Flag already set.")

    target.player.flags.add(flag)
    session.enqueue(f"You set the flag '{flag}' for {target.player.name}\n")


def cmd_clearflag(session, args: Arguments) -> None:
    """clearflag <who> <flag>"""
    need_flag(session, "can_setflag")

    target = get_player(session, args, "Usage: clearflag <who> <flag>")
    flag = get_flag(args, "Clear which flag?")
    args.no_more()

    if not target.player.has_flag(flag):
        raise InputError("Flag not set.")

    target.player.flags.discard(flag)
    session.enqueue(f"You clear the flag '{flag}' for {target.player.name}\n")


def cmd_shutdown(session, args: Arguments) -> None:
    args.no_more()
    need_flag(session, "can_shutdown")

    session.world.send_to_all(f"{session.player.name} shuts down the game\n")
    log.info("Shutdown requested by %s", session.player.name)
    session.world.request_shutdown()


ADMIN_COMMANDS: Dict[str, CommandHandler] = {
    "goto": cmd_goto,
    "transfer": cmd_transfer,
    "setflag": cmd_setflag,
    "clearflag": cmd_clearflag,
    "shutdown": cmd_shutdown,
}
