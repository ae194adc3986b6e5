# tinymud/game/actions.py
#
# Building blocks shared by the player and admin commands.

from .errors import InputError, PermissionDenied, PlayerError
from .parsing import Arguments
from .players import is_valid_name, to_capitals


def need_flag(session, flag: str) -> None:
    if not session.player.has_flag(flag):
        raise PermissionDenied()


def need_no_flag(session, flag: str) -> None:
    if session.player.has_flag(flag):
        raise PermissionDenied()


def get_message(args: Arguments, no_message_error: str) -> str:
    """The rest of the line, which must not be empty (say, tell)."""
    message = args.rest()
    if not message:
        raise InputError(no_message_error)
    return message


def get_flag(args: Arguments, no_flag_error: str) -> str:
    flag = args.word()
    if not flag:
        raise InputError(no_flag_error)
    if not is_valid_name(flag):
        raise InputError("Flag name not valid.")
    return flag


def get_player(session, args: Arguments, no_name_message: str = "Do that to who?", not_me: bool = False):
    """
    Resolve the next word to a playing session. 'me' and 'self' mean the
    caller.
    """
    name = args.word()
    if not name:
        raise InputError(no_name_message)

    if name.lower() in ("me", "self"):
        target = session
    else:
        target = session.world.find_playing(name)

    if target is None:
        raise PlayerError(f"Player {to_capitals(name)} is not connected.")
    if not_me and target is session:
        raise InputError("You cannot do that to yourself.")
    return target


def show_room(session) -> None:
    """Room description, exits, then whoever else is standing here."""
    world = session.world
    room = world.get_room(session.room)

    session.enqueue(room.description)

    if room.exits:
        session.enqueue("Exits: " + " ".join(room.exits) + "\n")

    others = [
        other.player.name
        for other in world.sessions_in_room(session.room)
        if other is not session
    ]
    if others:
        session.enqueue("You also see " + ", ".join(others) + ".\n")


def player_to_room(session, room_id: int, player_message: str, depart_message: str, arrive_message: str) -> None:
    """
    Move `session` to `room_id`, telling the old room, the player and the
    new room. Nothing changes if the room does not exist.
    """
    world = session.world
    world.get_room(room_id)

    world.send_to_all(depart_message, except_session=session, room=session.room)
    session.room = room_id
    session.enqueue(player_message)
    show_room(session)
    world.send_to_all(arrive_message, except_session=session, room=session.room)
