import pytest

from tinymud.game.dispatch import process_input
from tinymud.game.models import ConnState, FlagSet, Player
from tinymud.game.states import CONFIRM_PROMPT, NAME_PROMPT, NEW_NAME_PROMPT, PASSWORD_PROMPT
from tinymud.mud.server import MudServer

from accessories import connect, play, take


def make_player(world, name="Alice", password="hunter2", room=1000, flags=()):
    world.store.save(Player(name, password, room, FlagSet(flags)))


def test_new_player_creation(world):
    bob = play(world, "Bob")
    session = connect(world)

    process_input(session, "new")
    assert take(session) == NEW_NAME_PROMPT
    process_input(session, "alice")
    assert take(session) == "Choose a password for Alice ... "
    process_input(session, "hunter2")
    assert take(session) == CONFIRM_PROMPT
    process_input(session, "hunter2")

    assert session.state is ConnState.PLAYING
    assert take(session) == (
        "Welcome, Alice\n\n"
        "Welcome, newcomer.\n"
        "Be nice.\n"
        "Room one.\n"
        "Exits: n\n"
        "You also see Bob.\n"
        "> "
    )
    assert take(bob) == "Player Alice has joined the game from 127.0.0.1.\n"

    # saved when the session goes away
    session.destroy()
    lines = (world.store.path_for("Alice")).read_text().split("\n")
    assert lines[:3] == ["hunter2", "1000", ""]


def test_existing_player_login(world):
    make_player(world, room=1001)
    session = connect(world)

    process_input(session, "ALICE")
    assert session.state is ConnState.AWAITING_PASSWORD
    assert take(session) == PASSWORD_PROMPT

    process_input(session, "hunter2")
    assert session.state is ConnState.PLAYING
    out = take(session)
    assert out.startswith("Welcome, Alice\n\nWelcome back.\nBe nice.\nRoom two.\n")
    assert session.room == 1001


def test_lockout_after_three_bad_passwords(world):
    make_player(world)
    session = connect(world)
    process_input(session, "Alice")
    take(session)

    process_input(session, "wrong")
    assert take(session) == "That password is incorrect.\n" + PASSWORD_PROMPT
    process_input(session, "")
    assert take(session) == "Password cannot be blank.\n" + PASSWORD_PROMPT
    process_input(session, "wrong again")

    assert session.state is ConnState.AWAITING_NAME
    assert take(session) == (
        "Too many attempts to guess the password!\n"
        "That password is incorrect.\n" + NAME_PROMPT
    )
    assert session.player.name == ""


def test_blocked_player_is_disconnected(world):
    make_player(world, flags=["blocked"])
    session = connect(world)
    process_input(session, "Alice")
    take(session)

    process_input(session, "hunter2")
    assert session.closing
    assert session.state is ConnState.AWAITING_PASSWORD
    assert take(session) == "You are not permitted to connect.\nGoodbye.\n"


def test_name_errors(world):
    play(world, "Alice")
    session = connect(world)

    process_input(session, "   ")
    assert take(session) == "Name cannot be blank.\n" + NAME_PROMPT
    process_input(session, "alice")
    assert take(session) == "Alice is already connected.\n" + NAME_PROMPT
    process_input(session, "b@d")
    assert take(session) == "That player name contains disallowed characters.\n" + NAME_PROMPT
    process_input(session, "Zed")
    assert take(session) == "That player does not exist, type 'new' to create a new one.\n" + NAME_PROMPT
    assert session.state is ConnState.AWAITING_NAME


def test_new_name_errors(world):
    make_player(world, name="Carol")
    play(world, "Alice")
    session = connect(world)
    process_input(session, "NEW")
    take(session)

    for name, error in [
        ("", "Name cannot be blank."),
        ("no!way", "That player name contains disallowed characters."),
        ("Admin", "That name is not permitted."),
        ("carol", "That player already exists, please choose another name."),
        ("alice", "That player already exists, please choose another name."),
    ]:
        process_input(session, name)
        assert take(session) == f"{error}\n{NEW_NAME_PROMPT}"
        assert session.state is ConnState.AWAITING_NEW_NAME


def test_confirm_mismatch_goes_back(world):
    session = connect(world)
    for line in ("new", "Dave", "one"):
        process_input(session, line)
    take(session)

    process_input(session, "two")
    assert session.state is ConnState.AWAITING_NEW_PASSWORD
    assert take(session) == "Password and confirmation do not agree.\nChoose a password for Dave ... "

    process_input(session, "")
    assert take(session) == "Password cannot be blank.\nChoose a password for Dave ... "


def test_name_taken_while_choosing_password(world):
    session = connect(world)
    for line in ("new", "Dave", "pw"):
        process_input(session, line)
    take(session)

    make_player(world, name="Dave")
    process_input(session, "pw")
    assert session.state is ConnState.AWAITING_NEW_NAME
    assert take(session) == "That player already exists, please choose another name.\n" + NEW_NAME_PROMPT


def test_only_one_login_per_name(world):
    make_player(world)
    first = connect(world)
    second = connect(world)
    process_input(first, "Alice")
    process_input(second, "Alice")

    process_input(first, "hunter2")
    assert first.is_playing

    take(second)
    process_input(second, "hunter2")
    assert second.state is ConnState.AWAITING_NAME
    assert take(second) == "Alice is already connected.\n" + NAME_PROMPT
    assert [s for s in world.sessions if s.is_playing] == [first]


def test_player_in_missing_room_starts_over(world):
    make_player(world, room=4242)
    session = connect(world)
    process_input(session, "Alice")
    process_input(session, "hunter2")
    assert session.room == 1000


@pytest.mark.parametrize("leaving", [b"quit\n", b""])
def test_leaving_player_keeps_name_until_saved(world, leaving):
    make_player(world)
    admin = play(world, "Admin", flags=["can_setflag"])
    alice = connect(world)
    alice.on_readable(b"Alice\nhunter2\n")
    process_input(admin, "setflag alice can_goto")

    alice.on_readable(leaving)
    again = connect(world)
    again.on_readable(b"Alice\nhunter2\n")

    assert again.state is ConnState.AWAITING_NAME
    assert "Alice is already connected.\n" in take(again)
    in_game = [s for s in world.sessions if s.state is ConnState.PLAYING and s.player.name == "Alice"]
    assert in_game == [alice]

    MudServer(world).remove_inactive()
    again.on_readable(b"Alice\nhunter2\n")
    assert again.state is ConnState.PLAYING
    assert again.player.has_flag("can_goto")


def test_no_room_to_enter_the_game(world):
    del world.rooms[1000]
    session = connect(world)
    for line in ("new", "Dave", "pw"):
        process_input(session, line)
    take(session)

    process_input(session, "pw")
    assert session.state is ConnState.CONFIRM_PASSWORD
    assert take(session) == "Room number 1000 does not exist.\n" + CONFIRM_PROMPT


def test_missing_room_is_not_a_bad_password(world):
    make_player(world)
    del world.rooms[1000]
    session = connect(world)
    process_input(session, "Alice")
    take(session)

    for _ in range(3):
        process_input(session, "hunter2")
        assert take(session) == "Room number 1000 does not exist.\n" + PASSWORD_PROMPT
    assert session.state is ConnState.AWAITING_PASSWORD
    assert session.bad_password_count == 0


def test_unreadable_player_file(world):
    world.store.player_dir.mkdir(parents=True)
    world.store.path_for("Alice").write_bytes(b"\xff\xfe\xfa\n1000\n")
    session = connect(world)
    session.on_readable(b"Alice\n")
    assert session.state is ConnState.AWAITING_NAME
    assert take(session) == "That player does not exist, type 'new' to create a new one.\n" + NAME_PROMPT
