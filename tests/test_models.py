import pytest

from tinymud.game.errors import ErrorKind, InputError, WorldError
from tinymud.game.models import FlagSet
from tinymud.game.parsing import Arguments

from accessories import play, take


def test_flagset_is_case_insensitive():
    flags = FlagSet(["Can_Goto"])
    assert "can_goto" in flags
    assert "CAN_GOTO" in flags
    assert 42 not in flags


def test_flagset_keeps_first_spelling():
    flags = FlagSet()
    flags.add("Gagged")
    flags.add("gagged")
    assert list(flags) == ["Gagged"]
    flags.discard("GAGGED")
    assert len(flags) == 0


def test_missing_room_is_a_world_error(world):
    with pytest.raises(WorldError) as exc:
        world.get_room(5)
    assert str(exc.value) == "Room number 5 does not exist."
    assert exc.value.kind is ErrorKind.WORLD


def test_send_to_all_filters(world):
    alice = play(world, "Alice")
    bob = play(world, "Bob")
    carol = play(world, "Carol", room=1001)

    world.send_to_all("hi\n", except_session=alice, room=1000)
    assert take(alice) == ""
    assert take(bob) == "hi\n"
    assert take(carol) == ""

    world.send_to_all("all\n")
    assert [take(s) for s in (alice, bob, carol)] == ["all\n"] * 3


def test_send_to_all_skips_sessions_not_playing(world):
    alice = play(world, "Alice")
    alice.closing = True
    world.send_to_all("hi\n")
    assert take(alice) == ""


def test_find_playing_ignores_case(world):
    alice = play(world, "Alice")
    assert world.find_playing("aLIce") is alice
    assert world.find_playing("Bob") is None


def test_arguments_words_and_rest():
    args = Arguments("  tell  bob   hello there  ")
    assert args.word() == "tell"
    assert args.word() == "bob"
    assert args.rest() == "hello there"
    assert args.word() == ""


def test_arguments_integer_leaves_non_numbers():
    args = Arguments("north 12")
    assert args.integer() is None
    assert args.word() == "north"
    assert args.integer() == 12
    assert args.integer() is None


def test_arguments_no_more():
    Arguments("   ").no_more()
    with pytest.raises(InputError, match="Unexpected input: extra stuff"):
        Arguments("extra stuff").no_more()
