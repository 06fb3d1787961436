"""Unit tests for boardsync/game/roster.py"""

from boardsync.core.models import User
from boardsync.core.shared_types import Role
from boardsync.game.roster import Roster

ANN = User(name="ann", role=Role.WHITE)
BOB = User(name="bob", role=Role.BLACK)
EVE = User(name="eve", role=Role.SPECTATOR)


def test_upsert_appends_new_users() -> None:
    roster = Roster().upsert(ANN).upsert(BOB)
    assert roster.users == (ANN, BOB)
    assert len(roster) == 2


def test_upsert_same_name_replaces_role_in_place() -> None:
    roster = Roster((ANN, BOB, EVE))
    roster = roster.upsert(User(name="bob", role=Role.SPECTATOR))
    roster = roster.upsert(User(name="bob", role=Role.WHITE))

    assert [user.name for user in roster] == ["ann", "bob", "eve"]
    assert [user for user in roster if user.name == "bob"] == [User(name="bob", role=Role.WHITE)]


def test_upsert_identical_user_is_idempotent() -> None:
    roster = Roster((ANN,))
    assert roster.upsert(ANN) == roster


def test_remove_keeps_others_in_order() -> None:
    roster = Roster((ANN, BOB, EVE)).remove("bob")
    assert roster.users == (ANN, EVE)
    assert roster.get("bob") is None


def test_remove_unknown_name_is_noop() -> None:
    roster = Roster((ANN, BOB))
    assert roster.remove("zed") == roster


def test_roster_is_a_value() -> None:
    roster = Roster((ANN,))
    roster.upsert(BOB)
    assert roster.users == (ANN,)
    assert roster.get("ann") == ANN
