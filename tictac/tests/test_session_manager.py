"""
Tests for session creation and the session store.
"""

import pytest

from ..engine_core.board import empty_board
from ..engine_core.state import GameStatus
from ..errors import Conflict, InvalidInput, NotFound
from ..players.validation import is_email_valid


class TestCreateSession:
    """Tests for SessionManager.create_session."""

    def test_create(self, session_manager, store, alice, bob):
        """A new session is stored with the creator on turn."""
        session = session_manager.create_session(alice, "bob@example.com")

        assert session.player1 == "alice"
        assert session.player2 == "bob"
        assert session.turn == "alice"
        assert session.board == empty_board()
        assert session.status is GameStatus.IN_PROGRESS
        assert store.get_by_id(session.session_id) == session

    def test_email_case_insensitive(self, session_manager, alice):
        """Opponent lookup ignores case and surrounding spaces."""
        session = session_manager.create_session(alice, "  BOB@Example.com ")
        assert session.player2 == "bob"

    @pytest.mark.parametrize("email", [None, "", "   "])
    def test_missing_email(self, session_manager, alice, email):
        """A missing email is invalid input."""
        with pytest.raises(InvalidInput, match="Enter a email"):
            session_manager.create_session(alice, email)

    @pytest.mark.parametrize("email", [
        "bob",
        "bob@",
        "@example.com",
        "bob @example.com",
        "bob@exa(mple.com",
        "bob@example..com",
        ".bob.@example.com",
        'b"ob@x.y',
    ])
    def test_malformed_email(self, session_manager, alice, email):
        """A malformed email is invalid input."""
        with pytest.raises(InvalidInput, match="valid email"):
            session_manager.create_session(alice, email)

    def test_self_play(self, session_manager, alice):
        """Challenging yourself is invalid input."""
        with pytest.raises(InvalidInput, match="other user"):
            session_manager.create_session(alice, "Alice@example.com")

    def test_unknown_opponent(self, session_manager, alice):
        """An unknown email is not found."""
        with pytest.raises(NotFound):
            session_manager.create_session(alice, "nobody@example.com")

    def test_duplicate_active_session(self, session_manager, alice, bob):
        """A pair may only have one game in progress, in either order."""
        session_manager.create_session(alice, "bob@example.com")

        with pytest.raises(Conflict):
            session_manager.create_session(alice, "bob@example.com")
        with pytest.raises(Conflict):
            session_manager.create_session(bob, "alice@example.com")

    def test_new_session_after_finish(self, session_manager, store, alice, bob):
        """Once the game is over the pair can play again."""
        first = session_manager.create_session(alice, "bob@example.com")
        finished = first._copy_with(status=GameStatus.DRAWN, version=1)
        store.update(finished, expected_version=0)

        second = session_manager.create_session(bob, "alice@example.com")
        assert second.session_id != first.session_id
        assert second.turn == "bob"

    def test_games_with_different_opponents(self, session_manager, alice):
        """A player may play several opponents at once."""
        session_manager.create_session(alice, "bob@example.com")
        session_manager.create_session(alice, "carol@example.com")


class TestInMemorySessionStore:
    """Tests for the in-memory store."""

    def test_find_all_sorted(self, session_manager, store, alice, bob):
        """Sessions are listed most recently updated first."""
        older = session_manager.create_session(alice, "bob@example.com")
        newer = session_manager.create_session(alice, "carol@example.com")

        listed = store.find_all_for_player("alice")
        assert [s.session_id for s in listed] == [newer.session_id, older.session_id]
        assert [s.session_id for s in store.find_all_for_player("bob")] == [older.session_id]

    def test_update_version_mismatch(self, session_manager, store, alice):
        """A write based on a stale version is refused."""
        session = session_manager.create_session(alice, "bob@example.com")
        store.update(session._copy_with(version=1), expected_version=0)

        with pytest.raises(Conflict):
            store.update(session._copy_with(version=1), expected_version=0)

    def test_update_missing(self, store, session_manager, alice):
        """Updating an unknown session is not found."""
        session = session_manager.create_session(alice, "bob@example.com")
        with pytest.raises(NotFound):
            store.update(session._copy_with(session_id="missing"), expected_version=0)


class TestEmailValidation:
    """Tests for is_email_valid."""

    @pytest.mark.parametrize("email", ["bob@example.com", "  Bob.Smith@example.com "])
    def test_valid(self, email):
        assert is_email_valid(email)

    @pytest.mark.parametrize("email", [None, "", "bob@exa(mple.com", "bob@example..com", 'b"ob@x.y'])
    def test_invalid(self, email):
        assert not is_email_valid(email)
