"""Tests for the auth status broadcast."""

from unisearch.auth import AuthState


class TestAuthState:
    def test_initial_value(self):
        assert AuthState().get_current_auth_status() is False
        assert AuthState(authenticated=True).get_current_auth_status() is True

    def test_notifies_on_change(self):
        state = AuthState()
        seen = []
        state.subscribe(seen.append)
        state.set(True)
        state.set(False)
        assert seen == [True, False]

    def test_same_value_not_broadcast(self):
        state = AuthState(authenticated=True)
        seen = []
        state.subscribe(seen.append)
        state.set(True)
        assert seen == []

    def test_broadcasts_to_every_listener(self):
        state = AuthState()
        a, b = [], []
        state.subscribe(a.append)
        state.subscribe(b.append)
        state.set(True)
        assert a == [True]
        assert b == [True]

    def test_unsubscribe(self):
        state = AuthState()
        seen = []
        sub = state.subscribe(seen.append)
        sub.unsubscribe()
        state.set(True)
        assert seen == []
        assert state.listener_count == 0

    def test_unsubscribe_is_idempotent(self):
        state = AuthState()
        sub = state.subscribe(lambda v: None)
        sub.unsubscribe()
        sub.unsubscribe()
        assert not sub.active

    def test_unsubscribe_while_notifying(self):
        state = AuthState()
        seen = []
        sub = None

        def once(value):
            seen.append(value)
            sub.unsubscribe()

        sub = state.subscribe(once)
        state.set(True)
        state.set(False)
        assert seen == [True]

    def test_failing_listener_does_not_stop_others(self):
        state = AuthState()
        seen = []

        def broken(value):
            raise RuntimeError("listener bug")

        state.subscribe(broken)
        state.subscribe(seen.append)
        state.set(True)
        assert seen == [True]
        assert state.get_current_auth_status() is True
