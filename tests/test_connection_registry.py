from __future__ import annotations

import pytest

from tools.errors import HandleAlreadyBoundError, IdentityTakenError
from use_cases.session_registry import ConnectionRegistry


def test_register_creates_both_directions():
    registry = ConnectionRegistry()
    registry.register("sid-1", "alice")

    assert registry.handle_for("alice") == "sid-1"
    assert registry.identity_for("sid-1") == "alice"
    assert registry.is_online("alice")
    assert len(registry) == 1


def test_identity_taken_keeps_first_binding():
    registry = ConnectionRegistry()
    registry.register("sid-1", "alice")

    with pytest.raises(IdentityTakenError):
        registry.register("sid-2", "alice")

    assert registry.handle_for("alice") == "sid-1"
    assert registry.identity_for("sid-2") is None


def test_reregister_same_pair_is_idempotent():
    registry = ConnectionRegistry()
    registry.register("sid-1", "alice")
    registry.register("sid-1", "alice")

    assert registry.identities() == ["alice"]


def test_handle_cannot_carry_two_identities():
    registry = ConnectionRegistry()
    registry.register("sid-1", "alice")

    with pytest.raises(HandleAlreadyBoundError):
        registry.register("sid-1", "bob")

    assert registry.handle_for("bob") is None
    assert registry.identity_for("sid-1") == "alice"


def test_unregister_returns_identity_and_frees_it():
    registry = ConnectionRegistry()
    registry.register("sid-1", "alice")

    assert registry.unregister("sid-1") == "alice"
    assert registry.unregister("sid-1") is None
    assert registry.handle_for("alice") is None

    registry.register("sid-2", "alice")
    assert registry.handle_for("alice") == "sid-2"


def test_detach_removes_connection_from_fanout_set():
    registry = ConnectionRegistry()
    registry.attach("sid-anon")
    registry.attach("sid-1")
    registry.register("sid-1", "alice")

    assert sorted(registry.connections()) == ["sid-1", "sid-anon"]
    assert registry.detach("sid-1") == "alice"
    assert registry.detach("sid-anon") is None
    assert registry.connections() == []
