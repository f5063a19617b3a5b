import pytest

from incubator.session_store import (
    MODE_BMC,
    MODE_DESIGN,
    SessionNotFound,
    SessionStore,
    Turn,
)


def test_create_starts_empty(store, clock):
    session = store.create("S1")
    assert session.mode == MODE_BMC
    assert session.progress == 0
    assert session.transcript == []
    assert session.created_at == clock.now


def test_create_overwrites_existing(store):
    store.create("S1")
    store.append_turn("S1", "user", "hello")
    store.advance("S1")

    session = store.create("S1")
    assert session.progress == 0
    assert store.transcript("S1") == []


def test_unknown_id_raises(store):
    with pytest.raises(SessionNotFound):
        store.get("missing")
    with pytest.raises(SessionNotFound):
        store.append_turn("missing", "user", "hi")
    with pytest.raises(SessionNotFound):
        store.advance("missing")


def test_append_preserves_order(store):
    store.create("S1")
    store.append_turn("S1", "assistant", "q1")
    store.append_turn("S1", "user", "a1")
    store.append_turn("S1", "assistant", "q2")

    assert store.transcript("S1") == [
        Turn("assistant", "q1"),
        Turn("user", "a1"),
        Turn("assistant", "q2"),
    ]


def test_append_rejects_unknown_role(store):
    store.create("S1")
    with pytest.raises(ValueError):
        store.append_turn("S1", "system", "nope")


def test_transcript_is_a_copy(store):
    store.create("S1")
    store.append_turn("S1", "user", "hi")
    snapshot = store.transcript("S1")
    snapshot.append(Turn("user", "injected"))
    assert len(store.transcript("S1")) == 1


def test_advance_does_not_wrap(store):
    store.create("S1")
    for _ in range(10):
        progress = store.advance("S1")
    assert progress == 10


def test_get_or_create_keeps_existing_mode(store):
    store.create("S1", MODE_BMC)
    assert store.get_or_create("S1", MODE_DESIGN).mode == MODE_BMC
    assert store.get_or_create("S2", MODE_DESIGN).mode == MODE_DESIGN


def test_sweep_expired_uses_creation_time(clock):
    store = SessionStore(clock=clock)
    store.create("old")
    clock.tick(3 * 3600 - 10 * 60)
    store.create("fresh")
    clock.tick(10 * 60)

    removed = store.sweep_expired(2 * 3600)

    assert removed == 1
    with pytest.raises(SessionNotFound):
        store.get("old")
    assert store.get("fresh").id == "fresh"
    assert len(store) == 1


def test_activity_does_not_extend_ttl(store, clock):
    store.create("S1")
    clock.tick(3 * 3600)
    store.append_turn("S1", "user", "still here")
    assert store.sweep_expired(2 * 3600) == 1


def test_delete(store):
    store.create("S1")
    assert store.delete("S1") is True
    assert store.delete("S1") is False


def test_append_with_create_mode_recreates_missing_session(store):
    session = store.append_turn("S1", "user", "hi", create_mode=MODE_DESIGN)
    assert session.mode == MODE_DESIGN
    assert store.transcript("S1") == [Turn("user", "hi")]


def test_append_with_create_mode_keeps_existing_session(store):
    store.create("S1", MODE_BMC)
    store.append_turn("S1", "user", "a")
    session = store.append_turn("S1", "assistant", "b", create_mode=MODE_DESIGN)
    assert session.mode == MODE_BMC
    assert len(store.transcript("S1")) == 2
