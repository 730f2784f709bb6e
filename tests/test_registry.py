import threading
import time

import pytest

from core.exceptions import LobbyNotFound, LobbyAlreadyExists
from core.locks import KeyedLocks
from models import Lobby


def make_lobby(code, created_at=0.0):
    return Lobby(code=code, created_at=created_at)


def test_insert_lookup_remove(registry):
    lobby = make_lobby("12345")
    registry.insert("12345", lobby)

    assert registry.lookup("12345") is lobby
    assert "12345" in registry
    assert len(registry) == 1

    assert registry.remove("12345") is lobby
    assert "12345" not in registry
    assert registry.get("12345") is None


def test_insert_existing_code(registry):
    registry.insert("12345", make_lobby("12345"))

    with pytest.raises(LobbyAlreadyExists):
        registry.insert("12345", make_lobby("12345"))


def test_lookup_and_remove_unknown(registry):
    with pytest.raises(LobbyNotFound):
        registry.lookup("99999")
    with pytest.raises(LobbyNotFound):
        registry.remove("99999")


def test_snapshot_all_is_detached_from_mapping(registry):
    registry.insert("11111", make_lobby("11111"))
    registry.insert("22222", make_lobby("22222"))

    pairs = registry.snapshot_all()
    registry.remove("11111")

    assert sorted(code for code, _ in pairs) == ["11111", "22222"]


def test_keyed_locks_exclude_same_key():
    locks = KeyedLocks()
    inside = []
    overlaps = []

    def worker():
        with locks.hold("12345"):
            inside.append(1)
            if len(inside) > 1:
                overlaps.append(1)
            time.sleep(0.01)
            inside.pop()

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert overlaps == []
    assert len(locks) == 0


def test_keyed_locks_do_not_block_other_keys():
    locks = KeyedLocks()
    acquired = threading.Event()

    def other():
        with locks.hold("22222"):
            acquired.set()

    with locks.hold("11111"):
        t = threading.Thread(target=other)
        t.start()
        assert acquired.wait(1.0)
        t.join()


def test_keyed_locks_release_on_error():
    locks = KeyedLocks()

    with pytest.raises(RuntimeError):
        with locks.hold("12345"):
            raise RuntimeError("boom")

    with locks.hold("12345"):
        pass
    assert len(locks) == 0
