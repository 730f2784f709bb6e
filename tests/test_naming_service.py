import pytest

import services.naming_service as naming_service
from services.naming_service import (
    generate_lobby_code,
    generate_participant_id,
    allocate_participant_id,
    sanitize_display_name
)
from core.exceptions import GenerationExhausted


def test_lobby_code_format():
    for _ in range(200):
        code = generate_lobby_code()
        assert len(code) == 5
        assert 10000 <= int(code) <= 99999


def test_participant_id_range():
    for _ in range(200):
        assert 100000 <= generate_participant_id() <= 999999


def test_allocate_skips_taken_ids(monkeypatch):
    ids = iter([111111, 222222, 333333])
    monkeypatch.setattr(naming_service, "generate_participant_id", lambda: next(ids))

    assert allocate_participant_id({111111, 222222}, max_attempts=5) == 333333


def test_allocate_gives_up(monkeypatch):
    monkeypatch.setattr(naming_service, "generate_participant_id", lambda: 111111)

    with pytest.raises(GenerationExhausted) as exc_info:
        allocate_participant_id({111111}, max_attempts=3)
    assert exc_info.value.attempts == 3


@pytest.mark.parametrize("raw, roster_size, expected", [
    ("Ann", 0, "Ann"),
    (" Ann ", 0, " Ann "),
    ("A" * 30, 0, "A" * 30),
    ("", 0, "Fox 1"),
    (None, 3, "Tiger 1"),
    ("   ", 11, "Eagle 2"),
])
def test_sanitize_display_name(raw, roster_size, expected):
    assert sanitize_display_name(raw, roster_size) == expected


def test_sanitize_display_name_truncates_only_when_limited():
    assert sanitize_display_name("A" * 30, 0, max_length=24) == "A" * 24
    assert sanitize_display_name("Ann", 0, max_length=24) == "Ann"
