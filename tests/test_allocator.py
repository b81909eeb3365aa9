"""Tests for code and upload id allocation."""

import random
from unittest.mock import Mock

import pytest

from dropserver import allocator
from dropserver.allocator import CodeAllocator, allocate_upload_id
from dropserver.exceptions import CodeSpaceExhaustedError
from dropserver.utils import CODE_PATTERN


def make_rng(*values):
    rng = Mock(spec=random.Random)
    rng.randrange.side_effect = list(values)
    return rng


def test_draw_is_zero_padded():
    code_allocator = CodeAllocator(lambda code: False, rng=make_rng(7))
    assert code_allocator.draw() == "0007"


def test_draw_uses_full_code_space():
    rng = make_rng(9999)
    code_allocator = CodeAllocator(lambda code: False, rng=rng)

    assert code_allocator.draw() == "9999"
    rng.randrange.assert_called_once_with(10000)


def test_allocate_skips_taken_codes():
    taken = {"0001", "0002"}
    code_allocator = CodeAllocator(lambda code: code in taken, rng=make_rng(1, 2, 3))

    assert code_allocator.allocate() == "0003"


def test_allocate_raises_after_all_attempts_collide():
    code_allocator = CodeAllocator(lambda code: True, attempts=4, rng=make_rng(*range(4)))

    with pytest.raises(CodeSpaceExhaustedError):
        code_allocator.allocate()


def test_allocate_default_attempts():
    exists = Mock(return_value=True)
    code_allocator = CodeAllocator(exists)

    with pytest.raises(CodeSpaceExhaustedError):
        code_allocator.allocate()
    assert exists.call_count == 10


def test_allocate_returns_valid_codes():
    code_allocator = CodeAllocator(lambda code: False)
    for _ in range(50):
        assert CODE_PATTERN.match(code_allocator.allocate())


def test_composite_code_format():
    code_allocator = CodeAllocator(lambda code: True, rng=make_rng(42))

    code = code_allocator.composite_code(1_700_000_000_000)

    assert code == "0042-1700000000000"
    assert CODE_PATTERN.match(code)


def test_allocate_upload_id_retries_on_collision(monkeypatch):
    ids = iter(["taken", "fresh"])
    monkeypatch.setattr(allocator, "generate_uuid", lambda: next(ids))

    assert allocate_upload_id(lambda upload_id: upload_id == "taken") == "fresh"


def test_allocate_upload_id_is_unique():
    seen = set()
    for _ in range(20):
        upload_id = allocate_upload_id(lambda upload_id: upload_id in seen)
        assert upload_id not in seen
        seen.add(upload_id)
