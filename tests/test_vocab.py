from __future__ import annotations

import dataclasses

import pytest

from conftest import build_store


def test_ids_are_positions():
    store = build_store([("a", -1.0), ("b", -2.0), ("c", -3.0)])
    assert store.token_to_id("a") == 0
    assert store.token_to_id("c") == 2
    assert store.score("b") == -2.0
    assert store.id_to_token(1) == "b"
    assert store.vocab_size == 3
    assert len(store) == 3
    assert "a" in store
    assert "z" not in store
    assert store.token_to_id("z") is None
    assert store.id_to_token(99) is None


def test_duplicate_base_token_keeps_first():
    store = build_store([("a", -1.0), ("a", -0.5), ("b", -2.0)])
    assert store.lookup("a") == (0, -1.0)
    assert store.token_to_id("b") == 2
    # The duplicate's position is still an assigned id.
    assert store.id_to_token(1) == "a"


def test_overlay_does_not_override_base():
    store = build_store([("▁hi", -1.0), ("▁h", -3.0)], added_tokens=[("▁hi", 50)])
    assert store.token_to_id("▁hi") == 0
    assert store.id_to_token(50) is None


def test_overlay_adds_new_tokens_with_gaps():
    store = build_store([("a", -1.0)], added_tokens=[("<pad>", 100), ("<mask>", 7)])
    assert store.lookup("<pad>") == (100, 0.0)
    assert store.id_to_token(100) == "<pad>"
    assert store.id_to_token(7) == "<mask>"
    assert store.vocab_size == 3


def test_overlay_first_wins_within_overlay():
    store = build_store([], added_tokens=[("x", 4), ("x", 9)])
    assert store.token_to_id("x") == 4
    assert store.id_to_token(9) is None


def test_overlay_id_collision_replaces_reverse_entry():
    store = build_store([("a", -1.0), ("b", -1.0)], added_tokens=[("<pad>", 1)])
    assert store.id_to_token(1) == "<pad>"
    assert store.token_to_id("b") == 1


def test_unk_and_eos():
    store = build_store([("a", -1.0)], eos_id=42, unk_id=0)
    assert store.unk_id == 0
    assert store.eos_id == 42
    assert store.id_to_token(42) is None


def test_store_is_read_only():
    store = build_store([("a", -1.0)])
    with pytest.raises(TypeError):
        store.token_table["b"] = (1, 0.0)
    with pytest.raises(TypeError):
        store.id_table[1] = "b"
    with pytest.raises(dataclasses.FrozenInstanceError):
        store.eos_id = 5


def test_max_token_len():
    assert build_store([("ab", 0.0), ("▁abcd", 0.0)]).max_token_len == 5
    assert build_store([]).max_token_len == 0
