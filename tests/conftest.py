from __future__ import annotations

import json

import pytest

from unitok.definition import AddedToken, TokenizerDefinition
from unitok.tokenizer import UnigramTokenizer
from unitok.vocab import VocabularyStore


def build_store(vocab, eos_id=3, unk_id=0, added_tokens=()):
    definition = TokenizerDefinition(
        vocab=[(t, float(s)) for t, s in vocab],
        unk_id=unk_id,
        added_tokens=[AddedToken(content=c, id=i) for c, i in added_tokens],
    )
    return VocabularyStore.from_definition(definition, eos_id=eos_id)


def build_tokenizer(vocab, eos_id=3, unk_id=0, added_tokens=(), **kwargs):
    store = build_store(vocab, eos_id=eos_id, unk_id=unk_id, added_tokens=added_tokens)
    return UnigramTokenizer(store=store, **kwargs)


@pytest.fixture
def hi_tokenizer():
    # ids: "▁hi"=0, "▁h"=1, "i"=2; eos=3 is not in the vocabulary.
    return build_tokenizer([("▁hi", -1.0), ("▁h", -3.0), ("i", -3.0)], eos_id=3)


@pytest.fixture
def marian_tokenizer():
    vocab = [
        ("<unk>", 0.0),
        ("</s>", 0.0),
        ("<pad>", 0.0),
        ("▁hello", -2.0),
        ("▁world", -2.5),
        ("▁", -3.0),
        ("h", -4.0),
        ("e", -4.0),
        ("l", -4.0),
        ("o", -4.0),
        ("▁he", -3.5),
        ("llo", -3.5),
    ]
    return build_tokenizer(vocab, eos_id=1, unk_id=0)


@pytest.fixture
def write_json(tmp_path):
    def _write(name, obj):
        path = tmp_path / name
        path.write_text(json.dumps(obj, ensure_ascii=False), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def tokenizer_json():
    return {
        "version": "1.0",
        "added_tokens": [
            {"id": 0, "content": "</s>", "special": True},
            {"id": 1, "content": "<unk>", "special": True},
            {"id": 58100, "content": "<pad>", "special": True},
        ],
        "model": {
            "type": "Unigram",
            "unk_id": 1,
            "vocab": [
                ["</s>", 0.0],
                ["<unk>", 0.0],
                ["▁hello", -2.0],
                ["▁world", -2.5],
                ["▁", -3.0],
            ],
        },
    }
