from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field
from typing import List, Tuple

logger = logging.getLogger(__name__)


class LoadError(RuntimeError):
    """Raised when a tokenizer or model definition cannot be loaded."""


@dataclass(frozen=True)
class AddedToken:
    content: str
    id: int


@dataclass(frozen=True)
class TokenizerDefinition:
    """Parsed contents of a ``tokenizer.json`` file.

    Holds plain lists only; the vocabulary id of each entry is its position
    in ``vocab``.
    """

    vocab: List[Tuple[str, float]]
    unk_id: int = 0
    added_tokens: List[AddedToken] = field(default_factory=list)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def read_json(path: str) -> object:
    if not os.path.exists(path):
        raise LoadError(f"{path} not found")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(f"Unable to read {path}") from exc
    except (ValueError, RecursionError) as exc:
        # JSONDecodeError, the int digit limit and overly deep nesting.
        raise LoadError(f"{path} is not valid JSON: {exc}") from exc


def parse_definition(obj: object) -> TokenizerDefinition:
    if not isinstance(obj, dict):
        raise LoadError("Invalid tokenizer definition: expected a JSON object at top level")
    model = obj.get("model")
    if not isinstance(model, dict):
        raise LoadError("Invalid tokenizer definition: expected object under 'model'")

    vocab_raw = model.get("vocab")
    if not isinstance(vocab_raw, list):
        raise LoadError("Invalid tokenizer definition: expected list under 'model.vocab'")

    vocab: List[Tuple[str, float]] = []
    for pos, item in enumerate(vocab_raw):
        if not isinstance(item, list) or len(item) != 2:
            raise LoadError(f"Invalid vocab entry at position {pos}: expected [token, score]")
        token, score = item
        if not isinstance(token, str):
            raise LoadError(f"Invalid vocab entry at position {pos}: token must be a string")
        if not _is_number(score):
            raise LoadError(f"Invalid vocab entry at position {pos}: score must be a number")
        try:
            score = float(score)
        except OverflowError as exc:
            raise LoadError(f"Invalid vocab entry at position {pos}: score out of range") from exc
        if not math.isfinite(score):
            raise LoadError(f"Invalid vocab entry at position {pos}: score must be a finite number")
        vocab.append((token, score))

    # HuggingFace exports write null for an unset unk_id.
    unk_id = model.get("unk_id")
    if unk_id is None:
        unk_id = 0
    if not _is_int(unk_id) or unk_id < 0:
        raise LoadError("Invalid tokenizer definition: 'model.unk_id' must be a non-negative integer")

    added_raw = obj.get("added_tokens")
    if added_raw is None:
        added_raw = []
    if not isinstance(added_raw, list):
        raise LoadError("Invalid tokenizer definition: expected list under 'added_tokens'")

    added: List[AddedToken] = []
    for pos, item in enumerate(added_raw):
        if not isinstance(item, dict):
            raise LoadError(f"Invalid added token at position {pos}: expected an object")
        content = item.get("content")
        token_id = item.get("id")
        if not isinstance(content, str):
            raise LoadError(f"Invalid added token at position {pos}: 'content' must be a string")
        if not _is_int(token_id) or token_id < 0:
            raise LoadError(f"Invalid added token at position {pos}: 'id' must be a non-negative integer")
        added.append(AddedToken(content=content, id=token_id))

    return TokenizerDefinition(vocab=vocab, unk_id=unk_id, added_tokens=added)


def read_definition(path: str) -> TokenizerDefinition:
    """Read and validate a ``tokenizer.json`` file.

    Raises LoadError if the file is missing, unreadable, or not shaped like
    a unigram tokenizer definition.
    """
    definition = parse_definition(read_json(path))
    logger.debug(
        "Read tokenizer definition from %s: %d vocab entries, %d added tokens",
        path,
        len(definition.vocab),
        len(definition.added_tokens),
    )
    return definition
