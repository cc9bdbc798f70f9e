from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Optional

from .definition import LoadError, read_json


def _int_field(obj: Dict[str, object], key: str, default: Optional[int]) -> int:
    value = obj.get(key)
    if value is None:
        if default is None:
            raise LoadError(f"Invalid model config: missing '{key}'")
        return default
    if not isinstance(value, int) or isinstance(value, bool):
        raise LoadError(f"Invalid model config: '{key}' must be an integer")
    return value


@dataclass(frozen=True)
class MarianConfig:
    """Subset of a Marian ``config.json`` needed around the tokenizer."""

    decoder_start_token_id: int
    eos_token_id: int = 0
    pad_token_id: int = 0
    vocab_size: int = 65536
    max_length: int = 512

    @classmethod
    def from_dict(cls, obj: Dict[str, object]) -> "MarianConfig":
        decoder_start = _int_field(obj, "decoder_start_token_id", None)
        return cls(
            decoder_start_token_id=decoder_start,
            eos_token_id=_int_field(obj, "eos_token_id", 0),
            # Marian starts decoding from the pad token.
            pad_token_id=_int_field(obj, "pad_token_id", decoder_start),
            vocab_size=_int_field(obj, "vocab_size", 65536),
            max_length=_int_field(obj, "max_length", 512),
        )

    @classmethod
    def load(cls, path: str) -> "MarianConfig":
        obj = read_json(path)
        if not isinstance(obj, dict):
            raise LoadError(f"Invalid model config in {path}: expected a JSON object")
        return cls.from_dict(obj)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
