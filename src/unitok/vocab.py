from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from .definition import TokenizerDefinition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VocabularyStore:
    """Read-only token tables for a unigram vocabulary.

    ``token_table`` maps token text to ``(id, score)``; ``id_table`` maps every
    assigned id back to its text. Ids may have gaps when the added-token
    overlay assigns them explicitly. ``eos_id`` comes from the model config,
    not the tokenizer file, and need not appear in ``id_table``.
    """

    token_table: Mapping[str, Tuple[int, float]]
    id_table: Mapping[int, str]
    unk_id: int
    eos_id: int

    @classmethod
    def from_definition(cls, definition: TokenizerDefinition, eos_id: int) -> "VocabularyStore":
        token_table: Dict[str, Tuple[int, float]] = {}
        id_table: Dict[int, str] = {}

        # Position is the id; duplicate text keeps its first position.
        for token_id, (token, score) in enumerate(definition.vocab):
            if token not in token_table:
                token_table[token] = (token_id, score)
            id_table[token_id] = token

        # Overlay never replaces base entries with the same text.
        added = 0
        for at in definition.added_tokens:
            if at.content in token_table:
                continue
            token_table[at.content] = (at.id, 0.0)
            id_table[at.id] = at.content
            added += 1

        logger.debug(
            "Built vocabulary: %d tokens, %d ids, %d from added_tokens, unk_id=%d, eos_id=%d",
            len(token_table),
            len(id_table),
            added,
            definition.unk_id,
            eos_id,
        )
        return cls(
            token_table=MappingProxyType(token_table),
            id_table=MappingProxyType(id_table),
            unk_id=definition.unk_id,
            eos_id=eos_id,
        )

    @property
    def vocab_size(self) -> int:
        return len(self.id_table)

    @property
    def max_token_len(self) -> int:
        return max((len(t) for t in self.token_table), default=0)

    def lookup(self, token: str) -> Optional[Tuple[int, float]]:
        return self.token_table.get(token)

    def token_to_id(self, token: str) -> Optional[int]:
        entry = self.token_table.get(token)
        return entry[0] if entry is not None else None

    def id_to_token(self, token_id: int) -> Optional[str]:
        return self.id_table.get(token_id)

    def score(self, token: str) -> Optional[float]:
        entry = self.token_table.get(token)
        return entry[1] if entry is not None else None

    def __contains__(self, token: object) -> bool:
        return token in self.token_table

    def __len__(self) -> int:
        return len(self.token_table)
