from __future__ import annotations

import logging
import operator
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .definition import read_definition
from .viterbi import MAX_TOKEN_LEN, segment_ids, viterbi_segment
from .vocab import VocabularyStore

logger = logging.getLogger(__name__)

# Word-start marker ("preceded by whitespace"), U+2581.
METASPACE = "▁"


@dataclass(frozen=True)
class UnigramTokenizer:
    """Unigram (SentencePiece-style) tokenizer for Marian / Opus-MT models.

    Text is split on spaces, each word is prefixed with METASPACE and
    segmented independently with Viterbi search over the vocabulary scores.
    The store is read-only, so one instance can serve concurrent callers.
    """

    store: VocabularyStore
    max_token_len: int = MAX_TOKEN_LEN

    def __post_init__(self) -> None:
        if self.max_token_len < 1:
            raise ValueError("max_token_len must be >= 1")
        longest = self.store.max_token_len
        if longest > self.max_token_len:
            logger.warning(
                "Vocabulary has tokens of length %d but max_token_len=%d; longer tokens will never be matched",
                longest,
                self.max_token_len,
            )

    @classmethod
    def load(cls, path: str, eos_id: int, max_token_len: int = MAX_TOKEN_LEN) -> "UnigramTokenizer":
        """Load a HuggingFace ``tokenizer.json``. Raises LoadError on failure."""
        definition = read_definition(path)
        store = VocabularyStore.from_definition(definition, eos_id=eos_id)
        logger.debug("Loaded tokenizer from %s (%d ids)", path, store.vocab_size)
        return cls(store=store, max_token_len=max_token_len)

    @property
    def eos_id(self) -> int:
        return self.store.eos_id

    @property
    def unk_id(self) -> int:
        return self.store.unk_id

    @property
    def vocab_size(self) -> int:
        return self.store.vocab_size

    def token_to_id(self, token: str) -> Optional[int]:
        return self.store.token_to_id(token)

    def id_to_token(self, token_id: int) -> Optional[str]:
        return self.store.id_to_token(token_id)

    @staticmethod
    def _words(text: str) -> List[str]:
        # Only ASCII spaces separate words; other whitespace stays inside them.
        return [METASPACE + w for w in text.split(" ") if w]

    def tokenize(self, text: str) -> List[str]:
        if not text or text.isspace():
            return []
        pieces: List[str] = []
        for word in self._words(text):
            pieces.extend(viterbi_segment(word, self.store, self.max_token_len))
        return pieces

    def encode(self, text: str) -> List[int]:
        if not text or text.isspace():
            return [self.eos_id]
        ids: List[int] = []
        for word in self._words(text):
            ids.extend(segment_ids(word, self.store, self.max_token_len))
        ids.append(self.eos_id)
        return ids

    def decode(self, ids: Iterable[int]) -> str:
        """Map ids back to text, stopping at the first EOS.

        Unknown ids are dropped. Elements go through ``operator.index``, so
        numpy integers and integer tensors are accepted and floats raise
        TypeError instead of being truncated to an id.
        """
        parts: List[str] = []
        for i in ids:
            i = operator.index(i)
            if i == self.eos_id:
                break
            token = self.store.id_table.get(i)
            if token is not None:
                parts.append(token)
        return "".join(parts).replace(METASPACE, " ").strip()
