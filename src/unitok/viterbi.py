from __future__ import annotations

from typing import List

from .vocab import VocabularyStore

# Longest substring tried as a token. Must be >= the longest vocabulary token,
# otherwise longer tokens are never matched.
MAX_TOKEN_LEN = 64

# Score added for a single character with no vocabulary match ending on it.
UNK_PENALTY = -100.0


def viterbi_segment(
    word: str,
    store: VocabularyStore,
    max_token_len: int = MAX_TOKEN_LEN,
) -> List[str]:
    """Split ``word`` into the pieces with the highest total vocabulary score.

    Substrings ending at each position are tried longest first and only a
    strictly better score replaces the current best, so on a tie the longer
    piece wins. Positions no vocabulary substring ends on fall back to a
    single-character piece scored with UNK_PENALTY. Runs in
    O(len(word) * max_token_len).
    """
    if max_token_len < 1:
        raise ValueError("max_token_len must be >= 1")

    n = len(word)
    best_score = [float("-inf")] * (n + 1)
    best_len = [0] * (n + 1)
    best_score[0] = 0.0

    table = store.token_table
    for end in range(1, n + 1):
        for start in range(max(0, end - max_token_len), end):
            entry = table.get(word[start:end])
            if entry is None:
                continue
            candidate = best_score[start] + entry[1]
            if candidate > best_score[end]:
                best_score[end] = candidate
                best_len[end] = end - start

        if best_score[end] == float("-inf"):
            best_score[end] = best_score[end - 1] + UNK_PENALTY
            best_len[end] = 1

    pieces: List[str] = []
    pos = n
    while pos > 0:
        length = best_len[pos]
        pieces.append(word[pos - length : pos])
        pos -= length
    pieces.reverse()
    return pieces


def segment_ids(
    word: str,
    store: VocabularyStore,
    max_token_len: int = MAX_TOKEN_LEN,
) -> List[int]:
    """Like viterbi_segment, mapped to ids; unmatched pieces become ``store.unk_id``."""
    out: List[int] = []
    for piece in viterbi_segment(word, store, max_token_len):
        entry = store.token_table.get(piece)
        out.append(entry[0] if entry is not None else store.unk_id)
    return out
