from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

import torch
from tqdm import tqdm

from .config import MarianConfig
from .definition import LoadError
from .tokenizer import UnigramTokenizer

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.json"
TOKENIZER_FILE = "tokenizer.json"


def select_device(
    device: Union[str, torch.device, None] = None,
    prefer_mps: bool = True,
) -> torch.device:
    """Return ``device`` as a torch.device, or the best available one when unset."""
    if device is not None:
        return torch.device(device)
    if prefer_mps and torch.backends.mps.is_available():
        return torch.device("mps")
    if torch.cuda.is_available():
        return torch.device("cuda")
    return torch.device("cpu")


@dataclass
class ModelInputs:
    """Encoder inputs for a batch of texts."""

    input_ids: torch.Tensor       # (B,T) long
    attention_mask: torch.Tensor  # (B,T) long, 0 on padding

    @property
    def seq_len(self) -> int:
        return int(self.input_ids.shape[1])

    def to(self, device: torch.device) -> "ModelInputs":
        return ModelInputs(
            input_ids=self.input_ids.to(device),
            attention_mask=self.attention_mask.to(device),
        )


def encode_for_model(
    tokenizer: UnigramTokenizer,
    text: str,
    device: Union[str, torch.device, None] = None,
) -> ModelInputs:
    ids = tokenizer.encode(text)
    input_ids = torch.tensor([ids], dtype=torch.long)
    inputs = ModelInputs(input_ids=input_ids, attention_mask=torch.ones_like(input_ids))
    return inputs.to(select_device(device))


def encode_batch(
    tokenizer: UnigramTokenizer,
    texts: Sequence[str],
    pad_id: int,
    max_length: Optional[int] = None,
    progress: bool = False,
    device: Union[str, torch.device, None] = None,
) -> ModelInputs:
    """Encode ``texts`` and right-pad them into one batch.

    With ``max_length`` set, longer sequences are cut to ``max_length`` ids
    and still end with EOS. Tensors land on ``device``, or on the device
    select_device picks when it is unset.
    """
    if not texts:
        raise ValueError("encode_batch needs at least one text")
    if max_length is not None and max_length < 1:
        raise ValueError("max_length must be >= 1")

    rows: List[List[int]] = []
    for text in tqdm(texts, desc="Encoding", disable=not progress, leave=False):
        ids = tokenizer.encode(text)
        if max_length is not None and len(ids) > max_length:
            ids = ids[: max_length - 1] + [tokenizer.eos_id]
        rows.append(ids)

    T = max(len(r) for r in rows)
    input_ids = torch.full((len(rows), T), pad_id, dtype=torch.long)
    attention_mask = torch.zeros((len(rows), T), dtype=torch.long)
    for b, ids in enumerate(rows):
        input_ids[b, : len(ids)] = torch.tensor(ids, dtype=torch.long)
        attention_mask[b, : len(ids)] = 1
    return ModelInputs(input_ids=input_ids, attention_mask=attention_mask).to(select_device(device))


def decode_generated(
    tokenizer: UnigramTokenizer,
    ids: Union[torch.Tensor, Iterable[int]],
    decoder_start_token_id: int,
) -> str:
    """Decode one generated sequence, dropping the leading decoder-start id."""
    if isinstance(ids, torch.Tensor):
        if ids.dim() == 2:
            if ids.shape[0] != 1:
                raise ValueError(f"Expected a single sequence, got batch of {ids.shape[0]}")
            ids = ids[0]
        ids = ids.tolist()
    ids = list(ids)
    if ids and ids[0] == decoder_start_token_id:
        ids = ids[1:]
    return tokenizer.decode(ids)


@dataclass
class MarianAssets:
    """Tokenizer and config for one translation model directory."""

    config: MarianConfig
    tokenizer: UnigramTokenizer


def load_model_assets(model_dir: str) -> MarianAssets:
    if not os.path.isdir(model_dir):
        raise LoadError(f"{model_dir} is not a directory")
    config = MarianConfig.load(os.path.join(model_dir, CONFIG_FILE))
    tokenizer = UnigramTokenizer.load(
        os.path.join(model_dir, TOKENIZER_FILE), eos_id=config.eos_token_id
    )
    logger.info(
        "Loaded tokenizer assets from %s (vocab %d, eos %d)",
        model_dir,
        tokenizer.vocab_size,
        config.eos_token_id,
    )
    return MarianAssets(config=config, tokenizer=tokenizer)
