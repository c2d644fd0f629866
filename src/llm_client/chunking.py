"""Splitting long texts for embedding and recombining the chunk vectors."""

from typing import Sequence

import numpy as np


def chunk_text(text: str, chunk_size: int, overlap: int) -> list[str]:
    """Split text into windows of at most ``chunk_size`` characters.

    Consecutive windows share ``overlap`` characters; the window start moves
    forward by ``chunk_size - overlap`` each time.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if not 0 <= overlap < chunk_size:
        raise ValueError(f"overlap must be in [0, chunk_size), got {overlap}")

    step = chunk_size - overlap
    return [text[start:start + chunk_size] for start in range(0, len(text), step)]


def _check_dimensions(embeddings: Sequence[Sequence[float]]) -> None:
    if not embeddings:
        raise ValueError("No embeddings provided")
    dim = len(embeddings[0])
    if any(len(emb) != dim for emb in embeddings):
        raise ValueError("Embeddings have inconsistent dimensions")


def average_embeddings(embeddings: Sequence[Sequence[float]]) -> list[float]:
    """Element-wise mean of equal-dimension vectors."""
    _check_dimensions(embeddings)
    return np.mean(np.asarray(embeddings, dtype=float), axis=0).tolist()


def weighted_average_embeddings(
    embeddings: Sequence[Sequence[float]],
    weights: Sequence[float],
) -> list[float]:
    """Element-wise weighted mean. Weights don't need to sum to 1."""
    _check_dimensions(embeddings)
    if len(embeddings) != len(weights):
        raise ValueError("Number of weights must match number of embeddings")

    weights_arr = np.asarray(weights, dtype=float)
    total = weights_arr.sum()
    if total == 0:
        raise ValueError("Total weight is zero")

    weighted = np.asarray(embeddings, dtype=float) * weights_arr[:, np.newaxis]
    return (weighted.sum(axis=0) / total).tolist()
