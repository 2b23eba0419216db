# =============================================================================
# File: processing.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Embedding output processing: pooling and normalization."""

import logging
from typing import Optional

import numpy as np
from numpy import ndarray

from embedrt.logger import get_logger
from embedrt.models.enums import Pooling
from embedrt.utils.constants import NORM_EPS
from embedrt.utils.pooling_strategies import PoolingStrategies

logger = get_logger("embedder.processing")


def process_embedding_output(
    hidden_states: ndarray,
    pooling: Pooling,
    attention_mask: Optional[ndarray],
    normalize: bool = True,
) -> ndarray:
    """Turn a batch of ONNX outputs into one float32 vector per input.

    Args:
        hidden_states: Raw ONNX output, (batch, seq_len, dim) or (batch, dim)
        pooling: Resolved pooling strategy of the runtime
        attention_mask: Attention mask of the batch, (batch, seq_len)
        normalize: L2 normalize the pooled vectors

    Returns:
        Array whose first axis is the batch
    """
    pooled = PoolingStrategies.apply(hidden_states, pooling, attention_mask)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"After pooling: {pooled.shape}")

    if normalize:
        pooled = _normalize_vector(pooled)
    return pooled.astype(np.float32, copy=False)


def _normalize_vector(embedding: ndarray) -> ndarray:
    """L2 normalize along the last axis."""
    norm = np.linalg.norm(embedding, ord=2, axis=-1, keepdims=True)
    return embedding / np.maximum(norm, NORM_EPS)
