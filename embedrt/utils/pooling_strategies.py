# =============================================================================
# File: pooling_strategies.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from typing import Optional

import numpy as np

from embedrt.logger import get_logger
from embedrt.models.enums import Pooling
from embedrt.utils.constants import MASK_NEG_INF, MASK_SUM_EPS

logger = get_logger("pooling_strategies")


class PoolingStrategies:
    """Batch pooling over (batch, seq_len, dim) token embeddings."""

    @staticmethod
    def _mask_or_ones(
        embedding: np.ndarray, attention_mask: Optional[np.ndarray]
    ) -> np.ndarray:
        if attention_mask is None:
            return np.ones(embedding.shape[:2], dtype=np.int64)
        if attention_mask.ndim == 1:
            attention_mask = attention_mask[None, :]
        assert (
            embedding.shape[:2] == attention_mask.shape
        ), "Embedding and attention mask dimensions mismatch"
        return attention_mask

    @staticmethod
    def cls_pooling(embedding: np.ndarray) -> np.ndarray:
        """First token of every sequence."""
        return embedding[:, 0]

    @staticmethod
    def mean_pooling(embedding: np.ndarray, attention_mask: np.ndarray) -> np.ndarray:
        """Mean pooling with attention mask."""
        mask = attention_mask[..., None].astype(embedding.dtype)
        sum_embedding = (embedding * mask).sum(axis=1)
        sum_mask = mask.sum(axis=1)
        return sum_embedding / np.maximum(sum_mask, MASK_SUM_EPS)

    @staticmethod
    def max_pooling(embedding: np.ndarray, attention_mask: np.ndarray) -> np.ndarray:
        """Max pooling with attention mask."""
        masked_embedding = np.where(
            attention_mask[..., None].astype(bool), embedding, MASK_NEG_INF
        )
        return masked_embedding.max(axis=1)

    @staticmethod
    def last_token_pooling(
        embedding: np.ndarray, attention_mask: np.ndarray
    ) -> np.ndarray:
        """Last non-padded token of every sequence (right padding)."""
        indices = np.maximum(attention_mask.sum(axis=1) - 1, 0)
        return embedding[np.arange(embedding.shape[0]), indices]

    @staticmethod
    def apply(
        embedding: np.ndarray,
        strategy: Pooling,
        attention_mask: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        logger.debug(f"Applying pooling strategy: {strategy.value}")

        # Sentence-level outputs are already pooled
        if embedding.ndim < 3 or strategy == Pooling.NONE:
            return embedding

        if strategy == Pooling.CLS:
            return PoolingStrategies.cls_pooling(embedding)

        mask = PoolingStrategies._mask_or_ones(embedding, attention_mask)
        if strategy == Pooling.MAX:
            return PoolingStrategies.max_pooling(embedding, mask)
        if strategy == Pooling.LAST:
            return PoolingStrategies.last_token_pooling(embedding, mask)
        return PoolingStrategies.mean_pooling(embedding, mask)
