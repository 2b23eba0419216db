# =============================================================================
# File: enums.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from enum import Enum


class Pooling(str, Enum):
    """Aggregation of token embeddings into one vector per input."""

    CLS = "cls"
    MEAN = "mean"
    MAX = "max"
    LAST = "last"
    # Output is used as produced by the graph (sentence-level outputs)
    NONE = "none"


class QuantizationMode(str, Enum):
    """Numeric precision variant of a model's weights."""

    NONE = "none"
    STATIC = "static"
    # Dynamic quantization: activation ranges depend on the whole batch
    DYNAMIC = "dynamic"


class EmbeddingModel(str, Enum):
    """Identity of a catalog model. Quantized artifacts are separate identities."""

    ALL_MINILM_L6_V2 = "sentence-transformers/all-MiniLM-L6-v2"
    ALL_MINILM_L6_V2_Q = "Xenova/all-MiniLM-L6-v2"
    BGE_BASE_EN_V15 = "BAAI/bge-base-en-v1.5"
    BGE_BASE_EN_V15_Q = "Qdrant/bge-base-en-v1.5-onnx-Q"
    BGE_SMALL_EN_V15 = "BAAI/bge-small-en-v1.5"
    BGE_SMALL_EN_V15_Q = "Qdrant/bge-small-en-v1.5-onnx-Q"
    NOMIC_EMBED_TEXT_V15 = "nomic-ai/nomic-embed-text-v1.5"
    NOMIC_EMBED_TEXT_V15_Q = "nomic-ai/nomic-embed-text-v1.5-Q"
    PARAPHRASE_ML_MINILM_L12_V2 = "sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2"
    MULTILINGUAL_E5_SMALL = "intfloat/multilingual-e5-small"
    MXBAI_EMBED_LARGE_V1 = "mixedbread-ai/mxbai-embed-large-v1"
    GTE_BASE_EN_V15 = "Alibaba-NLP/gte-base-en-v1.5"
