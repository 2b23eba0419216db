# =============================================================================
# File: __init__.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Text embedding runtime built on ONNX models.

This package provides the following components:
- catalog: Known models and their published defaults
- init_options: Option builders for catalog and user-defined models
- resource_manager: Tokenizer, session and pooling resolution
- onnx_utils: ONNX model input/output preparation
- processing: Pooling and normalization of model outputs
- embedder: Main TextEmbedding class
"""

from embedrt.models.enums import EmbeddingModel
from embedrt.services.embedder.embedder import TextEmbedding
from embedrt.services.embedder.init_options import (
    InitOptions,
    InitOptionsUserDefined,
    UserDefinedEmbeddingModel,
)

__all__ = [
    "EmbeddingModel",
    "InitOptions",
    "InitOptionsUserDefined",
    "TextEmbedding",
    "UserDefinedEmbeddingModel",
]
