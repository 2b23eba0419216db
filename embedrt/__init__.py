# =============================================================================
# File: __init__.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""embedrt: configure and assemble ONNX text-embedding runtimes."""

from embedrt.models.enums import Pooling, QuantizationMode
from embedrt.models.model_info import ModelInfo
from embedrt.models.tokenizer_files import TokenizerFiles
from embedrt.services.embedder import (
    EmbeddingModel,
    InitOptions,
    InitOptionsUserDefined,
    TextEmbedding,
    UserDefinedEmbeddingModel,
)
from embedrt.services.model_hub import DownloadProgress, ProgressPolicy

__version__ = "0.1.0"

__all__ = [
    "DownloadProgress",
    "EmbeddingModel",
    "InitOptions",
    "InitOptionsUserDefined",
    "ModelInfo",
    "Pooling",
    "ProgressPolicy",
    "QuantizationMode",
    "TextEmbedding",
    "TokenizerFiles",
    "UserDefinedEmbeddingModel",
]
