# =============================================================================
# File: model_info.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from embedrt.models.enums import EmbeddingModel, Pooling, QuantizationMode


class ModelInfo(BaseModel):
    """Static catalog entry for a known embedding model."""

    model: EmbeddingModel
    model_code: str
    description: str = ""
    dim: int
    model_file: str = "onnx/model.onnx"
    default_pooling: Pooling = Pooling.MEAN
    max_length: int = 512
    quantization: QuantizationMode = QuantizationMode.NONE

    model_config = ConfigDict(frozen=True, protected_namespaces=())
