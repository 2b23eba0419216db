# =============================================================================
# File: catalog.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Catalog of known embedding models and their published defaults."""

from typing import Dict, List, Union

from embedrt.exceptions import ModelNotFoundError
from embedrt.models.enums import EmbeddingModel, Pooling, QuantizationMode
from embedrt.models.model_info import ModelInfo
from embedrt.utils.log_sanitizer import sanitize_for_log


_CATALOG: Dict[EmbeddingModel, ModelInfo] = {
    info.model: info
    for info in [
        ModelInfo(
            model=EmbeddingModel.ALL_MINILM_L6_V2,
            model_code="Qdrant/all-MiniLM-L6-v2-onnx",
            description="Sentence Transformer model, MiniLM-L6-v2",
            dim=384,
            model_file="model.onnx",
            default_pooling=Pooling.MEAN,
            max_length=256,
        ),
        ModelInfo(
            model=EmbeddingModel.ALL_MINILM_L6_V2_Q,
            model_code="Xenova/all-MiniLM-L6-v2",
            description="Quantized Sentence Transformer model, MiniLM-L6-v2",
            dim=384,
            model_file="onnx/model_quantized.onnx",
            default_pooling=Pooling.MEAN,
            max_length=256,
            quantization=QuantizationMode.DYNAMIC,
        ),
        ModelInfo(
            model=EmbeddingModel.BGE_BASE_EN_V15,
            model_code="Xenova/bge-base-en-v1.5",
            description="v1.5 release of the base English model",
            dim=768,
            default_pooling=Pooling.CLS,
        ),
        ModelInfo(
            model=EmbeddingModel.BGE_BASE_EN_V15_Q,
            model_code="Qdrant/bge-base-en-v1.5-onnx-Q",
            description="Quantized v1.5 release of the base English model",
            dim=768,
            model_file="model_optimized.onnx",
            default_pooling=Pooling.CLS,
            quantization=QuantizationMode.STATIC,
        ),
        ModelInfo(
            model=EmbeddingModel.BGE_SMALL_EN_V15,
            model_code="Xenova/bge-small-en-v1.5",
            description="v1.5 release of the fast and default English model",
            dim=384,
            default_pooling=Pooling.CLS,
        ),
        ModelInfo(
            model=EmbeddingModel.BGE_SMALL_EN_V15_Q,
            model_code="Qdrant/bge-small-en-v1.5-onnx-Q",
            description="Quantized v1.5 release of the fast and default English model",
            dim=384,
            model_file="model_optimized.onnx",
            default_pooling=Pooling.CLS,
            quantization=QuantizationMode.STATIC,
        ),
        ModelInfo(
            model=EmbeddingModel.NOMIC_EMBED_TEXT_V15,
            model_code="nomic-ai/nomic-embed-text-v1.5",
            description="v1.5 release of the 8192 context length english model",
            dim=768,
            default_pooling=Pooling.MEAN,
            max_length=8192,
        ),
        ModelInfo(
            model=EmbeddingModel.NOMIC_EMBED_TEXT_V15_Q,
            model_code="nomic-ai/nomic-embed-text-v1.5",
            description="Quantized v1.5 release of the 8192 context length english model",
            dim=768,
            model_file="onnx/model_quantized.onnx",
            default_pooling=Pooling.MEAN,
            max_length=8192,
            quantization=QuantizationMode.DYNAMIC,
        ),
        ModelInfo(
            model=EmbeddingModel.PARAPHRASE_ML_MINILM_L12_V2,
            model_code="Xenova/paraphrase-multilingual-MiniLM-L12-v2",
            description="Multi-lingual model",
            dim=384,
            default_pooling=Pooling.MEAN,
        ),
        ModelInfo(
            model=EmbeddingModel.MULTILINGUAL_E5_SMALL,
            model_code="intfloat/multilingual-e5-small",
            description="Small model of multilingual E5 Text Embeddings",
            dim=384,
            default_pooling=Pooling.MEAN,
        ),
        ModelInfo(
            model=EmbeddingModel.MXBAI_EMBED_LARGE_V1,
            model_code="mixedbread-ai/mxbai-embed-large-v1",
            description="Large English embedding model from MixedBreed.ai",
            dim=1024,
            default_pooling=Pooling.CLS,
        ),
        ModelInfo(
            model=EmbeddingModel.GTE_BASE_EN_V15,
            model_code="Alibaba-NLP/gte-base-en-v1.5",
            description="Large multilingual embedding model from Alibaba",
            dim=768,
            default_pooling=Pooling.CLS,
            max_length=8192,
        ),
    ]
}


def list_supported_models() -> List[ModelInfo]:
    """All catalog entries, in declaration order."""
    return [_CATALOG[model] for model in EmbeddingModel]


def get_model_info(model: Union[EmbeddingModel, str]) -> ModelInfo:
    """Catalog entry for ``model``, given as the enum or its string value."""
    try:
        identity = EmbeddingModel(model)
    except ValueError as e:
        raise ModelNotFoundError(
            f"Model '{sanitize_for_log(model)}' is not in the catalog"
        ) from e
    return _CATALOG[identity]
