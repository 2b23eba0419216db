# =============================================================================
# File: embedder.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""TextEmbedding: the assembled, immutable embedding runtime."""

from typing import Any, Iterable, List, Optional, Sequence, Union

import numpy as np

from embedrt.config.config_loader import ConfigLoader
from embedrt.exceptions import InferenceError, InvalidConfigError
from embedrt.logger import get_logger
from embedrt.models.enums import EmbeddingModel, Pooling, QuantizationMode
from embedrt.models.model_info import ModelInfo
from embedrt.models.tokenizer_files import TokenizerFiles
from embedrt.services.embedder import onnx_utils, processing, resource_manager
from embedrt.services.embedder.catalog import get_model_info, list_supported_models
from embedrt.services.embedder.init_options import (
    InitOptions,
    InitOptionsUserDefined,
    UserDefinedEmbeddingModel,
)
from embedrt.services.model_hub import ModelHub
from embedrt.utils.log_sanitizer import sanitize_for_log

logger = get_logger("embedder")

_USER_DEFINED_LABEL = "<user-defined>"


class TextEmbedding:
    """Tokenizer, pooling, session, quantization and token-type-id flag.

    Built only through ``try_new`` or ``try_new_from_user_defined``. Every field
    is fixed at construction; ``embed`` only reads them.
    """

    __slots__ = (
        "_tokenizer",
        "_pooling",
        "_session",
        "_quantization",
        "_need_token_type_ids",
        "_max_length",
        "_execution_provider",
        "_model_info",
    )

    def __init__(
        self,
        tokenizer: Any,
        pooling: Optional[Pooling],
        session: Any,
        quantization: QuantizationMode,
        need_token_type_ids: bool,
        max_length: int,
        execution_provider: str,
        model_info: Optional[ModelInfo] = None,
    ):
        object.__setattr__(self, "_tokenizer", tokenizer)
        object.__setattr__(self, "_pooling", pooling)
        object.__setattr__(self, "_session", session)
        object.__setattr__(self, "_quantization", quantization)
        object.__setattr__(self, "_need_token_type_ids", need_token_type_ids)
        object.__setattr__(self, "_max_length", max_length)
        object.__setattr__(self, "_execution_provider", execution_provider)
        object.__setattr__(self, "_model_info", model_info)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("TextEmbedding is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("TextEmbedding is immutable")

    def __repr__(self) -> str:
        model = self._model_info.model.value if self._model_info else _USER_DEFINED_LABEL
        return (
            f"TextEmbedding(model={model!r}, pooling={self._pooling}, "
            f"quantization={self._quantization}, max_length={self._max_length}, "
            f"provider={self._execution_provider!r}, "
            f"need_token_type_ids={self._need_token_type_ids})"
        )

    @property
    def tokenizer(self) -> Any:
        return self._tokenizer

    @property
    def pooling(self) -> Optional[Pooling]:
        return self._pooling

    @property
    def session(self) -> Any:
        return self._session

    @property
    def quantization(self) -> QuantizationMode:
        return self._quantization

    @property
    def need_token_type_ids(self) -> bool:
        return self._need_token_type_ids

    @property
    def max_length(self) -> int:
        return self._max_length

    @property
    def execution_provider(self) -> str:
        return self._execution_provider

    @property
    def model_info(self) -> Optional[ModelInfo]:
        """Catalog entry, or None for user-defined models."""
        return self._model_info

    @staticmethod
    def list_supported_models() -> List[ModelInfo]:
        return list_supported_models()

    @staticmethod
    def get_model_info(model: Union[EmbeddingModel, str]) -> ModelInfo:
        return get_model_info(model)

    @classmethod
    def try_new(cls, options: Optional[InitOptions] = None) -> "TextEmbedding":
        """Build a runtime for a catalog model, downloading files if needed.

        Raises:
            ConfigurationException: invalid max length or settings
            ResolutionException: files could not be fetched or cached
            ModelException: tokenizer, graph or provider failures
        """
        if options is None:
            options = InitOptions.default()

        settings = ConfigLoader.get_app_settings().embedding
        model_info = get_model_info(options.model_name)
        max_length = resource_manager.validate_max_length(options.max_length)
        pooling = resource_manager.resolve_pooling(
            options.pooling, model_info.default_pooling, model_info.model.value
        )

        graph_bytes, tokenizer_files = ModelHub.resolve(
            model_info,
            options.cache_dir,
            options.progress_policy,
            options.custom_progress,
        )

        return cls._assemble(
            graph_bytes,
            tokenizer_files,
            options.execution_providers,
            max_length,
            pooling,
            model_info.quantization,
            model_info,
            settings.baseline_provider,
        )

    @classmethod
    def try_new_from_user_defined(
        cls,
        model: UserDefinedEmbeddingModel,
        options: Optional[InitOptionsUserDefined] = None,
    ) -> "TextEmbedding":
        """Build a runtime from caller-supplied graph bytes and tokenizer files.

        Raises:
            ConfigurationException: invalid settings, max length, pooling or
                quantization, empty graph bytes, incomplete tokenizer files or
                no pooling set on the model
            ModelException: tokenizer, graph or provider failures
        """
        if options is None:
            options = InitOptionsUserDefined.new()

        settings = ConfigLoader.get_app_settings().embedding
        max_length = resource_manager.validate_max_length(options.max_length)
        if not model.onnx_file:
            raise InvalidConfigError("User-defined model has empty ONNX graph bytes")
        pooling = resource_manager.resolve_pooling(
            model.pooling, None, _USER_DEFINED_LABEL
        )
        quantization = resource_manager.validate_quantization(model.quantization)

        return cls._assemble(
            model.onnx_file,
            model.tokenizer_files,
            options.execution_providers,
            max_length,
            pooling,
            quantization,
            None,
            settings.baseline_provider,
        )

    @classmethod
    def _assemble(
        cls,
        graph_bytes: bytes,
        tokenizer_files: TokenizerFiles,
        execution_providers: Sequence[Any],
        max_length: int,
        pooling: Pooling,
        quantization: QuantizationMode,
        model_info: Optional[ModelInfo],
        baseline_provider: str,
    ) -> "TextEmbedding":
        tokenizer, effective_max_length = resource_manager.load_tokenizer(
            tokenizer_files, max_length
        )
        session, provider = resource_manager.load_session(
            graph_bytes,
            execution_providers,
            baseline_provider,
        )
        need_token_type_ids = onnx_utils.requires_token_type_ids(session)

        label = model_info.model.value if model_info else _USER_DEFINED_LABEL
        logger.info(
            "Runtime ready for %s: pooling=%s quantization=%s max_length=%d "
            "provider=%s token_type_ids=%s",
            sanitize_for_log(label),
            pooling.value,
            quantization.value,
            effective_max_length,
            sanitize_for_log(provider),
            need_token_type_ids,
        )
        return cls(
            tokenizer=tokenizer,
            pooling=pooling,
            session=session,
            quantization=quantization,
            need_token_type_ids=need_token_type_ids,
            max_length=effective_max_length,
            execution_provider=provider,
            model_info=model_info,
        )

    def _resolve_batch_size(self, num_texts: int, batch_size: Optional[int]) -> int:
        if batch_size is not None and batch_size <= 0:
            raise InferenceError(f"batch_size must be positive, got {batch_size}")

        if self._quantization == QuantizationMode.DYNAMIC:
            # Dynamic quantization ranges depend on the batch contents
            if batch_size is not None and batch_size < num_texts:
                raise InferenceError(
                    "Dynamic quantization cannot be used with batching: "
                    f"batch_size {batch_size} is smaller than {num_texts} inputs"
                )
            return num_texts

        if batch_size is None:
            batch_size = ConfigLoader.get_app_settings().embedding.batch_size
        return batch_size

    def embed(
        self, texts: Union[str, Iterable[str]], batch_size: Optional[int] = None
    ) -> List[np.ndarray]:
        """Embed ``texts`` and return one normalized float32 vector per text."""
        if isinstance(texts, str):
            texts = [texts]
        texts = list(texts)
        if not texts:
            return []

        batch_size = self._resolve_batch_size(len(texts), batch_size)
        embeddings: List[np.ndarray] = []
        for start in range(0, len(texts), batch_size):
            batch = texts[start : start + batch_size]
            embeddings.extend(self._embed_batch(batch))
        return embeddings

    def _embed_batch(self, batch: List[str]) -> List[np.ndarray]:
        try:
            encoding = self._tokenizer(
                batch,
                padding=True,
                truncation=True,
                max_length=self._max_length,
                return_tensors="np",
                return_token_type_ids=False,
            )
        except (ValueError, TypeError) as e:
            raise InferenceError(f"Tokenization failed: {e}") from e

        inputs = onnx_utils.prepare_onnx_inputs(
            encoding, self._session, self._need_token_type_ids
        )
        try:
            outputs = self._session.run(None, inputs)
        except Exception as e:
            logger.error("ONNX inference failed: %s", sanitize_for_log(str(e)))
            raise InferenceError(f"ONNX inference failed: {e}") from e
        onnx_utils.log_onnx_outputs(outputs, self._session)

        hidden_states = onnx_utils.select_hidden_states(outputs, self._session)
        mask = encoding.get("attention_mask")
        if mask is not None:
            mask = np.asarray(mask, dtype=np.int64)
        pooled = processing.process_embedding_output(hidden_states, self._pooling, mask)
        return list(pooled)
