# =============================================================================
# File: init_options.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Initialization options for text embedding runtimes.

Every ``with_*`` call returns a new value; none of them validates anything.
Validation happens once, when the runtime is built.
"""

import os
from typing import Any, Dict, Optional, Sequence, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from embedrt.config.appsettings import EmbeddingConfig
from embedrt.config.config_loader import ConfigLoader
from embedrt.exceptions import ConfigurationException
from embedrt.logger import get_logger
from embedrt.models.enums import EmbeddingModel, Pooling, QuantizationMode
from embedrt.models.tokenizer_files import TokenizerFiles
from embedrt.services.embedder.catalog import get_model_info
from embedrt.services.model_hub import DownloadProgress, ProgressPolicy
from embedrt.utils.log_sanitizer import sanitize_for_log

logger = get_logger("embedder.options")

# An onnxruntime provider name, or a (name, provider_options) pair
ExecutionProvider = Union[str, Tuple[str, Dict[str, Any]]]


def _embedding_settings() -> EmbeddingConfig:
    """Settings used for option defaults.

    Broken settings fall back to the built-in defaults here; the same error is
    raised again when the runtime is built.
    """
    try:
        return ConfigLoader.get_app_settings().embedding
    except ConfigurationException as e:
        logger.warning(
            "Using built-in option defaults, settings unavailable: %s",
            sanitize_for_log(e.message),
        )
        return EmbeddingConfig()


def _default_model() -> EmbeddingModel:
    name = _embedding_settings().default_model
    try:
        return EmbeddingModel(name)
    except ValueError:
        logger.warning(
            "Default model %s is not in the catalog, using %s",
            sanitize_for_log(name),
            EmbeddingConfig().default_model,
        )
        return EmbeddingModel(EmbeddingConfig().default_model)


def _default_cache_dir() -> str:
    return _embedding_settings().cache_dir


def _default_max_length() -> int:
    return _embedding_settings().default_max_length


def _coerce(enum_cls: Type[Any], value: Any) -> Any:
    """Enum member named by ``value``; anything else is kept for the runtime to reject."""
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return value


def _as_provider_tuple(
    execution_providers: Sequence[ExecutionProvider],
) -> Tuple[ExecutionProvider, ...]:
    return tuple(
        p if isinstance(p, str) else (p[0], dict(p[1])) for p in execution_providers
    )


class InitOptions(BaseModel):
    """Options for initializing a catalog model."""

    model_name: EmbeddingModel = Field(default_factory=_default_model)
    execution_providers: Tuple[ExecutionProvider, ...] = ()
    max_length: int = 0
    cache_dir: str = Field(default_factory=_default_cache_dir)
    show_download_progress: bool = True
    custom_progress: Optional[Any] = Field(default=None, repr=False)
    pooling: Optional[Pooling] = None

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    @model_validator(mode="before")
    @classmethod
    def _catalog_max_length(cls, data: Any) -> Any:
        """Default max_length to the catalog value of the chosen model."""
        if isinstance(data, dict) and data.get("max_length") is None:
            model = data.get("model_name") or _default_model()
            data = {**data, "model_name": model, "max_length": get_model_info(model).max_length}
        return data

    @classmethod
    def new(cls, model_name: EmbeddingModel) -> "InitOptions":
        return cls(model_name=model_name)

    @classmethod
    def default(cls) -> "InitOptions":
        return cls()

    @property
    def progress_policy(self) -> ProgressPolicy:
        if self.custom_progress is not None:
            return ProgressPolicy.CUSTOM
        if self.show_download_progress:
            return ProgressPolicy.BUILTIN
        return ProgressPolicy.NONE

    def with_max_length(self, max_length: int) -> "InitOptions":
        return self.model_copy(update={"max_length": max_length})

    def with_cache_dir(self, cache_dir: Union[str, "os.PathLike[str]"]) -> "InitOptions":
        return self.model_copy(update={"cache_dir": os.fspath(cache_dir)})

    def with_execution_providers(
        self, execution_providers: Sequence[ExecutionProvider]
    ) -> "InitOptions":
        return self.model_copy(
            update={"execution_providers": _as_provider_tuple(execution_providers)}
        )

    def with_show_download_progress(self, show_download_progress: bool) -> "InitOptions":
        return self.model_copy(update={"show_download_progress": show_download_progress})

    def with_pooling(self, pooling: Pooling) -> "InitOptions":
        return self.model_copy(update={"pooling": _coerce(Pooling, pooling)})

    def with_custom_progress(self, progress: DownloadProgress) -> "InitOptions":
        """Attach a progress callback; built-in reporting is turned off."""
        return self.model_copy(
            update={"custom_progress": progress, "show_download_progress": False}
        )

    def clone(self) -> "InitOptions":
        """Copy of these options. Progress callbacks are never shared between copies."""
        return self.model_copy(update={"custom_progress": None})


class InitOptionsUserDefined(BaseModel):
    """Options for initializing a user-defined model.

    Model files are held by ``UserDefinedEmbeddingModel``; there is no cache
    directory or progress reporting because nothing is downloaded.
    """

    execution_providers: Tuple[ExecutionProvider, ...] = ()
    max_length: int = Field(default_factory=_default_max_length)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def new(cls) -> "InitOptionsUserDefined":
        return cls()

    @classmethod
    def from_init_options(cls, options: InitOptions) -> "InitOptionsUserDefined":
        """Keep execution providers and max length, drop catalog-only fields."""
        return cls(
            execution_providers=options.execution_providers,
            max_length=options.max_length,
        )

    def with_execution_providers(
        self, execution_providers: Sequence[ExecutionProvider]
    ) -> "InitOptionsUserDefined":
        return self.model_copy(
            update={"execution_providers": _as_provider_tuple(execution_providers)}
        )

    def with_max_length(self, max_length: int) -> "InitOptionsUserDefined":
        return self.model_copy(update={"max_length": max_length})


class UserDefinedEmbeddingModel(BaseModel):
    """A "bring your own" embedding model, given as raw file bytes."""

    onnx_file: bytes
    tokenizer_files: TokenizerFiles
    pooling: Optional[Pooling] = None
    quantization: QuantizationMode = QuantizationMode.NONE

    model_config = ConfigDict(frozen=True)

    @classmethod
    def new(
        cls, onnx_file: bytes, tokenizer_files: TokenizerFiles
    ) -> "UserDefinedEmbeddingModel":
        return cls(onnx_file=onnx_file, tokenizer_files=tokenizer_files)

    def with_quantization(
        self, quantization: QuantizationMode
    ) -> "UserDefinedEmbeddingModel":
        return self.model_copy(
            update={"quantization": _coerce(QuantizationMode, quantization)}
        )

    def with_pooling(self, pooling: Pooling) -> "UserDefinedEmbeddingModel":
        return self.model_copy(update={"pooling": _coerce(Pooling, pooling)})
