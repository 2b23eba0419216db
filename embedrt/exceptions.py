# =============================================================================
# File: exceptions.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Custom exceptions for the embedrt runtime."""
from typing import Optional


class EmbedRtBaseException(Exception):
    """Base exception for all embedrt errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        super().__init__(self.message)


class ConfigurationException(EmbedRtBaseException):
    """Configuration-related errors raised while building a runtime."""

    pass


class InvalidConfigError(ConfigurationException):
    """Invalid configuration parameters."""

    pass


class MissingConfigError(ConfigurationException):
    """Required configuration missing."""

    pass


class PoolingUnresolvedError(ConfigurationException):
    """No pooling strategy could be resolved for the model."""

    pass


class IncompleteTokenizerFilesError(ConfigurationException):
    """One or more tokenizer file roles are missing or empty."""

    pass


class ResolutionException(EmbedRtBaseException):
    """Errors obtaining catalog model files from the hub or the cache."""

    pass


class ModelNotFoundError(ResolutionException):
    """Model identifier is not part of the catalog."""

    pass


class ModelDownloadError(ResolutionException):
    """Fetching a model file from the hub failed."""

    pass


class CacheIOError(ResolutionException):
    """Reading or creating the local model cache failed."""

    pass


class ModelException(EmbedRtBaseException):
    """Exceptions related to model loading and inference."""

    pass


class ModelLoadError(ModelException):
    """Failed to load model or create session."""

    pass


class GraphLoadError(ModelLoadError):
    """ONNX graph bytes could not be parsed."""

    pass


class ProviderInitializationError(ModelLoadError):
    """No execution provider, including the baseline, could run the graph."""

    pass


class TokenizerError(ModelException):
    """Tokenizer-related errors."""

    pass


class InferenceError(ModelException):
    """Model inference failed."""

    pass
