# =============================================================================
# File: resource_manager.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Resource construction for a runtime: tokenizer, ONNX session, pooling."""

import json
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Type

import onnx
import onnxruntime as ort
from tokenizers import Tokenizer
from transformers import PreTrainedTokenizerFast

from embedrt.exceptions import (
    GraphLoadError,
    IncompleteTokenizerFilesError,
    InvalidConfigError,
    PoolingUnresolvedError,
    ProviderInitializationError,
    TokenizerError,
)
from embedrt.logger import get_logger
from embedrt.models.enums import Pooling, QuantizationMode
from embedrt.models.tokenizer_files import TokenizerFiles
from embedrt.utils.log_sanitizer import describe_bytes, sanitize_for_log

logger = get_logger("embedder.resources")

_SPECIAL_TOKEN_KEYS = [
    "bos_token",
    "eos_token",
    "unk_token",
    "sep_token",
    "pad_token",
    "cls_token",
    "mask_token",
]


def validate_max_length(max_length: Any) -> int:
    if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length <= 0:
        raise InvalidConfigError(
            f"max_length must be a positive integer, got {sanitize_for_log(max_length)}"
        )
    return max_length


def _as_enum(enum_cls: Type[Enum], value: Any, field: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (ValueError, TypeError) as e:
        choices = ", ".join(member.value for member in enum_cls)
        raise InvalidConfigError(
            f"Invalid {field} {sanitize_for_log(value)!r}, expected one of: {choices}"
        ) from e


def resolve_pooling(
    override: Optional[Any], default: Optional[Pooling], model_label: str
) -> Pooling:
    """Explicit override wins; otherwise the catalog default, if there is one."""
    if override is not None:
        return _as_enum(Pooling, override, "pooling")
    if default is not None:
        return default
    raise PoolingUnresolvedError(
        f"No pooling strategy for model '{sanitize_for_log(model_label)}': "
        "user-defined models must set one with with_pooling()"
    )


def validate_quantization(quantization: Any) -> QuantizationMode:
    return _as_enum(QuantizationMode, quantization, "quantization")


def _token_content(value: Any) -> Optional[str]:
    """Special tokens are stored either as strings or as AddedToken dicts."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get("content")
    return None


def _parse_json(raw: bytes, file_name: str) -> Dict[str, Any]:
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise TokenizerError(f"Cannot parse {file_name}: {e}") from e
    if not isinstance(data, dict):
        raise TokenizerError(f"{file_name} must contain a JSON object")
    return data


def load_tokenizer(
    tokenizer_files: TokenizerFiles, max_length: int
) -> Tuple[PreTrainedTokenizerFast, int]:
    """Build the tokenizer from raw file contents.

    Args:
        tokenizer_files: Contents of tokenizer.json and its companion files
        max_length: Requested maximum sequence length

    Returns:
        Tuple of (tokenizer, effective max length)
    """
    missing = tokenizer_files.missing_roles()
    if missing:
        raise IncompleteTokenizerFilesError(
            f"Tokenizer files missing or empty: {', '.join(missing)}"
        )

    config = _parse_json(tokenizer_files.config_file, "config.json")
    special_tokens_map = _parse_json(
        tokenizer_files.special_tokens_map_file, "special_tokens_map.json"
    )
    tokenizer_config = _parse_json(
        tokenizer_files.tokenizer_config_file, "tokenizer_config.json"
    )

    try:
        backend = Tokenizer.from_str(tokenizer_files.tokenizer_file.decode("utf-8"))
    except Exception as e:
        logger.error("Failed to parse tokenizer.json: %s", sanitize_for_log(str(e)))
        raise TokenizerError(f"Cannot load tokenizer.json: {e}") from e

    model_max_length = tokenizer_config.get("model_max_length")
    if isinstance(model_max_length, (int, float)) and model_max_length > 0:
        effective_max_length = min(int(model_max_length), max_length)
    else:
        effective_max_length = max_length

    special_tokens: Dict[str, Any] = {}
    for source in (special_tokens_map, tokenizer_config):
        for key in _SPECIAL_TOKEN_KEYS:
            content = _token_content(source.get(key))
            if content:
                special_tokens[key] = content
    additional = [
        _token_content(token)
        for token in special_tokens_map.get("additional_special_tokens", [])
    ]
    additional = [token for token in additional if token]
    if additional:
        special_tokens["additional_special_tokens"] = additional

    try:
        tokenizer = PreTrainedTokenizerFast(
            tokenizer_object=backend,
            model_max_length=effective_max_length,
            **special_tokens,
        )
    except (ValueError, TypeError, KeyError) as e:
        logger.error("Failed to build tokenizer: %s", sanitize_for_log(str(e)))
        raise TokenizerError(f"Cannot build tokenizer: {e}") from e

    pad_token_id = config.get("pad_token_id")
    if tokenizer.pad_token is None and isinstance(pad_token_id, int):
        pad_token = backend.id_to_token(pad_token_id)
        if pad_token is not None:
            tokenizer.pad_token = pad_token
    if tokenizer.pad_token is None:
        raise TokenizerError(
            "No pad token found in tokenizer_config.json, special_tokens_map.json "
            "or config.json"
        )

    logger.debug(
        "Built tokenizer: vocab=%d max_length=%d pad_token=%s",
        backend.get_vocab_size(),
        effective_max_length,
        sanitize_for_log(tokenizer.pad_token),
    )
    return tokenizer, effective_max_length


def _provider_name(provider: Any) -> str:
    return provider if isinstance(provider, str) else provider[0]


def validate_graph(graph_bytes: bytes) -> None:
    """Parse and check the ONNX graph before handing it to onnxruntime."""
    if not graph_bytes:
        raise InvalidConfigError("ONNX graph bytes are empty")
    try:
        model = onnx.load_model_from_string(graph_bytes)
        onnx.checker.check_model(model)
    except Exception as e:
        logger.error(
            "Invalid ONNX graph %s: %s",
            describe_bytes(graph_bytes),
            sanitize_for_log(str(e)),
        )
        raise GraphLoadError(f"Cannot load ONNX graph: {e}") from e


def load_session(
    graph_bytes: bytes,
    execution_providers: Sequence[Any],
    baseline_provider: str = "CPUExecutionProvider",
) -> Tuple[ort.InferenceSession, str]:
    """Create the inference session on the first provider that initializes.

    Providers are tried in order, then ``baseline_provider``. A provider that
    onnxruntime does not offer, or that raises, or that onnxruntime silently
    replaces with another one, counts as failed.

    Returns:
        Tuple of (session, active provider name)
    """
    validate_graph(graph_bytes)

    available = ort.get_available_providers()
    candidates = list(execution_providers) + [baseline_provider]
    tried = set()
    failures = []

    for provider in candidates:
        name = _provider_name(provider)
        if name in tried:
            continue
        tried.add(name)

        if name not in available:
            logger.warning(
                "Provider %s not available, trying next", sanitize_for_log(name)
            )
            failures.append(f"{name}: not available")
            continue

        if not isinstance(provider, str):
            provider = (name, dict(provider[1]))
        try:
            session = ort.InferenceSession(graph_bytes, providers=[provider])
        except Exception as e:
            logger.warning(
                "Provider %s failed to initialize: %s",
                sanitize_for_log(name),
                sanitize_for_log(str(e)),
            )
            failures.append(f"{name}: {e}")
            continue

        active = session.get_providers()
        if active and active[0] != name:
            logger.warning(
                "Provider %s was replaced by %s, trying next",
                sanitize_for_log(name),
                sanitize_for_log(active[0]),
            )
            failures.append(f"{name}: replaced by {active[0]}")
            continue

        logger.info("ONNX session created on %s", sanitize_for_log(name))
        return session, name

    raise ProviderInitializationError(
        "No execution provider could initialize the session: " + "; ".join(failures)
    )
