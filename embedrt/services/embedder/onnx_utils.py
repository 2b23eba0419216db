# =============================================================================
# File: onnx_utils.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""ONNX model input/output preparation and name resolution."""

import logging
from typing import Any, Dict, List, Optional

import numpy as np

from embedrt.logger import get_logger

logger = get_logger("embedder.onnx")

# Output names tried in order before falling back to the first output
_HIDDEN_STATE_OUTPUTS = ["last_hidden_state", "sentence_embedding"]


def get_input_names(session: Any) -> List[str]:
    return [inp.name for inp in session.get_inputs()]


def get_output_names(session: Any) -> List[str]:
    return [out.name for out in session.get_outputs()]


def _find_matching_input(
    name: str, model_input_names: List[str], case_sensitive: bool = True
) -> Optional[str]:
    """Find matching input name in model, with optional case-insensitive search."""
    if name in model_input_names:
        return name
    if case_sensitive:
        return None

    name_lower = name.lower()
    for model_name in model_input_names:
        if model_name.lower() == name_lower:
            return model_name
    return None


def requires_token_type_ids(session: Any) -> bool:
    """Whether the graph declares a token_type_ids input."""
    return (
        _find_matching_input(
            "token_type_ids", get_input_names(session), case_sensitive=False
        )
        is not None
    )


def prepare_onnx_inputs(
    encoding: Any, session: Any, need_token_type_ids: bool
) -> Dict[str, np.ndarray]:
    """Build the session feed from a tokenizer batch encoding.

    Args:
        encoding: Tokenizer output with input_ids and attention_mask arrays
        session: ONNX Runtime session
        need_token_type_ids: Add an all-zero token_type_ids tensor

    Returns:
        Dictionary mapping graph input names to int64 numpy arrays
    """
    model_input_names = get_input_names(session)

    input_ids = np.asarray(encoding["input_ids"], dtype=np.int64)
    if input_ids.ndim == 1:
        input_ids = input_ids[None, :]

    attention_mask = encoding.get("attention_mask")
    if attention_mask is None:
        attention_mask = np.ones_like(input_ids)
    attention_mask = np.asarray(attention_mask, dtype=np.int64).reshape(input_ids.shape)

    input_id_name = (
        _find_matching_input("input_ids", model_input_names, case_sensitive=False)
        or "input_ids"
    )
    inputs: Dict[str, np.ndarray] = {input_id_name: input_ids}

    mask_name = _find_matching_input(
        "attention_mask", model_input_names, case_sensitive=False
    )
    if mask_name:
        inputs[mask_name] = attention_mask

    if need_token_type_ids:
        token_type_ids_name = (
            _find_matching_input(
                "token_type_ids", model_input_names, case_sensitive=False
            )
            or "token_type_ids"
        )
        inputs[token_type_ids_name] = np.zeros_like(input_ids, dtype=np.int64)

    return inputs


def select_hidden_states(outputs: List[np.ndarray], session: Any) -> np.ndarray:
    """Pick the embedding tensor from the session outputs."""
    output_names = get_output_names(session)
    for candidate in _HIDDEN_STATE_OUTPUTS:
        if candidate in output_names:
            return np.asarray(outputs[output_names.index(candidate)])
    return np.asarray(outputs[0])


def log_onnx_outputs(outputs: List[np.ndarray], session: Any) -> None:
    """Log ONNX output tensor information for debugging."""
    if not logger.isEnabledFor(logging.DEBUG):
        return

    for idx, (output, name) in enumerate(zip(outputs, get_output_names(session))):
        logger.debug(
            f"ONNX output {idx} ({name}): shape={output.shape}, dtype={output.dtype}"
        )
