# =============================================================================
# File: conftest.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import json
import logging
import os

import numpy as np
import onnx
import pytest
from onnx import TensorProto, helper, numpy_helper
from tokenizers import Tokenizer
from tokenizers.models import WordLevel
from tokenizers.pre_tokenizers import Whitespace

from embedrt.config.config_loader import ConfigLoader
from embedrt.models.tokenizer_files import TokenizerFiles

VOCAB = {
    "[PAD]": 0,
    "[UNK]": 1,
    "[CLS]": 2,
    "[SEP]": 3,
    "hello": 4,
    "world": 5,
    "embedding": 6,
    "runtime": 7,
    "fast": 8,
    "text": 9,
}
HIDDEN_DIM = 4


def word_embedding_table() -> np.ndarray:
    """Row i is [i + 1, 1, 0, i / 2], so every token has a distinct vector."""
    ids = np.arange(len(VOCAB), dtype=np.float32)
    return np.stack(
        [ids + 1, np.ones_like(ids), np.zeros_like(ids), ids / 2], axis=1
    ).astype(np.float32)


def build_graph_bytes(with_token_type_ids: bool = True) -> bytes:
    """Tiny encoder: embedding lookup (+ type lookup) masked by attention_mask."""
    def int_input(name):
        return helper.make_tensor_value_info(name, TensorProto.INT64, ["batch", "seq"])

    inputs = [int_input("input_ids"), int_input("attention_mask")]
    initializers = [
        numpy_helper.from_array(word_embedding_table(), name="word_emb"),
        numpy_helper.from_array(np.array([-1], dtype=np.int64), name="last_axis"),
    ]
    nodes = [helper.make_node("Gather", ["word_emb", "input_ids"], ["words"], axis=0)]
    hidden = "words"

    if with_token_type_ids:
        inputs.append(int_input("token_type_ids"))
        type_table = np.array([[0.0] * HIDDEN_DIM, [1.0] * HIDDEN_DIM], dtype=np.float32)
        initializers.append(numpy_helper.from_array(type_table, name="type_emb"))
        nodes.append(
            helper.make_node("Gather", ["type_emb", "token_type_ids"], ["types"], axis=0)
        )
        nodes.append(helper.make_node("Add", ["words", "types"], ["summed"]))
        hidden = "summed"

    nodes.extend(
        [
            helper.make_node(
                "Cast", ["attention_mask"], ["mask_f"], to=TensorProto.FLOAT
            ),
            helper.make_node("Unsqueeze", ["mask_f", "last_axis"], ["mask_3d"]),
            helper.make_node("Mul", [hidden, "mask_3d"], ["last_hidden_state"]),
        ]
    )
    output = helper.make_tensor_value_info(
        "last_hidden_state", TensorProto.FLOAT, ["batch", "seq", HIDDEN_DIM]
    )
    graph = helper.make_graph(
        nodes, "tiny_encoder", inputs, [output], initializer=initializers
    )
    model = helper.make_model(graph, opset_imports=[helper.make_opsetid("", 13)])
    model.ir_version = 8
    onnx.checker.check_model(model)
    return model.SerializeToString()


def build_tokenizer_files(model_max_length: int = 512) -> TokenizerFiles:
    tokenizer = Tokenizer(WordLevel(vocab=VOCAB, unk_token="[UNK]"))
    tokenizer.pre_tokenizer = Whitespace()
    special_tokens_map = {
        "unk_token": "[UNK]",
        "pad_token": "[PAD]",
        "cls_token": "[CLS]",
        "sep_token": "[SEP]",
    }
    tokenizer_config = {
        "model_max_length": model_max_length,
        "pad_token": {"content": "[PAD]", "special": True},
    }
    return TokenizerFiles(
        tokenizer_file=tokenizer.to_str().encode("utf-8"),
        config_file=json.dumps({"pad_token_id": 0}).encode("utf-8"),
        special_tokens_map_file=json.dumps(special_tokens_map).encode("utf-8"),
        tokenizer_config_file=json.dumps(tokenizer_config).encode("utf-8"),
    )


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Every test starts from default settings with no EMBEDRT_* overrides."""
    for name in list(os.environ):
        if name.startswith("EMBEDRT_"):
            monkeypatch.delenv(name, raising=False)
    ConfigLoader.clear_cache()
    yield
    ConfigLoader.clear_cache()


@pytest.fixture(autouse=True, scope="session")
def silence_noisy_loggers():
    """Keep expected warnings from provider fallback out of the test output."""
    noisy_loggers = [
        "embedrt.config_loader",
        "embedrt.embedder.options",
        "embedrt.embedder.resources",
    ]
    previous_levels = {}
    for name in noisy_loggers:
        logger = logging.getLogger(name)
        previous_levels[name] = logger.level
        logger.setLevel(logging.ERROR)

    yield

    for name, level in previous_levels.items():
        logging.getLogger(name).setLevel(level)


@pytest.fixture(scope="session")
def graph_bytes() -> bytes:
    return build_graph_bytes(with_token_type_ids=True)


@pytest.fixture(scope="session")
def graph_bytes_without_token_type_ids() -> bytes:
    return build_graph_bytes(with_token_type_ids=False)


@pytest.fixture
def tokenizer_files() -> TokenizerFiles:
    return build_tokenizer_files()


class _Node:
    def __init__(self, name):
        self.name = name


class FakeSession:
    """Session stand-in recording the provider it was created with."""

    failing_providers: set = set()
    replaced_providers: set = set()
    input_names = ["input_ids", "attention_mask", "token_type_ids"]

    def __init__(self, model, providers=None, **kwargs):
        provider = providers[0]
        self.provider = provider if isinstance(provider, str) else provider[0]
        if self.provider in self.failing_providers:
            raise RuntimeError(f"{self.provider} cannot initialize")
        self.model = model

    def get_providers(self):
        if self.provider in self.replaced_providers:
            return ["CPUExecutionProvider"]
        return [self.provider, "CPUExecutionProvider"]

    def get_inputs(self):
        return [_Node(name) for name in self.input_names]

    def get_outputs(self):
        return [_Node("last_hidden_state")]

    def run(self, output_names, inputs):
        batch, seq = inputs["input_ids"].shape
        return [np.ones((batch, seq, HIDDEN_DIM), dtype=np.float32)]


@pytest.fixture
def fake_onnxruntime(monkeypatch):
    """Patch onnxruntime with FakeSession and a configurable provider list.

    Returns the FakeSession class so tests can set failing/replaced providers.
    """
    import onnxruntime as ort

    class _Session(FakeSession):
        failing_providers = set()
        replaced_providers = set()

    monkeypatch.setattr(ort, "InferenceSession", _Session)
    monkeypatch.setattr(
        ort,
        "get_available_providers",
        lambda: [
            "FirstExecutionProvider",
            "SecondExecutionProvider",
            "CUDAExecutionProvider",
            "CPUExecutionProvider",
        ],
    )
    return _Session


class RecordingProgress:
    """DownloadProgress implementation that records every call."""

    def __init__(self):
        self.calls = []

    def init(self, total_files, repo_id):
        self.calls.append(("init", total_files, repo_id))

    def update(self, files_done):
        self.calls.append(("update", files_done))

    def finish(self):
        self.calls.append(("finish",))


@pytest.fixture
def recording_progress() -> RecordingProgress:
    return RecordingProgress()
