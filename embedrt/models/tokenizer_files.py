# =============================================================================
# File: tokenizer_files.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import os
from typing import Dict, List

from pydantic import BaseModel, ConfigDict

TOKENIZER_FILE = "tokenizer.json"
CONFIG_FILE = "config.json"
SPECIAL_TOKENS_MAP_FILE = "special_tokens_map.json"
TOKENIZER_CONFIG_FILE = "tokenizer_config.json"


class TokenizerFiles(BaseModel):
    """Raw contents of the files needed to build a tokenizer.

    Equality is by value: two sets holding identical bytes compare equal.
    """

    tokenizer_file: bytes
    config_file: bytes
    special_tokens_map_file: bytes
    tokenizer_config_file: bytes

    model_config = ConfigDict(frozen=True)

    @staticmethod
    def file_names() -> Dict[str, str]:
        """Field name to on-disk file name for every role."""
        return {
            "tokenizer_file": TOKENIZER_FILE,
            "config_file": CONFIG_FILE,
            "special_tokens_map_file": SPECIAL_TOKENS_MAP_FILE,
            "tokenizer_config_file": TOKENIZER_CONFIG_FILE,
        }

    def missing_roles(self) -> List[str]:
        """File names of roles whose content is empty."""
        return [
            file_name
            for field, file_name in self.file_names().items()
            if not getattr(self, field)
        ]

    @classmethod
    def from_dir(cls, directory: str) -> "TokenizerFiles":
        """Read every role from ``directory``. Raises OSError if a file is absent."""
        contents = {}
        for field, file_name in cls.file_names().items():
            with open(os.path.join(directory, file_name), "rb") as f:
                contents[field] = f.read()
        return cls(**contents)
