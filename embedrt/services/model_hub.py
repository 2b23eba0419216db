# =============================================================================
# File: model_hub.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

"""Fetching catalog model artifacts from the Hugging Face hub into a local cache."""

import os
from enum import Enum
from typing import List, Optional, Protocol, Tuple, runtime_checkable

from huggingface_hub import hf_hub_download
from huggingface_hub.errors import EntryNotFoundError, HfHubHTTPError
from huggingface_hub.utils import (
    are_progress_bars_disabled,
    disable_progress_bars,
    enable_progress_bars,
)
from tqdm.auto import tqdm

from embedrt.exceptions import CacheIOError, ModelDownloadError
from embedrt.logger import get_logger
from embedrt.models.model_info import ModelInfo
from embedrt.models.tokenizer_files import TokenizerFiles
from embedrt.utils.log_sanitizer import sanitize_for_log

logger = get_logger("model_hub")


@runtime_checkable
class DownloadProgress(Protocol):
    """Receives download progress for one model, counted in files.

    ``init(total_files, repo_id)`` is called once per model, not once per
    file, with the number of files to fetch and the hub repository id.
    ``update(1)`` follows after each file is in the cache, and ``finish()``
    after the last one. No byte counts are reported; the hub's
    own byte-level bars are shown only with built-in reporting.

    Calls happen synchronously on the thread that builds the runtime.
    """

    def init(self, total_files: int, repo_id: str) -> None: ...

    def update(self, files_done: int) -> None: ...

    def finish(self) -> None: ...


class ProgressPolicy(str, Enum):
    NONE = "none"
    BUILTIN = "builtin"
    CUSTOM = "custom"


class ModelHub:
    """Resolves a catalog entry to its graph bytes and tokenizer files."""

    @staticmethod
    def files_for(model_info: ModelInfo) -> List[str]:
        return [model_info.model_file] + list(TokenizerFiles.file_names().values())

    @staticmethod
    def resolve(
        model_info: ModelInfo,
        cache_dir: str,
        progress_policy: ProgressPolicy = ProgressPolicy.BUILTIN,
        custom_progress: Optional[DownloadProgress] = None,
    ) -> Tuple[bytes, TokenizerFiles]:
        """Download (or reuse from ``cache_dir``) every file the model needs.

        Returns:
            Tuple of (onnx graph bytes, tokenizer files)
        """
        try:
            os.makedirs(cache_dir, exist_ok=True)
        except OSError as e:
            logger.error(
                "Cannot create cache directory %s: %s",
                sanitize_for_log(cache_dir),
                sanitize_for_log(str(e)),
            )
            raise CacheIOError(f"Cannot create cache directory {cache_dir}: {e}") from e

        files = ModelHub.files_for(model_info)
        show_builtin = progress_policy == ProgressPolicy.BUILTIN
        reporter = custom_progress if progress_policy == ProgressPolicy.CUSTOM else None

        logger.info(
            "Resolving %s (%d files) into %s",
            sanitize_for_log(model_info.model_code),
            len(files),
            sanitize_for_log(cache_dir),
        )

        # hf_hub_download draws its own byte-level bars; silence them unless
        # built-in reporting is requested.
        restore_bars = not show_builtin and not are_progress_bars_disabled()
        if restore_bars:
            disable_progress_bars()
        try:
            paths = ModelHub._download_all(
                model_info.model_code, files, cache_dir, show_builtin, reporter
            )
        finally:
            if restore_bars:
                enable_progress_bars()

        try:
            with open(paths[0], "rb") as f:
                graph_bytes = f.read()
            tokenizer_files = TokenizerFiles.from_dir(os.path.dirname(paths[1]))
        except OSError as e:
            logger.error(
                "Cannot read cached files for %s: %s",
                sanitize_for_log(model_info.model_code),
                sanitize_for_log(str(e)),
            )
            raise CacheIOError(f"Cannot read cached model files: {e}") from e

        return graph_bytes, tokenizer_files

    @staticmethod
    def _download_all(
        repo_id: str,
        files: List[str],
        cache_dir: str,
        show_builtin: bool,
        reporter: Optional[DownloadProgress],
    ) -> List[str]:
        if reporter is not None:
            reporter.init(len(files), repo_id)

        paths = []
        for filename in tqdm(files, desc=repo_id, unit="file", disable=not show_builtin):
            paths.append(ModelHub._download_file(repo_id, filename, cache_dir))
            if reporter is not None:
                reporter.update(1)

        if reporter is not None:
            reporter.finish()
        return paths

    @staticmethod
    def _download_file(repo_id: str, filename: str, cache_dir: str) -> str:
        try:
            return hf_hub_download(repo_id=repo_id, filename=filename, cache_dir=cache_dir)
        except (EntryNotFoundError, HfHubHTTPError) as e:
            logger.error(
                "Failed to fetch %s from %s: %s",
                sanitize_for_log(filename),
                sanitize_for_log(repo_id),
                sanitize_for_log(str(e)),
            )
            raise ModelDownloadError(f"Cannot fetch {filename} from {repo_id}: {e}") from e
        except OSError as e:
            logger.error(
                "Cache I/O failed for %s: %s",
                sanitize_for_log(filename),
                sanitize_for_log(str(e)),
            )
            raise CacheIOError(f"Cache I/O failed for {filename}: {e}") from e
