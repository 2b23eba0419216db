import logging
import os
from typing import Optional

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(
    name: str = "embedrt",
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
) -> logging.Logger:
    if log_dir is None:
        log_dir = os.getenv("EMBEDRT_LOG_DIR")
    if not name.startswith("embedrt"):
        name = f"embedrt.{name}"

    logger = logging.getLogger(name)
    logger.setLevel(os.getenv("EMBEDRT_LOG_LEVEL", "INFO").upper())
    formatter = logging.Formatter(_LOG_FORMAT)

    # Console handler
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        ch = logging.StreamHandler()
        ch.setFormatter(formatter)
        logger.addHandler(ch)

    # File handler, only when a log folder is configured
    if log_dir:
        if not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)
        if log_file is None:
            log_file = "embedrt.log"
        log_path = os.path.join(log_dir, log_file)
        if not any(
            isinstance(h, logging.FileHandler)
            and h.baseFilename == os.path.abspath(log_path)
            for h in logger.handlers
        ):
            fh = logging.FileHandler(log_path, encoding="utf-8")
            fh.setFormatter(formatter)
            logger.addHandler(fh)

    return logger
