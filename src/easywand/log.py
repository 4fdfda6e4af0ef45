from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager


def make_logger(name: str = "easywand", level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


@contextmanager
def timed(logger: logging.Logger, msg: str) -> Iterator[None]:
    t0 = time.perf_counter()
    logger.debug("%s ...", msg)
    yield
    logger.debug("%s done in %.3fs", msg, time.perf_counter() - t0)
