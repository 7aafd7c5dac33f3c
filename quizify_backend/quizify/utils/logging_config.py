"""Logging configuration helpers for the quiz backend."""

from __future__ import annotations

import logging
from logging import Logger
from typing import Optional


def configure_logging(level: Optional[str] = None) -> Logger:
    """Configure basic logging for the service and return the package logger."""
    logging.basicConfig(
        level=(level or "INFO").upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("quizify")
