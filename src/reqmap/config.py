"""
Environment variable configuration.

Contains:
- Config: logging settings, source file suffix and the routing annotation name
"""

from __future__ import annotations

import logging
import os


class Config:
    """
    Centralized configuration read from environment variables.
    """

    # logging configuration
    LOG_LEVEL: int = logging.getLevelNamesMapping().get(
        os.getenv("REQMAP_LOG_LEVEL", "INFO").upper(),
        logging.INFO,
    )
    LOG_FORMAT: str = os.getenv("REQMAP_LOG_FORMAT", "%(message)s")
    LOG_DATE_FORMAT: str = os.getenv("REQMAP_LOG_DATE_FORMAT", "%Y-%m-%d %H:%M:%S")

    # scanning
    SOURCE_SUFFIX: str = os.getenv("REQMAP_SOURCE_SUFFIX", ".java")
    ANNOTATION: str = os.getenv(
        "REQMAP_ANNOTATION",
        "org.springframework.web.bind.annotation.RequestMapping",
    )

    @classmethod
    def annotation_names(cls) -> frozenset[str]:
        """Names the routing annotation may be written as: simple or fully qualified."""
        simple = cls.ANNOTATION.rsplit(".", 1)[-1]
        return frozenset({simple, cls.ANNOTATION})
