# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Logging setup for the jobscale command line."""

import logging
import sys
from typing import Optional, TextIO

import structlog

from jobscale.defaults import LOG_FORMATS, LOG_LEVELS, ScaleDefaults

JOBSCALE_LOGGER = "jobscale"

# Applied to every stdlib record before rendering, for both formats
SHARED_PROCESSORS = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]


def _build_formatter(fmt: str) -> structlog.stdlib.ProcessorFormatter:
    processors = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if fmt == "JSON":
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        # ConsoleRenderer formats exc_info itself
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=SHARED_PROCESSORS, processors=processors
    )


def configure_jobscale_logging(
    level: str = ScaleDefaults.log_level,
    fmt: str = ScaleDefaults.log_format,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Install a single handler on the ``jobscale`` logger.

    Records from ``logging.getLogger(__name__)`` loggers are rendered by
    structlog: HUMAN as aligned console lines, JSON as one object per line
    with ``event``, ``level``, ``logger`` and ``timestamp`` keys.

    Args:
        level: One of DEBUG, INFO, WARN, ERROR (case-insensitive)
        fmt: HUMAN or JSON (case-insensitive)
        stream: Output stream (defaults to stderr)

    Returns:
        logging.Logger: The configured ``jobscale`` logger

    Raises:
        ValueError: If level or fmt is not recognised
    """
    level, fmt = level.upper(), fmt.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Invalid log level {level!r}, expected one of {LOG_LEVELS}")
    if fmt not in LOG_FORMATS:
        raise ValueError(f"Invalid log format {fmt!r}, expected one of {LOG_FORMATS}")

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(_build_formatter(fmt))

    root = logging.getLogger(JOBSCALE_LOGGER)
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel("WARNING" if level == "WARN" else level)
    root.propagate = False
    return root
