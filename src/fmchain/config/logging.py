"""structlog configuration for fmchain.

Two output modes, both on stderr so stdout stays pipeable
(``fmchain preview note.md > out.md``):

- Human (default): colored console output
- JSON (``--log-json``): one structured JSON object per line

``--verbose`` opens the ``fmchain`` logger to DEBUG, except for loggers
listed in :data:`VERBOSE_LEVELS` that would flood a batch run.  The
``[logging] levels`` table of ``fmchain.toml`` overrides any logger.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping

import structlog

# The codec logs one DEBUG line per skipped frontmatter line.
VERBOSE_LEVELS: dict[str, int] = {
    "fmchain.domain.codec": logging.INFO,
}

# Loggers whose level was set by the previous configure_logging() call.
_tuned: set[str] = set()


class _FmchainHandler(logging.StreamHandler):
    """Marks the stderr handler installed by :func:`configure_logging`."""


def parse_level(name: str) -> int:
    """Map a level name (``"debug"``, ``"WARNING"``) to its number."""
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        msg = f"Unknown log level: {name!r}"
        raise ValueError(msg)
    return level


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    levels: Mapping[str, str] | None = None,
) -> None:
    """Configure structlog processors, output routing and logger levels.

    Args:
        verbose: Enable DEBUG-level output. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
        levels: Per-logger level names that win over both defaults.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        shared_processors.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = _FmchainHandler(sys.stderr)
    handler.setFormatter(formatter)

    # Replace only our own handler; handlers added by an embedding host stay.
    root_logger = logging.getLogger()
    for existing in [h for h in root_logger.handlers if isinstance(h, _FmchainHandler)]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    _apply_levels(verbose, levels or {})


def _apply_levels(verbose: bool, overrides: Mapping[str, str]) -> None:
    for name in _tuned:
        logging.getLogger(name).setLevel(logging.NOTSET)
    _tuned.clear()

    wanted: dict[str, int] = {"fmchain": logging.DEBUG if verbose else logging.WARNING}
    if verbose:
        wanted.update(VERBOSE_LEVELS)
    wanted.update({name: parse_level(level) for name, level in overrides.items()})

    for name, level in wanted.items():
        logging.getLogger(name).setLevel(level)
        _tuned.add(name)
