import logging
import sys
from typing import Optional, TextIO


class _BelowLevelFilter(logging.Filter):
    def __init__(self, limit: int) -> None:
        super().__init__()
        self._limit = limit

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._limit


def configure_split_stream_logging(
    *,
    level: int = logging.INFO,
    stderr_level: int = logging.WARNING,
    formatter: Optional[logging.Formatter] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> None:
    """Configure root logging so that lint output stays on stdout.

    Records below ``stderr_level`` go to stdout, the rest to stderr. The lint
    CLI prints its report on stdout, so keeping diagnostics of the tool itself
    on stderr lets callers pipe the JSON report without noise.
    """

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    if formatter is None:
        formatter = logging.Formatter("%(name)s - %(levelname)s - %(message)s")

    stderr_level = max(stderr_level, logging.DEBUG)

    out_handler = logging.StreamHandler(stream=stdout or sys.stdout)
    out_handler.setLevel(logging.DEBUG)
    out_handler.addFilter(_BelowLevelFilter(stderr_level))
    out_handler.setFormatter(formatter)

    err_handler = logging.StreamHandler(stream=stderr or sys.stderr)
    err_handler.setLevel(stderr_level)
    err_handler.setFormatter(formatter)

    root.addHandler(out_handler)
    root.addHandler(err_handler)
