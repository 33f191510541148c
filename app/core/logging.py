import logging
import sys

# Third-party loggers that flood INFO with per-statement / per-request lines
NOISY_LOGGERS = (
    "sqlalchemy.engine",
    "aiosqlite",
    "httpx",
)


def setup_logging(level: str = "INFO") -> None:
    """
    Configure process-wide logging once at startup.

    Domain modules only call logging.getLogger(__name__); handlers and
    format live here.
    """
    root_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=root_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))
