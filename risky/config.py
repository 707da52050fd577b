"""
Single place for default game configuration.
Values can be overridden through environment variables (RISKY_LOG_LEVEL, RISKY_SEED).
"""

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_PLAYER_COUNT = 2

# Level name for the "risky" logger hierarchy (DEBUG shows every state change)
LOG_LEVEL = os.environ.get("RISKY_LOG_LEVEL", "WARNING").upper()


def _seed_from_env() -> int | None:
    raw = os.environ.get("RISKY_SEED")
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring RISKY_SEED=%r: not an integer, games will not be reproducible", raw)
        return None


# Seed used by main.py when none is given; None = nondeterministic
DEFAULT_SEED = _seed_from_env()


def configure_logging(level: str | int | None = None) -> None:
    """Attach a stream handler to the "risky" logger at the configured level."""
    logger = logging.getLogger("risky")
    logger.setLevel(level if level is not None else LOG_LEVEL)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
