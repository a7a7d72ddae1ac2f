"""Configuration constants, environment overrides, and .env loading.

WHY: A handful of engine defaults (animation colors, transcript grouping
limits, log level) are things a host application wants to tune without
touching code. Keeping them as plain module-level constants makes them easy
to find and to override from the environment.

HOW: python-dotenv loads the .env file on import. Each tunable is a
module-level constant read through os.getenv with a hard-coded fallback.
configure_logging() is offered to hosts; the library itself never installs
handlers.

RULES:
- Every tunable reads a SUBTITLE_BURNER_* environment variable
- Invalid numeric overrides fall back to the built-in default
- The undo cap, minimum cue duration and cue text limit are NOT tunables;
  they are fixed constants of the engine modules
- Importing this module has no side effects beyond reading .env
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

# Load .env from the working directory (where the host application runs)
load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Caption animation colors
# ---------------------------------------------------------------------------

DEFAULT_HIGHLIGHT_COLOR = os.getenv("SUBTITLE_BURNER_HIGHLIGHT_COLOR", "#ffff00")
"""Color of the spoken/active word when the cue style sets none."""

DEFAULT_UPCOMING_COLOR = os.getenv(
    "SUBTITLE_BURNER_UPCOMING_COLOR", "rgba(255, 255, 255, 0.5)"
)
"""Tint for words not yet reached (karaoke / word-highlight)."""

# ---------------------------------------------------------------------------
# Transcript word grouping defaults
# ---------------------------------------------------------------------------

DEFAULT_MAX_WORDS_PER_CUE = _env_int("SUBTITLE_BURNER_MAX_WORDS_PER_CUE", 10)
DEFAULT_MAX_CUE_DURATION = _env_float("SUBTITLE_BURNER_MAX_CUE_DURATION", 5.0)
DEFAULT_BREAK_ON_PUNCTUATION = (
    os.getenv("SUBTITLE_BURNER_BREAK_ON_PUNCTUATION", "true").lower() == "true"
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("SUBTITLE_BURNER_LOG_LEVEL", "WARNING")


def configure_logging(level: str | None = None) -> None:
    """Install a basic root handler for hosts that have none.

    WHY: The engine logs no-op diagnostics and undo/redo transitions at
    DEBUG. Scripts and notebooks embedding the engine want to see them
    without writing their own logging setup.

    HOW: Delegates to logging.basicConfig with the level from the argument,
    or SUBTITLE_BURNER_LOG_LEVEL, or WARNING.

    RULES:
    - Unknown level names fall back to WARNING
    - Never called by the library itself
    """
    name = (level or LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
