"""
Central configuration for the minefield solver.

Preset field dimensions, the relaxation engine's constants and the logging
format used by the command-line front end.
"""

import logging
import sys
from typing import Dict

# Preset fields: name -> keyword arguments for a minefield backend
PRESETS: Dict[str, Dict[str, int]] = {
    "beginner": {"width": 10, "height": 10, "mine_count": 10},
    "intermediate": {"width": 16, "height": 16, "mine_count": 40},
    "expert": {"width": 30, "height": 16, "mine_count": 99},
}
DEFAULT_PRESET = "beginner"

# The solver always opens the top-left corner first; a lazily generated
# field guarantees the first sweep is safe.
FIRST_PROBE = (0, 0)

# Probability relaxation. Heuristic values, kept as-is.
MAX_RELAXATION_ITERATIONS = 100
CONVERGENCE_TOLERANCE = 1e-4

# Slack allowed when comparing frontier mass against the remaining mine budget
BUDGET_TOLERANCE = 1e-3

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def preset_dimensions(name: str) -> Dict[str, int]:
    """
    Look up a preset by name (case-insensitive).

    Raises:
        ValueError: If the preset is unknown.
    """
    key = name.lower()
    if key not in PRESETS:
        raise ValueError(
            f"Unknown preset {name!r}; expected one of {sorted(PRESETS)}."
        )
    return dict(PRESETS[key])


def configure_logging(verbosity: int = 0) -> None:
    """Send log records to stderr; 0 = WARNING, 1 = INFO, 2+ = DEBUG."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(stream=sys.stderr, level=level, format=LOG_FORMAT)
