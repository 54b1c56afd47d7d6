"""
Utility modules for the appraisal engine.
"""

from .formatting import format_currency, round_half_up
from .config import Config
from .logging_config import configure_logging

__all__ = [
    "format_currency",
    "round_half_up",
    "Config",
    "configure_logging",
]
