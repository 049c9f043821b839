"""
Shared helpers for the Interactive Skill Assessment engine.
"""
from .logger import get_logger
from .numbers import round_half_up

__all__ = ["get_logger", "round_half_up"]
