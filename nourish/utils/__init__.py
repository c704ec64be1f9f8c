"""
Utility Modules

Configuration loading and clock helpers.
"""

from nourish.utils.config import load_config, Config
from nourish.utils.clock import Clock, system_clock, fixed_clock

__all__ = ["load_config", "Config", "Clock", "system_clock", "fixed_clock"]
