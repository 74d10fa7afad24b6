"""Option trees and preset selection for installer configuration steps."""

__version__ = "0.1.0"
__all__ = [
    "labels",
    "optionmodel",
    "options_config",
    "options_step",
    "optiontree",
    "presets",
    "section",
]