"""
Usage Patterns - usage-control policy pattern engine.

Classifies IDS usage-control contracts into a fixed catalog of known
patterns and synthesizes canonical example contracts for each pattern.
"""

__version__ = "0.1.0"
__author__ = "Usage Patterns Contributors"

from usagecontrol.config import PatternsConfig, load_config

__all__ = ["PatternsConfig", "load_config", "__version__"]
