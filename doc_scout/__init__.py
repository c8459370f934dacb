"""
DocScout package initializer.
Defines package version and exposes the exploration entry point.
"""
__version__ = "0.1.0"

from doc_scout.engine import Engine, explore, explore_async

__all__ = ["__version__", "Engine", "explore", "explore_async"]
