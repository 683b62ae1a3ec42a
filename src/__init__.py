"""
genevec - Source Package

This package contains the real-valued vector species, its per-gene mutation
operators and the hierarchical configuration that selects them.
"""

__version__ = "1.0.0"

# Package-level imports for convenience
from src.core.config import settings

__all__ = [
    "settings",
    "__version__",
]
