"""Flowcheck workflow validator.

Static analysis and quality scoring for business workflow graphs.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
