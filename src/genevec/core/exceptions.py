"""
Exception types for the genevec mutation framework.

Configuration problems are raised eagerly while a species is being set up;
mutation itself only raises on states that setup validation rules out.
"""

from typing import Any, Optional


class GeneVecError(Exception):
    """Base exception for genevec errors."""

    def __init__(self, message: str, key: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.key = key
        self.value = value


class ConfigurationError(GeneVecError, ValueError):
    """Fatal configuration error detected during species setup."""


class ParameterError(ConfigurationError):
    """A required parameter is missing or its value cannot be parsed."""


class MutationError(GeneVecError, RuntimeError):
    """Illegal state reached while mutating a gene."""
