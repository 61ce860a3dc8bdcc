"""
lotocore/utils/errors.py
Error taxonomy for the combinatorics, closing and analysis core.
"""
from __future__ import annotations

from typing import Any


class LotoCoreError(ValueError):
    """Base class for every error the core reports to its callers."""


class InvalidInput(LotoCoreError):
    """Malformed game or pool: wrong size, duplicates, out-of-range values."""

    def __init__(self, message: str, values: Any = None):
        super().__init__(message)
        self.values = values


class CombinatorialLimitExceeded(LotoCoreError):
    def __init__(self, n: int, k: int, count: int, ceiling: int):
        super().__init__(
            f"C({n},{k}) = {count} combinations exceeds the ceiling of {ceiling}. "
            f"Select fewer numbers."
        )
        self.n = n
        self.k = k
        self.count = count
        self.ceiling = ceiling


class InsufficientPool(LotoCoreError):
    def __init__(self, pool_size: int, required: int):
        super().__init__(f"Pool has {pool_size} numbers, at least {required} required")
        self.pool_size = pool_size
        self.required = required


class EmptyHistory(LotoCoreError):
    def __init__(self, operation: str):
        super().__init__(f"No draws available for {operation}")
        self.operation = operation


class TemplateMismatch(LotoCoreError):
    def __init__(self, template_name: str, expected: int, actual: int):
        super().__init__(
            f"Template {template_name} needs exactly {expected} numbers, got {actual}"
        )
        self.template_name = template_name
        self.expected = expected
        self.actual = actual


class GenerationCancelled(LotoCoreError):
    """Raised when a caller-supplied cancel signal stops an enumeration."""
