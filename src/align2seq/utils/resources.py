"""
Runtime resources, package-wide exceptions and optional dependency management.
"""
from functools import cached_property, lru_cache
from importlib import import_module
from warnings import warn
import os
from typing import Callable


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class Align2SeqError(Exception):
    """Base class for all errors raised by align2seq."""


class Align2SeqWarning(Warning): pass
class DependencyWarning(Align2SeqWarning): pass


# Classes --------------------------------------------------------------------------------------------------------------
class Resources:
    """Holds process-wide settings and probes for optional dependencies."""
    MAX_CELLS_VARIABLE = 'ALIGN2SEQ_MAX_CELLS'
    DEFAULT_MAX_CELLS = 2 ** 31 - 1  # Largest scratch matrix a 32-bit allocation can address

    @cached_property
    def max_cells(self) -> int:
        """
        Maximum number of cells (``len1 * len2``) a single alignment may allocate.

        Read from the ``ALIGN2SEQ_MAX_CELLS`` environment variable on first access, can be overridden by assignment.
        """
        if (value := os.environ.get(self.MAX_CELLS_VARIABLE)) is None: return self.DEFAULT_MAX_CELLS
        try: cells = int(value)
        except ValueError:
            raise ValueError(f'{self.MAX_CELLS_VARIABLE} must be an integer, got "{value}"') from None
        if cells < 1: raise ValueError(f'{self.MAX_CELLS_VARIABLE} must be positive, got {cells}')
        return cells

    @staticmethod
    @lru_cache(maxsize=None)
    def has_module(module_name: str) -> bool:
        """Checks if a python package is installed."""
        try:
            import_module(module_name)
            return True
        except ImportError: return False


# Functions ------------------------------------------------------------------------------------------------------------
@lru_cache(maxsize=None)
def _warn_missing(module_name: str, consequence: str):
    """Warns about a missing optional dependency, once per process."""
    warn(f'{module_name} is not installed, {consequence}', DependencyWarning, stacklevel=3)


# Decorators -----------------------------------------------------------------------------------------------------------
def jit(signature_or_function=None, **options) -> Callable:
    """
    Conditional Numba JIT decorator.

    If 'numba' is installed (checked via RESOURCES), this applies `numba.jit`
    with the provided arguments. Otherwise, it returns the original function unmodified,
    ignoring any compilation options, and issues a single DependencyWarning for the process.

    Examples:
        >>> @jit  # Bare usage
        ... def func(): ...

        >>> @jit(nopython=True, cache=True)  # Configured usage
        ... def func(): ...
    """
    # 1. Fallback: Numba not installed
    if not RESOURCES.has_module('numba'):
        _warn_missing('numba', 'kernels will run as pure Python')
        if callable(signature_or_function): return signature_or_function  # Handle bare @jit
        def passthrough(func: Callable) -> Callable: return func  # Handle @jit(...)
        return passthrough
    # 2. Apply Numba
    from numba import jit as real_jit
    if callable(signature_or_function): return real_jit(signature_or_function)  # Handle bare @jit
    return real_jit(signature_or_function, **options)  # Handle @jit(...)


# Constants ------------------------------------------------------------------------------------------------------------
RESOURCES = Resources()
