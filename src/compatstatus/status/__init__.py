"""
Compat Status Derivation Module
"""

from compatstatus.status.calculator import UNREACHABLE_OUTPUT, StatusCalculator

__all__ = [
    "StatusCalculator",
    "UNREACHABLE_OUTPUT",
]
