"""
Compat Status - periodic status.dat / objects.cache export
"""

__version__ = "0.1.0"
