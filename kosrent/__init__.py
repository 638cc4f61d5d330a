"""Kos (boarding house) rental marketplace backend"""

__version__ = "1.0.0"
