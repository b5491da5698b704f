"""Dishwasher rotation by load, with split credit and per-person PINs."""

__version__ = "0.1.0"
