"""Renewable Charge: per-car charging engine for the RFID toy-car game."""

__version__ = "0.1.0"
