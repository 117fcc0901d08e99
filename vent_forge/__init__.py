"""Generador paramétrico de rejillas de ventilación imprimibles."""

__version__ = "0.1.0"
