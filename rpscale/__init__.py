"""Scale readings, stable-weight tracking, serial device discovery and mobile discovery services."""

__version__ = "0.1.0"