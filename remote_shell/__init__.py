"""Directory-aware remote shell sessions over SSH."""

__version__ = "0.1.0"
