"""aia: AI terminal assistant."""

__version__ = "0.3.0"
