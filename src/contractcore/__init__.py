"""contractcore - consumer/producer contracts with dual-sided values."""

__version__ = "0.1.0"
