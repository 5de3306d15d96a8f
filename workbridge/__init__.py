"""Workbridge - job board matching engine for skilled workers."""

__version__ = "0.1.0"
