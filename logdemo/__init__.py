"""Synthetic log demo service: emits leveled log lines on a timer and on demand."""

__version__ = "1.0.0"
