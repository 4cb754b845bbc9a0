"""Scribe Matching Engine - pairs students with qualified exam scribes."""

__version__ = "1.0.0"
