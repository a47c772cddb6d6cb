"""Data models for decoded readings."""

from .reading import DecodedReading
