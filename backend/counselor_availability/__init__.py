"""Counselor recurring-availability service: weekly templates and slot expansion."""

__version__ = "0.1.0"
