"""ausbiz_api — read-only projection API for the ausbiz dashboard."""

__version__ = "0.1.0"
