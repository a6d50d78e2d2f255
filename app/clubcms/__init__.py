"""Admin backend for club events and team members."""

__version__ = "0.1.0"
