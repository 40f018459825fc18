"""Client-side view-model layer for the academy management dashboard."""

__version__ = "0.3.0"
