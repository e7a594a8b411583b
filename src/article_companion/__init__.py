"""Article companion: a conversational widget for a displayed article."""

__version__ = "0.1.0"
