"""Chat-driven flashcards: add cards or get quizzed in plain language."""

__version__ = "0.1.0"
