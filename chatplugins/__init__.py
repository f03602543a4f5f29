"""Protocol-independent logic for group-chat bot features: scores, sleep, wordle, tarot, hot words, quotation and picture databases."""

__version__ = "0.1.0"