"""Faculty research records API: book chapters, copyrights and journals."""

__version__ = "0.1.0"
