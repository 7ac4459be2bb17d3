"""Clean YouTube captions into readable transcripts and summarise them."""

__version__ = "0.1.0"
