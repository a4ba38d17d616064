"""Reading, analysing and exactly rewriting deflate streams and PNG IDAT chunks."""

__version__ = "0.1.0"