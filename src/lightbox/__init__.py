"""Photo gallery service backed by a hosted record and object store."""

__version__ = "0.1.0"
