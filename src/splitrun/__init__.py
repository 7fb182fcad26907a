"""splitrun - run a collection's top-level folders concurrently and report failures in order."""

__version__ = "0.1.0"
