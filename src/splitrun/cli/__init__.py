"""splitrun command-line interface."""
