"""Study Desk: a local lecture library catalog kept in sync with a master folder."""

__version__ = "0.1.0"
