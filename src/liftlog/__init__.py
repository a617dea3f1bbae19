"""liftlog: a personal workout tracker backed by an embedded SQLite store."""

__version__ = "0.1.0"
