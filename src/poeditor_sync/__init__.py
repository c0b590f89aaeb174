"""Keep a POEditor project's term list in sync with a local key declaration."""

__version__ = "0.3.0"
