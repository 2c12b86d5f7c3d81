"""Scoped CSS: scope selectors with a generated class and collate the results into one file."""

__version__ = "1.0.0"