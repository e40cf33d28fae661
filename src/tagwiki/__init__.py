"""TagWiki: a flat-file wiki backend with tags derived from page bodies."""

__version__ = "0.1.0"
