"""Foglio: portfolio posts generated from Dropbox shared photos."""

__version__ = "0.2.0"
