"""Remote storage access for Foglio."""

from .dropbox_manager import DropboxManager

__all__ = ["DropboxManager"]
