"""Utility functions for Foglio."""

from .auth import TokenProvider, load_client_secrets
from .file_utils import get_logical_name, is_small_size, normalize_link, title_case
from .template_utils import load_template, render_template

__all__ = [
    "TokenProvider",
    "load_client_secrets",
    "get_logical_name",
    "is_small_size",
    "normalize_link",
    "title_case",
    "load_template",
    "render_template",
]
