"""File name and link utilities for Foglio."""

import re

SMALL_SIZE_SUFFIX = "-small"
IMAGE_EXTENSIONS = (".jpg", ".png")

WEB_VIEWER_HOST = "www.dropbox.com"
DIRECT_CONTENT_HOST = "dl.dropboxusercontent.com"
PREVIEW_QUERY = "?dl=0"

_WORD_START = re.compile(r"(?<!\w)(\w)")


def _trim_suffix(value: str, suffix: str) -> str:
    if suffix and value.endswith(suffix):
        return value[: -len(suffix)]
    return value


def strip_extension(filename: str) -> str:
    """Strip a trailing image extension from a filename.

    At most one of ``.jpg`` and ``.png`` is removed, checked in that order.
    """
    for extension in IMAGE_EXTENSIONS:
        if filename.endswith(extension):
            return filename[: -len(extension)]
    return filename


def is_small_size(filename: str) -> bool:
    """Check if a filename is the small size variant of a photo.

    Args:
        filename: Remote filename, with or without extension

    Returns:
        True if the name without extension ends with the small size suffix
    """
    return strip_extension(filename).endswith(SMALL_SIZE_SUFFIX)


def get_logical_name(filename: str) -> str:
    """Get the name of a photo independent of its size variant and extension.

    Args:
        filename: Remote filename

    Returns:
        Filename without extension and small size suffix
    """
    return _trim_suffix(strip_extension(filename), SMALL_SIZE_SUFFIX)


def title_case(name: str) -> str:
    """Capitalize the first letter of each word, leaving the rest untouched.

    Any non-word character (space, hyphen, punctuation) separates words.

    Args:
        name: Name to convert

    Returns:
        Title-cased name
    """
    return _WORD_START.sub(lambda m: m.group(1).upper(), name)


def normalize_link(url: str) -> str:
    """Turn a shared link into a direct content link.

    Args:
        url: Shared link as returned by Dropbox

    Returns:
        Link served from the content host without the preview parameter
    """
    link = url.replace(WEB_VIEWER_HOST, DIRECT_CONTENT_HOST, 1)
    return _trim_suffix(link, PREVIEW_QUERY)
