"""Models for Foglio."""

from dataclasses import dataclass
from typing import Dict

DROPBOX_AUTH_URI = "https://www.dropbox.com/oauth2/authorize"
DROPBOX_TOKEN_URI = "https://api.dropboxapi.com/oauth2/token"


@dataclass(frozen=True)
class RemoteFile:
    """Represents a plain file in the remote Dropbox directory."""
    name: str
    path_lower: str


@dataclass(frozen=True)
class ShareLink:
    """Represents a public shared link to a remote file."""
    name: str
    url: str


@dataclass
class PortfolioElement:
    """A logical photo with its small and large size links."""
    title: str
    small_size_link: str = ""
    large_size_link: str = ""

    @property
    def is_complete(self) -> bool:
        """True when both size variants have a link."""
        return bool(self.small_size_link and self.large_size_link)

    @property
    def description(self) -> str:
        return self.title.lower()

    @property
    def post_filename(self) -> str:
        return self.title.lower().replace(" ", "-") + ".md"

    def to_template_context(self) -> Dict[str, str]:
        """Fields available to the post template."""
        return {
            "name": self.title,
            "smallSizeLink": self.small_size_link,
            "largeSizeLink": self.large_size_link,
            "description": self.description,
        }


@dataclass(frozen=True)
class ClientSecrets:
    """OAuth application settings for the Dropbox app."""
    client_id: str
    client_secret: str
    auth_uri: str = DROPBOX_AUTH_URI
    token_uri: str = DROPBOX_TOKEN_URI

    def to_client_config(self) -> Dict[str, Dict[str, str]]:
        """Client config in the layout expected by google_auth_oauthlib."""
        return {
            "installed": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
            }
        }


class FoglioError(Exception):
    """Base exception for Foglio operations."""

class ConfigurationError(FoglioError):
    """Raised when paths, templates or secrets are unusable."""

class AuthenticationError(FoglioError):
    """Raised when authentication fails."""

class ApiError(FoglioError):
    """Raised when Dropbox API calls fail."""

class RenderError(FoglioError):
    """Raised when a post template fails to render."""

class OutputError(FoglioError):
    """Raised when a rendered post cannot be written."""
