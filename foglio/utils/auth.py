"""Authentication utilities for the Dropbox API."""

import json
import logging
import os
from typing import Callable, Optional, Protocol, Sequence

from google_auth_oauthlib.flow import Flow

from foglio.models import (
    DROPBOX_AUTH_URI,
    DROPBOX_TOKEN_URI,
    AuthenticationError,
    ClientSecrets,
    ConfigurationError,
)

logger = logging.getLogger(__name__)

TOKEN_FILE_PATH = "~/.foglioToken"


class AccessTokenSource(Protocol):
    """Anything able to hand out a Dropbox access token."""

    def get_access_token(self) -> str:
        ...


class StaticTokenSource:
    """Token source returning a fixed token."""

    def __init__(self, token: str):
        self.token = token

    def get_access_token(self) -> str:
        return self.token


def expand_path(path: str) -> str:
    """Expand a home-relative path.

    Raises:
        ConfigurationError: If the home directory cannot be resolved
    """
    expanded = os.path.expanduser(path)
    if expanded.startswith("~"):
        raise ConfigurationError(f"Error expanding path for [{path}]")
    return expanded


def load_client_secrets(credentials_path: str) -> ClientSecrets:
    """Load the OAuth client id and secret from a client secrets file.

    The file uses the usual installed-app layout:
    ``{"installed": {"client_id": ..., "client_secret": ...}}``. The
    ``auth_uri`` and ``token_uri`` keys are optional and default to the
    Dropbox endpoints.

    Args:
        credentials_path: Path to client_secret.json file

    Returns:
        ClientSecrets for the Dropbox app

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    if not os.path.exists(credentials_path):
        raise ConfigurationError(f"Missing client secrets file at {credentials_path}")

    try:
        with open(credentials_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            f"Error reading client secrets file [{credentials_path}]: {e}"
        ) from e

    config = None
    if isinstance(data, dict):
        config = data.get("installed") or data.get("web")
    if not config or "client_id" not in config or "client_secret" not in config:
        raise ConfigurationError(
            f"Client secrets file [{credentials_path}] must define client_id and client_secret"
        )

    return ClientSecrets(
        client_id=config["client_id"],
        client_secret=config["client_secret"],
        auth_uri=config.get("auth_uri", DROPBOX_AUTH_URI),
        token_uri=config.get("token_uri", DROPBOX_TOKEN_URI),
    )


class TokenProvider:
    """Provides a Dropbox access token, cached in a local file.

    A cached token is reused as-is until the cache file is deleted. Without
    one, the user is walked through the OAuth authorization-code flow.
    """

    def __init__(
        self,
        token_path: str = TOKEN_FILE_PATH,
        client_secrets: Optional[ClientSecrets] = None,
        secrets_loader: Optional[Callable[[], ClientSecrets]] = None,
        scopes: Sequence[str] = (),
        prompt: Callable[[str], str] = input,
        show: Callable[[str], None] = print,
    ):
        """Initialize the token provider.

        Args:
            token_path: Path of the token cache file
            client_secrets: OAuth client settings
            secrets_loader: Called for client settings when none were given,
                only once the interactive flow is actually needed
            scopes: OAuth scopes to request, empty for the app defaults
            prompt: Reads the authorization code from the user
            show: Displays messages to the user
        """
        self.token_path = token_path
        self.client_secrets = client_secrets
        self.secrets_loader = secrets_loader
        self.scopes = list(scopes)
        self.prompt = prompt
        self.show = show

    def get_access_token(self) -> str:
        """Return the cached token, or authorize interactively for a new one."""
        token_file = expand_path(self.token_path)

        token = self.read_cached_token(token_file)
        if token:
            logger.debug("Using cached access token from %s", token_file)
            return token

        token = self.authorize()
        self.save_token(token_file, token)
        return token

    def read_cached_token(self, token_file: str) -> Optional[str]:
        """Read the cached token exactly as stored, line endings included.

        Raises:
            ConfigurationError: If the cache file is not valid UTF-8
        """
        try:
            with open(token_file, "r", encoding="utf-8", newline="") as f:
                return f.read() or None
        except UnicodeDecodeError as e:
            raise ConfigurationError(f"Error reading token file [{token_file}]: {e}") from e
        except OSError:
            return None

    def save_token(self, token_file: str, token: str) -> None:
        """Save the token for the next run; failures only get logged."""
        try:
            with open(token_file, "w", encoding="utf-8", newline="") as f:
                f.write(token)
        except OSError as e:
            logger.warning("Error saving token to file [%s]: %s", token_file, e)

    def _get_client_secrets(self) -> ClientSecrets:
        if self.client_secrets is None:
            if self.secrets_loader is None:
                raise ConfigurationError("No client secrets configured for authorization")
            self.client_secrets = self.secrets_loader()
        return self.client_secrets

    def authorize(self) -> str:
        """Run the authorization-code flow and return the access token.

        Raises:
            AuthenticationError: If no code is entered or the exchange fails
        """
        secrets = self._get_client_secrets()
        # Dropbox may grant more scopes than requested (account_info.read always comes along).
        os.environ.setdefault("OAUTHLIB_RELAX_TOKEN_SCOPE", "1")
        flow = Flow.from_client_config(
            secrets.to_client_config(),
            scopes=self.scopes,
            autogenerate_code_verifier=True,
        )

        url, _ = flow.authorization_url()
        self.show(f"Visit the URL for the auth dialog: {url}")

        try:
            code = self.prompt("Enter code: ").strip()
        except EOFError as e:
            raise AuthenticationError(f"Error getting code: {e}") from e
        if not code:
            raise AuthenticationError("Error getting code: no authorization code entered")

        try:
            token = flow.fetch_token(code=code)
        except Exception as e:
            raise AuthenticationError(f"Error getting token from code [{code}]: {e}") from e

        access_token = token.get("access_token") if token else None
        if not access_token:
            raise AuthenticationError(f"No access token returned for code [{code}]")
        return access_token
