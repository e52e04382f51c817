"""Resolution of Analytics Engine API credentials."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .config import BackendConfig

ACCOUNT_ID_ENV = "CF_ACCOUNT_ID"
API_TOKEN_ENV = "CF_API_TOKEN"

SOURCE_EXPLICIT = "explicit"
SOURCE_ENV = "env"
SOURCE_NONE = "none"


class MissingCredentialsError(Exception):
    """Raised when no account id / API token pair can be found."""

    def __init__(self):
        super().__init__(
            "No API credentials found. Pass --account-id and --api-token, "
            "set them under 'backend' in the config file, or set "
            f"{ACCOUNT_ID_ENV} and {API_TOKEN_ENV} environment variables."
        )


@dataclass(frozen=True)
class Credentials:
    """Account id and token together with where they came from."""

    account_id: Optional[str]
    api_token: Optional[str]
    source: str

    @property
    def available(self) -> bool:
        return self.source != SOURCE_NONE

    def require(self) -> Tuple[str, str]:
        """Return (account_id, api_token) or raise MissingCredentialsError."""
        if not self.available:
            raise MissingCredentialsError()
        return self.account_id, self.api_token

    def __repr__(self) -> str:
        # Never print the token
        return f"Credentials(account_id={self.account_id!r}, source={self.source!r})"


def resolve_credentials(
    backend: BackendConfig,
    environ: Optional[Mapping[str, str]] = None,
) -> Credentials:
    """Pick credentials from explicit settings first, then the environment.

    A source is only used when it provides both the account id and the
    token; half-configured sources are ignored.

    Args:
        backend: Backend settings (CLI options already merged in)
        environ: Environment mapping, defaults to os.environ

    Returns:
        Resolved credentials, with source "none" when nothing was found
    """
    if environ is None:
        environ = os.environ

    if backend.account_id and backend.api_token:
        return Credentials(backend.account_id, backend.api_token, SOURCE_EXPLICIT)

    env_account_id = environ.get(ACCOUNT_ID_ENV)
    env_api_token = environ.get(API_TOKEN_ENV)
    if env_account_id and env_api_token:
        return Credentials(env_account_id, env_api_token, SOURCE_ENV)

    return Credentials(None, None, SOURCE_NONE)
