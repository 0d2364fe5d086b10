"""
Cassandra authentication selection.

Authentication is chosen once, when the session is built, from the
username/password pair. Both or neither must be given; a one-sided pair is
reported as a warning and the connection continues unauthenticated.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from cassandra.auth import PlainTextAuthProvider


class CredentialOutcome(str, Enum):
    """Result of validating the username/password pair."""
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"
    ONE_SIDED = "one_sided"


@dataclass(frozen=True)
class NoAuth:
    """Connect without authentication."""
    pass


@dataclass(frozen=True)
class PasswordAuth:
    """Connect with Cassandra's password authenticator."""
    username: str
    password: str = field(repr=False)


Auth = Union[NoAuth, PasswordAuth]


@dataclass(frozen=True)
class CredentialCheck:
    """Outcome of ``check_credentials`` together with the selected auth."""
    outcome: CredentialOutcome
    auth: Auth
    warning: Optional[str] = None


def check_credentials(username: Optional[str], password: Optional[str]) -> CredentialCheck:
    """Select the authentication mode for a username/password pair.

    Args:
        username: Value of CASSANDRA_USER, if any
        password: Value of CASSANDRA_PASSWORD, if any

    Returns:
        CredentialCheck with ``PasswordAuth`` only when both are present
    """
    if username and password:
        return CredentialCheck(CredentialOutcome.AUTHENTICATED, PasswordAuth(username, password))
    if not username and not password:
        return CredentialCheck(CredentialOutcome.UNAUTHENTICATED, NoAuth())
    return CredentialCheck(
        CredentialOutcome.ONE_SIDED,
        NoAuth(),
        warning=("One of username and password have been provided, but not both. "
                 "Continuing with no authentication.")
    )


def build_auth_provider(auth: Auth) -> Optional[PlainTextAuthProvider]:
    """Translate the selected auth into a driver auth provider."""
    if isinstance(auth, PasswordAuth):
        return PlainTextAuthProvider(username=auth.username, password=auth.password)
    return None
