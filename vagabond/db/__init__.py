"""
Database layer for Vagabond.

- Session management over the DataStax Cassandra driver
- Authentication selection
- Current migration pointer persisted in the tracking table
- Statement logging
"""

from .auth import (
    NoAuth, PasswordAuth, CredentialCheck, CredentialOutcome,
    check_credentials, build_auth_provider
)
from .pointer import CurrentPointerStore
from .session import CassandraSession, CassandraSessionManager

__all__ = [
    'NoAuth',
    'PasswordAuth',
    'CredentialCheck',
    'CredentialOutcome',
    'check_credentials',
    'build_auth_provider',
    'CurrentPointerStore',
    'CassandraSession',
    'CassandraSessionManager',
]
