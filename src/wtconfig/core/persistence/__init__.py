"""Persistence collaborators for configuration scopes.

This subpackage keeps ScopeStores durable between runs with support for
testing via an in-memory fake.
"""

from wtconfig.core.persistence.abc import ConfigPersistence
from wtconfig.core.persistence.fake import FakeConfigPersistence
from wtconfig.core.persistence.real import GitFileConfigPersistence

__all__ = [
    "ConfigPersistence",
    "FakeConfigPersistence",
    "GitFileConfigPersistence",
]
