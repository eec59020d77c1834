"""
utils/errors.py
---------------
Exception hierarchy shared by every layer.

    UserStoreError
    ├── ValidationError     bad input, raised before any I/O
    ├── SchemaError         an entity describes columns that cannot be mapped
    ├── ConfigurationError  bad runtime settings (e.g. unknown backend)
    └── StorageError        connectivity, statement or row-decoding failures

Layers add context by raising a new error `from` the lower one, so the
original driver exception stays reachable through `__cause__`.
"""


class UserStoreError(Exception):
    """Base class for all errors raised by this project."""


class ValidationError(UserStoreError, ValueError):
    """Input rejected by the service layer."""


class SchemaError(UserStoreError):
    """An entity descriptor cannot be translated into a table definition."""


class ConfigurationError(UserStoreError):
    """A configuration value is missing or not understood."""


class StorageError(UserStoreError):
    """The storage backend failed to execute a statement or decode a row."""
