"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class StructureError(DomainError):
    """The ledger is missing a column the overview cannot be built without."""


class CompilationError(DomainError):
    """A formula could not be composed from the given inputs."""


class ConfigError(DomainError):
    """Invalid or unreadable configuration."""


class CacheIOError(Exception):
    """Durable cache tier failed to read, write or (de)serialize a value.

    Never surfaced to callers: the cache store logs it and recomputes.
    """


def missing_columns(names: list[str]) -> str:
    """Return message for ledger columns that could not be found."""
    return f"Required columns not found: {', '.join(names)}"


def empty_ledger(sheet_name: str) -> str:
    """Return message for a ledger without a header row."""
    return f"Ledger '{sheet_name}' is empty: a header row is required"
