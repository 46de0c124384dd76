"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as duplicate heads or a balance sheet collision."""


class StorageError(RuntimeError):
    """The storage backend failed while executing an operation."""


def society_not_found(society_id: int) -> str:
    """Return message for missing society."""
    return f"Society {society_id} not found"


def account_head_not_found(account_head_id: int) -> str:
    """Return message for missing account head."""
    return f"Account head {account_head_id} not found"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing cash book entry."""
    return f"Cash book entry {entry_id} not found"


def invalid_identifier(kind: str, value: object) -> str:
    """Return message for a malformed identifier."""
    return f"Invalid {kind} '{value}'"


def duplicate_account_head() -> str:
    return "Account head already exists"


def balance_sheet_side_conflict(account_head_id: int, side: str) -> str:
    """Return message when the opposite side is already on the balance sheet."""
    return (
        f"Opposite side of account head {account_head_id} is already mapped to "
        f"Balance Sheet (requested {side}). Remove mapping first."
    )
