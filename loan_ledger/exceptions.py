"""Custom exception hierarchy for loan-ledger."""


class LoanLedgerError(Exception):
    """Base exception for all loan-ledger errors."""


class ValidationError(LoanLedgerError):
    """Raised when input is malformed or a required field is missing.

    Parameters
    ----------
    field : str
        Name of the offending field.
    constraint : str
        Human readable description of what was expected.
    """

    def __init__(self, field: str, constraint: str) -> None:
        self.field = field
        self.constraint = constraint
        super().__init__(f"{field}: {constraint}")


class EntityNotFoundError(LoanLedgerError):
    """Raised when a referenced entity does not exist."""


class LoanNotFoundError(EntityNotFoundError):
    """Raised when a loan id is unknown to the store."""


class EventNotFoundError(EntityNotFoundError):
    """Raised when a payment, prepayment or spent id is unknown on a loan."""


class TypeMismatchError(LoanLedgerError):
    """Raised when an operation is invalid for the loan's type."""


class InvalidEntityStateError(LoanLedgerError):
    """Raised when an entity is in an invalid state for the operation."""


class ConfigurationError(LoanLedgerError):
    """Raised when configuration is invalid or missing."""


class StorageError(LoanLedgerError):
    """Raised when a storage backend fails to read or write a document."""
