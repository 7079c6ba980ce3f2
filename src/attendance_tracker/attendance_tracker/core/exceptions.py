class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConflictError(DomainError):
    """Raised when an action clashes with the current state of a day-record."""


class NotFoundError(DomainError):
    """Raised when an action needs a record that does not exist."""


class AlreadyCheckedInError(ConflictError):
    pass


class AlreadyCheckedOutError(ConflictError):
    pass


class AlreadyOnBreakError(ConflictError):
    pass


class NotOnBreakError(ConflictError):
    pass


class NotCheckedInError(ConflictError):
    pass


class DuplicateRecordError(ConflictError):
    """A record already exists for the (employee, date) pair.

    Also raised by repositories when the storage unique key rejects an insert.
    """


class NoRecordFoundError(NotFoundError):
    """No day-record exists for the employee on the requested date."""


class RecordNotFoundError(NotFoundError):
    """No record exists with the given identity."""
