"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidPeriodError(DomainException):
    """Business period key is malformed or out of range"""

    pass


class CustomerNotFoundError(DomainException):
    """No ledger entry exists for the customer in the selected period"""

    pass


class OverpaymentError(DomainException):
    """Payment amount exceeds the customer's outstanding balance"""

    pass


class RecordsAPIError(DomainException):
    """Remote records store returned an error or is unavailable"""

    pass
