"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class CardNotFoundError(DomainException):
    """Referenced card id does not resolve to a card"""

    pass


class PurchaseNotFoundError(DomainException):
    """Referenced installment record does not exist"""

    pass


class InvalidPurchaseDataError(DomainException):
    """Purchase amount or installment count is out of range"""

    pass


class InvalidMonthError(DomainException):
    """Invoice month is not a valid YYYY-MM value"""

    pass


class CategoryAlreadyExistsError(DomainException):
    """A category with the same name is already registered"""

    pass
