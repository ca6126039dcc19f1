"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ParseError(DomainException):
    """Workbook bytes could not be read or have no header row"""

    pass


class StructuralError(DomainException):
    """Sheet rows cannot be grouped into loans (strict assembly only)"""

    def __init__(self, message: str, row_number: int):
        super().__init__(message)
        self.row_number = row_number
