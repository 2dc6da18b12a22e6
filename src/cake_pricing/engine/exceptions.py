"""Errors raised by the pricing engine and the rules table."""


class ValidationError(ValueError):
    """An order configuration that cannot be priced."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RulesTableError(ValueError):
    """A pricing structure that failed validation."""

    def __init__(self, errors: list[str], warnings: list[str] = None):
        super().__init__("Invalid pricing structure: " + "; ".join(errors))
        self.errors = list(errors)
        self.warnings = list(warnings or [])
