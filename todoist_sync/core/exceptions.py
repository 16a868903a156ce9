__all__ = [
    "ValidationError",
    "TransportError",
    "DecodingError",
]


class ValidationError(Exception):
    """
    Raised when an entity is constructed with invalid values.

    Examples:

    - {obj}`Section` created with an empty name
    """

    errors: list[str]

    def __init__(self, errors: list[str] | str):
        self.errors = [errors] if isinstance(errors, str) else errors
        errors_str = "\n".join([e for e in self.errors])
        super().__init__(f"Errors found during validation: {errors_str}")


class TransportError(Exception):
    """
    Raised when a request can't be built or executed, or the server responds
    with an error status.
    """

    status_code: int | None

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class DecodingError(Exception):
    """
    Raised when a response body is malformed or doesn't match the expected
    shape.
    """


def _assert_validate(cond: bool, *args):
    """
    Helper to raise a validation error if the condition is False.
    """
    if cond is not True:
        raise ValidationError(*args)
