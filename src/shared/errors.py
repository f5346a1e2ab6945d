"""Errors shared across domains."""


class CollaboratorError(Exception):
    """The external datastore failed to serve a read or accept a write.

    Raised by repositories; calculators never raise it themselves.
    """

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        message = f"{operation} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
