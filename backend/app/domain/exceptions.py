class DomainError(Exception):
    """Base for errors the API layer turns into an HTTP status."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(DomainError):
    """Missing, or not owned by the caller (404)."""

    def __init__(self, entity: str, identifier: str) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} '{identifier}' not found")


class ValidationError(DomainError):
    """Input rejected before anything is written (422)."""


class UnauthorizedError(DomainError):
    """No caller identity on the request (401)."""


class InfrastructureError(DomainError):
    """A backing store or relay failed: MongoDB, Redis or SMTP (500)."""
