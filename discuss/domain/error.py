"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class UnauthenticatedError(DomainError):
    """Raised when an action requires a signed-in viewer."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Authentication required to {action}")


class ValidationFailedError(DomainError):
    """Raised when input is rejected locally, before any remote call."""

    pass


class NotAuthorizedError(DomainError):
    """Raised when a user attempts to modify content they don't own."""

    def __init__(self, resource: str, resource_id: str, user_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            f"User {user_id} is not authorized to modify {resource} {resource_id}"
        )


class RemoteRejectedError(DomainError):
    """Raised when the remote side answered with a non-success result."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class RemoteUnavailableError(DomainError):
    """Raised when the remote side could not be reached."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")
