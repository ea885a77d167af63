"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class VerificationFailed(DomainError):
    """The identity provider rejected the login or the callback was unusable.

    Covers provider rejection, malformed or cancelled callbacks and
    provider round-trips that time out.
    """

    pass


class StoreUnavailable(DomainError):
    """The persistence layer could not be reached or a write failed.

    Raised for connectivity loss, timeouts and constraint failures other
    than the expected external id uniqueness race.
    """

    pass


class DuplicateExternalIdError(DomainError):
    """An insert collided with an existing record for the same external id."""

    def __init__(self, external_id: str):
        self.external_id = external_id
        super().__init__(f"User record already exists for external id {external_id}")


class SessionCorrupted(DomainError):
    """A session token was present but could not be parsed or verified."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")
