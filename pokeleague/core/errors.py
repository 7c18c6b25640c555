"""Error taxonomy shared by every domain service.

Services raise these; the HTTP layer maps ``http_status`` onto the response.
"""


class PokeLeagueError(Exception):
    """Base class for all domain errors."""

    http_status: int = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(PokeLeagueError):
    """Input has the wrong shape or violates a domain rule."""

    http_status = 400


class NotFoundError(PokeLeagueError):
    """An id or name does not resolve."""

    http_status = 404


class StateError(PokeLeagueError):
    """The operation is not allowed in the entity's current state."""

    http_status = 400


class AuthError(PokeLeagueError):
    """Missing or bad credentials."""

    http_status = 401


class ForbiddenError(AuthError):
    """Authenticated, but the role is not sufficient."""

    http_status = 403


class InternalError(PokeLeagueError):
    """Unexpected failure inside the service layer."""

    http_status = 500
