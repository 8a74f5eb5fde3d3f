"""Domain error taxonomy.

Services raise these; the handlers registered in ``eventhub.main`` turn them
into the JSON error body with the matching HTTP status.
"""
from fastapi import status


class EventHubError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal Server Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(EventHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"


class AuthenticationFailed(EventHubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"


class Unauthenticated(EventHubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"


class Forbidden(EventHubError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"


class NotFound(EventHubError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"


class DuplicateKey(EventHubError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"


class RateLimited(EventHubError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error = "Too Many Requests"
