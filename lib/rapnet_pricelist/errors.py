from __future__ import annotations


class RapnetClientError(Exception):
    """Base client error."""


class NetworkError(RapnetClientError):
    """Transport/network layer error."""


class ApiError(RapnetClientError):
    def __init__(self, status_code: int, message: str, details: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class AuthError(ApiError):
    """Auth-related API error."""


class MissingArgumentError(RapnetClientError, ValueError):
    """A required query parameter was None or empty."""

    def __init__(self, name: str):
        super().__init__(f"missing required argument: {name}")
        self.name = name


class AuthorizationRedirect(RapnetClientError):
    """
    Raised by RapnetClient.authorize() to hand the browser over to the
    identity provider. Web handlers catch it and answer with a redirect.
    """

    status_code = 302

    def __init__(self, location: str):
        super().__init__(f"redirect to {location}")
        self.location = location

    @property
    def headers(self) -> dict[str, str]:
        return {"Location": self.location}
