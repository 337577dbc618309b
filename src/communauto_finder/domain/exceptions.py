"""Errors raised at the availability fetch boundary."""


class FetchError(Exception):
    """A single availability fetch did not produce a usable document."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class TransportError(FetchError):
    """The API could not be reached."""


class StatusError(FetchError):
    """The API answered with a non-success HTTP status."""

    def __init__(self, status_code: int, reason: str | None = None) -> None:
        super().__init__(reason or f"Error {status_code} in API call")
        self.status_code = status_code


class DecodeError(FetchError):
    """The response body did not match the expected document shape."""
