"""Exception types raised by the launch pad."""


class LaunchPadError(Exception):
    """Base class for launch pad errors."""


class UpstreamError(LaunchPadError):
    """A request to GitHub or the codechecker roster failed.

    Covers non-success HTTP responses, transport failures and payloads that
    cannot be decoded into the expected shape.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


class ConfigurationError(LaunchPadError, ValueError):
    """An unknown repository, certificate type or category key was used."""
