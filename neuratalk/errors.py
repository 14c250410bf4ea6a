class RelayError(Exception):
    """A failure the relay reports to the caller as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidRequest(RelayError):
    status_code = 400


class ServerMisconfigured(RelayError):
    status_code = 500


class UpstreamError(RelayError):
    """Gemini answered, but with a failure status."""


class TransportFailure(RelayError):
    """Network, parse or otherwise unexpected fault while relaying."""

    status_code = 500
