import requests

from neuratalk.extract import dig

UNREADABLE_REPLY = "I could not understand the response from the server."
FALLBACK_ERROR = "Something went wrong while talking to NeuraTalk. Please try again."


class RelayClient:
    """HTTP client for the relay's ``POST /api/chat`` endpoint."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    def send(self, message: str) -> str:
        response = requests.post(f"{self.base_url}/api/chat", json={"message": message})
        response.raise_for_status()
        reply = dig(response.json(), ("reply",))
        return reply if reply and reply.strip() else UNREADABLE_REPLY


def describe_failure(exc: BaseException) -> str:
    """Pick the message to show for a failed send.

    A structured ``error`` from the relay's JSON body wins, then the
    exception's own message, then a fixed fallback.
    """
    response = getattr(exc, "response", None)
    if response is not None:
        try:
            data = response.json()
        except ValueError:
            data = None
        error = dig(data, ("error",))
        if error:
            return error
    if str(exc):
        return f"Something went wrong: {exc}"
    return FALLBACK_ERROR
