import itertools
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from neuratalk.client import describe_failure

logger = logging.getLogger(__name__)

WELCOME_TEXT = "Hi, I am NeuraTalk. Ask me anything about code, ideas, or content."
CLEARED_TEXT = "Chat cleared. I am ready for your next question."


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class RequestState(str, Enum):
    IDLE = "idle"
    AWAITING_REPLY = "awaiting-reply"
    ERROR_SHOWN = "error-shown"


@dataclass(frozen=True)
class Turn:
    id: str
    role: Role
    text: str


class ChatSender(Protocol):
    def send(self, message: str) -> str: ...


_sequence = itertools.count()


def _new_turn(role: Role, text: str) -> Turn:
    return Turn(id=f"{role.value}-{time.time_ns()}-{next(_sequence)}", role=role, text=text)


def _seeded(text: str) -> Turn:
    return Turn(id="welcome", role=Role.ASSISTANT, text=text)


class ConversationStore:
    """In-memory transcript of one chat session plus its request state.

    Only confirmed exchanges end up in ``turns``: the user turn is appended as
    soon as it is submitted, the assistant turn only when the relay replies.
    Failures are kept in ``error`` and never become turns.
    """

    def __init__(self, client: ChatSender) -> None:
        self.client = client
        self._turns: list[Turn] = [_seeded(WELCOME_TEXT)]
        self.state = RequestState.IDLE
        self.error: Optional[str] = None

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def is_loading(self) -> bool:
        return self.state is RequestState.AWAITING_REPLY

    def submit(self, text: str) -> bool:
        """Send ``text`` to the relay. Returns False when the submission is ignored."""
        message = text.strip()
        if not message or self.is_loading:
            return False

        self.error = None
        self._turns.append(_new_turn(Role.USER, message))
        self.state = RequestState.AWAITING_REPLY

        try:
            reply = self.client.send(message)
        except Exception as e:
            self.error = describe_failure(e)
            logger.info("Chat request failed: %s", self.error)
        else:
            self._turns.append(_new_turn(Role.ASSISTANT, reply))
        finally:
            # never left awaiting, even when send is interrupted
            self.state = RequestState.ERROR_SHOWN if self.error else RequestState.IDLE
        return True

    def clear(self) -> None:
        self._turns = [_seeded(CLEARED_TEXT)]
        self.error = None
        self.state = RequestState.IDLE
