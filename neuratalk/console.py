from neuratalk.client import RelayClient
from neuratalk.config import get_settings
from neuratalk.conversation import ConversationStore, Role

PROMPT = "you> "
LABELS = {Role.USER: "you", Role.ASSISTANT: "neuratalk"}


def _print_turn(turn) -> None:
    print(f"{LABELS[turn.role]}: {turn.text}", flush=True)


def handle_line(store: ConversationStore, line: str) -> bool:
    """Apply one line of input to ``store``. Returns False when the user quits."""
    command = line.strip()
    if command == "/quit":
        return False
    if command == "/clear":
        store.clear()
        _print_turn(store.turns[0])
        return True

    seen = len(store.turns)
    if not store.submit(line):
        return True
    for turn in store.turns[seen + 1:]:
        _print_turn(turn)
    if store.error:
        print(f"error: {store.error}", flush=True)
    return True


def main() -> None:
    store = ConversationStore(RelayClient(get_settings().api_base_url))
    _print_turn(store.turns[0])
    print("Type /clear to reset the chat, /quit to leave.", flush=True)
    while True:
        try:
            line = input(PROMPT)
        except (EOFError, KeyboardInterrupt):
            print()
            break
        try:
            if not handle_line(store, line):
                break
        except KeyboardInterrupt:
            print("\n(request interrupted)", flush=True)


if __name__ == "__main__":
    main()
