from typing import Any, Optional, Sequence, Union

PathKey = Union[str, int]


def dig(tree: Any, path: Sequence[PathKey]) -> Optional[str]:
    """Walk ``path`` through nested dicts/lists and return the string found there.

    String keys index mappings, integer keys index lists. Any missing step,
    wrong container type or non-string leaf gives ``None``.
    """
    node = tree
    for key in path:
        if isinstance(key, int):
            if not isinstance(node, list) or not -len(node) <= key < len(node):
                return None
            node = node[key]
        else:
            if not isinstance(node, dict) or key not in node:
                return None
            node = node[key]
    return node if isinstance(node, str) else None
