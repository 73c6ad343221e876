"""
Cycle-safe deep copy of JSON-like values.

Used by the normalizer (to detach and untangle untrusted input) and by the
canonical encoder (to produce a key-sorted tree that json can serialize).
"""
import logging
import math
from typing import Any, Dict, List, Set, Tuple

logger = logging.getLogger(__name__)

# Composites nested deeper than this below the root are dropped, which keeps
# copy.deepcopy, json and pydantic well inside the recursion limit.
MAX_DEPTH = 64


class _Missing:
    """Marker for a value that has no place in the copied tree"""

    def __repr__(self):
        return "MISSING"


MISSING = _Missing()


def acyclic_copy(value: Any, sort_keys: bool = False, max_depth: int = MAX_DEPTH) -> Any:
    """
    Copy a JSON-like value, dropping anything reached a second time.

    The walk uses an explicit stack, so input depth never touches the Python
    call stack. Mutable composites (dicts and lists) are tracked by identity
    in a visited set for the whole traversal, not just the current path. A
    composite seen before, or nested more than max_depth levels below the
    root, is omitted from a mapping and becomes None inside a sequence.
    Values with no JSON form are treated the same way, and non-finite floats
    become None.

    Mapping keys are converted to strings. When two keys convert to the same
    string the first one in iteration order wins. With sort_keys, keys are
    ordered by Unicode code point (Python string order), which differs from
    UTF-16 code unit order only for keys containing astral characters.

    Args:
        value: Any value, possibly self-referencing
        sort_keys: Emit mapping keys in lexicographic order
        max_depth: Deepest composite nesting kept below the root

    Returns:
        A fresh tree of dict/list/str/int/float/bool/None, or MISSING when
        the root itself has no JSON form
    """
    visited: Set[int] = set()
    root: Dict[str, Any] = {}
    # (value, depth, container receiving the copy, key or index in it)
    stack: List[Tuple[Any, int, Any, Any]] = [(value, 0, root, "value")]

    while stack:
        obj, depth, parent, slot = stack.pop()

        if isinstance(obj, (dict, list, tuple)):
            if depth > max_depth:
                logger.debug(f"Dropping value nested deeper than {max_depth} levels")
                continue
            if isinstance(obj, (dict, list)):
                if id(obj) in visited:
                    continue
                visited.add(id(obj))

            if isinstance(obj, dict):
                out: Any = {}
                children = _string_keyed(obj)
                if sort_keys:
                    children.sort(key=lambda kv: kv[0])
            else:
                out = [None] * len(obj)
                children = list(enumerate(obj))

            parent[slot] = out
            # Reversed so siblings are copied, and visited, in order
            for key, item in reversed(children):
                stack.append((item, depth + 1, out, key))
            continue

        copied = _scalar(obj)
        if copied is not MISSING:
            parent[slot] = copied

    return root.get("value", MISSING)


def _scalar(obj: Any) -> Any:
    if obj is None or isinstance(obj, (str, bool, int)):
        return obj
    if isinstance(obj, float):
        return obj if math.isfinite(obj) else None
    return MISSING


def _string_keyed(obj: Dict[Any, Any]) -> List[Tuple[str, Any]]:
    pairs: List[Tuple[str, Any]] = []
    seen: Set[str] = set()
    for key, item in obj.items():
        text = key if isinstance(key, str) else str(key)
        if text in seen:
            logger.debug(f"Dropping key {key!r}: collides with an earlier {text!r}")
            continue
        seen.add(text)
        pairs.append((text, item))
    return pairs
