"""Tree Helpers: the value semantics shared by every key-value store adapter.

Invariants:
    - prune() drops None values and empty maps recursively; a fully pruned
      value is None, which every adapter treats as "delete this path"
    - flatten()/unflatten() are inverses for pruned maps
    - Map keys are always str in the stored tree
"""

import copy
from typing import Any, Iterable, Iterator


def split_path(path: str) -> tuple[str, ...]:
    return tuple(s for s in path.split("/") if s)


def join_path(parts: Iterable[str]) -> str:
    return "/".join(parts)


def prune(value: Any) -> Any:
    """Deep-copy value with None leaves and empty maps removed."""
    if value is None:
        return None
    if isinstance(value, dict):
        out = {}
        for k, v in value.items():
            pv = prune(v)
            if pv is not None:
                out[str(k)] = pv
        return out or None
    return copy.deepcopy(value)


def flatten(parts: tuple[str, ...], value: Any) -> Iterator[tuple[str, Any]]:
    """Yield (path, leaf) pairs for a pruned value rooted at parts."""
    if isinstance(value, dict):
        for k, v in value.items():
            yield from flatten(parts + (k,), v)
    else:
        yield join_path(parts), value


def unflatten(base: tuple[str, ...], leaves: Iterable[tuple[str, Any]]) -> Any:
    """Rebuild the subtree at base from (path, leaf) pairs below it."""
    tree: dict[str, Any] = {}
    depth = len(base)
    for path, value in leaves:
        rel = split_path(path)[depth:]
        if not rel:
            return copy.deepcopy(value)
        node = tree
        for seg in rel[:-1]:
            node = node.setdefault(seg, {})
        node[rel[-1]] = copy.deepcopy(value)
    return tree or None
