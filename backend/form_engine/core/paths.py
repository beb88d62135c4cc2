"""Canonical dotted paths and reads/writes against the state tree."""
import copy
from typing import Any, Iterator, List, Sequence, Tuple

from form_engine.core.exceptions import PathError
from form_engine.core.state import Group, Leaf, Node

SEPARATOR = '.'


def join_path(parent_path: str, name: str) -> str:
    return f"{parent_path}{SEPARATOR}{name}" if parent_path else name


def split_path(path: str) -> List[str]:
    if not path:
        raise PathError("Path must not be empty")
    parts = path.split(SEPARATOR)
    if any(not part for part in parts):
        raise PathError(f"Path '{path}' has an empty segment")
    return parts


def resolve(tree: Group, path: str, default: Any = None) -> Any:
    """Return the leaf value at ``path``, or ``default`` when anything along it is missing."""
    node: Node = tree
    for part in split_path(path):
        if not isinstance(node, Group):
            return default
        node = node.get(part)
        if node is None:
            return default
    if isinstance(node, Group):
        return default
    return node.value


def assign(tree: Group, path: str, value: Any) -> Group:
    """Return a new tree with ``value`` written at ``path``.

    Only the nodes from the root down to the written leaf are rebuilt;
    missing intermediate groups are created empty. Writing below an
    existing leaf is an error. The stored value is a deep copy, so later
    changes to the caller's object do not reach the tree.
    """
    return _assign(tree, split_path(path), value, path)


def _assign(node: Group, parts: Sequence[str], value: Any, path: str) -> Group:
    head, rest = parts[0], parts[1:]
    if not rest:
        return node.with_child(head, Leaf(copy.deepcopy(value)))
    child = node.get(head)
    if child is None:
        child = Group()
    elif not isinstance(child, Group):
        raise PathError(f"Cannot write '{path}': '{head}' holds a value, not a group")
    return node.with_child(head, _assign(child, rest, value, path))


def iter_leaf_paths(tree: Group, parent_path: str = '') -> Iterator[Tuple[str, Any]]:
    for name, child in tree.children.items():
        path = join_path(parent_path, name)
        if isinstance(child, Group):
            yield from iter_leaf_paths(child, path)
        else:
            yield path, child.value


def find_descriptor(fields, path: str):
    """Locate the field addressed by ``path``.

    Returns ``(descriptor, parent_path)`` so the caller can hand both to the
    interpreter. Paths ending on a group or naming unknown fields raise.
    """
    parent_path = ''
    siblings = fields
    parts = split_path(path)
    for index, part in enumerate(parts):
        descriptor = next((f for f in siblings if f.name == part), None)
        if descriptor is None:
            raise PathError(f"No field at '{path}'")
        if index == len(parts) - 1:
            if descriptor.is_group:
                raise PathError(f"'{path}' is a group, not a field")
            return descriptor, parent_path
        if not descriptor.is_group:
            raise PathError(f"No field at '{path}'")
        parent_path = join_path(parent_path, part)
        siblings = descriptor.children
