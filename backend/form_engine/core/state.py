"""Form state as an explicit tree of tagged nodes.

A ``Group`` maps child names to nodes and a ``Leaf`` wraps one field value.
Nodes are never changed after construction: writers build a new root via
:func:`form_engine.core.paths.assign`, sharing every subtree they did not touch.
Leaf values are copied on the way in; values handed out by
:func:`form_engine.core.paths.resolve` are the stored ones and must be
treated as read-only.
"""
import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Union


@dataclass(frozen=True)
class Leaf:
    value: Any = ''


@dataclass(frozen=True)
class Group:
    children: Mapping[str, 'Node'] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'children', MappingProxyType(dict(self.children)))

    def get(self, name: str) -> 'Node':
        return self.children.get(name)

    def with_child(self, name: str, node: 'Node') -> 'Group':
        children = dict(self.children)
        children[name] = node
        return Group(children)

    def __contains__(self, name: str) -> bool:
        return name in self.children

    def __iter__(self) -> Iterator[str]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)


Node = Union[Leaf, Group]


def to_plain(node: Node) -> Any:
    """Deep copy a node into plain dicts and values, ready for JSON."""
    if isinstance(node, Group):
        return {name: to_plain(child) for name, child in node.children.items()}
    return copy.deepcopy(node.value)


def from_plain(data: Mapping[str, Any]) -> Group:
    """Build a tree from a nested mapping; every non-mapping value becomes a leaf."""
    children: Dict[str, Node] = {}
    for name, value in data.items():
        if isinstance(value, Mapping):
            children[name] = from_plain(value)
        else:
            children[name] = Leaf(copy.deepcopy(value))
    return Group(children)

