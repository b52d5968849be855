"""
Visual entity model.

Every entity is a frozen record: a domain payload plus a ``state`` tag drawn
from a small closed set. Producers never mutate an entity that has already
been published; they build a replacement with ``with_state()`` (or
``dataclasses.replace``) and publish the new collection.

``to_dict()`` mirrors the element dicts found in SVL traces so that a frame
can be handed to any renderer that already understands that format.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple, Union


SORT_STATES = ("default", "comparing", "swapping", "sorted")
SEARCH_STATES = ("default", "searching", "found", "not-found")
GRAPH_STATES = ("default", "visiting", "visited", "path")
TREE_STATES = ("default", "visiting", "visited", "found")
CELL_STATES = ("default", "computing", "computed", "result")
FRAME_STATES = ("active", "completed")


class _Unreachable:
    """Marks a DP cell whose value cannot be reached (coin change)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNREACHABLE"

    def __str__(self) -> str:
        return "∞"

    def __reduce__(self):
        return (_Unreachable, ())


UNREACHABLE = _Unreachable()

CellValue = Union[int, None, _Unreachable]


class _Stateful:
    def with_state(self, state: str):
        return replace(self, state=state)


@dataclass(frozen=True)
class ArrayCell(_Stateful):
    value: int
    state: str = "default"

    def to_dict(self, index: int) -> Dict[str, Any]:
        return {"index": index, "value": self.value, "state": self.state}


@dataclass(frozen=True)
class GraphNode(_Stateful):
    id: int
    x: float = 0.0
    y: float = 0.0
    state: str = "default"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "label": str(self.id),
            "styleKey": self.state,
            "properties": {"x": self.x, "y": self.y},
        }


@dataclass(frozen=True)
class GraphEdge(_Stateful):
    source: int
    target: int
    weight: int = 1
    state: str = "default"

    def touches(self, node_id: int) -> bool:
        return self.source == node_id or self.target == node_id

    def joins(self, a: int, b: int) -> bool:
        return (self.source == a and self.target == b) or (self.source == b and self.target == a)

    def other(self, node_id: int) -> int:
        return self.target if self.source == node_id else self.source

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": str(self.source),
            "to": str(self.target),
            "directed": False,
            "label": str(self.weight),
            "styleKey": self.state,
        }


@dataclass(frozen=True)
class TreeNode(_Stateful):
    value: int
    left: Optional[int] = None
    right: Optional[int] = None
    state: str = "default"

    def to_dict(self) -> Dict[str, Any]:
        children = [str(c) for c in (self.left, self.right) if c is not None]
        return {
            "id": str(self.value),
            "label": str(self.value),
            "styleKey": self.state,
            "children": children,
        }


@dataclass(frozen=True)
class DPCell(_Stateful):
    value: CellValue = None
    state: str = "default"

    @property
    def label(self) -> str:
        if self.value is None:
            return "?"
        return str(self.value)

    @property
    def reachable(self) -> bool:
        return self.value is not UNREACHABLE

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.label, "state": self.state}


@dataclass(frozen=True)
class CallFrame(_Stateful):
    id: int
    function: str
    params: str
    state: str = "active"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "function": self.function,
            "params": self.params,
            "state": self.state,
        }


def _view_to_json(name: str, items: Any) -> Any:
    if name == "cells":
        return [cell.to_dict(i) for i, cell in enumerate(items)]
    if name == "table":
        return [[cell.to_dict() for cell in row] for row in items]
    if isinstance(items, tuple) and items and hasattr(items[0], "to_dict"):
        return [item.to_dict() for item in items]
    if isinstance(items, tuple):
        return [list(i) if isinstance(i, tuple) else i for i in items]
    return items


@dataclass(frozen=True)
class Frame:
    """One published head of a Run's timeline."""

    run_id: int
    seq: int
    views: Mapping[str, Any] = field(default_factory=dict)

    def view(self, name: str, default: Any = ()) -> Any:
        return self.views.get(name, default)

    def merged(self, seq: int, **views: Any) -> "Frame":
        merged = dict(self.views)
        merged.update(views)
        return Frame(run_id=self.run_id, seq=seq, views=merged)

    def states(self, name: str) -> Tuple[str, ...]:
        return tuple(item.state for item in self.view(name))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "seq": self.seq,
            "views": {name: _view_to_json(name, items) for name, items in self.views.items()},
        }
