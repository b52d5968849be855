"""
Binary search tree operations.

The tree is stored flat: ``nodes`` maps a value to its TreeNode, whose
``left``/``right`` hold child values. Replacing one entry in the dict is the
only way a node changes, which keeps every published snapshot immutable.
"""

from collections import deque
from enum import Enum
from typing import Dict, List, Optional, Sequence

from playback.domain import Domain, RunContext
from playback.entities import TreeNode
from playback.run import Outcome


class TreeAlgorithm(str, Enum):
    INSERT = "insert"
    SEARCH = "search"
    INORDER = "inorder"
    PREORDER = "preorder"
    POSTORDER = "postorder"
    LEVELORDER = "levelorder"


class BSTWork:

    def __init__(self, nodes: Dict[int, TreeNode], root: Optional[int]):
        self.nodes = dict(nodes)
        self.root = root
        self.path: List[int] = []

    def snapshot(self) -> Dict[str, object]:
        return {"nodes": tuple(self.nodes.values()), "root": self.root, "path": tuple(self.path)}

    def publish(self, step) -> None:
        step.publish(**self.snapshot())

    async def emit(self, step, factor: float = 1.0) -> None:
        await step.emit(factor, **self.snapshot())

    def mark(self, value: int, state: str) -> None:
        self.nodes[value] = self.nodes[value].with_state(state)

    def attach(self, parent: Optional[int], value: int, state: str = "default") -> None:
        self.nodes[value] = TreeNode(value, state=state)
        if parent is None:
            self.root = value
        elif value < parent:
            self.nodes[parent] = _replace_child(self.nodes[parent], left=value)
        else:
            self.nodes[parent] = _replace_child(self.nodes[parent], right=value)


def _replace_child(node: TreeNode, **child) -> TreeNode:
    return TreeNode(
        value=node.value,
        left=child.get("left", node.left),
        right=child.get("right", node.right),
        state=node.state,
    )


def insert_value(work: BSTWork, value: int) -> bool:
    """Plain BST insert without any publishing. Duplicates are ignored."""
    parent = None
    current = work.root
    while current is not None:
        if value == current:
            return False
        parent = current
        node = work.nodes[current]
        current = node.left if value < current else node.right
    work.attach(parent, value)
    return True


async def insert(ctx: RunContext, tree: BSTWork) -> Outcome:
    step = ctx.step
    value = ctx.params["value"]
    current = tree.root

    if current is None:
        tree.attach(None, value, state="found")
        tree.publish(step)
        return Outcome(summary=f"Inserted {value} as the root", data={"inserted": True})

    while True:
        tree.mark(current, "visiting")
        await tree.emit(step)
        node = tree.nodes[current]

        if value == current:
            tree.mark(current, "found")
            tree.publish(step)
            return Outcome(summary=f"{value} is already in the tree", data={"inserted": False})

        tree.mark(current, "visited")
        child = node.left if value < current else node.right
        if child is None:
            tree.attach(current, value, state="found")
            break
        current = child
        tree.publish(step)

    tree.publish(step)
    return Outcome(summary=f"Inserted {value} under {current}", data={"inserted": True})


async def search(ctx: RunContext, tree: BSTWork) -> Outcome:
    step = ctx.step
    value = ctx.params["value"]
    current = tree.root
    visited: List[int] = []

    while current is not None:
        visited.append(current)
        tree.mark(current, "visiting")
        await tree.emit(step)

        if value == current:
            tree.mark(current, "found")
            tree.publish(step)
            return Outcome(
                summary=f"Found {value} after {len(visited)} comparison(s)",
                data={"found": True, "visited": visited},
            )

        tree.mark(current, "visited")
        node = tree.nodes[current]
        current = node.left if value < current else node.right
        tree.publish(step)

    return Outcome(summary=f"{value} is not in the tree", data={"found": False, "visited": visited})


async def _record(step, tree: BSTWork, value: int) -> None:
    tree.mark(value, "visiting")
    await tree.emit(step)
    tree.path.append(value)
    tree.mark(value, "visited")
    tree.publish(step)


async def _inorder(step, tree: BSTWork, value: Optional[int]) -> None:
    if value is None:
        return
    node = tree.nodes[value]
    await _inorder(step, tree, node.left)
    await _record(step, tree, value)
    await _inorder(step, tree, node.right)


async def _preorder(step, tree: BSTWork, value: Optional[int]) -> None:
    if value is None:
        return
    node = tree.nodes[value]
    await _record(step, tree, value)
    await _preorder(step, tree, node.left)
    await _preorder(step, tree, node.right)


async def _postorder(step, tree: BSTWork, value: Optional[int]) -> None:
    if value is None:
        return
    node = tree.nodes[value]
    await _postorder(step, tree, node.left)
    await _postorder(step, tree, node.right)
    await _record(step, tree, value)


async def _levelorder(step, tree: BSTWork, value: Optional[int]) -> None:
    if value is None:
        return
    queue = deque([value])
    while queue:
        current = queue.popleft()
        await _record(step, tree, current)
        node = tree.nodes[current]
        if node.left is not None:
            queue.append(node.left)
        if node.right is not None:
            queue.append(node.right)


def _traversal(label: str, walk):
    async def traverse(ctx: RunContext, tree: BSTWork) -> Outcome:
        await walk(ctx.step, tree, tree.root)
        order = ", ".join(map(str, tree.path)) or "(empty tree)"
        return Outcome(summary=f"{label}: {order}", data={"order": list(tree.path)})

    traverse.__name__ = walk.__name__.lstrip("_")
    return traverse


class TreeDomain(Domain):
    name = "tree"
    algorithms = TreeAlgorithm
    producers = {
        TreeAlgorithm.INSERT: insert,
        TreeAlgorithm.SEARCH: search,
        TreeAlgorithm.INORDER: _traversal("Inorder", _inorder),
        TreeAlgorithm.PREORDER: _traversal("Preorder", _preorder),
        TreeAlgorithm.POSTORDER: _traversal("Postorder", _postorder),
        TreeAlgorithm.LEVELORDER: _traversal("Level order", _levelorder),
    }

    def __init__(self, values: Sequence[int] = ()):
        self.load(values)

    def load(self, values: Sequence[int]) -> None:
        work = BSTWork({}, None)
        for value in values:
            insert_value(work, value)
        self.nodes = work.nodes
        self.root = work.root

    def values(self) -> List[int]:
        return list(self.nodes)

    def initial_views(self, params=None):
        return BSTWork(self._clean_nodes(), self.root).snapshot()

    def working_copy(self) -> BSTWork:
        return BSTWork(self._clean_nodes(), self.root)

    def commit(self, work: BSTWork) -> None:
        self.nodes = {value: node.with_state("default") for value, node in work.nodes.items()}
        self.root = work.root

    def _clean_nodes(self) -> Dict[int, TreeNode]:
        return {value: node.with_state("default") for value, node in self.nodes.items()}
