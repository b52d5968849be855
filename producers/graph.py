"""
Undirected weighted graph traversals.

Adjacency is never precomputed: each producer scans the edge list in order
and treats an edge as incident when either endpoint matches, so ties are
always broken by edge-list order.
"""

import math
from collections import deque
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from playback.domain import Domain, RunContext
from playback.entities import GraphEdge, GraphNode
from playback.run import Outcome


class GraphAlgorithm(str, Enum):
    BFS = "bfs"
    DFS = "dfs"
    DIJKSTRA = "dijkstra"
    PRIMS = "prims"


class GraphWork:
    """Mutable working copy of the graph for one Run."""

    def __init__(self, nodes: Sequence[GraphNode], edges: Sequence[GraphEdge]):
        self.nodes = list(nodes)
        self.edges = list(edges)
        self._index = {node.id: i for i, node in enumerate(self.nodes)}

    def publish(self, step) -> None:
        step.publish(nodes=tuple(self.nodes), edges=tuple(self.edges))

    async def emit(self, step, factor: float = 1.0) -> None:
        await step.emit(factor, nodes=tuple(self.nodes), edges=tuple(self.edges))

    def set_node(self, node_id: int, state: str) -> None:
        i = self._index[node_id]
        self.nodes[i] = self.nodes[i].with_state(state)

    def set_edge(self, index: int, state: str) -> None:
        self.edges[index] = self.edges[index].with_state(state)

    def set_edges_between(self, a: int, b: int, state: str) -> None:
        for i, edge in enumerate(self.edges):
            if edge.joins(a, b):
                self.set_edge(i, state)

    def settle_edges(self, node_id: int) -> None:
        for i, edge in enumerate(self.edges):
            if edge.touches(node_id) and edge.state == "visiting":
                self.set_edge(i, "visited")

    def neighbors(self, node_id: int) -> List[int]:
        return [edge.other(node_id) for edge in self.edges if edge.touches(node_id)]


async def bfs(ctx: RunContext, graph: GraphWork) -> Outcome:
    step = ctx.step
    start = ctx.params["start"]
    visited = {start}
    queue = deque([start])
    order: List[int] = []

    while queue:
        current = queue.popleft()
        order.append(current)
        graph.set_node(current, "visiting")
        await graph.emit(step)

        for neighbor in graph.neighbors(current):
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)
                graph.set_edges_between(current, neighbor, "visiting")
                await graph.emit(step, 0.5)

        graph.set_node(current, "visited")
        graph.settle_edges(current)
        graph.publish(step)

    return Outcome(
        summary=f"BFS from {start} visited {len(order)} node(s): {', '.join(map(str, order))}",
        data={"order": order},
    )


async def dfs(ctx: RunContext, graph: GraphWork) -> Outcome:
    step = ctx.step
    start = ctx.params["start"]
    visited = set()
    order: List[int] = []

    async def visit(node_id: int) -> None:
        visited.add(node_id)
        order.append(node_id)
        graph.set_node(node_id, "visiting")
        await graph.emit(step)

        for neighbor in graph.neighbors(node_id):
            if neighbor not in visited:
                graph.set_edges_between(node_id, neighbor, "visiting")
                await graph.emit(step, 0.5)
                await visit(neighbor)

        graph.set_node(node_id, "visited")
        graph.settle_edges(node_id)
        graph.publish(step)

    await visit(start)
    return Outcome(
        summary=f"DFS from {start} visited {len(order)} node(s): {', '.join(map(str, order))}",
        data={"order": order},
    )


def _walk_back(predecessor: Dict[int, Optional[int]], start: int, node_id: int) -> List[int]:
    """Nodes from node_id back to start following predecessors."""
    path = [node_id]
    current = node_id
    while current != start and predecessor.get(current) is not None:
        current = predecessor[current]
        path.append(current)
    return path


async def dijkstra(ctx: RunContext, graph: GraphWork) -> Outcome:
    step = ctx.step
    start = ctx.params["start"]
    target = ctx.params.get("target")

    distance = {node.id: math.inf for node in graph.nodes}
    predecessor: Dict[int, Optional[int]] = {node.id: None for node in graph.nodes}
    distance[start] = 0
    # insertion-ordered so the scan below keeps the first minimum it sees
    unvisited = {node.id: None for node in graph.nodes}

    while unvisited:
        current, best = None, math.inf
        for node_id in unvisited:
            if distance[node_id] < best:
                current, best = node_id, distance[node_id]
        if current is None:
            break
        del unvisited[current]

        graph.set_node(current, "visiting")
        await graph.emit(step)

        for i, edge in enumerate(graph.edges):
            if not edge.touches(current) or edge.other(current) not in unvisited:
                continue
            neighbor = edge.other(current)
            alt = distance[current] + edge.weight
            graph.set_edge(i, "visiting")
            await graph.emit(step, 0.5)

            if alt < distance[neighbor]:
                distance[neighbor] = alt
                predecessor[neighbor] = current
            graph.set_edge(i, "default")
            graph.publish(step)

        graph.set_node(current, "visited")
        graph.publish(step)

    reachable = {node_id: d for node_id, d in distance.items() if d != math.inf}
    data = {
        "distances": reachable,
        "predecessors": {k: v for k, v in predecessor.items() if v is not None},
    }

    if target is None:
        for node_id in reachable:
            path = _walk_back(predecessor, start, node_id)
            for a, b in zip(path, path[1:]):
                graph.set_edges_between(a, b, "path")
        graph.publish(step)
        return Outcome(
            summary=f"Shortest paths from {start} reach {len(reachable)} of {len(graph.nodes)} node(s)",
            data=data,
        )

    if target not in reachable:
        data["path"] = None
        return Outcome(summary=f"Node {target} is unreachable from {start}", data=data)

    path = list(reversed(_walk_back(predecessor, start, target)))
    for a, b in zip(path, path[1:]):
        graph.set_edges_between(a, b, "path")
    for node_id in path:
        graph.set_node(node_id, "path")
    graph.publish(step)
    data["path"] = path
    return Outcome(
        summary=f"Shortest distance {start} → {target}: {reachable[target]} via {' → '.join(map(str, path))}",
        data=data,
    )


async def prims(ctx: RunContext, graph: GraphWork) -> Outcome:
    step = ctx.step
    start = ctx.params["start"]
    in_tree = {start}
    tree_edges: List[Tuple[int, int, int]] = []

    graph.set_node(start, "visited")
    await graph.emit(step)

    while len(in_tree) < len(graph.nodes):
        chosen, best = None, math.inf
        for i, edge in enumerate(graph.edges):
            crosses = (edge.source in in_tree) != (edge.target in in_tree)
            if crosses and edge.weight < best:
                chosen, best = i, edge.weight
        if chosen is None:
            break

        edge = graph.edges[chosen]
        new_node = edge.target if edge.source in in_tree else edge.source
        in_tree.add(new_node)
        tree_edges.append((edge.source, edge.target, edge.weight))

        graph.set_edge(chosen, "visiting")
        await graph.emit(step)
        graph.set_node(new_node, "visited")
        graph.set_edge(chosen, "path")
        await graph.emit(step)

    total = sum(w for _, _, w in tree_edges)
    data = {"edges": tree_edges, "total_weight": total, "spanning": len(in_tree) == len(graph.nodes)}
    if not data["spanning"]:
        return Outcome(
            summary=f"Graph is disconnected: tree from {start} covers {len(in_tree)} of {len(graph.nodes)} node(s), weight {total}",
            data=data,
        )
    return Outcome(summary=f"Minimum spanning tree weight: {total}", data=data)


class GraphDomain(Domain):
    name = "graph"
    algorithms = GraphAlgorithm
    producers = {
        GraphAlgorithm.BFS: bfs,
        GraphAlgorithm.DFS: dfs,
        GraphAlgorithm.DIJKSTRA: dijkstra,
        GraphAlgorithm.PRIMS: prims,
    }
    defaults = {algorithm: {"start": 0} for algorithm in GraphAlgorithm}

    def __init__(self, positions: Sequence[Tuple[float, float]] = (),
                 edges: Sequence[Tuple[int, int, int]] = ()):
        self.load(positions, edges)

    def load(self, positions: Sequence[Tuple[float, float]],
             edges: Sequence[Tuple[int, int, int]]) -> None:
        self.nodes = [GraphNode(id=i, x=x, y=y) for i, (x, y) in enumerate(positions)]
        self.edges = [GraphEdge(source=a, target=b, weight=w) for a, b, w in edges]

    def node_ids(self) -> List[int]:
        return [node.id for node in self.nodes]

    def initial_views(self, params=None):
        return {"nodes": tuple(self.nodes), "edges": tuple(self.edges)}

    def working_copy(self) -> GraphWork:
        return GraphWork(self.nodes, self.edges)
