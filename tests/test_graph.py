"""Graph producers checked against independent reference computations."""
import heapq

import pytest

from playback import generators
from playback.errors import InvalidParameterError
from producers.graph import GraphDomain


# 0 - 1 - 2 - 3 with a chord 0 - 2 and a separate component 4 - 5
POSITIONS = [(0.0, 0.0)] * 6
EDGES = [(0, 1, 4), (1, 2, 1), (2, 3, 2), (0, 2, 7), (4, 5, 3)]

CONNECTED = [(0, 1, 2), (0, 2, 6), (1, 2, 3), (1, 3, 8), (2, 3, 5), (3, 4, 1), (2, 4, 9), (4, 5, 4), (1, 5, 7)]


def reference_distances(node_count, edges, source):
    adjacency = {i: [] for i in range(node_count)}
    for a, b, w in edges:
        adjacency[a].append((b, w))
        adjacency[b].append((a, w))
    dist = {source: 0}
    heap = [(0, source)]
    while heap:
        d, node = heapq.heappop(heap)
        if d > dist.get(node, float("inf")):
            continue
        for other, w in adjacency[node]:
            if d + w < dist.get(other, float("inf")):
                dist[other] = d + w
                heapq.heappush(heap, (d + w, other))
    return dist


def kruskal_weight(node_count, edges):
    parent = list(range(node_count))

    def find(x):
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    total = 0
    for a, b, w in sorted(edges, key=lambda e: e[2]):
        ra, rb = find(a), find(b)
        if ra != rb:
            parent[ra] = rb
            total += w
    return total


def reachable_from(node_count, edges, source):
    return set(reference_distances(node_count, edges, source))


def random_graphs():
    for seed in range(6):
        positions, edges = generators.random_graph(8, seed=seed)
        yield positions, edges


class TestTraversals:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm", ["bfs", "dfs"])
    @pytest.mark.parametrize("positions,edges", list(random_graphs()))
    async def test_visits_each_reachable_node_once(self, make_controller, play, algorithm, positions, edges):
        controller = make_controller(GraphDomain(positions, edges))
        run = await play(controller, algorithm, {"start": 0})

        order = run.outcome.data["order"]
        assert len(order) == len(set(order))
        assert set(order) == reachable_from(len(positions), edges, 0)
        visited = {n.id for n in controller.head.view("nodes") if n.state == "visited"}
        assert visited == set(order)

    @pytest.mark.asyncio
    async def test_bfs_order_follows_edge_list(self, make_controller, play):
        controller = make_controller(GraphDomain(POSITIONS, EDGES))
        run = await play(controller, "bfs", {"start": 0})
        assert run.outcome.data["order"] == [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_dfs_order_follows_edge_list(self, make_controller, play):
        controller = make_controller(GraphDomain(POSITIONS, EDGES))
        run = await play(controller, "dfs", {"start": 3})
        assert run.outcome.data["order"] == [3, 2, 1, 0]

    @pytest.mark.asyncio
    async def test_unknown_start_is_refused(self, make_controller):
        controller = make_controller(GraphDomain(POSITIONS, EDGES))
        with pytest.raises(InvalidParameterError):
            controller.start("bfs", {"start": 17})


class TestDijkstra:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("positions,edges", list(random_graphs()) + [(POSITIONS, EDGES)])
    async def test_distances_match_reference(self, make_controller, play, positions, edges):
        controller = make_controller(GraphDomain(positions, edges))
        run = await play(controller, "dijkstra", {"start": 0})
        assert run.outcome.data["distances"] == reference_distances(len(positions), edges, 0)

    @pytest.mark.asyncio
    async def test_path_to_target(self, make_controller, play):
        controller = make_controller(GraphDomain(POSITIONS, EDGES))
        run = await play(controller, "dijkstra", {"start": 0, "target": 3})

        assert run.outcome.data["path"] == [0, 1, 2, 3]
        assert controller.result == "Shortest distance 0 → 3: 7 via 0 → 1 → 2 → 3"
        path_edges = {(e.source, e.target) for e in controller.head.view("edges") if e.state == "path"}
        assert path_edges == {(0, 1), (1, 2), (2, 3)}

    @pytest.mark.asyncio
    async def test_unreachable_target_is_reported(self, make_controller, play):
        controller = make_controller(GraphDomain(POSITIONS, EDGES))
        run = await play(controller, "dijkstra", {"start": 0, "target": 5})

        assert run.outcome.data["path"] is None
        assert 5 not in run.outcome.data["distances"]
        assert controller.result == "Node 5 is unreachable from 0"


class TestPrims:
    @pytest.mark.asyncio
    async def test_minimum_spanning_tree(self, make_controller, play):
        controller = make_controller(GraphDomain([(0.0, 0.0)] * 6, CONNECTED))
        run = await play(controller, "prims", {"start": 0})

        tree = run.outcome.data["edges"]
        assert run.outcome.data["spanning"]
        assert len(tree) == 5
        assert run.outcome.data["total_weight"] == kruskal_weight(6, CONNECTED)
        # connected and acyclic: n - 1 edges that reach every node
        assert reachable_from(6, tree, 0) == set(range(6))

        marked = [e for e in controller.head.view("edges") if e.state == "path"]
        assert len(marked) == 5
        assert controller.result == f"Minimum spanning tree weight: {kruskal_weight(6, CONNECTED)}"

    @pytest.mark.asyncio
    async def test_disconnected_graph_stops(self, make_controller, play):
        controller = make_controller(GraphDomain(POSITIONS, EDGES))
        run = await play(controller, "prims", {"start": 0})

        assert not run.outcome.data["spanning"]
        assert run.outcome.data["total_weight"] == 1 + 2 + 4
        assert controller.result.startswith("Graph is disconnected")
