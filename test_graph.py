import math

from schemas import GraphNode, GraphSnapshot, PathEdge
from services.graph import NavigationGraph


def test_neighbors_are_symmetric_regardless_of_edge_direction(triangle_graph):
    graph = NavigationGraph.from_snapshot(triangle_graph)

    for edge in triangle_graph.paths:
        assert edge.end_node in graph.neighbors(edge.start_node)
        assert edge.start_node in graph.neighbors(edge.end_node)


def test_one_sided_connection_is_synthesized():
    graph = NavigationGraph([
        GraphNode(id="a", x=0, y=0, connections=["b"]),
        GraphNode(id="b", x=3, y=4),
    ])

    assert graph.neighbors("b") == ["a"]
    assert graph.weight("a", "b") == 5.0


def test_loading_does_not_mutate_caller_data(triangle_graph):
    before = triangle_graph.model_dump()

    NavigationGraph.from_snapshot(triangle_graph)

    assert triangle_graph.model_dump() == before
    assert all(node.connections == [] for node in triangle_graph.nodes)


def test_malformed_edges_and_connections_are_skipped():
    graph = NavigationGraph(
        [GraphNode(id="a", x=0, y=0, connections=["ghost"]), GraphNode(id="b", x=1, y=0)],
        [
            PathEdge(id="bad", start_node="a", end_node="missing", distance=1),
            PathEdge(id="loop", start_node="a", end_node="a", distance=1),
            PathEdge(id="ok", start_node="a", end_node="b", distance=2),
        ],
    )

    assert graph.neighbors("a") == ["b"]
    assert [e.id for e in graph.edges] == ["ok"]


def test_accessible_only_filters_inaccessible_edges(triangle_graph):
    graph = NavigationGraph.from_snapshot(triangle_graph)

    assert graph.neighbors("A") == ["B", "C"]
    assert graph.neighbors("A", accessible_only=True) == ["B"]


def test_accessible_only_filters_inaccessible_nodes():
    graph = NavigationGraph([
        GraphNode(id="hall", x=0, y=0, connections=["stairs"]),
        GraphNode(id="stairs", type="stairs", x=5, y=0, accessibility=False),
    ])

    assert graph.neighbors("hall", accessible_only=True) == []


def test_weight_prefers_edge_distance_over_geometry(triangle_graph):
    graph = NavigationGraph.from_snapshot(triangle_graph)

    assert graph.weight("A", "C") == 20
    assert graph.weight("C", "A") == 20
    assert graph.weight("A", "C", accessible_only=True) == math.inf


def test_weight_without_distance_uses_euclidean():
    graph = NavigationGraph(
        [GraphNode(id="a", x=0, y=0), GraphNode(id="b", x=6, y=8)],
        [PathEdge(id="ab", start_node="a", end_node="b")],
    )

    assert graph.weight("a", "b") == 10.0


def test_parallel_edges_use_the_shortest():
    graph = NavigationGraph(
        [GraphNode(id="a", x=0, y=0), GraphNode(id="b", x=50, y=0)],
        [
            PathEdge(id="long", start_node="a", end_node="b", distance=40),
            PathEdge(id="short", start_node="a", end_node="b", distance=15),
        ],
    )

    assert graph.weight("a", "b") == 15
    assert graph.edge_between("a", "b").id == "short"


def test_one_way_edge_only_goes_forward():
    graph = NavigationGraph(
        [GraphNode(id="top", x=0, y=0), GraphNode(id="bottom", x=0, y=10, connections=["top"])],
        [PathEdge(id="down", start_node="top", end_node="bottom", path_type="escalator",
                  distance=12, bidirectional=False)],
    )

    assert graph.neighbors("top") == ["bottom"]
    assert graph.neighbors("bottom") == []


def test_inactive_items_are_dropped():
    graph = NavigationGraph(
        [GraphNode(id="a", x=0, y=0), GraphNode(id="b", x=1, y=0),
         GraphNode(id="closed", x=2, y=0, is_active=False)],
        [PathEdge(id="ab", start_node="a", end_node="b", is_active=False)],
    )

    assert graph.node_ids == ["a", "b"]
    assert graph.neighbors("a") == []


def test_closed_edge_closes_declared_connection():
    graph = NavigationGraph(
        [GraphNode(id="a", x=0, y=0, connections=["b"]), GraphNode(id="b", x=10, y=0, connections=["a"])],
        [PathEdge(id="ab", start_node="a", end_node="b", is_active=False)],
    )

    assert graph.neighbors("a") == []
    assert graph.neighbors("b") == []
    assert graph.weight("a", "b") == math.inf


def test_closed_stairs_stay_out_of_accessible_queries():
    graph = NavigationGraph(
        [GraphNode(id="a", x=0, y=0, connections=["b"]), GraphNode(id="b", x=10, y=0, connections=["a"])],
        [PathEdge(id="ab", start_node="a", end_node="b", path_type="stairs",
                  accessibility=False, is_active=False)],
    )

    assert graph.neighbors("a", accessible_only=True) == []
    assert graph.weight("a", "b", accessible_only=True) == math.inf


def test_closed_edge_leaves_open_parallel_edge():
    graph = NavigationGraph(
        [GraphNode(id="a", x=0, y=0, connections=["b"]), GraphNode(id="b", x=10, y=0, connections=["a"])],
        [
            PathEdge(id="old", start_node="a", end_node="b", distance=5, is_active=False),
            PathEdge(id="new", start_node="b", end_node="a", distance=12),
        ],
    )

    assert graph.weight("a", "b") == 12
    assert graph.edge_between("a", "b").id == "new"


def test_load_graph_replaces_previous_state(triangle_graph):
    graph = NavigationGraph.from_snapshot(triangle_graph)

    graph.load_graph([GraphNode(id="solo", x=0, y=0)], [])

    assert graph.node_ids == ["solo"]
    assert not graph.has_node("A")


def test_from_snapshot_accepts_wire_dict():
    graph = NavigationGraph.from_snapshot({
        "nodes": [{"id": "x", "type": "room", "x": 1, "y": 2, "label": "X", "accessibility": True,
                   "connections": ["y"]},
                  {"id": "y", "type": "room", "x": 1, "y": 5, "label": "Y", "accessibility": True,
                   "connections": []}],
        "paths": [],
    })

    assert graph.neighbors("y") == ["x"]


def test_find_nearest_node(floor_one):
    graph = NavigationGraph(floor_one.nodes, floor_one.paths)

    assert graph.find_nearest_node(140, 310).id == "junction-1-1"
    assert graph.find_nearest_node(140, 310, node_type="elevator").id == "elevator-1"


def test_find_nearest_node_on_floor():
    graph = NavigationGraph([
        GraphNode(id="low", x=0, y=0, floor=1),
        GraphNode(id="high", x=100, y=100, floor=2),
    ])

    assert graph.find_nearest_node(1, 1, floor=2).id == "high"
    assert graph.find_nearest_node(1, 1, floor=3) is None


def test_empty_graph():
    graph = NavigationGraph.from_snapshot(GraphSnapshot())

    assert len(graph) == 0
    assert graph.neighbors("anything") == []
    assert graph.find_nearest_node(0, 0) is None
