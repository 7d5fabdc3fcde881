"""
Shortest routes over a NavigationGraph (Dijkstra).

"No route" is a normal result, returned as NoRoute with a reason code,
never raised. Only a missing graph or an empty node id raises ValueError.
"""
import heapq
import math
import logging
from collections import deque
from typing import Dict, List, Optional, Tuple, Union, Any

from schemas import GraphSnapshot, PathResult, NoRoute, GraphValidationResult
from services.graph import NavigationGraph
from services.directions import generate_directions

logger = logging.getLogger(__name__)

GraphInput = Union[NavigationGraph, GraphSnapshot, Dict[str, Any]]


def _as_graph(graph: GraphInput) -> NavigationGraph:
    if graph is None:
        raise ValueError("A graph snapshot is required")
    if isinstance(graph, NavigationGraph):
        return graph
    return NavigationGraph.from_snapshot(graph)


def _dijkstra(graph: NavigationGraph, start_id: str, accessible_only: bool,
              target_id: Optional[str] = None) -> Tuple[Dict[str, float], Dict[str, Optional[str]]]:
    """
    Single-source shortest distances.
    Frontier ties are broken by node insertion order. Stops as soon as
    target_id is settled when one is given.
    """
    dist: Dict[str, float] = {start_id: 0.0}
    prev: Dict[str, Optional[str]] = {start_id: None}
    visited = set()
    open_set = [(0.0, graph.order(start_id), start_id)]

    while open_set:
        current_dist, _, current = heapq.heappop(open_set)

        if current in visited:
            continue
        visited.add(current)

        if current == target_id:
            break

        for neighbor_id in graph.neighbors(current, accessible_only):
            if neighbor_id in visited:
                continue

            tentative = current_dist + graph.weight(current, neighbor_id, accessible_only)
            if tentative < dist.get(neighbor_id, math.inf):
                dist[neighbor_id] = tentative
                prev[neighbor_id] = current
                heapq.heappush(open_set, (tentative, graph.order(neighbor_id), neighbor_id))

    return dist, prev


def _reconstruct(prev: Dict[str, Optional[str]], start_id: str, end_id: str) -> List[str]:
    if end_id not in prev:
        return []

    path = []
    current = end_id
    while current is not None:
        path.append(current)
        current = prev.get(current)
    path.reverse()

    if path[0] != start_id:
        return []
    return path


def _build_result(graph: NavigationGraph, path: List[str], distance: float,
                  accessible_only: bool) -> PathResult:
    return PathResult(
        node_sequence=path,
        total_distance=distance,
        steps=generate_directions(graph, path, accessible_only),
        accessible_only=accessible_only,
    )


def _no_route_reason(graph: NavigationGraph, start_id: str, end_id: str, accessible_only: bool) -> str:
    if accessible_only:
        _, prev = _dijkstra(graph, start_id, False, end_id)
        if _reconstruct(prev, start_id, end_id):
            return "inaccessible"
    return "disconnected"


def find_path(graph: GraphInput, start_node_id: str, end_node_id: str,
              accessible_only: bool = False) -> Union[PathResult, NoRoute]:
    """
    Find the shortest route between two nodes.

    Args:
        graph: Graph snapshot (model or wire dict) or a built NavigationGraph
        start_node_id: Where the route begins
        end_node_id: Where the route ends
        accessible_only: If True, only use wheelchair accessible edges and nodes

    Returns:
        PathResult, or NoRoute when either node is unknown or unreachable
    """
    if not start_node_id or not end_node_id:
        raise ValueError("start_node_id and end_node_id are required")
    graph = _as_graph(graph)

    for node_id in (start_node_id, end_node_id):
        if not graph.has_node(node_id):
            logger.info(f"Route {start_node_id} -> {end_node_id}: node '{node_id}' not found")
            return NoRoute(reason="unknown_node", message=f"Node '{node_id}' not found")

    if start_node_id == end_node_id:
        return _build_result(graph, [start_node_id], 0.0, accessible_only)

    dist, prev = _dijkstra(graph, start_node_id, accessible_only, end_node_id)
    path = _reconstruct(prev, start_node_id, end_node_id)

    if not path:
        reason = _no_route_reason(graph, start_node_id, end_node_id, accessible_only)
        logger.info(f"Route {start_node_id} -> {end_node_id}: no path ({reason})")
        return NoRoute(reason=reason)

    logger.info(f"Route {start_node_id} -> {end_node_id}: {len(path)} nodes, {dist[end_node_id]:.1f}m")
    return _build_result(graph, path, dist[end_node_id], accessible_only)


def shortest_distances(graph: GraphInput, start_node_id: str,
                       accessible_only: bool = False) -> Dict[str, float]:
    """Route distance from start_node_id to every reachable node"""
    if not start_node_id:
        raise ValueError("start_node_id is required")
    graph = _as_graph(graph)
    if not graph.has_node(start_node_id):
        return {}
    dist, _ = _dijkstra(graph, start_node_id, accessible_only)
    return dist


def find_nearest_of_type(graph: GraphInput, start_node_id: str, node_type: str = "emergency_exit",
                         accessible_only: bool = False) -> Union[PathResult, NoRoute]:
    """Route to the closest node of node_type, by route distance (e.g. the nearest emergency exit)"""
    if not start_node_id or not node_type:
        raise ValueError("start_node_id and node_type are required")
    graph = _as_graph(graph)

    if not graph.has_node(start_node_id):
        return NoRoute(reason="unknown_node", message=f"Node '{start_node_id}' not found")

    candidates = [node.id for node in graph.nodes if node.type == node_type]
    if not candidates:
        return NoRoute(reason="unknown_node", message=f"No '{node_type}' nodes in this graph")

    dist, prev = _dijkstra(graph, start_node_id, accessible_only)

    nearest = None
    min_distance = math.inf
    for candidate in candidates:
        if dist.get(candidate, math.inf) < min_distance:
            min_distance = dist[candidate]
            nearest = candidate

    if nearest is None:
        reason = "disconnected"
        if accessible_only:
            everywhere, _ = _dijkstra(graph, start_node_id, False)
            if any(c in everywhere for c in candidates):
                reason = "inaccessible"
        return NoRoute(reason=reason, message=f"No reachable '{node_type}' found")

    return _build_result(graph, _reconstruct(prev, start_node_id, nearest), min_distance, accessible_only)


def validate_graph(graph: GraphInput) -> GraphValidationResult:
    """Report data-quality issues in a graph snapshot without rejecting it"""
    if graph is None:
        raise ValueError("A graph snapshot is required")
    if isinstance(graph, NavigationGraph):
        snapshot = GraphSnapshot(nodes=graph.nodes, paths=graph.edges)
    elif isinstance(graph, dict):
        snapshot = GraphSnapshot.model_validate(graph)
    else:
        snapshot = graph

    built = NavigationGraph(snapshot.nodes, snapshot.paths)
    node_ids = set(built.node_ids)
    warnings = []
    dangling = []
    missing_reverse = []

    declared = {node.id: set(node.connections) for node in built.nodes}
    for node in built.nodes:
        for neighbor_id in node.connections:
            if neighbor_id not in node_ids:
                dangling.append({"from": node.id, "to": neighbor_id})
                warnings.append(f"Node {node.id} connects to non-existent node {neighbor_id}")
            elif node.id not in declared[neighbor_id]:
                missing_reverse.append({"from": node.id, "to": neighbor_id})

    for edge in snapshot.paths:
        for endpoint in (edge.start_node, edge.end_node):
            if endpoint not in node_ids:
                dangling.append({"from": edge.id, "to": endpoint})
                warnings.append(f"Path {edge.id} references non-existent node {endpoint}")
        if edge.start_node == edge.end_node:
            warnings.append(f"Path {edge.id} starts and ends at {edge.start_node}")

    disconnected = []
    dead_ends = []
    for node_id in built.node_ids:
        degree = len(built.neighbors(node_id))
        if degree == 0:
            disconnected.append(node_id)
        elif degree == 1:
            dead_ends.append(node_id)

    inaccessible = [node.id for node in built.nodes if not node.accessibility]

    # Connectivity from the first node, ignoring edge direction
    unreachable = []
    if built.node_ids:
        first = built.node_ids[0]
        visited = {first}
        queue = deque([first])
        while queue:
            current = queue.popleft()
            linked = set(built.neighbors(current))
            linked.update(e.start_node for e in built.incident_edges(current))
            linked.update(e.end_node for e in built.incident_edges(current))
            for neighbor_id in linked:
                if neighbor_id not in visited:
                    visited.add(neighbor_id)
                    queue.append(neighbor_id)
        unreachable = [node_id for node_id in built.node_ids if node_id not in visited]
        if unreachable:
            warnings.append(f"Graph has {len(unreachable)} unreachable nodes from starting point")

    is_valid = not disconnected and not missing_reverse and not warnings

    return GraphValidationResult(
        is_valid=is_valid,
        disconnected_nodes=disconnected,
        dead_ends=dead_ends,
        missing_reverse_connections=missing_reverse,
        dangling_references=dangling,
        inaccessible_nodes=inaccessible,
        unreachable_nodes=unreachable,
        warnings=warnings,
    )
