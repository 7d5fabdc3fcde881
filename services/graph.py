"""
In-memory navigation graph built from a caller supplied snapshot.

Malformed input (edges or connections naming unknown nodes, self loops)
is skipped rather than rejected, so a partially corrupted floor plan
still routes. Caller data is never modified.
"""
import math
import logging
from typing import Dict, List, Optional, Iterable, Union, Any

from schemas import GraphNode, PathEdge, GraphSnapshot

logger = logging.getLogger(__name__)


def euclidean_distance(node_a: GraphNode, node_b: GraphNode) -> float:
    """2D distance between two nodes (floor is ignored)"""
    return math.hypot(node_b.x - node_a.x, node_b.y - node_a.y)


class NavigationGraph:
    def __init__(self, nodes: Optional[Iterable[GraphNode]] = None,
                 edges: Optional[Iterable[PathEdge]] = None):
        self._nodes: Dict[str, GraphNode] = {}
        self._order: Dict[str, int] = {}
        # node_id -> [edges touching it]
        self._incident: Dict[str, List[PathEdge]] = {}
        # node_id -> { neighbor_id: [edges usable from node_id to neighbor_id] }
        # an empty list means a bare connection without edge metadata
        self._adjacency: Dict[str, Dict[str, List[PathEdge]]] = {}
        self.load_graph(nodes or [], edges or [])

    @classmethod
    def from_snapshot(cls, snapshot: Union[GraphSnapshot, Dict[str, Any]]) -> "NavigationGraph":
        if isinstance(snapshot, dict):
            snapshot = GraphSnapshot.model_validate(snapshot)
        return cls(snapshot.nodes, snapshot.paths)

    def load_graph(self, nodes: Iterable[GraphNode], edges: Iterable[PathEdge]) -> None:
        """Replace any prior state with the given nodes and edges"""
        self._nodes.clear()
        self._order.clear()
        self._incident.clear()
        self._adjacency.clear()

        for node in nodes:
            if not node.is_active:
                continue
            if node.id in self._nodes:
                logger.debug(f"Duplicate node id {node.id} ignored")
                continue
            self._order[node.id] = len(self._order)
            self._nodes[node.id] = node
            self._incident[node.id] = []
            self._adjacency[node.id] = {}

        # Declared connections are symmetric even if only one side lists them
        for node in self._nodes.values():
            for neighbor_id in node.connections:
                if neighbor_id not in self._nodes or neighbor_id == node.id:
                    logger.debug(f"Node {node.id} lists unknown connection {neighbor_id}, skipped")
                    continue
                self._adjacency[node.id].setdefault(neighbor_id, [])
                self._adjacency[neighbor_id].setdefault(node.id, [])

        one_way = []
        closed = []
        for edge in edges:
            if not edge.is_active:
                closed.append(edge)
                continue
            start, end = edge.start_node, edge.end_node
            if start not in self._nodes or end not in self._nodes or start == end:
                logger.debug(f"Edge {edge.id} ({start} -> {end}) is malformed, skipped")
                continue

            self._incident[start].append(edge)
            self._incident[end].append(edge)
            self._adjacency[start].setdefault(end, []).append(edge)
            if edge.bidirectional:
                self._adjacency[end].setdefault(start, []).append(edge)
            else:
                one_way.append(edge)

        # The reverse of a one-way edge is not walkable even if a
        # connections list names it
        for edge in one_way:
            reverse = self._adjacency[edge.end_node].get(edge.start_node)
            if reverse is not None and not reverse:
                del self._adjacency[edge.end_node][edge.start_node]

        # A closed edge also closes the bare connection between its ends;
        # active edges between the same pair stay walkable
        for edge in closed:
            for a, b in ((edge.start_node, edge.end_node), (edge.end_node, edge.start_node)):
                bare = self._adjacency.get(a, {}).get(b)
                if bare is not None and not bare:
                    del self._adjacency[a][b]

    # ============================================
    # LOOKUPS
    # ============================================

    @property
    def node_ids(self) -> List[str]:
        return list(self._nodes)

    @property
    def nodes(self) -> List[GraphNode]:
        return list(self._nodes.values())

    @property
    def edges(self) -> List[PathEdge]:
        seen = {}
        for incident in self._incident.values():
            for edge in incident:
                seen.setdefault(id(edge), edge)
        return list(seen.values())

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def node(self, node_id: str) -> Optional[GraphNode]:
        return self._nodes.get(node_id)

    def order(self, node_id: str) -> int:
        """Insertion index of a node, used for deterministic tie-breaking"""
        return self._order[node_id]

    def incident_edges(self, node_id: str) -> List[PathEdge]:
        return list(self._incident.get(node_id, []))

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    # ============================================
    # ADJACENCY / WEIGHTS
    # ============================================

    def _admissible_edges(self, node_a: str, node_b: str, accessible_only: bool) -> Optional[List[PathEdge]]:
        """
        Edges usable from node_a to node_b.
        Returns None when the pair is not traversable at all and an empty
        list for a bare connection.
        """
        edges = self._adjacency.get(node_a, {}).get(node_b)
        if edges is None:
            return None
        if not accessible_only:
            return edges
        if not self._nodes[node_b].accessibility:
            return None
        if not edges:
            return edges
        usable = [e for e in edges if e.accessibility]
        return usable or None

    def neighbors(self, node_id: str, accessible_only: bool = False) -> List[str]:
        """Connected node ids in insertion order"""
        return [
            neighbor_id for neighbor_id in self._adjacency.get(node_id, {})
            if self._admissible_edges(node_id, neighbor_id, accessible_only) is not None
        ]

    def _edge_length(self, edge: Optional[PathEdge], node_a: str, node_b: str) -> float:
        if edge is None or edge.distance is None:
            return euclidean_distance(self._nodes[node_a], self._nodes[node_b])
        return edge.distance

    def edge_between(self, node_a: str, node_b: str, accessible_only: bool = False) -> Optional[PathEdge]:
        """The shortest admissible edge from node_a to node_b (None for bare connections)"""
        edges = self._admissible_edges(node_a, node_b, accessible_only)
        if not edges:
            return None
        return min(edges, key=lambda e: self._edge_length(e, node_a, node_b))

    def weight(self, node_a: str, node_b: str, accessible_only: bool = False) -> float:
        """
        Traversal cost from node_a to node_b.

        Uses the edge distance when an edge exists, otherwise the Euclidean
        distance between two directly connected nodes. Pairs that are not
        neighbors cost infinity.
        """
        edges = self._admissible_edges(node_a, node_b, accessible_only)
        if edges is None:
            return math.inf
        return self._edge_length(self.edge_between(node_a, node_b, accessible_only), node_a, node_b)

    def find_nearest_node(self, x: float, y: float, node_type: Optional[str] = None,
                          floor: Optional[int] = None) -> Optional[GraphNode]:
        """Closest node to a coordinate, optionally restricted by type and floor"""
        nearest = None
        min_distance = math.inf

        for node in self._nodes.values():
            if node_type and node.type != node_type:
                continue
            if floor is not None and node.floor is not None and node.floor != floor:
                continue

            distance = math.hypot(node.x - x, node.y - y)
            if distance < min_distance:
                min_distance = distance
                nearest = node

        return nearest
