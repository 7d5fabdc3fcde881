"""
Multi-floor graph composition.

Floor graphs are merged into one snapshot and linked through vertical
connectors (stairs, elevators, escalators). Only elevator connectors are
ever marked accessible, so an accessible-only route between floors that
lack an elevator reports no path instead of falling back to stairs.
"""
import logging
from typing import Dict, List, Optional, Tuple

import config
from schemas import FloorGraph, FloorConnector, GraphNode, GraphSnapshot, PathEdge, VERTICAL_PATH_TYPES

logger = logging.getLogger(__name__)


def _connector_edge(connector: FloorConnector) -> PathEdge:
    distance = connector.distance if connector.distance is not None else config.CONNECTOR_DISTANCE
    return PathEdge(
        id=connector.id or f"connector:{connector.from_node}:{connector.to_node}",
        start_node=connector.from_node,
        end_node=connector.to_node,
        path_type=connector.path_type,
        distance=distance,
        accessibility=connector.accessibility and connector.path_type == "elevator",
    )


def compose_multi_floor(floor_graphs: List[FloorGraph],
                        connectors: Optional[List[FloorConnector]] = None,
                        accessible_only: bool = False) -> GraphSnapshot:
    """
    Combine per-floor graphs into a single graph.

    Args:
        floor_graphs: One graph per floor
        connectors: Vertical links between nodes on different floors
        accessible_only: Drop every connector that is not an elevator

    Returns:
        GraphSnapshot that can be passed straight to find_path
    """
    if floor_graphs is None:
        raise ValueError("floor_graphs is required")

    nodes: Dict[str, GraphNode] = {}
    paths: List[PathEdge] = []

    for floor_graph in floor_graphs:
        for node in floor_graph.nodes:
            if node.id in nodes:
                logger.warning(f"Node {node.id} on floor {floor_graph.floor} already defined, skipped")
                continue
            if node.floor is None:
                node = node.model_copy(update={"floor": floor_graph.floor})
            nodes[node.id] = node
        paths.extend(floor_graph.paths)

    for connector in connectors or []:
        if connector.from_node not in nodes or connector.to_node not in nodes:
            logger.debug(f"Connector {connector.from_node} <-> {connector.to_node} references unknown node, skipped")
            continue
        if accessible_only and connector.path_type != "elevator":
            continue
        paths.append(_connector_edge(connector))

    logger.info(f"Composed {len(floor_graphs)} floors: {len(nodes)} nodes, {len(paths)} paths")
    return GraphSnapshot(nodes=list(nodes.values()), paths=paths)


def infer_connectors(floor_graphs: List[FloorGraph]) -> List[FloorConnector]:
    """
    Pair stairs / elevator / escalator nodes that share a type and label
    on consecutive floors (e.g. "Stairs A" on floors 1 and 2).
    """
    shafts: Dict[Tuple[str, str], Dict[int, GraphNode]] = {}

    for floor_graph in sorted(floor_graphs, key=lambda g: g.floor):
        for node in floor_graph.nodes:
            if node.type not in VERTICAL_PATH_TYPES:
                continue
            floor = node.floor if node.floor is not None else floor_graph.floor
            shafts.setdefault((node.type, node.label or node.id), {}).setdefault(floor, node)

    connectors = []
    for (node_type, _), by_floor in shafts.items():
        floors = sorted(by_floor)
        for lower, upper in zip(floors, floors[1:]):
            if upper - lower != 1:
                continue
            bottom, top = by_floor[lower], by_floor[upper]
            connectors.append(FloorConnector(
                from_node=bottom.id,
                to_node=top.id,
                path_type=node_type,
                accessibility=bottom.accessibility and top.accessibility,
            ))

    return connectors
