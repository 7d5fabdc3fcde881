"""
Turn-by-turn instructions for a node sequence.

Stairs and elevator legs name the vertical connector; every other leg
is described by a compass heading computed in screen coordinates
(x grows east, y grows south).
"""
import math
from typing import List, Optional

import config
from schemas import Direction, ALREADY_THERE_MESSAGE
from services.graph import NavigationGraph


def bearing_degrees(from_x: float, from_y: float, to_x: float, to_y: float) -> float:
    """Angle of travel in [0, 360), 0 = east, growing clockwise on screen"""
    angle = math.degrees(math.atan2(to_y - from_y, to_x - from_x))
    return (angle + 360) % 360


def compass_direction(degrees: float) -> str:
    degrees = degrees % 360
    if degrees >= 315 or degrees < 45:
        return "east"
    elif degrees < 135:
        return "south"
    elif degrees < 225:
        return "west"
    return "north"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def describe_step(graph: NavigationGraph, from_id: str, to_id: str,
                  accessible_only: bool = False) -> Direction:
    """Instruction for a single leg of a route"""
    current = graph.node(from_id)
    target = graph.node(to_id)
    edge = graph.edge_between(from_id, to_id, accessible_only)
    path_type = edge.path_type if edge else None
    distance = graph.weight(from_id, to_id, accessible_only)
    compass = None

    if path_type == "stairs":
        instruction = f"Take the stairs to {target.display_name}"
    elif path_type == "elevator":
        instruction = f"Take the elevator to {target.display_name}"
    else:
        compass = compass_direction(bearing_degrees(current.x, current.y, target.x, target.y))
        instruction = f"Head {compass} for {round_half_up(distance)}m to {target.display_name}"

    if edge and edge.landmarks:
        instruction += f", passing {', '.join(edge.landmarks)}"

    return Direction(
        from_node=from_id,
        to_node=to_id,
        path_type=path_type,
        compass=compass,
        distance=distance,
        instruction=instruction,
    )


def generate_directions(graph: NavigationGraph, node_sequence: List[str],
                        accessible_only: bool = False) -> List[Direction]:
    """
    One Direction per consecutive pair in node_sequence.
    A single-node sequence yields the "already there" step.
    """
    if len(node_sequence) < 2:
        node_id = node_sequence[0] if node_sequence else ""
        return [Direction(from_node=node_id, to_node=node_id, instruction=ALREADY_THERE_MESSAGE)]

    return [
        describe_step(graph, node_sequence[i], node_sequence[i + 1], accessible_only)
        for i in range(len(node_sequence) - 1)
    ]


def calculate_eta(distance_meters: float, walking_speed: Optional[float] = None) -> dict:
    """Walking time for a route length"""
    walking_speed = walking_speed or config.DEFAULT_WALKING_SPEED
    time_seconds = int(distance_meters / walking_speed)

    return {
        "distance_meters": round(distance_meters, 1),
        "time_seconds": time_seconds,
        "time_formatted": format_time(time_seconds)
    }


def format_time(seconds: int) -> str:
    """Format seconds to human readable time"""
    if seconds < 60:
        return f"{seconds} sec"
    elif seconds < 3600:
        mins = seconds // 60
        secs = seconds % 60
        return f"{mins} min {secs} sec" if secs > 0 else f"{mins} min"
    else:
        hours = seconds // 3600
        mins = (seconds % 3600) // 60
        return f"{hours}h {mins}m"
