import logging

from fastapi import APIRouter, HTTPException

from schemas import (
    PathfindingRequest, MultiFloorPathfindingRequest, ComposeRequest, NearestRequest,
    GraphSnapshot, GraphValidationResult, PathResult, PathResultResponse,
)
from services.directions import calculate_eta
from services.multifloor import compose_multi_floor, infer_connectors
from services.pathfinding import find_path, find_nearest_of_type, validate_graph

logger = logging.getLogger(__name__)

router = APIRouter()


def _route_response(result, walking_speed=None) -> PathResultResponse:
    """Wire shape for a route, or 404 when there is none"""
    if not isinstance(result, PathResult):
        raise HTTPException(status_code=404, detail={"message": result.message, "reason": result.reason})

    return PathResultResponse(
        **result.to_wire(),
        eta=calculate_eta(result.total_distance, walking_speed),
    )


def _compose(request: ComposeRequest, drop_stairs: bool = False) -> GraphSnapshot:
    connectors = list(request.connectors)
    if request.infer_connectors:
        connectors.extend(infer_connectors(request.floors))
    return compose_multi_floor(request.floors, connectors, accessible_only=drop_stairs)


@router.post("/pathfinding", response_model=PathResultResponse)
async def calculate_route(request: PathfindingRequest):
    """Shortest route between two nodes with step-by-step directions"""
    try:
        result = find_path(
            request.floor_data,
            request.start_node,
            request.end_node,
            accessible_only=request.accessible_only,
        )
        return _route_response(result, request.walking_speed)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Unexpected error in calculate_route: {e}")
        raise HTTPException(status_code=500, detail="Failed to find path")


@router.post("/pathfinding/multi-floor", response_model=PathResultResponse)
async def calculate_multi_floor_route(request: MultiFloorPathfindingRequest):
    """Route across floors linked by stairs/elevator connectors"""
    try:
        graph = _compose(request)
        result = find_path(graph, request.start_node, request.end_node, accessible_only=request.accessible_only)
        return _route_response(result, request.walking_speed)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Unexpected error in calculate_multi_floor_route: {e}")
        raise HTTPException(status_code=500, detail="Failed to find path")


@router.post("/nearest", response_model=PathResultResponse)
async def route_to_nearest(request: NearestRequest):
    """Route to the closest node of a type (emergency exit by default)"""
    try:
        result = find_nearest_of_type(
            request.floor_data,
            request.start_node,
            request.node_type,
            accessible_only=request.accessible_only,
        )
        return _route_response(result)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Unexpected error in route_to_nearest: {e}")
        raise HTTPException(status_code=500, detail="Failed to find path")


@router.post("/graph/compose", response_model=GraphSnapshot)
async def compose_graph(request: ComposeRequest):
    """Merge floor graphs into one graph usable by /pathfinding"""
    try:
        return _compose(request, drop_stairs=request.accessible_only)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Unexpected error in compose_graph: {e}")
        raise HTTPException(status_code=500, detail="Failed to compose graph")


@router.post("/graph/validate", response_model=GraphValidationResult)
async def validate_navigation_graph(snapshot: GraphSnapshot):
    """Report data-quality issues in a graph snapshot"""
    try:
        return validate_graph(snapshot)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Unexpected error in validate_navigation_graph: {e}")
        raise HTTPException(status_code=500, detail="Failed to validate graph")
