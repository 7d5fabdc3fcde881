import logging

from fastapi import APIRouter, HTTPException

from schemas import PositionRequest, PositionEstimate, SignalDistanceRequest
from services.positioning import estimate_position, signal_converter

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/estimate", response_model=PositionEstimate)
async def estimate_indoor_position(request: PositionRequest):
    """Estimate the caller's position from one batch of beacon / Wi-Fi readings"""
    try:
        return estimate_position(
            request.readings,
            request.nodes,
            method=request.method,
            last_known=request.last_known,
            weighted=request.weighted,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/signal-distance")
async def signal_distance(request: SignalDistanceRequest):
    """Distance in meters implied by a received signal strength"""
    return {
        "signalStrength": request.signal_strength,
        "estimatedDistance": round(signal_converter.signal_to_distance(request.signal_strength), 2),
    }
