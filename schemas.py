from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional, Dict, Any

NODE_TYPES = {
    "room", "junction", "stairs", "elevator", "entrance",
    "emergency_exit", "bathroom", "landmark", "building",
}
PATH_TYPES = {"corridor", "stairs", "elevator", "escalator", "outdoor"}
VERTICAL_PATH_TYPES = {"stairs", "elevator", "escalator"}

ARRIVED_MESSAGE = "You have arrived at your destination"
ALREADY_THERE_MESSAGE = "You are already at your destination"


class WireModel(BaseModel):
    """Accepts both the camelCase wire names and the python attribute names"""
    model_config = ConfigDict(populate_by_name=True)


class GraphNode(WireModel):
    id: str
    type: str = "junction"  # room, junction, stairs, elevator, entrance, emergency_exit, ...
    x: float
    y: float
    floor: Optional[int] = None  # Z coordinate (floor index)
    lat: Optional[float] = None  # Outdoor nodes only
    lng: Optional[float] = None
    label: Optional[str] = None
    accessibility: bool = True  # False = not wheelchair accessible
    connections: List[str] = []
    beacon_id: Optional[str] = Field(default=None, alias="beaconId")
    wifi_bssid: Optional[str] = Field(default=None, alias="wifiBssid")
    is_active: bool = Field(default=True, alias="isActive")

    @property
    def display_name(self) -> str:
        return self.label or self.id


class PathEdge(WireModel):
    id: str
    start_node: str = Field(alias="startNode")
    end_node: str = Field(alias="endNode")
    path_type: str = Field(default="corridor", alias="pathType")
    distance: Optional[float] = Field(default=None, ge=0)  # None = Euclidean fallback
    accessibility: bool = True
    landmarks: List[str] = []
    bidirectional: bool = True
    is_active: bool = Field(default=True, alias="isActive")


class GraphSnapshot(WireModel):
    nodes: List[GraphNode] = []
    paths: List[PathEdge] = []


class FloorGraph(GraphSnapshot):
    floor: int


class FloorConnector(WireModel):
    """Vertical link between the same physical spot on two floors"""
    id: Optional[str] = None
    from_node: str = Field(alias="fromNode")
    to_node: str = Field(alias="toNode")
    path_type: str = Field(default="stairs", alias="pathType")
    accessibility: bool = True
    distance: Optional[float] = Field(default=None, ge=0)


class Direction(WireModel):
    from_node: str = Field(alias="fromNode")
    to_node: str = Field(alias="toNode")
    path_type: Optional[str] = Field(default=None, alias="pathType")
    compass: Optional[str] = None  # east, south, west, north
    distance: float = 0.0
    instruction: str


class PathResult(WireModel):
    node_sequence: List[str] = Field(alias="nodeSequence")
    total_distance: float = Field(alias="totalDistance")
    steps: List[Direction]
    accessible_only: bool = Field(default=False, alias="accessibleOnly")

    @property
    def directions(self) -> List[str]:
        instructions = [step.instruction for step in self.steps]
        if len(self.node_sequence) > 1:
            instructions.append(ARRIVED_MESSAGE)
        return instructions

    def to_wire(self) -> Dict[str, Any]:
        return {
            "path": self.node_sequence,
            "distance": self.total_distance,
            "directions": self.directions,
        }


class NoRoute(WireModel):
    reason: str  # unknown_node, disconnected, inaccessible
    message: str = "No path found"


class BeaconReading(WireModel):
    beacon_id: str = Field(alias="beaconId")
    signal_strength: Optional[float] = Field(default=None, alias="signalStrength")  # dBm
    estimated_distance: Optional[float] = Field(default=None, ge=0, alias="estimatedDistance")
    source: str = "beacon"  # beacon or wifi

    @model_validator(mode="after")
    def check_signal(self):
        if self.signal_strength is None and self.estimated_distance is None:
            raise ValueError("reading needs signalStrength or estimatedDistance")
        return self


class PositionEstimate(WireModel):
    x: float
    y: float
    floor: Optional[int] = None
    accuracy_radius: float = Field(ge=0, alias="accuracyRadius")
    method: str = "beacon"  # beacon, wifi, hybrid
    basis: str = "centroid"  # centroid, nearest, default, last_known
    readings_used: int = Field(default=0, alias="readingsUsed")


class GraphValidationResult(WireModel):
    is_valid: bool = Field(alias="isValid")
    disconnected_nodes: List[str] = Field(alias="disconnectedNodes")
    dead_ends: List[str] = Field(alias="deadEnds")
    missing_reverse_connections: List[Dict[str, str]] = Field(alias="missingReverseConnections")
    dangling_references: List[Dict[str, str]] = Field(alias="danglingReferences")
    inaccessible_nodes: List[str] = Field(alias="inaccessibleNodes")
    unreachable_nodes: List[str] = Field(alias="unreachableNodes")
    warnings: List[str]


# ============================================
# HTTP REQUEST / RESPONSE BODIES
# ============================================

class PathfindingRequest(WireModel):
    start_node: str = Field(alias="startNode")
    end_node: str = Field(alias="endNode")
    floor_data: GraphSnapshot = Field(alias="floorData")
    accessible_only: bool = Field(default=False, alias="accessibleOnly")
    walking_speed: Optional[float] = Field(default=None, gt=0, alias="walkingSpeed")


class ComposeRequest(WireModel):
    floors: List[FloorGraph]
    connectors: List[FloorConnector] = []
    infer_connectors: bool = Field(default=False, alias="inferConnectors")
    accessible_only: bool = Field(default=False, alias="accessibleOnly")


class MultiFloorPathfindingRequest(ComposeRequest):
    start_node: str = Field(alias="startNode")
    end_node: str = Field(alias="endNode")
    walking_speed: Optional[float] = Field(default=None, gt=0, alias="walkingSpeed")


class NearestRequest(WireModel):
    start_node: str = Field(alias="startNode")
    floor_data: GraphSnapshot = Field(alias="floorData")
    node_type: str = Field(default="emergency_exit", alias="nodeType")
    accessible_only: bool = Field(default=False, alias="accessibleOnly")


class Eta(BaseModel):
    distance_meters: float
    time_seconds: int
    time_formatted: str


class PathResultResponse(BaseModel):
    path: List[str]
    distance: float
    directions: List[str]
    eta: Optional[Eta] = None


class PositionRequest(WireModel):
    readings: List[BeaconReading] = []
    nodes: List[GraphNode] = []
    method: Optional[str] = None
    last_known: Optional[PositionEstimate] = Field(default=None, alias="lastKnown")
    weighted: bool = False


class SignalDistanceRequest(WireModel):
    signal_strength: float = Field(alias="signalStrength")
