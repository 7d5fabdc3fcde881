"""
Indoor position estimation from proximity beacon and Wi-Fi readings.

The multi-reading estimate is a centroid of the nodes the readings map
to, not a least-squares multilateration solve. Displayed accuracy numbers
depend on this, so the plain mean stays the default; inverse-distance
weighting is available as an explicit opt-in.
"""
import math
import random
import logging
import statistics
from typing import Dict, Iterable, List, Optional, Tuple

import config
from schemas import BeaconReading, GraphNode, PositionEstimate

logger = logging.getLogger(__name__)

MIN_CENTROID_READINGS = 3


class SignalConverter:
    """RSSI to distance conversion using the log-distance path loss model"""

    def __init__(self,
                 tx_power_dbm: float = config.BEACON_TX_POWER_DBM,
                 path_loss_exponent: float = config.PATH_LOSS_EXPONENT,
                 d0: float = config.REFERENCE_DISTANCE,
                 min_distance: float = config.MIN_SIGNAL_DISTANCE):
        """
        Args:
            tx_power_dbm: Signal strength measured at d0 meters
            path_loss_exponent: 2.0 in free space, higher indoors
            d0: Reference distance in meters
            min_distance: Lower bound of any estimate
        """
        self.tx_power_dbm = tx_power_dbm
        self.path_loss_exponent = path_loss_exponent
        self.d0 = d0
        self.min_distance = min_distance

    def signal_to_distance(self, rssi_dbm: float) -> float:
        """Estimated distance in meters; a stronger signal never gives a larger distance"""
        path_loss_db = self.tx_power_dbm - rssi_dbm
        distance = self.d0 * 10 ** (path_loss_db / (10 * self.path_loss_exponent))
        return max(distance, self.min_distance)


signal_converter = SignalConverter()


def estimated_distance(reading: BeaconReading, converter: Optional[SignalConverter] = None) -> float:
    if reading.estimated_distance is not None:
        return reading.estimated_distance
    return (converter or signal_converter).signal_to_distance(reading.signal_strength)


def _positioning_method(readings: Iterable[BeaconReading]) -> str:
    sources = {reading.source for reading in readings}
    if sources == {"wifi"}:
        return "wifi"
    if "wifi" in sources:
        return "hybrid"
    return "beacon"


def _index_catalog(node_catalog: Iterable[GraphNode]) -> Dict[str, GraphNode]:
    index = {}
    for node in node_catalog:
        for transmitter_id in (node.beacon_id, node.wifi_bssid):
            if transmitter_id:
                index.setdefault(transmitter_id, node)
    return index


def default_position(method: str = "beacon") -> PositionEstimate:
    return PositionEstimate(
        x=config.DEFAULT_POSITION_X,
        y=config.DEFAULT_POSITION_Y,
        floor=config.DEFAULT_POSITION_FLOOR,
        accuracy_radius=config.DEFAULT_POSITION_ACCURACY,
        method=method,
        basis="default",
    )


def estimate_position(readings: List[BeaconReading],
                      node_catalog: List[GraphNode],
                      method: Optional[str] = None,
                      last_known: Optional[PositionEstimate] = None,
                      weighted: bool = False,
                      rng: Optional[random.Random] = None,
                      converter: Optional[SignalConverter] = None) -> PositionEstimate:
    """
    Best guess of the caller's position.

    Args:
        readings: One scan worth of beacon / Wi-Fi observations
        node_catalog: Nodes carrying the beacon ids / BSSIDs installed at them
        method: Provenance tag; derived from the reading sources when omitted
        last_known: Returned instead of the configured default when nothing maps
        weighted: Weight the centroid by inverse distance instead of a plain mean
        rng: Random source for the single-beacon jitter

    Returns:
        PositionEstimate. Fewer than 3 usable readings fall back to the
        nearest beacon, none at all to last_known or the default position.
    """
    if readings is None or node_catalog is None:
        raise ValueError("readings and node_catalog are required")

    method = method or _positioning_method(readings)
    catalog = _index_catalog(node_catalog)

    usable: List[Tuple[BeaconReading, GraphNode, float]] = []
    for reading in readings:
        node = catalog.get(reading.beacon_id)
        if node is None:
            logger.debug(f"Reading from unmapped transmitter {reading.beacon_id} ignored")
            continue
        usable.append((reading, node, estimated_distance(reading, converter)))

    if not usable:
        if last_known is not None:
            return last_known.model_copy(update={"basis": "last_known", "readings_used": 0})
        logger.info("No usable signal readings, returning default position")
        return default_position(method)

    if len(usable) < MIN_CENTROID_READINGS:
        _, node, distance = min(usable, key=lambda item: item[2])
        rng = rng or random
        return PositionEstimate(
            x=node.x + rng.uniform(-config.POSITION_JITTER, config.POSITION_JITTER),
            y=node.y + rng.uniform(-config.POSITION_JITTER, config.POSITION_JITTER),
            floor=node.floor,
            accuracy_radius=distance,
            method=method,
            basis="nearest",
            readings_used=len(usable),
        )

    nodes = [node for _, node, _ in usable]
    distances = [distance for _, _, distance in usable]

    if weighted:
        weights = [1.0 / max(d, config.MIN_SIGNAL_DISTANCE) for d in distances]
        total = sum(weights)
        x = sum(w * n.x for w, n in zip(weights, nodes)) / total
        y = sum(w * n.y for w, n in zip(weights, nodes)) / total
    else:
        x = statistics.fmean(n.x for n in nodes)
        y = statistics.fmean(n.y for n in nodes)

    floors = [n.floor for n in nodes if n.floor is not None]
    floor = math.floor(statistics.fmean(floors) + 0.5) if floors else None

    return PositionEstimate(
        x=x,
        y=y,
        floor=floor,
        accuracy_radius=statistics.fmean(distances),
        method=method,
        basis="centroid",
        readings_used=len(usable),
    )
