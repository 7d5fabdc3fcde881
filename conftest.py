import pytest
from fastapi.testclient import TestClient

from schemas import FloorGraph, GraphSnapshot


@pytest.fixture
def triangle_graph():
    """A(0,0), B(10,0), C(10,10); the A-C shortcut is inaccessible stairs"""
    return GraphSnapshot.model_validate({
        "nodes": [
            {"id": "A", "type": "room", "x": 0, "y": 0, "label": "Room A", "connections": []},
            {"id": "B", "type": "junction", "x": 10, "y": 0, "label": "Junction B", "connections": []},
            {"id": "C", "type": "room", "x": 10, "y": 10, "label": "Room C", "connections": []},
        ],
        "paths": [
            {"id": "ab", "startNode": "A", "endNode": "B", "pathType": "corridor", "distance": 10},
            {"id": "bc", "startNode": "B", "endNode": "C", "pathType": "corridor", "distance": 10},
            {"id": "ac", "startNode": "A", "endNode": "C", "pathType": "stairs",
             "distance": 20, "accessibility": False},
        ],
    })


@pytest.fixture
def floor_one():
    return FloorGraph.model_validate({
        "floor": 1,
        "nodes": [
            {"id": "entrance-1", "type": "entrance", "x": 50, "y": 300, "label": "Main Entrance",
             "beaconId": "beacon-001", "connections": ["junction-1-1"]},
            {"id": "junction-1-1", "type": "junction", "x": 150, "y": 300, "label": "Main Corridor",
             "beaconId": "beacon-002", "connections": ["entrance-1", "room-101", "stairs-1", "elevator-1"]},
            {"id": "room-101", "type": "room", "x": 250, "y": 200, "label": "Lecture Hall 101",
             "beaconId": "beacon-003", "connections": ["junction-1-1"]},
            {"id": "stairs-1", "type": "stairs", "x": 400, "y": 300, "label": "Stairs A",
             "accessibility": False, "beaconId": "beacon-005", "connections": ["junction-1-1"]},
            {"id": "elevator-1", "type": "elevator", "x": 450, "y": 300, "label": "Elevator A",
             "beaconId": "beacon-006", "connections": ["junction-1-1"]},
            {"id": "exit-1", "type": "emergency_exit", "x": 50, "y": 400, "label": "Fire Exit West",
             "connections": ["entrance-1"]},
        ],
        "paths": [
            {"id": "p1", "startNode": "entrance-1", "endNode": "junction-1-1", "distance": 100,
             "landmarks": ["Reception Desk"]},
            {"id": "p2", "startNode": "junction-1-1", "endNode": "stairs-1", "distance": 250},
            {"id": "p3", "startNode": "junction-1-1", "endNode": "elevator-1", "distance": 300},
        ],
    })


@pytest.fixture
def floor_two():
    return FloorGraph.model_validate({
        "floor": 2,
        "nodes": [
            {"id": "stairs-2", "type": "stairs", "x": 400, "y": 300, "label": "Stairs A",
             "accessibility": False, "connections": ["junction-2-1"]},
            {"id": "elevator-2", "type": "elevator", "x": 450, "y": 300, "label": "Elevator A",
             "connections": ["junction-2-1"]},
            {"id": "junction-2-1", "type": "junction", "x": 300, "y": 300, "label": "Floor 2 Corridor",
             "connections": ["stairs-2", "elevator-2", "room-201"]},
            {"id": "room-201", "type": "room", "x": 200, "y": 200, "label": "Conference Room 201",
             "connections": ["junction-2-1"]},
        ],
        "paths": [],
    })


@pytest.fixture
def client():
    from main import app

    return TestClient(app)
