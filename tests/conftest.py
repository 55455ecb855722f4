"""
Shared test fixtures for the door geometry engine tests.
"""
import sys
from pathlib import Path

import numpy as np
import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from garage_door.contracts import DoorConfig, PanelPosition
from garage_door.materials import MaterialSet


@pytest.fixture
def materials():
    """Material set of plain string handles so tests can check assignment."""
    return MaterialSet(
        base="mat_base",
        groove="mat_groove",
        panel="mat_panel",
        trim="mat_trim",
        back="mat_back",
        v_groove="mat_v_groove",
        shadow="mat_shadow",
    )


@pytest.fixture
def sparse_materials():
    """Material set with only the required slots filled."""
    return MaterialSet(base="mat_base", groove="mat_groove", panel="mat_panel", shadow="mat_shadow")


@pytest.fixture
def default_config():
    """The configurator's initial door: 16 x 7 ft carriage house."""
    return DoorConfig()


@pytest.fixture
def raised_config():
    """A 16 x 7 ft raised panel door."""
    return DoorConfig(width_inches=192, height_inches=84, style="Raised Panel")


@pytest.fixture
def standard_panel():
    """A panel sized like one cell of a 16 ft, 4-column door section."""
    return PanelPosition(center_x=-6.0, center_y=0.5, width=3.2, height=1.35)


def world_vertices(mesh, matrix):
    """Mesh vertices transformed by a 4x4 world matrix."""
    verts = np.asarray(mesh.vertices)
    homo = np.column_stack([verts, np.ones(len(verts))])
    return (homo @ np.asarray(matrix).T)[:, :3]
