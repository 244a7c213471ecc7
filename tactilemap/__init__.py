"""TactileMap: printable tactile street maps from local map features.

The geometry core takes :class:`TactileMapData` (plate-millimetre
coordinates) and returns an :class:`AssembledScene` of coloured layers.
"""

from tactilemap.models import TactileMapData, LocalPoint, load_map_data
from tactilemap.scene import AssembledScene, GeometryLayer, assemble_scene
from tactilemap.mesh import MeshReleasedError, Solid, extrude_polygon

__all__ = [
    "AssembledScene", "GeometryLayer", "LocalPoint", "MeshReleasedError",
    "Solid", "TactileMapData", "assemble_scene", "extrude_polygon",
    "load_map_data",
]
