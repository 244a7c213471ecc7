"""Preview export: one coloured trimesh per visible layer."""

import logging
import pathlib

import numpy as np
import trimesh

from .mesh import MeshReleasedError
from .scene import AssembledScene

logger = logging.getLogger(__name__)


def hex_to_rgba(color: str) -> list[float]:
    """``'#rrggbb'`` → ``[r, g, b, 1.0]`` in 0-1 floats."""
    value = color.lstrip('#')
    return [int(value[i:i + 2], 16) / 255.0 for i in (0, 2, 4)] + [1.0]


def layer_mesh(layer):
    """Concatenate a layer's solids into one ``Trimesh`` (``None`` if empty)."""
    parts = [solid.to_trimesh() for solid in layer.solids if not solid.is_empty]
    if not parts:
        return None
    mesh = trimesh.util.concatenate(parts) if len(parts) > 1 else parts[0]
    material = trimesh.visual.material.PBRMaterial(
        baseColorFactor=hex_to_rgba(layer.color),
        doubleSided=False,
    )
    mesh.visual = trimesh.visual.TextureVisuals(material=material)
    return mesh


def scene_to_trimesh(scene: AssembledScene, hidden=()) -> trimesh.Scene:
    """Build a ``trimesh.Scene`` with one named geometry per non-empty layer.

    Layers that are not visible, or whose name is in ``hidden``, are skipped.
    The scene stays owned by the caller; its solids are copied, not moved.
    """
    if scene.disposed:
        raise MeshReleasedError("Cannot export a disposed scene")

    out = trimesh.Scene()
    for layer in scene.layers:
        if not layer.visible or layer.name in hidden:
            continue
        mesh = layer_mesh(layer)
        if mesh is None:
            continue
        out.add_geometry(mesh, geom_name=layer.name)
    return out


def export_scene(scene: AssembledScene, output_path, hidden=()) -> pathlib.Path:
    """Write the scene to ``output_path``; the format follows the extension.

    GLB keeps per-layer colours.  Single-mesh formats (STL, PLY) receive
    all visible layers merged into one body.
    """
    output_path = pathlib.Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    tm_scene = scene_to_trimesh(scene, hidden=hidden)
    if not tm_scene.geometry:
        raise ValueError("No visible geometry to export")

    file_type = output_path.suffix.lstrip('.').lower()
    if file_type == 'glb':
        tm_scene.export(str(output_path), file_type='glb')
    else:
        parts = [solid.to_trimesh()
                 for layer in scene.layers
                 if layer.visible and layer.name not in hidden
                 for solid in layer.solids if not solid.is_empty]
        merged = trimesh.util.concatenate(parts)
        merged.export(str(output_path), file_type=file_type)

    faces = int(np.sum([len(g.faces) for g in tm_scene.geometry.values()]))
    size_kb = output_path.stat().st_size / 1024
    logger.info(f"Exported {len(tm_scene.geometry)} layer(s), {faces} faces "
                f"to {output_path} ({size_kb:.1f} KB)")
    return output_path
