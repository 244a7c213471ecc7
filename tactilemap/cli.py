"""Click CLI commands for TactileMap."""

import logging
import pathlib

import click
from pydantic import ValidationError

from .constants import (
    LAYER_NAMES, LOG_FORMAT, LOG_LEVEL, OUTPUT_DIR, resolve_log_level,
)
from .models import load_map_data
from .scene import assemble_scene
from .transform import compute_scale_factor, lat_lng_to_local, local_to_lat_lng

logger = logging.getLogger(__name__)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Log debug output')
def cli(verbose: bool):
    """TactileMap CLI for turning street map data into printable layers."""
    level = logging.DEBUG if verbose else resolve_log_level(LOG_LEVEL)
    logging.basicConfig(level=level, format=LOG_FORMAT)


@cli.command()
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', default=None,
              help='Export path (.glb keeps layer colours; .stl/.ply merge them). '
                   'Relative names go under TACTILEMAP_OUTPUT_DIR.')
@click.option('--hide', multiple=True, type=click.Choice(LAYER_NAMES),
              help='Leave a layer out of the export (repeatable)')
def assemble(input_path: str, output: str, hide: tuple):
    """Assemble plate layers from a tactile map JSON file."""
    from .export import export_scene

    try:
        map_data = load_map_data(input_path)
    except ValidationError as e:
        logger.error(f"Invalid map data in {input_path}: {e}")
        raise click.ClickException(f"Invalid map data: {e.error_count()} error(s)")

    with assemble_scene(map_data) as scene:
        click.echo(f"\n{'='*50}")
        click.echo(f"Plate {scene.plate_width_mm:g} x {scene.plate_height_mm:g} mm, "
                   f"{len(scene.layers)} layers:")
        for layer in scene.layers:
            mark = ' ' if layer.name in hide else '*'
            click.echo(f"  [{mark}] {layer.label:<20} {len(layer.solids):>5} solids "
                       f"{layer.triangle_count:>8} tris  {layer.color}")
        click.echo(f"{'='*50}")

        if output:
            path = pathlib.Path(output)
            if not path.is_absolute() and path.parent == pathlib.Path('.'):
                path = OUTPUT_DIR / path
            try:
                written = export_scene(scene, path, hidden=hide)
            except ValueError as e:
                logger.error(f"Export failed: {e}")
                raise click.ClickException(str(e))
            click.echo(f"Wrote {written}")


@cli.command('to-local')
@click.argument('lat', type=float)
@click.argument('lng', type=float)
@click.option('--center-lat', type=float, required=True)
@click.option('--center-lng', type=float, required=True)
@click.option('--scale', type=float, required=True, help='Plate mm per metre')
def to_local(lat: float, lng: float, center_lat: float, center_lng: float, scale: float):
    """Convert a lat/lng to plate millimetres."""
    point = lat_lng_to_local(lat, lng, center_lat, center_lng, scale)
    click.echo(f"{point.x:.4f} {point.y:.4f}")


@cli.command('to-latlng')
@click.argument('x', type=float)
@click.argument('y', type=float)
@click.option('--center-lat', type=float, required=True)
@click.option('--center-lng', type=float, required=True)
@click.option('--scale', type=float, required=True, help='Plate mm per metre')
def to_latlng(x: float, y: float, center_lat: float, center_lng: float, scale: float):
    """Convert plate millimetres back to lat/lng."""
    lat, lng = local_to_lat_lng(x, y, center_lat, center_lng, scale)
    click.echo(f"{lat:.9f} {lng:.9f}")


@cli.command()
@click.argument('radius_metres', type=float)
@click.argument('plate_width_mm', type=float)
def scale(radius_metres: float, plate_width_mm: float):
    """Print the mm-per-metre scale that fits a radius onto a plate."""
    if radius_metres <= 0:
        raise click.BadParameter('radius must be positive', param_hint='RADIUS_METRES')
    click.echo(f"{compute_scale_factor(radius_metres, plate_width_mm):.6f}")


if __name__ == '__main__':
    cli()
