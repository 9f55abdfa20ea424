"""Write a plotly HTML preview and an outfit overlay for one avatar.

Usage:
    python scripts/preview_avatar.py --shape feminine --type curvy --height 168 --weight 62 \
        --garment Dress=dress.png --garment Coat=coat.png --out out/
"""
import argparse
import os
import sys
from pathlib import Path

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, os.path.join(ROOT, 'src'))

from virtual_mirror.avatar.measurements import estimate_from_attributes  # noqa: E402
from virtual_mirror.avatar.morph import build_mesh  # noqa: E402
from virtual_mirror.avatar.plotting import mesh_figure  # noqa: E402
from virtual_mirror.compositor import composite_outfit, layout_outfit  # noqa: E402
from virtual_mirror.logging_config import configure_logging, get_logger  # noqa: E402
from virtual_mirror.models import AvatarAttributes, GarmentRef  # noqa: E402


def _parse_garment(value):
    category, _, path = value.partition('=')
    return category, (path or None)


def run(argv=None):
    p = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    p.add_argument('--shape', default='masculine')
    p.add_argument('--type', dest='body_type', default='fit')
    p.add_argument('--height', type=float, default=170)
    p.add_argument('--weight', type=float, default=70)
    p.add_argument('--garment', action='append', default=[], type=_parse_garment,
                   help='CATEGORY[=cutout.png], repeatable')
    p.add_argument('--out', default='out')
    p.add_argument('--log-level', default=None)
    args = p.parse_args(argv)

    configure_logging(args.log_level)
    logger = get_logger('preview_avatar')

    attrs = AvatarAttributes(body_shape=args.shape, body_type=args.body_type, height=args.height, weight=args.weight)
    measurements = estimate_from_attributes(attrs)
    print('MEASUREMENTS:', measurements.as_dict())

    out = Path(args.out)
    out.mkdir(parents=True, exist_ok=True)
    mesh = build_mesh(attrs, measurements)
    mesh_figure(mesh).write_html(str(out / 'avatar.html'))
    logger.info('Wrote %s (%d parts)', out / 'avatar.html', len(mesh.parts))

    worn = [GarmentRef(id=str(i), category=c, cutout=path) for i, (c, path) in enumerate(args.garment)]
    placements = layout_outfit(attrs, worn, measurements)
    for pl in placements:
        print(f'{pl.garment.category:>12} z={pl.rect.z_index:<3} {pl.rect.as_style()}')
    if any(pl.garment.cutout for pl in placements):
        composite_outfit(placements).save(out / 'outfit.png')
        logger.info('Wrote %s', out / 'outfit.png')


if __name__ == '__main__':
    run()
