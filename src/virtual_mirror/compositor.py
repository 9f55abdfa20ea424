"""
Outfit layout and overlay.

`layout_outfit` is one layout pass: draw order from the layering table
combined with each garment's placement rectangle. `composite_outfit` pastes
the garment cutouts onto a rendered avatar (or a blank canvas) with Pillow,
bottom layer first, each cutout fitted inside its rectangle ("contain").
"""
import logging
from pathlib import Path
from typing import Any, Iterable, List, NamedTuple, Optional, Tuple

from PIL import Image

from .avatar.measurements import estimate_from_attributes
from .config import MirrorSettings
from .fit_model.garment_fit import compute_garment_rect
from .garments.layering import resolve_layers
from .models import AvatarAttributes, BodyMeasurements, GarmentRef, PlacementRect

logger = logging.getLogger(__name__)


class GarmentPlacement(NamedTuple):
    garment: GarmentRef
    rect: PlacementRect


def layout_outfit(attrs: Any, worn: Iterable[Any], measurements: Optional[BodyMeasurements] = None) -> List[GarmentPlacement]:
    """Placement rectangles for every worn garment, ordered bottom layer first.

    Measurements default to the estimate for `attrs` so the layout always
    uses one consistent snapshot.
    """
    attrs = AvatarAttributes.parse(attrs)
    if measurements is None:
        measurements = estimate_from_attributes(attrs)
    placements = []
    for layered in resolve_layers(worn):
        rect = compute_garment_rect(layered.garment.category, measurements, attrs.body_shape, attrs.height)
        placements.append(GarmentPlacement(layered.garment, rect.with_z_index(layered.z_index)))
    return placements


def _load_cutout(cutout: Any) -> Optional[Image.Image]:
    if cutout is None:
        return None
    if isinstance(cutout, Image.Image):
        return cutout.convert('RGBA')
    if isinstance(cutout, (str, Path)):
        with Image.open(cutout) as img:
            return img.convert('RGBA')
    raise TypeError(f'Unsupported cutout handle: {type(cutout).__name__}')


def rect_to_pixels(rect: PlacementRect, size: Tuple[int, int]) -> Tuple[int, int, int, int]:
    """(x, y, width, height) in pixels for a percent rectangle on a canvas of `size`."""
    w, h = size
    return (
        int(round(rect.left / 100.0 * w)),
        int(round(rect.top / 100.0 * h)),
        int(round(rect.width / 100.0 * w)),
        int(round(rect.height / 100.0 * h)),
    )


def fit_contain(image_size: Tuple[int, int], box: Tuple[int, int, int, int]) -> Tuple[int, int, int, int]:
    """Largest aspect-preserving (x, y, w, h) inside `box`, centred."""
    iw, ih = image_size
    bx, by, bw, bh = box
    scale = min(bw / iw, bh / ih)
    nw, nh = max(1, int(round(iw * scale))), max(1, int(round(ih * scale)))
    return bx + (bw - nw) // 2, by + (bh - nh) // 2, nw, nh


def composite_outfit(placements: Iterable[GarmentPlacement], base: Optional[Image.Image] = None,
                     settings: Optional[MirrorSettings] = None) -> Image.Image:
    """Overlay garment cutouts in z order and return an RGBA image.

    Without `base`, draws on a blank canvas sized from settings.
    """
    settings = settings or MirrorSettings()
    if base is None:
        canvas = Image.new('RGBA', (settings.canvas_width, settings.canvas_height), settings.background_color)
    else:
        canvas = base.convert('RGBA')

    for placement in sorted(placements, key=lambda p: p.rect.z_index if p.rect.z_index is not None else 0):
        cutout = _load_cutout(placement.garment.cutout)
        if cutout is None:
            logger.debug('Garment %s has no cutout, skipping', placement.garment.id)
            continue
        box = rect_to_pixels(placement.rect, canvas.size)
        if box[2] <= 0 or box[3] <= 0 or cutout.width == 0 or cutout.height == 0:
            continue
        x, y, w, h = fit_contain(cutout.size, box)
        layer = Image.new('RGBA', canvas.size, (0, 0, 0, 0))
        layer.paste(cutout.resize((w, h), Image.Resampling.LANCZOS), (x, y))
        canvas = Image.alpha_composite(canvas, layer)
    return canvas
