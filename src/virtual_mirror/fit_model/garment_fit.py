"""
Garment placement over the avatar.

Maps a garment category plus the avatar's measurements, body shape and
height to a placement rectangle in percent of the mirror container. The
base rectangle comes from a per-category table; width follows the
normalised chest/waist/hips, height and vertical offset follow the avatar
height and body shape. Results are not clamped to [0, 100].
"""
import logging
from typing import NamedTuple, Tuple

from ..avatar.scaling import normalize
from ..errors import InvalidAttributeError
from ..garments.categories import BOTTOM, TOP, classify_category, match_key
from ..models import BODY_SHAPES, BodyMeasurements, PlacementRect

logger = logging.getLogger(__name__)


class BaseStyle(NamedTuple):
	top: float
	height: float
	width: float


GARMENT_STYLES: Tuple[Tuple[str, BaseStyle], ...] = (
	# tops
	('t-shirt', BaseStyle(24, 25, 38)),
	('shirt', BaseStyle(24, 30, 40)),
	('blouse', BaseStyle(24, 28, 40)),
	('sweater', BaseStyle(23, 32, 45)),
	('hoodie', BaseStyle(23, 34, 46)),
	('top', BaseStyle(24, 25, 38)),
	# outerwear
	('jacket', BaseStyle(23, 35, 48)),
	('coat', BaseStyle(23, 55, 50)),
	('blazer', BaseStyle(23, 38, 46)),
	('cardigan', BaseStyle(23, 40, 46)),
	('vest', BaseStyle(24, 30, 40)),
	# bottoms
	('jeans', BaseStyle(48, 50, 35)),
	('pants', BaseStyle(48, 50, 35)),
	('trousers', BaseStyle(48, 50, 35)),
	('sweatpants', BaseStyle(48, 50, 38)),
	('shorts', BaseStyle(48, 25, 38)),
	('skirt', BaseStyle(48, 35, 40)),
	('leggings', BaseStyle(48, 50, 30)),
	# full body
	('dress', BaseStyle(24, 60, 42)),
	('jumpsuit', BaseStyle(24, 70, 42)),
	# footwear
	('shoes', BaseStyle(90, 10, 38)),
	('sneakers', BaseStyle(90, 10, 38)),
	('boots', BaseStyle(88, 12, 38)),
	('sandals', BaseStyle(92, 8, 36)),
	('heels', BaseStyle(90, 10, 36)),
)
DEFAULT_GARMENT_STYLE = BaseStyle(30, 40, 40)

MEASUREMENT_RANGE = (70.0, 130.0)
HEIGHT_REFERENCE = 140.0
HEIGHT_SPAN = 70.0  # editing range 140-210 cm

# chest weight for tops, hips weight for bottoms
TOP_CHEST_WEIGHT = {'masculine': 0.7, 'feminine': 0.6, 'androgynous': 0.6}
BOTTOM_HIPS_WEIGHT = {'masculine': 0.4, 'feminine': 0.7, 'androgynous': 0.55}
# vertical nudges in percent: feminine waistline sits higher
BOTTOM_SHAPE_OFFSET = {'masculine': 1.0, 'feminine': -1.5, 'androgynous': 0.0}
TOP_SHAPE_OFFSET = {'masculine': 0.0, 'feminine': -1.0, 'androgynous': 0.0}


def base_style(category: str) -> BaseStyle:
	match = match_key(category, GARMENT_STYLES)
	if match is None:
		logger.debug('No base style for category %r, using default', category)
		return DEFAULT_GARMENT_STYLE
	return match[1]


def height_factor(height: float) -> float:
	"""Linear length factor, 0.9 at 140 cm to 1.1 at 210 cm (not clamped)."""
	return 0.9 + ((height - HEIGHT_REFERENCE) / HEIGHT_SPAN) * 0.2


def width_metric(kind: str, measurements: BodyMeasurements, body_shape: str) -> float:
	"""0..1 body width metric weighted for the garment kind."""
	chest = normalize(measurements.chest, *MEASUREMENT_RANGE)
	waist = normalize(measurements.waist, *MEASUREMENT_RANGE)
	hips = normalize(measurements.hips, *MEASUREMENT_RANGE)
	if kind == TOP:
		w = TOP_CHEST_WEIGHT[body_shape]
		return chest * w + waist * (1 - w)
	if kind == BOTTOM:
		hw = BOTTOM_HIPS_WEIGHT[body_shape]
		return waist * (1 - hw) + hips * hw
	return (chest + waist + hips) / 3


def compute_garment_rect(category: str, measurements: BodyMeasurements, body_shape: str, height: float) -> PlacementRect:
	"""Placement rectangle (percent units) for one garment on this avatar.

	`z_index` is left unset; it comes from the layering pass.
	"""
	if body_shape not in BODY_SHAPES:
		raise InvalidAttributeError('body_shape', body_shape, BODY_SHAPES)

	base = base_style(category)
	kind = classify_category(category)
	h_factor = height_factor(height)
	w_factor = 0.85 + width_metric(kind, measurements, body_shape) * 0.3

	width = base.width * w_factor
	left = 50 - width / 2

	new_height = base.height * h_factor
	height_top_adjustment = (h_factor - 1) * (20 if kind == BOTTOM else 10)
	if kind == BOTTOM:
		shape_top_adjustment = BOTTOM_SHAPE_OFFSET[body_shape]
	elif kind == TOP:
		shape_top_adjustment = TOP_SHAPE_OFFSET[body_shape]
	else:
		shape_top_adjustment = 0.0
	top = base.top + height_top_adjustment + shape_top_adjustment

	return PlacementRect(top=top, left=left, width=width, height=new_height)
