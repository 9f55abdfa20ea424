"""
Target body proportions per (body shape, body type).

whr: waist-to-hip ratio (lower is more hourglass/pear, higher is straighter)
cwr: chest-to-waist ratio (higher is more V-shaped)
"""
from types import MappingProxyType
from typing import Mapping, NamedTuple

from ..errors import InvalidAttributeError
from ..models import BODY_SHAPES, BODY_TYPES


class ProportionRatios(NamedTuple):
	whr: float
	cwr: float


_RATIOS = {
	'masculine': {
		'slim': ProportionRatios(0.90, 1.175),
		'fit': ProportionRatios(0.85, 1.275),
		'muscular': ProportionRatios(0.85, 1.40),
		'curvy': ProportionRatios(0.95, 1.075),  # broad/stocky build
		'plus-size': ProportionRatios(1.025, 1.05),
	},
	'feminine': {
		'slim': ProportionRatios(0.80, 1.175),
		'fit': ProportionRatios(0.75, 1.275),
		'muscular': ProportionRatios(0.80, 1.375),
		'curvy': ProportionRatios(0.715, 1.20),
		'plus-size': ProportionRatios(0.865, 1.10),
	},
	'androgynous': {
		'slim': ProportionRatios(0.85, 1.175),
		'fit': ProportionRatios(0.83, 1.225),
		'muscular': ProportionRatios(0.85, 1.325),
		'curvy': ProportionRatios(0.815, 1.15),
		'plus-size': ProportionRatios(0.925, 1.075),
	},
}

BODY_TYPE_RATIOS: Mapping[str, Mapping[str, ProportionRatios]] = MappingProxyType(
	{shape: MappingProxyType(types) for shape, types in _RATIOS.items()}
)


def lookup_ratios(body_shape: str, body_type: str) -> ProportionRatios:
	"""Return the (whr, cwr) target for a body shape/type pair."""
	if body_shape not in BODY_TYPE_RATIOS:
		raise InvalidAttributeError('body_shape', body_shape, BODY_SHAPES)
	by_type = BODY_TYPE_RATIOS[body_shape]
	if body_type not in by_type:
		raise InvalidAttributeError('body_type', body_type, BODY_TYPES)
	return by_type[body_type]
