"""
Body measurement estimate from height, weight and body classes.

Waist is estimated from BMI and scaled to a 170 cm reference height; chest
and hips follow from the target ratios in `proportions`.
"""
import logging
import math
import warnings
from typing import Any

from ..errors import DegenerateInputWarning
from ..models import AvatarAttributes, BodyMeasurements
from .proportions import lookup_ratios

logger = logging.getLogger(__name__)

REFERENCE_HEIGHT_CM = 170.0
FALLBACK_MEASUREMENTS = BodyMeasurements(chest=100, waist=85, hips=95, fallback=True)


def _round_half_up(value: float) -> int:
	# JS Math.round semantics; Python's round() is banker's rounding
	return int(math.floor(value + 0.5))


def estimate_measurements(height: float, weight: float, body_shape: str, body_type: str) -> BodyMeasurements:
	"""Estimate chest/waist/hips (cm) for the given avatar.

	Non-positive or non-finite height or weight returns FALLBACK_MEASUREMENTS
	instead of raising; the result has `fallback=True` and a DegenerateInputWarning is
	issued so callers do not treat it as a real estimate.
	"""
	ratios = lookup_ratios(body_shape, body_type)
	if not (math.isfinite(height) and math.isfinite(weight)) or height <= 0 or weight <= 0:
		logger.warning('Degenerate avatar input (height=%s, weight=%s); using fallback measurements', height, weight)
		warnings.warn(
			f'height={height} weight={weight}: returning fallback measurements',
			DegenerateInputWarning,
			stacklevel=2,
		)
		return FALLBACK_MEASUREMENTS

	height_m = height / 100.0
	bmi = weight / (height_m * height_m)
	base_waist = 35.0 + bmi * 1.8
	scaled_waist = base_waist * (height / REFERENCE_HEIGHT_CM)

	waist = _round_half_up(scaled_waist)
	chest = _round_half_up(waist * ratios.cwr)
	hips = _round_half_up(waist / ratios.whr)
	logger.debug('Measurements for %s/%s %.1fcm %.1fkg (bmi %.2f): chest=%d waist=%d hips=%d',
				 body_shape, body_type, height, weight, bmi, chest, waist, hips)
	return BodyMeasurements(chest=chest, waist=waist, hips=hips)


def estimate_from_attributes(attrs: Any) -> BodyMeasurements:
	"""Same as estimate_measurements, reading the four inputs from an avatar record."""
	attrs = AvatarAttributes.parse(attrs)
	return estimate_measurements(attrs.height, attrs.weight, attrs.body_shape, attrs.body_type)
