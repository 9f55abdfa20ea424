"""Clamped linear mapping used to turn measurements into scale factors."""


def normalize(value, min_value, max_value, scale_min=0.0, scale_max=1.0):
	"""Clamp `value` to [min_value, max_value] and map it linearly onto [scale_min, scale_max].

	Monotonic non-decreasing in `value` when scale_min <= scale_max.
	"""
	if max_value <= min_value:
		raise ValueError(f"normalize needs min_value < max_value, got {min_value} and {max_value}")
	clamped = max(min_value, min(max_value, value))
	return scale_min + ((clamped - min_value) / (max_value - min_value)) * (scale_max - scale_min)
