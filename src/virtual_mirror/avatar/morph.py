"""
Procedural humanoid built from avatar attributes and body measurements.

The body is a flat list of parts ("arena"); each part stores the index of its
parent and a transform relative to that parent. Parts are appended in
evaluation order so a parent always precedes its children, and every
transform is computed from a single (attributes, measurements) snapshot.

The torso is a lathe (surface of revolution) of a per-body-shape profile
whose hip/waist/chest control points are scaled by the measurements.
"""
import logging
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

import numpy as np

from ..models import AvatarAttributes, BodyMeasurements
from . import primitives
from .measurements import estimate_from_attributes
from .scaling import normalize

logger = logging.getLogger(__name__)

Vec3 = Tuple[float, float, float]

# (radius, height) control points; heights run 0 -> 0.9 from hip to neck
TORSO_PROFILES: Mapping[str, Tuple[Tuple[float, float], ...]] = MappingProxyType({
	'feminine': ((0.01, 0.00), (0.25, 0.02), (0.28, 0.15), (0.18, 0.40), (0.22, 0.60), (0.26, 0.70), (0.24, 0.85), (0.18, 0.90)),
	'masculine': ((0.01, 0.00), (0.22, 0.02), (0.24, 0.15), (0.23, 0.40), (0.28, 0.70), (0.32, 0.85), (0.22, 0.90)),
	'androgynous': ((0.01, 0.00), (0.24, 0.02), (0.26, 0.15), (0.21, 0.40), (0.24, 0.70), (0.28, 0.85), (0.20, 0.90)),
})
HIP_INDICES = (1, 2)
WAIST_INDICES = (3,)
CHEST_INDICES = (4, 5)
HIP_ANCHOR_INDEX = 2

FACE_SHAPE_FACTORS: Mapping[str, Vec3] = MappingProxyType({
	'oval': (0.95, 1.0, 0.98),
	'round': (1.05, 0.95, 1.02),
	'square': (1.02, 0.95, 1.0),
})
HEAD_BASE_SCALE = (1.0, 1.1, 1.0)
HEAD_RADIUS = 0.2

TORSO_BASE_Y = 1.05
TORSO_HEIGHT = 0.9
NECK_HEIGHT = 0.15
NECK_RADIUS = 0.08
SHOULDER_FRACTION = 0.88
SHOULDER_RADIUS = 0.07
HIP_ANCHOR_FRACTION = 0.02
HIP_SPREAD = 0.7

ARM_LENGTH = 0.85
LEG_LENGTH = 1.0
CAPSULE_LENGTH = 0.4  # nominal length of the limb capsules before scaling

# upper radius, lower radius, joint radius
ARM_RADII = (0.06, 0.05, 0.055)
LEG_RADII = (0.08, 0.07, 0.075)
HAND_OFFSET = 0.03
FOOT_OFFSET = 0.04
FOOT_FORWARD = 0.05

MEASUREMENT_RANGE = (70.0, 130.0)
REGION_SCALE_RANGE = (0.85, 1.15)
HEIGHT_RANGE = (140.0, 210.0)
HEIGHT_SCALE_RANGE = (0.9, 1.1)
WEIGHT_RANGE = (40.0, 150.0)
MASS_SCALE_RANGE = (0.85, 1.15)

HAIR_STYLE_PARTS = ('hair_short', 'hair_long', 'hair_bun')
FACIAL_HAIR_PARTS = ('mustache', 'goatee', 'beard')


class BodyFactors(NamedTuple):
	chest_scale: float
	waist_scale: float
	hips_scale: float
	height_scale: float
	mass_factor: float


@dataclass(frozen=True)
class MeshPart:
	"""One node of the body: transform is relative to `parent` (-1 = root)."""
	name: str
	kind: str
	parent: int
	position: Vec3 = (0.0, 0.0, 0.0)
	scale: Vec3 = (1.0, 1.0, 1.0)
	dimensions: Mapping[str, Any] = field(default_factory=dict)
	material: Optional[str] = None
	visible: bool = True


class WorldTransform(NamedTuple):
	position: np.ndarray
	scale: np.ndarray


def body_factors(attrs: AvatarAttributes, measurements: BodyMeasurements) -> BodyFactors:
	"""Scale factors shared by every part of one rebuild."""
	return BodyFactors(
		chest_scale=normalize(measurements.chest, *MEASUREMENT_RANGE, *REGION_SCALE_RANGE),
		waist_scale=normalize(measurements.waist, *MEASUREMENT_RANGE, *REGION_SCALE_RANGE),
		hips_scale=normalize(measurements.hips, *MEASUREMENT_RANGE, *REGION_SCALE_RANGE),
		height_scale=normalize(attrs.height, *HEIGHT_RANGE, *HEIGHT_SCALE_RANGE),
		mass_factor=normalize(attrs.weight, *WEIGHT_RANGE, *MASS_SCALE_RANGE),
	)


def profile_regions(n_points: int) -> Tuple[Optional[str], ...]:
	"""Region tag ('hips', 'waist', 'chest' or None) for each profile point."""
	regions = []
	for i in range(n_points):
		if i in HIP_INDICES:
			regions.append('hips')
		elif i in WAIST_INDICES:
			regions.append('waist')
		elif i in CHEST_INDICES:
			regions.append('chest')
		else:
			regions.append(None)
	return tuple(regions)


def morph_torso_profile(body_shape: str, factors: BodyFactors) -> np.ndarray:
	"""Base profile for the body shape with region radii scaled (heights untouched)."""
	base = np.array(TORSO_PROFILES[body_shape], dtype=float)
	region_scale = {'hips': factors.hips_scale, 'waist': factors.waist_scale, 'chest': factors.chest_scale}
	scales = np.array([region_scale.get(r, 1.0) for r in profile_regions(len(base))])
	morphed = base.copy()
	morphed[:, 0] *= scales
	return morphed


def _scale_color(hex_color: str, factor: float) -> str:
	h = hex_color.lstrip('#')
	if len(h) == 3:
		h = ''.join(c * 2 for c in h)
	rgb = [int(h[i:i + 2], 16) for i in (0, 2, 4)]
	return '#' + ''.join(f'{min(255, int(round(c * factor))):02x}' for c in rgb)


class _PartArena:

	def __init__(self):
		self.parts: List[MeshPart] = []
		self.index: Dict[str, int] = {}

	def add(self, name, kind, parent=None, position=(0.0, 0.0, 0.0), scale=(1.0, 1.0, 1.0),
			material=None, visible=True, **dimensions):
		if name in self.index:
			raise ValueError(f'duplicate mesh part {name!r}')
		parent_idx = -1 if parent is None else self.index[parent]
		part = MeshPart(
			name=name,
			kind=kind,
			parent=parent_idx,
			position=tuple(float(v) for v in position),
			scale=tuple(float(v) for v in scale),
			dimensions=MappingProxyType(dict(dimensions)),
			material=material,
			visible=visible,
		)
		self.index[name] = len(self.parts)
		self.parts.append(part)
		return self.index[name]


class MeshDescription:
	"""A built avatar: part arena, torso profile/surface and materials.

	Owned by whoever renders it; `release()` drops the geometry arrays once
	a newer description has replaced this one.
	"""

	def __init__(self, attributes, measurements, factors, profile, torso_vertices, torso_faces, parts, materials):
		self.attributes = attributes
		self.measurements = measurements
		self.factors = factors
		self.profile = profile
		self.regions = profile_regions(len(profile))
		self.torso_vertices = torso_vertices
		self.torso_faces = torso_faces
		self.parts: Tuple[MeshPart, ...] = tuple(parts)
		self.materials = MappingProxyType(dict(materials))
		self._index = {p.name: i for i, p in enumerate(self.parts)}
		self.released = False

	def index(self, name: str) -> int:
		try:
			return self._index[name]
		except KeyError:
			raise KeyError(f'no mesh part named {name!r}') from None

	def part(self, name: str) -> MeshPart:
		return self.parts[self.index(name)]

	def children(self, name: str) -> List[MeshPart]:
		idx = self.index(name)
		return [p for p in self.parts if p.parent == idx]

	def is_visible(self, name: str) -> bool:
		"""Visible only if the part and all of its ancestors are visible."""
		idx = self.index(name)
		while idx != -1:
			part = self.parts[idx]
			if not part.visible:
				return False
			idx = part.parent
		return True

	def visible_parts(self) -> List[MeshPart]:
		return [p for p in self.parts if self.is_visible(p.name)]

	def world_transforms(self) -> List[WorldTransform]:
		"""Compose parent-relative transforms into world space (arena order)."""
		out: List[WorldTransform] = []
		for part in self.parts:
			pos = np.asarray(part.position, dtype=float)
			scl = np.asarray(part.scale, dtype=float)
			if part.parent >= 0:
				parent = out[part.parent]
				pos = parent.position + parent.scale * pos
				scl = parent.scale * scl
			out.append(WorldTransform(pos, scl))
		return out

	def world_transform(self, name: str) -> WorldTransform:
		return self.world_transforms()[self.index(name)]

	def release(self):
		self.torso_vertices = None
		self.torso_faces = None
		self.released = True


def _add_head(arena: _PartArena, attrs: AvatarAttributes, head_y: float, head_scale: Vec3):
	arena.add('head', 'sphere', 'avatar', position=(0, head_y, 0), scale=head_scale, material='skin', radius=HEAD_RADIUS)
	arena.add('nose', 'box', 'head', position=(0, -0.02, 0.19), material='skin', width=0.05, height=0.06, depth=0.05)
	arena.add('left_eye', 'sphere', 'head', position=(-0.07, 0.05, 0.18), material='eyes', radius=0.025)
	arena.add('right_eye', 'sphere', 'head', position=(0.07, 0.05, 0.18), material='eyes', radius=0.025)
	arena.add('mouth', 'box', 'head', position=(0, -0.1, 0.18), material='mouth', width=0.1, height=0.015, depth=0.01)
	arena.add('left_ear', 'sphere', 'head', position=(-0.2, 0.02, 0.03), scale=(0.5, 1, 1), material='skin', radius=0.06)
	arena.add('right_ear', 'sphere', 'head', position=(0.2, 0.02, 0.03), scale=(0.5, 1, 1), material='skin', radius=0.06)

	# exactly one hair style visible ('bald' shows none)
	style = f'hair_{attrs.hair_style}'
	cap = dict(position=(0, 0.02, -0.04), scale=(1.05, 1.05, 0.9), material='hair', radius=0.21)
	arena.add('hair', 'group', 'head')
	arena.add('hair_short', 'sphere', 'hair', visible=style == 'hair_short', **cap)
	arena.add('hair_long', 'group', 'hair', visible=style == 'hair_long')
	arena.add('hair_long.top', 'sphere', 'hair_long', **cap)
	arena.add('hair_long.back', 'box', 'hair_long', position=(0, -0.3, -0.1), material='hair', width=0.3, height=0.5, depth=0.15)
	arena.add('hair_bun', 'group', 'hair', visible=style == 'hair_bun')
	arena.add('hair_bun.top', 'sphere', 'hair_bun', **cap)
	arena.add('hair_bun.bun', 'sphere', 'hair_bun', position=(0, 0.05, -0.22), material='hair', radius=0.08)

	arena.add('facial_hair', 'group', 'head', visible=attrs.body_shape != 'feminine')
	arena.add('mustache', 'box', 'facial_hair', position=(0, -0.08, 0.19), material='hair',
			  visible=attrs.facial_hair == 'mustache', width=0.12, height=0.03, depth=0.02)
	arena.add('goatee', 'cylinder', 'facial_hair', position=(0, -0.15, 0.17), material='hair',
			  visible=attrs.facial_hair == 'goatee', radius_top=0.04, radius_bottom=0.02, height=0.1)
	arena.add('beard', 'polygon', 'facial_hair', position=(0, 0, 0.16), material='hair',
			  visible=attrs.facial_hair == 'beard',
			  points=((-0.1, -0.12), (-0.12, -0.25), (0.12, -0.25), (0.1, -0.12)))


def _add_limb(arena: _PartArena, name: str, is_arm: bool, origin: Vec3, limb_length: float, mass_factor: float):
	upper_r, lower_r, joint_r = ARM_RADII if is_arm else LEG_RADII
	upper_len = lower_len = 0.5 * limb_length

	arena.add(name, 'group', 'avatar', position=origin, scale=(mass_factor, 1.0, mass_factor))
	arena.add(f'{name}.upper', 'capsule', name, position=(0, -upper_len / 2, 0),
			  scale=(1, upper_len / CAPSULE_LENGTH, 1), material='skin', radius=upper_r, length=CAPSULE_LENGTH)
	arena.add(f'{name}.joint', 'sphere', name, position=(0, -upper_len, 0), material='skin', radius=joint_r)
	arena.add(f'{name}.lower', 'capsule', name, position=(0, -upper_len - lower_len / 2, 0),
			  scale=(1, lower_len / CAPSULE_LENGTH, 1), material='skin', radius=lower_r, length=CAPSULE_LENGTH)
	if is_arm:
		arena.add(f'{name}.hand', 'sphere', name, position=(0, -limb_length - HAND_OFFSET, 0),
				  scale=(1, 0.5, 1.2), material='skin', radius=0.06)
	else:
		arena.add(f'{name}.foot', 'box', name, position=(0, -limb_length - FOOT_OFFSET, FOOT_FORWARD),
				  material='skin', width=0.12, height=0.08, depth=0.18)


def build_mesh(attrs: Any, measurements: Optional[BodyMeasurements] = None, *, lathe_segments: int = 24) -> MeshDescription:
	"""Build a complete avatar description from one attributes/measurements snapshot.

	When `measurements` is omitted they are estimated from `attrs`, so the
	mesh never mixes measurements from a different attribute set.
	"""
	attrs = AvatarAttributes.parse(attrs)
	if measurements is None:
		measurements = estimate_from_attributes(attrs)
	factors = body_factors(attrs, measurements)

	profile = morph_torso_profile(attrs.body_shape, factors)
	torso_vertices, torso_faces = primitives.lathe(profile, lathe_segments)

	arena = _PartArena()
	arena.add('avatar', 'group')

	# 1. torso, base fixed, top moves with height
	torso_height = TORSO_HEIGHT * factors.height_scale
	torso_top = TORSO_BASE_Y + torso_height
	arena.add('torso', 'lathe', 'avatar', position=(0, TORSO_BASE_Y, 0), scale=(1, factors.height_scale, 1), material='skin')

	# 2. neck sits on the torso
	arena.add('neck', 'cylinder', 'avatar', position=(0, torso_top + NECK_HEIGHT / 2, 0), material='skin',
			  radius_top=NECK_RADIUS, radius_bottom=NECK_RADIUS, height=NECK_HEIGHT)
	neck_top = torso_top + NECK_HEIGHT

	# 3. head on the neck, shifted by its own vertical radius
	face = FACE_SHAPE_FACTORS[attrs.face_shape]
	head_scale = tuple(b * f for b, f in zip(HEAD_BASE_SCALE, face))
	_add_head(arena, attrs, neck_top + HEAD_RADIUS * head_scale[1], head_scale)

	# 4. shoulders
	shoulder_y = TORSO_BASE_Y + torso_height * SHOULDER_FRACTION
	shoulder_x = float(profile[-2, 0]) * factors.mass_factor
	arena.add('left_shoulder', 'sphere', 'avatar', position=(-shoulder_x, shoulder_y, 0), material='skin', radius=SHOULDER_RADIUS)
	arena.add('right_shoulder', 'sphere', 'avatar', position=(shoulder_x, shoulder_y, 0), material='skin', radius=SHOULDER_RADIUS)

	# 5/6. limbs
	arm_length = ARM_LENGTH * factors.height_scale
	leg_length = LEG_LENGTH * factors.height_scale
	hip_x = float(profile[HIP_ANCHOR_INDEX, 0]) * factors.mass_factor * HIP_SPREAD
	hip_y = TORSO_BASE_Y + torso_height * HIP_ANCHOR_FRACTION
	_add_limb(arena, 'left_arm', True, (-shoulder_x, shoulder_y, 0), arm_length, factors.mass_factor)
	_add_limb(arena, 'right_arm', True, (shoulder_x, shoulder_y, 0), arm_length, factors.mass_factor)
	_add_limb(arena, 'left_leg', False, (-hip_x, hip_y, 0), leg_length, factors.mass_factor)
	_add_limb(arena, 'right_leg', False, (hip_x, hip_y, 0), leg_length, factors.mass_factor)

	materials = {
		'skin': attrs.skin_tone,
		'hair': attrs.hair_color,
		'eyes': attrs.eye_color,
		'mouth': _scale_color(attrs.skin_tone, 0.7),
	}
	return MeshDescription(attrs, measurements, factors, profile, torso_vertices, torso_faces, arena.parts, materials)


class MeshMorpher:
	"""Holds the current avatar description and swaps it atomically.

	A rebuild constructs the whole new description first, publishes it under
	a lock, and only then releases the previous one, so `current` is never
	half-updated.
	"""

	def __init__(self, lathe_segments: int = 24):
		self.lathe_segments = lathe_segments
		self._lock = threading.Lock()
		self._current: Optional[MeshDescription] = None

	@property
	def current(self) -> Optional[MeshDescription]:
		with self._lock:
			return self._current

	def build_or_update_mesh(self, attrs: Any, measurements: Optional[BodyMeasurements] = None) -> MeshDescription:
		new = build_mesh(attrs, measurements, lathe_segments=self.lathe_segments)
		with self._lock:
			old, self._current = self._current, new
		if old is not None:
			old.release()
		logger.debug('Avatar mesh rebuilt: %d parts, %d torso vertices', len(new.parts), len(new.torso_vertices))
		return new

	def dispose(self):
		with self._lock:
			old, self._current = self._current, None
		if old is not None:
			old.release()
