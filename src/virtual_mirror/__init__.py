"""Body measurements, procedural avatar mesh and garment overlay for a virtual mirror."""

from typing import Any, Optional

from .avatar.measurements import estimate_from_attributes
from .avatar.morph import MeshDescription, MeshMorpher
from .errors import DegenerateInputWarning, InvalidAttributeError
from .fit_model.garment_fit import compute_garment_rect
from .garments.layering import LayeredGarment, resolve_layers
from .models import AvatarAttributes, BodyMeasurements, GarmentRef, PlacementRect

__version__ = "0.1.0"

_default_morpher = MeshMorpher()


def estimate_measurements(attrs: Any) -> BodyMeasurements:
    """Chest/waist/hips for an avatar record (AvatarAttributes or mapping)."""
    return estimate_from_attributes(attrs)


def build_or_update_mesh(attrs: Any, measurements: Optional[BodyMeasurements] = None) -> MeshDescription:
    """Rebuild the process-wide avatar mesh; the previous description is released.

    All callers share one module-level MeshMorpher, so a call for one avatar
    releases the description returned to any earlier caller. Hold a
    MeshMorpher of your own to keep independent meshes alive.
    """
    return _default_morpher.build_or_update_mesh(attrs, measurements)


__all__ = [
    "AvatarAttributes",
    "BodyMeasurements",
    "DegenerateInputWarning",
    "GarmentRef",
    "InvalidAttributeError",
    "LayeredGarment",
    "MeshDescription",
    "MeshMorpher",
    "PlacementRect",
    "build_or_update_mesh",
    "compute_garment_rect",
    "estimate_measurements",
    "resolve_layers",
]
