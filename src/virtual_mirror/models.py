"""Data models shared by the measurement, mesh and garment-fit modules."""

import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidAttributeError

BODY_SHAPES = ("masculine", "feminine", "androgynous")
BODY_TYPES = ("slim", "fit", "muscular", "curvy", "plus-size")
HAIR_STYLES = ("short", "long", "bun", "bald")
FACIAL_HAIRS = ("none", "mustache", "goatee", "beard")
FACE_SHAPES = ("oval", "round", "square")

BodyShape = Literal["masculine", "feminine", "androgynous"]
BodyType = Literal["slim", "fit", "muscular", "curvy", "plus-size"]
HairStyle = Literal["short", "long", "bun", "bald"]
FacialHair = Literal["none", "mustache", "goatee", "beard"]
FaceShape = Literal["oval", "round", "square"]

# field name -> allowed values, used for error reporting
CLOSED_SETS: Dict[str, tuple] = {
    "body_shape": BODY_SHAPES,
    "body_type": BODY_TYPES,
    "hair_style": HAIR_STYLES,
    "facial_hair": FACIAL_HAIRS,
    "face_shape": FACE_SHAPES,
}

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class AvatarAttributes(BaseModel):
    """High-level avatar description coming from the editing surface.

    Accepts both snake_case field names and the camelCase keys used by the
    avatar editor (``bodyShape``, ``skinTone``...). Invalid values raise
    :class:`InvalidAttributeError` from both the constructor and :meth:`parse`.
    Instances are frozen; use :meth:`with_changes` to derive an edited copy.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    body_shape: BodyShape = Field(default="masculine", alias="bodyShape")
    body_type: BodyType = Field(default="fit", alias="bodyType")
    height: float = Field(default=170.0, allow_inf_nan=False)
    weight: float = Field(default=70.0, allow_inf_nan=False)
    skin_tone: str = Field(default="#f2d0b1", alias="skinTone")
    hair_color: str = Field(default="#090806", alias="hairColor")
    eye_color: str = Field(default="#8c5a3c", alias="eyeColor")
    hair_style: HairStyle = Field(default="short", alias="hairStyle")
    facial_hair: FacialHair = Field(default="none", alias="facialHair")
    face_shape: FaceShape = Field(default="oval", alias="faceShape")

    @field_validator("skin_tone", "hair_color", "eye_color")
    @classmethod
    def _check_color(cls, value: str) -> str:
        if not isinstance(value, str) or not _HEX_COLOR.match(value):
            raise ValueError("expected a hex colour like '#a06a42'")
        return value.lower()

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise _to_attribute_error(exc, data) from exc

    @classmethod
    def parse(cls, data: Any) -> "AvatarAttributes":
        """Build attributes from a mapping (or pass an instance through).

        Validation failures are reported as :class:`InvalidAttributeError`
        naming the first offending field.
        """
        if isinstance(data, cls):
            return data
        if not isinstance(data, Mapping):
            raise TypeError(f"Cannot build AvatarAttributes from {type(data).__name__}")
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise _to_attribute_error(exc, data) from exc

    def with_changes(self, **updates: Any) -> "AvatarAttributes":
        """Return a validated copy with some fields replaced."""
        data = self.model_dump()
        data.update(updates)
        return type(self).parse(data)


def _to_attribute_error(exc: ValidationError, data: Mapping) -> InvalidAttributeError:
    err = exc.errors()[0]
    loc = err.get("loc") or ("<root>",)
    name = str(loc[0])
    # map camelCase aliases back to field names
    for field_name, info in AvatarAttributes.model_fields.items():
        if info.alias == name:
            name = field_name
            break
    value = err.get("input", data.get(name))
    return InvalidAttributeError(name, value, CLOSED_SETS.get(name))


@dataclass(frozen=True)
class BodyMeasurements:
    """Chest, waist and hip circumference in whole centimetres.

    Only produced by the measurement estimator; `fallback` is True when the
    values are the fixed default used for non-positive height or weight.
    """

    chest: int
    waist: int
    hips: int
    fallback: bool = False

    def as_dict(self) -> Dict[str, int]:
        return {"chest": self.chest, "waist": self.waist, "hips": self.hips}


@dataclass(frozen=True)
class GarmentRef:
    """A worn garment as supplied by the closet: only `category` matters here."""

    id: str
    category: str
    cutout: Any = field(default=None, compare=False, repr=False)

    @classmethod
    def coerce(cls, item: Any) -> "GarmentRef":
        if isinstance(item, cls):
            return item
        if isinstance(item, Mapping):
            return cls(
                id=str(item["id"]),
                category=str(item.get("category") or ""),
                cutout=item.get("cutout", item.get("cutoutImageData")),
            )
        raise TypeError(f"Cannot build GarmentRef from {type(item).__name__}")


@dataclass(frozen=True)
class PlacementRect:
    """Garment placement in percent of the mirror container."""

    top: float
    left: float
    width: float
    height: float
    z_index: Optional[int] = None
    object_fit: str = "contain"

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def right(self) -> float:
        return self.left + self.width

    def with_z_index(self, z_index: int) -> "PlacementRect":
        return replace(self, z_index=z_index)

    def as_style(self) -> Dict[str, Any]:
        """CSS-like style dict (percent strings) for UI collaborators."""
        style: Dict[str, Any] = {
            "top": f"{self.top}%",
            "left": f"{self.left}%",
            "width": f"{self.width}%",
            "height": f"{self.height}%",
            "objectFit": self.object_fit,
        }
        if self.z_index is not None:
            style["zIndex"] = self.z_index
        return style
