"""
Draw order for worn garments.

Each garment gets a layer index from its category (lower = drawn first,
underneath). Unknown categories sit between full-body pieces and base tops.
"""
import logging
from typing import Any, Iterable, List, NamedTuple, Tuple

from ..models import GarmentRef
from .categories import match_key

logger = logging.getLogger(__name__)

DEFAULT_LAYER_INDEX = 18

GARMENT_LAYER_INDEX: Tuple[Tuple[str, int], ...] = (
    # footwear is lowest
    ('shoes', 5), ('sneakers', 5), ('boots', 5), ('sandals', 5), ('heels', 5), ('flats', 5), ('loafers', 5),
    # bottoms
    ('jeans', 10), ('pants', 10), ('shorts', 10), ('skirt', 10), ('leggings', 10), ('trousers', 10), ('sweatpants', 10),
    # full body, above bottoms but below most tops
    ('dress', 15), ('jumpsuit', 15), ('romper', 15),
    # base tops
    ('t-shirt', 20), ('shirt', 20), ('blouse', 20), ('top', 20), ('polo', 20), ('tank top', 20),
    # mid layers
    ('sweater', 25), ('hoodie', 26), ('vest', 28),
    # outerwear, lightest to heaviest
    ('cardigan', 30),
    ('blazer', 35),
    ('jacket', 40),
    ('coat', 45),
)


class LayeredGarment(NamedTuple):
    id: str
    z_index: int
    garment: GarmentRef


def layer_index(category: str) -> int:
    """Layer index for a garment category (DEFAULT_LAYER_INDEX when unknown)."""
    match = match_key(category, GARMENT_LAYER_INDEX)
    if match is None:
        logger.debug('No layer entry for category %r, using default %d', category, DEFAULT_LAYER_INDEX)
        return DEFAULT_LAYER_INDEX
    return match[1]


def resolve_layers(worn: Iterable[Any]) -> List[LayeredGarment]:
    """Order worn garments bottom layer first.

    Accepts GarmentRef objects or mappings with 'id' and 'category'. The sort
    is stable: garments on the same layer keep their input order.
    """
    layered = []
    for item in worn:
        garment = GarmentRef.coerce(item)
        layered.append(LayeredGarment(garment.id, layer_index(garment.category), garment))
    return sorted(layered, key=lambda g: g.z_index)
