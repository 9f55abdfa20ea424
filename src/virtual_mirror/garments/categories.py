"""
Garment category keywords shared by layering and fit placement.

Categories are free text ("Denim Jacket", "tank top"). A category matches a
table key when the lower-cased key is a substring of the lower-cased
category. When several keys match, the longest key wins (ties keep table
order), so "T-Shirt" resolves to 't-shirt' rather than 'shirt' and
"Sweatpants" to 'sweatpants' rather than 'pants'.
"""
from typing import Iterable, Optional, Sequence, Tuple, TypeVar

T = TypeVar('T')

TOP = 'top'
BOTTOM = 'bottom'
OTHER = 'other'

TOP_KEYWORDS = ('t-shirt', 'shirt', 'blouse', 'sweater', 'hoodie', 'jacket', 'coat', 'blazer', 'cardigan', 'vest', 'top')
BOTTOM_KEYWORDS = ('jeans', 'pants', 'shorts', 'skirt', 'leggings', 'trousers', 'sweatpants')
FULL_BODY_KEYWORDS = ('dress', 'jumpsuit', 'romper')
FOOTWEAR_KEYWORDS = ('shoes', 'sneakers', 'boots', 'sandals', 'heels', 'flats', 'loafers')


def _priority_order(table: Sequence[Tuple[str, T]]) -> Tuple[Tuple[str, T], ...]:
    # sorted() is stable: equal-length keys keep their table order
    return tuple(sorted(table, key=lambda item: -len(item[0])))


def match_key(category: Optional[str], table: Sequence[Tuple[str, T]]) -> Optional[Tuple[str, T]]:
    """Return the (key, value) entry whose key best matches `category`, or None."""
    if not category:
        return None
    cat = category.lower()
    for key, value in _priority_order(table):
        if key.lower() in cat:
            return key, value
    return None


def contains_any(category: Optional[str], keywords: Iterable[str]) -> bool:
    if not category:
        return False
    cat = category.lower()
    return any(k in cat for k in keywords)


def classify_category(category: Optional[str]) -> str:
    """Classify a category as 'top', 'bottom' or 'other' (full body, footwear, unknown)."""
    if contains_any(category, TOP_KEYWORDS):
        return TOP
    if contains_any(category, BOTTOM_KEYWORDS):
        return BOTTOM
    return OTHER
