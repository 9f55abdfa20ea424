import pytest

from virtual_mirror.avatar.proportions import BODY_TYPE_RATIOS, lookup_ratios
from virtual_mirror.avatar.scaling import normalize
from virtual_mirror.errors import InvalidAttributeError


def test_table_has_fifteen_entries():
    assert sum(len(v) for v in BODY_TYPE_RATIOS.values()) == 15


@pytest.mark.parametrize('shape,body_type,whr,cwr', [
    ('masculine', 'muscular', 0.85, 1.40),
    ('masculine', 'plus-size', 1.025, 1.05),
    ('feminine', 'curvy', 0.715, 1.20),
    ('androgynous', 'fit', 0.83, 1.225),
])
def test_lookup_values(shape, body_type, whr, cwr):
    r = lookup_ratios(shape, body_type)
    assert r.whr == whr
    assert r.cwr == cwr


def test_table_is_read_only():
    with pytest.raises(TypeError):
        BODY_TYPE_RATIOS['masculine']['slim'] = (1.0, 1.0)
    with pytest.raises(TypeError):
        BODY_TYPE_RATIOS['robot'] = {}


def test_lookup_unknown_shape():
    with pytest.raises(InvalidAttributeError) as exc:
        lookup_ratios('robot', 'slim')
    assert exc.value.field == 'body_shape'


def test_normalize_clamps_to_bounds():
    assert normalize(60, 70, 130, 0.85, 1.15) == 0.85
    assert normalize(140, 70, 130, 0.85, 1.15) == 1.15
    assert normalize(100, 70, 130, 0.85, 1.15) == pytest.approx(1.0)


def test_normalize_is_monotonic():
    values = [normalize(v, 70, 130) for v in range(50, 151, 5)]
    assert values == sorted(values)
    assert values[0] == 0.0 and values[-1] == 1.0


def test_normalize_rejects_empty_domain():
    with pytest.raises(ValueError):
        normalize(1, 5, 5)
