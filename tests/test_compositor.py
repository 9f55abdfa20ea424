from PIL import Image

from virtual_mirror.compositor import composite_outfit, fit_contain, layout_outfit, rect_to_pixels
from virtual_mirror.config import MirrorSettings
from virtual_mirror.models import AvatarAttributes, GarmentRef

RED = (220, 20, 20, 255)
BLUE = (20, 20, 220, 255)


def _solid(color, size=(60, 60)):
    return Image.new('RGBA', size, color)


def _close(pixel, color, tol=3):
    return all(abs(a - b) <= tol for a, b in zip(pixel, color))


def test_layout_fills_z_index_in_draw_order():
    attrs = AvatarAttributes(body_shape='feminine', body_type='curvy', height=170, weight=70)
    placements = layout_outfit(attrs, [GarmentRef('c', 'Coat'), GarmentRef('d', 'Dress')])
    assert [p.garment.id for p in placements] == ['d', 'c']
    assert [p.rect.z_index for p in placements] == [15, 45]


def test_layout_accepts_editor_records():
    record = {'bodyShape': 'masculine', 'bodyType': 'slim', 'height': 180, 'weight': 72}
    placements = layout_outfit(record, [{'id': 'x', 'category': 'Hat'}])
    assert placements[0].rect.z_index == 18


def test_fit_contain_centres_image():
    assert fit_contain((100, 50), (0, 0, 200, 200)) == (0, 50, 200, 100)
    assert fit_contain((50, 100), (10, 10, 100, 100)) == (35, 10, 50, 100)


def test_rect_to_pixels():
    attrs = AvatarAttributes(height=175, weight=95)
    rect = layout_outfit(attrs, [GarmentRef('x', 'Scarf')])[0].rect
    # default rect: top 30, height 40, width 40 -> left 30 (measurements vary only width)
    x, y, w, h = rect_to_pixels(rect, (200, 100))
    assert y == 30 and h == 40


def test_top_layer_drawn_last():
    attrs = AvatarAttributes(body_shape='masculine', body_type='fit', height=170, weight=70)
    worn = [GarmentRef('coat', 'Coat', cutout=_solid(BLUE)), GarmentRef('dress', 'Dress', cutout=_solid(RED))]
    placements = layout_outfit(attrs, worn)
    settings = MirrorSettings(canvas_width=200, canvas_height=400)
    image = composite_outfit(placements, settings=settings)
    assert image.size == (200, 400)

    coat = next(p for p in placements if p.garment.id == 'coat').rect
    cx = int((coat.left + coat.width / 2) / 100 * 200)
    cy = int((coat.top + coat.height / 2) / 100 * 400)
    assert _close(image.getpixel((cx, cy)), BLUE)


def test_cutout_from_path_and_missing_cutout(tmp_path):
    path = tmp_path / 'tee.png'
    _solid(RED, (40, 30)).save(path)
    attrs = AvatarAttributes()
    placements = layout_outfit(attrs, [GarmentRef('t', 'T-Shirt', cutout=str(path)), GarmentRef('j', 'Jeans')])
    base = Image.new('RGB', (100, 200), (255, 255, 255))
    image = composite_outfit(placements, base=base)
    assert image.mode == 'RGBA'

    tee = placements[1].rect if placements[1].garment.id == 't' else placements[0].rect
    cx = int((tee.left + tee.width / 2) / 100 * 100)
    cy = int((tee.top + tee.height / 2) / 100 * 200)
    assert _close(image.getpixel((cx, cy)), RED)
    # jeans had no cutout: area below the tee stays white
    assert image.getpixel((50, 190)) == (255, 255, 255, 255)
