import os
import sys

import streamlit as st
from PIL import Image

# Streamlit runs this file directly; make the `src` tree importable when the
# package is not installed.
current_file = os.path.abspath(__file__)
src_root = os.path.abspath(os.path.join(os.path.dirname(current_file), '..', '..'))
if src_root not in sys.path:
	sys.path.insert(0, src_root)

from virtual_mirror.avatar.measurements import estimate_from_attributes
from virtual_mirror.avatar.morph import MeshMorpher
from virtual_mirror.avatar.plotting import mesh_figure
from virtual_mirror.compositor import composite_outfit, layout_outfit
from virtual_mirror.config import load_settings
from virtual_mirror.logging_config import configure_logging, get_logger
from virtual_mirror.models import (
	BODY_SHAPES,
	BODY_TYPES,
	FACE_SHAPES,
	FACIAL_HAIRS,
	HAIR_STYLES,
	AvatarAttributes,
	GarmentRef,
)

SKIN_TONES = ['#f2d0b1', '#d4aa7c', '#c78d58', '#a06a42', '#8c5a3c', '#5a3825']
HAIR_COLORS = ['#090806', '#4a3223', '#b88b6b', '#e6c8a2', '#d35a40', '#9e9e9e', '#fefefe']
EYE_COLORS = ['#8c5a3c', '#4a3223', '#667a48', '#4169e1', '#9e9e9e']
SAMPLE_CATEGORIES = ['T-Shirt', 'Jeans', 'Dress', 'Hoodie', 'Jacket', 'Coat', 'Skirt', 'Sneakers', 'Scarf']


def _morpher():
	# one morpher per browser session; it releases the previous mesh on rebuild
	if 'morpher' not in st.session_state:
		st.session_state['morpher'] = MeshMorpher(lathe_segments=load_settings().lathe_segments)
	return st.session_state['morpher']


def _avatar_controls():
	st.sidebar.header('Avatar')
	body_shape = st.sidebar.selectbox('Body shape', BODY_SHAPES)
	body_type = st.sidebar.selectbox('Body type', BODY_TYPES, index=1)
	height = st.sidebar.slider('Height (cm)', min_value=140, max_value=210, value=170)
	weight = st.sidebar.slider('Weight (kg)', min_value=40, max_value=150, value=70)
	skin_tone = st.sidebar.select_slider('Skin tone', options=SKIN_TONES)
	hair_color = st.sidebar.color_picker('Hair color', value=HAIR_COLORS[0])
	eye_color = st.sidebar.color_picker('Eye color', value=EYE_COLORS[0])
	hair_style = st.sidebar.selectbox('Hair style', HAIR_STYLES)
	facial_hair = 'none'
	if body_shape != 'feminine':
		facial_hair = st.sidebar.selectbox('Facial hair', FACIAL_HAIRS)
	face_shape = st.sidebar.selectbox('Face shape', FACE_SHAPES)
	return AvatarAttributes(
		body_shape=body_shape, body_type=body_type, height=height, weight=weight,
		skin_tone=skin_tone, hair_color=hair_color, eye_color=eye_color,
		hair_style=hair_style, facial_hair=facial_hair, face_shape=face_shape,
	)


def main():
	configure_logging()
	logger = get_logger(__name__)
	settings = load_settings()

	st.title('Virtual Mirror')
	attrs = _avatar_controls()
	measurements = estimate_from_attributes(attrs)

	c1, c2, c3 = st.columns(3)
	c1.metric('Chest', f'{measurements.chest} cm')
	c2.metric('Waist', f'{measurements.waist} cm')
	c3.metric('Hips', f'{measurements.hips} cm')

	description = _morpher().build_or_update_mesh(attrs, measurements)
	st.plotly_chart(mesh_figure(description, segments=settings.sphere_segments), use_container_width=True)

	st.subheader('Outfit')
	chosen = st.multiselect('Worn garments', SAMPLE_CATEGORIES, default=['T-Shirt', 'Jeans'])
	uploads = {}
	for category in chosen:
		uploads[category] = st.file_uploader(f'{category} cutout (PNG with transparency)', type=['png'], key=f'cutout-{category}')
	worn = [GarmentRef(id=f'{i}-{c}', category=c, cutout=Image.open(uploads[c]) if uploads.get(c) else None) for i, c in enumerate(chosen)]

	placements = layout_outfit(attrs, worn, measurements)
	st.table([
		{'category': p.garment.category, 'z': p.rect.z_index, 'top': round(p.rect.top, 2), 'left': round(p.rect.left, 2),
		 'width': round(p.rect.width, 2), 'height': round(p.rect.height, 2)}
		for p in placements
	])
	if any(p.garment.cutout is not None for p in placements):
		try:
			st.image(composite_outfit(placements, settings=settings), caption='Overlay preview')
		except OSError as e:
			logger.exception('Could not composite cutouts')
			st.error(f'Could not read a cutout image: {e}')


if __name__ == '__main__':
	main()
