"""
Plotly preview of a built avatar.

Turns every visible part of a MeshDescription into a Mesh3d trace placed by
its composed world transform. Only a preview: no lights or camera rigs.
"""
from typing import Optional

import numpy as np
import plotly.graph_objects as go

from . import primitives
from .morph import MeshDescription, MeshPart


def part_geometry(description: MeshDescription, part: MeshPart, segments: int = 16):
	"""Local (vertices, faces) for a part, or None for grouping nodes."""
	d = part.dimensions
	if part.kind == 'group':
		return None
	if part.kind == 'lathe':
		return description.torso_vertices, description.torso_faces
	if part.kind == 'sphere':
		return primitives.sphere(d['radius'], segments)
	if part.kind == 'capsule':
		return primitives.capsule(d['radius'], d['length'], segments)
	if part.kind == 'cylinder':
		return primitives.cylinder(d['radius_top'], d['radius_bottom'], d['height'], segments)
	if part.kind == 'box':
		return primitives.box(d['width'], d['height'], d['depth'])
	if part.kind == 'polygon':
		return primitives.polygon(d['points'])
	raise ValueError(f"Unknown part kind {part.kind!r} for {part.name}")


def mesh_figure(description: MeshDescription, segments: int = 16, fig: Optional[go.Figure] = None) -> go.Figure:
	"""Return a plotly Figure with one Mesh3d trace per visible part."""
	if description.released:
		raise ValueError('Cannot plot a released mesh description; use the current one')
	fig = fig if fig is not None else go.Figure()
	world = description.world_transforms()
	for idx, part in enumerate(description.parts):
		if not description.is_visible(part.name):
			continue
		geom = part_geometry(description, part, segments)
		if geom is None:
			continue
		verts, faces = geom
		verts = np.asarray(verts) * world[idx].scale + world[idx].position
		color = description.materials.get(part.material, '#cccccc')
		fig.add_trace(go.Mesh3d(
			x=verts[:, 0], y=verts[:, 1], z=verts[:, 2],
			i=faces[:, 0], j=faces[:, 1], k=faces[:, 2],
			color=color, name=part.name, flatshading=False, showscale=False,
		))
	fig.update_layout(
		scene=dict(aspectmode='data', xaxis_visible=False, yaxis_visible=False, zaxis_visible=False),
		margin=dict(l=0, r=0, t=0, b=0),
		showlegend=False,
	)
	return fig
