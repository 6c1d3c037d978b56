"""Assemble oriented profiles into a solid.

``build_solid`` adds one face per profile, in order, with no check that
the faces close up; malformed input produces a malformed solid.  For
downstream use the faces can be triangulated into yapCAD-style surface
lists, ``['surface', vertices, normals, faces, boundary, holes]``, and
the enclosed volume measured with the divergence theorem.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from brepjoin.geometry_utils import Vec3, cross3, dot3, to_point, to_vector
from brepjoin.polygon import Polygon, Profile
from brepjoin.triangulator import triangulate_face


@dataclass
class Face:
    """One planar face: outer loop plus void loops."""

    outer: Polygon
    voids: List[Polygon] = field(default_factory=list)

    def normal(self) -> Vec3:
        return self.outer.normal()

    def triangles(self):
        return triangulate_face(self.outer.vertices,
                                [void.vertices for void in self.voids],
                                self.outer.normal())


@dataclass
class Solid:
    """Ordered collection of faces."""

    faces: List[Face] = field(default_factory=list)

    def add_face(self, outer: Polygon, voids: Sequence[Polygon] = ()) -> Face:
        face = Face(outer, list(voids))
        self.faces.append(face)
        return face

    def __len__(self) -> int:
        return len(self.faces)

    def surfaces(self):
        return solid_to_surfaces(self)

    def volume(self) -> float:
        return solid_volume(self)


def build_solid(profiles: Sequence[Profile]) -> Solid:
    """Add each profile as a face of a new solid, in input order."""

    sld = Solid()
    for profile in profiles:
        sld.add_face(profile.perimeter, profile.voids)
    return sld


def face_to_surface(face: Face) -> list:
    """Triangulate one face into a surface list with per-vertex normals."""

    n = to_vector(face.normal())
    verts = []
    normals = []
    faces = []
    for tri in face.triangles():
        indices = []
        for p in tri:
            verts.append(to_point(p))
            normals.append(list(n))
            indices.append(len(verts) - 1)
        faces.append(indices)
    return ['surface', verts, normals, faces, [], []]


def solid_to_surfaces(sld: Solid) -> list:
    return [face_to_surface(face) for face in sld.faces]


def solid_volume(sld: Solid) -> float:
    """Signed enclosed volume; positive when the faces point outward.

    Only meaningful for a closed set of faces.
    """

    total = 0.0
    for face in sld.faces:
        for p0, p1, p2 in face.triangles():
            total += dot3(p0, cross3(p1, p2))
    return total / 6.0


__all__ = [
    "Face",
    "Solid",
    "build_solid",
    "face_to_surface",
    "solid_to_surfaces",
    "solid_volume",
]
