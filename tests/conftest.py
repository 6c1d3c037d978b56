import pytest

from brepjoin.brep import brep, brep_face, brep_loop
from brepjoin.polygon import Polygon, Profile

# outward-wound faces of the unit cube
CUBE_FACES = [
    [(0, 0, 0), (0, 1, 0), (1, 1, 0), (1, 0, 0)],  # bottom, -z
    [(0, 0, 1), (1, 0, 1), (1, 1, 1), (0, 1, 1)],  # top, +z
    [(0, 0, 0), (1, 0, 0), (1, 0, 1), (0, 0, 1)],  # front, -y
    [(0, 1, 0), (0, 1, 1), (1, 1, 1), (1, 1, 0)],  # back, +y
    [(0, 0, 0), (0, 0, 1), (0, 1, 1), (0, 1, 0)],  # left, -x
    [(1, 0, 0), (1, 1, 0), (1, 1, 1), (1, 0, 1)],  # right, +x
]


@pytest.fixture
def cube_profiles():
    return [Profile(Polygon(face)) for face in CUBE_FACES]


def _point(p):
    return [float(p[0]), float(p[1]), float(p[2]), 1.0]


@pytest.fixture
def cube_brep():
    """Unit cube as a B-rep whose loops list their trims out of order.

    Each of the twelve edges is stored once, in a fixed direction, and
    shared by the two faces that use it.
    """

    curves = []
    index = {}
    faces = []
    for face in CUBE_FACES:
        trims = []
        for a, b in zip(face, face[1:] + face[:1]):
            key = frozenset((a, b))
            if key not in index:
                index[key] = len(curves)
                curves.append([_point(a), _point(b)])
            trims.append(index[key])
        trims = [trims[2], trims[0], trims[3], trims[1]]
        faces.append(brep_face([brep_loop(trims)]))
    return brep(curves, list(range(len(curves))), faces)
