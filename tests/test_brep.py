"""Tests for B-rep loop sourcing and planar solid reconstruction."""

import pytest

from brepjoin.brep import (
    INNER,
    OUTER,
    ProfileResult,
    brep,
    brep_curves,
    brep_edge,
    brep_face,
    brep_faces,
    brep_loop,
    brep_to_solid,
    brep_trim,
    edge_curve_index,
    face_loops,
    face_to_profile,
    faces_to_profiles,
    is_brep,
    is_brep_edge,
    is_brep_face,
    is_brep_loop,
    is_brep_trim,
    loop_chain,
    loop_segments,
    loop_to_polygon,
    loop_trims,
    loop_type,
    orient_faces,
    reconstruct_solid,
    trim_edge_index,
)
from brepjoin.config import JoinSettings
from brepjoin.errors import (
    AmbiguousTopologyError,
    DegenerateLoopError,
    LoopJoinError,
    MissingOuterLoopError,
)
from brepjoin.geometry_utils import dot3, sub3
from brepjoin.segments import Line
from brepjoin.trace import RecordingTracer

SETTINGS = JoinSettings()


def _p(x, y, z=0.0):
    return [float(x), float(y), float(z), 1.0]


def _rect_curves(x0, y0, x1, y1):
    return [
        [_p(x0, y0), _p(x1, y0)],
        [_p(x1, y0), _p(x1, y1)],
        [_p(x1, y1), _p(x0, y1)],
        [_p(x0, y1), _p(x0, y0)],
    ]


def _holed_square():
    curves = _rect_curves(0, 0, 4, 4) + _rect_curves(1, 1, 3, 3)
    outer = brep_loop([2, 0, 3, 1])
    inner = brep_loop([brep_trim(5), brep_trim(7), brep_trim(4), brep_trim(6)],
                      loop_type=INNER)
    return brep(curves, range(len(curves)), [brep_face([outer, inner])])


class TestStructures:

    def test_edge_and_trim(self):
        e = brep_edge(3)
        t = brep_trim(1)
        assert is_brep_edge(e) and edge_curve_index(e) == 3
        assert is_brep_trim(t) and trim_edge_index(t) == 1
        assert not is_brep_edge(t)
        with pytest.raises(ValueError):
            edge_curve_index(t)

    def test_loop_accepts_indices(self):
        loop = brep_loop([0, brep_trim(1)], loop_type=INNER)
        assert is_brep_loop(loop)
        assert loop_type(loop) == INNER
        assert [trim_edge_index(t) for t in loop_trims(loop)] == [0, 1]
        assert loop_type(brep_loop([])) == OUTER

    def test_loop_type_validated(self):
        with pytest.raises(ValueError):
            brep_loop([0], loop_type='hole')

    def test_brep(self):
        b = _holed_square()
        assert is_brep(b)
        assert len(brep_curves(b)) == 8
        assert is_brep_face(brep_faces(b)[0])
        assert len(face_loops(brep_faces(b)[0])) == 2
        assert not is_brep(['brep', [], [], []])


def test_loop_segments_sorted_by_length():
    curves = [[_p(0, 0), _p(3, 0)], [_p(3, 0), _p(3, 1)], [_p(3, 1), _p(0, 0)]]
    b = brep(curves, [0, 1, 2], [])
    segs = loop_segments(brep_loop([0, 1, 2]), b)
    lengths = [seg.length for seg in segs]
    assert lengths == sorted(lengths)
    assert segs[0] == Line((3, 0, 0), (3, 1, 0))


def test_loop_chain_is_closed():
    b = _holed_square()
    outer = face_loops(brep_faces(b)[0])[0]
    result = loop_chain(outer, b, SETTINGS)
    assert result.closed
    assert len(result) == 4


def test_face_with_hole_becomes_profile_with_void():
    b = _holed_square()
    result = face_to_profile(brep_faces(b)[0], b, SETTINGS)
    assert isinstance(result, ProfileResult)
    assert result
    assert result.dropped == []
    profile = result.profile
    assert len(profile.voids) == 1
    assert profile.perimeter.area() == pytest.approx(16.0)
    assert profile.voids[0].area() == pytest.approx(4.0)
    assert profile.area() == pytest.approx(12.0)


def test_branching_loop_raises_loop_join_error():
    curves = [[_p(0, 0), _p(1, 0)], [_p(0, 0), _p(0, 1)], [_p(0, 0), _p(1, 1)]]
    b = brep(curves, [0, 1, 2], [])
    with pytest.raises(LoopJoinError) as excinfo:
        loop_to_polygon(brep_loop([0, 1, 2]), b, SETTINGS)
    assert isinstance(excinfo.value.__cause__, AmbiguousTopologyError)
    assert excinfo.value.details['loop_type'] == OUTER


def test_missing_outer_loop():
    b = _holed_square()
    face = brep_face([brep_loop([4, 5, 6, 7], loop_type=INNER)])
    with pytest.raises(MissingOuterLoopError):
        face_to_profile(face, b, SETTINGS)


def _with_degenerate_face():
    curves = _rect_curves(0, 0, 1, 1) + [
        [_p(0, 0, 5), _p(1, 0, 5)],
        [_p(1, 0, 5), _p(2, 0, 5)],
        [_p(2, 0, 5), _p(0, 0, 5)],
    ]
    faces = [brep_face([brep_loop([0, 1, 2, 3])]),
             brep_face([brep_loop([4, 5, 6])])]
    return brep(curves, range(len(curves)), faces)


def test_degenerate_face_is_dropped_and_reported():
    b = _with_degenerate_face()
    report = faces_to_profiles(b, SETTINGS)
    assert len(report.profiles) == 1
    assert report.face_indices == [0]
    assert not report.complete
    (index, error), = report.failed
    assert index == 1
    assert isinstance(error, DegenerateLoopError)


def test_degenerate_face_raises_on_request():
    b = _with_degenerate_face()
    with pytest.raises(DegenerateLoopError):
        faces_to_profiles(b, SETTINGS, on_degenerate='raise')
    with pytest.raises(DegenerateLoopError):
        faces_to_profiles(b, JoinSettings(on_degenerate='raise'))


def test_degenerate_void_is_dropped():
    curves = _rect_curves(0, 0, 4, 4) + [
        [_p(1, 1), _p(2, 1)], [_p(2, 1), _p(3, 1)], [_p(3, 1), _p(1, 1)],
    ]
    face = brep_face([brep_loop([0, 1, 2, 3]), brep_loop([4, 5, 6], loop_type=INNER)])
    b = brep(curves, range(len(curves)), [face])

    result = face_to_profile(face, b, SETTINGS)
    assert result
    assert result.profile.voids == []
    assert [index for index, _ in result.dropped] == [1]

    with pytest.raises(DegenerateLoopError):
        faces_to_profiles(b, SETTINGS, on_degenerate='raise')


def test_cube_brep_to_solid(cube_brep):
    sld = brep_to_solid(cube_brep, SETTINGS)
    assert len(sld) == 6
    assert sld.volume() == pytest.approx(1.0)


def test_orient_faces_points_outward(cube_brep):
    center = (0.5, 0.5, 0.5)
    for profile in orient_faces(cube_brep, SETTINGS):
        outward = sub3(profile.perimeter.centroid(), center)
        assert dot3(profile.normal(), outward) > 0.0


def test_reconstruct_solid_reports(cube_brep):
    tracer = RecordingTracer()
    report = reconstruct_solid(cube_brep, SETTINGS, tracer=tracer)
    assert report.complete
    assert len(report.profiles) == 6
    assert report.solid is not None
    assert len(tracer.of('orient.face')) == 6
    assert len(tracer.of('assemble.done')) == 6


def test_unjoinable_face_does_not_stop_the_batch():
    curves = [[_p(0, 0, 5), _p(1, 0, 5)], [_p(0, 0, 5), _p(0, 1, 5)],
              [_p(0, 0, 5), _p(1, 1, 5)]] + _rect_curves(0, 0, 1, 1)
    faces = [brep_face([brep_loop([0, 1, 2])]),
             brep_face([brep_loop([3, 4, 5, 6])]),
             brep_face([brep_loop([3, 4, 5, 6], loop_type=INNER)])]
    b = brep(curves, range(len(curves)), faces)

    report = faces_to_profiles(b, SETTINGS)
    assert report.face_indices == [1]
    assert [index for index, _ in report.failed] == [0, 2]
    assert isinstance(report.failed[0][1], LoopJoinError)
    assert isinstance(report.failed[1][1], MissingOuterLoopError)

    with pytest.raises(LoopJoinError):
        faces_to_profiles(b, SETTINGS, on_degenerate='raise')
