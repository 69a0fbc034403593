import numpy as np
import pytest

from meshkit.profiles import BOTTLE_PROFILE, Bottle, Capsule


@pytest.mark.parametrize("sectors,stacks", [(4, 2), (12, 6), (36, 18)])
def test_capsule_counts(sectors, stacks):
    cap = Capsule(0.5, 1.0, sectors, stacks, 1)
    hemi = (stacks + 1) * (sectors + 1)
    assert cap.vertex_count == 2 * hemi + 2 * (sectors + 1)
    assert cap.index_count == (2 * stacks * sectors + sectors) * 6
    assert int(cap.indices.max()) == cap.vertex_count - 1


def test_capsule_extent():
    cap = Capsule(0.5, 1.0, 16, 8, 1)
    pos = cap.positions
    assert pos[:, 1].min() == pytest.approx(-1.0, abs=1e-5)
    assert pos[:, 1].max() == pytest.approx(1.0, abs=1e-5)
    radial = np.hypot(pos[:, 0], pos[:, 2])
    assert radial.max() == pytest.approx(0.5, abs=1e-5)


def test_capsule_normals_unit_and_texcoords_in_range():
    cap = Capsule(0.3, 2.0, 10, 5, 2)
    lengths = np.linalg.norm(cap.normals, axis=1)
    assert np.allclose(lengths, 1.0, atol=1e-5)
    tex = cap.texcoords
    assert tex.min() >= 0.0
    assert tex[:, 0].max() == pytest.approx(1.0)


def test_capsule_pole_colors_match_palette():
    cap = Capsule(0.5, 1.0, 8, 4, 1)
    colors = cap.colors
    assert np.allclose(colors[0], (1.00, 0.78, 0.55), atol=1e-5)
    assert np.allclose(colors[-1], (1.00, 0.88, 0.70), atol=1e-5)


def test_capsule_unknown_pattern_uses_first():
    assert np.array_equal(Capsule(0.5, 1.0, 8, 4, 99).vertices(),
                          Capsule(0.5, 1.0, 8, 4, 1).vertices())


def test_capsule_rejects_zero_sectors():
    with pytest.raises(ValueError):
        Capsule(0.5, 1.0, 0, 4, 1)


@pytest.mark.parametrize("segs", [3, 12, 36])
def test_bottle_counts(segs):
    bottle = Bottle(segs, 8, 1)
    rows = len(BOTTLE_PROFILE)
    assert bottle.vertex_count == rows * (segs + 1) + 1 + (segs + 1)
    assert bottle.index_count == (rows - 1) * segs * 6 + segs * 3
    assert int(bottle.indices.max()) == bottle.vertex_count - 1


def test_bottle_height_and_base():
    bottle = Bottle(12, 8, 1)
    pos = bottle.positions
    assert pos[:, 1].max() == pytest.approx(BOTTLE_PROFILE[-1][1])
    assert pos[:, 1].min() == pytest.approx(0.0)
    base_ring = pos[-13:]
    assert np.allclose(np.hypot(base_ring[:, 0], base_ring[:, 2]), BOTTLE_PROFILE[0][0],
                       atol=1e-5)
    assert np.allclose(bottle.normals[-13:], (0.0, -1.0, 0.0))


def test_bottle_palette_colors():
    bottle = Bottle(8, 8, 3)
    colors = bottle.colors
    assert np.allclose(colors[0], (0.9, 0.9, 0.6), atol=1e-5)
    assert np.allclose(colors[len(BOTTLE_PROFILE) * 9 - 1], (0.7, 0.8, 0.3), atol=1e-5)


def test_bottle_height_segs_does_not_change_geometry():
    assert np.array_equal(Bottle(10, 1, 2).vertices(), Bottle(10, 8, 2).vertices())


def test_bottle_rejects_zero_segments():
    with pytest.raises(ValueError):
        Bottle(0, 8, 1)