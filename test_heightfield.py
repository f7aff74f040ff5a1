"""
Tests for height field generation, resampling and block queries.
"""

import numpy as np
import pytest

from lodscape.errors import RegionBoundsError
from lodscape.engine import Region
from lodscape.procgen import (
    HeightField,
    PerlinNoise,
    bicubic,
    build_height_field,
    next_power_of_two,
)
from lodscape.config import TerrainConfig


def _random_field(width: int, height: int, seed: int = 0) -> HeightField:
    rng = np.random.default_rng(seed)
    return HeightField.from_array(rng.random((height, width)))


def test_next_power_of_two():
    assert next_power_of_two(1) == 1
    assert next_power_of_two(2) == 2
    assert next_power_of_two(5) == 8
    assert next_power_of_two(256) == 256
    assert next_power_of_two(257) == 512

    for n in range(1, 2000):
        p = next_power_of_two(n)
        assert p >= n
        assert p & (p - 1) == 0
        assert p // 2 < n

    with pytest.raises(ValueError):
        next_power_of_two(0)


def test_sizes_round_up_to_powers_of_two():
    field = HeightField(5, 3)

    assert (field.width, field.height) == (8, 4)
    assert (field.width_mask, field.height_mask) == (7, 3)
    assert field.count == 32
    assert field.map.shape == (4, 8)
    assert field.map.dtype == np.float32
    assert not field.map.any()


def test_from_array_rejects_non_power_of_two():
    with pytest.raises(ValueError):
        HeightField.from_array(np.zeros((3, 4)))


def test_sum_block_matches_direct_sum():
    field = _random_field(16, 8, seed=1)

    for x, y, w, h in [(0, 0, 16, 8), (3, 2, 5, 4), (15, 7, 1, 1), (4, 4, 0, 3)]:
        expected = field.map[y:y + h, x:x + w].astype(np.float64).sum()
        assert field.sum_block(x, y, w, h) == pytest.approx(expected)


@pytest.mark.parametrize("rect", [(-1, 0, 2, 2), (15, 0, 2, 1), (0, 7, 1, 2), (0, -1, 1, 1), (0, 0, 17, 1)])
def test_sum_block_out_of_bounds(rect):
    field = _random_field(16, 8)
    with pytest.raises(RegionBoundsError):
        field.sum_block(*rect)


def test_box_means_match_sum_block():
    field = _random_field(16, 16, seed=2)
    means = field.box_means(4, 0, 4, 3, 4)

    assert means.shape == (4, 3)
    for j in range(4):
        for i in range(3):
            expected = field.sum_block(4 + i * 4, j * 4, 4, 4) / 16.0
            assert means[j, i] == pytest.approx(expected, rel=1e-6)

    with pytest.raises(RegionBoundsError):
        field.box_means(8, 0, 4, 3, 1)


def test_extract_region_is_a_copy():
    field = _random_field(8, 8, seed=3)
    data = field.extract_region(Region(2, 1, 4, 3))

    np.testing.assert_array_equal(data, field.map[1:4, 2:6])
    assert data.flags["C_CONTIGUOUS"]

    data[...] = -1.0
    assert (field.map >= 0.0).all()

    with pytest.raises(RegionBoundsError):
        field.extract_region(Region(6, 0, 4, 4))


def test_perlin_noise_is_zero_on_the_lattice_and_bounded():
    perlin = PerlinNoise(seed=5)

    lattice = np.arange(-4.0, 5.0)
    assert np.all(perlin.noise(lattice, lattice[::-1], 2.0) == 0.0)

    rng = np.random.default_rng(1)
    x, y, z = rng.uniform(-50.0, 50.0, (3, 2000))
    values = perlin.noise(x, y, z)
    assert values.shape == (2000,)
    assert np.abs(values).max() <= 1.1
    assert values.std() > 0.05


def test_perlin_noise_seeding():
    a = PerlinNoise(seed=9).noise(0.3, 1.7, 0.5)
    b = PerlinNoise(seed=9).noise(0.3, 1.7, 0.5)
    c = PerlinNoise(seed=10).noise(0.3, 1.7, 0.5)

    assert a == b
    assert a != c


def test_generate_is_deterministic_for_a_seed():
    a = HeightField(32, 32)
    b = HeightField(32, 32)
    c = HeightField(32, 32)

    a.generate(seed=7)
    b.generate(seed=7)
    c.generate(seed=8)

    np.testing.assert_array_equal(a.map, b.map)
    assert not np.array_equal(a.map, c.map)
    assert np.abs(a.map).max() > 0.0
    assert np.isfinite(a.map).all()


def test_generate_writes_samples_x_major():
    field = HeightField(8, 4)
    field.generate(seed=11, octaves=1, base_weight=1.0)

    rng = np.random.default_rng(11)
    perlin = PerlinNoise(rng=rng)
    z = rng.random()

    flat = field.map.ravel()
    for x in range(8):
        for y in range(4):
            assert flat[x * 4 + y] == pytest.approx(float(perlin.noise(x, y, z)), abs=1e-6)


def test_generate_accumulates():
    field = HeightField(16, 16)
    field.map[...] = 1.0
    reference = HeightField(16, 16)

    field.generate(seed=3)
    reference.generate(seed=3)

    np.testing.assert_allclose(field.map, reference.map + 1.0, atol=1e-5)


def test_bicubic_reproduces_constants_and_hits_samples():
    p = [[float(4 * r + c) for c in range(4)] for r in range(4)]

    assert bicubic(0.0, 0.0, p) == pytest.approx(p[1][1])
    assert bicubic(1.0, 0.0, p) == pytest.approx(p[1][2])
    assert bicubic(0.0, 1.0, p) == pytest.approx(p[2][1])

    flat = [[3.5] * 4 for _ in range(4)]
    assert bicubic(0.3, 0.8, flat) == pytest.approx(3.5)


def test_upsample_constant_field_stays_constant():
    source = HeightField.from_array(np.full((8, 8), 2.5))
    dest = HeightField(32, 32)
    dest.upsample_from(source)

    np.testing.assert_allclose(dest.map, 2.5, atol=1e-6)


def test_upsample_same_size_is_a_one_texel_wrapped_shift():
    """At zero fraction the kernel returns the -1 neighbour, wrapped at the edges."""
    source = _random_field(8, 8, seed=4)
    dest = HeightField(8, 8)
    dest.upsample_from(source)

    np.testing.assert_allclose(dest.map, np.roll(source.map, (1, 1), axis=(0, 1)), atol=1e-6)


def test_upsample_row_offset_fix_changes_fractional_rows():
    source = _random_field(4, 4, seed=5)
    legacy = HeightField(16, 16)
    fixed = HeightField(16, 16)

    legacy.upsample_from(source)
    fixed.upsample_from(source, fix_row_offset=True)

    # Rows landing exactly on source rows never reach the last neighbourhood row
    np.testing.assert_allclose(legacy.map[::4], fixed.map[::4], atol=1e-6)
    assert not np.allclose(legacy.map[1::4], fixed.map[1::4])


def test_upsample_rejects_larger_source():
    with pytest.raises(RegionBoundsError):
        HeightField(8, 8).upsample_from(HeightField(16, 8))
    with pytest.raises(RegionBoundsError):
        HeightField(8, 8).upsample_from(HeightField(8, 16))


def test_build_height_field_from_config():
    config = TerrainConfig(generation_size=8, field_size=32, seed=11)

    a = build_height_field(config)
    b = build_height_field(config)

    assert (a.width, a.height) == (32, 32)
    np.testing.assert_array_equal(a.map, b.map)
