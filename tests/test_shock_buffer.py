# tests/test_shock_buffer.py
import numpy as np
import pytest

from utils.cftp_params import CFTPParams
from utils.exceptions import ShockBufferOverflowError
from utils.shock_buffer import ShockBuffer, ShockPair


def _buffer(seed: int = 0, **kw) -> ShockBuffer:
    return ShockBuffer(CFTPParams(**kw), np.random.default_rng(seed))


def test_extension_is_append_only():
    buf = _buffer()
    buf.extend_to(20)
    u_before, z_before = buf.to_arrays()

    buf.extend_to(70)
    u_after, z_after = buf.to_arrays()
    assert len(buf) == 71 and buf.depth == 70
    np.testing.assert_array_equal(u_after[:21], u_before)
    np.testing.assert_array_equal(z_after[:21], z_before)


def test_extending_to_covered_depth_draws_nothing():
    buf = _buffer()
    buf.extend_to(10)
    snapshot = buf.to_arrays()
    buf.extend_to(4)
    buf.extend_to(10)
    assert len(buf) == 11
    np.testing.assert_array_equal(buf.to_arrays()[0], snapshot[0])


def test_draws_are_in_unit_interval():
    buf = _buffer(seed=5)
    buf.extend_to(500)
    u, z = buf.to_arrays()
    assert ((u >= 0) & (u <= 1)).all()
    assert ((z >= 0) & (z <= 1)).all()


def test_capacity_is_max_depth_plus_one():
    buf = _buffer(t_start=5, max_depth=10)
    assert buf.capacity == 11
    buf.extend_to(10)
    with pytest.raises(ShockBufferOverflowError):
        buf.extend_to(11)
    assert len(buf) == 11


def test_named_accessors_count_steps_into_the_past():
    buf = _buffer()
    buf.extend_to(3)
    u, z = buf.to_arrays()
    for k in range(4):
        assert buf.survival_at(k) == u[k]
        assert buf.entrant_at(k) == z[k]
        assert buf.pair_at(k) == ShockPair(u[k], z[k])
    assert buf.survival[2] == buf.survival_at(2)


@pytest.mark.parametrize("k", [-1, 4, 100])
def test_accessors_reject_undrawn_steps(k):
    buf = _buffer()
    buf.extend_to(3)
    with pytest.raises(IndexError):
        buf.survival_at(k)


def test_same_seed_same_shocks():
    a, b = _buffer(seed=11), _buffer(seed=11)
    a.extend_to(50)
    b.extend_to(50)
    np.testing.assert_array_equal(a.to_arrays()[0], b.to_arrays()[0])
    np.testing.assert_array_equal(a.to_arrays()[1], b.to_arrays()[1])


def test_shapes_follow_params():
    """Beta(1, 50) survival shocks are far smaller than Beta(50, 1) entrants."""
    buf = _buffer(alpha_incumbent=1.0, beta_incumbent=50.0,
                  alpha_entrant=50.0, beta_entrant=1.0)
    buf.extend_to(400)
    u, z = buf.to_arrays()
    assert u.mean() < 0.1 < 0.9 < z.mean()


def test_bulk_views_are_read_only():
    buf = _buffer()
    buf.extend_to(5)
    with pytest.raises(TypeError):
        buf.survival[0] = 0.0
    with pytest.raises(TypeError):
        buf.entrant[0] = 0.0
    assert buf.survival[0] == buf.survival_at(0)


def test_bulk_views_follow_extensions():
    buf = _buffer()
    buf.extend_to(5)
    before = buf.survival
    assert buf.survival is before           # cached until the next draw

    buf.extend_to(9)
    after = buf.survival
    assert len(before) == 6 and len(after) == 10
    assert after[:6] == before
    assert len(buf.entrant) == 10
