import math

import numpy as np
import pytest

from dvbs2dsp.filters import (
    FarrowFilter,
    FIRFilter,
    Filter,
    RootRaisedCosineFilter,
    UpsamplingFIRFilter,
    synthesize_rrc,
)


def to_complex(frame):
    frame = np.asarray(frame)
    return frame[0::2] + 1j * frame[1::2]


def to_interleaved(samples):
    samples = np.asarray(samples, dtype=complex)
    out = np.empty(2 * samples.size)
    out[0::2] = samples.real
    out[1::2] = samples.imag
    return out


def random_frame(seed, size):
    return np.random.default_rng(seed).normal(size=size)


def test_filter_base_is_abstract():
    with pytest.raises(TypeError):
        Filter(4, 4)


@pytest.mark.parametrize("n", [0, -2])
def test_invalid_frame_size_rejected(n):
    with pytest.raises(ValueError):
        FIRFilter(n, [1.0])


def test_empty_coefficients_rejected():
    with pytest.raises(ValueError):
        FIRFilter(8, [])


def test_wrong_input_length_rejected():
    flt = FIRFilter(8, [1.0], n_frames=2)
    with pytest.raises(ValueError):
        flt.filter(np.zeros(8))


def test_single_tap_is_identity():
    x = random_frame(0, 12)
    flt = FIRFilter(12, [1.0])
    np.testing.assert_allclose(flt.filter(x), x)


def test_delay_tap_streams_across_frames():
    flt = FIRFilter(8, [0.0, 1.0])
    first = random_frame(1, 8)
    second = random_frame(2, 8)
    y1 = to_complex(flt.filter(first))
    y2 = to_complex(flt.filter(second))
    c1, c2 = to_complex(first), to_complex(second)
    assert y1[0] == 0
    np.testing.assert_allclose(y1[1:], c1[:-1])
    np.testing.assert_allclose(y2[0], c1[-1])
    np.testing.assert_allclose(y2[1:], c2[:-1])


def test_block_filter_matches_steps():
    rng = np.random.default_rng(3)
    taps = rng.normal(size=5)
    block = FIRFilter(16, taps)
    stepped = FIRFilter(16, taps)
    for seed in (4, 5, 6):
        x = random_frame(seed, 16)
        y = to_complex(block.filter(x))
        expected = [stepped.step(s) for s in to_complex(x)]
        np.testing.assert_allclose(y, expected, atol=1e-12)


def test_frame_splitting_does_not_change_output():
    taps = np.random.default_rng(7).normal(size=6)
    x = random_frame(8, 24)
    whole = FIRFilter(24, taps).filter(x)
    split = FIRFilter(12, taps)
    parts = np.concatenate([split.filter(x[:12]), split.filter(x[12:])])
    np.testing.assert_allclose(parts, whole, atol=1e-12)


def test_multi_frame_equals_consecutive_calls():
    taps = np.random.default_rng(9).normal(size=3)
    x = random_frame(10, 16)
    multi = FIRFilter(8, taps, n_frames=2).filter(x)
    single = FIRFilter(8, taps)
    np.testing.assert_allclose(
        multi, np.concatenate([single.filter(x[:8]), single.filter(x[8:])]), atol=1e-12
    )


def test_frame_id_processes_only_one_frame():
    x = random_frame(11, 16)
    flt = FIRFilter(8, [1.0], n_frames=2)
    y = flt.filter(x, frame_id=3)
    np.testing.assert_allclose(y[:8], np.zeros(8))
    np.testing.assert_allclose(y[8:], x[8:])


def test_reset_restores_initial_state():
    taps = [0.5, -1.0, 2.0]
    x = random_frame(12, 10)
    flt = FIRFilter(10, taps)
    fresh = flt.filter(x)
    flt.filter(random_frame(13, 10))
    flt.reset()
    np.testing.assert_allclose(flt.filter(x), fresh)


def test_coefficients_keep_original_order():
    taps = [1.0, 2.0, 3.0]
    np.testing.assert_array_equal(FIRFilter(4, taps).coefficients, taps)


@pytest.mark.parametrize("mu", [0.0, 0.3, 0.5, 1.0])
def test_farrow_taps_sum_to_one(mu):
    flt = FarrowFilter(8, mu)
    assert flt.coefficients.sum() == pytest.approx(1.0)
    assert flt.mu == mu


def test_farrow_integer_delays():
    x = random_frame(14, 16)
    c = to_complex(x)
    y0 = to_complex(FarrowFilter(16, 0.0).filter(x))
    y1 = to_complex(FarrowFilter(16, 1.0).filter(x))
    np.testing.assert_allclose(y0[2:], c[:-2])
    np.testing.assert_allclose(y1[1:], c[:-1])


def test_farrow_step_matches_block():
    x = random_frame(15, 12)
    block = FarrowFilter(12, 0.4).filter(x)
    stepper = FarrowFilter(12, 0.4)
    stepped = [stepper.step(s) for s in to_complex(x)]
    np.testing.assert_allclose(to_complex(block), stepped, atol=1e-12)


def test_farrow_redo_step_recomputes_last_output():
    samples = [1 + 1j, 2 - 1j, 3 + 0.5j, 4 + 2j]
    flt = FarrowFilter(8, 0.0)
    outputs = [flt.step(s) for s in samples]
    assert outputs[-1] == samples[1]
    assert flt.redo_step(1.0) == samples[2]
    assert flt.step(5 + 0j) == samples[3]


def test_rrc_shape():
    coefs = synthesize_rrc(0.2, 4, 5)
    assert coefs.size == 2 * 5 * 4 + 1
    np.testing.assert_allclose(coefs, coefs[::-1])
    assert np.sum(coefs**2) == pytest.approx(1.0)
    assert int(np.argmax(coefs)) == 20


def test_rrc_singular_point_is_finite():
    coefs = synthesize_rrc(0.25, 1, 3)
    assert np.all(np.isfinite(coefs))
    assert np.sum(coefs**2) == pytest.approx(1.0)


def test_rrc_filter_uses_synthesized_taps():
    flt = RootRaisedCosineFilter(16, rolloff=0.35, samples_per_symbol=2, delay_in_symbol=3)
    np.testing.assert_allclose(flt.coefficients, synthesize_rrc(0.35, 2, 3))
    assert flt.rolloff == 0.35


def test_upsampling_zero_stuffing():
    x = random_frame(16, 8)
    flt = UpsamplingFIRFilter(8, [1.0, 0.0], factor=2)
    assert flt.n_fil == 16
    y = to_complex(flt.filter(x))
    np.testing.assert_allclose(y[0::2], to_complex(x))
    np.testing.assert_allclose(y[1::2], np.zeros(4))


def test_upsampling_phases_match_branch_filters():
    taps = np.random.default_rng(17).normal(size=6)
    x = random_frame(18, 10)
    y = to_complex(UpsamplingFIRFilter(10, taps, factor=3).filter(x))
    for phase in range(3):
        branch = FIRFilter(10, taps[phase::3])
        np.testing.assert_allclose(y[phase::3], to_complex(branch.filter(x)), atol=1e-12)


def test_upsampling_step_and_reset():
    flt = UpsamplingFIRFilter(4, [1.0, 2.0], factor=2)
    first = flt.step(1 + 1j)
    np.testing.assert_allclose(first, [1 + 1j, 2 + 2j])
    flt.step(3 + 0j)
    flt.reset()
    np.testing.assert_allclose(flt.step(1 + 1j), first)


def test_upsampling_needs_taps_for_every_phase():
    with pytest.raises(ValueError):
        UpsamplingFIRFilter(4, [1.0], factor=2)


def test_upsampling_invalid_factor():
    with pytest.raises(ValueError):
        UpsamplingFIRFilter(4, [1.0], factor=0)


def test_interleave_helpers_round_trip_through_identity():
    samples = np.array([math.sqrt(2) + 1j, -0.5 - 2j])
    flt = FIRFilter(4, [1.0])
    np.testing.assert_allclose(to_complex(flt.filter(to_interleaved(samples))), samples)