import math

import numpy as np
import pytest

from dvbs2dsp.multipliers import (
    AGCMultiplier,
    FadingMultiplier,
    SequenceMultiplier,
    SineMultiplier,
)


def _interleave(samples):
    out = np.zeros(2 * len(samples))
    out[0::2] = np.real(samples)
    out[1::2] = np.imag(samples)
    return out


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        SequenceMultiplier(0, [])


def test_wrong_input_length_rejected():
    mult = SequenceMultiplier(4, [1, 0, 1, 0])
    with pytest.raises(ValueError):
        mult.imultiply([1.0, 2.0])
    with pytest.raises(ValueError):
        mult.multiply([1.0, 2.0, 3.0, 4.0], [1.0, 2.0])


def test_sequence_length_must_match():
    with pytest.raises(ValueError):
        SequenceMultiplier(4, [1.0, 0.0])


def test_sequence_identity():
    mult = SequenceMultiplier(6, [1, 0, 1, 0, 1, 0])
    x = [0.5, -1.0, 2.0, 3.0, -4.0, 0.25]
    np.testing.assert_allclose(mult.imultiply(x), x)


def test_sequence_by_j_rotates():
    mult = SequenceMultiplier(4, [0, 1, 0, 1])
    x = [1.0, 2.0, -3.0, 5.0]
    # (a + jb) * j = -b + ja
    np.testing.assert_allclose(mult.imultiply(x), [-2.0, 1.0, -5.0, -3.0])


def test_multiply_by_ones_and_commutes():
    mult = SequenceMultiplier(4, [1, 0, 1, 0])
    x = [1.0, 2.0, -3.0, 0.5]
    y = [0.25, -1.0, 2.0, 4.0]
    np.testing.assert_allclose(mult.multiply(x, [1, 0, 1, 0]), x)
    np.testing.assert_allclose(mult.multiply(x, y), mult.multiply(y, x))


def test_frame_id_processes_single_frame():
    mult = SequenceMultiplier(2, [1, 0], n_frames=3)
    x = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    out = mult.imultiply(x, frame_id=4)
    np.testing.assert_allclose(out, [0.0, 0.0, 3.0, 4.0, 0.0, 0.0])


def test_agc_output_energy():
    rng = np.random.default_rng(3)
    x = rng.normal(size=64) * 7.0 + 2.0
    mult = AGCMultiplier(64, output_energy=2.0)
    z = mult.imultiply(x)
    c = z[0::2] + 1j * z[1::2]
    variance = np.mean(np.abs(c - c.mean()) ** 2)
    assert variance == pytest.approx(2.0)


def test_agc_scale_invariant():
    rng = np.random.default_rng(5)
    x = rng.normal(size=32)
    mult = AGCMultiplier(32)
    np.testing.assert_allclose(mult.imultiply(x), mult.imultiply(x * 13.0))


def test_fading_missing_file_is_identity(tmp_path):
    mult = FadingMultiplier(4, tmp_path / "missing.txt")
    assert mult.gains == [1.0]
    x = [1.0, -2.0, 3.0, 4.0]
    np.testing.assert_allclose(mult.imultiply(x), x)


def test_fading_sequence_and_reset(tmp_path):
    path = tmp_path / "snr.txt"
    path.write_text("1 2\n21 1\n")
    mult = FadingMultiplier(2, path, esn0_ref=1.0)
    assert mult.frame_counts == [2, 1]
    x = [1.0, -1.0]
    scales = [mult.imultiply(x)[0] for _ in range(4)]
    assert scales == pytest.approx([1.0, 1.0, 10.0, 1.0])
    mult.reset()
    mult.imultiply(x)
    mult.imultiply(x)
    np.testing.assert_allclose(mult.imultiply(x), [10.0, -10.0])


def test_fading_empty_file_rejected(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("")
    with pytest.raises(ValueError):
        FadingMultiplier(2, path)


def test_sine_quarter_frequency():
    mult = SineMultiplier(8, 0.25)
    assert mult.nu == pytest.approx(0.25)
    out = mult.imultiply([1, 0] * 4)
    expected = _interleave([1, 1j, -1, -1j])
    np.testing.assert_allclose(out, expected, atol=1e-12)


def test_sine_frequency_truncated():
    mult = SineMultiplier(2, 1.0, fs=3.0)
    assert mult.nu == pytest.approx(0.333333)
    assert mult.f == pytest.approx(mult.nu * 3.0)


def test_sine_setters_agree():
    mult = SineMultiplier(2, 0.1, fs=2.0)
    mult.set_omega(math.pi / 2)
    assert mult.nu == pytest.approx(0.25)
    mult.set_f(0.5)
    assert mult.nu == pytest.approx(0.25)
    assert mult.omega == pytest.approx(2 * math.pi * mult.nu)


def test_sine_step_matches_frames_and_keeps_magnitude():
    rng = np.random.default_rng(11)
    x = rng.normal(size=12)
    mult = SineMultiplier(12, 0.013)
    first = mult.imultiply(x)
    second = mult.imultiply(x)
    mult.reset()
    samples = x[0::2] + 1j * x[1::2]
    stepped = [mult.step(s) for s in np.concatenate((samples, samples))]
    np.testing.assert_allclose(_interleave(stepped), np.concatenate((first, second)), atol=1e-12)
    np.testing.assert_allclose(np.abs(stepped[:6]), np.abs(samples))


def test_sine_reset_restarts_phase():
    mult = SineMultiplier(4, 0.1)
    x = [1.0, 0.0, 1.0, 0.0]
    first = mult.imultiply(x)
    mult.imultiply(x)
    mult.reset()
    np.testing.assert_allclose(mult.imultiply(x), first)