import numpy as np
import pytest

from dvbs2dsp.feedbacker import Feedbacker


def test_initial_value_is_produced():
    fb = Feedbacker(4, 7)
    assert np.array_equal(fb.produce(0), np.full(4, 7))


def test_memorize_then_produce():
    fb = Feedbacker(3, 0)
    fb.memorize([1, 2, 3])
    assert np.array_equal(fb.produce(), [1, 2, 3])


def test_slots_are_independent():
    fb = Feedbacker(2, 0.5, n_frames=2)
    fb.memorize([1.0, 2.0], frame_id=1)
    assert np.array_equal(fb.produce(0), [0.5, 0.5])
    assert np.array_equal(fb.produce(1), [1.0, 2.0])


def test_produce_returns_copy():
    fb = Feedbacker(2, 0)
    out = fb.produce()
    out[:] = 9
    assert np.array_equal(fb.produce(), [0, 0])


def test_set_n_frames_grow_keeps_data():
    fb = Feedbacker(2, -1)
    fb.memorize([4, 5])
    fb.set_n_frames(3)
    assert fb.n_frames == 3
    assert np.array_equal(fb.produce(0), [4, 5])
    assert np.array_equal(fb.produce(2), [-1, -1])


def test_set_n_frames_shrink():
    fb = Feedbacker(2, 0, n_frames=3)
    fb.memorize([1, 1], frame_id=0)
    fb.set_n_frames(1)
    assert np.array_equal(fb.produce(0), [1, 1])
    with pytest.raises(IndexError):
        fb.produce(1)


def test_invalid_n():
    with pytest.raises(ValueError):
        Feedbacker(0, 0)


def test_wrong_frame_length():
    fb = Feedbacker(3, 0)
    with pytest.raises(ValueError):
        fb.memorize([1, 2])


def test_frame_id_out_of_range():
    fb = Feedbacker(3, 0)
    with pytest.raises(IndexError):
        fb.memorize([1, 2, 3], frame_id=1)