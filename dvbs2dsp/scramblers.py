"""Frame scramblers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

import numpy as np

__all__ = ["Scrambler", "BBScrambler"]


class Scrambler(ABC):
    """Base class of scramblers working on frames of ``n`` values."""

    def __init__(self, n: int, n_frames: int = 1) -> None:
        if n <= 0:
            raise ValueError(f"'N' has to be greater than 0 ('N' = {n}).")
        if n_frames <= 0:
            raise ValueError(f"'n_frames' has to be greater than 0 ('n_frames' = {n_frames}).")
        self._n = n
        self._n_frames = n_frames

    @property
    def n(self) -> int:
        """Number of values in one frame."""
        return self._n

    @property
    def n_frames(self) -> int:
        """Number of frames handled per call."""
        return self._n_frames

    def scramble(self, x: Iterable, frame_id: int = -1) -> np.ndarray:
        """Scramble ``n_frames`` frames (or only frame ``frame_id % n_frames``)."""
        return self._run(x, frame_id, "X_N1", self._scramble)

    def descramble(self, y: Iterable, frame_id: int = -1) -> np.ndarray:
        """Descramble ``n_frames`` frames (or only frame ``frame_id % n_frames``)."""
        return self._run(y, frame_id, "Y_N1", self._descramble)

    def _run(self, values, frame_id, label, operation) -> np.ndarray:
        data = np.asarray(values)
        expected = self._n * self._n_frames
        if data.ndim != 1 or data.size != expected:
            raise ValueError(
                f"'{label}.size()' has to be equal to 'N' * 'n_frames' ('{label}.size()' = "
                f"{data.size}, 'N' = {self._n}, 'n_frames' = {self._n_frames})."
            )
        out = np.zeros(data.shape, dtype=data.dtype)
        frames = range(self._n_frames) if frame_id < 0 else (frame_id % self._n_frames,)
        for f in frames:
            part = slice(f * self._n, (f + 1) * self._n)
            out[part] = operation(data[part], f)
        return out

    @abstractmethod
    def _scramble(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        """Scramble one frame."""

    @abstractmethod
    def _descramble(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        """Descramble one frame."""


_LFSR_INIT = (1, 0, 0, 1, 0, 1, 0, 1, 0, 0, 0, 0, 0, 0, 0)


def _bb_sequence(length: int) -> np.ndarray:
    """Pseudo-random bits of the 1 + x^14 + x^15 base-band randomiser."""
    lfsr = list(_LFSR_INIT)
    bits = np.empty(length, dtype=np.int64)
    for i in range(length):
        feedback = (lfsr[14] + lfsr[13]) % 2
        lfsr = [feedback] + lfsr[:-1]
        bits[i] = feedback
    return bits


class BBScrambler(Scrambler):
    """Base-band scrambler: XORs bits with the LFSR sequence, restarted per frame."""

    def __init__(self, n: int, n_frames: int = 1) -> None:
        super().__init__(n, n_frames)
        self._sequence = _bb_sequence(n)

    @property
    def sequence(self) -> np.ndarray:
        """The randomising bits applied to each frame."""
        return self._sequence.copy()

    def _scramble(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        return (frame + self._sequence) % 2

    def _descramble(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        return self._scramble(frame, frame_id)