"""Memory that hands a memorised frame back on a later call."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import numpy as np

__all__ = ["Feedbacker"]


class Feedbacker:
    """Stores one frame of ``n`` values per frame slot and produces it back.

    Every slot starts filled with ``init_val``.
    """

    def __init__(self, n: int, init_val: Any, n_frames: int = 1) -> None:
        if n <= 0:
            raise ValueError(f"'N' has to be greater than 0 ('N' = {n}).")
        if n_frames <= 0:
            raise ValueError(f"'n_frames' has to be greater than 0 ('n_frames' = {n_frames}).")
        self._n = n
        self._init_val = init_val
        self._n_frames = n_frames
        self._dtype = np.asarray(init_val).dtype
        self._data = np.full(n * n_frames, init_val, dtype=self._dtype)

    @property
    def n(self) -> int:
        """Number of values in one frame."""
        return self._n

    @property
    def init_val(self) -> Any:
        """Value the slots are initialised with."""
        return self._init_val

    @property
    def n_frames(self) -> int:
        """Number of frame slots."""
        return self._n_frames

    def _slot(self, frame_id: int) -> slice:
        if not 0 <= frame_id < self._n_frames:
            raise IndexError(
                f"'frame_id' has to be in [0, {self._n_frames}) ('frame_id' = {frame_id})."
            )
        return slice(frame_id * self._n, (frame_id + 1) * self._n)

    def memorize(self, x: Iterable, frame_id: int = 0) -> None:
        """Store a frame in slot ``frame_id``."""
        data = np.asarray(x, dtype=self._dtype)
        if data.ndim != 1 or data.size != self._n:
            raise ValueError(
                f"'X_N.size()' has to be equal to 'N' ('X_N.size()' = {data.size}, 'N' = {self._n})."
            )
        self._data[self._slot(frame_id)] = data

    def produce(self, frame_id: int = 0) -> np.ndarray:
        """Return a copy of the frame stored in slot ``frame_id``."""
        return self._data[self._slot(frame_id)].copy()

    def set_n_frames(self, n_frames: int) -> None:
        """Change the number of slots, keeping stored frames that still fit."""
        if n_frames <= 0:
            raise ValueError(f"'n_frames' has to be greater than 0 ('n_frames' = {n_frames}).")
        if n_frames == self._n_frames:
            return
        new_data = np.full(self._n * n_frames, self._init_val, dtype=self._dtype)
        kept = min(new_data.size, self._data.size)
        new_data[:kept] = self._data[:kept]
        self._data = new_data
        self._n_frames = n_frames