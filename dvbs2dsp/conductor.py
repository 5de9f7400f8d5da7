"""Perturbation sweep: a conductor enumerating impulse pairs and their insertion."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

__all__ = ["arange", "Conductor", "ConductorOutput", "AddImpulses"]

_DELTA_START = -4.0
_DELTA_STOP = 4.0
_DELTA_STEP = 0.05


def arange(start: float, stop: float, step: float) -> np.ndarray:
    """``int((stop - start) / step)`` values ``start + i * step`` as float32."""
    count = int((stop - start) / step)
    return np.array([start + i * step for i in range(max(count, 0))], dtype=np.float32)


@dataclass(frozen=True)
class ConductorOutput:
    """One step of the sweep."""

    noisy_vec: np.ndarray
    delta_x: float
    delta_y: float
    ix_x: int
    ix_y: int
    x: int
    y: int


class Conductor:
    """Walks a grid of (delta_x, delta_y) perturbations for a fixed vector.

    Each call of :meth:`generate` yields the next grid point, row by row.
    """

    def __init__(self, noisy_vec: Sequence[float], n: int, ix_x: int, ix_y: int) -> None:
        values = np.asarray(noisy_vec, dtype=np.float32).ravel()
        if n <= 0:
            raise ValueError(f"'N' has to be greater than 0 ('N' = {n}).")
        if values.size > n:
            raise ValueError(
                f"'noisy_vec' cannot be longer than 'N' ('noisy_vec.size()' = {values.size}, "
                f"'N' = {n})."
            )
        self._n = n
        self._noisy_vec = np.zeros(n, dtype=np.float32)
        self._noisy_vec[: values.size] = values
        self.ix_x = ix_x
        self.ix_y = ix_y
        self.delta_x_range = arange(_DELTA_START, _DELTA_STOP, _DELTA_STEP)
        self.delta_y_range = arange(_DELTA_START, _DELTA_STOP, _DELTA_STEP)
        self.vec_cnt = 0

    @property
    def n(self) -> int:
        """Length of the produced vector."""
        return self._n

    @property
    def noisy_vec(self) -> np.ndarray:
        """The vector being perturbed."""
        return self._noisy_vec.copy()

    def generate(self) -> ConductorOutput:
        """Produce the next grid point and advance the counter."""
        rows = len(self.delta_y_range)
        x, y = divmod(self.vec_cnt, rows)
        if x >= len(self.delta_x_range):
            raise IndexError("The perturbation grid is exhausted.")
        out = ConductorOutput(
            noisy_vec=self._noisy_vec.copy(),
            delta_x=float(self.delta_x_range[x]),
            delta_y=float(self.delta_y_range[y]),
            ix_x=self.ix_x,
            ix_y=self.ix_y,
            x=x,
            y=y,
        )
        self.vec_cnt += 1
        return out


class AddImpulses:
    """Overwrites two positions of a vector with given values."""

    def __init__(self, n: int) -> None:
        if n <= 0:
            raise ValueError(f"'N' has to be greater than 0 ('N' = {n}).")
        self._n = n

    @property
    def n(self) -> int:
        """Length of the vectors."""
        return self._n

    def add(
        self, ix_x: int, ix_y: int, delta_x: float, delta_y: float, r_in: Iterable[float]
    ) -> np.ndarray:
        """Return a copy of ``r_in`` with ``delta_x`` at ``ix_x`` and ``delta_y`` at ``ix_y``."""
        data = np.asarray(r_in, dtype=np.float32)
        if data.ndim != 1 or data.size != self._n:
            raise ValueError(
                f"'r_in.size()' has to be equal to 'N' ('r_in.size()' = {data.size}, "
                f"'N' = {self._n})."
            )
        for index in (ix_x, ix_y):
            if not 0 <= index < self._n:
                raise IndexError(f"Index {index} is out of [0, {self._n}).")
        out = data.copy()
        out[ix_x] = delta_x
        out[ix_y] = delta_y
        return out