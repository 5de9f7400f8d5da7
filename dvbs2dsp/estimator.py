"""Noise estimation on interleaved complex frames."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

__all__ = [
    "Estimate",
    "Estimator",
    "DVBS2Estimator",
    "esn0_to_sigma",
    "esn0_to_ebn0",
]

_ESN0_SATURATION = 100.0


def esn0_to_sigma(esn0: float) -> float:
    """Noise standard deviation per real dimension for a given Es/N0 in dB."""
    return math.sqrt(1.0 / (2.0 * 10.0 ** (esn0 / 10.0)))


def esn0_to_ebn0(esn0: float, code_rate: float, bps: int) -> float:
    """Convert Es/N0 in dB into Eb/N0 in dB."""
    return esn0 - 10.0 * math.log10(code_rate * bps)


@dataclass(frozen=True)
class Estimate:
    """Per-frame estimation results."""

    sigma: np.ndarray
    ebn0: np.ndarray
    esn0: np.ndarray


class Estimator(ABC):
    """Base class of the noise estimators, on frames of ``n`` reals."""

    def __init__(self, n: int, n_frames: int = 1) -> None:
        if n <= 0:
            raise ValueError(f"'N' has to be greater than 0 ('N' = {n}).")
        if n_frames <= 0:
            raise ValueError(f"'n_frames' has to be greater than 0 ('n_frames' = {n_frames}).")
        self._n = n
        self._n_frames = n_frames
        self.sigma_estimated = 0.0
        self.ebn0_estimated = 0.0
        self.esn0_estimated = 0.0

    @property
    def n(self) -> int:
        """Number of reals in one frame."""
        return self._n

    @property
    def n_frames(self) -> int:
        """Number of frames handled per call."""
        return self._n_frames

    def estimate(self, x: Iterable[float], frame_id: int = -1) -> Estimate:
        """Estimate the noise of each frame.

        With a negative ``frame_id`` every frame is processed; otherwise only
        frame ``frame_id % n_frames`` is, and the other entries are zero.
        """
        data = np.asarray(x, dtype=np.float64)
        expected = self._n * self._n_frames
        if data.ndim != 1 or data.size != expected:
            raise ValueError(
                f"'X_N.size()' has to be equal to 'N' * 'n_frames' ('X_N.size()' = {data.size}, "
                f"'N' = {self._n}, 'n_frames' = {self._n_frames})."
            )
        sigma = np.zeros(self._n_frames, dtype=np.float64)
        ebn0 = np.zeros(self._n_frames, dtype=np.float64)
        esn0 = np.zeros(self._n_frames, dtype=np.float64)
        frames = range(self._n_frames) if frame_id < 0 else (frame_id % self._n_frames,)
        for f in frames:
            self._estimate(data[f * self._n : (f + 1) * self._n], f)
            sigma[f] = self.sigma_estimated
            ebn0[f] = self.ebn0_estimated
            esn0[f] = self.esn0_estimated
        return Estimate(sigma=sigma, ebn0=ebn0, esn0=esn0)

    def reset(self) -> None:
        """Clear the last estimates."""
        self.sigma_estimated = 0.0
        self.ebn0_estimated = 0.0
        self.esn0_estimated = 0.0

    @abstractmethod
    def _estimate(self, frame: np.ndarray, frame_id: int) -> None:
        """Estimate one frame and store the results on the instance."""


class DVBS2Estimator(Estimator):
    """Moments-based (M2M4) SNR estimator."""

    def __init__(self, n: int, code_rate: float, bps: int, n_frames: int = 1) -> None:
        super().__init__(n, n_frames)
        self.code_rate = float(code_rate)
        self.bps = int(bps)

    def _estimate(self, frame: np.ndarray, frame_id: int) -> None:
        half = self.n // 2
        if half == 0:
            raise ValueError("A frame has to hold at least one complex sample.")
        power = frame[0 : 2 * half : 2] ** 2 + frame[1 : 2 * half : 2] ** 2
        moment2 = float(np.sum(power)) / half
        moment4 = float(np.sum(power * power)) / half

        se = math.sqrt(abs(2.0 * moment2 * moment2 - moment4))
        ne = abs(moment2 - se)
        with np.errstate(divide="ignore", invalid="ignore"):
            esn0 = float(10.0 * np.log10(np.float64(se) / np.float64(ne)))
        if math.isinf(esn0):
            esn0 = _ESN0_SATURATION

        self.sigma_estimated = esn0_to_sigma(esn0)
        self.ebn0_estimated = esn0_to_ebn0(esn0, self.code_rate, self.bps)
        self.esn0_estimated = esn0