"""Complex-baseband filters working on interleaved real/imaginary frames.

A frame of ``n`` reals holds ``n // 2`` complex samples laid out as
``[re0, im0, re1, im1, ...]``.  Filters keep their state from one frame
to the next, so consecutive frames are processed as one continuous stream.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

import numpy as np

__all__ = [
    "Filter",
    "FIRFilter",
    "FarrowFilter",
    "RootRaisedCosineFilter",
    "UpsamplingFIRFilter",
    "synthesize_rrc",
]


def _as_complex(frame: np.ndarray) -> np.ndarray:
    """Read an interleaved real frame as complex samples."""
    half = frame.size // 2
    return frame[0 : 2 * half : 2] + 1j * frame[1 : 2 * half : 2]


def _as_interleaved(samples: np.ndarray, size: int) -> np.ndarray:
    """Write complex samples into an interleaved real frame of ``size`` reals."""
    out = np.zeros(size, dtype=np.float64)
    count = samples.size
    out[0 : 2 * count : 2] = samples.real
    out[1 : 2 * count : 2] = samples.imag
    return out


class Filter(ABC):
    """Base class of the frame filters.

    ``n`` is the number of reals in an input frame, ``n_fil`` the number of
    reals in an output frame, and ``n_frames`` the number of frames handled
    by one call of :meth:`filter`.
    """

    def __init__(self, n: int, n_fil: int, n_frames: int = 1) -> None:
        if n <= 0:
            raise ValueError(f"'N' has to be greater than 0 ('N' = {n}).")
        if n_fil <= 0:
            raise ValueError(f"'N_fil' has to be greater than 0 ('N_fil' = {n_fil}).")
        if n_frames <= 0:
            raise ValueError(f"'n_frames' has to be greater than 0 ('n_frames' = {n_frames}).")
        self._n = n
        self._n_fil = n_fil
        self._n_frames = n_frames

    @property
    def n(self) -> int:
        """Number of reals in one input frame."""
        return self._n

    @property
    def n_fil(self) -> int:
        """Number of reals in one output frame."""
        return self._n_fil

    @property
    def n_frames(self) -> int:
        """Number of frames processed per call."""
        return self._n_frames

    def filter(self, x: Iterable[float], frame_id: int = -1) -> np.ndarray:
        """Filter ``n_frames`` frames of samples.

        With a negative ``frame_id`` every frame is filtered; otherwise only
        frame ``frame_id % n_frames`` is, and the other output frames are zero.
        """
        data = np.asarray(x, dtype=np.float64)
        expected = self._n * self._n_frames
        if data.ndim != 1 or data.size != expected:
            raise ValueError(
                f"'X_N1.size()' has to be equal to 'N' * 'n_frames' ('X_N1.size()' = {data.size}, "
                f"'N' = {self._n}, 'n_frames' = {self._n_frames})."
            )
        out = np.zeros(self._n_fil * self._n_frames, dtype=np.float64)
        frames = range(self._n_frames) if frame_id < 0 else (frame_id % self._n_frames,)
        for f in frames:
            frame = data[f * self._n : (f + 1) * self._n]
            out[f * self._n_fil : (f + 1) * self._n_fil] = self._filter(frame, f)
        return out

    @abstractmethod
    def reset(self) -> None:
        """Clear the filter's memory."""

    @abstractmethod
    def _filter(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        """Filter one frame and return ``n_fil`` reals."""


class FIRFilter(Filter):
    """Finite impulse response filter with real taps applied to complex samples."""

    def __init__(self, n: int, coefficients: Sequence[float], n_frames: int = 1) -> None:
        super().__init__(n, n, n_frames)
        taps = np.asarray(coefficients, dtype=np.float64).ravel()
        if taps.size == 0:
            raise ValueError("The filter needs at least one coefficient.")
        # Taps in application order: the first one weighs the oldest sample.
        self._taps = taps[::-1].copy()
        self._window = np.zeros(taps.size, dtype=np.complex128)

    @property
    def coefficients(self) -> np.ndarray:
        """The impulse response, first tap first."""
        return self._taps[::-1].copy()

    def step(self, x: complex) -> complex:
        """Push one complex sample and return the filtered sample."""
        self._window[:-1] = self._window[1:]
        self._window[-1] = x
        return complex(self._window @ self._taps)

    def reset(self) -> None:
        """Forget all past samples."""
        self._window[:] = 0

    def _filter(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        samples = _as_complex(frame)
        if samples.size == 0:
            return np.zeros(self.n_fil, dtype=np.float64)
        extended = np.concatenate((self._window[1:], samples))
        filtered = np.convolve(extended, self._taps[::-1], mode="valid")
        self._window = extended[-self._window.size :].copy()
        return _as_interleaved(filtered, self.n_fil)


class FarrowFilter(FIRFilter):
    """Four-tap Farrow interpolator with fractional delay ``mu``."""

    def __init__(self, n: int, mu: float, n_frames: int = 1) -> None:
        super().__init__(n, [0.0, 0.0, 0.0, 0.0], n_frames)
        self._mu = 0.0
        self.set_mu(mu)

    @property
    def mu(self) -> float:
        """Current fractional delay."""
        return self._mu

    def set_mu(self, mu: float) -> None:
        """Set the fractional delay and recompute the taps."""
        self._mu = float(mu)
        half_mu = 0.5 * self._mu
        half_mu_square = half_mu * self._mu
        outer = half_mu_square - half_mu
        self._taps[0] = outer
        self._taps[1] = 1.0 - half_mu - half_mu_square
        self._taps[2] = self._mu + half_mu - half_mu_square
        self._taps[3] = outer

    def step(self, x: complex) -> complex:
        """Push one complex sample and return the interpolated sample."""
        return super().step(x)

    def redo_step(self, mu: float) -> complex:
        """Change ``mu`` and recompute the last output without taking a new sample."""
        self.set_mu(mu)
        return complex(self._window @ self._taps)


def synthesize_rrc(rolloff: float, samples_per_symbol: int, delay_in_symbol: int) -> np.ndarray:
    """Root-raised-cosine impulse response normalised to unit energy.

    The response has ``2 * delay_in_symbol * samples_per_symbol + 1`` taps
    and is symmetric around its centre tap.
    """
    center = delay_in_symbol * samples_per_symbol
    coefs = np.zeros(2 * center + 1, dtype=np.float64)
    eps = np.finfo(np.float64).eps

    coefs[center] = 1.0 - rolloff + 4.0 * rolloff / math.pi
    energy = coefs[center] * coefs[center]
    for i in range(1, center + 1):
        t = i / samples_per_symbol
        if abs(4.0 * rolloff * t - 1.0) <= eps or abs(4.0 * rolloff * t + 1.0) <= eps:
            arg = math.pi / (4.0 * rolloff)
            value = rolloff / math.sqrt(2.0) * (
                (1.0 + 2.0 / math.pi) * math.sin(arg) + (1.0 - 2.0 / math.pi) * math.cos(arg)
            )
        else:
            denom = math.pi * t * (1.0 - 16.0 * rolloff * rolloff * t * t)
            numer = math.sin(math.pi * t * (1.0 - rolloff)) + 4.0 * rolloff * t * math.cos(
                math.pi * t * (1.0 + rolloff)
            )
            value = numer / denom
        coefs[center + i] = value
        coefs[center - i] = value
        energy += 2.0 * value * value

    return coefs / math.sqrt(energy)


class RootRaisedCosineFilter(FIRFilter):
    """FIR filter whose taps are a root-raised-cosine pulse."""

    def __init__(
        self,
        n: int,
        rolloff: float = 0.05,
        samples_per_symbol: int = 4,
        delay_in_symbol: int = 50,
        n_frames: int = 1,
    ) -> None:
        super().__init__(n, synthesize_rrc(rolloff, samples_per_symbol, delay_in_symbol), n_frames)
        self.rolloff = rolloff
        self.samples_per_symbol = samples_per_symbol
        self.delay_in_symbol = delay_in_symbol


class UpsamplingFIRFilter(Filter):
    """Polyphase interpolating FIR filter raising the sample rate by ``factor``."""

    def __init__(
        self, n: int, coefficients: Sequence[float], factor: int = 1, n_frames: int = 1
    ) -> None:
        super().__init__(n, factor * n, n_frames)
        taps = np.asarray(coefficients, dtype=np.float64).ravel()
        self._factor = factor
        self._bank = [FIRFilter(n, taps[phase::factor]) for phase in range(factor)]

    @property
    def factor(self) -> int:
        """Upsampling factor."""
        return self._factor

    def step(self, x: complex) -> np.ndarray:
        """Push one complex sample and return the ``factor`` output samples."""
        return np.array([branch.step(x) for branch in self._bank], dtype=np.complex128)

    def reset(self) -> None:
        """Clear every branch of the filter bank."""
        for branch in self._bank:
            branch.reset()

    def _filter(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        count = frame.size // 2
        out = np.zeros(count * self._factor, dtype=np.complex128)
        for phase, branch in enumerate(self._bank):
            out[phase :: self._factor] = _as_complex(branch.filter(frame))
        return _as_interleaved(out, self.n_fil)