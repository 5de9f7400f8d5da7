"""Multipliers for interleaved complex frames.

A frame of ``n`` reals holds ``n // 2`` complex samples laid out as
``[re0, im0, re1, im1, ...]``.  ``imultiply`` multiplies a frame by a
signal the multiplier produces itself.  ``multiply`` multiplies two
frames sample by sample.
"""

from __future__ import annotations

import math
import os
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

import numpy as np

__all__ = [
    "Multiplier",
    "AGCMultiplier",
    "FadingMultiplier",
    "SequenceMultiplier",
    "SineMultiplier",
]

_PHASE_PERIOD = 1_000_000


def _as_complex(frame: np.ndarray) -> np.ndarray:
    half = frame.size // 2
    return frame[0 : 2 * half : 2] + 1j * frame[1 : 2 * half : 2]


def _as_interleaved(samples: np.ndarray, size: int) -> np.ndarray:
    out = np.zeros(size, dtype=np.float64)
    count = samples.size
    out[0 : 2 * count : 2] = samples.real
    out[1 : 2 * count : 2] = samples.imag
    return out


class Multiplier(ABC):
    """Base class of the multipliers, on frames of ``n`` reals."""

    def __init__(self, n: int, n_frames: int = 1) -> None:
        if n <= 0:
            raise ValueError(f"'N' has to be greater than 0 ('N' = {n}).")
        if n_frames <= 0:
            raise ValueError(f"'n_frames' has to be greater than 0 ('n_frames' = {n_frames}).")
        self._n = n
        self._n_frames = n_frames

    @property
    def n(self) -> int:
        """Number of reals in one frame."""
        return self._n

    @property
    def n_frames(self) -> int:
        """Number of frames handled per call."""
        return self._n_frames

    def _check(self, values: Iterable[float], label: str) -> np.ndarray:
        data = np.asarray(values, dtype=np.float64)
        expected = self._n * self._n_frames
        if data.ndim != 1 or data.size != expected:
            raise ValueError(
                f"'{label}.size()' has to be equal to 'N' * 'n_frames' ('{label}.size()' = "
                f"{data.size}, 'N' = {self._n}, 'n_frames' = {self._n_frames})."
            )
        return data

    def _frames(self, frame_id: int) -> Iterable[int]:
        return range(self._n_frames) if frame_id < 0 else (frame_id % self._n_frames,)

    def imultiply(self, x: Iterable[float], frame_id: int = -1) -> np.ndarray:
        """Multiply frames by the multiplier's own signal.

        With a negative ``frame_id`` every frame is processed; otherwise only
        frame ``frame_id % n_frames`` is, and the other output frames are zero.
        """
        data = self._check(x, "X_N")
        out = np.zeros_like(data)
        for f in self._frames(frame_id):
            part = slice(f * self._n, (f + 1) * self._n)
            out[part] = self._imultiply(data[part], f)
        return out

    def multiply(self, x: Iterable[float], y: Iterable[float], frame_id: int = -1) -> np.ndarray:
        """Multiply two signals together, complex sample by complex sample."""
        xs = self._check(x, "X_N")
        ys = self._check(y, "Y_N")
        out = np.zeros_like(xs)
        for f in self._frames(frame_id):
            part = slice(f * self._n, (f + 1) * self._n)
            out[part] = self._multiply(xs[part], ys[part], f)
        return out

    @abstractmethod
    def _imultiply(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        """Multiply one frame by the internal signal."""

    def _multiply(self, x: np.ndarray, y: np.ndarray, frame_id: int) -> np.ndarray:
        product = _as_complex(x) * _as_complex(y)
        out = _as_interleaved(product, self._n)
        if self._n % 2:
            out[-1] = x[-1] * y[-1]
        return out


class AGCMultiplier(Multiplier):
    """Automatic gain control: scales each frame to a given output energy."""

    def __init__(self, n: int, output_energy: float = 1.0, n_frames: int = 1) -> None:
        super().__init__(n, n_frames)
        self.output_energy = float(output_energy)

    def _imultiply(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        samples = _as_complex(frame)
        count = samples.size
        sum_abs_2 = float(np.sum(samples.real**2 + samples.imag**2))
        sum_re = float(np.sum(samples.real))
        sum_im = float(np.sum(samples.imag))
        with np.errstate(divide="ignore", invalid="ignore"):
            std = np.sqrt(np.float64(sum_abs_2 * count - sum_re * sum_re - sum_im * sum_im))
            std = std / np.float64(count) / np.sqrt(np.float64(self.output_energy))
            return _as_interleaved(samples / std, self.n)


class FadingMultiplier(Multiplier):
    """Applies a gain sequence read from a list of ``esn0 frame_count`` pairs.

    Each gain is ``sqrt(10 ** ((esn0 - esn0_ref) / 10))`` and is held for
    ``frame_count`` frames; the sequence loops.  When the file cannot be
    opened, the gain is 1.
    """

    def __init__(
        self,
        n: int,
        snr_list_filename: str | os.PathLike[str],
        esn0_ref: float = 1.0,
        n_frames: int = 1,
    ) -> None:
        super().__init__(n, n_frames)
        self._gains: list[float] = []
        self._frame_counts: list[int] = []
        try:
            with open(snr_list_filename, encoding="utf-8") as handle:
                tokens = handle.read().split()
        except OSError:
            self._gains.append(1.0)
            self._frame_counts.append(1)
        else:
            for esn0_text, count_text in zip(tokens[0::2], tokens[1::2]):
                try:
                    esn0 = float(esn0_text)
                    count = int(count_text)
                except ValueError:
                    break
                self._gains.append(math.sqrt(10.0 ** ((esn0 - esn0_ref) / 10.0)))
                self._frame_counts.append(count)
            if not self._gains:
                raise ValueError(f"No 'esn0 frame_count' pair could be read from {snr_list_filename!s}.")
        self._snr_idx = 0
        self._frame_idx = 0

    @property
    def gains(self) -> list[float]:
        """The gain sequence."""
        return list(self._gains)

    @property
    def frame_counts(self) -> list[int]:
        """Number of frames each gain is held for."""
        return list(self._frame_counts)

    def reset(self) -> None:
        """Restart the gain sequence."""
        self._snr_idx = 0
        self._frame_idx = 0

    def _imultiply(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        out = frame * self._gains[self._snr_idx]
        self._frame_idx += 1
        if self._frame_idx == self._frame_counts[self._snr_idx]:
            self._frame_idx = 0
            self._snr_idx = (self._snr_idx + 1) % len(self._gains)
        return out


class SequenceMultiplier(Multiplier):
    """Multiplies every frame by a fixed complex sequence."""

    def __init__(self, n: int, sequence: Sequence[float], n_frames: int = 1) -> None:
        super().__init__(n, n_frames)
        values = np.asarray(sequence, dtype=np.float64).ravel()
        if values.size != n:
            raise ValueError(
                f"'sequence.size()' has to be equal to 'N' ('sequence.size()' = {values.size}, "
                f"'N' = {n})."
            )
        self._sequence = _as_complex(values)

    @property
    def sequence(self) -> np.ndarray:
        """The complex multiplying sequence."""
        return self._sequence.copy()

    def _imultiply(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        out = _as_interleaved(_as_complex(frame) * self._sequence, self.n)
        if self.n % 2:
            out[-1] = 0.0
        return out


class SineMultiplier(Multiplier):
    """Mixes the signal with a complex exponential of frequency ``f``.

    The normalised frequency ``f / fs`` is truncated to six decimals and the
    time index wraps every million samples.
    """

    def __init__(self, n: int, f: float, fs: float = 1.0, n_frames: int = 1) -> None:
        super().__init__(n, n_frames)
        self._fs = float(fs)
        self._n_index = 0
        self._nu = 0.0
        self._f = 0.0
        self._omega = 0.0
        self.set_nu(f / self._fs)

    @property
    def fs(self) -> float:
        """Sampling frequency."""
        return self._fs

    @property
    def nu(self) -> float:
        """Normalised frequency."""
        return self._nu

    @property
    def f(self) -> float:
        """Frequency in the unit of ``fs``."""
        return self._f

    @property
    def omega(self) -> float:
        """Normalised pulsation."""
        return self._omega

    def reset(self) -> None:
        """Restart the time index at zero."""
        self._n_index = 0

    def set_f(self, f: float) -> None:
        """Set the frequency."""
        self.set_nu(f / self._fs)

    def set_omega(self, omega: float) -> None:
        """Set the normalised pulsation."""
        self.set_nu(omega / (2.0 * math.pi))

    def set_nu(self, nu: float) -> None:
        """Set the normalised frequency, truncated to six decimals."""
        new_nu = math.floor(nu * 1e6) / 1e6
        self._nu = new_nu
        self._f = new_nu * self._fs
        self._omega = 2.0 * math.pi * new_nu

    def step(self, x: complex) -> complex:
        """Mix one complex sample and advance the time index."""
        phase = self._omega * self._n_index
        y = complex(x) * complex(math.cos(phase), math.sin(phase))
        self._n_index = (self._n_index + 1) % _PHASE_PERIOD
        return y

    def _imultiply(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        samples = _as_complex(frame)
        count = samples.size
        indices = (self._n_index + np.arange(count)) % _PHASE_PERIOD
        phases = self._omega * indices.astype(np.float64)
        rotated = samples * (np.cos(phases) + 1j * np.sin(phases))
        self._n_index = (self._n_index + count) % _PHASE_PERIOD
        out = _as_interleaved(rotated, self.n)
        if self.n % 2:
            out[-1] = 0.0
        return out