"""Averaged power spectrum of an interleaved complex signal."""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np

__all__ = ["Spectrum"]

_BH_COEFS = (0.35875, 0.48829, 0.14128, 0.01168)


class Spectrum:
    """Exponentially averaged, windowed power spectrum.

    ``n`` is the number of reals in an input frame, ``w`` the window length
    in complex samples (at most ``nfft``), ``alpha`` the averaging weight of
    the previous spectrum, ``fs`` the sampling frequency.  Frequencies and
    spectrum run from ``-fs/2`` upward, zero frequency at index ``nfft // 2``.
    """

    def __init__(
        self, n: int, w: int, alpha: float = 0.0, fs: float = 1.0, nfft: int = 1024
    ) -> None:
        if n <= 0:
            raise ValueError(f"'N' has to be greater than 0 ('N' = {n}).")
        if nfft <= 0:
            raise ValueError(f"'Nfft' has to be greater than 0 ('Nfft' = {nfft}).")
        if not 0 < w <= nfft:
            raise ValueError(f"'W' has to be in [1, 'Nfft'] ('W' = {w}, 'Nfft' = {nfft}).")
        self._n = n
        self._w = w
        self._alpha = float(alpha)
        self._fs = float(fs)
        self._nfft = nfft
        self._p = nfft // 2

        a0, a1, a2, a3 = _BH_COEFS
        i = np.arange(w, dtype=np.float64)
        self._window = (
            a0
            - a1 * np.cos(2 * math.pi * i / w)
            + a2 * np.cos(4 * math.pi * i / w)
            - a3 * np.cos(6 * math.pi * i / w)
        )

        k = np.arange(nfft, dtype=np.float64)
        p = self._p
        self._freq = np.where(k < p, (p + k - nfft) / nfft, (k - p) / nfft) * self._fs
        self._buffer = np.zeros(nfft, dtype=np.complex128)
        self._spectrum = np.zeros(nfft, dtype=np.float64)

    @property
    def nfft(self) -> int:
        """FFT size."""
        return self._nfft

    @property
    def window(self) -> np.ndarray:
        """The Blackman-Harris analysis window."""
        return self._window.copy()

    @property
    def freq(self) -> np.ndarray:
        """Frequency of each spectrum bin."""
        return self._freq.copy()

    @property
    def spectrum(self) -> np.ndarray:
        """The current averaged spectrum."""
        return self._spectrum.copy()

    def analyze(self, x: Iterable[float]) -> tuple[np.ndarray, np.ndarray]:
        """Update the averaged spectrum with a frame; return ``(freq, spectrum)``."""
        data = np.asarray(x, dtype=np.float64)
        if data.ndim != 1 or data.size != self._n:
            raise ValueError(
                f"'X.size()' has to be equal to 'N' ('X.size()' = {data.size}, 'N' = {self._n})."
            )
        w, p, nfft = self._w, self._p, self._nfft
        for block, _ in enumerate(range(0, self._n - 2 * w, 2 * nfft)):
            chunk = data[2 * w * block : 2 * w * (block + 1)]
            samples = chunk[0::2] + 1j * chunk[1::2]
            self._buffer[:w] = samples * self._window
            bins = np.fft.fft(self._buffer)
            power = bins.real**2 + bins.imag**2
            shifted = np.concatenate((power[p:], power[:p]))
            self._spectrum = self._alpha * self._spectrum + (1.0 - self._alpha) * shifted
        return self._freq.copy(), self._spectrum.copy()