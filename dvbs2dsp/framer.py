"""Physical-layer framing: PL header generation and pilot insertion.

Frames are interleaved real/imaginary values, ``[re0, im0, re1, im1, ...]``.
An XFEC frame is prefixed with the 90-symbol PL header (SOF + PLS code).
A block of 36 pilot symbols is inserted after every 16 slots of 90 data
symbols.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np

__all__ = ["Framer", "generate_plh"]

_SLOT = 90  # symbols per slot
_PILOT_LEN = 36  # symbols per pilot block
_SLOTS_PER_PILOT = 16

_G_32_7 = np.array(
    [
        [1, 0, 0, 1, 0, 0, 0, 0, 1, 0, 1, 0, 1, 1, 0, 0, 0, 0, 1, 0, 1, 1, 0, 1, 1, 1, 0, 1, 1, 1, 0, 1],
        [0, 1, 0, 1, 0, 1, 0, 1, 0, 1, 0, 1, 0, 1, 0, 1, 0, 1, 0, 1, 0, 1, 0, 1, 0, 1, 0, 1, 0, 1, 0, 1],
        [0, 0, 1, 1, 0, 0, 1, 1, 0, 0, 1, 1, 0, 0, 1, 1, 0, 0, 1, 1, 0, 0, 1, 1, 0, 0, 1, 1, 0, 0, 1, 1],
        [0, 0, 0, 0, 1, 1, 1, 1, 0, 0, 0, 0, 1, 1, 1, 1, 0, 0, 0, 0, 1, 1, 1, 1, 0, 0, 0, 0, 1, 1, 1, 1],
        [0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 1, 1, 1, 1],
        [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1],
        [1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1],
    ],
    dtype=np.int64,
)

_PLS_SCRAMBLER = np.array(
    [0, 1, 1, 1, 0, 0, 0, 1, 1, 0, 0, 1, 1, 1, 0, 1, 1, 0, 0, 0, 0, 0, 1, 1, 1, 1, 0, 0, 1, 0, 0, 1,
     0, 1, 0, 1, 0, 0, 1, 1, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 1, 0, 1, 1, 0, 1, 1, 1, 1, 1, 1, 0, 1, 0],
    dtype=np.int64,
)

_SOF_BITS = np.array(
    [0, 1, 1, 0, 0, 0, 1, 1, 0, 1, 0, 0, 1, 0, 1, 1, 1, 0, 1, 0, 0, 0, 0, 0, 1, 0],
    dtype=np.int64,
)

_MODCODS = {
    "QPSK-S_8/9": (0, 0, 1, 0, 1, 0, 1),
    "QPSK-S_3/5": (0, 0, 0, 1, 0, 1, 1),
    "8PSK-S_3/5": (0, 0, 1, 1, 0, 0, 1),
    "8PSK-S_8/9": (0, 1, 0, 0, 0, 0, 1),
    "16APSK-S_8/9": (0, 1, 0, 1, 1, 0, 1),
}

_INV_SQRT2 = 1.0 / math.sqrt(2.0)


def _pi2_bpsk(bits: np.ndarray, jump: bool = False) -> np.ndarray:
    """Pi/2-BPSK modulate bits into interleaved reals."""
    bpsk = (1 - 2 * bits).astype(np.float64) * _INV_SQRT2
    even, odd = bpsk[0::2], bpsk[1::2]
    out = np.empty(2 * bits.size, dtype=np.float64)
    out[0::4] = -even if jump else even
    out[1::4] = even
    out[2::4] = -odd
    out[3::4] = -odd if jump else odd
    return out


def generate_plh(modcod: str) -> np.ndarray:
    """Build the modulated PL header (180 reals) for a MODCOD name.

    Unknown MODCOD names are coded with an all-zero MODCOD field.
    """
    mod_cod = np.array(_MODCODS.get(modcod, (0,) * 7), dtype=np.int64)
    sof = _pi2_bpsk(_SOF_BITS)

    coded = (mod_cod @ _G_32_7) % 2
    complementary = 1 - coded
    final = np.empty(64, dtype=np.int64)
    final[0::2] = (coded + _PLS_SCRAMBLER[0::2]) % 2
    final[1::2] = (complementary + _PLS_SCRAMBLER[1::2]) % 2

    pls = _pi2_bpsk(final, jump=bool(mod_cod[0]))
    return np.concatenate((sof, pls))


class Framer:
    """Builds PL frames from XFEC frames and strips them back.

    ``xfec_frame_size`` and ``pl_frame_size`` count reals (twice the number
    of complex symbols).
    """

    def __init__(
        self, xfec_frame_size: int, pl_frame_size: int, modcod: str, n_frames: int = 1
    ) -> None:
        if xfec_frame_size <= 0:
            raise ValueError(
                f"'xfec_frame_size' has to be greater than 0 ('xfec_frame_size' = {xfec_frame_size})."
            )
        if pl_frame_size <= 0:
            raise ValueError(
                f"'pl_frame_size' has to be greater than 0 ('pl_frame_size' = {pl_frame_size})."
            )
        if n_frames <= 0:
            raise ValueError(f"'n_frames' has to be greater than 0 ('n_frames' = {n_frames}).")
        self._xfec_frame_size = xfec_frame_size
        self._pl_frame_size = pl_frame_size
        self._n_frames = n_frames
        self._modcod = modcod
        self._plh = generate_plh(modcod)
        self._n_pilots = xfec_frame_size // (2 * _SLOTS_PER_PILOT * _SLOT)

    @property
    def xfec_frame_size(self) -> int:
        """Number of reals in one XFEC frame."""
        return self._xfec_frame_size

    @property
    def pl_frame_size(self) -> int:
        """Number of reals in one PL frame."""
        return self._pl_frame_size

    @property
    def n_frames(self) -> int:
        """Number of frames handled per call."""
        return self._n_frames

    @property
    def modcod(self) -> str:
        """MODCOD name signalled in the header."""
        return self._modcod

    @property
    def n_pilots(self) -> int:
        """Number of pilot blocks inserted in each frame."""
        return self._n_pilots

    @property
    def plh(self) -> np.ndarray:
        """The modulated PL header."""
        return self._plh.copy()

    def _frames(self, frame_id: int) -> Iterable[int]:
        return range(self._n_frames) if frame_id < 0 else (frame_id % self._n_frames,)

    def _check(self, values: Iterable[float], size: int, label: str, size_label: str) -> np.ndarray:
        data = np.asarray(values, dtype=np.float64)
        if data.ndim != 1 or data.size != size * self._n_frames:
            raise ValueError(
                f"'{label}.size()' has to be equal to '{size_label}' * 'n_frames' "
                f"('{label}.size()' = {data.size}, '{size_label}' = {size}, "
                f"'n_frames' = {self._n_frames})."
            )
        return data

    def generate(self, y: Iterable[float], frame_id: int = -1) -> np.ndarray:
        """Frame XFEC frames into PL frames.

        With a negative ``frame_id`` every frame is processed; otherwise only
        frame ``frame_id % n_frames`` is, and the other output frames are zero.
        """
        data = self._check(y, self._xfec_frame_size, "Y_N1", "xfec_frame_size")
        out = np.zeros(self._pl_frame_size * self._n_frames, dtype=np.float64)
        xs, ps = self._xfec_frame_size, self._pl_frame_size
        for f in self._frames(frame_id):
            out[f * ps : (f + 1) * ps] = self._generate(data[f * xs : (f + 1) * xs])
        return out

    def remove_plh(self, y: Iterable[float], frame_id: int = -1) -> np.ndarray:
        """Strip the header and pilots of PL frames, giving XFEC frames back."""
        data = self._check(y, self._pl_frame_size, "PL_frame", "pl_frame_size")
        out = np.zeros(self._xfec_frame_size * self._n_frames, dtype=np.float64)
        xs, ps = self._xfec_frame_size, self._pl_frame_size
        for f in self._frames(frame_id):
            out[f * xs : (f + 1) * xs] = self._remove_plh(data[f * ps : (f + 1) * ps])
        return out

    def _generate(self, frame: np.ndarray) -> np.ndarray:
        data = frame[: 2 * (self._xfec_frame_size // 2)]
        pilot = np.full(2 * _PILOT_LEN, _INV_SQRT2, dtype=np.float64)
        block = 2 * _SLOTS_PER_PILOT * _SLOT
        parts = [self._plh]
        for i in range(self._n_pilots):
            parts.append(data[i * block : (i + 1) * block])
            parts.append(pilot)
        parts.append(data[self._n_pilots * block :])
        built = np.concatenate(parts)
        if built.size > self._pl_frame_size:
            raise ValueError(
                f"'pl_frame_size' is too small for the built frame ('pl_frame_size' = "
                f"{self._pl_frame_size}, required = {built.size})."
            )
        out = np.zeros(self._pl_frame_size, dtype=np.float64)
        out[: built.size] = built
        return out

    def _remove_plh(self, frame: np.ndarray) -> np.ndarray:
        rest = frame[2 * _SLOT :]
        block = 2 * _SLOTS_PER_PILOT * _SLOT
        pilot = 2 * _PILOT_LEN
        keep = np.ones(rest.size, dtype=bool)
        for i in range(1, self._n_pilots + 1):
            # Position counted after the previous pilots were removed.
            start = i * block + (i - 1) * pilot
            keep[start : start + pilot] = False
        stripped = rest[keep]
        if stripped.size < self._xfec_frame_size:
            raise ValueError(
                f"'pl_frame_size' is too small to hold an XFEC frame ('pl_frame_size' = "
                f"{self._pl_frame_size}, 'xfec_frame_size' = {self._xfec_frame_size})."
            )
        return stripped[: self._xfec_frame_size].copy()