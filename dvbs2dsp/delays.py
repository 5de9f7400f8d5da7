"""Delay lines for interleaved complex frames.

``UnitDelay`` delays the stream by one frame, ``BufferedDelay`` by a
configurable number of frames, and ``VariableDelay`` by a configurable
number of complex samples inside the stream.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from .filters import Filter

__all__ = ["UnitDelay", "BufferedDelay", "VariableDelay"]


class UnitDelay(Filter):
    """Outputs the frame received on the previous call (zeros at first)."""

    def __init__(self, n: int, n_frames: int = 1) -> None:
        super().__init__(n, n, n_frames)
        self._memory = np.zeros(n, dtype=np.float64)

    def reset(self) -> None:
        """Forget the memorised frame."""
        self._memory[:] = 0

    def _filter(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        out = self._memory.copy()
        self._memory = frame.copy()
        return out


class BufferedDelay(Filter):
    """Delays whole frames by ``delay`` frames, up to ``max_delay`` frames."""

    def __init__(self, n: int, max_delay: int, delay: int = 0, n_frames: int = 1) -> None:
        super().__init__(n, n, n_frames)
        if max_delay < 0:
            raise ValueError(f"'max_delay' has to be positive ('max_delay' = {max_delay}).")
        self._max_delay = max_delay
        self._memory = [np.zeros(n, dtype=np.float64) for _ in range(max_delay)]
        self._heads = list(range(max_delay))
        self._delay = 0
        self.delay = delay

    @property
    def max_delay(self) -> int:
        """Largest delay, in frames, the buffer can hold."""
        return self._max_delay

    @property
    def delay(self) -> int:
        """Current delay in frames."""
        return self._delay

    @delay.setter
    def delay(self, value: int) -> None:
        if value > self._max_delay:
            raise ValueError(
                f"'delay' cannot exceed 'max_delay' ('delay' = {value}, "
                f"'max_delay' = {self._max_delay})."
            )
        self._delay = value

    def reset(self) -> None:
        """Zero every stored frame."""
        for buffer in self._memory:
            buffer[:] = 0

    def buffer_lines(self) -> list[str]:
        """Describe the stored frames, one line per buffer slot."""
        return [
            f"mem[{j}] | " + " ".join(f"{value:g}" for value in buffer)
            for j, buffer in enumerate(self._memory)
        ]

    def _filter(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        if self._delay <= 0:
            return frame.copy()
        out = self._memory[self._heads[0]].copy()
        self._heads = self._heads[1:] + self._heads[:1]
        self._memory[self._heads[self._delay - 1]][:] = frame
        return out


class VariableDelay(Filter):
    """Delays a complex stream by ``delay`` samples, ``delay <= max_delay``."""

    def __init__(self, n: int, delay: int, max_delay: int, n_frames: int = 1) -> None:
        super().__init__(n, n, n_frames)
        if max_delay < 0:
            raise ValueError(f"'max_delay' has to be positive ('max_delay' = {max_delay}).")
        self._size = max_delay + 1
        self._ring = np.zeros(2 * self._size, dtype=np.complex128)
        self._tail = np.zeros(4 * self._size, dtype=np.float64)
        self._head = 0
        self._tail_len = 0
        self._first_time = True
        self._last_outputs: dict[int, np.ndarray] = {}
        self._delay = 0
        self.set_delay(delay)

    @property
    def delay(self) -> int:
        """Current delay in complex samples."""
        return self._delay

    def set_delay(self, delay: int) -> None:
        """Change the delay, saturating it to ``max_delay``."""
        self._delay = delay if delay < self._size else self._size - 1

    def step(self, x: complex) -> complex:
        """Push one complex sample and return the delayed sample."""
        self._ring[self._head] = x
        self._ring[self._head + self._size] = x
        y = complex(self._ring[self._head + self._size - self._delay])
        self._head = (self._head + 1) % self._size
        return y

    def reset(self) -> None:
        """Clear the delay line."""
        self._ring[:] = 0
        self._tail[:] = 0
        self._head = 0
        self._tail_len = 0
        self._first_time = True
        self._last_outputs.clear()

    def _filter(self, frame: np.ndarray, frame_id: int) -> np.ndarray:
        n = self.n
        if n < 2 * (self._size - 1):
            raise ValueError(
                f"'N' has to be at least 2 * 'max_delay' ('N' = {n}, 'max_delay' = {self._size - 1})."
            )
        shift = 2 * self._delay
        start_out = shift - self._tail_len if shift > self._tail_len else 0
        start_tail = self._tail_len - shift if shift < self._tail_len else 0
        end_tail = min(start_tail + shift, self._tail.size)
        if end_tail - start_tail > n - start_out:
            end_tail = start_tail + (n - start_out)

        out = np.zeros(n, dtype=np.float64)
        previous = self._last_outputs.get(frame_id)
        if start_out and not self._first_time and previous is not None:
            out[:start_out] = previous[n - start_out :]
        out[start_out : start_out + (end_tail - start_tail)] = self._tail[start_tail:end_tail]
        out[shift:] = frame[: n - shift]
        self._tail[:shift] = frame[n - shift :]

        self._first_time = False
        self._tail_len = shift
        self._last_outputs[frame_id] = out.copy()
        return out