"""
Fixed-capacity circular buffer.

Every stateful block of the receiver keeps its history in a `RingBuffer`:
a preallocated NumPy array plus a write cursor. The buffer never grows,
shrinks or reallocates; `push` overwrites the oldest slot.

Two indexing schemes are offered:

- ``buf[k]`` is relative to the newest element (``0`` newest, ``-1`` the
  one before it), for ``k`` in ``[-N, N)``.
- ``buf.oldest(j)`` is relative to the oldest retained element, for ``j``
  in ``[0, N]``.

Both wrap modulo the capacity.
"""

from typing import Any

import numpy as np


class RingBuffer:
    """
    Circular buffer of ``capacity`` elements of a fixed NumPy dtype.

    Args:
        capacity: Number of slots. Must be positive.
        dtype: NumPy dtype of the stored elements.
        fill: Initial value of every slot.
    """

    __slots__ = ("_buffer", "_cursor")

    def __init__(self, capacity: int, dtype: Any = np.complex64, fill: Any = 0):
        if capacity < 1:
            raise ValueError(f"Capacity must be positive, got {capacity}.")
        self._buffer = np.full(int(capacity), fill, dtype=dtype)
        self._cursor = 0

    def __len__(self) -> int:
        return self._buffer.shape[0]

    def __repr__(self) -> str:
        return f"RingBuffer({self.to_array()!r})"

    @property
    def dtype(self) -> np.dtype:
        return self._buffer.dtype

    def push(self, value: Any) -> None:
        """Overwrites the oldest slot with `value` and advances the cursor."""
        self._buffer[self._cursor] = value
        self._cursor += 1
        if self._cursor >= self._buffer.shape[0]:
            self._cursor -= self._buffer.shape[0]

    def _newest_slot(self, offset: int) -> int:
        n = self._buffer.shape[0]
        if not -n <= offset < n:
            raise IndexError(f"Offset {offset} out of range [-{n}, {n}).")
        return (self._cursor - 1 + offset) % n

    def _oldest_slot(self, offset: int) -> int:
        n = self._buffer.shape[0]
        if not 0 <= offset <= n:
            raise IndexError(f"Offset {offset} out of range [0, {n}].")
        return (self._cursor + offset) % n

    def __getitem__(self, offset: int) -> Any:
        return self._buffer[self._newest_slot(offset)]

    def __setitem__(self, offset: int, value: Any) -> None:
        self._buffer[self._newest_slot(offset)] = value

    def oldest(self, offset: int = 0) -> Any:
        """Returns the element `offset` steps after the oldest retained one."""
        return self._buffer[self._oldest_slot(offset)]

    def set_oldest(self, offset: int, value: Any) -> None:
        """Assigns the element `offset` steps after the oldest retained one."""
        self._buffer[self._oldest_slot(offset)] = value

    def fill(self, value: Any) -> None:
        """Overwrites every slot with `value`. The cursor is left untouched."""
        self._buffer.fill(value)

    def to_array(self) -> np.ndarray:
        """
        Returns a copy of the contents ordered oldest to newest.

        Returns:
            NumPy array of length ``capacity``.
        """
        return np.roll(self._buffer, -self._cursor)
