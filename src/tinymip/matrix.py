from __future__ import annotations

from typing import Iterable, Sequence

import autograd.numpy as np  # type: ignore


class Matrix:
    """
    Dense row-major matrix of floats with a fixed column count.

    Rows can be appended but never removed, and every row always holds exactly
    ``cols`` values. ``m[i]`` returns a writable view of row ``i`` and
    ``m[i, j]`` a single element.
    """

    def __init__(self, rows: int, cols: int):
        if rows < 0:
            raise ValueError(f"Row count must be non-negative, got {rows}")
        if cols <= 0:
            raise ValueError(f"Column count must be positive, got {cols}")
        self._vals = np.zeros((rows, cols), dtype=float)

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[float]]) -> "Matrix":
        rows = [list(r) for r in rows]
        if not rows:
            raise ValueError("Cannot infer column count from an empty row list")
        cols = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != cols:
                raise ValueError(
                    f"Row {i} has {len(row)} values, expected {cols}"
                )
        mat = cls(len(rows), cols)
        mat._vals[:, :] = np.array(rows, dtype=float)
        return mat

    @classmethod
    def from_array(cls, arr) -> "Matrix":
        arr = np.asarray(arr, dtype=float)
        if arr.ndim != 2:
            raise ValueError(f"Expected a 2-D array, got {arr.ndim} dimension(s)")
        mat = cls(arr.shape[0], arr.shape[1])
        mat._vals[:, :] = arr
        return mat

    @property
    def rows(self) -> int:
        return self._vals.shape[0]

    @property
    def cols(self) -> int:
        return self._vals.shape[1]

    @property
    def shape(self):
        return self._vals.shape

    def __getitem__(self, key):
        return self._vals[key]

    def __setitem__(self, key, value):
        self._vals[key] = value

    def __len__(self):
        return self.rows

    def __iter__(self):
        for i in range(self.rows):
            yield self._vals[i]

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.all(self._vals == other._vals))

    def __repr__(self):
        return f"Matrix(rows={self.rows}, cols={self.cols})"

    def column(self, col: int) -> np.ndarray:
        """Copy of column ``col``."""
        return self._vals[:, col].copy()

    def swap_rows(self, row_one: int, row_two: int) -> None:
        if row_one == row_two:
            return
        self._vals[[row_one, row_two]] = self._vals[[row_two, row_one]]

    def add_row(self, values: Iterable[float]) -> None:
        row = np.asarray(list(values), dtype=float)
        if row.shape != (self.cols,):
            raise ValueError(
                f"New row has {row.size} values, expected {self.cols}"
            )
        self._vals = np.vstack([self._vals, row[None, :]])

    def copy(self) -> "Matrix":
        return Matrix.from_array(self._vals)

    def to_array(self) -> np.ndarray:
        return self._vals.copy()
