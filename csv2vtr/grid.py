"""Rectilinear grid assembly from CSV rows."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from csv2vtr.config import AXES
from csv2vtr.errors import GridError, LayoutError
from csv2vtr.layout import Layout, ScalarColumn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScalarField:
    name: str
    values: np.ndarray


@dataclass(frozen=True)
class VectorField:
    name: str
    x: Optional[np.ndarray] = None
    y: Optional[np.ndarray] = None
    z: Optional[np.ndarray] = None

    @property
    def components(self) -> Tuple[np.ndarray, ...]:
        return tuple(c for c in (self.x, self.y, self.z) if c is not None)

    @property
    def n_components(self) -> int:
        return len(self.components)

    def __len__(self):
        return len(self.components[0])

    def as_array(self) -> np.ndarray:
        """(n_points, 3) array, absent components filled with zeros."""
        n = len(self)
        return np.column_stack([
            c if c is not None else np.zeros(n) for c in (self.x, self.y, self.z)
        ])

    def magnitude(self) -> np.ndarray:
        return np.sqrt(sum(c ** 2 for c in self.components))


Field = Union[ScalarField, VectorField]


@dataclass
class Grid:
    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    fields: List[Field] = field(default_factory=list)

    @property
    def dimensions(self) -> Tuple[int, int, int]:
        return len(self.x), len(self.y), len(self.z)

    @property
    def n_points(self) -> int:
        nx, ny, nz = self.dimensions
        return nx * ny * nz

    @property
    def extent(self) -> Tuple[int, int, int, int, int, int]:
        nx, ny, nz = self.dimensions
        return 0, nx - 1, 0, ny - 1, 0, nz - 1

    def field(self, name: str) -> Field:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def point(self, index: int) -> Tuple[float, float, float]:
        """Coordinates of grid point ``index`` (x fastest varying)."""
        nx, ny, _ = self.dimensions
        i, rest = index % nx, index // nx
        j, k = rest % ny, rest // ny
        return float(self.x[i]), float(self.y[j]), float(self.z[k])


def _axis_coordinates(values: np.ndarray, tolerance: float):
    """Sorted grid lines for one axis and each row's index on it."""
    lines = np.unique(values)
    if tolerance > 0 and len(lines) > 1:
        # each line absorbs the values less than tolerance above it
        starts = [lines[0]]
        for value in lines[1:]:
            if value - starts[-1] >= tolerance:
                starts.append(value)
        lines = np.array(starts)
    index = np.searchsorted(lines, values, side="right") - 1
    return lines, index


def _as_frame(rows) -> pd.DataFrame:
    if isinstance(rows, pd.DataFrame):
        return rows
    return pd.DataFrame.from_records([dict(r) for r in rows])


def build_grid(rows: Union[pd.DataFrame, Iterable[Mapping[str, float]]], layout: Layout, *,
               tolerance: float = 0.0, add_magnitudes: Optional[bool] = None) -> Grid:
    """Place every row on the rectilinear grid spanned by its coordinates.

    Each row must land on its own grid point and every grid point must get
    a row; otherwise a GridError names the offending point.

    ``add_magnitudes``: None adds the complex magnitude of each
    real/imaginary vector pair only, True also adds the norm of every other
    vector, False adds nothing.
    """
    table = _as_frame(rows)
    n_rows = len(table)
    if n_rows == 0:
        raise GridError("no data rows to build a grid from")

    needed = list(layout.axes.values()) + layout.data_columns
    absent = [c for c in needed if c not in table.columns]
    if absent:
        raise LayoutError(f"rows have no column(s) {', '.join(map(repr, absent))}")

    lines = {}
    index = {}
    for axis in AXES:
        column = layout.axes.get(axis)
        if column is None:
            lines[axis] = np.zeros(1)
            index[axis] = np.zeros(n_rows, dtype=np.intp)
            continue
        values = table[column].to_numpy(dtype=np.float64)
        finite = np.isfinite(values)
        if not finite.all():
            row = int(np.argmin(finite))
            raise GridError(
                f"{axis} coordinate {column!r} is {values[row]} in data row {row + 1}")
        lines[axis], index[axis] = _axis_coordinates(values, tolerance)

    grid = Grid(lines["x"], lines["y"], lines["z"])
    nx, ny, nz = grid.dimensions
    logger.info("Mesh size is (%d, %d, %d)", nx, ny, nz)

    flat = index["x"] + nx * (index["y"] + ny * index["z"])
    counts = np.bincount(flat, minlength=grid.n_points)
    shape = f"{nx} x {ny} x {nz} = {grid.n_points} points"
    if (counts > 1).any():
        point = int(np.argmax(counts > 1))
        raise GridError(
            f"grid point {grid.point(point)} appears in {counts[point]} rows "
            f"({n_rows} rows for {shape})")
    if (counts == 0).any():
        point = int(np.argmin(counts))
        raise GridError(
            f"grid point {grid.point(point)} has no row "
            f"({n_rows} rows for {shape})")

    def ordered(column):
        out = np.empty(grid.n_points, dtype=np.float64)
        out[flat] = table[column].to_numpy(dtype=np.float64)
        return out

    for f in layout.fields:
        if isinstance(f, ScalarColumn):
            grid.fields.append(ScalarField(f.name, ordered(f.column)))
        else:
            x, y, z = (ordered(c) if c is not None else None for c in f.columns)
            grid.fields.append(VectorField(f.name, x, y, z))

    if add_magnitudes is None:
        add_magnitude_fields(grid, vectors=False)
    elif add_magnitudes:
        add_magnitude_fields(grid)
    return grid


def _complex_pairs(vectors):
    """(base, real, imaginary) for vectors named ``<base>r`` and ``<base>i``."""
    by_name = {f.name: f for f in vectors}
    pairs = []
    for real in vectors:
        base, tail = real.name[:-1], real.name[-1:]
        if not base or tail not in ("r", "R"):
            continue
        imag = by_name.get(base + ("i" if tail == "r" else "I"))
        if imag is not None:
            pairs.append((base, real, imag))
    return pairs


def complex_magnitude(real: VectorField, imag: VectorField) -> np.ndarray:
    """sqrt(sum of re^2 + im^2 over the components) at each point."""
    return np.sqrt((real.as_array() ** 2 + imag.as_array() ** 2).sum(axis=1))


def add_magnitude_fields(grid: Grid, *, vectors: bool = True) -> Grid:
    """Append magnitude scalars to ``grid``.

    A real/imaginary vector pair such as ``ur``/``ui`` gets one
    ``<base>_magnitude`` holding the norm of the complex vector. With
    ``vectors`` set, every other vector field also gets a
    ``<name>_magnitude`` with its Euclidean norm.
    """
    vector_fields = [f for f in grid.fields if isinstance(f, VectorField)]
    pairs = _complex_pairs(vector_fields)
    paired = {f.name for _, real, imag in pairs for f in (real, imag)}

    magnitudes = [(f"{base}_magnitude", complex_magnitude(real, imag))
                  for base, real, imag in pairs]
    if vectors:
        magnitudes += [(f"{f.name}_magnitude", f.magnitude())
                       for f in vector_fields if f.name not in paired]

    names = {f.name for f in grid.fields}
    for name, values in magnitudes:
        if name in names:
            raise LayoutError(f"magnitude field {name!r} clashes with an existing field")
        grid.fields.append(ScalarField(name, values))
        names.add(name)
    return grid
