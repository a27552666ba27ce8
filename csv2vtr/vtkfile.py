"""Reading and writing VTK rectilinear grid files (.vtr XML, .vtk legacy)."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

import numpy as np
import pyvista as pv
import vtk
from vtk.util.numpy_support import vtk_to_numpy

from csv2vtr.errors import FileIOError
from csv2vtr.grid import Grid, ScalarField, VectorField

logger = logging.getLogger(__name__)

SUFFIXES = (".vtr", ".vtk")


def _check_suffix(path: Path):
    if path.suffix.lower() not in SUFFIXES:
        raise FileIOError(
            f"output file {path} must end in .vtr (VTK XML) or .vtk (legacy VTK)")


def _output_mode(path: Path) -> int:
    """Mode of the file being replaced, or the umask default for a new one."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def to_pyvista(grid: Grid) -> pv.RectilinearGrid:
    mesh = pv.RectilinearGrid(grid.x, grid.y, grid.z)
    for f in grid.fields:
        if isinstance(f, VectorField):
            mesh.point_data[f.name] = f.as_array()
        else:
            mesh.point_data[f.name] = f.values
    return mesh


def write_grid(grid: Grid, path, *, binary: bool = True) -> Path:
    """Write ``grid`` to ``path``, replacing any existing file.

    The data goes to a temporary file in the same directory first, so a
    failed write never leaves a truncated file at ``path``.
    """
    path = Path(path)
    _check_suffix(path)
    mesh = to_pyvista(grid)

    tmp = None
    try:
        fd, tmp = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=path.suffix, dir=path.parent)
        os.close(fd)
        mesh.save(tmp, binary=binary)
        if os.path.getsize(tmp) == 0:
            raise OSError("VTK writer produced no output")
        # mkstemp creates 0600 files
        os.chmod(tmp, _output_mode(path))
        os.replace(tmp, path)
    except (OSError, ValueError, RuntimeError) as exc:
        raise FileIOError(f"failed to write output file at {path}: {exc}") from exc
    finally:
        if tmp is not None and os.path.exists(tmp):
            os.unlink(tmp)

    logger.info("Wrote %d points, %d fields to %s", mesh.n_points, len(grid.fields), path)
    return path


def read_grid(path) -> Grid:
    """Load a rectilinear grid file back into a Grid.

    Three-component point arrays come back as vector fields, single
    component arrays as scalars; anything else is skipped.
    """
    path = Path(path)
    _check_suffix(path)
    if not path.is_file():
        raise FileIOError(f"no VTK file at {path}")

    if path.suffix.lower() == ".vtr":
        reader = vtk.vtkXMLRectilinearGridReader()
    else:
        reader = vtk.vtkRectilinearGridReader()
    reader.SetFileName(str(path))
    reader.Update()
    data = reader.GetOutput()
    if data is None or data.GetXCoordinates() is None:
        raise FileIOError(f"{path} is not a readable rectilinear grid")

    grid = Grid(*(
        vtk_to_numpy(coords).astype(np.float64)
        for coords in (data.GetXCoordinates(), data.GetYCoordinates(), data.GetZCoordinates())
    ))
    point_data = data.GetPointData()
    for i in range(point_data.GetNumberOfArrays()):
        array = point_data.GetArray(i)
        if array is None:
            continue
        name = array.GetName()
        values = vtk_to_numpy(array).astype(np.float64)
        n_components = array.GetNumberOfComponents()
        if n_components == 1:
            grid.fields.append(ScalarField(name, values))
        elif n_components == 3:
            grid.fields.append(VectorField(name, values[:, 0], values[:, 1], values[:, 2]))
        else:
            logger.warning("Skipping %r: %d components", name, n_components)
    return grid
