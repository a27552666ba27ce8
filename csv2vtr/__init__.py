"""CSV to VTK rectilinear grid (.vtr) converter."""

__version__ = "0.1.0"

from csv2vtr.config import ConversionConfig, NamingConvention, VectorPattern  # noqa: E402
from csv2vtr.convert import convert  # noqa: E402
from csv2vtr.errors import (  # noqa: E402
    Csv2VtrError,
    FileIOError,
    GridError,
    LayoutError,
    ParseError,
)
from csv2vtr.grid import Grid, ScalarField, VectorField, build_grid  # noqa: E402
from csv2vtr.layout import Layout, resolve_layout  # noqa: E402
from csv2vtr.reader import read_frames, read_header, read_rows, read_table  # noqa: E402
from csv2vtr.vtkfile import read_grid, write_grid  # noqa: E402
