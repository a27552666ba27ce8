"""CSV -> layout -> grid -> VTK file."""

from __future__ import annotations

import logging
from typing import Optional

from csv2vtr.config import ConversionConfig
from csv2vtr.grid import Grid, build_grid
from csv2vtr.layout import resolve_layout
from csv2vtr.reader import read_header, read_table
from csv2vtr.vtkfile import write_grid

logger = logging.getLogger(__name__)


def convert(csv_path, output, config: Optional[ConversionConfig] = None) -> Grid:
    config = config or ConversionConfig()

    # resolve the header before reading data so layout problems fail fast
    layout = resolve_layout(read_header(csv_path), config.naming)
    table = read_table(csv_path, chunk_rows=config.chunk_rows, progress=config.progress)
    grid = build_grid(table, layout, tolerance=config.tolerance,
                      add_magnitudes=config.add_magnitudes)
    write_grid(grid, output, binary=config.binary)
    return grid
