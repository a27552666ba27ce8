import argparse
import logging
import sys
from pathlib import Path

from csv2vtr import __version__
from csv2vtr.config import ConversionConfig
from csv2vtr.convert import convert
from csv2vtr.errors import Csv2VtrError


def build_parser():
    parser = argparse.ArgumentParser(
        prog="csv2vtr",
        description="Convert CSV point data on a rectilinear grid to a VTK .vtr file for ParaView",
    )
    parser.add_argument("-c", "--csv-path", required=True, type=Path,
                        help="path to .csv file to convert")
    parser.add_argument("-o", "--output", required=True, type=Path,
                        help="output file, .vtr extension")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        grid = convert(args.csv_path, args.output, ConversionConfig(progress=None))
    except Csv2VtrError as exc:
        print(f"❌ Error: {exc}", file=sys.stderr)
        return 1

    nx, ny, nz = grid.dimensions
    print(f"✅ Saved {args.output} ({nx} x {ny} x {nz} grid, {len(grid.fields)} fields)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
