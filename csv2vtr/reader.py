"""CSV input: header row plus numeric data rows."""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional

import pandas as pd
from tqdm import tqdm

from csv2vtr.errors import FileIOError, ParseError

logger = logging.getLogger(__name__)

Row = Mapping[str, float]

_NAN_LITERALS = {"nan", "+nan", "-nan"}


def _open_csv(path, **kwargs):
    # header=None keeps pandas from guessing an index column on ragged rows;
    # the header is row 0 of the first chunk.
    try:
        return pd.read_csv(
            path,
            header=None,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            **kwargs,
        )
    except UnicodeDecodeError as exc:
        raise ParseError(f"{path}: not valid UTF-8 text ({exc.reason} at byte {exc.start})") from exc
    except pd.errors.EmptyDataError as exc:
        raise ParseError(f"{path}: file is empty, expected a header row") from exc
    except pd.errors.ParserError as exc:
        raise ParseError(f"{path}: {exc}") from exc
    except OSError as exc:
        raise FileIOError(f"failed to open CSV file at {path}: {exc}") from exc


def _check_header(path, names: List[str]) -> List[str]:
    names = [str(n).strip() for n in names]
    for pos, name in enumerate(names, start=1):
        if not name:
            raise ParseError(f"{path}: header column {pos} has no name")
    seen = set()
    for name in names:
        if name in seen:
            raise ParseError(f"{path}: duplicate header column {name!r}")
        seen.add(name)
    return names


def read_header(path) -> List[str]:
    """Column names from the first line of ``path``."""
    frame = _open_csv(path, nrows=1)
    if frame.empty:
        raise ParseError(f"{path}: file is empty, expected a header row")
    return _check_header(path, frame.iloc[0].tolist())


def _to_numeric(path, chunk: pd.DataFrame, header: List[str]) -> pd.DataFrame:
    # chunk.index counts file rows from 0 (the header), so line = index + 1
    short = chunk.isna().any(axis=1)
    if short.any():
        line = chunk.index[short.to_numpy().argmax()] + 1
        raise ParseError(
            f"{path}: line {line} has fewer fields than the {len(header)} header columns")

    columns = {}
    for pos, name in enumerate(header):
        text = chunk[pos].str.strip()
        numbers = pd.to_numeric(text, errors="coerce")
        bad = numbers.isna() & ~text.str.lower().isin(_NAN_LITERALS)
        if bad.any():
            first = bad.to_numpy().argmax()
            where = f"{path}: line {chunk.index[first] + 1}, column {name!r}"
            if not text.iloc[first]:
                # the tokenizer pads short rows with empty fields
                raise ParseError(f"{where}: value is missing (empty field or short row)")
            raise ParseError(f"{where}: cannot parse {text.iloc[first]!r} as a number")
        columns[name] = numbers.astype("float64")
    return pd.DataFrame(columns, index=chunk.index)


def read_frames(path, *, chunk_rows: int = 100_000,
                progress: Optional[bool] = False) -> Iterator[pd.DataFrame]:
    """Yield validated float64 frames of at most ``chunk_rows`` file rows.

    The file stays open only while the generator is being consumed and is
    closed when it finishes, fails, or is closed early.
    """
    path = Path(path)
    header = None
    with _open_csv(path, chunksize=chunk_rows) as chunks:
        disable = None if progress is None else not progress
        try:
            for chunk in tqdm(chunks, desc="Reading CSV", unit="chunk", disable=disable):
                if header is None:
                    header = _check_header(path, chunk.iloc[0].tolist())
                    chunk = chunk.iloc[1:]
                if chunk.empty:
                    continue
                yield _to_numeric(path, chunk, header)
        except UnicodeDecodeError as exc:
            raise ParseError(
                f"{path}: not valid UTF-8 text ({exc.reason} at byte {exc.start})") from exc
        except pd.errors.ParserError as exc:
            raise ParseError(f"{path}: {exc}") from exc
        except OSError as exc:
            raise FileIOError(f"failed to read CSV file at {path}: {exc}") from exc


def read_table(path, **kwargs) -> pd.DataFrame:
    """Whole CSV as one float64 frame with a fresh 0-based index."""
    header = read_header(path)
    frames = list(read_frames(path, **kwargs))
    if not frames:
        logger.warning("%s has a header but no data rows", path)
        return pd.DataFrame({name: pd.Series(dtype="float64") for name in header})
    table = pd.concat(frames, ignore_index=True)
    logger.info("Read %d rows x %d columns from %s", len(table), len(header), path)
    return table


def read_rows(path, **kwargs) -> Iterator[Row]:
    """Yield each data row as a read-only ``{column: value}`` mapping."""
    for frame in read_frames(path, **kwargs):
        names = list(frame.columns)
        for values in frame.itertuples(index=False, name=None):
            yield MappingProxyType(dict(zip(names, values)))
