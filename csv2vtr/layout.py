"""Classify CSV header columns into coordinates, scalar fields and vector fields."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple, Union

from csv2vtr.config import AXES, DEFAULT_NAMING, NamingConvention
from csv2vtr.errors import LayoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScalarColumn:
    name: str
    column: str


@dataclass(frozen=True)
class VectorColumns:
    name: str
    # x, y, z component columns; None where the CSV has no such component
    columns: Tuple[Optional[str], Optional[str], Optional[str]]

    @property
    def present(self) -> List[str]:
        return [c for c in self.columns if c is not None]


FieldColumns = Union[ScalarColumn, VectorColumns]


@dataclass
class Layout:
    axes: Dict[str, str]
    fields: List[FieldColumns] = field(default_factory=list)

    @property
    def scalars(self) -> List[ScalarColumn]:
        return [f for f in self.fields if isinstance(f, ScalarColumn)]

    @property
    def vectors(self) -> List[VectorColumns]:
        return [f for f in self.fields if isinstance(f, VectorColumns)]

    @property
    def data_columns(self) -> List[str]:
        columns = []
        for f in self.fields:
            columns.extend([f.column] if isinstance(f, ScalarColumn) else f.present)
        return columns


@dataclass
class _Group:
    name: str
    columns: List[Optional[str]] = field(default_factory=lambda: [None, None, None])


def _match_component(column, patterns):
    for pattern, regex in patterns:
        m = regex.fullmatch(column)
        if m is None:
            continue
        base = m.group("base") + (m.groupdict().get("tail") or "")
        return base, pattern.component(m.group("axis"))
    return None


def resolve_layout(headers: Iterable[str], naming: NamingConvention = DEFAULT_NAMING) -> Layout:
    """Sort ``headers`` into coordinate, scalar and vector columns.

    Components sharing a base name (``vx``/``vy``/``vz``,
    ``velocity_x``/``velocity_y``, ``velocity:0``/``velocity:1``...) become
    one vector field. A base with a single component is kept as a scalar
    under its own column name, as is every other non-coordinate column.
    """
    aliases = {}
    for axis, names in naming.coordinates.items():
        for alias in names:
            aliases[naming.fold(alias)] = axis
    patterns = [(p, p.compile(naming.case_sensitive)) for p in naming.vector_patterns]

    axes: Dict[str, str] = {}
    groups: Dict[str, _Group] = {}
    order = []
    for column in headers:
        axis = aliases.get(naming.fold(column))
        if axis is not None:
            if axis in axes:
                raise LayoutError(
                    f"columns {axes[axis]!r} and {column!r} both give the {axis} coordinate")
            axes[axis] = column
            continue

        match = _match_component(column, patterns)
        if match is None:
            order.append(("scalar", column))
            continue
        base, component = match
        key = naming.fold(base)
        group = groups.get(key)
        if group is None:
            group = groups[key] = _Group(base)
            order.append(("vector", key))
        if group.columns[component] is not None:
            raise LayoutError(
                f"columns {group.columns[component]!r} and {column!r} both give "
                f"the {AXES[component]} component of {group.name!r}")
        group.columns[component] = column

    missing = [a for a in naming.required_axes if a not in axes]
    if missing:
        expected = "; ".join(
            f"{a}: {' or '.join(repr(n) for n in naming.coordinates.get(a, ()))}" for a in missing)
        raise LayoutError(f"missing coordinate column(s) ({expected})")

    fields: List[FieldColumns] = []
    for kind, ref in order:
        if kind == "scalar":
            fields.append(ScalarColumn(ref, ref))
            continue
        group = groups[ref]
        present = [c for c in group.columns if c is not None]
        if len(present) > 1:
            fields.append(VectorColumns(group.name, tuple(group.columns)))
        else:
            fields.append(ScalarColumn(present[0], present[0]))

    seen = {}
    for f in fields:
        key = naming.fold(f.name)
        if key in seen:
            raise LayoutError(f"field name {f.name!r} is produced twice ({seen[key]!r} and {f.name!r})")
        seen[key] = f.name

    layout = Layout(axes=axes, fields=fields)
    if not fields:
        logger.warning("No data columns besides the coordinates; writing geometry only")
    logger.info("Coordinates: %s", ", ".join(f"{a}={c!r}" for a, c in sorted(axes.items())))
    for f in fields:
        if isinstance(f, VectorColumns):
            logger.info("Vector %r <- %s", f.name, ", ".join(c or "0" for c in f.columns))
        else:
            logger.info("Scalar %r", f.name)
    return layout
