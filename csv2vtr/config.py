"""Conversion settings.

Everything the converter decides by convention lives here: which header names
are coordinates, how vector components are spotted, and how the output is
written. The CLI always runs with the defaults below.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

AXES = ("x", "y", "z")


@dataclass(frozen=True)
class VectorPattern:
    """Regex recognising one vector component column.

    The pattern must define the named groups ``base`` and ``axis``; an
    optional ``tail`` group is appended to the base to form the vector name.
    ``axes`` lists the three axis labels in component order.
    """
    regex: str
    axes: str = "xyz"

    def compile(self, case_sensitive: bool) -> "re.Pattern[str]":
        return re.compile(self.regex, 0 if case_sensitive else re.IGNORECASE)

    def component(self, label: str) -> int:
        return self.axes.lower().index(label.lower())


# vx, velocity_x, Velocity_X
SUFFIX_PATTERN = VectorPattern(r"(?P<base>.+?)_?(?P<axis>[xyz])", axes="xyz")
# ParaView "Save Data" CSV export: velocity:0, velocity:1, velocity:2
PARAVIEW_PATTERN = VectorPattern(r"(?P<base>.+):(?P<axis>[012])", axes="012")
# u1r, u2r, u3r -> "ur"
INDEXED_PATTERN = VectorPattern(
    r"(?P<base>[a-z]+)(?P<axis>[123])(?P<tail>[a-z]*)", axes="123")


@dataclass(frozen=True)
class NamingConvention:
    coordinates: Dict[str, Tuple[str, ...]] = field(default_factory=lambda: {
        "x": ("x", "Points:0"),
        "y": ("y", "Points:1"),
        "z": ("z", "Points:2"),
    })
    required_axes: Tuple[str, ...] = ("x", "y")
    vector_patterns: Tuple[VectorPattern, ...] = (
        SUFFIX_PATTERN, PARAVIEW_PATTERN, INDEXED_PATTERN)
    case_sensitive: bool = False

    def __post_init__(self):
        unknown = set(self.coordinates) - set(AXES)
        if unknown:
            raise ValueError(f"Unknown coordinate axes: {sorted(unknown)}")
        unknown = set(self.required_axes) - set(AXES)
        if unknown:
            raise ValueError(f"Unknown required axes: {sorted(unknown)}")
        for pattern in self.vector_patterns:
            if len(pattern.axes) != 3:
                raise ValueError(f"Vector pattern {pattern.regex!r} needs 3 axis labels")
            groups = pattern.compile(True).groupindex
            if "base" not in groups or "axis" not in groups:
                raise ValueError(
                    f"Vector pattern {pattern.regex!r} must define 'base' and 'axis' groups")

    def fold(self, name: str) -> str:
        """Key used when comparing header names."""
        return name if self.case_sensitive else name.lower()


DEFAULT_NAMING = NamingConvention()


@dataclass
class ConversionConfig:
    naming: NamingConvention = DEFAULT_NAMING
    # coordinates closer than this collapse onto one grid line
    tolerance: float = 0.0
    binary: bool = True
    # None: complex magnitudes for real/imaginary vector pairs only
    add_magnitudes: Optional[bool] = None
    chunk_rows: int = 100_000
    # None lets tqdm decide from the terminal
    progress: Optional[bool] = False

    def __post_init__(self):
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")
        if self.chunk_rows < 1:
            raise ValueError(f"chunk_rows must be >= 1, got {self.chunk_rows}")
