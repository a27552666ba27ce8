import pytest

from csv2vtr.config import NamingConvention, VectorPattern
from csv2vtr.errors import LayoutError
from csv2vtr.layout import ScalarColumn, VectorColumns, resolve_layout


def test_vector_components_group_and_scalars_stay_alone():
    layout = resolve_layout(["x", "y", "z", "vx", "vy", "vz", "temperature"])

    assert layout.axes == {"x": "x", "y": "y", "z": "z"}
    assert layout.fields == [
        VectorColumns("v", ("vx", "vy", "vz")),
        ScalarColumn("temperature", "temperature"),
    ]


def test_underscore_suffix_with_missing_component():
    layout = resolve_layout(["x", "y", "velocity_x", "velocity_y"])
    (vector,) = layout.vectors
    assert vector.name == "velocity"
    assert vector.columns == ("velocity_x", "velocity_y", None)
    assert "z" not in layout.axes


def test_paraview_export_names():
    headers = ["pressure", "velocity:0", "velocity:1", "velocity:2",
               "Points:0", "Points:1", "Points:2"]
    layout = resolve_layout(headers)

    assert layout.axes == {"x": "Points:0", "y": "Points:1", "z": "Points:2"}
    assert [f.name for f in layout.fields] == ["pressure", "velocity"]
    assert layout.vectors[0].columns == ("velocity:0", "velocity:1", "velocity:2")


def test_indexed_complex_components():
    headers = ["x", "y", "z", "u1r", "u2r", "u3r", "u1i", "u2i", "u3i"]
    layout = resolve_layout(headers)
    assert [(v.name, v.columns) for v in layout.vectors] == [
        ("ur", ("u1r", "u2r", "u3r")),
        ("ui", ("u1i", "u2i", "u3i")),
    ]
    assert layout.scalars == []


def test_lone_component_is_a_scalar():
    layout = resolve_layout(["x", "y", "vz", "max"])
    assert layout.fields == [ScalarColumn("vz", "vz"), ScalarColumn("max", "max")]


def test_case_insensitive_by_default():
    layout = resolve_layout(["X", "Y", "Z", "VX", "VY"])
    assert layout.axes == {"x": "X", "y": "Y", "z": "Z"}
    assert layout.vectors[0].name == "V"


def test_case_sensitive_convention():
    naming = NamingConvention(case_sensitive=True)
    with pytest.raises(LayoutError, match="missing coordinate"):
        resolve_layout(["X", "Y", "t"], naming)


def test_missing_required_coordinate():
    with pytest.raises(LayoutError) as exc:
        resolve_layout(["x", "temperature"])
    assert "y" in str(exc.value)


def test_z_can_be_required():
    naming = NamingConvention(required_axes=("x", "y", "z"))
    with pytest.raises(LayoutError):
        resolve_layout(["x", "y", "t"], naming)


def test_two_columns_for_one_axis():
    with pytest.raises(LayoutError, match="x coordinate"):
        resolve_layout(["x", "Points:0", "y"])


def test_two_columns_for_one_component():
    with pytest.raises(LayoutError, match="component"):
        resolve_layout(["x", "y", "vx", "v_x", "vy"])


def test_vector_name_clashes_with_scalar():
    with pytest.raises(LayoutError, match="'v'"):
        resolve_layout(["x", "y", "v", "vx", "vy"])


def test_custom_vector_pattern():
    naming = NamingConvention(vector_patterns=(
        VectorPattern(r"(?P<base>.+)\[(?P<axis>[012])\]", axes="012"),
    ))
    layout = resolve_layout(["x", "y", "B[0]", "B[1]", "B[2]", "vx", "vy"], naming)
    assert layout.vectors == [VectorColumns("B", ("B[0]", "B[1]", "B[2]"))]
    assert [s.name for s in layout.scalars] == ["vx", "vy"]


def test_pattern_without_groups_is_rejected():
    with pytest.raises(ValueError):
        NamingConvention(vector_patterns=(VectorPattern(r"(.+)_(x|y|z)"),))


def test_data_columns():
    layout = resolve_layout(["x", "y", "t", "vx", "vy"])
    assert layout.data_columns == ["t", "vx", "vy"]
