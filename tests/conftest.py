import itertools

import pytest


@pytest.fixture
def write_csv(tmp_path):
    def _write(text, name="data.csv"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def grid_csv(write_csv):
    """3 x 2 x 2 grid with a temperature scalar and a velocity vector, rows shuffled."""
    xs, ys, zs = [0.0, 0.5, 2.0], [-1.0, 1.0], [0.0, 0.25]
    points = list(itertools.product(xs, ys, zs))
    order = [7, 2, 11, 0, 5, 9, 1, 10, 3, 6, 8, 4]
    lines = ["x,y,z,temperature,vx,vy,vz"]
    for n in order:
        x, y, z = points[n]
        lines.append(f"{x},{y},{z},{x + 10 * y + 100 * z},{x},{y},{z}")
    return write_csv("\n".join(lines) + "\n")
