import numpy as np

from ..core.state import FormationKind, FormationRequest
from .base import Formation
from .lattice import CubeFormation, GridFormation
from .lines import DeltaFormation, LineFormation
from .path import PathFormation
from .rings import CircleFormation, SphereFormation, SpiralFormation


# kind -> factory(group_size, path)
FORMATIONS = {
    FormationKind.GRID: lambda group_size, path: GridFormation(),
    FormationKind.CUBE: lambda group_size, path: CubeFormation(),
    FormationKind.CIRCLE: lambda group_size, path: CircleFormation(),
    FormationKind.DELTA: lambda group_size, path: DeltaFormation(group_size),
    FormationKind.X_LINE: lambda group_size, path: LineFormation("x"),
    FormationKind.Y_LINE: lambda group_size, path: LineFormation("y"),
    FormationKind.Z_LINE: lambda group_size, path: LineFormation("z"),
    FormationKind.SPHERE: lambda group_size, path: SphereFormation(),
    FormationKind.SPIRAL: lambda group_size, path: SpiralFormation(),
    FormationKind.PATH_SAMPLED: lambda group_size, path: PathFormation(path),
}


def make_formation(kind, group_size: int = 25, path: str | None = None) -> Formation:
    kind = FormationKind.parse(kind)
    return FORMATIONS[kind](group_size, path)


def plan(count: int, kind, group_size: int = 25, path: str | None = None) -> np.ndarray:
    """
    Target positions for agents 0..count-1, shape (count, 3).

    Pure: the result depends only on the arguments. `group_size` only affects
    the delta layout and `path` only the path-sampled one.
    """
    return make_formation(kind, group_size, path)(count)


def plan_request(request: FormationRequest) -> np.ndarray:
    return plan(request.count, request.kind, request.group_size, request.path)
