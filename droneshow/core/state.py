import operator
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from loguru import logger


class InvalidRequestError(ValueError):
    """Raised when a formation request cannot be turned into targets."""


class FormationKind(Enum):
    GRID = "grid"
    CUBE = "cube"
    CIRCLE = "circle"
    DELTA = "delta"
    X_LINE = "x-line"
    Y_LINE = "y-line"
    Z_LINE = "z-line"
    SPHERE = "sphere"
    SPIRAL = "spiral"
    PATH_SAMPLED = "path-sampled"

    @classmethod
    def parse(cls, value) -> "FormationKind":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidRequestError(f"formation kind must be a string, got {value!r}")
        key = value.strip().lower().replace("_", "-")
        if key == "path":
            return cls.PATH_SAMPLED
        for kind in cls:
            if kind.value == key:
                return kind
        raise InvalidRequestError(f"unknown formation kind: {value!r}")


@dataclass(frozen=True)
class FormationRequest:
    count: int
    kind: FormationKind
    group_size: int = 25
    path: str | None = None

    def __post_init__(self):
        # frozen: coerce through object.__setattr__
        object.__setattr__(self, "kind", FormationKind.parse(self.kind))
        for name in ("count", "group_size"):
            try:
                object.__setattr__(self, name, operator.index(getattr(self, name)))
            except TypeError as e:
                raise InvalidRequestError(f"{name} must be an integer, got {getattr(self, name)!r}") from e

    @classmethod
    def build(cls, count, kind, group_size=25, path=None, max_count: int | None = None):
        """
        Clamp/validate raw controls into a request. Anything that would fault
        later (unknown kind, malformed path) is rejected here.
        """
        kind = FormationKind.parse(kind)
        try:
            count = int(count)
            group_size = int(group_size)
        except (TypeError, ValueError) as e:
            raise InvalidRequestError(f"count and group_size must be integers: {e}") from e

        if count < 1:
            logger.warning(f"Formation count {count} clamped to 1")
            count = 1
        if max_count is not None and count > max_count:
            logger.warning(f"Formation count {count} clamped to capacity {max_count}")
            count = max_count
        if group_size < 1:
            logger.warning(f"Delta group size {group_size} clamped to 1")
            group_size = 1

        if kind is FormationKind.PATH_SAMPLED and path is not None:
            from ..planner.path import parse_path

            parse_path(path)  # raises InvalidRequestError on malformed input
        return cls(count=count, kind=kind, group_size=group_size, path=path)


@dataclass
class TelemetryRecord:
    id: int
    position: np.ndarray  # shape (3,), rounded
    active: bool = True

    def to_dict(self) -> dict:
        x, y, z = (float(v) for v in self.position)
        return {"id": self.id, "position": {"x": x, "y": y, "z": z}, "active": self.active}

    def hud_text(self) -> str:
        lines = [f"Drone ID: {self.id:03d}", "Position"]
        for axis, v in zip("XYZ", self.position):
            sign = "+" if v > 0 else ""
            lines.append(f"{axis}: {sign}{float(v):.2f}")
        return "\n".join(lines)


@dataclass
class TelemetrySnapshot:
    t: float
    frame: int
    records: list[TelemetryRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"t": self.t, "frame": self.frame, "agents": [r.to_dict() for r in self.records]}
