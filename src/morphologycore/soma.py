# src/morphologycore/soma.py
from __future__ import annotations

# General imports (stdlib)
from typing import Any, List, Optional

# General imports (third-party)
import numpy as np

# Local imports
from .structure import TYPENAME_TO_TYPEVALUE, RawSoma


class Soma:
    """
    The cell body of a neuron.

    A simplified Section: an id, a collection of points (a single center, or
    points on the soma boundary) and one radius.

    All coordinates are in the units of the raw morphology (usually µm).
    """

    def __init__(self) -> None:
        self._id: Any = None
        self._typename = "soma"
        self._typevalue = TYPENAME_TO_TYPEVALUE["soma"]
        self._points: List[List[float]] = []
        self._radius: Optional[float] = None

    def __repr__(self) -> str:
        return f"Soma(id={self._id!r}, n_points={len(self._points)}, radius={self._radius!r})"

    def set_id(self, soma_id: Any) -> None:
        self._id = soma_id

    def get_id(self) -> Any:
        return self._id

    def get_typename(self) -> str:
        return self._typename

    def get_typevalue(self) -> int:
        return self._typevalue

    def add_point(self, x: float, y: float, z: float) -> None:
        self._points.append([float(x), float(y), float(z)])

    def get_points(self) -> List[List[float]]:
        return [list(p) for p in self._points]

    def set_radius(self, r: float) -> None:
        self._radius = float(r)

    def get_radius(self) -> Optional[float]:
        return self._radius

    def get_center(self) -> Optional[List[float]]:
        """
        Return the center of the soma.

        Use:
            A single-point soma returns that point. A soma made of several
            points returns their componentwise mean, computed in float64 over
            the whole point array at once.

        Returns:
            Optional[List[float]]: [x, y, z], or None if the soma has no points.
        """
        if not self._points:
            return None
        if len(self._points) == 1:
            return list(self._points[0])

        # Average all points at once (no running sum over the list)
        center = np.asarray(self._points, dtype=np.float64).mean(axis=0)
        return [float(c) for c in center]

    def init_with_raw_section(self, raw_soma: Any) -> Any:
        """
        Build this soma from a raw record.

        Use:
            Accepts `{id, points: [{position, radius}]}` or the single-center
            shape `{id, center: [x, y, z], radius}`. See RawSoma for how the
            radius is chosen.

        Args:
            raw_soma (Any): Raw soma record (usually decoded JSON).

        Returns:
            Any: The soma id.

        Raises:
            MalformedInput: If the record fails validation. The soma is left
                unchanged in that case.
        """
        record = RawSoma.from_dict(raw_soma)

        self._id = record.id
        self._points = [list(p.position) for p in record.points]
        self._radius = record.radius

        return self._id
