# src/morphologycore/structure.py
from __future__ import annotations

# General imports (stdlib)
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

# General imports (third-party)
import numpy as np

# Local imports
from .exceptions import MalformedInput


# Standardized SWC section types (www.neuromorpho.org)
TYPEVALUE_TO_TYPENAME: Dict[int, str] = {
    0: "undefined",
    1: "soma",
    2: "axon",
    3: "basal_dendrite",
    4: "apical_dendrite",
    5: "custom",
}
TYPENAME_TO_TYPEVALUE: Dict[str, int] = {name: value for value, name in TYPEVALUE_TO_TYPENAME.items()}

DEFAULT_TYPENAME = "undefined"


def is_known_typevalue(value: Any) -> bool:
    """True if value is a whole number in the SWC type table (bools excluded, 2.0 accepted)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (float, np.floating)):
        return float(value).is_integer() and int(value) in TYPEVALUE_TO_TYPENAME
    return isinstance(value, (int, np.integer)) and int(value) in TYPEVALUE_TO_TYPENAME


@dataclass(frozen=True)
class RawPoint:
    """
    One polyline sample: a 3D position with the radius at that position.

    Attributes:
        position (Tuple[float, float, float]): (x, y, z) coordinates.
        radius (float): Radius at this position.
    """
    position: Tuple[float, float, float]
    radius: float

    @classmethod
    def from_dict(cls, raw: Any, record_id: Any = None) -> "RawPoint":
        """
        Validate a `{position: [x, y, z], radius}` record.

        Raises:
            MalformedInput: If the record is not a mapping, lacks 'position' or
                'radius', or if they are not numeric of the right shape.
        """
        if not isinstance(raw, Mapping):
            raise MalformedInput(f"point must be a mapping, got {type(raw).__name__}", record_id)

        missing = [k for k in ("position", "radius") if k not in raw]
        if missing:
            raise MalformedInput(f"point is missing {missing}", record_id)

        # Coerce coordinates to a float vector and check its shape
        try:
            position = np.asarray(raw["position"], dtype=float)
        except (TypeError, ValueError) as exc:
            raise MalformedInput(f"point position is not numeric: {raw['position']!r}", record_id) from exc
        if position.shape != (3,):
            raise MalformedInput(f"point position must have 3 coordinates, got shape {position.shape}", record_id)

        try:
            radius = float(raw["radius"])
        except (TypeError, ValueError) as exc:
            raise MalformedInput(f"point radius is not numeric: {raw['radius']!r}", record_id) from exc

        return cls(position=tuple(float(c) for c in position), radius=radius)


def _raw_points(raw: Mapping, record_id: Any) -> Tuple[RawPoint, ...]:
    """Validate the 'points' list of a section or soma record."""
    points = raw["points"]
    if isinstance(points, (str, bytes)) or not isinstance(points, Sequence):
        raise MalformedInput(f"'points' must be a list, got {type(points).__name__}", record_id)
    return tuple(RawPoint.from_dict(p, record_id) for p in points)


def resolve_type(typename: Optional[str], typevalue: Optional[int], record_id: Any = None) -> Tuple[str, int]:
    """
    Resolve a (typename, typevalue) pair through the SWC type table.

    Use:
        Either field may be missing; the other one decides. If both are
        missing the section is 'undefined'. If both are given they must
        denote the same category.

    Returns:
        Tuple[str, int]: The consistent (typename, typevalue) pair.

    Raises:
        MalformedInput: If a given field is outside the enumeration, or if
            both are given and disagree.
    """
    if typename is not None and (not isinstance(typename, str) or typename not in TYPENAME_TO_TYPEVALUE):
        raise MalformedInput(f"unknown typename {typename!r}", record_id)
    if typevalue is not None and not is_known_typevalue(typevalue):
        raise MalformedInput(f"unknown typevalue {typevalue!r}", record_id)

    if typename is None and typevalue is None:
        typename = DEFAULT_TYPENAME
    if typename is None:
        typename = TYPEVALUE_TO_TYPENAME[int(typevalue)]
    if typevalue is None:
        typevalue = TYPENAME_TO_TYPEVALUE[typename]

    if TYPENAME_TO_TYPEVALUE[typename] != typevalue:
        raise MalformedInput(f"typename {typename!r} does not match typevalue {typevalue!r}", record_id)

    return typename, int(typevalue)


@dataclass(frozen=True)
class RawSection:
    """
    Validated raw section record.

    Attributes:
        id: Section identifier (any hashable, 0 is valid).
        typename (str): SWC type name.
        typevalue (int): SWC type value matching typename.
        parent: Parent section id, or None for sections attached to the soma.
        children (Tuple): Child section ids.
        points (Tuple[RawPoint, ...]): Polyline samples.
    """
    id: Any
    typename: str
    typevalue: int
    parent: Any
    children: Tuple[Any, ...]
    points: Tuple[RawPoint, ...]

    @classmethod
    def from_dict(cls, raw: Any) -> "RawSection":
        """
        Validate a raw section record.

        Raises:
            MalformedInput: If the record is not a mapping, has no usable 'id',
                no 'points', a malformed point, an invalid type pair, or a
                'children' field that is not a list.
        """
        if not isinstance(raw, Mapping):
            raise MalformedInput(f"section record must be a mapping, got {type(raw).__name__}")

        record_id = raw.get("id")
        if record_id is None:
            raise MalformedInput("section record has no 'id'")
        try:
            hash(record_id)
        except TypeError as exc:
            raise MalformedInput(f"section id is not hashable: {record_id!r}") from exc

        if "points" not in raw:
            raise MalformedInput("section record has no 'points'", record_id)
        points = _raw_points(raw, record_id)

        typename, typevalue = resolve_type(raw.get("typename"), raw.get("typevalue"), record_id)

        children = raw.get("children")
        if children is None:
            children = ()
        elif isinstance(children, (str, bytes)) or not isinstance(children, Sequence):
            raise MalformedInput(f"'children' must be a list, got {type(children).__name__}", record_id)

        return cls(
            id=record_id,
            typename=typename,
            typevalue=typevalue,
            parent=raw.get("parent"),
            children=tuple(children),
            points=points,
        )


@dataclass(frozen=True)
class RawSoma:
    """
    Validated raw soma record.

    Accepts the point-collection shape `{id, points: [...]}` and the
    single-center shape `{id, center: [x, y, z], radius}`.
    """
    id: Any
    points: Tuple[RawPoint, ...]
    radius: Optional[float]

    @classmethod
    def from_dict(cls, raw: Any) -> "RawSoma":
        """
        Validate a raw soma record.

        Use:
            The radius is the explicit 'radius' field when present, otherwise
            the mean of the point radii, otherwise None.

        Raises:
            MalformedInput: If the record is not a mapping, has neither
                'points' nor 'center', or contains malformed values.
        """
        if not isinstance(raw, Mapping):
            raise MalformedInput(f"soma record must be a mapping, got {type(raw).__name__}")
        record_id = raw.get("id")

        radius: Optional[float] = None
        if raw.get("radius") is not None:
            try:
                radius = float(raw["radius"])
            except (TypeError, ValueError) as exc:
                raise MalformedInput(f"soma radius is not numeric: {raw['radius']!r}", record_id) from exc

        if "points" in raw:
            points = _raw_points(raw, record_id)
            if radius is None and points:
                radius = float(np.mean([p.radius for p in points]))
        elif "center" in raw:
            # A missing center radius stays None on the soma, the point itself carries 0
            center = {"position": raw["center"], "radius": radius if radius is not None else 0.0}
            points = (RawPoint.from_dict(center, record_id),)
        else:
            raise MalformedInput("soma record has neither 'points' nor 'center'", record_id)

        return cls(id=record_id, points=points, radius=radius)


def raw_section_records(raw_morphology: Any) -> List[Any]:
    """
    Return the top-level 'sections' list of a raw morphology.

    Raises:
        MalformedInput: If the raw morphology is not a mapping or its
            'sections' field is missing or not a list.
    """
    if not isinstance(raw_morphology, Mapping):
        raise MalformedInput(f"raw morphology must be a mapping, got {type(raw_morphology).__name__}")
    if "sections" not in raw_morphology:
        raise MalformedInput("raw morphology has no 'sections'")

    sections = raw_morphology["sections"]
    if isinstance(sections, (str, bytes)) or not isinstance(sections, Sequence):
        raise MalformedInput(f"'sections' must be a list, got {type(sections).__name__}")
    return list(sections)
