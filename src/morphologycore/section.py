# src/morphologycore/section.py
from __future__ import annotations

# General imports (stdlib)
import logging
import weakref
from typing import TYPE_CHECKING, Any, List, Optional

# Local imports
from .structure import (
    DEFAULT_TYPENAME,
    TYPENAME_TO_TYPEVALUE,
    TYPEVALUE_TO_TYPENAME,
    RawSection,
    is_known_typevalue,
)

if TYPE_CHECKING:
    from .morphology import Morphology

logger = logging.getLogger(__name__)


class Section:
    """
    One branch of a neuron (axon, dendrite, ...) as a polyline of 3D points with
    a radius per point, plus its relations to other sections.

    Parent, children and hosting morphology are held through weak references:
    the Morphology registry owns sections, links only point at them.
    """

    def __init__(self, morphology: Optional["Morphology"] = None) -> None:
        """
        Initialize an empty, unlinked section.

        Args:
            morphology (Optional[Morphology]): Morphology hosting this section,
                so a section can be traced back to its neuron.
        """
        self._id: Any = None
        self._typename: str = DEFAULT_TYPENAME
        self._typevalue: int = TYPENAME_TO_TYPEVALUE[DEFAULT_TYPENAME]
        self._points: List[List[float]] = []
        self._radiuses: List[float] = []
        self._parent: Optional[weakref.ref] = None
        self._children: List[weakref.ref] = []
        self._morphology = weakref.ref(morphology) if morphology is not None else None

    def __repr__(self) -> str:
        return f"Section(id={self._id!r}, typename={self._typename!r}, n_points={len(self._points)})"

    def set_id(self, section_id: Any) -> None:
        """
        Define the id of this section.

        The hosting Morphology is not re-keyed; keeping its registry consistent
        is up to the caller.
        """
        self._id = section_id

    def get_id(self) -> Any:
        return self._id

    def get_morphology(self) -> Optional["Morphology"]:
        return self._morphology() if self._morphology is not None else None

    def set_typename(self, typename: str) -> bool:
        """
        Define the SWC typename and, through the type table, the typevalue.

        Returns:
            bool: True if updated; False if typename is not in the table, in
                which case both fields are left unchanged.
        """
        if not isinstance(typename, str) or typename not in TYPENAME_TO_TYPEVALUE:
            logger.warning(
                "Section %r: typename must be one of %s, got %r",
                self._id, " ".join(TYPENAME_TO_TYPEVALUE), typename,
            )
            return False
        self._typename = typename
        self._typevalue = TYPENAME_TO_TYPEVALUE[typename]
        return True

    def get_typename(self) -> str:
        return self._typename

    def set_typevalue(self, typevalue: int) -> bool:
        """
        Define the SWC typevalue and, through the type table, the typename.

        Returns:
            bool: True if updated; False if typevalue is not in the table, in
                which case both fields are left unchanged.
        """
        if not is_known_typevalue(typevalue):
            logger.warning(
                "Section %r: typevalue must be one of %s, got %r",
                self._id, sorted(TYPEVALUE_TO_TYPENAME), typevalue,
            )
            return False
        self._typevalue = int(typevalue)
        self._typename = TYPEVALUE_TO_TYPENAME[self._typevalue]
        return True

    def get_typevalue(self) -> int:
        return self._typevalue

    def add_point(self, x: float, y: float, z: float, r: float = 1) -> None:
        """Append a point and its radius."""
        point = [float(x), float(y), float(z)]
        radius = float(r)
        self._points.append(point)
        self._radiuses.append(radius)

    def get_points(self) -> List[List[float]]:
        return [list(p) for p in self._points]

    def get_radiuses(self) -> List[float]:
        return list(self._radiuses)

    def get_number_of_points(self) -> int:
        return len(self._points)

    def init_with_raw_section(self, raw_section: Any) -> Any:
        """
        Build this section from a raw record.

        Use:
            Validate `{id, typename, typevalue, points: [{position, radius}]}`
            and copy the id, the type pair and the points into this section.
            Parent and children are not touched; the Morphology links them
            once every section is registered.

        Args:
            raw_section (Any): Raw record (usually decoded JSON).

        Returns:
            Any: The section id, to be used as registry key.

        Raises:
            MalformedInput: If the record fails validation. The section is left
                unchanged in that case.
        """
        return self.init_with_record(RawSection.from_dict(raw_section))

    def init_with_record(self, record: RawSection) -> Any:
        """Copy an already validated RawSection into this section and return its id."""
        self._id = record.id
        self._typename = record.typename
        self._typevalue = record.typevalue
        self._points = [list(p.position) for p in record.points]
        self._radiuses = [p.radius for p in record.points]

        return self._id

    def set_parent(self, section: Optional["Section"]) -> bool:
        """
        Define the parent of this section.

        The only check performed is that a section is not its own parent.

        Returns:
            bool: True if the parent was set, False if rejected (state unchanged).
        """
        if section is None:
            logger.warning("Section %r: parent must be a section, got None", self._id)
            return False
        if section.get_id() == self._id:
            logger.warning("Section %r: a section cannot be the parent of itself", self._id)
            return False

        self._parent = weakref.ref(section)
        return True

    def get_parent(self) -> Optional["Section"]:
        return self._parent() if self._parent is not None else None

    def add_child(self, section: Optional["Section"]) -> bool:
        """
        Make a given section a child of this one.

        Returns:
            bool: True if added or already a child, False if the candidate is
                None or has this section's id.
        """
        if section is None:
            logger.warning("Section %r: child must be a section, got None", self._id)
            return False
        if section.get_id() == self._id:
            logger.warning("Section %r: a section cannot be the child of itself", self._id)
            return False

        if self.has_child(section):
            logger.debug("Section %r: %r is already a child", self._id, section.get_id())
        else:
            self._children.append(weakref.ref(section))
        return True

    def has_child(self, section: "Section") -> bool:
        candidate_id = section.get_id()
        return any(child.get_id() == candidate_id for child in self.get_children())

    def get_children(self) -> List["Section"]:
        """Live child sections, in insertion order."""
        children = (ref() for ref in self._children)
        return [child for child in children if child is not None]
