# src/morphologycore/morphology.py
from __future__ import annotations

# General imports (stdlib)
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

# General imports (third-party)
import pandas as pd

# Local imports
from .config import Config, make_config
from .exceptions import (
    AlreadyBuilt,
    MalformedInput,
    MorphologyCoreError,
    SelfReferenceViolation,
)
from .section import Section
from .soma import Soma
from .structure import RawSection, raw_section_records

logger = logging.getLogger(__name__)


# Columns of the flat per-point table returned by Morphology.to_dataframe
DATAFRAME_COLUMNS = [
    "section_id", "typename", "typevalue", "parent_id",
    "point_index", "x", "y", "z", "radius",
]


@dataclass
class BuildReport:
    """
    Outcome of Morphology.build_from_raw_morphology.

    Attributes:
        n_records (int): Number of raw section records seen.
        n_sections (int): Number of sections registered.
        has_soma (bool): True if a soma was built.
        issues (List[MorphologyCoreError]): Recoverable problems, in the order
            they were found. Each carries the offending record id when known.
    """
    n_records: int = 0
    n_sections: int = 0
    has_soma: bool = False
    issues: List[MorphologyCoreError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues

    def raise_for_issues(self) -> None:
        """Raise the first recorded issue, if any."""
        if self.issues:
            raise self.issues[0]


class Morphology:
    """
    The data representation of a neuron's anatomy: one optional soma plus the
    sections (axons, dendrites, ...) attached to it.

    A Morphology is usually populated once, from a flat raw description, with
    `build_from_raw_morphology`. It owns its sections; sections only keep
    weak links to each other and to this morphology.
    """

    def __init__(self, cfg: Optional[Config] = None) -> None:
        """
        Initialize an empty morphology.

        Args:
            cfg (Optional[Config]): Build configuration; defaults from make_config().
        """
        self.cfg = cfg or make_config()
        self._id: Any = None
        self._sections: Dict[Any, Section] = {}
        self._soma: Optional[Soma] = None
        self._built = False

        # Named subsets of sections, filled lazily by get_derived_sections
        self._derived_views: Dict[str, List[Section]] = {}

    def __repr__(self) -> str:
        return f"Morphology(id={self._id!r}, n_sections={len(self._sections)}, has_soma={self._soma is not None})"

    def set_id(self, morphology_id: Any) -> None:
        self._id = morphology_id

    def get_id(self) -> Any:
        return self._id

    def is_built(self) -> bool:
        return self._built

    def _reset(self) -> None:
        self._sections = {}
        self._soma = None
        self._derived_views = {}
        self._built = False

    @staticmethod
    def _record_issue(report: BuildReport, issue: MorphologyCoreError, level: int = logging.WARNING) -> None:
        logger.log(level, "record %r: %s", issue.record_id, issue)
        report.issues.append(issue)

    def build_from_raw_morphology(self, raw_morphology: Any) -> BuildReport:
        """
        Build the soma and the section tree from a raw morphology.

        Use:
            1) Build the Soma if the raw data has one (some files do not).
            2) Pass 1: build and register every Section, without any links, so
               a record may reference a section defined later in the list.
            3) Pass 2: resolve each record's parent and children ids through
               the registry and link them.
            Problems are reported per record in the returned BuildReport and
            the build continues with the remaining records.

            On an already-built morphology, cfg.build.rebuild_policy decides:
            'clear' drops all previous state first, 'fail' leaves the
            morphology untouched and reports AlreadyBuilt.

        Args:
            raw_morphology (Any): Mapping shaped like
                `{soma?: {...}, sections: [{id, typename, typevalue, parent,
                children, points}, ...]}`, usually decoded JSON.

        Returns:
            BuildReport: Counts and recoverable issues found during the build.
        """
        report = BuildReport()

        # Apply the rebuild policy before touching any state
        if self._built:
            if self.cfg.build.rebuild_policy == "fail":
                self._record_issue(report, AlreadyBuilt("morphology is already built", self._id))
                return report
            logger.info("Morphology %r: clearing previous build", self._id)
            self._reset()

        # Validate the top level; nothing can be built without a sections list
        try:
            records = raw_section_records(raw_morphology)
        except MalformedInput as exc:
            self._record_issue(report, exc)
            return report
        report.n_records = len(records)

        # Sometimes, we have no data about the soma
        if raw_morphology.get("soma") is not None:
            soma = Soma()
            try:
                soma.init_with_raw_section(raw_morphology["soma"])
                self._soma = soma
            except MalformedInput as exc:
                self._record_issue(report, exc)

        # Pass 1: build and register Section instances, no parents nor children yet
        registered: List[RawSection] = []
        for raw_section in records:
            try:
                record = RawSection.from_dict(raw_section)
            except MalformedInput as exc:
                self._record_issue(report, exc)
                continue

            section = Section(self)
            section_id = section.init_with_record(record)

            if section_id in self._sections:
                self._record_issue(report, MalformedInput(f"duplicate section id {section_id!r}", section_id))
                continue

            self._sections[section_id] = section
            registered.append(record)

        # Pass 2: link parents and children of every registered record
        for record in registered:
            current = self._sections[record.id]

            # Parent id can be 0, only None means "attached to the soma"
            if record.parent is not None:
                self._link_parent(report, current, record.parent)

            for child_id in record.children:
                self._link_child(report, current, child_id)

        self._derived_views = {}
        self._built = True

        report.n_sections = len(self._sections)
        report.has_soma = self._soma is not None
        logger.info(
            "Morphology %r: built %d/%d sections (soma: %s, issues: %d)",
            self._id, report.n_sections, report.n_records, report.has_soma, len(report.issues),
        )
        return report

    def _link_parent(self, report: BuildReport, section: Section, parent_id: Any) -> None:
        parent = self.get_section(parent_id)
        if parent is None:
            self._record_issue(report, MalformedInput(f"unknown parent id {parent_id!r}", section.get_id()))
            return

        if not section.set_parent(parent):
            self._record_issue(
                report, SelfReferenceViolation("section is its own parent", section.get_id()),
                level=logging.DEBUG,
            )
        elif self.cfg.build.link_reciprocal:
            parent.add_child(section)

    def _link_child(self, report: BuildReport, section: Section, child_id: Any) -> None:
        child = self.get_section(child_id)
        if child is None:
            self._record_issue(report, MalformedInput(f"unknown child id {child_id!r}", section.get_id()))
            return

        if not section.add_child(child):
            self._record_issue(
                report, SelfReferenceViolation("section is its own child", section.get_id()),
                level=logging.DEBUG,
            )
        elif self.cfg.build.link_reciprocal:
            child.set_parent(section)

    def get_number_of_sections(self) -> int:
        return len(self._sections)

    def get_section(self, section_id: Any) -> Optional[Section]:
        """
        Get a section given its id.

        Returns:
            Optional[Section]: The section, or None if the id is unknown.
        """
        try:
            return self._sections.get(section_id)
        except TypeError:
            # Unhashable ids cannot be registry keys
            return None

    def get_array_of_sections(self) -> List[Section]:
        """All sections, in registration order."""
        return list(self._sections.values())

    def get_soma(self) -> Optional[Soma]:
        return self._soma

    def get_derived_sections(
        self,
        name: str,
        predicate: Callable[[Section], bool],
        force: bool = False,
    ) -> List[Section]:
        """
        Get a named subset of sections, computing it only when needed.

        Use:
            On first request for `name`, or when `force` is True, scan all
            sections in registration order, keep those for which `predicate`
            returns True and store the list under `name`. Otherwise return
            the stored list as is, even if sections changed since.

        Args:
            name (str): Name of the subset (e.g. 'orphans').
            predicate (Callable[[Section], bool]): Selection test.
            force (bool): Recompute even if a stored list exists.

        Returns:
            List[Section]: The stored list (the same object on repeated calls).
        """
        if force or name not in self._derived_views:
            # Build aside, then publish with a single assignment
            selected = [s for s in self._sections.values() if predicate(s)]
            self._derived_views[name] = selected
        return self._derived_views[name]

    def get_orphan_sections(self, force: bool = False) -> List[Section]:
        """Sections with no parent, i.e. directly tied to the soma."""
        return self.get_derived_sections("orphans", lambda s: s.get_parent() is None, force)

    def get_leaf_sections(self, force: bool = False) -> List[Section]:
        """Sections with no children (terminal branches)."""
        return self.get_derived_sections("leaves", lambda s: not s.get_children(), force)

    def get_sections_of_type(self, typename: str, force: bool = False) -> List[Section]:
        """Sections whose typename equals `typename` (e.g. 'axon')."""
        return self.get_derived_sections(
            f"type:{typename}", lambda s: s.get_typename() == typename, force
        )

    def to_dataframe(self) -> pd.DataFrame:
        """
        Flatten the sections into one row per point.

        Returns:
            pd.DataFrame: Columns DATAFRAME_COLUMNS, rows in registration order
                then point order. parent_id is None for orphan sections.
        """
        rows = []
        for section in self._sections.values():
            parent = section.get_parent()
            parent_id = parent.get_id() if parent is not None else None
            for i, ((x, y, z), radius) in enumerate(zip(section.get_points(), section.get_radiuses())):
                rows.append((
                    section.get_id(), section.get_typename(), section.get_typevalue(),
                    parent_id, i, x, y, z, radius,
                ))
        df = pd.DataFrame(rows, columns=DATAFRAME_COLUMNS)

        # Keep parent ids as given (None for orphans), not coerced to float with NaN
        df["parent_id"] = pd.Series([row[3] for row in rows], dtype=object)
        return df
