from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import ClassVar, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

GENERAL_SECTION = 'General'
SIDE_A = 'A'
SIDE_B = 'B'


class Category(Enum):
    SECTION_ONLY_IN_A = 'SectionOnlyInA'
    SECTION_ONLY_IN_B = 'SectionOnlyInB'
    KEY_ONLY_IN_A = 'KeyOnlyInA'
    KEY_ONLY_IN_B = 'KeyOnlyInB'
    VALUE_MISMATCH = 'ValueMismatch'
    TABLE_EMPTY_VS_NON_EMPTY = 'TableEmptyVsNonEmpty'
    ROW_COUNT_MISMATCH = 'RowCountMismatch'
    DISPLAY_COLUMN_MISMATCH = 'DisplayColumnMismatch'
    ROW_ONLY_IN_A = 'RowOnlyInA'
    ROW_ONLY_IN_B = 'RowOnlyInB'
    ROW_FIELD_MISMATCH = 'RowFieldMismatch'
    SECTION_KIND_MISMATCH = 'SectionKindMismatch'


# Fixed order in which reports list the categories of one section.
PRESENTATION_ORDER: Tuple[Tuple[str, Tuple[Category, ...]], ...] = (
    ('Section existence', (Category.SECTION_ONLY_IN_A, Category.SECTION_ONLY_IN_B)),
    ('Missing parameters', (Category.KEY_ONLY_IN_A, Category.KEY_ONLY_IN_B)),
    ('Value mismatches', (Category.VALUE_MISMATCH,)),
    ('Row count mismatches', (Category.ROW_COUNT_MISMATCH,)),
    ('Empty table mismatches', (Category.TABLE_EMPTY_VS_NON_EMPTY,)),
    ('Missing rows', (Category.ROW_ONLY_IN_A, Category.ROW_ONLY_IN_B)),
    ('Row field mismatches', (Category.ROW_FIELD_MISMATCH,)),
    ('Other differences', (Category.DISPLAY_COLUMN_MISMATCH, Category.SECTION_KIND_MISMATCH)),
)


def _show(value: Optional[str]) -> str:
    if value is None:
        return '(not set)'
    return f"'{value}'"


def _rows(count: int) -> str:
    return f"{count} row" if count == 1 else f"{count} rows"


def _row_label(index: str, display_column: Optional[str], display_value: str) -> str:
    if display_column and display_value:
        return f"row {index} ({display_column}={display_value})"
    return f"row {index}"


@dataclass(frozen=True)
class Difference(ABC):
    section: str

    category: ClassVar[Category]

    @abstractmethod
    def describe(self, name_a: str, name_b: str) -> str:
        ...


@dataclass(frozen=True)
class SectionOnlyInA(Difference):
    name: str

    category = Category.SECTION_ONLY_IN_A

    def describe(self, name_a: str, name_b: str) -> str:
        return f"Section '{self.name}' exists only in {name_a}"


@dataclass(frozen=True)
class SectionOnlyInB(Difference):
    name: str

    category = Category.SECTION_ONLY_IN_B

    def describe(self, name_a: str, name_b: str) -> str:
        return f"Section '{self.name}' exists only in {name_b}"


@dataclass(frozen=True)
class KeyOnlyInA(Difference):
    key: str
    value: str

    category = Category.KEY_ONLY_IN_A

    def describe(self, name_a: str, name_b: str) -> str:
        return f"Parameter '{self.key}' exists only in {name_a} (value '{self.value}')"


@dataclass(frozen=True)
class KeyOnlyInB(Difference):
    key: str
    value: str

    category = Category.KEY_ONLY_IN_B

    def describe(self, name_a: str, name_b: str) -> str:
        return f"Parameter '{self.key}' exists only in {name_b} (value '{self.value}')"


@dataclass(frozen=True)
class ValueMismatch(Difference):
    key: str
    value_a: str
    value_b: str

    category = Category.VALUE_MISMATCH

    def describe(self, name_a: str, name_b: str) -> str:
        return f"Parameter '{self.key}': {name_a}='{self.value_a}', {name_b}='{self.value_b}'"


@dataclass(frozen=True)
class TableEmptyVsNonEmpty(Difference):
    empty_side: str
    other_count: int

    category = Category.TABLE_EMPTY_VS_NON_EMPTY

    def describe(self, name_a: str, name_b: str) -> str:
        empty, other = (name_a, name_b) if self.empty_side == SIDE_A else (name_b, name_a)
        return f"Table is empty in {empty} but has {_rows(self.other_count)} in {other}"


@dataclass(frozen=True)
class RowCountMismatch(Difference):
    count_a: int
    count_b: int

    category = Category.ROW_COUNT_MISMATCH

    def describe(self, name_a: str, name_b: str) -> str:
        return f"Row count differs: {name_a} has {_rows(self.count_a)}, {name_b} has {_rows(self.count_b)}"


@dataclass(frozen=True)
class DisplayColumnMismatch(Difference):
    column_a: Optional[str]
    column_b: Optional[str]

    category = Category.DISPLAY_COLUMN_MISMATCH

    def describe(self, name_a: str, name_b: str) -> str:
        return (
            f"First table column differs: {name_a} uses {_show(self.column_a)}, "
            f"{name_b} uses {_show(self.column_b)}"
        )


@dataclass(frozen=True)
class RowOnlyInA(Difference):
    index: str
    display_column: Optional[str]
    display_value: str

    category = Category.ROW_ONLY_IN_A

    def describe(self, name_a: str, name_b: str) -> str:
        label = _row_label(self.index, self.display_column, self.display_value)
        return f"Table {label} exists only in {name_a}"


@dataclass(frozen=True)
class RowOnlyInB(Difference):
    index: str
    display_column: Optional[str]
    display_value: str

    category = Category.ROW_ONLY_IN_B

    def describe(self, name_a: str, name_b: str) -> str:
        label = _row_label(self.index, self.display_column, self.display_value)
        return f"Table {label} exists only in {name_b}"


@dataclass(frozen=True)
class FieldMismatch:
    column: str
    value_a: Optional[str]
    value_b: Optional[str]


@dataclass(frozen=True)
class RowFieldMismatch(Difference):
    index_a: str
    index_b: str
    display_column: Optional[str]
    display_value: str
    fields: Tuple[FieldMismatch, ...]

    category = Category.ROW_FIELD_MISMATCH

    @property
    def index(self) -> str:
        return self.index_a

    def describe(self, name_a: str, name_b: str) -> str:
        label = _row_label(self.index_a, self.display_column, self.display_value)
        if self.index_b != self.index_a:
            label += f" (row {self.index_b} in {name_b})"
        parts = [
            f"{item.column}: {name_a}={_show(item.value_a)}, {name_b}={_show(item.value_b)}"
            for item in self.fields
        ]
        return f"Table {label} differs in {len(self.fields)} field(s): " + '; '.join(parts)


@dataclass(frozen=True)
class SectionKindMismatch(Difference):
    kind_a: str
    kind_b: str

    category = Category.SECTION_KIND_MISMATCH

    def describe(self, name_a: str, name_b: str) -> str:
        return f"Section layout differs: {self.kind_a} in {name_a}, {self.kind_b} in {name_b}"


class DiffResult:
    """Read-only, ordered mapping of section name to the differences found in it.

    Sections without differences are never stored, so an empty result means the
    two configurations are equal as far as the parser can tell.
    """

    def __init__(self, name_a: str, name_b: str, sections: Mapping[str, Sequence[Difference]]):
        self.name_a = name_a
        self.name_b = name_b
        self._sections: 'OrderedDict[str, Tuple[Difference, ...]]' = OrderedDict(
            (name, tuple(diffs)) for name, diffs in sections.items() if diffs
        )

    @property
    def sections(self) -> Mapping[str, Tuple[Difference, ...]]:
        return MappingProxyType(self._sections)

    def __getitem__(self, section: str) -> Tuple[Difference, ...]:
        return self._sections[section]

    def __contains__(self, section: object) -> bool:
        return section in self._sections

    def __iter__(self) -> Iterator[str]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    def __repr__(self) -> str:
        return f"DiffResult({self.name_a!r}, {self.name_b!r}, sections={list(self._sections)!r})"

    @property
    def is_empty(self) -> bool:
        return not self._sections

    @property
    def total(self) -> int:
        return sum(len(diffs) for diffs in self._sections.values())

    def differences(self) -> Iterator[Difference]:
        for diffs in self._sections.values():
            yield from diffs

    def categories(self) -> Dict[Category, int]:
        counts: Dict[Category, int] = OrderedDict()
        for difference in self.differences():
            counts[difference.category] = counts.get(difference.category, 0) + 1
        return counts

    def grouped(self, section: str) -> List[Tuple[str, List[Difference]]]:
        diffs = self._sections.get(section, ())
        groups: List[Tuple[str, List[Difference]]] = []
        for title, categories in PRESENTATION_ORDER:
            members = [difference for difference in diffs if difference.category in categories]
            if members:
                groups.append((title, members))
        return groups
