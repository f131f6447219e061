from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

INDEX_COLUMN = 'Index'


class SectionKind(Enum):
    KEY_VALUE = 'KeyValue'
    TABLE = 'Table'


def _read_only(values: Mapping[str, str]) -> Mapping[str, str]:
    # Copy first so the parser's working dict cannot leak into the model.
    return MappingProxyType(OrderedDict(values))


@dataclass(frozen=True)
class Row:
    index: str
    fields: Mapping[str, str] = field(default_factory=OrderedDict)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'fields', _read_only(self.fields))

    def get(self, column: str) -> Optional[str]:
        return self.fields.get(column)

    def display_value(self, column: Optional[str]) -> str:
        if column is None:
            return ''
        return self.fields.get(column) or ''


@dataclass(frozen=True)
class Section:
    name: str
    kind: SectionKind = SectionKind.KEY_VALUE
    settings: Mapping[str, str] = field(default_factory=OrderedDict)
    rows: Tuple[Row, ...] = ()
    columns: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, 'settings', _read_only(self.settings))
        object.__setattr__(self, 'rows', tuple(self.rows))
        object.__setattr__(self, 'columns', tuple(self.columns))

    @property
    def is_table(self) -> bool:
        return self.kind is SectionKind.TABLE

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def data_columns(self) -> Tuple[str, ...]:
        return tuple(col for col in self.columns if col != INDEX_COLUMN)

    @property
    def display_column(self) -> Optional[str]:
        # First declared column after Index, used to label rows in messages.
        if len(self.columns) < 2:
            return None
        return self.columns[1]

    def duplicate_indices(self) -> List[str]:
        seen = set()
        duplicates: List[str] = []
        for row in self.rows:
            if row.index in seen and row.index not in duplicates:
                duplicates.append(row.index)
            seen.add(row.index)
        return duplicates


def duplicate_section_names(sections: List[Section]) -> List[str]:
    seen = set()
    duplicates: List[str] = []
    for section in sections:
        if section.name in seen and section.name not in duplicates:
            duplicates.append(section.name)
        seen.add(section.name)
    return duplicates
