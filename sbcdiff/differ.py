from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from .differences import (
    GENERAL_SECTION,
    SIDE_A,
    SIDE_B,
    DiffResult,
    Difference,
    DisplayColumnMismatch,
    FieldMismatch,
    KeyOnlyInA,
    KeyOnlyInB,
    RowCountMismatch,
    RowFieldMismatch,
    RowOnlyInA,
    RowOnlyInB,
    SectionKindMismatch,
    SectionOnlyInA,
    SectionOnlyInB,
    TableEmptyVsNonEmpty,
    ValueMismatch,
)
from .model import Row, Section

DEFAULT_NAME_A = 'SBC1'
DEFAULT_NAME_B = 'SBC2'


def _sections_by_name(sections: Sequence[Section]) -> 'OrderedDict[str, Section]':
    # The first occurrence of a repeated section name is the one compared.
    lookup: 'OrderedDict[str, Section]' = OrderedDict()
    for section in sections:
        lookup.setdefault(section.name, section)
    return lookup


def _rows_by_index(section: Section) -> 'OrderedDict[str, Row]':
    # Repeated indices: the last row wins, at the position of the first one.
    lookup: 'OrderedDict[str, Row]' = OrderedDict()
    for row in section.rows:
        lookup[row.index] = row
    return lookup


def _compare_settings(section_a: Section, section_b: Section) -> List[Difference]:
    name = section_a.name
    settings_a = section_a.settings
    settings_b = section_b.settings
    diffs: List[Difference] = []
    for key, value in settings_a.items():
        if key not in settings_b:
            diffs.append(KeyOnlyInA(name, key, value))
    for key, value in settings_b.items():
        if key not in settings_a:
            diffs.append(KeyOnlyInB(name, key, value))
    for key, value_a in settings_a.items():
        if key not in settings_b:
            continue
        value_b = settings_b[key]
        if value_a != value_b:
            diffs.append(ValueMismatch(name, key, value_a, value_b))
    return diffs


def _compare_rows(section_a: Section, section_b: Section, row_a: Row, row_b: Row) -> Optional[RowFieldMismatch]:
    seen = set()
    mismatches: List[FieldMismatch] = []
    for column in section_a.data_columns + section_b.data_columns:
        if column in seen:
            continue
        seen.add(column)
        value_a = row_a.get(column)
        value_b = row_b.get(column)
        if value_a != value_b:
            mismatches.append(FieldMismatch(column, value_a, value_b))
    if not mismatches:
        return None
    display_column = section_a.display_column
    return RowFieldMismatch(
        section_a.name,
        row_a.index,
        row_b.index,
        display_column,
        row_a.display_value(display_column),
        tuple(mismatches),
    )


def _match_rows_by_position(section_a: Section, section_b: Section) -> List[Difference]:
    diffs: List[Difference] = []
    for row_a, row_b in zip(section_a.rows, section_b.rows):
        mismatch = _compare_rows(section_a, section_b, row_a, row_b)
        if mismatch is not None:
            diffs.append(mismatch)
    return diffs


def _match_rows_by_index(section_a: Section, section_b: Section) -> List[Difference]:
    name = section_a.name
    rows_a = _rows_by_index(section_a)
    rows_b = _rows_by_index(section_b)
    column_a = section_a.display_column
    column_b = section_b.display_column
    diffs: List[Difference] = []
    for index, row in rows_a.items():
        if index not in rows_b:
            diffs.append(RowOnlyInA(name, index, column_a, row.display_value(column_a)))
    for index, row in rows_b.items():
        if index not in rows_a:
            diffs.append(RowOnlyInB(name, index, column_b, row.display_value(column_b)))
    for index, row_a in rows_a.items():
        if index not in rows_b:
            continue
        mismatch = _compare_rows(section_a, section_b, row_a, rows_b[index])
        if mismatch is not None:
            diffs.append(mismatch)
    return diffs


def _compare_tables(section_a: Section, section_b: Section, match_by_index: bool) -> List[Difference]:
    name = section_a.name
    count_a = section_a.row_count
    count_b = section_b.row_count
    if count_a == 0 and count_b == 0:
        return []
    if count_a == 0:
        return [TableEmptyVsNonEmpty(name, SIDE_A, count_b)]
    if count_b == 0:
        return [TableEmptyVsNonEmpty(name, SIDE_B, count_a)]

    diffs: List[Difference] = []
    if count_a != count_b:
        diffs.append(RowCountMismatch(name, count_a, count_b))
    if section_a.display_column != section_b.display_column:
        diffs.append(DisplayColumnMismatch(name, section_a.display_column, section_b.display_column))

    # Equal-sized tables are paired row by row regardless of their Index
    # tokens; only tables of different size are reconciled by Index.
    if count_a != count_b or match_by_index:
        diffs.extend(_match_rows_by_index(section_a, section_b))
    else:
        diffs.extend(_match_rows_by_position(section_a, section_b))
    return diffs


def compare_sections(section_a: Section, section_b: Section, match_by_index: bool = False) -> List[Difference]:
    if section_a.kind is not section_b.kind:
        return [SectionKindMismatch(section_a.name, section_a.kind.value, section_b.kind.value)]
    if section_a.is_table:
        return _compare_tables(section_a, section_b, match_by_index)
    return _compare_settings(section_a, section_b)


def diff(
    sections_a: Sequence[Section],
    sections_b: Sequence[Section],
    name_a: str = DEFAULT_NAME_A,
    name_b: str = DEFAULT_NAME_B,
    match_by_index: bool = False,
) -> DiffResult:
    lookup_a = _sections_by_name(sections_a)
    lookup_b = _sections_by_name(sections_b)

    buckets: Dict[str, List[Difference]] = OrderedDict()
    general = buckets.setdefault(GENERAL_SECTION, [])
    for name in lookup_a:
        if name not in lookup_b:
            general.append(SectionOnlyInA(GENERAL_SECTION, name))
    for name in lookup_b:
        if name not in lookup_a:
            general.append(SectionOnlyInB(GENERAL_SECTION, name))

    for name, section_a in lookup_a.items():
        section_b = lookup_b.get(name)
        if section_b is None:
            continue
        buckets.setdefault(name, []).extend(compare_sections(section_a, section_b, match_by_index))

    return DiffResult(name_a, name_b, buckets)
