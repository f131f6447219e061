"""Line-oriented parser for SBC ini exports.

The format is a sequence of blocks::

    [ SectionName ]
    key = value
    [ \\SectionName ]

    [ TableName ]
    FORMAT Index = Col1, Col2
    TableName 0 = a, b
    [ \\TableName ]

Lines that do not fit any of these shapes are skipped without complaint.
"""

import os
import re
from collections import OrderedDict
from typing import List, Optional

from .errors import NotFoundError
from .model import INDEX_COLUMN, Row, Section, SectionKind

COMMENT_PREFIXES = (';', '#')
FORMAT_PREFIX = 'FORMAT Index = '

_SECTION_OPEN = re.compile(r'^\[\s*([^\\\[\]].*?)\s*\]$')
_SECTION_CLOSE = re.compile(r'^\[\s*\\(.*?)\s*\]$')
_TABLE_ROW = re.compile(r'^(\S+)\s+(\d+)\s*=\s*(.*)$')
_KEY_VALUE = re.compile(r'^([^;#=][^=]*?)\s*=\s*(.*)$')


def _split_list(text: str) -> List[str]:
    if not text.strip():
        return []
    return [item.strip() for item in text.split(',')]


class SectionBuilder:
    def __init__(self, name: str):
        self.name = name
        self.kind = SectionKind.KEY_VALUE
        self.settings: 'OrderedDict[str, str]' = OrderedDict()
        self.columns: List[str] = []
        self.rows: List[Row] = []

    @property
    def is_table(self) -> bool:
        return self.kind is SectionKind.TABLE

    def declare_format(self, column_text: str) -> None:
        self.kind = SectionKind.TABLE
        self.columns = [INDEX_COLUMN] + _split_list(column_text)
        self.rows = []

    def add_row(self, index: str, value_text: str) -> None:
        fields: 'OrderedDict[str, str]' = OrderedDict()
        fields[INDEX_COLUMN] = index
        # Columns without a supplied value stay unset; surplus values are dropped.
        for column, value in zip(self.columns[1:], _split_list(value_text)):
            fields[column] = value
        self.rows.append(Row(index=index, fields=fields))

    def set_value(self, key: str, value: str) -> None:
        self.settings[key] = value

    def build(self) -> Section:
        if self.is_table:
            return Section(
                name=self.name,
                kind=SectionKind.TABLE,
                rows=tuple(self.rows),
                columns=tuple(self.columns),
            )
        return Section(name=self.name, kind=SectionKind.KEY_VALUE, settings=OrderedDict(self.settings))


def parse(text: str) -> List[Section]:
    sections: List[Section] = []
    current: Optional[SectionBuilder] = None

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(COMMENT_PREFIXES):
            continue

        match = _SECTION_CLOSE.match(line)
        if match:
            if current is not None:
                sections.append(current.build())
                current = None
            continue

        match = _SECTION_OPEN.match(line)
        if match:
            name = match.group(1).strip()
            if not name:
                continue
            if current is not None:
                sections.append(current.build())
            current = SectionBuilder(name)
            continue

        if current is None:
            continue

        if line.startswith(FORMAT_PREFIX):
            current.declare_format(line[len(FORMAT_PREFIX):])
            continue

        if current.is_table:
            match = _TABLE_ROW.match(line)
            if match:
                current.add_row(match.group(2), match.group(3))
            continue

        match = _KEY_VALUE.match(line)
        if match:
            current.set_value(match.group(1).strip(), match.group(2).strip())

    # A missing trailing close tag still yields the section.
    if current is not None:
        sections.append(current.build())
    return sections


def read_config(path: str) -> List[Section]:
    if not os.path.isfile(path):
        raise NotFoundError(f"Configuration file '{path}' was not found.")
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as handle:
            text = handle.read()
    except OSError as exc:
        raise NotFoundError(f"Configuration file '{path}' could not be read: {exc}") from exc
    return parse(text)
