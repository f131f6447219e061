import html
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .differences import (
    Category,
    DiffResult,
    Difference,
    RowFieldMismatch,
    ValueMismatch,
)
from .errors import NotFoundError

FORMAT_HTML = 'html'
FORMAT_TEXT = 'text'
FORMATS = (FORMAT_HTML, FORMAT_TEXT)

_STYLE = """
body { font-family: Segoe UI, Arial, sans-serif; margin: 24px; color: #222; }
h1 { font-size: 22px; }
h2 { font-size: 18px; margin-top: 28px; border-bottom: 2px solid #1976D2; padding-bottom: 4px; }
h3 { font-size: 15px; color: #455A64; margin-bottom: 6px; }
table { border-collapse: collapse; margin-bottom: 12px; }
th, td { border: 1px solid #ccc; padding: 4px 8px; text-align: left; vertical-align: top; }
th { background: #eceff1; }
td.unset { color: #999; font-style: italic; }
.summary { background: #f5f5f5; padding: 8px 12px; display: inline-block; }
.equal { color: #388E3C; font-weight: bold; }
"""


def format_for_path(path: str) -> str:
    if Path(path).suffix.lower() in ('.txt', '.text', '.log'):
        return FORMAT_TEXT
    return FORMAT_HTML


def _summary_line(result: DiffResult) -> str:
    return f"Found {result.total} differences in {len(result)} sections."


def render_text(result: DiffResult) -> str:
    title = f"Configuration differences: {result.name_a} vs {result.name_b}"
    lines = [title, '=' * len(title), '']
    if result.is_empty:
        lines.append(f"No differences found between {result.name_a} and {result.name_b}.")
        return '\n'.join(lines) + '\n'
    for section in result:
        lines.append(f"[{section}]")
        for group, diffs in result.grouped(section):
            lines.append(f"  {group}")
            for difference in diffs:
                lines.append(f"    - {difference.describe(result.name_a, result.name_b)}")
        lines.append('')
    lines.append(_summary_line(result))
    return '\n'.join(lines) + '\n'


def _cell(value: Optional[str]) -> str:
    if value is None:
        return '<td class="unset">not set</td>'
    return f"<td>{html.escape(value)}</td>"


def _render_value_table(result: DiffResult, diffs: List[ValueMismatch]) -> str:
    rows = []
    for difference in diffs:
        rows.append(f"<tr><td>{html.escape(difference.key)}</td>{_cell(difference.value_a)}{_cell(difference.value_b)}</tr>")
    return (
        '<table><tr><th>Parameter</th>'
        f"<th>{html.escape(result.name_a)}</th><th>{html.escape(result.name_b)}</th></tr>"
        + ''.join(rows)
        + '</table>'
    )


def _render_row_table(result: DiffResult, diffs: List[RowFieldMismatch]) -> str:
    rows = []
    for difference in diffs:
        label = f"Row {difference.index_a}"
        if difference.index_b != difference.index_a:
            label += f" / {difference.index_b}"
        if difference.display_value:
            label += f" ({difference.display_value})"
        span = len(difference.fields)
        for position, item in enumerate(difference.fields):
            row = '<tr>'
            if position == 0:
                row += f'<td rowspan="{span}">{html.escape(label)}</td>'
            row += f"<td>{html.escape(item.column)}</td>{_cell(item.value_a)}{_cell(item.value_b)}</tr>"
            rows.append(row)
    return (
        '<table><tr><th>Row</th><th>Property</th>'
        f"<th>{html.escape(result.name_a)}</th><th>{html.escape(result.name_b)}</th></tr>"
        + ''.join(rows)
        + '</table>'
    )


def _render_list(result: DiffResult, diffs: List[Difference]) -> str:
    items = ''.join(
        f"<li>{html.escape(difference.describe(result.name_a, result.name_b))}</li>" for difference in diffs
    )
    return f"<ul>{items}</ul>"


def render_html(result: DiffResult, generated: Optional[datetime] = None) -> str:
    generated = generated or datetime.now()
    name_a = html.escape(result.name_a)
    name_b = html.escape(result.name_b)
    body: List[str] = [f"<h1>Configuration differences: {name_a} vs {name_b}</h1>"]
    body.append(f"<p>Generated {generated:%Y-%m-%d %H:%M:%S}</p>")
    if result.is_empty:
        body.append(f'<p class="equal">No differences found between {name_a} and {name_b}.</p>')
    else:
        body.append(f'<p class="summary">{html.escape(_summary_line(result))}</p>')
        for section in result:
            body.append(f"<h2>{html.escape(section)}</h2>")
            for group, diffs in result.grouped(section):
                body.append(f"<h3>{html.escape(group)}</h3>")
                category = diffs[0].category
                if category is Category.VALUE_MISMATCH:
                    body.append(_render_value_table(result, diffs))
                elif category is Category.ROW_FIELD_MISMATCH:
                    body.append(_render_row_table(result, diffs))
                else:
                    body.append(_render_list(result, diffs))
    return (
        '<!DOCTYPE html>\n<html>\n<head>\n<meta charset="utf-8">\n'
        f"<title>{name_a} vs {name_b}</title>\n<style>{_STYLE}</style>\n</head>\n<body>\n"
        + '\n'.join(body)
        + '\n</body>\n</html>\n'
    )


def render(result: DiffResult, fmt: str) -> str:
    if fmt == FORMAT_TEXT:
        return render_text(result)
    if fmt == FORMAT_HTML:
        return render_html(result)
    raise RuntimeError(f"Unsupported report format '{fmt}'.")


def write_report(result: DiffResult, output_path: str, fmt: Optional[str] = None) -> Path:
    path = Path(output_path)
    directory = os.path.dirname(os.path.abspath(output_path))
    if not os.path.isdir(directory):
        raise NotFoundError(f"Output directory '{directory}' does not exist.")
    content = render(result, fmt or format_for_path(output_path))
    path.write_text(content, encoding='utf-8')
    return path
