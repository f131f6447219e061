from datetime import datetime

import pytest

from sbcdiff.differ import diff
from sbcdiff.errors import NotFoundError
from sbcdiff.parser import parse
from sbcdiff.report import FORMAT_HTML, FORMAT_TEXT, format_for_path, render_html, render_text, write_report

CONFIG_A = r"""
[SYSTEM Params]
Banner = <primary>
Timeout = 30
[\SYSTEM Params]

[IPGroup]
FORMAT Index = Name, ProxySet
IPGroup 0 = Carrier, 0
IPGroup 1 = Teams, 1
[\IPGroup]

[Legacy]
[\Legacy]
"""

CONFIG_B = r"""
[SYSTEM Params]
Banner = <dr>
[\SYSTEM Params]

[IPGroup]
FORMAT Index = Name, ProxySet
IPGroup 0 = Carrier, 2
IPGroup 1 = Teams, 1
[\IPGroup]
"""


@pytest.fixture
def result():
    return diff(parse(CONFIG_A), parse(CONFIG_B), 'Primary', 'DR')


def test_render_text_groups_by_section_and_category(result):
    text = render_text(result)
    lines = text.splitlines()
    assert lines[0] == 'Configuration differences: Primary vs DR'
    assert lines.index('[General]') < lines.index('[SYSTEM Params]') < lines.index('[IPGroup]')
    assert lines.index('  Missing parameters') < lines.index('  Value mismatches')
    assert "    - Section 'Legacy' exists only in Primary" in lines
    assert "    - Parameter 'Timeout' exists only in Primary (value '30')" in lines
    assert "    - Parameter 'Banner': Primary='<primary>', DR='<dr>'" in lines
    assert lines[-1] == 'Found 4 differences in 3 sections.'


def test_render_text_without_differences():
    same = diff(parse(CONFIG_A), parse(CONFIG_A))
    assert 'No differences found between SBC1 and SBC2.' in render_text(same)


def test_render_html_escapes_and_tabulates(result):
    page = render_html(result, generated=datetime(2024, 1, 2, 3, 4, 5))
    assert page.startswith('<!DOCTYPE html>')
    assert 'Generated 2024-01-02 03:04:05' in page
    assert '&lt;primary&gt;' in page
    assert '<primary>' not in page
    assert '<h2>IPGroup</h2>' in page
    assert '<td rowspan="1">Row 0 (Carrier)</td><td>ProxySet</td><td>0</td><td>2</td>' in page
    assert page.index('<h3>Missing parameters</h3>') < page.index('<h3>Value mismatches</h3>')


def test_render_html_without_differences():
    same = diff(parse(CONFIG_B), parse(CONFIG_B), 'A', 'B')
    assert 'No differences found between A and B.' in render_html(same)


def test_format_for_path():
    assert format_for_path('report.txt') == FORMAT_TEXT
    assert format_for_path('report.HTML') == FORMAT_HTML
    assert format_for_path('report') == FORMAT_HTML


def test_write_report(tmp_path, result):
    path = write_report(result, str(tmp_path / 'diff.txt'))
    assert path.read_text(encoding='utf-8') == render_text(result)
    html_path = write_report(result, str(tmp_path / 'diff.out'), FORMAT_HTML)
    assert html_path.read_text(encoding='utf-8').startswith('<!DOCTYPE html>')


def test_write_report_missing_directory(tmp_path, result):
    target = tmp_path / 'missing' / 'diff.html'
    with pytest.raises(NotFoundError):
        write_report(result, str(target))
    assert not target.exists()


def test_unsupported_format(tmp_path, result):
    with pytest.raises(RuntimeError):
        write_report(result, str(tmp_path / 'diff.html'), 'pdf')
