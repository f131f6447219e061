import pytest

from sbcdiff.cli import compare_files, main, parse_args

PRIMARY = r"""
[SYSTEM Params]
SyslogServerIP = 10.0.0.5
[\SYSTEM Params]

[ProxySet]
FORMAT Index = ProxyName, Port
ProxySet 0 = Carrier, 5060
ProxySet 1 = Teams, 5061
[\ProxySet]
"""

SECONDARY = r"""
[SYSTEM Params]
SyslogServerIP = 10.0.0.6
[\SYSTEM Params]

[ProxySet]
FORMAT Index = ProxyName, Port
ProxySet 0 = Carrier, 5060
ProxySet 2 = Teams, 5061
[\ProxySet]
"""


@pytest.fixture
def files(tmp_path):
    path_a = tmp_path / 'primary.ini'
    path_b = tmp_path / 'secondary.ini'
    path_a.write_text(PRIMARY, encoding='utf-8')
    path_b.write_text(SECONDARY, encoding='utf-8')
    return str(path_a), str(path_b)


def test_parse_args_defaults():
    args = parse_args(['a.ini', 'b.ini'])
    assert (args.name_a, args.name_b) == ('SBC1', 'SBC2')
    assert args.output == 'sbc_diff_report.html'
    assert args.format is None
    assert not args.match_by_index


def test_main_writes_html_report(files, tmp_path, capsys):
    output = tmp_path / 'report.html'
    main([files[0], files[1], '--name-a', 'Primary', '--name-b', 'DR', '-o', str(output)])
    page = output.read_text(encoding='utf-8')
    assert 'Primary vs DR' in page
    assert '10.0.0.6' in page
    out = capsys.readouterr().out
    assert 'Found 1 differences in 1 sections.' in out
    assert f"Wrote report to {output}" in out


def test_main_match_by_index(files, tmp_path, capsys):
    output = tmp_path / 'report.txt'
    main([files[0], files[1], '-o', str(output), '--match-by-index', '--quiet'])
    text = output.read_text(encoding='utf-8')
    assert 'Table row 1 (ProxyName=Teams) exists only in SBC1' in text
    assert 'Table row 2 (ProxyName=Teams) exists only in SBC2' in text
    assert capsys.readouterr().out == ''


def test_main_print_echoes_text(files, tmp_path, capsys):
    main([files[0], files[1], '-o', str(tmp_path / 'r.html'), '--print', '-q'])
    out = capsys.readouterr().out
    assert "Parameter 'SyslogServerIP': SBC1='10.0.0.5', SBC2='10.0.0.6'" in out


def test_main_no_differences_exits_cleanly(files, tmp_path, capsys):
    output = tmp_path / 'same.txt'
    main([files[0], files[0], '-o', str(output)])
    assert 'No differences found.' in capsys.readouterr().out
    assert 'No differences found between SBC1 and SBC2.' in output.read_text(encoding='utf-8')


def test_main_missing_input(files, tmp_path, capsys):
    output = tmp_path / 'report.html'
    with pytest.raises(SystemExit) as excinfo:
        main([files[0], str(tmp_path / 'nope.ini'), '-o', str(output)])
    assert excinfo.value.code == 1
    assert 'Error:' in capsys.readouterr().err
    assert not output.exists()


def test_main_missing_output_directory(files, tmp_path, capsys):
    output = tmp_path / 'absent' / 'report.html'
    with pytest.raises(SystemExit) as excinfo:
        main([files[0], files[1], '-o', str(output)])
    assert excinfo.value.code == 1
    assert 'does not exist' in capsys.readouterr().err
    assert not output.exists()


def test_duplicate_warnings(tmp_path, capsys):
    path = tmp_path / 'dup.ini'
    path.write_text("[T]\nFORMAT Index = A\nT 1 = x\nT 1 = y\n[\\T]\n[T]\n[\\T]\n", encoding='utf-8')
    result = compare_files(str(path), str(path), output=None, quiet=True)
    assert result.is_empty
    err = capsys.readouterr().err
    assert "Warning: section 'T' appears more than once in SBC1" in err
    assert "Warning: table 'T' in SBC2 repeats row index 1" in err
