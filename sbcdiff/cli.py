#!/usr/bin/env python3

import argparse
import sys
from typing import List, Optional, Sequence

from .differ import DEFAULT_NAME_A, DEFAULT_NAME_B, diff
from .differences import DiffResult
from .model import Section, duplicate_section_names
from .parser import read_config
from .report import FORMATS, format_for_path, render_text, write_report

DEFAULT_OUTPUT = 'sbc_diff_report.html'


def _warn_duplicates(label: str, sections: List[Section]) -> None:
    for name in duplicate_section_names(sections):
        print(
            f"Warning: section '{name}' appears more than once in {label}; only the first one is compared.",
            file=sys.stderr,
        )
    for section in sections:
        indices = section.duplicate_indices()
        if indices:
            print(
                f"Warning: table '{section.name}' in {label} repeats row index {', '.join(indices)}; "
                f"index matching uses the last row for each.",
                file=sys.stderr,
            )


def _load(path: str, label: str, quiet: bool) -> List[Section]:
    if not quiet:
        print(f"Reading {label} from {path}")
    sections = read_config(path)
    _warn_duplicates(label, sections)
    return sections


def compare_files(
    path_a: str,
    path_b: str,
    name_a: str = DEFAULT_NAME_A,
    name_b: str = DEFAULT_NAME_B,
    output: Optional[str] = DEFAULT_OUTPUT,
    fmt: Optional[str] = None,
    match_by_index: bool = False,
    echo: bool = False,
    quiet: bool = False,
) -> DiffResult:
    sections_a = _load(path_a, name_a, quiet)
    sections_b = _load(path_b, name_b, quiet)
    if not quiet:
        print(f"Comparing {len(sections_a)} sections of {name_a} with {len(sections_b)} sections of {name_b}")
    result = diff(sections_a, sections_b, name_a, name_b, match_by_index=match_by_index)
    if not quiet:
        if result.is_empty:
            print('No differences found.')
        else:
            print(f"Found {result.total} differences in {len(result)} sections.")
    if echo:
        sys.stdout.write(render_text(result))
    if output:
        path = write_report(result, output, fmt or format_for_path(output))
        if not quiet:
            print(f"Wrote report to {path}")
    return result


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Compare two SBC ini configuration files and report drift.')
    parser.add_argument('file_a', help='First configuration file (e.g., primary unit).')
    parser.add_argument('file_b', help='Second configuration file (e.g., disaster-recovery unit).')
    parser.add_argument('--name-a', default=DEFAULT_NAME_A, help=f"Display name of the first file (default {DEFAULT_NAME_A}).")
    parser.add_argument('--name-b', default=DEFAULT_NAME_B, help=f"Display name of the second file (default {DEFAULT_NAME_B}).")
    parser.add_argument('-o', '--output', default=DEFAULT_OUTPUT, help=f"Report path (default {DEFAULT_OUTPUT}).")
    parser.add_argument('--format', choices=FORMATS, help='Report format; inferred from the output suffix when omitted.')
    parser.add_argument(
        '--match-by-index',
        action='store_true',
        help='Match table rows by Index even when both tables have the same number of rows.',
    )
    parser.add_argument('--print', dest='echo', action='store_true', help='Also print the differences to the console.')
    parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress messages.')
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        compare_files(
            args.file_a,
            args.file_b,
            name_a=args.name_a,
            name_b=args.name_b,
            output=args.output,
            fmt=args.format,
            match_by_index=args.match_by_index,
            echo=args.echo,
            quiet=args.quiet,
        )
    except Exception as exc:  # pragma: no cover - CLI safeguard
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
