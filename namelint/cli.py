#!/usr/bin/env python3
"""
NameLint CLI
============
Command-line interface for suspicious name validation.

Usage:
    namelint check shop=bakery name=Bakery
    namelint check --fix amenity=bar name=Bar "not:name=Bar"
    namelint scan features.json --json
    namelint scan features.json --fix -o fixed.json
    namelint generics --match parking
"""

import argparse
import html
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich import box

# Add parent to path
_parent = Path(__file__).parent.parent
if str(_parent) not in sys.path:
    sys.path.insert(0, str(_parent))

from namelint import __version__

# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.console = Console(highlight=False)
        self.err_console = Console(stderr=True, highlight=False)

    def print(self, *args, **kwargs):
        if not self.quiet:
            self.console.print(*args, **kwargs)

    def warn(self, msg: str):
        if not self.quiet:
            self.err_console.print(f"Warning: {msg}", markup=False)

    def error(self, msg: str):
        self.err_console.print(f"Error: {msg}", markup=False)

    def json(self, data):
        """JSON is always written, even in quiet mode."""
        print(json.dumps(data, indent=2, ensure_ascii=False))

    def table(self, headers: list, rows: list, title: str = None):
        """Print a formatted table."""
        if self.quiet:
            return
        table = Table(title=title, box=box.SIMPLE_HEAD)
        for header in headers:
            # Only the last column wraps
            table.add_column(header, no_wrap=header != headers[-1])
        for row in rows:
            table.add_row(*(str(c) for c in row))
        self.console.print(table)


def issue_rows(issues_by_entity: dict, context) -> list:
    rows = []
    for entity_id, issues in issues_by_entity.items():
        for issue in issues:
            rows.append([
                entity_id,
                issue.subtype,
                issue.hash,
                html.unescape(issue.message(context)),
            ])
    return rows


def issue_records(issues_by_entity: dict, context) -> list:
    records = []
    for entity_id, issues in issues_by_entity.items():
        for issue in issues:
            records.append({
                'entity_id': entity_id,
                'type': issue.type,
                'subtype': issue.subtype,
                'severity': issue.severity,
                'hash': issue.hash,
                'message': html.unescape(issue.message(context)),
                'provisional': issues.provisional,
            })
    return records


def make_lint(args, out: Output):
    """Create the validator, waiting for generic words unless --no-wait."""
    from namelint import NameLint
    from namelint.settings import get_setting

    lint = NameLint()
    if not args.no_wait:
        timeout = get_setting("cli.wait_timeout_seconds")
        if timeout is None:
            raise ValueError("cli.wait_timeout_seconds must be set in app.yaml")
        if not lint.wait_for_generics(timeout):
            out.warn("Generic word list not loaded yet; results are provisional.")
    return lint


def report(issues_by_entity: dict, context, args, out: Output):
    if args.json:
        out.json(issue_records(issues_by_entity, context))
        return

    if not issues_by_entity:
        out.print("No suspicious names found.")
        return

    out.table(['Entity', 'Issue', 'Tag', 'Message'],
              issue_rows(issues_by_entity, context),
              title="Suspicious names")

    if any(issues.provisional for issues in issues_by_entity.values()):
        out.print("[yellow]Some results are provisional (generic words still loading).[/yellow]")


# =============================================================================
# Commands
# =============================================================================

def cmd_check(args, out: Output):
    """Validate one feature given as key=value tags."""
    from namelint import Entity, Graph, EditContext
    from namelint.settings import get_setting
    from namelint.tags import parse_tag_args

    try:
        tags = parse_tag_args(args.tags)
    except ValueError as e:
        out.error(str(e))
        return 1

    entity_id = args.id or get_setting("cli.default_entity_id", "n-1")
    entity = Entity(id=entity_id, tags=tags)
    context = EditContext(Graph([entity]))

    lint = make_lint(args, out)
    issues = lint.validate(entity)
    issues_by_entity = {entity.id: issues} if issues else {}

    if args.json and args.fix:
        # Messages render against the unfixed feature
        records = issue_records(issues_by_entity, context)
        applied = lint.fix(context, issues)
        out.json({
            'issues': records,
            'applied': applied,
            'annotations': context.history,
            'tags': context.entity(entity.id).tags,
        })
        return 1 if issues else 0

    report(issues_by_entity, context, args, out)

    if args.fix and issues:
        applied = lint.fix(context, issues)
        out.print(f"\nApplied {applied} fix(es):")
        for annotation in context.history:
            out.print(f"  - {annotation}")
        out.print("\nResulting tags:")
        for key, value in context.entity(entity.id).tags.items():
            out.print(f"  {key}={value}", markup=False)

    return 1 if issues else 0


def cmd_scan(args, out: Output):
    """Validate every feature in a JSON file."""
    from namelint import Entity, Graph, EditContext

    path = Path(args.file)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        out.error(f"Cannot read {path}: {e}")
        return 1
    except json.JSONDecodeError as e:
        out.error(f"Invalid JSON in {path}: {e}")
        return 1

    if isinstance(data, dict):
        data = data.get('features', [])
    if not isinstance(data, list):
        out.error("Feature file must hold a list of {\"id\", \"tags\"} objects")
        return 1

    try:
        entities = [Entity.from_dict(item) for item in data]
    except ValueError as e:
        out.error(str(e))
        return 1

    context = EditContext(Graph(entities))
    lint = make_lint(args, out)

    if not args.json:
        out.print(f"Scanning {len(entities)} feature(s)...")
    issues_by_entity = lint.scan(entities)
    report(issues_by_entity, context, args, out)

    if args.fix and issues_by_entity:
        applied = sum(lint.fix(context, issues) for issues in issues_by_entity.values())
        if not args.json:
            out.print(f"\nApplied {applied} fix(es).")

    if args.output:
        fixed = [entity.to_dict() for entity in context.graph()]
        Path(args.output).write_text(json.dumps(fixed, indent=2, ensure_ascii=False), encoding="utf-8")
        if not args.json:
            out.print(f"Wrote {len(fixed)} feature(s) to {args.output}")

    return 1 if issues_by_entity else 0


def cmd_generics(args, out: Output):
    """Show generic word list status."""
    lint = make_lint(args, out)
    registry = lint.registry

    out.print(f"Resource: {registry.resource}")
    out.print(f"State:    {registry.state.value}")
    out.print(f"Patterns: {len(registry.patterns)}")

    if args.match:
        text = args.match.lower()
        matches = [p.pattern for p in registry.patterns if p.search(text)]
        if matches:
            out.print(f"\n'{args.match}' is a known generic name:", markup=False)
            for pattern in matches:
                out.print(f"  {pattern}", markup=False)
            return 1
        out.print(f"\n'{args.match}' is not a known generic name.", markup=False)

    return 0


# =============================================================================
# Main
# =============================================================================

def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='namelint',
        description='NameLint - Suspicious Name Validator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s check shop=bakery name=Bakery
  %(prog)s check amenity=bar name=Bar "not:name=Bar" --fix
  %(prog)s scan features.json --json
  %(prog)s scan features.json --fix -o fixed.json
  %(prog)s generics --match parking
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    parser.add_argument('--no-wait', action='store_true',
                        help="Don't wait for the generic word list (results may be provisional)")

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- check ---
    p = subparsers.add_parser('check', aliases=['c'], help='Check one feature')
    p.add_argument('tags', nargs='+', help='Tags as key=value')
    p.add_argument('--id', help='Entity id (default: n-1)')
    p.add_argument('--fix', '-f', action='store_true',
                   help='Apply fixes and print resulting tags (also with --json)')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # --- scan ---
    p = subparsers.add_parser('scan', aliases=['s'], help='Check features from a JSON file')
    p.add_argument('file', help='JSON list of {"id": ..., "tags": {...}}')
    p.add_argument('--fix', '-f', action='store_true', help='Apply fixes')
    p.add_argument('--output', '-o', help='Write (fixed) features to this file')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # --- generics ---
    p = subparsers.add_parser('generics', aliases=['g'], help='Show generic word list status')
    p.add_argument('--match', '-m', help='Test a name against the list')

    # Parse
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Handle aliases
    cmd_map = {
        'c': 'check',
        's': 'scan',
        'g': 'generics',
    }
    command = cmd_map.get(args.command, args.command)

    # Output handler
    out = Output(quiet=getattr(args, 'quiet', False))

    # Dispatch
    commands = {
        'check': cmd_check,
        'scan': cmd_scan,
        'generics': cmd_generics,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except Exception as e:
            out.error(str(e))
            if args.verbose:
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
