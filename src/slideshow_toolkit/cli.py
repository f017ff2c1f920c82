"""
Command Line Interface for Slideshow Toolkit

Provides entry points for:
- slideshow build: Load a deck and report the layout chosen for each slide
- slideshow render: Write a deck as a standalone HTML document
- slideshow diagnose: Run pre-flight checks on a directory of slides
"""

import sys
import json
import asyncio
import argparse
from pathlib import Path

from .config import configure_logging, load_config
from .content import save_deck
from .cookbook import build_deck_html
from .pipeline import discover_sources, load_deck
from .advisor import RefinementAdvisor


def _load(args: argparse.Namespace):
    config = load_config(args.config)
    configure_logging(debug=config.debug or args.verbose)
    factory = None if args.no_ai else RefinementAdvisor
    sources = discover_sources(args.directory)
    return asyncio.run(load_deck(sources, config=config, advisor_factory=factory))


def build_command(args: argparse.Namespace) -> int:
    """Execute build command."""
    if not args.json:
        print("=" * 60)
        print("Deck Build")
        print("=" * 60)

    try:
        deck = _load(args)

        if args.output:
            save_deck(deck, args.output)

        if args.json:
            print(json.dumps([
                {
                    "index": s.index,
                    "source": s.source,
                    "layout": s.layout.value,
                    "confidence": s.decision.confidence,
                    "reasoning": s.reasoning,
                    "refined": s.refined,
                }
                for s in deck.slides
            ], indent=2, ensure_ascii=False))
            return 0

        print(f"Refinement: {'enabled' if deck.refinement_enabled else 'disabled'}")
        print(f"Loaded {len(deck.slides)} slides")
        print("-" * 60)
        for s in deck.slides:
            print(f"  {s.index + 1:>3}. {s.source:<28} {s.layout.value:<15} "
                  f"{s.decision.confidence:.2f}  {s.reasoning}")
        if args.output:
            print(f"\nSaved deck to: {args.output}")
        return 0

    except Exception as e:
        print(f"\nError: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def render_command(args: argparse.Namespace) -> int:
    """Execute render command."""
    print("=" * 60)
    print("Deck Render")
    print("=" * 60)

    try:
        deck = _load(args)
        title = args.title or Path(args.directory).resolve().name
        document = build_deck_html(deck, title=title, stylesheet=args.stylesheet)
        Path(args.output).write_text(document, encoding="utf-8")
        print(f"Rendered {len(deck.slides)} slides to: {args.output}")
        for layout, count in deck.layout_counts().items():
            print(f"  {layout:<15} {count}")
        return 0

    except Exception as e:
        print(f"\nError: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def diagnose_command(args: argparse.Namespace) -> int:
    """Execute diagnose command."""
    from .diagnose import diagnose_sources

    configure_logging(debug=args.verbose)

    try:
        report = diagnose_sources(args.directory)

        if getattr(args, 'json', False):
            print(json.dumps(report.to_dict(), indent=2))
        else:
            report.print_report()

        if args.strict and report.has_blocking_issues:
            return 1

        return 0

    except Exception as e:
        print(f"\nError: {e}")
        if getattr(args, 'verbose', False):
            import traceback
            traceback.print_exc()
        return 1


def _add_load_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('directory', help='Directory of Markdown slides')
    parser.add_argument('--config', '-c', help='Configuration file (YAML/JSON)')
    parser.add_argument('--no-ai', action='store_true', help='Skip layout refinement, use heuristics only')
    parser.add_argument('-v', '--verbose', action='store_true', help='Show detailed output')


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='slideshow',
        description='Slideshow Toolkit - Markdown slides with automatic layout selection',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s build slides/ --output deck.json
  %(prog)s build slides/ --no-ai --json
  %(prog)s render slides/ --output deck.html --title "Quarterly Review"
  %(prog)s diagnose slides/ --strict
        """
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Show detailed output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Build command
    build_parser = subparsers.add_parser('build', help='Load a deck and report chosen layouts')
    _add_load_arguments(build_parser)
    build_parser.add_argument('--output', '-o', help='Save the deck as JSON')
    build_parser.add_argument('--json', action='store_true', help='Output results as JSON')

    # Render command
    render_parser = subparsers.add_parser('render', help='Render a deck to standalone HTML')
    _add_load_arguments(render_parser)
    render_parser.add_argument('--output', '-o', required=True, help='Output HTML file')
    render_parser.add_argument('--title', '-t', help='Document title (default: directory name)')
    render_parser.add_argument('--stylesheet', help='Stylesheet URL to link from the document')

    # Diagnose command
    diagnose_parser = subparsers.add_parser('diagnose', help='Run deck diagnostics')
    diagnose_parser.add_argument('directory', help='Directory of Markdown slides')
    diagnose_parser.add_argument('--strict', action='store_true', help='Exit with error if blocking issues found')
    diagnose_parser.add_argument('--json', action='store_true', help='Output results as JSON')
    diagnose_parser.add_argument('-v', '--verbose', action='store_true', help='Show detailed output')

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == 'build':
        return build_command(args)
    elif args.command == 'render':
        return render_command(args)
    elif args.command == 'diagnose':
        return diagnose_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
