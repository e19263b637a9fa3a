"""CLI Argument Parsing"""

import argparse
import argcomplete

from changelog_gen import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cl',
        description='Update CHANGELOG.md from conventional commits',
        epilog='Example: cl --preview (show what would be added)'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    # Generation options
    parser.add_argument('-p', '--preview', action='store_true', help='Show new entries without writing the changelog')
    parser.add_argument('-f', '--from', dest='since', type=str, metavar='COMMIT', help='Start after COMMIT instead of the last processed one')
    parser.add_argument('-o', '--output', type=str, metavar='PATH', help='Changelog file (default: CHANGELOG.md)')

    # Output options
    parser.add_argument('-d', '--debug', action='store_true', help='Show progress while reading commits')
    parser.add_argument('--verbose', action='store_true', help='Same as --debug')

    # Setup/config
    parser.add_argument('--setup', action='store_true', help='Configure defaults')
    parser.add_argument('--display-config', action='store_true', help='Show current configuration')
    parser.add_argument('--install-completion', action='store_true', help='Install shell tab completion')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
