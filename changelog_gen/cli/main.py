"""CLI Main Entry Point"""

import sys

from changelog_gen.changelog import ChangelogGenerator, ChangelogError
from changelog_gen.config import load_config
from changelog_gen.git import GitAnalyzer, GitError
from changelog_gen.output import dim, print_debug, print_error, print_info, print_rule, print_success, colorize_changelog

from changelog_gen.cli.args import parse_args
from changelog_gen.cli.commands import display_config, run_setup, run_install_completion


def _handle_subcommands(args):
    """Handle subcommands that exit early.

    Returns:
        tuple: (exit_code, should_exit) - exit_code if should_exit is True
    """
    if args.install_completion:
        return run_install_completion(), True
    if args.display_config:
        return display_config(), True
    if args.setup:
        return run_setup(), True
    return 0, False


def _display_preview(content, is_pipe):
    """Show rendered sections between rules; raw text when piped."""
    if is_pipe:
        print(content)
        return
    print_rule()
    print(colorize_changelog(content))
    print_rule()


def _generate_changelog_flow(args, config):
    """Run the generator and report the outcome.

    Returns:
        int: Exit code
    """
    is_pipe = not sys.stdout.isatty()
    verbose = args.verbose or args.debug or config.verbose
    changelog_path = args.output or config.changelog_path

    try:
        source = GitAnalyzer()
    except GitError as e:
        print_error(str(e))
        return 1

    generator = ChangelogGenerator(
        source,
        changelog_path=changelog_path,
        commit_limit=config.fallback_commit_limit,
        min_entry_length=config.min_entry_length,
        log=print_debug if verbose else None,
    )

    try:
        result = generator.generate(preview=args.preview, since=args.since)
    except ChangelogError as e:
        print_error(f"Failed to generate changelog: {e}")
        return 1

    if result is None:
        if not is_pipe:
            print_info("No new changes to add to the changelog")
        return 0

    if args.preview:
        _display_preview(result, is_pipe)
        if not is_pipe:
            print(dim(f"This is a preview. Run without --preview to update {changelog_path}"))
    else:
        print_success(f"Changelog updated in {changelog_path}")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)

    exit_code, should_exit = _handle_subcommands(args)
    if should_exit:
        return exit_code

    # Precedence: CLI args > environment variables > config file
    config = load_config().apply_env()

    return _generate_changelog_flow(args, config)


if __name__ == "__main__":
    sys.exit(main())
