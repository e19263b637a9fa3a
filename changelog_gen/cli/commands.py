"""CLI Commands"""

import os
import sys

from changelog_gen.config import Config, load_config, save_config, get_config_path
from changelog_gen.output import bold, dim, info, print_success


def display_config() -> int:
    """Display current configuration."""
    config = load_config()
    config_path = get_config_path()

    print(f"\n{bold('Current Configuration')}\n")

    if config_path:
        print(f"  {dim('Loaded from:')} {config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no .clrc found)")

    env_changelog = os.environ.get('CL_CHANGELOG')
    env_verbose = os.environ.get('CL_VERBOSE')
    if env_changelog or env_verbose:
        print(f"  {dim('Environment overrides:')}")
        if env_changelog:
            print(f"    CL_CHANGELOG={env_changelog}")
        if env_verbose:
            print(f"    CL_VERBOSE={env_verbose}")

    print()
    print(f"  {bold('Settings:')}")
    print(f"    changelog_path:        {info(config.changelog_path)}")
    print(f"    fallback_commit_limit: {info(str(config.fallback_commit_limit))}")
    print(f"    min_entry_length:      {info(str(config.min_entry_length))}")
    print(f"    verbose:               {info(str(config.verbose).lower())}")

    print(f"\n  {dim('Config locations:')}")
    print(f"    Local:  .clrc (in current directory)")
    print(f"    Global: ~/.clrc")
    print(f"\n  {dim('Run')} cl --setup {dim('to configure')}\n")

    return 0


def _ask_int(prompt: str, default: int) -> int:
    value = input(prompt).strip()
    return int(value) if value.isdigit() else default


def run_setup() -> int:
    """Quick setup wizard."""
    display_config()
    print(f"{bold('Setup Wizard')}\n")

    defaults = Config()

    changelog_path = input(f"Changelog file (Enter for {defaults.changelog_path}): ").strip() or defaults.changelog_path

    print(f"\nCommits to read on the first run, before a watermark exists")
    fallback_commit_limit = _ask_int(f"(Enter for {defaults.fallback_commit_limit}): ", defaults.fallback_commit_limit)

    print(f"\nShortest entry to keep, in characters")
    min_entry_length = _ask_int(f"(Enter for {defaults.min_entry_length}): ", defaults.min_entry_length)

    print("\nShow progress output by default? [y/N]: ", end='')
    verbose = input().strip().lower() == 'y'

    config = Config(
        changelog_path=changelog_path,
        fallback_commit_limit=fallback_commit_limit or defaults.fallback_commit_limit,
        min_entry_length=min_entry_length,
        verbose=verbose,
    )
    path = save_config(config, global_config=True)

    print_success(f"Saved to {path}")
    return 0


def run_install_completion() -> int:
    """Install shell tab completion."""
    shell = os.environ.get('SHELL', '')

    print(f"\n{bold('Tab Completion Setup')}\n")

    line = 'eval "$(register-python-argcomplete cl)"'
    if 'zsh' in shell or 'bash' in shell:
        rc_file = os.path.expanduser('~/.zshrc' if 'zsh' in shell else '~/.bashrc')
        print(f"Add this line to {dim(rc_file)}:\n")
        print(f"  {line}\n")
        print(f"Then run: {dim('source ' + rc_file)}")
    elif sys.platform == 'win32':
        print("For PowerShell, run:\n")
        print("  register-python-argcomplete --shell powershell cl | Out-String | Invoke-Expression\n")
        print("To make it permanent, add it to your $PROFILE")
    else:
        print("Run one of these based on your shell:\n")
        print(f"  {dim('# Bash/Zsh')}")
        print(f"  {line}\n")
        print(f"  {dim('# Fish')}")
        print("  register-python-argcomplete --shell fish cl | source")

    print(f"\n{dim('After setup, press TAB to autocomplete flags.')}")
    return 0
