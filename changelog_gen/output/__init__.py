"""Terminal Output Formatting Package"""

import re
import sys
import os


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'
    MAGENTA = '\033[35m'


def _supports_color() -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if not hasattr(sys.stdout, 'isatty') or not sys.stdout.isatty():
        return False
    if sys.platform == 'win32':
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
            return True
        except Exception:
            return False
    return True


def _supports_unicode() -> bool:
    if sys.platform == 'win32':
        try:
            '✓'.encode(sys.stdout.encoding or 'utf-8')
            return True
        except (UnicodeEncodeError, LookupError):
            return False
    return True


COLORS_ENABLED = _supports_color()
UNICODE_ENABLED = _supports_unicode()

CHECK = '✓' if UNICODE_ENABLED else '[OK]'
CROSS = '✗' if UNICODE_ENABLED else '[X]'
RULE = '─' if UNICODE_ENABLED else '-'


def _colorize(text: str, *codes: str) -> str:
    if not COLORS_ENABLED:
        return text
    return f"{''.join(codes)}{text}{Colors.RESET}"


def success(text: str) -> str:
    return _colorize(text, Colors.GREEN)


def error(text: str) -> str:
    return _colorize(text, Colors.RED)


def warning(text: str) -> str:
    return _colorize(text, Colors.YELLOW)


def info(text: str) -> str:
    return _colorize(text, Colors.CYAN)


def dim(text: str) -> str:
    return _colorize(text, Colors.DIM)


def bold(text: str) -> str:
    return _colorize(text, Colors.BOLD)


def print_success(message: str) -> None:
    print(f"{success(CHECK)} {message}")


def print_error(message: str) -> None:
    print(f"{error(CROSS)} {error(message)}", file=sys.stderr)


def print_warning(message: str) -> None:
    print(f"{warning('⚠')} {warning(message)}" if UNICODE_ENABLED else f"[!] {message}")


def print_info(message: str) -> None:
    print(info(message))


def print_debug(message: str) -> None:
    """Progress output for --verbose; goes to stderr so previews stay pipeable."""
    print(dim(f"  {message}"), file=sys.stderr)


SECTION_COLORS = {
    'Added': Colors.GREEN,
    'Fixed': Colors.RED,
    'Security': Colors.RED,
    'Performance': Colors.GREEN,
    'Changed': Colors.YELLOW,
    'Documentation': Colors.CYAN,
    'Testing': Colors.MAGENTA,
    'CI/CD': Colors.CYAN,
    'Build': Colors.CYAN,
}

_HEADING_RE = re.compile(r'^(###\s+)(.+)$')
_SCOPE_RE = re.compile(r'^\*\*([^*]+)\*\*:')


def colorize_changelog(text: str) -> str:
    """Color section headings and scope markers in rendered changelog text."""
    if not COLORS_ENABLED:
        return text
    lines = text.split('\n')
    for i, line in enumerate(lines):
        heading = _HEADING_RE.match(line)
        if heading:
            color = SECTION_COLORS.get(heading.group(2).strip(), Colors.DIM)
            lines[i] = _colorize(line, Colors.BOLD, color)
            continue
        scope = _SCOPE_RE.match(line)
        if scope:
            prefix = scope.group(0)
            lines[i] = _colorize(prefix, Colors.BOLD) + line[len(prefix):]
    return '\n'.join(lines)


def print_rule(width: int = 50) -> None:
    print(dim(RULE * width))


__all__ = [
    "Colors", "COLORS_ENABLED", "UNICODE_ENABLED",
    "CHECK", "CROSS", "RULE",
    "success", "error", "warning", "info", "dim", "bold",
    "print_success", "print_error", "print_warning", "print_info", "print_debug",
    "print_rule", "colorize_changelog", "SECTION_COLORS",
]
