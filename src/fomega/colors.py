"""Color support for terminal output."""

import os
import sys


def _detect_color_support() -> bool:
    return (
        hasattr(sys.stdout, 'isatty') and
        sys.stdout.isatty() and
        os.environ.get('TERM') != 'dumb' and
        os.environ.get('NO_COLOR') is None
    )


_CODES = {
    'RESET': '\033[0m',
    'BOLD': '\033[1m',
    'DIM': '\033[2m',
    'RED': '\033[31m',
    'GREEN': '\033[32m',
    'YELLOW': '\033[33m',
    'BLUE': '\033[34m',
    'MAGENTA': '\033[35m',
    'CYAN': '\033[36m',
    'BRIGHT_BLUE': '\033[94m',
}


class Colors:
    """ANSI color codes for terminal output."""

    _supports_color = _detect_color_support()

    RESET = _CODES['RESET'] if _supports_color else ''
    BOLD = _CODES['BOLD'] if _supports_color else ''
    DIM = _CODES['DIM'] if _supports_color else ''
    RED = _CODES['RED'] if _supports_color else ''
    GREEN = _CODES['GREEN'] if _supports_color else ''
    YELLOW = _CODES['YELLOW'] if _supports_color else ''
    BLUE = _CODES['BLUE'] if _supports_color else ''
    MAGENTA = _CODES['MAGENTA'] if _supports_color else ''
    CYAN = _CODES['CYAN'] if _supports_color else ''
    BRIGHT_BLUE = _CODES['BRIGHT_BLUE'] if _supports_color else ''

    @classmethod
    def success(cls, text: str) -> str:
        """Format success message."""
        return f"{cls.GREEN}✓{cls.RESET} {text}"

    @classmethod
    def error(cls, text: str) -> str:
        """Format error message."""
        return f"{cls.RED}✗{cls.RESET} {text}"

    @classmethod
    def warning(cls, text: str) -> str:
        return f"{cls.YELLOW}⚠{cls.RESET} {text}"

    @classmethod
    def info(cls, text: str) -> str:
        return f"{cls.BLUE}ℹ{cls.RESET} {text}"

    @classmethod
    def hint(cls, text: str) -> str:
        return f"{cls.YELLOW}{text}{cls.RESET}"

    @classmethod
    def bold(cls, text: str) -> str:
        return f"{cls.BOLD}{text}{cls.RESET}"

    @classmethod
    def dim(cls, text: str) -> str:
        return f"{cls.DIM}{text}{cls.RESET}"

    @classmethod
    def keyword(cls, text: str) -> str:
        """Format language keyword."""
        return f"{cls.MAGENTA}{text}{cls.RESET}"

    @classmethod
    def type_name(cls, text: str) -> str:
        """Format a rendered type."""
        return f"{cls.CYAN}{text}{cls.RESET}"

    @classmethod
    def kind_name(cls, text: str) -> str:
        """Format a rendered kind."""
        return f"{cls.BLUE}{text}{cls.RESET}"

    @classmethod
    def var_name(cls, text: str) -> str:
        """Format a variable name."""
        return f"{cls.BOLD}{text}{cls.RESET}"

    @classmethod
    def literal(cls, text: str) -> str:
        return f"{cls.GREEN}{text}{cls.RESET}"


def disable_colors():
    """Disable color output."""
    Colors._supports_color = False
    for attr in _CODES:
        setattr(Colors, attr, '')


def enable_colors():
    """Force enable color output."""
    Colors._supports_color = True
    for attr, code in _CODES.items():
        setattr(Colors, attr, code)
