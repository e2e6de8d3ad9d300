"""ANSI escape sequences used by the spinner and the report renderer."""

RED = "\x1b[31m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
MAGENTA = "\x1b[35m"
CYAN = "\x1b[36m"
RESET = "\x1b[0m"

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
ERASE_LINE = "\x1b[2K\r"

DOT = "●"
SPINNER_GLYPHS = ("◢", "◣", "◤", "◥")


def colorize(text: str, color: str) -> str:
    return f"{color}{text}{RESET}"
