from __future__ import annotations

import os
import shutil
import sys
from dataclasses import dataclass
from typing import Literal

from tfpick.core.result import Err, Ok, Result
from tfpick.releases.resolution import SelectionError, Selector

Key = Literal["up", "down", "page_up", "page_down", "home", "end", "enter", "cancel", "other"]

_WIN_SCAN_CODES: dict[str, Key] = {
    "H": "up",
    "P": "down",
    "I": "page_up",
    "Q": "page_down",
    "G": "home",
    "O": "end",
}


@dataclass(frozen=True, slots=True)
class SelectorOption:
    value: str
    label: str
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class SelectorResult:
    action: Literal["select", "cancel"]
    value: str | None
    index: int


def is_interactive_terminal() -> bool:
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def _color_enabled() -> bool:
    if not is_interactive_terminal():
        return False
    if os.getenv("NO_COLOR") is not None:
        return False
    term = os.getenv("TERM", "")
    return term.lower() != "dumb"


def _paint(text: str, *codes: str) -> str:
    if not _color_enabled() or not codes:
        return text
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def _clear() -> None:
    sys.stdout.write("\x1b[2J\x1b[H")


def _read_key() -> Key:
    if os.name == "nt":
        import msvcrt

        ch = msvcrt.getwch()
        if ch in ("\r", "\n"):
            return "enter"
        if ch in ("q", "Q", "\x1b", "\x03"):
            return "cancel"
        if ch in ("\x00", "\xe0"):
            return _WIN_SCAN_CODES.get(msvcrt.getwch(), "other")
        return "other"

    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = sys.stdin.read(1)
        if ch in ("\r", "\n"):
            return "enter"
        if ch in ("q", "Q", "\x03"):
            return "cancel"
        if ch in ("k",):
            return "up"
        if ch in ("j",):
            return "down"
        if ch == "\x1b":
            if sys.stdin.read(1) != "[":
                return "cancel"
            c3 = sys.stdin.read(1)
            if c3 == "A":
                return "up"
            if c3 == "B":
                return "down"
            if c3 == "H":
                return "home"
            if c3 == "F":
                return "end"
            if c3 in ("5", "6"):
                sys.stdin.read(1)  # trailing "~"
                return "page_up" if c3 == "5" else "page_down"
            return "other"
        return "other"
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


def _pad(text: str, width: int) -> str:
    if len(text) > width:
        text = text[: max(0, width - 3)] + "..."
    return text.ljust(width)


def _line(widths: list[int]) -> str:
    return "+" + "+".join("-" * (w + 2) for w in widths) + "+"


def _row(cells: list[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def _page_size() -> int:
    rows = shutil.get_terminal_size((100, 30)).lines
    return max(5, rows - 10)


def _window(index: int, total: int, size: int) -> range:
    """Visible slice of ``size`` rows keeping ``index`` in view."""
    if total <= size:
        return range(total)
    start = min(max(0, index - size // 2), total - size)
    return range(start, start + size)


def _style_selected(text: str) -> str:
    return _paint(text, "1", "30", "46")


def _render(*, title: str, options: list[SelectorOption], index: int) -> None:
    _clear()
    print(_paint(title, "1", "96"))
    print()

    idx_w = max(4, len(str(len(options))) + 2)
    label_w = max(12, max(len(o.label) for o in options))
    detail_w = 12
    widths = [idx_w, label_w, detail_w]

    print(_line(widths))
    print(
        _row(
            [
                _paint(_pad("Sel", idx_w), "1", "95"),
                _paint(_pad("Version", label_w), "1", "95"),
                _paint(_pad("Details", detail_w), "1", "95"),
            ]
        )
    )
    print(_line(widths))

    visible = _window(index, len(options), _page_size())
    for i in visible:
        opt = options[i]
        marker = f">>{i + 1}" if i == index else f"  {i + 1}"
        cells = [_pad(marker, idx_w), _pad(opt.label, label_w), _pad(opt.detail or "", detail_w)]
        if i == index:
            print(_row([_style_selected(c) for c in cells]))
        else:
            print(
                _row(
                    [
                        _paint(cells[0], "36"),
                        _paint(cells[1], "97"),
                        _paint(cells[2], "2", "37"),
                    ]
                )
            )

    print(_line(widths))
    print(_paint(f"{index + 1}/{len(options)}", "2", "37"))
    print(
        _paint("Keys:", "1", "96")
        + " "
        + _paint("Up/Down", "1", "97")
        + " + Enter, "
        + _paint("PgUp/PgDn", "1", "97")
        + ": page, "
        + _paint("q", "1", "97")
        + ": cancel"
    )
    sys.stdout.flush()


def select_one(
    *,
    title: str,
    options: list[SelectorOption],
    initial_index: int = 0,
) -> SelectorResult:
    if not options:
        raise ValueError("selector requires at least one option")
    if not is_interactive_terminal():
        raise RuntimeError("interactive selector requires a TTY")

    idx = max(0, min(initial_index, len(options) - 1))
    last = len(options) - 1

    while True:
        _render(title=title, options=options, index=idx)
        key = _read_key()

        if key == "up":
            idx = (idx - 1) % len(options)
        elif key == "down":
            idx = (idx + 1) % len(options)
        elif key == "page_up":
            idx = max(0, idx - _page_size())
        elif key == "page_down":
            idx = min(last, idx + _page_size())
        elif key == "home":
            idx = 0
        elif key == "end":
            idx = last
        elif key == "enter":
            return SelectorResult(action="select", value=options[idx].value, index=idx)
        elif key == "cancel":
            return SelectorResult(action="cancel", value=None, index=idx)


def version_options(versions: list[str]) -> list[SelectorOption]:
    """Selector rows for a release listing; the first entry is the newest."""
    options: list[SelectorOption] = []
    for i, version in enumerate(versions):
        if "-" in version:
            detail = "pre-release"
        elif i == 0:
            detail = "latest"
        else:
            detail = None
        options.append(SelectorOption(value=version, label=version, detail=detail))
    return options


def version_selector(tool: str) -> Selector:
    """Interactive version picker; the default highlighted entry is the first."""

    def select(versions: list[str]) -> Result[str, SelectionError]:
        if not versions:
            return Err(SelectionError(reason="empty", message="no versions to choose from"))
        if not is_interactive_terminal():
            return Err(
                SelectionError(
                    reason="no_tty",
                    message=f"cannot prompt for a {tool} version without an interactive terminal",
                )
            )

        result = select_one(
            title=f"select a {tool} version to install",
            options=version_options(versions),
            initial_index=0,
        )
        _clear()
        sys.stdout.flush()
        if result.action != "select" or result.value is None:
            return Err(SelectionError(reason="cancelled", message="version selection cancelled"))
        return Ok(result.value)

    return select
