r"""
Styled-text renderer for terminal color/style escape sequences.

Pipeline
- tokenize(text): lexer yielding Token(text, codes) pairs. A token's text is the run that
  precedes the escape sequence whose codes it carries; the final token has no codes.
- fold(tokens): pure fold threading a Style through the tokens and yielding StyledSpan
  values (the style in effect when each run starts).
- render(text): tokenize + fold, with a fast path returning a single plain span when the
  text contains no escape sequence at all.
- to_html(spans) / to_text(spans): emit HTML (escaped, inline styles) or a rich Text.

Recognized sequences
- An optional ESC (\x1b), "[", one or more ";"-separated decimal codes, "m". The ESC is
  optional so that text whose escape characters were already stripped still renders.

Supported codes
- 0 reset everything
- 1 / 22 bold on / off, 3 / 23 italic on / off, 4 / 24 underline on / off
- 30–37, 90–97 foreground; 39 default foreground
- 40–47, 100–107 background; 49 default background
- anything else is ignored

Quick example:
    >>> render("\x1b[31mred\x1b[0mplain")
    [StyledSpan(text='red', style=Style(foreground='red', ...)), StyledSpan(text='plain', style=Style())]
"""
import html
import re
from typing import NamedTuple

from rich.style import Style as RichStyle
from rich.text import Text

from .utils import *

SEQUENCE = re.compile(r"\x1b?\[(\d+(?:;\d+)*)m")

COLORS = (
    "black",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
)

FOREGROUNDS = {30 + index: name for index, name in enumerate(COLORS)} | {
    90 + index: "bright_" + name for index, name in enumerate(COLORS)
}

BACKGROUNDS = {40 + index: name for index, name in enumerate(COLORS)} | {
    100 + index: "bright_" + name for index, name in enumerate(COLORS)
}

PALETTE = {
    "black": "#000000",
    "red": "#cd3131",
    "green": "#0dbc79",
    "yellow": "#e5e510",
    "blue": "#2472c8",
    "magenta": "#bc3fbc",
    "cyan": "#11a8cd",
    "white": "#e5e5e5",
    "bright_black": "#666666",
    "bright_red": "#f14c4c",
    "bright_green": "#23d18b",
    "bright_yellow": "#f5f543",
    "bright_blue": "#3b8eea",
    "bright_magenta": "#d670d6",
    "bright_cyan": "#29b8db",
    "bright_white": "#ffffff",
}


class Style(NamedTuple):
    """
    Running text attributes; the default instance is plain text.
    """
    foreground: str | None = None
    background: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False

    @property
    def plain(self):
        return self == _PLAIN


_PLAIN = Style()


class StyledSpan(NamedTuple):
    text: str
    style: Style = _PLAIN


class Token(NamedTuple):
    text: str
    codes: tuple[int, ...] = ()


def tokenize(text, /):
    """
    Split text into Token(run, codes) pairs.

    Each token holds a text run and the codes of the escape sequence that follows it;
    the last token holds the trailing run with no codes. Runs may be empty.
    """
    if not isinstance(text, str):
        raise TypeError("tokenize() argument must be a string")
    position = 0
    for match in SEQUENCE.finditer(text):
        yield Token(text[position:match.start()], tuple(map(int, match.group(1).split(";"))))
        position = match.end()
    yield Token(text[position:])


def apply(style, codes, /):
    """
    Return the style obtained by applying codes, left to right, to style.
    """
    for code in codes:
        match code:
            case 0:
                style = _PLAIN
            case 1:
                style = style._replace(bold=True)
            case 22:
                style = style._replace(bold=False)
            case 3:
                style = style._replace(italic=True)
            case 23:
                style = style._replace(italic=False)
            case 4:
                style = style._replace(underline=True)
            case 24:
                style = style._replace(underline=False)
            case 39:
                style = style._replace(foreground=None)
            case 49:
                style = style._replace(background=None)
            case _ if code in FOREGROUNDS:
                style = style._replace(foreground=FOREGROUNDS[code])
            case _ if code in BACKGROUNDS:
                style = style._replace(background=BACKGROUNDS[code])
            case _:
                pass
    return style


def fold(tokens, /, style=_PLAIN):
    """
    Thread the style through the tokens, yielding a span per non-empty run.
    """
    for token in tokens:
        if token.text:
            yield StyledSpan(token.text, style)
        style = apply(style, token.codes)


def render(text, /):
    """
    Render escape-coded text into a list of StyledSpan values.

    Text without any escape sequence comes back as a single plain span.
    """
    if not isinstance(text, str):
        raise TypeError("render() argument must be a string")
    if SEQUENCE.search(text) is None:
        return [StyledSpan(text)]
    return list(fold(tokenize(text)))


def declarations(style, /, palette=Unset):
    """
    Return the CSS declarations of a style ("color:#cd3131;font-weight:bold").
    """
    palette = coalesce(palette, PALETTE)
    parts = []
    if style.foreground is not None:
        parts.append(f"color:{palette[style.foreground]}")
    if style.background is not None:
        parts.append(f"background-color:{palette[style.background]}")
    if style.bold:
        parts.append("font-weight:bold")
    if style.italic:
        parts.append("font-style:italic")
    if style.underline:
        parts.append("text-decoration:underline")
    return ";".join(parts)


def to_html(spans, /, palette=Unset):
    """
    Emit HTML for spans: escaped text, wrapped in a styled <span> unless the style is plain.

    The palette defaults to PALETTE merged with the host's __palette__ overrides.
    """
    if palette is Unset:
        palette = preference("__palette__", PALETTE)
    parts = []
    for span in spans:
        text = html.escape(span.text)
        if span.style.plain:
            parts.append(text)
        else:
            parts.append(f'<span style="{declarations(span.style, palette)}">{text}</span>')
    return "".join(parts)


def to_text(spans, /):
    """
    Build a rich Text carrying the same styles (terminal display).
    """
    text = Text()
    for span in spans:
        if span.style.plain:
            text.append(span.text)
            continue
        text.append(span.text, RichStyle(
            color=span.style.foreground,
            bgcolor=span.style.background,
            bold=span.style.bold or None,
            italic=span.style.italic or None,
            underline=span.style.underline or None,
        ))
    return text


def highlight(text, /, palette=Unset):
    """
    Render escape-coded text straight to HTML.
    """
    return to_html(render(text), palette)


__all__ = (
    "Style",
    "StyledSpan",
    "Token",
    "PALETTE",
    "tokenize",
    "apply",
    "fold",
    "render",
    "declarations",
    "to_html",
    "to_text",
    "highlight",
)
