# src/format/reformatter.py — v1
"""Source reformatter — whitespace and indentation rules for Clojure code.

Works on a flat token stream rather than a parsed tree:
  1. Tokenize (strings, comments and character literals are opaque tokens)
  2. Split into lines at newlines outside strings
  3. Per line: trim whitespace inside brackets, insert missing separators,
     drop trailing whitespace, recompute leading indentation
  4. Collapse runs of blank lines

The result depends only on the text and the FormatConfig, and formatting
already formatted text returns it unchanged.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import NamedTuple

from cljfmt.config.loader import FormatConfig, IndentRule

_TOKEN_RE = re.compile(
    r"""
    (?P<newline>\r\n|\r|\n)
    |(?P<whitespace>[ \t\f]+)
    |(?P<comma>,+)
    |(?P<comment>;[^\r\n]*?(?=[ \t\f]*(?:[\r\n]|$)))
    |(?P<string>\#?"(?:[^"\\]|\\.)*")
    |(?P<char>\\.[^\s,;()\[\]{}"\\]*)
    |(?P<open>\#\?@?\(|\#\(|\#\{|[(\[{])
    |(?P<close>[)\]}])
    |(?P<prefix>\#'|\#_|\#:[^\s,;()\[\]{}"]*|~@|['`~@^])
    |(?P<atom>[^\s,;()\[\]{}"\\]+)
    """,
    re.VERBOSE | re.DOTALL,
)

_PAIRS = {"(": ")", "[": "]", "{": "}"}

# Token kinds that end a form / may start a form.
_FORM_END = frozenset({"close", "atom", "char", "string"})
_FORM_START = frozenset({"open", "atom", "char", "string", "prefix"})


class ReformatError(ValueError):
    """Raised when source text cannot be tokenized or brackets do not balance."""


class Token(NamedTuple):
    kind: str
    text: str


@dataclass
class _Frame:
    """An open bracket whose closing bracket has not been seen yet."""

    opener: str
    col: int
    line: int
    head: str | None = None
    count: int = 0
    arg_col: int | None = None
    starts_line: list[bool] = field(default_factory=list)


def tokenize(text: str) -> list[Token]:
    """Split source text into tokens, raising ReformatError on bad input."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            line = text.count("\n", 0, pos) + 1
            snippet = text[pos:pos + 20]
            raise ReformatError(f"Cannot read source at line {line}: {snippet!r}")
        tokens.append(Token(match.lastgroup or "atom", match.group()))
        pos = match.end()
    return tokens


def reformat_string(text: str, config: FormatConfig) -> str:
    """Return ``text`` reformatted according to ``config``."""
    lines = _split_lines(tokenize(text))
    stack: list[_Frame] = []
    rendered: list[tuple[str, str]] = []

    for lineno, (line_tokens, newline) in enumerate(lines):
        if config.remove_surrounding_whitespace:
            line_tokens = _trim_surrounding(line_tokens)
        if config.insert_missing_whitespace:
            line_tokens = _insert_missing(line_tokens)
        if config.remove_trailing_whitespace:
            while line_tokens and line_tokens[-1].kind == "whitespace":
                line_tokens = line_tokens[:-1]

        indent = ""
        has_content = any(t.kind != "whitespace" for t in line_tokens)
        if config.indentation and lineno > 0 and has_content:
            while line_tokens[0].kind == "whitespace":
                line_tokens = line_tokens[1:]
            indent = " " * _indent_for(stack, config)

        body = _render_line(line_tokens, stack, lineno, len(indent))
        rendered.append((indent + body, newline))

    if stack:
        frame = stack[-1]
        raise ReformatError(
            f"Unclosed {frame.opener!r} opened at line {frame.line + 1}"
        )

    if config.remove_consecutive_blank_lines:
        rendered = _collapse_blank_lines(rendered, config.max_consecutive_blank_lines)
    return "".join(content + newline for content, newline in rendered)


def _split_lines(tokens: list[Token]) -> list[tuple[list[Token], str]]:
    lines: list[tuple[list[Token], str]] = []
    current: list[Token] = []
    for token in tokens:
        if token.kind == "newline":
            lines.append((current, token.text))
            current = []
        else:
            current.append(token)
    lines.append((current, ""))
    return lines


def _trim_surrounding(tokens: list[Token]) -> list[Token]:
    """Drop whitespace after an opening or before a closing bracket."""
    kept: list[Token] = []
    for i, token in enumerate(tokens):
        if token.kind == "whitespace" and i > 0:
            after_open = tokens[i - 1].kind == "open"
            before_close = i + 1 < len(tokens) and tokens[i + 1].kind == "close"
            if after_open or before_close:
                continue
        kept.append(token)
    return kept


def _insert_missing(tokens: list[Token]) -> list[Token]:
    """Separate adjacent forms such as ``)(`` or ``"a"b`` with a space."""
    result: list[Token] = []
    for token in tokens:
        if (
            result
            and result[-1].kind in _FORM_END
            and token.kind in _FORM_START
        ):
            result.append(Token("whitespace", " "))
        result.append(token)
    return result


def _render_line(
    tokens: list[Token], stack: list[_Frame], lineno: int, col: int,
) -> str:
    """Render one line, updating the bracket stack with output columns."""
    parts: list[str] = []
    first_on_line = True
    after_prefix = False

    for token in tokens:
        kind = token.kind
        if kind in ("atom", "char", "string", "prefix", "open"):
            if not after_prefix and stack:
                head = token.text if kind == "atom" else None
                _add_element(stack[-1], head, col, first_on_line, lineno)
            first_on_line = False
            after_prefix = kind == "prefix"
            if kind == "open":
                stack.append(_Frame(opener=token.text, col=col, line=lineno))
        elif kind == "close":
            if not stack:
                raise ReformatError(f"Unmatched {token.text!r} at line {lineno + 1}")
            frame = stack.pop()
            if _PAIRS[frame.opener[-1]] != token.text:
                raise ReformatError(
                    f"Mismatched {token.text!r} at line {lineno + 1} for "
                    f"{frame.opener!r} opened at line {frame.line + 1}"
                )
            first_on_line = False
            after_prefix = False

        parts.append(token.text)
        if "\n" in token.text:
            col = len(token.text) - token.text.rfind("\n") - 1
        else:
            col += len(token.text)
    return "".join(parts)


def _add_element(
    frame: _Frame, head: str | None, col: int, first_on_line: bool, lineno: int,
) -> None:
    if frame.count == 0:
        frame.head = head if head and _is_symbol(head) else None
    elif frame.count == 1 and lineno == frame.line:
        frame.arg_col = col
    frame.starts_line.append(first_on_line)
    frame.count += 1


def _is_symbol(text: str) -> bool:
    return not (text[0].isdigit() or text[0] in ':#' or
                (text[0] in "+-" and len(text) > 1 and text[1].isdigit()))


def _rule_for(head: str | None, indents: dict[str, IndentRule]) -> IndentRule | None:
    if head is None:
        return None
    if head in indents:
        return indents[head]
    if "/" in head and head != "/":
        return indents.get(head.rsplit("/", 1)[1])
    return None


def _indent_for(stack: list[_Frame], config: FormatConfig) -> int:
    """Column at which the next line's first form should start."""
    if not stack:
        return 0
    frame = stack[-1]
    width = len(frame.opener)
    if not frame.opener.endswith("("):
        return frame.col + width

    rule = _rule_for(frame.head, config.indents)
    if rule == "inner":
        return frame.col + width + 1
    if isinstance(rule, int):
        # Block rule: body indentation once the form after the first
        # ``rule`` arguments starts its own line.
        following = rule + 1
        breaks = frame.count <= following or frame.starts_line[following]
        if breaks and frame.count > rule:
            return frame.col + width + 1

    if frame.head is not None and frame.arg_col is not None:
        return frame.arg_col
    return frame.col + width


def _collapse_blank_lines(
    lines: list[tuple[str, str]], limit: int,
) -> list[tuple[str, str]]:
    # A file ending in a newline yields a final empty, unterminated line.
    tail: list[tuple[str, str]] = []
    if len(lines) > 1 and lines[-1] == ("", ""):
        lines, tail = lines[:-1], lines[-1:]

    kept: list[tuple[str, str]] = []
    run = 0
    for content, newline in lines:
        if content.strip():
            run = 0
        else:
            run += 1
            if run > limit:
                continue
        kept.append((content, newline))
    return kept + tail
