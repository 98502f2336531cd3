"""Shell-style glob patterns compiled to anchored regular expressions.

Grammar:

- ``*`` matches any run of zero or more characters
- ``?`` matches exactly one character
- ``[abc]`` / ``[a-z]`` match one character from the class,
  ``[!a-z]`` or ``[^a-z]`` one character outside it
- ``{foo,bar}`` matches any of the comma-separated alternatives
- ``\\x`` matches ``x`` literally
- anything else matches itself

A pattern always matches the whole key, never a substring.
"""

import re
from dataclasses import dataclass, field

from .errors import PatternError

DEFAULT_PATTERN = "*"


@dataclass(frozen=True)
class Matcher:
    """A compiled glob pattern."""

    pattern: str
    regex: re.Pattern = field(repr=False)

    def matches(self, key: str | bytes) -> bool:
        if isinstance(key, bytes):
            key = key.decode("utf-8", "backslashreplace")
        return self.regex.fullmatch(key) is not None


def compile(pattern: str) -> Matcher:
    """Compile ``pattern`` into a ``Matcher``.

    Raises:
        PatternError: For an unterminated or empty character class, a
            reversed range, an unterminated ``{`` or a trailing ``\\``.
    """
    source, _ = _translate(pattern, 0, in_braces=False)
    return Matcher(pattern=pattern, regex=re.compile(source, re.DOTALL))


def _translate(pat: str, i: int, in_braces: bool) -> tuple[str, int]:
    """Translate ``pat`` from index ``i``.

    Inside braces, stops at the first top-level ``,`` or ``}`` and
    returns its index; otherwise consumes the whole pattern.
    """
    n = len(pat)
    res = ""
    while i < n:
        c = pat[i]
        if c == "*":
            # collapse runs of * into one
            while i + 1 < n and pat[i + 1] == "*":
                i += 1
            res += ".*"
        elif c == "?":
            res += "."
        elif c == "[":
            cls, i = _translate_class(pat, i)
            res += cls
            continue
        elif c == "{":
            alts, i = _translate_alternatives(pat, i)
            res += alts
            continue
        elif in_braces and c in ",}":
            return res, i
        elif c == "\\":
            if i + 1 >= n:
                raise PatternError(pat, i, "trailing escape")
            i += 1
            res += re.escape(pat[i])
        else:
            res += re.escape(c)
        i += 1
    return res, i


def _translate_class(pat: str, start: int) -> tuple[str, int]:
    n = len(pat)
    i = start + 1
    negate = False
    if i < n and pat[i] in "!^":
        negate = True
        i += 1
    items: list[str] = []
    while i < n and pat[i] != "]":
        lo = pat[i]
        if lo == "\\":
            if i + 1 >= n:
                raise PatternError(pat, i, "trailing escape")
            i += 1
            lo = pat[i]
        i += 1
        if i + 1 < n and pat[i] == "-" and pat[i + 1] != "]":
            hi = pat[i + 1]
            if hi == "\\":
                if i + 2 >= n:
                    raise PatternError(pat, i + 1, "trailing escape")
                hi = pat[i + 2]
                i += 1
            if hi < lo:
                raise PatternError(pat, i - 1, f"invalid range {lo}-{hi}")
            items.append(_class_char(lo) + "-" + _class_char(hi))
            i += 2
        else:
            items.append(_class_char(lo))
    if i >= n:
        raise PatternError(pat, start, "unterminated character class")
    if not items:
        raise PatternError(pat, start, "empty character class")
    return "[" + ("^" if negate else "") + "".join(items) + "]", i + 1


def _class_char(c: str) -> str:
    if c in "\\]^-[":
        return "\\" + c
    return c


def _translate_alternatives(pat: str, start: int) -> tuple[str, int]:
    n = len(pat)
    i = start + 1
    alts: list[str] = []
    while True:
        alt, i = _translate(pat, i, in_braces=True)
        if i >= n:
            raise PatternError(pat, start, "unterminated alternatives")
        alts.append(alt)
        if pat[i] == "}":
            return "(?:" + "|".join(alts) + ")", i + 1
        i += 1
