"""Default title substitutions.

Titles reach the resolver as raw text. Before a title is stored or used
to derive an id it passes through a substitution hook, a plain
``Callable[[str], str]``. Hosts with a full inline processor supply their
own; :func:`default_substitutions` covers attribute references,
character references and the common typographic replacements.
"""

from __future__ import annotations

import html
import re
from typing import Callable, Mapping, Optional

SubstitutionHook = Callable[[str], str]

# Attributes every document defines
INTRINSIC_ATTRIBUTES: dict[str, str] = {
    "empty": "",
    "sp": " ",
    "nbsp": "\u00a0",
    "zwsp": "\u200b",
    "wj": "\u2060",
    "apos": "'",
    "quot": '"',
    "lsquo": "‘",
    "rsquo": "’",
    "ldquo": "“",
    "rdquo": "”",
    "deg": "°",
    "plus": "+",
    "brvbar": "¦",
    "vbar": "|",
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "startsb": "[",
    "endsb": "]",
    "caret": "^",
    "asterisk": "*",
    "tilde": "~",
    "backslash": "\\",
    "backtick": "`",
    "two-colons": "::",
    "two-semicolons": ";;",
}

_ATTRIBUTE_REF_RE = re.compile(r"(\\)?\{(\w[\w-]*)\}")

_REPLACEMENTS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"\(C\)"), "©"),
    (re.compile(r"\(R\)"), "®"),
    (re.compile(r"\(TM\)"), "™"),
    (re.compile(r"(?<=\w)--(?=\w)"), "—"),
    (re.compile(r"\.\.\."), "…"),
    (re.compile(r"(?<=\w)'(?=\w)"), "’"),
]


def substitute_attributes(text: str, attributes: Mapping[str, str]) -> str:
    """Replace ``{name}`` references; unknown or escaped references stay."""

    def _replace(match: re.Match) -> str:
        escaped, name = match.groups()
        if escaped:
            return match.group(0)[1:]
        key = name.lower()
        if key in attributes:
            return attributes[key]
        if key in INTRINSIC_ATTRIBUTES:
            return INTRINSIC_ATTRIBUTES[key]
        return match.group(0)

    return _ATTRIBUTE_REF_RE.sub(_replace, text)


def apply_replacements(text: str) -> str:
    for pattern, replacement in _REPLACEMENTS:
        text = pattern.sub(replacement, text)
    return text


def default_substitutions(attributes: Optional[Mapping[str, str]] = None) -> SubstitutionHook:
    """Build the default title substitution hook.

    Args:
        attributes: Document attributes available to ``{name}`` references.
            The mapping is read at call time, so entries added while the
            document is parsed are honoured.
    """
    attrs = attributes if attributes is not None else {}

    def substitute(text: str) -> str:
        text = substitute_attributes(text, attrs)
        if "&" in text:
            text = html.unescape(text)
        return apply_replacements(text)

    return substitute
