# nadm — Embedded Shell Script Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Build step: inline core.sh into a launcher source file.

The target file carries a placeholder literal (e.g. ``'{{CORE_SH}}'``).
``embed()`` replaces it with a string literal whose decoded value is the
script text, byte for byte.

Escaping runs as ordered passes over the script text:
1. escape introducers doubled (``\\`` -> ``\\\\``)
2. quote characters escaped (`` ` `` -> ``\\```)
3. interpolation starts escaped (``${`` -> ``\\${``), if the style has any
then style-specific control escapes, then the delimiters are wrapped on.

Substitution goes through ``re.sub``, which reads backslashes in the
replacement as group references / escapes. ``protect_replacement()`` doubles
them right before the call. It is a separate pass from the three above.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

# Reserved introducer in re.sub replacement templates
REPLACEMENT_RESERVED = "\\"


class EmbedError(Exception):
    """Base class for build-step failures."""


class PlaceholderMissingError(EmbedError):
    """Target has no placeholder (wrong path, or already built)."""


class PlaceholderAmbiguousError(EmbedError):
    """Target has more than one placeholder."""


class SourceReadError(EmbedError):
    pass


class TargetReadError(EmbedError):
    pass


class TargetWriteError(EmbedError):
    pass


class UnknownStyleError(EmbedError):
    pass


@dataclass(frozen=True)
class LiteralStyle:
    """How a string literal is spelled in the target language."""

    name: str
    escape: str
    quote: str
    opener: str
    closer: str
    interpolation: str | None = None
    controls: dict[str, str] = field(default_factory=dict)


# JavaScript template literal. CR and CRLF inside a template are read
# back as LF, so CR is spelled as an escape.
JS_TEMPLATE = LiteralStyle(
    name="js",
    escape="\\",
    quote="`",
    opener="`",
    closer="`",
    interpolation="${",
    controls={"\r": "\\r"},
)

# Python triple-quoted string. Every '"' is escaped so a trailing quote in
# the script cannot merge with the closing delimiter. The tokenizer turns
# bare CR into LF and rejects NUL, so both are spelled as escapes.
PYTHON_STRING = LiteralStyle(
    name="python",
    escape="\\",
    quote='"',
    opener='"""',
    closer='"""',
    controls={"\r": "\\r", "\x00": "\\x00"},
)

STYLES: dict[str, LiteralStyle] = {
    JS_TEMPLATE.name: JS_TEMPLATE,
    PYTHON_STRING.name: PYTHON_STRING,
}

_SUFFIX_STYLES: dict[str, str] = {
    ".js": "js",
    ".mjs": "js",
    ".cjs": "js",
    ".py": "python",
}


@dataclass(frozen=True)
class BuildReport:
    source: Path
    target: Path
    style: str
    source_chars: int
    output_chars: int


# -----------------------
# Escaping passes
# -----------------------


def escape_escapes(text: str, style: LiteralStyle) -> str:
    """Pass 1: double every escape introducer."""
    return text.replace(style.escape, style.escape * 2)


def escape_quotes(text: str, style: LiteralStyle) -> str:
    """Pass 2: escape the delimiter so the literal cannot end early."""
    return text.replace(style.quote, style.escape + style.quote)


def escape_interpolation(text: str, style: LiteralStyle) -> str:
    """Pass 3: escape interpolation starts (``${`` in JS templates)."""
    if not style.interpolation:
        return text
    return text.replace(
        style.interpolation, style.escape + style.interpolation
    )


def escape_controls(text: str, style: LiteralStyle) -> str:
    for raw, spelled in style.controls.items():
        text = text.replace(raw, spelled)
    return text


def to_literal(text: str, style: LiteralStyle = JS_TEMPLATE) -> str:
    """Return ``text`` as a delimited literal in ``style``.

    Order matters: pass 1 must run first, otherwise the backslashes added
    by passes 2 and 3 would be doubled again.
    """
    escaped = escape_escapes(text, style)
    escaped = escape_quotes(escaped, style)
    escaped = escape_interpolation(escaped, style)
    escaped = escape_controls(escaped, style)
    return style.opener + escaped + style.closer


def protect_replacement(text: str) -> str:
    """Make ``text`` safe as an re.sub replacement template."""
    return text.replace(REPLACEMENT_RESERVED, REPLACEMENT_RESERVED * 2)


# -----------------------
# Embedding
# -----------------------


def style_for(path: Path, default: str | None = None) -> LiteralStyle:
    """Pick the literal style from the target file suffix.

    Falls back to the style named ``default`` for unknown suffixes.
    """
    name = _SUFFIX_STYLES.get(path.suffix.lower())
    if name is None and default:
        return get_style(default)
    if name is None:
        raise UnknownStyleError(
            f"Cannot infer literal style for {path.name}; "
            f"use one of: {', '.join(sorted(STYLES))}"
        )
    return STYLES[name]


def get_style(name: str) -> LiteralStyle:
    try:
        return STYLES[name]
    except KeyError:
        raise UnknownStyleError(
            f"Unknown literal style '{name}'; "
            f"use one of: {', '.join(sorted(STYLES))}"
        ) from None


def embed(
    source_text: str,
    template: str,
    placeholder: str,
    style: LiteralStyle = JS_TEMPLATE,
) -> str:
    """Replace the single ``placeholder`` in ``template`` with a literal.

    Raises:
        PlaceholderMissingError: placeholder not found (already built?)
        PlaceholderAmbiguousError: placeholder found more than once
    """
    count = template.count(placeholder)
    if count == 0:
        raise PlaceholderMissingError(
            f"Placeholder {placeholder} not found. Already built?"
        )
    if count > 1:
        raise PlaceholderAmbiguousError(
            f"Placeholder {placeholder} found {count} times; expected one."
        )

    literal = to_literal(source_text, style)
    replacement = protect_replacement(literal)
    return re.sub(re.escape(placeholder), replacement, template, count=1)


def _write_atomic(path: Path, text: str) -> None:
    """Write via a sibling temp file so the target is never half-written."""
    tmp_path = path.with_name(f".{path.name}.{os.getpid()}.tmp")
    try:
        # newline="" keeps CR/LF in the template exactly as read
        with tmp_path.open("w", encoding="utf-8", newline="") as f:
            f.write(text)
        tmp_path.replace(path)
    except OSError:
        try:
            tmp_path.unlink()
        except OSError:
            pass
        raise


def build(
    source_path: Path,
    target_path: Path,
    placeholder: str,
    style: LiteralStyle | None = None,
    default_style: str | None = None,
) -> BuildReport:
    """Embed ``source_path`` into ``target_path`` in place.

    ``style`` wins; otherwise it comes from the target suffix, then from
    ``default_style``. The target is left untouched on any failure.
    """
    if style is None:
        style = style_for(target_path, default_style)

    try:
        with source_path.open("r", encoding="utf-8", newline="") as f:
            source_text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Cannot read {source_path}: {e}") from e

    try:
        with target_path.open("r", encoding="utf-8", newline="") as f:
            template = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise TargetReadError(f"Cannot read {target_path}: {e}") from e

    output = embed(source_text, template, placeholder, style)

    try:
        _write_atomic(target_path, output)
    except OSError as e:
        raise TargetWriteError(f"Cannot write {target_path}: {e}") from e

    return BuildReport(
        source=source_path,
        target=target_path,
        style=style.name,
        source_chars=len(source_text),
        output_chars=len(output),
    )
