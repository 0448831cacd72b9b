# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Dot-path and inline attribute grammar.

A path is a sequence of segments separated by dots. Each segment is an
element name optionally followed by an attribute block::

    order.line[sku=A-12 note="two words"].qty

Dots inside an attribute block do not split the path, so attribute values
may hold dotted text (``link[href=www.example.com]``). Inside a block a
value may be double-quoted or single-quoted; a quoted value keeps spaces,
dots and brackets literally. Quotes only open a value right after ``=``.

Example:
    >>> [s.name for s in parse_path('a.b[x=1].c')]
    ['a', 'b', 'c']
    >>> parse_segment('item[x=1 y="a b"]').attributes
    {'x': '1', 'y': 'a b'}
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .exceptions import ParseError

QUOTES = '"\''


@dataclass(frozen=True)
class PathSegment:
    """One dot-separated component of a path."""
    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    raw: str = ''


def split_path(path: str) -> list[str]:
    """Split a dot-path into raw segments, keeping attribute blocks intact.

    Args:
        path: Dotted path, e.g. ``'a.b[x=1.5].c'``.

    Returns:
        List of raw segment strings in path order.

    Raises:
        ParseError: If the path is empty, has an empty segment, or has an
            unbalanced bracket or unterminated quote.
    """
    if not path:
        raise ParseError("Empty path")

    segments: list[str] = []
    current: list[str] = []
    in_block = False
    quote: str | None = None
    prev = ''

    for pos, char in enumerate(path):
        if quote is not None:
            if char == quote:
                quote = None
        elif in_block:
            if char in QUOTES and prev == '=':
                quote = char
            elif char == ']':
                in_block = False
            elif char == '[':
                raise ParseError(f"Nested '[' at position {pos} in {path!r}")
        elif char == '[':
            in_block = True
        elif char == ']':
            raise ParseError(f"Unbalanced ']' at position {pos} in {path!r}")
        elif char == '.':
            segments.append(_close_segment(current, path))
            current = []
            prev = char
            continue
        current.append(char)
        prev = char

    if quote is not None:
        raise ParseError(f"Unterminated quote in {path!r}")
    if in_block:
        raise ParseError(f"Unterminated '[' in {path!r}")

    segments.append(_close_segment(current, path))
    return segments


def _close_segment(chars: list[str], path: str) -> str:
    segment = ''.join(chars)
    if not segment:
        raise ParseError(f"Empty segment in {path!r}")
    return segment


def parse_path(path: str) -> list[PathSegment]:
    """Parse a dot-path into PathSegment objects.

    Args:
        path: Dotted path with optional attribute blocks.

    Returns:
        List of PathSegment in path order.

    Raises:
        ParseError: If the path or any attribute block is malformed.
    """
    return [parse_segment(raw) for raw in split_path(path)]


def parse_segment(segment: str) -> PathSegment:
    """Parse ``name[k=v k2="v 2"]`` into a PathSegment.

    Args:
        segment: A single raw path segment.

    Returns:
        PathSegment with the bare name and the parsed attributes.

    Raises:
        ParseError: If the name is empty, the block is unterminated, text
            follows the block, or an attribute token is malformed.
    """
    start = segment.find('[')
    if start < 0:
        if ']' in segment:
            raise ParseError(f"Unbalanced ']' in {segment!r}")
        name, attributes = segment, {}
    else:
        end = _block_end(segment, start)
        if end != len(segment) - 1:
            raise ParseError(
                f"Unexpected text {segment[end + 1:]!r} after attribute block in {segment!r}"
            )
        name = segment[:start]
        attributes = parse_attributes(segment[start + 1:end])

    if not name:
        raise ParseError(f"Missing element name in {segment!r}")
    return PathSegment(name, attributes, raw=segment)


def _block_end(segment: str, start: int) -> int:
    """Return the index of the ']' closing the block opened at start."""
    quote: str | None = None
    prev = ''
    for pos in range(start + 1, len(segment)):
        char = segment[pos]
        if quote is not None:
            if char == quote:
                quote = None
        elif char in QUOTES and prev == '=':
            quote = char
        elif char == ']':
            return pos
        elif char == '[':
            raise ParseError(f"Nested '[' at position {pos} in {segment!r}")
        prev = char
    raise ParseError(f"Unterminated '[' in {segment!r}")


def parse_attributes(body: str) -> dict[str, str]:
    """Tokenize the body of an attribute block into a dict.

    Tokens are ``key=value`` pairs separated by whitespace. A value is a
    quoted run or a contiguous non-space token; quotes wrapping a bare token
    are stripped. A repeated key keeps its last value.

    Args:
        body: Text between the brackets, e.g. ``'x=1 y="a b"'``.

    Returns:
        Dict of attribute name to string value.

    Raises:
        ParseError: If a token has no '=', an empty key, or an unterminated
            quoted value.
    """
    attributes: dict[str, str] = {}
    pos = 0
    length = len(body)

    while pos < length:
        if body[pos].isspace():
            pos += 1
            continue

        start = pos
        while pos < length and not body[pos].isspace() and body[pos] != '=':
            pos += 1
        key = body[start:pos]
        if pos >= length or body[pos] != '=':
            raise ParseError(f"Attribute token {key!r} has no '=' in {body!r}")
        if not key:
            raise ParseError(f"Missing attribute name at position {start} in {body!r}")
        pos += 1

        if pos < length and body[pos] in QUOTES:
            quote = body[pos]
            end = body.find(quote, pos + 1)
            if end < 0:
                raise ParseError(f"Unterminated quote for attribute {key!r} in {body!r}")
            value = body[pos + 1:end]
            pos = end + 1
        else:
            start = pos
            while pos < length and not body[pos].isspace():
                pos += 1
            value = body[start:pos].strip(QUOTES)

        attributes[key] = value

    return attributes
