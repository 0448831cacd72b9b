# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeBuilder - materializes dot-path keyed data into XML elements."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from lxml import etree

from .element import Element
from .exceptions import DomOperationError, RootArityError
from .namespaces import qualify
from .path import PathSegment, parse_path, parse_segment, split_path

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Builds child elements from nested mappings and sequences.

    Every key of a mapping is a dot-path; each segment creates one new
    element (with the segment's inline attributes) under the previous one,
    and the value is then applied to the last element created:

    - mapping: its entries are added as children, recursively
    - list/tuple: repeating elements (see add_children)
    - anything else: text content (None leaves the element empty)

    Example:
        >>> root = Element(etree.Element('catalog'))
        >>> _ = TreeBuilder().add_children(root, {
        ...     'book[lang=en].title': 'Dune',
        ...     'shelf.item': [{'id': '1'}, {'id': '2'}],
        ... })
        >>> root.to_string()
        '<catalog><book lang="en"><title>Dune</title></book><shelf><item><id>1</id></item><item><id>2</id></item></shelf></catalog>'

    Nothing is rolled back on failure: elements created before a ParseError
    or DomOperationError stay attached.
    """

    def add_children(self, parent: Element, children: Mapping[str, Any]) -> Element:
        """Add children described by a dot-path keyed mapping.

        A list value under key 'k' yields one element named after the
        last segment of 'k' per item: the first item fills the element
        created by the path, each further item gets a new sibling under
        the same parent, carrying the same inline attributes.

        Args:
            parent: Element receiving the new children.
            children: Mapping of dot-path keys to values.

        Returns:
            parent, for chaining.

        Raises:
            RootArityError: If children is not a mapping.
            ParseError: If a key is not a valid dot-path.
            DomOperationError: If lxml rejects a name.
        """
        if not isinstance(children, Mapping):
            raise RootArityError(
                f"Children of <{parent.name}> must be a mapping, not {type(children).__name__}"
            )
        for key, value in children.items():
            segments = parse_path(key)
            target = self.nest(parent, segments)
            self._assign(target, segments[-1], value)
        return parent

    def nest(self, parent: Element, path: str | list[PathSegment]) -> Element:
        """Create one element per path segment, each under the previous.

        Returns:
            The element created for the last segment.
        """
        segments = parse_path(path) if isinstance(path, str) else path
        cursor = parent
        for segment in segments:
            cursor = self.create(cursor, segment)
        return cursor

    def create(self, parent: Element, segment: PathSegment) -> Element:
        """Create the element for a single segment under parent."""
        nsmap, attributes = split_declarations(segment.attributes)
        child = parent.add_child(segment.name, nsmap=nsmap)
        child.add_attributes(attributes)
        return child

    def build_root(self, mapping: Mapping[str, Any]) -> Element:
        """Build a new document from a single-key mapping.

        The key's first segment names the root; further segments become a
        chain under it, filled with the value.

        Raises:
            RootArityError: If mapping is not a mapping with exactly one key.
        """
        if not isinstance(mapping, Mapping):
            raise RootArityError(
                f"Root must be a mapping with exactly one key, not {type(mapping).__name__}"
            )
        if len(mapping) != 1:
            raise RootArityError(
                f"Root mapping must contain exactly one key, {len(mapping)} given"
            )

        (key, value), = mapping.items()
        raw = split_path(key)
        segment = parse_segment(raw[0])
        nsmap, attributes = split_declarations(segment.attributes)
        try:
            node = etree.Element(
                qualify(segment.name, declarations=nsmap), nsmap=nsmap or None
            )
        except (ValueError, TypeError) as exc:
            raise DomOperationError(f"Cannot create root {segment.name!r}: {exc}") from exc

        root = Element(node)
        root.add_attributes(attributes)
        logger.debug("Building document rooted at <%s>", root.name)

        children = {'.'.join(raw[1:]): value} if len(raw) > 1 else value
        return self.add_children(root, children)

    def _assign(self, target: Element, segment: PathSegment, value: Any) -> None:
        if isinstance(value, Mapping):
            self.add_children(target, value)
        elif isinstance(value, (list, tuple)):
            if not value:
                return
            self._assign(target, segment, value[0])
            parent = target.parent()
            for item in value[1:]:
                sibling = self.create(parent, segment)
                self._assign(sibling, segment, item)
        else:
            target.set_value(value)


def split_declarations(attributes: Mapping[str, str]) -> tuple[dict[str | None, str], dict[str, str]]:
    """Separate xmlns declarations from regular attributes.

    Returns:
        Tuple of (nsmap, attributes); 'xmlns' maps to the None prefix.
    """
    nsmap: dict[str | None, str] = {}
    regular: dict[str, str] = {}
    for name, value in attributes.items():
        if name == 'xmlns':
            nsmap[None] = value
        elif name.startswith('xmlns:'):
            nsmap[name[len('xmlns:'):]] = value
        else:
            regular[name] = value
    return nsmap, regular
