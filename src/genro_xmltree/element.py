# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Element - thin facade over an lxml element.

Element wraps a native lxml node instead of subclassing it. All structural
changes go through a small set of methods (add_child, add_attribute,
set_value, remove_child, parent, all_namespaces) so the builder never
touches lxml directly.

Names passed to add_child and add_attribute may be prefixed ('ns:tag');
the prefix is resolved against the declarations in scope at this element
unless an explicit namespace is given.

Example:
    >>> root = from_mapping({'order[id=7]': {'line': ['a', 'b']}})
    >>> root.to_array()
    {'@attributes': {'id': '7'}, 'line': ['a', 'b']}
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Iterator, Mapping

from lxml import etree

from .exceptions import DomOperationError
from .namespaces import (
    is_namespaced,
    prefixed_attribute,
    prefixed_name,
    qualify,
    resolve_namespace,
)


class Element:
    """Facade over a native lxml element.

    Attributes:
        element: The wrapped lxml element.
        scope: Namespace URI the children accessors are limited to, or
            None to see children in every namespace.
    """

    __slots__ = ('_element', '_scope')

    def __init__(self, element: etree._Element, scope: str | None = None) -> None:
        """Initialize an Element.

        Args:
            element: The native lxml element to wrap.
            scope: Optional namespace URI limiting children(), each(),
                to_array() and remove_child() by name.
        """
        self._element = element
        self._scope = scope or None

    def _wrap(self, node: etree._Element) -> Element:
        return type(self)(node, self._scope)

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"Element({self.name!r}, children={len(self)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self._element is other._element

    def __hash__(self) -> int:
        return hash(self._element)

    def __bool__(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._child_nodes())

    def __iter__(self) -> Iterator[Element]:
        return iter(self.children())

    # ==================== Properties ====================

    @property
    def element(self) -> etree._Element:
        """The wrapped lxml element."""
        return self._element

    @property
    def scope(self) -> str | None:
        return self._scope

    @property
    def name(self) -> str:
        """Element name as written, 'prefix:local' when prefixed."""
        return prefixed_name(self._element)

    @property
    def local_name(self) -> str:
        return etree.QName(self._element).localname

    @property
    def namespace(self) -> str | None:
        """Namespace URI of the element, or None."""
        return etree.QName(self._element).namespace

    @property
    def tag(self) -> str:
        """Element tag in Clark notation ('{uri}local')."""
        return self._element.tag

    # ==================== Children ====================

    def add_child(
        self,
        name: str,
        value: Any = None,
        namespace: str | None = None,
        nsmap: Mapping[str | None, str] | None = None,
    ) -> Element:
        """Append a new child element and return it.

        Args:
            name: Child name, optionally prefixed ('ns:tag').
            value: Optional text content.
            namespace: Explicit namespace URI, overriding prefix resolution.
            nsmap: Namespace declarations to make on the new child.

        Returns:
            The new child Element.

        Raises:
            DomOperationError: If lxml rejects the name or declarations, or
                if the child would be in no namespace under a default
                namespace (XML 1.0 has no way to write that back out).
        """
        try:
            tag = qualify(name, self._element, namespace, nsmap)
            if not tag.startswith('{') and self._element.nsmap.get(None):
                raise DomOperationError(
                    f"Cannot add {name!r} in no namespace under <{self.name}>: "
                    f"it is in the default namespace {self._element.nsmap[None]!r}"
                )
            child = etree.SubElement(self._element, tag, nsmap=dict(nsmap) if nsmap else None)
        except (ValueError, TypeError) as exc:
            raise DomOperationError(f"Cannot add child {name!r} to <{self.name}>: {exc}") from exc
        if value is not None:
            child.text = str(value)
        return self._wrap(child)

    def children(self, name: str | None = None) -> list[Element]:
        """Return child elements in document order, optionally by name.

        Args:
            name: Child name, optionally prefixed. Unprefixed names match
                children in the scope namespace (no namespace if unscoped).
        """
        nodes = self._child_nodes()
        if name is not None:
            tag = self._child_tag(name)
            nodes = [node for node in nodes if node.tag == tag]
        return [self._wrap(node) for node in nodes]

    def each(self, callback: Callable[[str, Element], Any]) -> Element:
        """Call callback(name, child) for every child in document order."""
        for node in self._child_nodes():
            callback(self._key(node), self._wrap(node))
        return self

    def remove_child(self, child: str | Element | etree._Element) -> Element:
        """Detach a child and its subtree from the document.

        Args:
            child: A child name (first match is removed), an Element, or a
                native lxml element.

        Returns:
            self, for chaining.

        Raises:
            DomOperationError: If no child has that name or the node has
                no parent.
        """
        if isinstance(child, str):
            matches = self.children(child)
            if not matches:
                raise DomOperationError(f"<{self.name}> has no child {child!r}")
            node = matches[0]._element
        elif isinstance(child, Element):
            node = child._element
        elif etree.iselement(child):
            node = child
        else:
            raise DomOperationError(f"Cannot remove a {type(child).__name__}")

        parent = node.getparent()
        if parent is None:
            raise DomOperationError(f"<{prefixed_name(node)}> has no parent to be removed from")
        parent.remove(node)
        return self

    def append(self, other: Element | etree._Element) -> Element:
        """Append a deep copy of a node from any tree as the last child."""
        node = other._element if isinstance(other, Element) else other
        if not etree.iselement(node):
            raise DomOperationError(f"Cannot append a {type(other).__name__}")
        imported = copy.deepcopy(node)
        imported.tail = None
        self._element.append(imported)
        return self

    def parent(self) -> Element | None:
        """Return the parent Element, or None for the root."""
        node = self._element.getparent()
        if node is None:
            return None
        return self._wrap(node)

    def add_children(self, children: Mapping[str, Any]) -> Element:
        """Build children from dot-path keyed data. See TreeBuilder.add_children."""
        from .builder import TreeBuilder
        return TreeBuilder().add_children(self, children)

    # ==================== Value ====================

    def value(self) -> str:
        """Return the element's own text (children's text excluded)."""
        parts = [self._element.text or '']
        parts.extend(child.tail or '' for child in self._element)
        return ''.join(parts)

    def set_value(self, value: Any) -> Element:
        """Set the element text; None clears it."""
        self._element.text = None if value is None else str(value)
        return self

    # ==================== Attributes ====================

    def add_attribute(self, name: str, value: Any = None, namespace: str | None = None) -> Element:
        """Set an attribute, resolving a prefixed name in scope.

        'xmlns:p' names are turned into namespace declarations.

        Raises:
            DomOperationError: If lxml rejects the attribute name.
        """
        if name.startswith('xmlns:'):
            return self.add_namespace(name[len('xmlns:'):], value)
        if name == 'xmlns':
            raise DomOperationError(
                f"A default namespace can only be declared when <{self.name}> is created"
            )
        try:
            key = qualify(name, self._element, namespace)
            self._element.set(key, '' if value is None else str(value))
        except ValueError as exc:
            raise DomOperationError(f"Cannot set attribute {name!r} on <{self.name}>: {exc}") from exc
        return self

    def add_attributes(self, attributes: Mapping[str, Any]) -> Element:
        """Set several attributes at once."""
        for name, value in attributes.items():
            self.add_attribute(name, value)
        return self

    def has_attribute(self, name: str) -> bool:
        return self._attribute_key(name) in self._element.attrib

    def has_attributes(self) -> bool:
        return len(self._element.attrib) > 0

    def get_attr(self, name: str, default: Any = None) -> Any:
        """Get attribute value by (optionally prefixed) name."""
        return self._element.get(self._attribute_key(name), default)

    def attributes(self) -> dict[str, str]:
        """Return all attributes keyed by 'prefix:local' name."""
        return {
            prefixed_attribute(key, self._element): value
            for key, value in self._element.attrib.items()
        }

    # ==================== Namespaces ====================

    def add_namespace(self, prefix: str, uri: str) -> Element:
        """Declare xmlns:prefix="uri" on this element.

        lxml cannot add a declaration to an existing node, and moving a
        subtree under a new node rewrites the prefixes of any namespace the
        new node also declares. So this element, its subtree and the
        siblings after it are recreated in place (same names, prefixes,
        attributes, text and tails) and the originals are detached.

        This wrapper follows the new node. Other wrappers of this element,
        of its descendants or of its following siblings still point at the
        detached originals and must be fetched again.

        Raises:
            DomOperationError: If prefix is empty, if this element already
                binds prefix to another URI, or if lxml rejects it.
        """
        if not prefix:
            raise DomOperationError("Namespace declarations need a prefix")
        old = self._element
        bound = _bindings(old)
        if bound.get(prefix) == uri:
            return self
        if prefix in bound:
            raise DomOperationError(
                f"<{self.name}> already binds {prefix!r} to {bound[prefix]!r}"
            )
        parent = old.getparent()
        if parent is None:
            try:
                self._element = _rebuild(old, None, {prefix: uri})
            except (ValueError, TypeError) as exc:
                raise DomOperationError(f"Cannot declare namespace {prefix!r}: {exc}") from exc
            return self

        following = [old, *old.itersiblings()]
        size = len(parent)
        try:
            new = _rebuild(old, parent, {prefix: uri})
            for sibling in following[1:]:
                _rebuild(sibling, parent)
        except (ValueError, TypeError) as exc:
            del parent[size:]
            raise DomOperationError(f"Cannot declare namespace {prefix!r}: {exc}") from exc
        for node in following:
            parent.remove(node)
        self._element = new
        return self

    def all_namespaces(self) -> dict[str | None, str]:
        """Return the declarations in scope here, nearest declaration wins."""
        return dict(self._element.nsmap)

    def get_namespace(self, name: str) -> str | None:
        """Resolve the namespace URI of a prefixed name in this scope."""
        return resolve_namespace(name, self._element)

    # ==================== Conversion ====================

    def to_array(self, child: str | None = None) -> Any:
        """Return a structural snapshot of the element's content.

        The snapshot is a dict holding '@attributes' (if any), one entry
        per child name and '@value' for non-blank text. Repeated child
        names collapse into a list. A child with neither attributes nor
        children is represented by its text.

        Args:
            child: If given, return only the snapshot entry for that child
                name (None if absent).
        """
        snapshot = self._content(self._element)
        if child is not None:
            return snapshot.get(child)
        return snapshot

    def to_string(self, pretty_print: bool = False) -> str:
        """Serialize the element (and its subtree) to XML text."""
        return etree.tostring(self._element, encoding='unicode', pretty_print=pretty_print)

    # ==================== Internals ====================

    def _child_nodes(self, node: etree._Element | None = None) -> list[etree._Element]:
        node = self._element if node is None else node
        children = node.iterchildren(tag=etree.Element)
        if self._scope is None:
            return list(children)
        return [c for c in children if etree.QName(c).namespace == self._scope]

    def _child_tag(self, name: str) -> str:
        default = None if is_namespaced(name) else self._scope
        try:
            return qualify(name, self._element, default)
        except ValueError as exc:
            raise DomOperationError(f"Invalid child name {name!r}: {exc}") from exc

    def _attribute_key(self, name: str) -> str:
        try:
            return qualify(name, self._element)
        except ValueError as exc:
            raise DomOperationError(f"Invalid attribute name {name!r}: {exc}") from exc

    def _key(self, node: etree._Element) -> str:
        if self._scope is not None:
            return etree.QName(node).localname
        return prefixed_name(node)

    def _content(self, node: etree._Element) -> dict[str, Any]:
        result: dict[str, Any] = {}
        attributes = {
            prefixed_attribute(key, node): value for key, value in node.attrib.items()
        }
        if attributes:
            result['@attributes'] = attributes
        for child in self._child_nodes(node):
            key = self._key(child)
            data = self._snapshot(child)
            if key not in result:
                result[key] = data
            elif isinstance(result[key], list):
                result[key].append(data)
            else:
                result[key] = [result[key], data]
        text = self._wrap(node).value()
        if text.strip():
            result['@value'] = text
        return result

    def _snapshot(self, node: etree._Element) -> Any:
        if not node.attrib and not self._child_nodes(node):
            return self._wrap(node).value()
        return self._content(node)


def _bindings(node: etree._Element) -> dict[str | None, str]:
    """Prefixes declared on node itself, plus the one spelling its own name."""
    parent = node.getparent()
    inherited = parent.nsmap if parent is not None else {}
    bindings: dict[str | None, str] = {}
    namespace = etree.QName(node).namespace
    if namespace is not None:
        bindings[node.prefix] = namespace
    for prefix, uri in node.nsmap.items():
        if inherited.get(prefix) != uri:
            bindings[prefix] = uri
    return bindings


def _rebuild(
    node: etree._Element,
    parent: etree._Element | None,
    extra: Mapping[str, str] | None = None,
) -> etree._Element:
    """Recreate node and its subtree as the last child of parent.

    Nodes are created in place rather than moved, so lxml keeps every
    prefix as declared.
    """
    if not isinstance(node.tag, str):
        clone = copy.copy(node)
        clone.tail = node.tail
        if parent is not None:
            parent.append(clone)
        return clone

    nsmap = {**_bindings(node), **(extra or {})}
    if parent is None:
        clone = etree.Element(node.tag, dict(node.attrib), nsmap=nsmap or None)
    else:
        clone = etree.SubElement(parent, node.tag, dict(node.attrib), nsmap=nsmap or None)
    clone.text = node.text
    clone.tail = node.tail
    for child in node:
        _rebuild(child, clone)
    return clone
