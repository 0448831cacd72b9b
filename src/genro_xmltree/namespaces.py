# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Namespace resolution for prefixed element and attribute names.

A name is namespaced when it holds exactly one colon. Its prefix is looked
up among the declarations in scope at a context element (the context's own
declarations and those of its ancestors, nearest first). An undeclared
prefix resolves to no namespace.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from lxml import etree

logger = logging.getLogger(__name__)

XML_NAMESPACE = 'http://www.w3.org/XML/1998/namespace'


def is_namespaced(name: str) -> bool:
    """True if name holds exactly one ':'."""
    return name.count(':') == 1


def split_name(name: str) -> tuple[str | None, str]:
    """Split a name into (prefix, local_name); prefix is None if unnamespaced."""
    if not is_namespaced(name):
        return None, name
    prefix, local = name.split(':', 1)
    return prefix, local


def resolve_namespace(
    name: str,
    context: Any = None,
    declarations: Mapping[str | None, str] | None = None,
) -> str | None:
    """Resolve the namespace URI of a prefixed name.

    Args:
        name: Element or attribute name, e.g. 'ns:tag'.
        context: lxml element whose in-scope declarations are searched.
            May be None for a detached root.
        declarations: Declarations about to be made on a new node; they
            shadow the context's.

    Returns:
        The namespace URI, or None if the name is unnamespaced or its
        prefix is not declared.
    """
    prefix, _ = split_name(name)
    if prefix is None:
        # only a node declaring its own default namespace is placed in it
        return declarations.get(None) if declarations else None
    if prefix == 'xml':
        return XML_NAMESPACE
    if declarations and prefix in declarations:
        return declarations[prefix]
    if context is not None:
        uri = context.nsmap.get(prefix)
        if uri is not None:
            return uri
    logger.debug("Prefix %r of %r is not declared, using no namespace", prefix, name)
    return None


def qualify(
    name: str,
    context: Any = None,
    namespace: str | None = None,
    declarations: Mapping[str | None, str] | None = None,
) -> str:
    """Return the lxml (Clark notation) spelling of name.

    Args:
        name: Element or attribute name, optionally prefixed.
        context: lxml element providing the declarations in scope.
        namespace: Explicit namespace URI, overriding prefix resolution.
        declarations: Pending declarations of the node being created.

    Returns:
        '{uri}local' if a namespace applies, otherwise the local name.
    """
    uri = namespace or resolve_namespace(name, context, declarations)
    _, local = split_name(name)
    if uri:
        return etree.QName(uri, local).text
    return local


def prefixed_name(node: Any) -> str:
    """Return the 'prefix:local' name of an lxml node (or local if unprefixed)."""
    qname = etree.QName(node)
    if node.prefix:
        return f"{node.prefix}:{qname.localname}"
    return qname.localname


def prefixed_attribute(key: str, node: Any) -> str:
    """Return the 'prefix:local' spelling of an attribute key of node."""
    qname = etree.QName(key)
    if qname.namespace is None:
        return key
    if qname.namespace == XML_NAMESPACE:
        return f"xml:{qname.localname}"
    for prefix, uri in node.nsmap.items():
        if prefix and uri == qname.namespace:
            return f"{prefix}:{qname.localname}"
    return key
