# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Document entry points.

Each function returns the document root wrapped in an Element:

- from_string(data): parse XML text or bytes
- from_file(path): read a local file and parse it
- from_url(url): fetch a URL and parse the response body
- from_mapping(mapping): build a new document from dot-path keyed data

Example:
    >>> root = from_string('<config><name>MyApp</name></config>')
    >>> root.to_array()
    {'name': 'MyApp'}
"""

from __future__ import annotations

import logging
import urllib.request
from pathlib import Path
from typing import Any, Mapping

from lxml import etree

from .builder import TreeBuilder
from .element import Element
from .exceptions import LoadError
from .options import LoadOptions, SourceType

logger = logging.getLogger(__name__)

OptionsArg = LoadOptions | Mapping[str, Any] | None


def from_string(data: str | bytes, options: OptionsArg = None) -> Element:
    """Parse an XML document held in a string.

    Args:
        data: XML text or bytes. With source_type=SourceType.URL, the URL
            of the document instead.
        options: LoadOptions, or a dict of LoadOptions fields.

    Raises:
        LoadError: If the document cannot be fetched or parsed.
    """
    opts = LoadOptions.coerce(options)
    if opts.source_type is SourceType.URL:
        return from_url(data, opts)
    return _parse(data, opts)


def from_file(path: str | Path, options: OptionsArg = None) -> Element:
    """Read and parse an XML file.

    Raises:
        LoadError: If the file cannot be read or parsed.
    """
    opts = LoadOptions.coerce(options)
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise LoadError(f"Cannot read {path}: {exc}") from exc
    return _parse(data, opts, base_url=str(path))


def from_url(url: str, options: OptionsArg = None) -> Element:
    """Fetch and parse an XML document from a URL.

    Raises:
        LoadError: If the URL cannot be fetched or the body parsed.
    """
    opts = LoadOptions.coerce(options)
    if isinstance(url, bytes):
        url = url.decode('utf-8')
    try:
        with urllib.request.urlopen(url) as response:
            data = response.read()
    except (OSError, ValueError) as exc:
        raise LoadError(f"Cannot fetch {url}: {exc}") from exc
    return _parse(data, opts, base_url=url)


def from_mapping(mapping: Mapping[str, Any]) -> Element:
    """Build a new document from a mapping with exactly one key.

    Example:
        >>> from_mapping({'html.body[class=main]': {'p': 'Hello'}}).to_string()
        '<html><body class="main"><p>Hello</p></body></html>'

    Raises:
        RootArityError: If mapping does not have exactly one key.
    """
    return TreeBuilder().build_root(mapping)


def _parse(data: str | bytes, opts: LoadOptions, base_url: str | None = None) -> Element:
    if isinstance(data, str) and data.lstrip().startswith('<?xml'):
        # lxml refuses str input carrying an encoding declaration
        data = data.encode('utf-8')
    try:
        node = etree.fromstring(data, opts.make_parser(), base_url=base_url)
    except etree.XMLSyntaxError as exc:
        raise LoadError(f"Cannot parse document: {exc}") from exc
    if node is None:
        raise LoadError("Document has no root element")

    root = Element(node, _scope(node, opts))
    logger.debug("Loaded document rooted at <%s>", root.name)
    return root


def _scope(node: etree._Element, opts: LoadOptions) -> str | None:
    if not opts.namespace_uri:
        return None
    if not opts.namespace_is_prefix:
        return opts.namespace_uri
    uri = node.nsmap.get(opts.namespace_uri)
    if uri is None:
        raise LoadError(f"Namespace prefix {opts.namespace_uri!r} is not declared on the root")
    return uri
