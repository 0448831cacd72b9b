# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-XmlTree - XML element trees from dot-path keyed data.

Builds lxml element trees from nested mappings whose keys are dot-paths
with inline attributes ('order.line[sku=A1]'), and reads trees back into
plain dicts.
"""

__version__ = "0.1.0"

from .builder import TreeBuilder
from .element import Element
from .exceptions import (
    DomOperationError,
    LoadError,
    ParseError,
    RootArityError,
    XmlTreeError,
)
from .loading import from_file, from_mapping, from_string, from_url
from .namespaces import resolve_namespace
from .options import LoadOptions, ParserFlag, SourceType
from .path import PathSegment, parse_path, parse_segment, split_path

__all__ = [
    # Entry points
    "from_string",
    "from_file",
    "from_url",
    "from_mapping",
    # Core classes
    "Element",
    "TreeBuilder",
    # Grammar
    "PathSegment",
    "parse_path",
    "parse_segment",
    "split_path",
    "resolve_namespace",
    # Options
    "LoadOptions",
    "ParserFlag",
    "SourceType",
    # Exceptions
    "XmlTreeError",
    "ParseError",
    "RootArityError",
    "DomOperationError",
    "LoadError",
]
