# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""XmlTree exceptions."""

from __future__ import annotations


class XmlTreeError(Exception):
    """Base exception for XmlTree errors."""

    pass


class ParseError(XmlTreeError):
    """Raised when a dot-path or inline attribute block is malformed."""

    pass


class RootArityError(XmlTreeError):
    """Raised when a root mapping does not have exactly one key."""

    pass


class DomOperationError(XmlTreeError):
    """Raised when the XML engine rejects a structural operation."""

    pass


class LoadError(XmlTreeError):
    """Raised when a document cannot be read or parsed."""

    pass
