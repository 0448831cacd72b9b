# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Load options for the document entry points."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum, IntFlag
from typing import Any, Mapping

from lxml import etree

from .exceptions import LoadError


class ParserFlag(IntFlag):
    """libxml2 parser option bits understood by the loaders."""
    RECOVER = 1
    NOENT = 2
    DTDLOAD = 4
    DTDATTR = 8
    DTDVALID = 16
    NOBLANKS = 256
    NONET = 2048
    NSCLEAN = 8192
    NOCDATA = 16384
    HUGE = 1 << 19


class SourceType(Enum):
    """How from_string interprets its data argument."""
    STRING = 'string'
    URL = 'url'


@dataclass
class LoadOptions:
    """Options shared by from_string, from_file and from_url.

    Attributes:
        parser_flags: Bitwise OR of ParserFlag values.
        namespace_uri: Namespace the returned root is scoped to; its
            children accessors only see children in that namespace.
        namespace_is_prefix: If True, namespace_uri is a prefix resolved
            against the root's declarations.
        source_type: For from_string, whether data is the document itself
            or a URL to load it from.
    """
    parser_flags: int = 0
    namespace_uri: str = ''
    namespace_is_prefix: bool = False
    source_type: SourceType = SourceType.STRING

    @classmethod
    def coerce(cls, options: LoadOptions | Mapping[str, Any] | None) -> LoadOptions:
        """Build LoadOptions from None, a LoadOptions, or a dict of fields.

        Raises:
            LoadError: If a dict holds an unknown option name or an
                unknown source_type.
        """
        if options is None:
            return cls()
        if isinstance(options, LoadOptions):
            return options
        known = {f.name for f in fields(cls)}
        unknown = set(options) - known
        if unknown:
            raise LoadError(f"Unknown load options: {sorted(unknown)}")
        values = dict(options)
        if 'source_type' in values:
            try:
                values['source_type'] = SourceType(values['source_type'])
            except ValueError as exc:
                raise LoadError(f"Unknown source_type: {values['source_type']!r}") from exc
        return cls(**values)

    def make_parser(self) -> etree.XMLParser:
        """Create the lxml parser matching parser_flags."""
        flags = ParserFlag(self.parser_flags)
        return etree.XMLParser(
            recover=ParserFlag.RECOVER in flags,
            resolve_entities=ParserFlag.NOENT in flags,
            load_dtd=ParserFlag.DTDLOAD in flags,
            attribute_defaults=ParserFlag.DTDATTR in flags,
            dtd_validation=ParserFlag.DTDVALID in flags,
            remove_blank_text=ParserFlag.NOBLANKS in flags,
            no_network=ParserFlag.NONET in flags,
            ns_clean=ParserFlag.NSCLEAN in flags,
            strip_cdata=ParserFlag.NOCDATA in flags,
            huge_tree=ParserFlag.HUGE in flags,
        )
