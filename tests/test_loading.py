# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for the document entry points and load options."""

import pytest

from genro_xmltree import (
    LoadError,
    LoadOptions,
    ParserFlag,
    SourceType,
    from_file,
    from_string,
    from_url,
)

DOC = '<config><name>MyApp</name><port>8080</port></config>'


@pytest.fixture
def doc_file(tmp_path):
    path = tmp_path / 'config.xml'
    path.write_text(DOC)
    return path


class TestFromString:
    """Tests for from_string."""

    def test_parse_text(self):
        """Test parsing a str document."""
        root = from_string(DOC)
        assert root.name == 'config'
        assert root.to_array() == {'name': 'MyApp', 'port': '8080'}

    def test_parse_bytes(self):
        """Test parsing a bytes document."""
        assert from_string(DOC.encode('utf-8')).name == 'config'

    def test_parse_text_with_declaration(self):
        """Test str input carrying an encoding declaration."""
        root = from_string('<?xml version="1.0" encoding="UTF-8"?><r>café</r>')
        assert root.value() == 'café'

    def test_malformed_raises(self):
        """Test syntax errors become LoadError."""
        with pytest.raises(LoadError, match="Cannot parse"):
            from_string('<config><name></config>')

    def test_empty_raises(self):
        """Test empty input."""
        with pytest.raises(LoadError):
            from_string('')

    def test_source_type_url(self, doc_file):
        """Test data is fetched when source_type is url."""
        root = from_string(doc_file.as_uri(), {'source_type': 'url'})
        assert root.name == 'config'

    def test_recover_flag(self):
        """Test RECOVER parses broken markup."""
        root = from_string('<r><a>1</r>', {'parser_flags': ParserFlag.RECOVER})
        assert root.name == 'r'

    def test_noblanks_flag(self):
        """Test NOBLANKS drops indentation."""
        xml = '<r>\n  <a>1</a>\n</r>'
        assert from_string(xml).element.text == '\n  '
        root = from_string(xml, LoadOptions(parser_flags=ParserFlag.NOBLANKS))
        assert root.element.text is None

    def test_namespace_scope(self):
        """Test namespace_uri scopes the root."""
        xml = '<r xmlns:a="urn:a"><a:x>1</a:x><y>2</y></r>'
        root = from_string(xml, {'namespace_uri': 'urn:a'})
        assert root.scope == 'urn:a'
        assert root.to_array() == {'x': '1'}

    def test_namespace_scope_by_prefix(self):
        """Test namespace_is_prefix resolves the prefix on the root."""
        xml = '<r xmlns:a="urn:a"><a:x>1</a:x><y>2</y></r>'
        root = from_string(xml, {'namespace_uri': 'a', 'namespace_is_prefix': True})
        assert root.scope == 'urn:a'

    def test_undeclared_scope_prefix_raises(self):
        """Test an unknown scope prefix."""
        with pytest.raises(LoadError, match="not declared"):
            from_string('<r/>', {'namespace_uri': 'a', 'namespace_is_prefix': True})


class TestFromFile:
    """Tests for from_file."""

    def test_read_file(self, doc_file):
        """Test loading from a path object or string."""
        assert from_file(doc_file).to_array('name') == 'MyApp'
        assert from_file(str(doc_file)).name == 'config'

    def test_missing_file_raises(self, tmp_path):
        """Test unreadable paths become LoadError."""
        with pytest.raises(LoadError, match="Cannot read"):
            from_file(tmp_path / 'missing.xml')

    def test_invalid_content_raises(self, tmp_path):
        """Test a file that is not XML."""
        path = tmp_path / 'bad.xml'
        path.write_text('not xml')
        with pytest.raises(LoadError, match="Cannot parse"):
            from_file(path)


class TestFromUrl:
    """Tests for from_url."""

    def test_file_url(self, doc_file):
        """Test loading through urllib."""
        root = from_url(doc_file.as_uri())
        assert root.to_array() == {'name': 'MyApp', 'port': '8080'}

    def test_unreachable_url_raises(self, tmp_path):
        """Test fetch errors become LoadError."""
        with pytest.raises(LoadError, match="Cannot fetch"):
            from_url((tmp_path / 'missing.xml').as_uri())

    def test_unknown_scheme_raises(self):
        """Test malformed URLs become LoadError."""
        with pytest.raises(LoadError):
            from_url('not a url')


class TestLoadOptions:
    """Tests for LoadOptions."""

    def test_defaults(self):
        """Test default values."""
        opts = LoadOptions()
        assert opts.parser_flags == 0
        assert opts.namespace_uri == ''
        assert opts.namespace_is_prefix is False
        assert opts.source_type is SourceType.STRING

    def test_coerce(self):
        """Test None, instances and dicts."""
        opts = LoadOptions(parser_flags=1)
        assert LoadOptions.coerce(opts) is opts
        assert LoadOptions.coerce(None) == LoadOptions()
        assert LoadOptions.coerce({'source_type': 'url'}).source_type is SourceType.URL

    def test_unknown_option_raises(self):
        """Test misspelled option names."""
        with pytest.raises(LoadError, match="Unknown load options"):
            LoadOptions.coerce({'flags': 1})

    def test_unknown_source_type_raises(self):
        """Test a source_type outside the enum."""
        with pytest.raises(LoadError, match="Unknown source_type"):
            LoadOptions.coerce({'source_type': 'ftp'})

    def test_bad_options_reach_callers_as_load_error(self):
        """Test entry points report option errors as LoadError."""
        with pytest.raises(LoadError):
            from_string(DOC, {'source_type': 'file'})

    def test_make_parser(self):
        """Test flags map onto an lxml parser."""
        parser = LoadOptions(parser_flags=ParserFlag.RECOVER | ParserFlag.NONET).make_parser()
        assert parser is not None
