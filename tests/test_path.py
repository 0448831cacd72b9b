# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for the dot-path and inline attribute grammar."""

import dataclasses

import pytest

from genro_xmltree import ParseError, PathSegment, parse_path, parse_segment, split_path
from genro_xmltree.path import parse_attributes


class TestSplitPath:
    """Tests for split_path."""

    def test_simple_path(self):
        """Test splitting on dots."""
        assert split_path('a.b.c') == ['a', 'b', 'c']

    def test_single_segment(self):
        """Test a path without dots."""
        assert split_path('root') == ['root']

    def test_dot_inside_block_not_split(self):
        """Test dots inside an attribute block stay in the segment."""
        assert split_path('link[href=www.example.com].title') == [
            'link[href=www.example.com]',
            'title',
        ]

    def test_quoted_value_may_hold_bracket(self):
        """Test a quoted value can contain ']' and '.'."""
        assert split_path('a[t="x]y.z"].b') == ['a[t="x]y.z"]', 'b']

    def test_single_quoted_value(self):
        """Test single quotes also protect the value."""
        assert split_path("a[t='1.2'].b") == ["a[t='1.2']", 'b']

    def test_empty_path_raises(self):
        """Test empty path is rejected."""
        with pytest.raises(ParseError, match="Empty path"):
            split_path('')

    def test_empty_segment_raises(self):
        """Test consecutive dots are rejected."""
        with pytest.raises(ParseError, match="Empty segment"):
            split_path('a..b')

    def test_trailing_dot_raises(self):
        """Test a trailing dot is rejected."""
        with pytest.raises(ParseError, match="Empty segment"):
            split_path('a.')

    def test_unterminated_bracket_raises(self):
        """Test an open block at the end of the path."""
        with pytest.raises(ParseError, match="Unterminated '\\['"):
            split_path('a[x=1.b')

    def test_unterminated_quote_raises(self):
        """Test an open quote at the end of the path."""
        with pytest.raises(ParseError, match="Unterminated quote"):
            split_path('a[x="1]')

    def test_stray_closing_bracket_raises(self):
        """Test a ']' without matching '['."""
        with pytest.raises(ParseError, match="Unbalanced"):
            split_path('a].b')

    def test_nested_bracket_raises(self):
        """Test '[' inside an open block."""
        with pytest.raises(ParseError, match="Nested"):
            split_path('a[x=[1]]')


class TestParseSegment:
    """Tests for parse_segment."""

    def test_name_and_attributes(self):
        """Test bare and quoted values."""
        segment = parse_segment('item[x=1 y="a b"]')
        assert segment.name == 'item'
        assert segment.attributes == {'x': '1', 'y': 'a b'}
        assert segment.raw == 'item[x=1 y="a b"]'

    def test_no_block(self):
        """Test a segment without attributes."""
        segment = parse_segment('item')
        assert segment == PathSegment('item', {}, raw='item')

    def test_segment_is_frozen(self):
        """Test parsed segments cannot be reassigned."""
        segment = parse_segment('item[x=1]')
        with pytest.raises(dataclasses.FrozenInstanceError):
            segment.name = 'other'

    def test_empty_block(self):
        """Test name[] yields no attributes."""
        segment = parse_segment('item[]')
        assert segment.name == 'item'
        assert segment.attributes == {}

    def test_duplicate_key_last_wins(self):
        """Test a repeated key keeps the last value."""
        assert parse_segment('x[a=1 a=2]').attributes == {'a': '2'}

    def test_single_quoted_value(self):
        """Test single-quoted values keep spaces."""
        assert parse_segment("x[title='hello world']").attributes == {'title': 'hello world'}

    def test_prefixed_attribute_name(self):
        """Test attribute names may hold a prefix."""
        assert parse_segment('x[ns:kind=a]').attributes == {'ns:kind': 'a'}

    def test_value_with_dots_and_equals(self):
        """Test a bare value runs to the next space."""
        assert parse_segment('a[href=http://x.org/?q=1]').attributes == {
            'href': 'http://x.org/?q=1'
        }

    def test_missing_equals_raises(self):
        """Test a token without '='."""
        with pytest.raises(ParseError, match="has no '='"):
            parse_segment('x[a]')

    def test_missing_equals_after_pair_raises(self):
        """Test a valid pair followed by a token without '='."""
        with pytest.raises(ParseError, match="has no '='"):
            parse_segment('x[a=1 b]')

    def test_empty_key_raises(self):
        """Test '=' without a name."""
        with pytest.raises(ParseError, match="Missing attribute name"):
            parse_segment('x[=1]')

    def test_text_after_block_raises(self):
        """Test text following the closing bracket."""
        with pytest.raises(ParseError, match="after attribute block"):
            parse_segment('x[a=1]y')

    def test_missing_name_raises(self):
        """Test a block without element name."""
        with pytest.raises(ParseError, match="Missing element name"):
            parse_segment('[a=1]')

    def test_unterminated_block_raises(self):
        """Test parse_segment validates on its own."""
        with pytest.raises(ParseError, match="Unterminated"):
            parse_segment('x[a=1')


class TestParseAttributes:
    """Tests for parse_attributes."""

    def test_extra_whitespace(self):
        """Test tokens separated by several spaces."""
        assert parse_attributes('  a=1   b=2 ') == {'a': '1', 'b': '2'}

    def test_unterminated_quoted_value_raises(self):
        """Test an open quoted value."""
        with pytest.raises(ParseError, match="Unterminated quote"):
            parse_attributes('a="1')

    def test_empty_quoted_value(self):
        """Test an empty quoted value."""
        assert parse_attributes('a=""') == {'a': ''}


class TestParsePath:
    """Tests for parse_path."""

    def test_three_segments(self):
        """Test a plain dotted path."""
        segments = parse_path('a.b.c')
        assert [s.name for s in segments] == ['a', 'b', 'c']
        assert all(s.attributes == {} for s in segments)

    def test_attributes_per_segment(self):
        """Test each segment keeps its own attributes."""
        segments = parse_path('order[id=7].line[sku="A 1"].qty')
        assert [s.name for s in segments] == ['order', 'line', 'qty']
        assert segments[0].attributes == {'id': '7'}
        assert segments[1].attributes == {'sku': 'A 1'}
        assert segments[2].attributes == {}
