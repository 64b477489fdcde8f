"""
Tests for the N-Quads codec.
"""

import pytest

from linkedjson import jsonld
from linkedjson.errors import InvalidQuadError
from linkedjson.nquads import (
    RDF_LANGSTRING, Literal, Quad, escape, parse_nquads, serialize_nquad,
    serialize_nquads, unescape)

XSD_INTEGER = 'http://www.w3.org/2001/XMLSchema#integer'


class TestParse:
    def test_iri_triple(self):
        quads = parse_nquads(
            '<http://ex/s> <http://ex/p> <http://ex/o> .\n')
        assert quads == [Quad('http://ex/s', 'http://ex/p', 'http://ex/o')]
        assert quads[0].graph is None

    def test_literals(self):
        quads = parse_nquads(
            '<http://ex/s> <http://ex/p> "plain" .\n'
            '<http://ex/s> <http://ex/p> "5"^^<%s> .\n'
            '<http://ex/s> <http://ex/p> "hi"@en-GB .\n' % XSD_INTEGER)
        assert [q.object for q in quads] == [
            Literal('plain'),
            Literal('5', XSD_INTEGER),
            Literal('hi', RDF_LANGSTRING, 'en-GB'),
        ]

    def test_named_graph(self):
        quads = parse_nquads(
            '_:a <http://ex/p> "v" <http://ex/g> .\n'
            '_:a <http://ex/p> "v" _:g .\n')
        assert quads[0] == Quad('_:a', 'http://ex/p', Literal('v'), 'http://ex/g')
        assert quads[1].graph == '_:g'

    def test_skips_blank_and_comment_lines(self):
        quads = parse_nquads(
            '# a comment\n'
            '\n'
            '   \n'
            '<http://ex/s> <http://ex/p> <http://ex/o> . # trailing\n')
        assert len(quads) == 1

    def test_drops_duplicates(self):
        line = '<http://ex/s> <http://ex/p> "v" .\n'
        assert len(parse_nquads(line + line + line)) == 1

    def test_keeps_input_order(self):
        quads = parse_nquads(
            '<http://ex/b> <http://ex/p> "1" .\n'
            '<http://ex/a> <http://ex/p> "2" .\n')
        assert [q.subject for q in quads] == ['http://ex/b', 'http://ex/a']

    def test_unescapes_literal(self):
        quads = parse_nquads(
            '<http://ex/s> <http://ex/p> "a\\tb\\u00e9\\U0001F600\\"" .\n')
        assert quads[0].object.value == 'a\tbé\U0001F600"'

    def test_invalid_line_reports_line_number(self):
        with pytest.raises(InvalidQuadError) as exc_info:
            parse_nquads(
                '<http://ex/s> <http://ex/p> "v" .\n'
                '<http://ex/s> <http://ex/p> .\n')
        assert exc_info.value.line_number == 2
        assert exc_info.value.code == 'invalid quad'
        assert isinstance(exc_info.value, jsonld.JsonLdError)

    def test_literal_not_allowed_as_graph(self):
        with pytest.raises(InvalidQuadError):
            parse_nquads('<http://ex/s> <http://ex/p> "v" "g" .\n')

    def test_relative_iri_rejected(self):
        with pytest.raises(InvalidQuadError):
            parse_nquads('<s> <http://ex/p> "v" .\n')

    def test_unknown_escape_rejected(self):
        with pytest.raises(InvalidQuadError):
            parse_nquads('<http://ex/s> <http://ex/p> "bad \\q escape" .\n')

    def test_crlf_line_endings(self):
        quads = parse_nquads(
            '<http://ex/s> <http://ex/p> "a" .\r\n'
            '<http://ex/s> <http://ex/p> "b" .\r\n')
        assert [q.object.value for q in quads] == ['a', 'b']


class TestBlankNodeLabels:
    @pytest.mark.parametrize('label', [
        'b', 'b1', '_b1', 'b_1', 'b1_', 'b-1', 'b.1', '1b'])
    def test_valid_labels(self, label):
        quads = parse_nquads('_:%s <http://ex/1> "Test" .\n' % label)
        assert quads[0].subject == '_:' + label

    @pytest.mark.parametrize('label', ['-b1', '.b1', 'b1.'])
    def test_invalid_labels(self, label):
        with pytest.raises(InvalidQuadError):
            parse_nquads('_:%s <http://ex/1> "Test" .\n' % label)


class TestSerialize:
    def test_quad_line(self):
        line = serialize_nquad(
            Quad('http://ex/s', 'http://ex/p', Literal('v'), 'http://ex/g'))
        assert line == '<http://ex/s> <http://ex/p> "v" <http://ex/g> .\n'

    def test_blank_nodes_and_typed_literals(self):
        output = serialize_nquads([
            Quad('_:b0', 'http://ex/p', Literal('5', XSD_INTEGER)),
            Quad('_:b0', 'http://ex/p', Literal('hi', RDF_LANGSTRING, 'en')),
            Quad('_:b0', 'http://ex/p', '_:b1'),
        ])
        assert output == (
            '_:b0 <http://ex/p> "5"^^<%s> .\n'
            '_:b0 <http://ex/p> "hi"@en .\n'
            '_:b0 <http://ex/p> _:b1 .\n' % XSD_INTEGER)

    def test_escape(self):
        assert escape('a\\b"c\nd\re\tf') == 'a\\\\b\\"c\\nd\\re\\tf'
        assert escape('\x01') == '\\u0001'
        assert unescape(escape('line\nbreak "quoted"')) == \
            'line\nbreak "quoted"'

    def test_line_break_survives_from_rdf_to_rdf(self):
        nquads = (
            '<http://example.com> <http://schema.org/description> '
            '"String with line-break \\n and quote (\\")" .\n')
        doc = jsonld.from_rdf(nquads)
        assert doc[0]['http://schema.org/description'] == [
            {'@value': 'String with line-break \n and quote (")'}]
        assert jsonld.to_rdf(doc, {'format': 'application/n-quads'}) == nquads


class TestRoundTrip:
    @pytest.mark.parametrize('value', [
        'a\u2028b', 'a\u2029b', 'a\x85b', 'a\x0bb\x0cc', 'a\x1cb'])
    def test_unicode_line_separators(self, value):
        line = serialize_nquad(
            Quad('http://ex/s', 'http://ex/p', Literal(value)))
        assert line.count('\n') == 1
        assert value not in line
        assert parse_nquads(line)[0].object.value == value

    def test_language_string_without_language(self):
        quad = Quad('http://ex/s', 'http://ex/p', Literal('v', RDF_LANGSTRING))
        line = serialize_nquad(quad)
        assert line == (
            '<http://ex/s> <http://ex/p> "v"^^<%s> .\n' % RDF_LANGSTRING)
        assert parse_nquads(line) == [quad]

    def test_literals_survive_serialize_and_parse(self):
        quads = [
            Quad('http://ex/s', 'http://ex/p', Literal(value))
            for value in [
                '', 'tab\there', 'quote " inside', 'back\\slash',
                'line\nfeed\rreturn', 'café \U0001F600', '\x00\x7f',
                '\\u0041 is not an escape']
        ]
        quads += [
            Quad('_:b0', 'http://ex/p', Literal('5', XSD_INTEGER)),
            Quad('_:b0', 'http://ex/p', Literal('hi', RDF_LANGSTRING, 'en-us'),
                 'http://ex/g'),
            Quad('_:b0', 'http://ex/p', Literal('x\ny', 'http://ex/dt'),
                 '_:g'),
        ]
        assert parse_nquads(serialize_nquads(quads)) == quads
