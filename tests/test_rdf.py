"""
Tests for conversion between JSON-LD and RDF.
"""

import pytest

from linkedjson import jsonld
from linkedjson.nquads import Literal, Quad, parse_nquads
from linkedjson.rdf import canonical_double
from linkedjson.util import (
    I18N, RDF_FIRST, RDF_LANGSTRING, RDF_NIL, RDF_REST, RDF_TYPE,
    XSD_BOOLEAN, XSD_DOUBLE, XSD_INTEGER)

S = 'http://example.org/s'
P = 'http://example.org/p'


class TestCanonicalDouble:
    @pytest.mark.parametrize('value, expected', [
        (45.0, '4.5E1'),
        (1.0, '1.0E0'),
        (0.5, '5.0E-1'),
        (-1.5, '-1.5E0'),
        (1.1e21, '1.1E21'),
    ])
    def test_canonical_form(self, value, expected):
        assert canonical_double(value) == expected


class TestToRdf:
    def test_native_values(self):
        input_ = {
            '@id': S,
            P: [True, 5, 5.5, 'x', {'@value': 'hi', '@language': 'en'}],
        }
        quads = jsonld.to_rdf(input_)
        assert set(q.object for q in quads) == {
            Literal('true', XSD_BOOLEAN),
            Literal('5', XSD_INTEGER),
            Literal('5.5E0', XSD_DOUBLE),
            Literal('x'),
            Literal('hi', RDF_LANGSTRING, 'en'),
        }
        assert all(q.subject == S and q.predicate == P for q in quads)
        assert all(q.graph is None for q in quads)

    def test_integer_typed_as_double(self):
        input_ = {'@id': S, P: {'@value': 2, '@type': XSD_DOUBLE}}
        assert jsonld.to_rdf(input_) == [
            Quad(S, P, Literal('2.0E0', XSD_DOUBLE))]

    def test_typed_string_keeps_its_lexical_form(self):
        input_ = {'@id': S, P: {'@value': '45', '@type': XSD_DOUBLE}}
        assert jsonld.to_rdf(input_) == [
            Quad(S, P, Literal('45', XSD_DOUBLE))]

    def test_type_becomes_rdf_type(self):
        input_ = {'@id': S, '@type': 'http://example.org/T'}
        assert jsonld.to_rdf(input_) == [
            Quad(S, RDF_TYPE, 'http://example.org/T')]

    def test_list(self):
        input_ = {'@id': S, P: {'@list': ['a', 'b']}}
        assert jsonld.to_rdf(input_) == [
            Quad(S, P, '_:b0'),
            Quad('_:b0', RDF_FIRST, Literal('a')),
            Quad('_:b0', RDF_REST, '_:b1'),
            Quad('_:b1', RDF_FIRST, Literal('b')),
            Quad('_:b1', RDF_REST, RDF_NIL),
        ]

    def test_empty_list(self):
        input_ = {'@id': S, P: {'@list': []}}
        assert jsonld.to_rdf(input_) == [Quad(S, P, RDF_NIL)]

    def test_named_graph(self):
        input_ = {
            '@id': 'http://example.org/g',
            '@graph': {'@id': S, P: 'v'},
        }
        assert jsonld.to_rdf(input_) == [
            Quad(S, P, Literal('v'), 'http://example.org/g')]

    def test_relative_ids_are_skipped(self):
        assert jsonld.to_rdf({'@id': 'relative', P: 'v'}) == []

    def test_blank_node_predicates(self):
        input_ = [{'@id': S, '_:p': [{'@value': 'v'}]}]
        assert jsonld.to_rdf(input_) == []
        quads = jsonld.to_rdf(input_, {'produceGeneralizedRdf': True})
        assert quads == [Quad(S, '_:b0', Literal('v'))]

    def test_i18n_direction(self):
        input_ = {
            '@id': S,
            P: {'@value': 'hi', '@language': 'en', '@direction': 'rtl'},
        }
        quads = jsonld.to_rdf(input_, {'rdfDirection': 'i18n-datatype'})
        assert quads == [Quad(S, P, Literal('hi', I18N + 'en_rtl'))]

    def test_nquads_output(self):
        input_ = {'@id': S, P: 'v'}
        output = jsonld.to_rdf(input_, {'format': 'application/n-quads'})
        assert output == '<%s> <%s> "v" .\n' % (S, P)

    def test_unknown_format(self):
        with pytest.raises(jsonld.JsonLdError) as exc_info:
            jsonld.to_rdf({'@id': S, P: 'v'}, {'format': 'text/turtle'})
        assert exc_info.value.code == 'unknown format'


class TestFromRdf:
    def test_simple_nquads(self):
        nquads = (
            '<%s> <%s> "v" .\n'
            '<%s> <%s> <http://example.org/o> .\n' % (S, P, S, P))
        assert jsonld.from_rdf(nquads) == [{
            '@id': S,
            P: [{'@value': 'v'}, {'@id': 'http://example.org/o'}],
        }]

    def test_rdf_type(self):
        quads = [Quad(S, RDF_TYPE, 'http://example.org/T')]
        assert jsonld.from_rdf(quads) == [
            {'@id': S, '@type': ['http://example.org/T']}]

    def test_use_rdf_type(self):
        quads = [Quad(S, RDF_TYPE, 'http://example.org/T')]
        assert jsonld.from_rdf(quads, {'useRdfType': True}) == [
            {'@id': S, RDF_TYPE: [{'@id': 'http://example.org/T'}]}]

    def test_typed_literals(self):
        quads = [
            Quad(S, P, Literal('5', XSD_INTEGER)),
            Quad(S, P, Literal('hi', RDF_LANGSTRING, 'en')),
        ]
        assert jsonld.from_rdf(quads) == [{
            '@id': S,
            P: [
                {'@value': '5', '@type': XSD_INTEGER},
                {'@value': 'hi', '@language': 'en'},
            ],
        }]

    def test_use_native_types(self):
        quads = [
            Quad(S, P, Literal('5', XSD_INTEGER)),
            Quad(S, P, Literal('true', XSD_BOOLEAN)),
            Quad(S, P, Literal('2.5E0', XSD_DOUBLE)),
            Quad(S, P, Literal('nope', XSD_INTEGER)),
        ]
        result = jsonld.from_rdf(quads, {'useNativeTypes': True})
        assert result[0][P] == [
            {'@value': 5},
            {'@value': True},
            {'@value': 2.5},
            {'@value': 'nope', '@type': XSD_INTEGER},
        ]

    def test_list_round_trip(self):
        input_ = {'@id': S, P: {'@list': ['a', 'b']}}
        quads = jsonld.to_rdf(input_)
        assert jsonld.from_rdf(quads) == [{
            '@id': S,
            P: [{'@list': [{'@value': 'a'}, {'@value': 'b'}]}],
        }]

    def test_shared_list_node_is_not_converted(self):
        quads = [
            Quad(S, P, '_:l'),
            Quad('http://example.org/t', P, '_:l'),
            Quad('_:l', RDF_FIRST, Literal('a')),
            Quad('_:l', RDF_REST, RDF_NIL),
        ]
        result = jsonld.from_rdf(quads)
        assert [node['@id'] for node in result] == [
            '_:l', 'http://example.org/s', 'http://example.org/t']
        assert result[0][RDF_FIRST] == [{'@value': 'a'}]

    def test_named_graph_round_trip(self):
        input_ = {
            '@id': 'http://example.org/g',
            '@graph': {'@id': S, P: 'v'},
        }
        quads = jsonld.to_rdf(input_)
        assert jsonld.from_rdf(quads) == [{
            '@id': 'http://example.org/g',
            '@graph': [{'@id': S, P: [{'@value': 'v'}]}],
        }]

    def test_i18n_datatype(self):
        quads = [Quad(S, P, Literal('hi', I18N + 'en_rtl'))]
        result = jsonld.from_rdf(quads, {'rdfDirection': 'i18n-datatype'})
        assert result[0][P] == [
            {'@value': 'hi', '@language': 'en', '@direction': 'rtl'}]

    def test_i18n_datatype_invalid_language(self):
        quads = [Quad(S, P, Literal('hi', I18N + 'not-a-valid-tag!_rtl'))]
        with pytest.raises(jsonld.JsonLdError) as exc_info:
            jsonld.from_rdf(quads, {'rdfDirection': 'i18n-datatype'})
        assert exc_info.value.code == 'invalid language-tagged string'

    def test_unknown_format(self):
        with pytest.raises(jsonld.JsonLdError) as exc_info:
            jsonld.from_rdf('', {'format': 'text/turtle'})
        assert exc_info.value.code == 'unknown format'


class TestRdfParsers:
    def test_global_parser(self):
        def parser(input_):
            return [Quad(S, P, Literal(input_))]

        jsonld.register_rdf_parser('text/x-test', parser)
        try:
            result = jsonld.from_rdf('hello', {'format': 'text/x-test'})
        finally:
            jsonld.unregister_rdf_parser('text/x-test')
        assert result == [{'@id': S, P: [{'@value': 'hello'}]}]

    def test_processor_parser_disables_global_parsers(self):
        processor = jsonld.JsonLdProcessor()
        processor.register_rdf_parser('text/x-test', parse_nquads)
        with pytest.raises(jsonld.JsonLdError) as exc_info:
            processor.from_rdf('', {'format': 'application/n-quads'})
        assert exc_info.value.code == 'unknown format'

        processor.unregister_rdf_parser('text/x-test')
        assert processor.from_rdf('', {'format': 'application/n-quads'}) == []
