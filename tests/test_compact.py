"""
Tests for JSON-LD compaction.
"""

import pytest

from linkedjson import jsonld


class TestCompact:
    def test_simple_compaction(self):
        ctx = {'@context': {
            'a': 'http://example.org/a',
            'b': {'@id': 'http://example.org/b', '@type': 'urn:B'},
            'c': {'@id': 'http://example.org/c', '@type': 'urn:C'},
            'ex': 'http://example.org/',
        }}
        input_ = {
            'http://example.org/a': 'A',
            'http://example.org/b': 'B',
            'http://example.org/c': {'@value': 'C', '@type': 'urn:C'},
        }
        result = jsonld.compact(input_, ctx)
        assert result == {
            '@context': ctx['@context'],
            'a': 'A',
            'ex:b': 'B',
            'c': 'C',
        }
        assert list(result)[0] == '@context'

    def test_keyword_aliases(self):
        ctx = {
            'id': '@id',
            'type': '@type',
            'name': 'http://schema.org/name',
        }
        input_ = [{
            '@id': 'http://example.org/1',
            '@type': ['http://schema.org/Person'],
            'http://schema.org/name': [{'@value': 'A'}],
        }]
        assert jsonld.compact(input_, ctx) == {
            '@context': ctx,
            'id': 'http://example.org/1',
            'type': 'http://schema.org/Person',
            'name': 'A',
        }

    def test_id_coercion(self):
        ctx = {'knows': {
            '@id': 'http://xmlns.com/foaf/0.1/knows', '@type': '@id'}}
        input_ = {
            '@id': 'http://example.org/a',
            'http://xmlns.com/foaf/0.1/knows': {'@id': 'http://example.org/b'},
        }
        assert jsonld.compact(input_, ctx) == {
            '@context': ctx,
            '@id': 'http://example.org/a',
            'knows': 'http://example.org/b',
        }

    def test_list_container(self):
        ctx = {'items': {
            '@id': 'http://example.org/items', '@container': '@list'}}
        input_ = {
            '@id': 'http://example.org/1',
            'http://example.org/items': {'@list': ['a', 'b']},
        }
        assert jsonld.compact(input_, ctx) == {
            '@context': ctx,
            '@id': 'http://example.org/1',
            'items': ['a', 'b'],
        }

    def test_set_container_keeps_array(self):
        ctx = {'tags': {
            '@id': 'http://example.org/tags', '@container': '@set'}}
        input_ = {
            '@id': 'http://example.org/1',
            'http://example.org/tags': 'only',
        }
        result = jsonld.compact(input_, ctx)
        assert result['tags'] == ['only']

    def test_language_map(self):
        ctx = {'label': {
            '@id': 'http://example.org/label', '@container': '@language'}}
        input_ = {
            '@id': 'http://example.org/1',
            'http://example.org/label': [
                {'@value': 'Hi', '@language': 'en'},
                {'@value': 'Hallo', '@language': 'de'},
            ],
        }
        result = jsonld.compact(input_, ctx)
        assert result['label'] == {'en': 'Hi', 'de': 'Hallo'}

    def test_relative_id_against_base(self):
        ctx = {'p': 'http://example.org/p'}
        input_ = {'@id': 'http://example.org/dir/a', 'http://example.org/p': 'v'}
        result = jsonld.compact(input_, ctx, {'base': 'http://example.org/dir/'})
        assert result['@id'] == 'a'

    def test_compact_arrays_off(self):
        ctx = {'p': 'http://example.org/p'}
        input_ = {'http://example.org/p': 'v'}
        result = jsonld.compact(input_, ctx, {'compactArrays': False})
        assert result == {'@context': ctx, '@graph': [{'p': ['v']}]}

    def test_graph_option(self):
        ctx = {'p': 'http://example.org/p'}
        input_ = {'@id': 'http://example.org/1', 'http://example.org/p': 'v'}
        result = jsonld.compact(input_, ctx, {'graph': True})
        assert result == {
            '@context': ctx,
            '@graph': [{'@id': 'http://example.org/1', 'p': 'v'}],
        }

    def test_several_nodes_use_graph(self):
        ctx = {'p': 'http://example.org/p'}
        input_ = [
            {'@id': 'http://example.org/1', 'http://example.org/p': 'x'},
            {'@id': 'http://example.org/2', 'http://example.org/p': 'y'},
        ]
        result = jsonld.compact(input_, ctx)
        assert result['@graph'] == [
            {'@id': 'http://example.org/1', 'p': 'x'},
            {'@id': 'http://example.org/2', 'p': 'y'},
        ]

    def test_empty_context_is_left_out(self):
        input_ = {'@id': 'http://example.org/1', 'http://example.org/p': 'v'}
        assert jsonld.compact(input_, {}) == {
            '@id': 'http://example.org/1',
            'http://example.org/p': 'v',
        }

    def test_null_context(self):
        with pytest.raises(jsonld.JsonLdError) as exc_info:
            jsonld.compact({}, None)
        assert exc_info.value.code == 'invalid local context'

    def test_iri_confused_with_prefix(self):
        ctx = {'ex': 'http://example.org/'}
        input_ = [{
            '@id': 'ex:foo',
            'http://example.org/p': [{'@value': 'v'}],
        }]
        with pytest.raises(jsonld.JsonLdError) as exc_info:
            jsonld.compact(input_, ctx, {'skipExpansion': True})
        assert exc_info.value.code == 'IRI confused with prefix'

    def test_remote_context(self, fake_loader):
        loader = fake_loader({
            'http://example.org/ctx': {
                '@context': {'name': 'http://schema.org/name'}},
        })
        input_ = {'http://schema.org/name': 'Jane'}
        result = jsonld.compact(
            input_, 'http://example.org/ctx', {'documentLoader': loader})
        assert result == {'@context': 'http://example.org/ctx', 'name': 'Jane'}


class TestCompactExpandRoundTrip:
    CONTEXT = {
        '@vocab': 'http://example.org/',
        'label': {'@id': 'http://example.org/label', '@container': '@language'},
        'items': {'@id': 'http://example.org/items', '@container': '@list'},
        'tags': {'@id': 'http://example.org/tags', '@container': '@set'},
        'children': {'@reverse': 'http://example.org/parent'},
        'link': {'@id': 'http://example.org/link', '@type': '@id'},
        'ex': 'http://example.org/',
    }

    DOCUMENT = {
        '@id': 'http://example.org/g',
        '@graph': [
            {
                '@id': 'http://example.org/mom',
                '@type': 'http://example.org/Person',
                'http://example.org/label': [
                    {'@value': 'Mutti', '@language': 'de'},
                    {'@value': 'Mom', '@language': 'en'},
                ],
                'http://example.org/items': {'@list': [1, 'two', True]},
                'http://example.org/tags': ['a'],
                'http://example.org/link': {'@id': 'http://example.org/kid'},
                '@reverse': {'http://example.org/parent': {
                    '@id': 'http://example.org/kid',
                    'http://example.org/name': 'Kid',
                }},
            },
            {
                'http://example.org/name': 'anonymous',
                'http://example.org/other/p': {
                    '@value': '5', '@type': 'http://example.org/T'},
            },
        ],
    }

    def test_compacted_form_expands_back(self):
        expanded = jsonld.expand(self.DOCUMENT)
        compacted = jsonld.compact(expanded, self.CONTEXT)
        assert compacted['@context'] == self.CONTEXT
        assert jsonld.expand(compacted) == expanded

    def test_compacting_twice_changes_nothing(self):
        compacted = jsonld.compact(self.DOCUMENT, self.CONTEXT)
        assert jsonld.compact(compacted, self.CONTEXT) == compacted
