"""
Tests for JSON-LD expansion.
"""

import pytest

from linkedjson import jsonld

XSD_INTEGER = 'http://www.w3.org/2001/XMLSchema#integer'


class TestExpand:
    def test_unmapped_keys_are_silently_ignored(self):
        input_ = {'fooo': 'bar'}
        options = {'expandContext': {'foo': 'http://example.org/foo'}}
        assert jsonld.expand(input_, options) == []

    def test_on_key_dropped_is_called(self):
        dropped = []
        input_ = {'fooo': 'bar', 'foo': 'baz'}
        options = {
            'expandContext': {'foo': 'http://example.org/foo'},
            'onKeyDropped': dropped.append,
        }
        result = jsonld.expand(input_, options)
        assert result == [{'http://example.org/foo': [{'@value': 'baz'}]}]
        assert dropped == ['fooo']

    def test_strict_mode_rejects_unmapped_keys(self):
        input_ = {'fooo': 'bar'}
        options = {
            'expandContext': {'foo': 'http://example.org/foo'},
            'strict': True,
        }
        with pytest.raises(jsonld.JsonLdError) as exc_info:
            jsonld.expand(input_, options)
        assert exc_info.value.code == 'invalid property'

    def test_expand_context_option(self):
        input_ = {'name': 'Jane', 'homepage': 'http://example.org/jane'}
        options = {'expandContext': {'@context': {
            'name': 'http://xmlns.com/foaf/0.1/name',
            'homepage': {
                '@id': 'http://xmlns.com/foaf/0.1/homepage',
                '@type': '@id',
            },
        }}}
        assert jsonld.expand(input_, options) == [{
            'http://xmlns.com/foaf/0.1/homepage': [
                {'@id': 'http://example.org/jane'}],
            'http://xmlns.com/foaf/0.1/name': [{'@value': 'Jane'}],
        }]

    def test_caller_input_and_options_are_not_modified(self):
        input_ = {'@context': {'p': 'http://example.org/p'}, 'p': 'v'}
        options = {}
        jsonld.expand(input_, options)
        assert input_ == {'@context': {'p': 'http://example.org/p'}, 'p': 'v'}
        assert options == {}

    def test_relative_id_without_base(self):
        input_ = {'@id': 'foo', 'http://example.com/p': 'x'}
        result = jsonld.expand(input_)
        assert result[0]['@id'] == 'foo'

    def test_relative_id_with_base(self):
        input_ = {'@id': 'doc#a', 'http://example.com/p': 'x'}
        result = jsonld.expand(input_, {'base': 'http://example.org/dir/file'})
        assert result[0]['@id'] == 'http://example.org/dir/doc#a'

    def test_type_coercion(self):
        input_ = {
            '@context': {
                'knows': {
                    '@id': 'http://xmlns.com/foaf/0.1/knows', '@type': '@id'},
                'age': {'@id': 'http://example.org/age', '@type': XSD_INTEGER},
            },
            '@id': 'http://example.org/a',
            'knows': 'http://example.org/b',
            'age': '42',
        }
        assert jsonld.expand(input_) == [{
            '@id': 'http://example.org/a',
            'http://example.org/age': [{'@type': XSD_INTEGER, '@value': '42'}],
            'http://xmlns.com/foaf/0.1/knows': [{'@id': 'http://example.org/b'}],
        }]

    def test_node_type_becomes_array(self):
        input_ = {
            '@context': {'@vocab': 'http://schema.org/'},
            '@id': 'http://example.org/a',
            '@type': 'Person',
        }
        assert jsonld.expand(input_) == [{
            '@id': 'http://example.org/a',
            '@type': ['http://schema.org/Person'],
        }]

    def test_language_map(self):
        input_ = {
            '@context': {'label': {
                '@id': 'http://example.org/label', '@container': '@language'}},
            '@id': 'http://example.org/1',
            'label': {'en': 'Hi', 'de': ['Hallo']},
        }
        assert jsonld.expand(input_) == [{
            '@id': 'http://example.org/1',
            'http://example.org/label': [
                {'@language': 'de', '@value': 'Hallo'},
                {'@language': 'en', '@value': 'Hi'},
            ],
        }]

    def test_list_container(self):
        input_ = {
            '@context': {'list': {
                '@id': 'http://example.org/list', '@container': '@list'}},
            '@id': 'http://example.org/1',
            'list': [1, 'a'],
        }
        assert jsonld.expand(input_) == [{
            '@id': 'http://example.org/1',
            'http://example.org/list': [
                {'@list': [{'@value': 1}, {'@value': 'a'}]}],
        }]

    def test_list_of_lists(self):
        input_ = {
            '@context': {'list': {
                '@id': 'http://example.org/list', '@container': '@list'}},
            'list': [[1]],
        }
        with pytest.raises(jsonld.JsonLdError) as exc_info:
            jsonld.expand(input_)
        assert exc_info.value.code == 'list of lists'

    def test_reverse_property(self):
        input_ = {
            '@context': {'children': {'@reverse': 'http://example.org/parent'}},
            '@id': 'http://example.org/mom',
            'children': {
                '@id': 'http://example.org/kid',
                'http://example.org/name': 'Kid',
            },
        }
        assert jsonld.expand(input_) == [{
            '@id': 'http://example.org/mom',
            '@reverse': {'http://example.org/parent': [{
                '@id': 'http://example.org/kid',
                'http://example.org/name': [{'@value': 'Kid'}],
            }]},
        }]

    def test_nested_properties(self):
        input_ = {
            '@context': {
                '@vocab': 'http://example.org/',
                'meta': '@nest',
                'created': {'@id': 'http://example.org/created', '@nest': 'meta'},
            },
            '@id': 'http://example.org/1',
            'meta': {'created': '2020'},
        }
        assert jsonld.expand(input_) == [{
            '@id': 'http://example.org/1',
            'http://example.org/created': [{'@value': '2020'}],
        }]

    def test_type_scoped_context_does_not_propagate(self):
        input_ = {
            '@context': {
                '@vocab': 'http://example.org/',
                'Person': {
                    '@id': 'http://example.org/Person',
                    '@context': {'name': 'http://xmlns.com/foaf/0.1/name'},
                },
            },
            '@type': 'Person',
            'name': 'A',
            'knows': {'name': 'B'},
        }
        assert jsonld.expand(input_) == [{
            '@type': ['http://example.org/Person'],
            'http://example.org/knows': [
                {'http://example.org/name': [{'@value': 'B'}]}],
            'http://xmlns.com/foaf/0.1/name': [{'@value': 'A'}],
        }]

    def test_free_floating_nodes_are_dropped(self):
        input_ = {'@graph': ['a', {'@id': 'http://example.org/1'}]}
        assert jsonld.expand(input_) == []

    def test_top_level_value_is_dropped(self):
        assert jsonld.expand({'@value': 'x'}) == []

    def test_lone_graph_is_unwrapped(self):
        input_ = {'@graph': [
            {'@id': 'http://example.org/1', 'http://example.org/p': 'x'},
            {'@id': 'http://example.org/2', 'http://example.org/p': 'y'},
        ]}
        result = jsonld.expand(input_)
        assert [node['@id'] for node in result] == [
            'http://example.org/1', 'http://example.org/2']

    def test_invalid_id_value(self):
        with pytest.raises(jsonld.JsonLdError) as exc_info:
            jsonld.expand({'@id': 5, 'http://example.org/p': 'v'})
        assert exc_info.value.code == 'invalid @id value'

    def test_error_keeps_cause(self):
        with pytest.raises(jsonld.JsonLdError) as exc_info:
            jsonld.expand({'@id': 5, 'http://example.org/p': 'v'})
        assert exc_info.value.cause is not None
        assert exc_info.value.cause.code == 'invalid @id value'


class TestExpandRemote:
    def test_document_url_is_base(self, fake_loader):
        loader = fake_loader({
            'http://example.org/dir/doc': {
                '@id': 'a', 'http://example.org/p': 'v'},
        })
        result = jsonld.expand(
            'http://example.org/dir/doc', {'documentLoader': loader})
        assert result[0]['@id'] == 'http://example.org/dir/a'

    def test_string_document_is_parsed(self, fake_loader):
        loader = fake_loader({
            'http://example.org/doc':
                '{"@id": "http://example.org/a", "http://example.org/p": 1}',
        })
        result = jsonld.expand(
            'http://example.org/doc', {'documentLoader': loader})
        assert result == [{
            '@id': 'http://example.org/a',
            'http://example.org/p': [{'@value': 1}],
        }]

    def test_missing_document(self, fake_loader):
        loader = fake_loader({'http://example.org/doc': None})
        with pytest.raises(jsonld.JsonLdError) as exc_info:
            jsonld.expand('http://example.org/doc', {'documentLoader': loader})
        assert exc_info.value.code == 'loading document failed'


class TestExpandIdempotence:
    CONTEXT = {
        '@vocab': 'http://example.org/',
        'label': {'@id': 'http://example.org/label', '@container': '@language'},
        'items': {'@id': 'http://example.org/items', '@container': '@list'},
        'children': {'@reverse': 'http://example.org/parent'},
        'link': {'@id': 'http://example.org/link', '@type': '@id'},
    }

    @pytest.mark.parametrize('body', [
        {'@id': 'http://example.org/1', 'label': {'en': 'Hi', 'de': 'Hallo'}},
        {'@id': 'http://example.org/1',
         'items': [1, 'a', {'@id': 'http://example.org/x'}]},
        {'@id': 'http://example.org/mom',
         'children': {'@id': 'http://example.org/kid', 'name': 'Kid'}},
        {'@id': 'http://example.org/g', '@graph': [
            {'@id': 'http://example.org/x', 'link': 'http://example.org/y'},
            {'name': 'anonymous', 'label': {'fr': 'Salut'}},
        ]},
    ])
    def test_expanding_twice_changes_nothing(self, body):
        input_ = dict(body, **{'@context': self.CONTEXT})
        expanded = jsonld.expand(input_)
        assert expanded
        assert jsonld.expand(expanded) == expanded
