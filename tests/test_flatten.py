"""
Tests for node map generation and flattening.
"""

import pytest

from linkedjson import jsonld
from linkedjson.flattening import create_node_map, merge_node_map_graphs
from linkedjson.identifier_issuer import IdentifierIssuer


class TestIdentifierIssuer:
    def test_issues_in_order(self):
        issuer = IdentifierIssuer('_:b')
        assert issuer.get_id('_:x') == '_:b0'
        assert issuer.get_id('_:y') == '_:b1'
        assert issuer.get_id('_:x') == '_:b0'
        assert issuer.has_id('_:y')
        assert not issuer.has_id('_:z')

    def test_fresh_identifier_without_source(self):
        issuer = IdentifierIssuer('_:c')
        assert issuer.get_id() == '_:c0'
        assert issuer.get_id() == '_:c1'


class TestFlatten:
    def test_embedded_node_gets_blank_node_id(self):
        input_ = {
            '@id': 'http://example.org/a',
            'http://example.org/knows': {'http://example.org/name': 'B'},
        }
        assert jsonld.flatten(input_) == [
            {'@id': 'http://example.org/a',
             'http://example.org/knows': [{'@id': '_:b0'}]},
            {'@id': '_:b0', 'http://example.org/name': [{'@value': 'B'}]},
        ]

    def test_blank_nodes_are_relabeled(self):
        input_ = {
            '@id': '_:foo',
            'http://example.org/p': {'@id': '_:bar'},
        }
        assert jsonld.flatten(input_) == [
            {'@id': '_:b0', 'http://example.org/p': [{'@id': '_:b1'}]},
        ]

    def test_labels_restart_for_every_call(self):
        input_ = {'http://example.org/p': 'v'}
        assert jsonld.flatten(input_)[0]['@id'] == '_:b0'
        assert jsonld.flatten(input_)[0]['@id'] == '_:b0'

    def test_nodes_are_merged(self):
        input_ = [
            {'@id': 'http://example.org/a', 'http://example.org/p': 'x'},
            {'@id': 'http://example.org/a', 'http://example.org/q': 'y'},
            {'@id': 'http://example.org/a', 'http://example.org/p': 'x'},
        ]
        assert jsonld.flatten(input_) == [{
            '@id': 'http://example.org/a',
            'http://example.org/p': [{'@value': 'x'}],
            'http://example.org/q': [{'@value': 'y'}],
        }]

    def test_named_graph(self):
        input_ = {
            '@id': 'http://example.org/g',
            '@graph': [{'@id': 'http://example.org/x', 'http://example.org/p': 'v'}],
        }
        assert jsonld.flatten(input_) == [{
            '@id': 'http://example.org/g',
            '@graph': [{
                '@id': 'http://example.org/x',
                'http://example.org/p': [{'@value': 'v'}],
            }],
        }]

    def test_reverse_properties_become_forward(self):
        input_ = {
            '@id': 'http://example.org/mom',
            '@reverse': {'http://example.org/parent': {
                '@id': 'http://example.org/kid'}},
        }
        assert jsonld.flatten(input_) == [{
            '@id': 'http://example.org/kid',
            'http://example.org/parent': [{'@id': 'http://example.org/mom'}],
        }]

    def test_flatten_with_context(self):
        input_ = {
            '@id': 'http://example.org/a',
            'http://example.org/knows': {'http://example.org/name': 'B'},
        }
        ctx = {
            'knows': 'http://example.org/knows',
            'name': 'http://example.org/name',
        }
        assert jsonld.flatten(input_, ctx) == {
            '@context': ctx,
            '@graph': [
                {'@id': 'http://example.org/a', 'knows': {'@id': '_:b0'}},
                {'@id': '_:b0', 'name': 'B'},
            ],
        }

    def test_conflicting_indexes(self):
        input_ = [
            {'@id': 'http://example.org/a', '@index': '1',
             'http://example.org/p': 'x'},
            {'@id': 'http://example.org/a', '@index': '2',
             'http://example.org/p': 'y'},
        ]
        with pytest.raises(jsonld.JsonLdError) as exc_info:
            jsonld.flatten(input_)
        assert exc_info.value.code == 'conflicting indexes'

    def test_iris_come_before_blank_nodes(self):
        input_ = [
            {'@id': '_:z', 'http://example.org/p': 'x'},
            {'@id': 'http://example.org/b', 'http://example.org/p': 'y'},
            {'@id': 'http://example.org/a', 'http://example.org/p': 'z'},
        ]
        assert [node['@id'] for node in jsonld.flatten(input_)] == [
            'http://example.org/a', 'http://example.org/b', '_:b0']

    def test_nested_blank_nodes_get_distinct_ids(self):
        leaf = {'http://example.org/name': 'leaf'}
        for depth in range(5):
            leaf = {
                'http://example.org/child': leaf,
                'http://example.org/sibling': {
                    'http://example.org/name': 'sibling %d' % depth},
            }
        input_ = {'@id': 'http://example.org/root', 'http://example.org/p': leaf}
        ids = [node['@id'] for node in jsonld.flatten(input_)]
        # the root, five levels each with a sibling, and the leaf
        assert len(ids) == 12
        assert len(set(ids)) == len(ids)
        assert all(id_.startswith('_:b') for id_ in ids[1:])

    @pytest.mark.parametrize('input_, code', [
        ({'@context': 42, 'http://example.org/p': 'v'},
         'invalid local context'),
        ({'@context': [
            {'@protected': True, 'p': 'http://example.org/p'},
            {'p': 'http://example.org/other'},
        ], 'p': 'v'}, 'protected term redefinition'),
    ])
    def test_expansion_error_code_is_kept(self, input_, code):
        with pytest.raises(jsonld.JsonLdError) as exc_info:
            jsonld.flatten(input_)
        assert exc_info.value.code == code


class TestNodeMap:
    def test_graphs_are_keyed_by_name(self):
        expanded = jsonld.expand({
            '@id': 'http://example.org/g',
            '@graph': {'@id': 'http://example.org/x', 'http://example.org/p': 'v'},
        })
        node_map = create_node_map(expanded, IdentifierIssuer('_:b'))
        assert sorted(node_map) == ['@default', 'http://example.org/g']
        assert node_map['@default'] == {
            'http://example.org/g': {'@id': 'http://example.org/g'}}

    def test_merged_graphs(self):
        expanded = jsonld.expand([
            {'@id': 'http://example.org/x', 'http://example.org/p': 'a'},
            {'@id': 'http://example.org/g', '@graph': {
                '@id': 'http://example.org/x', 'http://example.org/p': 'b'}},
        ])
        node_map = create_node_map(expanded, IdentifierIssuer('_:b'))
        merged = merge_node_map_graphs(node_map)
        assert merged['http://example.org/x']['http://example.org/p'] == [
            {'@value': 'a'}, {'@value': 'b'}]
