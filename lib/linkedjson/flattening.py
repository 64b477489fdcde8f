"""
Node map generation and the JSON-LD flattening algorithm.

.. module:: linkedjson.flattening
  :synopsis: JSON-LD node maps and flattening
"""

from linkedjson import util
from linkedjson.errors import JsonLdError
from linkedjson.util import (
    add_value, clone, is_bnode, is_keyword, is_list, is_subject,
    is_subject_reference, is_value)


class NodeMapBuilder(object):
    """
    Builds a node map from an expanded document.

    The node map maps graph names ('@default' for the default graph) to maps
    of node id to the merged node object. Blank nodes are relabeled with the
    given issuer, which must be scoped to a single processing call.

    :param issuer: the IdentifierIssuer for blank node labels.
    """

    def __init__(self, issuer):
        self.issuer = issuer
        self.graphs = {'@default': {}}

    def _bnode_name(self, id_):
        return self.issuer.get_id(id_)

    def build(self, input_, graph='@default', name=None, list_=None):
        """
        Recursively adds an expanded element to the node map.

        :param input_: the expanded element.
        :param graph: the name of the graph the element belongs to.
        :param name: the id to use for the element, None to derive it.
        :param list_: the list being built when the element is a list item,
          None otherwise.

        :return: the node map.
        """
        shape = util.classify(input_)

        if shape == util.ARRAY:
            for e in input_:
                self.build(e, graph, None, list_)
            return self.graphs

        if shape in (util.SCALAR, util.NULL):
            # add non-object to list
            if list_ is not None:
                list_.append(input_)
            return self.graphs

        if shape == util.VALUE:
            if '@type' in input_:
                type_ = input_['@type']
                if type_.startswith('_:'):
                    input_['@type'] = self._bnode_name(type_)
            if list_ is not None:
                list_.append(input_)
            return self.graphs

        if shape == util.LIST and list_ is not None:
            nested = []
            self.build(input_['@list'], graph, name, nested)
            list_.append({'@list': nested})
            return self.graphs

        # element is a node object or reference from here on

        # rename @type blank nodes
        if '@type' in input_:
            input_['@type'] = [
                self._bnode_name(t) if t.startswith('_:') else t
                for t in input_['@type']]

        if name is None:
            name = (self._bnode_name(input_.get('@id'))
                    if is_bnode(input_) else input_['@id'])

        if list_ is not None:
            list_.append({'@id': name})

        subjects = self.graphs.setdefault(graph, {})
        subject = subjects.setdefault(name, {})
        subject['@id'] = name

        for property in sorted(input_):
            if property == '@id':
                continue

            if property == '@reverse':
                self._add_reverse(input_['@reverse'], graph, name)
                continue

            if property == '@graph':
                # add the graph, named after the enclosing node
                self.graphs.setdefault(name, {})
                self.build(input_['@graph'], name)
                continue

            if property != '@type' and is_keyword(property):
                if (property == '@index' and property in subject and
                        subject[property] != input_[property]):
                    raise JsonLdError(
                        'Invalid JSON-LD syntax; conflicting @index '
                        'property detected.', 'jsonld.SyntaxError',
                        {'subject': subject}, code='conflicting indexes')
                subject[property] = input_[property]
                continue

            objects = input_[property]

            # relabel blank node properties
            if property.startswith('_:'):
                property = self._bnode_name(property)

            # ensure property is added for empty arrays
            if len(objects) == 0:
                add_value(subject, property, [], property_is_array=True)
                continue

            for o in objects:
                if property == '@type' and o.startswith('_:'):
                    o = self._bnode_name(o)

                if is_subject(o) or is_subject_reference(o):
                    if '@id' in o and o['@id'] is None:
                        continue
                    id_ = (self._bnode_name(o.get('@id'))
                           if is_bnode(o) else o['@id'])
                    add_value(
                        subject, property, {'@id': id_},
                        property_is_array=True, allow_duplicate=False)
                    self.build(o, graph, id_)
                elif is_value(o):
                    if '@type' in o and o['@type'].startswith('_:'):
                        o['@type'] = self._bnode_name(o['@type'])
                    add_value(
                        subject, property, o,
                        property_is_array=True, allow_duplicate=False)
                elif is_list(o):
                    items = []
                    self.build(o['@list'], graph, name, items)
                    add_value(
                        subject, property, {'@list': items},
                        property_is_array=True, allow_duplicate=False)
                else:
                    # plain values such as @type IRIs
                    add_value(
                        subject, property, o,
                        property_is_array=True, allow_duplicate=False)

        return self.graphs

    def _add_reverse(self, reverse_map, graph, name):
        referenced_node = {'@id': name}
        subjects = self.graphs[graph]
        for reverse_property in sorted(reverse_map):
            for item in reverse_map[reverse_property]:
                item_name = (self._bnode_name(item.get('@id'))
                             if is_bnode(item) else item['@id'])
                self.build(item, graph, item_name)
                add_value(
                    subjects[item_name], reverse_property, referenced_node,
                    property_is_array=True, allow_duplicate=False)


def create_node_map(input_, issuer):
    """
    Creates a node map for an expanded document.

    :param input_: the expanded document; it is modified in place when blank
      node types are relabeled.
    :param issuer: the IdentifierIssuer to use for blank node labels.

    :return: the node map, keyed by graph name.
    """
    return NodeMapBuilder(issuer).build(input_)


def merge_node_map_graphs(graphs):
    """
    Merges all the graphs of a node map into a single map of node id to
    node, as used for framing the merged graph.

    :param graphs: the node map.

    :return: the merged node map.
    """
    merged = {}
    for name in sorted(graphs):
        for id_ in sorted(graphs[name]):
            node = graphs[name][id_]
            merged_node = merged.setdefault(id_, {'@id': id_})
            for property in sorted(node):
                if is_keyword(property) and property != '@type':
                    merged_node[property] = clone(node[property])
                else:
                    for value in node[property]:
                        add_value(
                            merged_node, property, clone(value),
                            property_is_array=True, allow_duplicate=False)
    return merged


def _subject_order(id_):
    return id_.startswith('_:'), id_


def flatten(input_, issuer):
    """
    Performs JSON-LD flattening on an expanded document.

    Named graphs are attached to the default graph node of the same name
    under '@graph'. Nodes with IRIs come first, then blank nodes, each in
    code point order of their ids. Nodes that are only references are
    dropped.

    :param input_: the expanded document to flatten.
    :param issuer: the IdentifierIssuer to use for blank node labels.

    :return: the flattened output as a list of node objects.
    """
    graphs = create_node_map(input_, issuer)

    default_graph = graphs['@default']
    for graph_name in sorted(graphs):
        if graph_name == '@default':
            continue
        node_map = graphs[graph_name]
        subject = default_graph.get(graph_name)
        if subject is None:
            subject = default_graph[graph_name] = {
                '@id': graph_name, '@graph': []}
        elif '@graph' not in subject:
            subject['@graph'] = []
        graph = subject['@graph']
        for id_ in sorted(node_map, key=_subject_order):
            node = node_map[id_]
            if not is_subject_reference(node):
                graph.append(node)

    return [
        default_graph[id_]
        for id_ in sorted(default_graph, key=_subject_order)
        if not is_subject_reference(default_graph[id_])]
