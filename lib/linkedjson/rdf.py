"""
Conversion between expanded JSON-LD and RDF quads.

.. module:: linkedjson.rdf
  :synopsis: JSON-LD to and from RDF
"""

import logging
import re

from linkedjson.errors import JsonLdError
from linkedjson.flattening import create_node_map
from linkedjson.identifier_issuer import IdentifierIssuer
from linkedjson.nquads import Literal, Quad
from linkedjson.util import (
    I18N, RDF_FIRST, RDF_LANGSTRING, RDF_LIST, RDF_NIL, RDF_REST, RDF_TYPE,
    XSD_BOOLEAN, XSD_DOUBLE, XSD_INTEGER, XSD_STRING, add_value,
    is_absolute_iri, is_bool, is_double, is_integer, is_keyword, is_list,
    is_object, is_string, is_subject_reference, is_value)

log = logging.getLogger(__name__)

_INTEGER = re.compile(r'^[+-]?[0-9]+$')
_DOUBLE = re.compile(
    r'^(\+|-)?([0-9]+(\.[0-9]*)?|\.[0-9]+)([Ee](\+|-)?[0-9]+)?$')
_WELL_FORMED_LANGUAGE = re.compile(r'^[a-zA-Z]{1,8}(-[a-zA-Z0-9]{1,8})*$')


def to_rdf(input_, options):
    """
    Converts an expanded document to a list of quads.

    :param input_: the expanded JSON-LD input.
    :param options: the RDF serialization options.
      [produceGeneralizedRdf] True to keep blank node predicates.
      [rdfDirection] 'i18n-datatype' to encode @direction in the datatype.

    :return: the list of quads.
    """
    issuer = IdentifierIssuer('_:b')
    node_map = create_node_map(input_, issuer)

    quads = []
    for graph_name in sorted(node_map):
        if graph_name == '@default':
            graph = None
        elif is_absolute_iri(graph_name):
            graph = graph_name
        else:
            # skip relative IRIs
            log.debug('Skipping graph with relative name %r.', graph_name)
            continue
        quads.extend(_graph_to_rdf(
            node_map[graph_name], graph, issuer, options))
    return quads


def _graph_to_rdf(graph, graph_name, issuer, options):
    """
    Creates the quads for one graph of a node map.

    :param graph: the map of node id to node for the graph.
    :param graph_name: the graph name, None for the default graph.
    :param issuer: the IdentifierIssuer for list blank nodes.
    :param options: the RDF serialization options.

    :return: the list of quads.
    """
    rval = []
    for id_ in sorted(graph):
        node = graph[id_]
        for property in sorted(node):
            items = node[property]
            if property == '@type':
                property = RDF_TYPE
            elif is_keyword(property):
                continue

            # skip relative IRI subjects and predicates
            if not (is_absolute_iri(id_) and is_absolute_iri(property)):
                continue

            # skip bnode predicates unless producing generalized RDF
            if (property.startswith('_:') and
                    not options.get('produceGeneralizedRdf', False)):
                continue

            for item in items:
                if is_list(item):
                    _list_to_rdf(
                        item['@list'], issuer, id_, property, graph_name,
                        rval, options)
                    continue
                object_ = _object_to_rdf(item, options)
                # skip None objects (they are relative IRIs)
                if object_ is not None:
                    rval.append(Quad(id_, property, object_, graph_name))
    return rval


def _list_to_rdf(list_, issuer, subject, predicate, graph_name, quads,
                 options):
    """
    Converts a @list value into an rdf:first/rdf:rest chain of blank nodes.

    :param list_: the @list value.
    :param issuer: the IdentifierIssuer for issuing blank node identifiers.
    :param subject: the subject for the head of the list.
    :param predicate: the predicate for the head of the list.
    :param graph_name: the graph name, None for the default graph.
    :param quads: the list of quads to append to.
    :param options: the RDF serialization options.
    """
    for item in list_:
        blank_node = issuer.get_id()
        quads.append(Quad(subject, predicate, blank_node, graph_name))

        subject = blank_node
        object_ = _object_to_rdf(item, options)
        # skip None objects (they are relative IRIs)
        if object_ is not None:
            quads.append(Quad(subject, RDF_FIRST, object_, graph_name))

        predicate = RDF_REST

    quads.append(Quad(subject, predicate, RDF_NIL, graph_name))


def canonical_double(value):
    """
    Returns the canonical xsd:double lexical form of a number, for example
    '4.5E1' for 45.0 or '5.0E-1' for 0.5.
    """
    return re.sub(
        r'(\d)0*E\+?(-?)0*(\d)', r'\1E\2\3', '%1.15E' % value)


def _object_to_rdf(item, options):
    """
    Converts a JSON-LD value object to a Literal, or a node reference or
    string to an IRI or blank node label.

    :param item: the JSON-LD value or node object.
    :param options: the RDF serialization options.

    :return: the Literal or label, None for relative IRIs.
    """
    if not is_value(item):
        id_ = item['@id'] if is_object(item) else item
        if not is_absolute_iri(id_):
            return None
        return id_

    value = item['@value']
    datatype = item.get('@type')

    # convert to XSD datatypes as appropriate
    if is_bool(value):
        return Literal(
            'true' if value else 'false', datatype or XSD_BOOLEAN)
    if is_double(value) or (datatype == XSD_DOUBLE and is_integer(value)):
        return Literal(canonical_double(value), datatype or XSD_DOUBLE)
    if is_integer(value):
        return Literal(str(value), datatype or XSD_INTEGER)
    if (is_string(value) and '@direction' in item and
            options.get('rdfDirection') == 'i18n-datatype'):
        language = (item.get('@language') or '').lower()
        return Literal(
            value, '%s%s_%s' % (I18N, language, item['@direction']))
    if '@language' in item:
        return Literal(
            value, datatype or RDF_LANGSTRING, item['@language'])
    return Literal(value, datatype or XSD_STRING)


def from_rdf(quads, options):
    """
    Converts quads to an expanded JSON-LD document.

    rdf:first/rdf:rest chains of blank nodes that are well-formed lists are
    turned into @list objects; anything else is left as plain nodes.

    :param quads: the quads to convert.
    :param options: the conversion options.
      [useRdfType] True to keep rdf:type as a property.
      [useNativeTypes] True to convert xsd:boolean, xsd:integer and
        xsd:double literals to native values.
      [rdfDirection] 'i18n-datatype' to decode i18n datatypes.
      [ordered] True to sort nodes by id.

    :return: the expanded JSON-LD output.
    """
    default_graph = {}
    graph_map = {'@default': default_graph}
    referenced_once = {}
    use_rdf_type = options.get('useRdfType', False)

    for quad in quads:
        name = '@default' if quad.graph is None else quad.graph
        node_map = graph_map.setdefault(name, {})
        if name != '@default' and name not in default_graph:
            default_graph[name] = {'@id': name}

        s = quad.subject
        p = quad.predicate
        o = quad.object

        node = node_map.setdefault(s, {'@id': s})

        object_is_id = not isinstance(o, Literal)
        if object_is_id and o not in node_map:
            node_map[o] = {'@id': o}

        if p == RDF_TYPE and not use_rdf_type and object_is_id:
            add_value(node, '@type', o, property_is_array=True,
                      allow_duplicate=False)
            continue

        value = _rdf_to_object(o, options)
        add_value(node, p, value, property_is_array=True,
                  allow_duplicate=False)

        # object may be an RDF list/partial list node but we can't know
        # easily until all triples are read
        if object_is_id:
            if o == RDF_NIL:
                # track rdf:nil uniquely per graph
                node_map[o].setdefault('usages', []).append({
                    'node': node,
                    'property': p,
                    'value': value
                })
            elif o in referenced_once:
                # object referenced more than once
                referenced_once[o] = False
            else:
                referenced_once[o] = {
                    'node': node,
                    'property': p,
                    'value': value
                }

    # convert linked lists to @list arrays
    for graph_object in graph_map.values():
        if RDF_NIL not in graph_object:
            continue
        nil = graph_object[RDF_NIL]
        for usage in nil.get('usages', []):
            _convert_list(graph_object, referenced_once, usage)
        nil.pop('usages', None)

    ordered = options.get('ordered', True)

    def _ids(node_map):
        return sorted(node_map) if ordered else list(node_map)

    result = []
    for subject in _ids(default_graph):
        node = default_graph[subject]
        if subject in graph_map and subject != '@default':
            graph = node['@graph'] = []
            for s in _ids(graph_map[subject]):
                n = graph_map[subject][s]
                # only add full subjects to top-level
                if not is_subject_reference(n):
                    graph.append(n)
        if not is_subject_reference(node):
            result.append(node)

    return result


def _is_well_formed_list_node(node, referenced_once):
    """
    Returns True if the node is a well-formed list node: it is referenced
    only once, has exactly one rdf:first and one rdf:rest value, and has no
    other keys than @id and an optional @type of rdf:List.
    """
    key_count = len(node)
    first = node.get(RDF_FIRST)
    rest = node.get(RDF_REST)
    return (
        node['@id'].startswith('_:') and
        is_object(referenced_once.get(node['@id'])) and
        first is not None and len(first) == 1 and
        rest is not None and len(rest) == 1 and
        (key_count == 3 or (
            key_count == 4 and node.get('@type') == [RDF_LIST])))


def _convert_list(graph_object, referenced_once, usage):
    node = usage['node']
    property = usage['property']
    head = usage['value']
    list_ = []
    list_nodes = []

    # walk backwards from rdf:nil
    while property == RDF_REST and \
            _is_well_formed_list_node(node, referenced_once):
        list_.append(node[RDF_FIRST][0])
        list_nodes.append(node['@id'])

        usage = referenced_once[node['@id']]
        node = usage['node']
        property = usage['property']
        head = usage['value']

    # the list is nested in another list
    if property == RDF_FIRST:
        # an empty nested list stays rdf:nil
        if not list_nodes:
            return

        # preserve list head
        head = graph_object[head['@id']][RDF_REST][0]
        list_.pop()
        list_nodes.pop()

    # transform list into @list object
    del head['@id']
    list_.reverse()
    head['@list'] = list_
    for id_ in list_nodes:
        graph_object.pop(id_, None)


def _rdf_to_object(o, options):
    """
    Converts a quad object to a JSON-LD value.

    :param o: the quad object to convert.
    :param options: the conversion options.

    :return: the JSON-LD value or node reference.
    """
    if not isinstance(o, Literal):
        return {'@id': o}

    rval = {'@value': o.value}
    datatype = o.datatype

    if o.language is not None:
        rval['@language'] = o.language
        return rval

    if (options.get('rdfDirection') == 'i18n-datatype' and
            datatype.startswith(I18N)):
        language, _, direction = datatype[len(I18N):].partition('_')
        if language:
            if not _WELL_FORMED_LANGUAGE.match(language):
                raise JsonLdError(
                    'Invalid RDF; the i18n datatype has an invalid '
                    'language tag.', 'jsonld.SyntaxError',
                    {'datatype': datatype},
                    code='invalid language-tagged string')
            rval['@language'] = language
        if direction:
            rval['@direction'] = direction
        return rval

    if options.get('useNativeTypes', False):
        value = o.value
        if datatype == XSD_BOOLEAN and value in ('true', 'false'):
            rval['@value'] = value == 'true'
            return rval
        if datatype == XSD_INTEGER and _INTEGER.match(value):
            rval['@value'] = int(value)
            return rval
        if datatype == XSD_DOUBLE and _DOUBLE.match(value):
            rval['@value'] = float(value)
            return rval

    if datatype != XSD_STRING:
        rval['@type'] = datatype
    return rval
