"""
Shape predicates and value helpers shared by the JSON-LD algorithms.

.. module:: linkedjson.util
  :synopsis: JSON-LD structure helpers
"""

import copy
import re
from numbers import Integral, Real

from linkedjson.errors import JsonLdError

# constants
XSD = 'http://www.w3.org/2001/XMLSchema#'
XSD_BOOLEAN = XSD + 'boolean'
XSD_DOUBLE = XSD + 'double'
XSD_INTEGER = XSD + 'integer'
XSD_STRING = XSD + 'string'

RDF = 'http://www.w3.org/1999/02/22-rdf-syntax-ns#'
RDF_LIST = RDF + 'List'
RDF_FIRST = RDF + 'first'
RDF_REST = RDF + 'rest'
RDF_NIL = RDF + 'nil'
RDF_TYPE = RDF + 'type'
RDF_LANGSTRING = RDF + 'langString'

I18N = 'https://www.w3.org/ns/i18n#'

KEYWORDS = [
    '@base',
    '@container',
    '@context',
    '@default',
    '@direction',
    '@embed',
    '@explicit',
    '@graph',
    '@id',
    '@import',
    '@index',
    '@language',
    '@list',
    '@nest',
    '@none',
    '@omitDefault',
    '@prefix',
    '@preserve',
    '@propagate',
    '@protected',
    '@requireAll',
    '@reverse',
    '@set',
    '@type',
    '@value',
    '@version',
    '@vocab']

# anything of the form '@foo' that is not a keyword is ignored
KEYWORD_FORM = re.compile(r'^@[a-zA-Z]+$')

ABSOLUTE_IRI = re.compile(r'^([A-Za-z][A-Za-z0-9+\-.]*|_):[^\s]*$')

# shapes returned by classify()
NODE = 'node'
REFERENCE = 'reference'
VALUE = 'value'
LIST = 'list'
SET = 'set'
GRAPH = 'graph'
ARRAY = 'array'
SCALAR = 'scalar'
NULL = 'null'


def classify(element):
    """
    Determines the shape of an expanded JSON-LD element once so callers can
    dispatch on it instead of probing for keys repeatedly.

    :param element: the element to classify.

    :return: one of NODE, REFERENCE, VALUE, LIST, SET, GRAPH, ARRAY, SCALAR
      or NULL.
    """
    if element is None:
        return NULL
    if isinstance(element, list):
        return ARRAY
    if not isinstance(element, dict):
        return SCALAR
    if '@value' in element:
        return VALUE
    if '@list' in element:
        return LIST
    if '@set' in element:
        return SET
    if is_graph(element):
        return GRAPH
    if is_subject_reference(element):
        return REFERENCE
    return NODE


def is_keyword(v):
    return is_string(v) and v in KEYWORDS


def has_keyword_form(v):
    """
    Returns True if the value looks like a keyword (@ followed by letters)
    whether or not it is one.
    """
    return is_string(v) and KEYWORD_FORM.match(v) is not None


def is_object(v):
    return isinstance(v, dict)


def is_empty_object(v):
    return isinstance(v, dict) and len(v) == 0


def is_array(v):
    return isinstance(v, list)


def is_string(v):
    return isinstance(v, str)


def is_bool(v):
    return isinstance(v, bool)


def is_integer(v):
    return isinstance(v, Integral) and not isinstance(v, bool)


def is_double(v):
    return not isinstance(v, Integral) and isinstance(v, Real)


def is_numeric(v):
    return is_integer(v) or is_double(v)


def is_subject(v):
    """
    Returns True if the given value is a subject with properties.

    A subject is an object that is not a @value, @set or @list and has
    more than just an @id (or has no @id at all).
    """
    if (isinstance(v, dict) and
            not any(k in v for k in ('@value', '@set', '@list'))):
        return len(v) > 1 or '@id' not in v
    return False


def is_subject_reference(v):
    return isinstance(v, dict) and len(v) == 1 and '@id' in v


def is_value(v):
    return isinstance(v, dict) and '@value' in v


def is_list(v):
    return isinstance(v, dict) and '@list' in v


def is_graph(v):
    """
    Returns True if the given value is a graph object: it has @graph and at
    most @id and @index besides.
    """
    return (isinstance(v, dict) and '@graph' in v and
            len([k for k in v if k not in ('@id', '@index')]) == 1)


def is_simple_graph(v):
    """
    Returns True if the given value is a graph object without an @id.
    """
    return is_graph(v) and '@id' not in v


def is_bnode(v):
    """
    Returns True if the given node object is a blank node.
    """
    if isinstance(v, dict):
        if '@id' in v:
            return is_string(v['@id']) and v['@id'].startswith('_:')
        return (len(v) == 0 or
                not any(k in v for k in ('@value', '@set', '@list')))
    return False


def is_bnode_id(v):
    return is_string(v) and v.startswith('_:')


def is_absolute_iri(v):
    return is_string(v) and ABSOLUTE_IRI.match(v) is not None


def arrayify(value):
    """
    Wraps a value in a list if it is not one already.
    """
    return value if isinstance(value, list) else [value]


def get_values(subject, property):
    """
    Gets all of the values for a subject's property as a list.
    """
    return arrayify(subject.get(property) or [])


def has_property(subject, property):
    if property in subject:
        value = subject[property]
        return not isinstance(value, list) or len(value) > 0
    return False


def has_value(subject, property, value):
    """
    Determines if the given value is a property of the given subject.
    """
    if has_property(subject, property):
        val = subject[property]
        if is_list(val):
            val = val['@list']
        if isinstance(val, list):
            return any(compare_values(value, v) for v in val)
        return compare_values(value, val)
    return False


def add_value(
        subject, property, value, property_is_array=False,
        value_is_array=False, allow_duplicate=True):
    """
    Adds a value to a subject. If the value is a list, all values in the
    list will be added unless value_is_array is set.

    :param subject: the subject to add the value to.
    :param property: the property that relates the value to the subject.
    :param value: the value to add.
    :param property_is_array: True if the property is always an array.
    :param value_is_array: True if the value is to be added as a single
      array value.
    :param allow_duplicate: True to allow duplicates, False not to (uses
      a simple shallow comparison of subject ID or value).
    """
    if value_is_array:
        subject[property] = value
    elif isinstance(value, list):
        if (len(value) == 0 and property_is_array and
                property not in subject):
            subject[property] = []
        for v in value:
            add_value(
                subject, property, v,
                property_is_array=property_is_array,
                allow_duplicate=allow_duplicate)
    elif property in subject:
        # check if subject already has value if duplicates not allowed
        has_value_ = (not allow_duplicate and
                      has_value(subject, property, value))

        # make property an array if value not present or always an array
        if (not isinstance(subject[property], list) and
                (not has_value_ or property_is_array)):
            subject[property] = [subject[property]]

        if not has_value_:
            subject[property].append(value)
    else:
        # add new value as set or single value
        subject[property] = [value] if property_is_array else value


def compare_values(v1, v2):
    """
    Compares two JSON-LD values for equality. Two JSON-LD values will be
    considered equal if:

    1. They are both primitives of the same type and value.
    2. They are both @values with the same @value, @type, @language,
      and @index, OR
    3. They both have @ids that are the same.

    :param v1: the first value.
    :param v2: the second value.

    :return: True if v1 and v2 are considered equal, False if not.
    """
    # 1. equal primitives
    if not isinstance(v1, dict) and not isinstance(v2, dict):
        return type(v1) is type(v2) and v1 == v2

    # 2. equal @values
    if is_value(v1) and is_value(v2):
        return (v1['@value'] == v2['@value'] and
                type(v1['@value']) is type(v2['@value']) and
                v1.get('@type') == v2.get('@type') and
                v1.get('@language') == v2.get('@language') and
                v1.get('@direction') == v2.get('@direction') and
                v1.get('@index') == v2.get('@index'))

    # 3. equal @ids
    if (isinstance(v1, dict) and '@id' in v1 and
            isinstance(v2, dict) and '@id' in v2):
        return v1['@id'] == v2['@id']

    return False


def shortest_least_key(s):
    return (len(s), s)


def clone(value):
    return copy.deepcopy(value)


def validate_type_value(v, is_frame=False):
    """
    Raises an 'invalid type value' error unless v is a string, an array of
    strings or (in frames) an empty object or @default object.
    """
    if is_string(v):
        return
    if isinstance(v, list) and all(is_string(vv) for vv in v):
        return
    if is_frame and isinstance(v, dict):
        if len(v) == 0:
            return
        if len(v) == 1 and '@default' in v and is_string(v['@default']):
            return
    if is_frame and isinstance(v, list) and all(
            is_string(vv) or is_empty_object(vv) for vv in v):
        return
    raise JsonLdError(
        'Invalid JSON-LD syntax; "@type" value must be a string, an array '
        'of strings, an empty object, or a default object.',
        'jsonld.SyntaxError', {'value': v}, code='invalid type value')
