"""
N-Quads parsing and serialization.

.. module:: linkedjson.nquads
  :synopsis: the N-Quads codec and the quad data model
"""

import re
from collections import namedtuple
from typing import Iterable, List

from linkedjson.errors import InvalidQuadError

XSD_STRING = 'http://www.w3.org/2001/XMLSchema#string'
RDF = 'http://www.w3.org/1999/02/22-rdf-syntax-ns#'
RDF_LANGSTRING = RDF + 'langString'

# subject, predicate and graph are IRIs or '_:' blank node labels; the
# object may also be a Literal; graph is None for the default graph
Quad = namedtuple('Quad', ['subject', 'predicate', 'object', 'graph'])
Quad.__new__.__defaults__ = (None,)

Literal = namedtuple('Literal', ['value', 'datatype', 'language'])
Literal.__new__.__defaults__ = (XSD_STRING, None)

# define partial regexes
_IRI = '(?:<([^:>]+:[^>]*)>)'
_BNODE = '(_:(?:[A-Za-z0-9_](?:[A-Za-z0-9_.\\-]*[A-Za-z0-9_\\-])?))'
_PLAIN = ('"((?:[^"\\\\\\r\\n]|'
          '\\\\(?:[tbnrf"\'\\\\]|u[0-9A-Fa-f]{4}|U[0-9A-Fa-f]{8}))*)"')
_DATATYPE = '(?:\\^\\^' + _IRI + ')'
_LANGUAGE = '(?:@([a-zA-Z]+(?:-[a-zA-Z0-9]+)*))'
_LITERAL = '(?:' + _PLAIN + '(?:' + _DATATYPE + '|' + _LANGUAGE + ')?)'
_WS = '[ \\t]+'
_WSO = '[ \\t]*'

# define quad part regexes
_SUBJECT = '(?:' + _IRI + '|' + _BNODE + ')' + _WS
_PROPERTY = _IRI + _WSO
_OBJECT = '(?:' + _IRI + '|' + _BNODE + '|' + _LITERAL + ')' + _WSO
_GRAPH = '(?:\\.|(?:(?:' + _IRI + '|' + _BNODE + ')' + _WSO + '\\.))'

# literals are not allowed in the graph position
_QUAD = re.compile(
    '^' + _WSO + _SUBJECT + _PROPERTY + _OBJECT + _GRAPH + _WSO +
    '(?:#.*)?$')
_EMPTY = re.compile('^' + _WSO + '(?:#.*)?$')

_ESCAPES = {
    't': '\t',
    'b': '\b',
    'n': '\n',
    'r': '\r',
    'f': '\f',
    '"': '"',
    "'": "'",
    '\\': '\\'
}
_ESCAPE_SEQUENCE = re.compile(
    r'\\(?:([tbnrf"\'\\])|u([0-9A-Fa-f]{4})|U([0-9A-Fa-f]{8}))')
# line separators other than \n and \r are escaped as well so that no
# reader splits a literal across lines
_NEEDS_ESCAPE = re.compile(r'[\\"\x00-\x1f\x7f\x85\u2028\u2029]')
_EOLN = re.compile(r'\r\n|\n|\r')


def _escape_char(match):
    c = match.group(0)
    if c == '\\':
        return '\\\\'
    if c == '"':
        return '\\"'
    if c == '\t':
        return '\\t'
    if c == '\n':
        return '\\n'
    if c == '\r':
        return '\\r'
    return '\\u%04X' % ord(c)


def escape(value: str) -> str:
    """
    Escapes a literal value for N-Quads output.
    """
    return _NEEDS_ESCAPE.sub(_escape_char, value)


def _unescape_sequence(match):
    if match.group(1) is not None:
        return _ESCAPES[match.group(1)]
    return chr(int(match.group(2) or match.group(3), 16))


def unescape(value: str) -> str:
    """
    Replaces N-Quads escape sequences (including \\uXXXX and \\UXXXXXXXX)
    with the characters they stand for.
    """
    return _ESCAPE_SEQUENCE.sub(_unescape_sequence, value)


def parse_nquads(input_: str) -> List[Quad]:
    """
    Parses RDF in the form of N-Quads.

    Blank lines and comment lines are skipped. Duplicate quads are dropped,
    keeping the first occurrence.

    :param input_: the N-Quads input to parse.

    :return: the list of parsed quads in input order.
    """
    quads = {}

    for line_number, line in enumerate(_EOLN.split(input_), 1):
        # skip empty lines
        if _EMPTY.match(line) is not None:
            continue

        match = _QUAD.match(line)
        if match is None:
            raise InvalidQuadError(
                'Error while parsing N-Quads; invalid quad at line %d.' %
                line_number, line_number=line_number, line=line)
        match = match.groups()

        # get subject
        subject = unescape(match[0]) if match[0] is not None else match[1]

        # get predicate
        predicate = unescape(match[2])

        # get object
        if match[3] is not None:
            object_ = unescape(match[3])
        elif match[4] is not None:
            object_ = match[4]
        else:
            value = unescape(match[5])
            if match[6] is not None:
                object_ = Literal(value, unescape(match[6]))
            elif match[7] is not None:
                object_ = Literal(value, RDF_LANGSTRING, match[7])
            else:
                object_ = Literal(value)

        # get graph name, None for the default graph
        graph = None
        if match[8] is not None:
            graph = unescape(match[8])
        elif match[9] is not None:
            graph = match[9]

        quads.setdefault(Quad(subject, predicate, object_, graph), None)

    return list(quads)


def serialize_nquads(quads: Iterable[Quad]) -> str:
    """
    Converts quads to N-Quads, one line per quad in the given order.

    :param quads: the quads to convert.

    :return: the N-Quads string.
    """
    return ''.join(serialize_nquad(quad) for quad in quads)


def _serialize_term(term: str) -> str:
    if term.startswith('_:'):
        return term
    return '<' + term + '>'


def serialize_nquad(quad: Quad) -> str:
    """
    Converts a single quad to an N-Quads line.

    :param quad: the quad to convert.

    :return: the N-Quad string, including the terminating newline.
    """
    parts = [_serialize_term(quad.subject), _serialize_term(quad.predicate)]

    o = quad.object
    if isinstance(o, Literal):
        literal = '"' + escape(o.value) + '"'
        if o.datatype == RDF_LANGSTRING and o.language:
            literal += '@' + o.language
        elif o.datatype != XSD_STRING:
            literal += '^^<' + o.datatype + '>'
        parts.append(literal)
    else:
        parts.append(_serialize_term(o))

    if quad.graph is not None:
        parts.append(_serialize_term(quad.graph))

    return ' '.join(parts) + ' .\n'
