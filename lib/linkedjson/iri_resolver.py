"""
IRI resolution, expansion and compaction.

The RFC 3986 helpers (:func:`resolve`, :func:`unresolve`) work on plain
strings. :func:`expand_iri` and :func:`compact_iri` are pure functions of an
active context.

.. module:: linkedjson.iri_resolver
  :synopsis: IRI handling for JSON-LD
"""

import re
from collections import namedtuple
from typing import Optional

from linkedjson.errors import JsonLdError
from linkedjson.util import (
    has_keyword_form, is_absolute_iri, is_graph, is_keyword,
    is_list, is_object, is_value, shortest_least_key)

ParsedIri = namedtuple(
    'ParsedIri', ['scheme', 'authority', 'path', 'query', 'fragment'])

# RFC 3986 appendix B
_IRI_RE = re.compile(
    r'^(?:([^:/?#]+):)?(?://([^/?#]*))?([^?#]*)(?:\?([^#]*))?(?:#(.*))?$',
    re.S)


def parse_iri(iri: str) -> ParsedIri:
    """
    Splits an IRI into its five RFC 3986 components. Absent components are
    None; the path is always a (possibly empty) string.
    """
    scheme, authority, path, query, fragment = _IRI_RE.match(iri).groups()
    return ParsedIri(scheme, authority, path or '', query, fragment)


def unparse_iri(parsed: ParsedIri) -> str:
    rval = ''
    if parsed.scheme is not None:
        rval += parsed.scheme + ':'
    if parsed.authority is not None:
        rval += '//' + parsed.authority
    rval += parsed.path
    if parsed.query is not None:
        rval += '?' + parsed.query
    if parsed.fragment is not None:
        rval += '#' + parsed.fragment
    return rval


def remove_dot_segments(path: str) -> str:
    """
    Removes '.' and '..' segments from a path (RFC 3986 section 5.2.4).
    """
    output = []
    while path:
        if path.startswith('../'):
            path = path[3:]
        elif path.startswith('./'):
            path = path[2:]
        elif path.startswith('/./'):
            path = path[2:]
        elif path == '/.':
            path = '/'
        elif path.startswith('/../'):
            path = path[3:]
            if output:
                output.pop()
        elif path == '/..':
            path = '/'
            if output:
                output.pop()
        elif path in ('.', '..'):
            path = ''
        else:
            end = path.find('/', 1 if path.startswith('/') else 0)
            if end == -1:
                end = len(path)
            output.append(path[:end])
            path = path[end:]
    return ''.join(output)


def resolve(iri: str, base: Optional[str] = None) -> str:
    """
    Resolves a (possibly relative) IRI against a base IRI.

    :param iri: the IRI reference to resolve.
    :param base: the base IRI; a falsy base leaves the reference unchanged.

    :return: the resolved IRI.
    """
    if not base:
        return iri

    r = parse_iri(iri)
    if r.scheme is not None:
        return iri

    b = parse_iri(base)

    if r.authority is not None:
        authority, path, query = r.authority, remove_dot_segments(r.path), \
            r.query
    else:
        authority = b.authority
        if r.path == '':
            path = b.path
            query = r.query if r.query is not None else b.query
        else:
            if r.path.startswith('/'):
                path = remove_dot_segments(r.path)
            else:
                if b.authority is not None and b.path == '':
                    merged = '/' + r.path
                else:
                    merged = b.path[:b.path.rfind('/') + 1] + r.path
                path = remove_dot_segments(merged)
            query = r.query

    return unparse_iri(ParsedIri(b.scheme, authority, path, query, r.fragment))


def unresolve(iri: str, base: Optional[str] = None) -> str:
    """
    Removes a base IRI from the given absolute IRI, producing the shortest
    relative reference that resolves back to it.

    :param iri: the absolute IRI.
    :param base: the base IRI.

    :return: the relative IRI if relative to base, otherwise the absolute
      IRI.
    """
    if not base:
        return iri

    b = parse_iri(base)
    r = parse_iri(iri)

    # IRIs from different origins cannot be made relative
    if b.scheme != r.scheme or b.authority != r.authority:
        return iri

    base_segments = remove_dot_segments(b.path).split('/')
    iri_segments = remove_dot_segments(r.path).split('/')

    # keep the last IRI segment unless a query or fragment follows it
    last = 0 if (r.fragment is not None or r.query is not None) else 1
    while (len(base_segments) > 0 and len(iri_segments) > last and
            base_segments[0] == iri_segments[0]):
        base_segments.pop(0)
        iri_segments.pop(0)

    rval = ''
    if len(base_segments) > 0:
        # the last base segment is a file name, not a directory
        base_segments.pop()
        rval += '../' * len(base_segments)

    rval += '/'.join(iri_segments)

    if r.query is not None:
        rval += '?' + r.query
    if r.fragment is not None:
        rval += '#' + r.fragment

    if rval == '':
        rval = './'
    elif has_keyword_form(rval) or (':' in rval.split('/', 1)[0]):
        rval = './' + rval
    return rval


def expand_iri(active_ctx, value, vocab=False, base=False):
    """
    Expands a string value to a full IRI. The string may be a term, a
    prefix, a relative IRI, or an absolute IRI.

    Terms used inside a local context being processed must already be
    defined; the context processor takes care of that.

    :param active_ctx: the active context to use.
    :param value: the string value to expand.
    :param vocab: True to concatenate after @vocab, False not to.
    :param base: True to resolve IRIs against the base IRI, False not to.

    :return: the expanded value, or None if it expands to nothing.
    """
    if value is None or not isinstance(value, str) or is_keyword(value):
        return value

    if has_keyword_form(value):
        return None

    mappings = active_ctx.mappings

    # term lookup wins over compact IRI parsing
    if vocab and value in mappings:
        mapping = mappings[value]
        if mapping is None:
            return None
        return mapping['@id']

    colon = value.find(':', 1)
    if colon != -1:
        prefix = value[:colon]
        suffix = value[colon + 1:]

        # blank node or already-absolute hierarchical IRI
        if prefix == '_' or suffix.startswith('//'):
            return value

        mapping = mappings.get(prefix)
        if mapping and mapping.get('_prefix') and mapping['@id'] is not None:
            return mapping['@id'] + suffix

        if is_absolute_iri(value):
            return value

    if vocab and active_ctx.vocab is not None:
        return active_ctx.vocab + value

    if base:
        return resolve(value, active_ctx.base)

    return value


def compact_iri(active_ctx, iri, value=None, vocab=False, reverse=False):
    """
    Compacts an IRI or keyword into a term or CURIE if it can be. If the
    IRI has an associated value it may be used to choose the term.

    :param active_ctx: the active context to use.
    :param iri: the IRI to compact.
    :param value: the value to check or None.
    :param vocab: True to compact using @vocab if available, False not to.
    :param reverse: True if a reverse property is being compacted, False if
      not.

    :return: the compacted term, prefix, keyword alias, or original IRI.
    """
    if iri is None:
        return iri

    inverse = active_ctx.get_inverse()

    # keyword aliases are registered under @none/@type/@none
    if is_keyword(iri):
        alias = inverse.get(iri, {}).get('@none', {}).get(
            '@type', {}).get('@none')
        if alias:
            return alias

    if vocab and iri in inverse:
        term = _select_by_value(active_ctx, iri, value, reverse)
        if term is not None:
            return term

    # try a @vocab suffix
    if vocab and active_ctx.vocab:
        vocab_ = active_ctx.vocab
        if iri.startswith(vocab_) and iri != vocab_:
            suffix = iri[len(vocab_):]
            if suffix not in active_ctx.mappings:
                return suffix

    # try a compact IRI
    choice = None
    mappings = active_ctx.mappings
    for term, definition in mappings.items():
        if definition is None or not definition.get('_prefix'):
            continue
        term_iri = definition['@id']
        if (term_iri is None or term_iri == iri or
                not iri.startswith(term_iri)):
            continue

        curie = term + ':' + iri[len(term_iri):]
        usable = (curie not in mappings or (
            value is None and mappings[curie] is not None and
            mappings[curie]['@id'] == iri))
        if usable and (choice is None or
                       shortest_least_key(curie) < shortest_least_key(choice)):
            choice = curie

    if choice is not None:
        return choice

    for term, definition in mappings.items():
        if (definition and definition.get('_prefix') and
                iri.startswith(term + ':')):
            raise JsonLdError(
                'Absolute IRI confused with prefix.',
                'jsonld.SyntaxError', {'iri': iri, 'term': term},
                code='IRI confused with prefix')

    if not vocab:
        return unresolve(iri, active_ctx.base)

    return iri


def _select_by_value(active_ctx, iri, value, reverse):
    """
    Works out the container and type/language preferences for the value
    being compacted and runs term selection with them.
    """
    containers = []

    if is_object(value) and '@index' in value and '@graph' not in value:
        containers.extend(['@index', '@index@set'])

    # a preserved value is compacted as the value it preserves
    if is_object(value) and '@preserve' in value:
        value = value['@preserve'][0]

    if is_graph(value):
        if '@index' in value:
            containers.extend([
                '@graph@index', '@graph@index@set', '@index', '@index@set'])
        if '@id' in value:
            containers.extend(['@graph@id', '@graph@id@set'])
        containers.extend(['@graph', '@graph@set', '@set'])
        if '@index' not in value:
            containers.extend([
                '@graph@index', '@graph@index@set', '@index', '@index@set'])
        if '@id' not in value:
            containers.extend(['@graph@id', '@graph@id@set'])
    elif is_object(value) and not is_value(value):
        containers.extend(['@id', '@id@set', '@type', '@set@type'])

    type_or_language = '@language'
    type_or_language_value = '@null'

    if reverse:
        type_or_language = '@type'
        type_or_language_value = '@reverse'
        containers.append('@set')
    elif is_list(value):
        if '@index' not in value:
            containers.append('@list')
        list_ = value['@list']
        if len(list_) == 0:
            type_or_language = '@any'
            type_or_language_value = '@none'
        else:
            common_language = None
            common_type = None
            for item in list_:
                item_language = '@none'
                item_type = '@none'
                if is_value(item):
                    if '@direction' in item:
                        item_language = ('%s_%s' % (
                            item.get('@language', ''),
                            item['@direction'])).lower()
                    elif '@language' in item:
                        item_language = item['@language'].lower()
                    elif '@type' in item:
                        item_type = item['@type']
                    else:
                        item_language = '@null'
                else:
                    item_type = '@id'
                if common_language is None:
                    common_language = item_language
                elif item_language != common_language and is_value(item):
                    common_language = '@none'
                if common_type is None:
                    common_type = item_type
                elif item_type != common_type:
                    common_type = '@none'
                if common_language == '@none' and common_type == '@none':
                    break
            common_language = common_language or '@none'
            common_type = common_type or '@none'
            if common_type != '@none':
                type_or_language = '@type'
                type_or_language_value = common_type
            else:
                type_or_language_value = common_language
    else:
        if is_value(value):
            if '@language' in value and '@index' not in value:
                containers.extend(['@language', '@language@set'])
                type_or_language_value = value['@language'].lower()
                if value.get('@direction'):
                    type_or_language_value += '_' + value['@direction']
            elif '@direction' in value and '@index' not in value:
                type_or_language_value = '_' + value['@direction']
            elif '@type' in value:
                type_or_language = '@type'
                type_or_language_value = value['@type']
        else:
            type_or_language = '@type'
            type_or_language_value = '@id'
            containers.extend(['@id', '@id@set', '@type', '@set@type'])
        containers.append('@set')

    containers.append('@none')

    # unindexed values may still use an index map under @none
    if is_object(value) and '@index' not in value:
        containers.extend(['@index', '@index@set'])

    # plain values may use a language map under @none
    if is_value(value) and len(value) == 1:
        containers.extend(['@language', '@language@set'])

    return select_term(
        active_ctx, iri, value, containers,
        type_or_language, type_or_language_value)


def select_term(
        active_ctx, iri, value, containers,
        type_or_language, type_or_language_value):
    """
    Picks the preferred compaction term from the inverse context entry.

    :param active_ctx: the active context.
    :param iri: the IRI to pick the term for.
    :param value: the value to pick the term for.
    :param containers: the preferred containers.
    :param type_or_language: either '@type', '@language' or '@any'.
    :param type_or_language_value: the preferred value for @type or
      @language.

    :return: the preferred term, or None.
    """
    if type_or_language_value is None:
        type_or_language_value = '@null'

    prefs = []

    # determine prefs for @id based on whether value compacts to a term
    if (type_or_language_value in ('@id', '@reverse') and
            is_object(value) and '@id' in value):
        if type_or_language_value == '@reverse':
            prefs.append('@reverse')
        result = compact_iri(active_ctx, value['@id'], None, vocab=True)
        mapping = active_ctx.mappings.get(result)
        if mapping is not None and mapping['@id'] == value['@id']:
            prefs.extend(['@vocab', '@id'])
        else:
            prefs.extend(['@id', '@vocab'])
    else:
        prefs.append(type_or_language_value)

        # a language_direction preference also accepts the direction alone
        lang_dir = [p for p in prefs if '_' in p]
        if lang_dir:
            prefs.append('_' + lang_dir[0].split('_', 1)[1])
    prefs.extend(['@none', '@any'])

    container_map = active_ctx.get_inverse()[iri]
    for container in containers:
        if container not in container_map:
            continue
        value_map = container_map[container][type_or_language]
        for pref in prefs:
            if pref in value_map:
                return value_map[pref]
    return None

