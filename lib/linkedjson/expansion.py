"""
The JSON-LD expansion algorithm.

.. module:: linkedjson.expansion
  :synopsis: JSON-LD expansion
"""

import logging

from linkedjson.context import UNDEFINED
from linkedjson.errors import JsonLdError
from linkedjson.iri_resolver import expand_iri
from linkedjson.util import (
    add_value, arrayify, is_absolute_iri, is_array, is_bnode_id, is_bool,
    is_empty_object, is_graph, is_keyword, is_list, is_numeric, is_object,
    is_string, is_value, validate_type_value)

log = logging.getLogger(__name__)


class Expander(object):
    """
    Expands JSON-LD elements against active contexts.

    :param context_processor: the ContextProcessor of the current call, used
      for embedded and scoped contexts.
    :param options: the call options.
    """

    def __init__(self, context_processor, options):
        self.context_processor = context_processor
        self.options = options
        self.is_frame = options.get('isFrame', False)
        self.ordered = options.get('ordered', True)

    def _keys(self, element):
        return sorted(element) if self.ordered else list(element)

    def _process(self, active_ctx, local_ctx, **kwargs):
        return self.context_processor.process(active_ctx, local_ctx, **kwargs)

    def _drop_key(self, key, expanded_property):
        """
        Handles a key that does not expand to an IRI or keyword.
        """
        if self.options.get('strict'):
            raise JsonLdError(
                'Invalid JSON-LD syntax; the key "%s" could not be mapped '
                'to an IRI.' % key, 'jsonld.SyntaxError',
                {'key': key, 'expanded': expanded_property},
                code='invalid property')
        log.debug('Dropping key "%s" which does not expand to an IRI', key)
        on_key_dropped = self.options.get('onKeyDropped')
        if on_key_dropped is not None:
            on_key_dropped(key)

    def expand(
            self, active_ctx, active_property, element, inside_list=False,
            inside_index=False, type_scoped_ctx=None):
        """
        Recursively expands an element using the given context. Any context
        in the element will be removed. All context URLs must have been
        retrieved before calling this method.

        :param active_ctx: the context to use.
        :param active_property: the property for the element, None for none.
        :param element: the element to expand.
        :param inside_list: True if the element is inside a list.
        :param inside_index: True if the element is inside an index map.
        :param type_scoped_ctx: the context before any type-scoped context
          was applied to the enclosing node object.

        :return: the expanded value.
        """
        if element is None:
            return None

        # disable framing if active_property is @default
        if active_property == '@default' and self.is_frame:
            self.is_frame = False
            try:
                return self.expand(
                    active_ctx, active_property, element, inside_list,
                    inside_index, type_scoped_ctx)
            finally:
                self.is_frame = True

        if not is_array(element) and not is_object(element):
            # drop free-floating scalars that are not in lists
            if (not inside_list and (
                    active_property is None or
                    expand_iri(active_ctx, active_property, vocab=True) ==
                    '@graph')):
                return None
            return self.expand_value(active_ctx, active_property, element)

        if is_array(element):
            rval = []
            container = active_ctx.container(active_property)
            inside_list = inside_list or '@list' in container
            for e in element:
                e = self.expand(
                    active_ctx, active_property, e, inside_list=inside_list,
                    inside_index=inside_index,
                    type_scoped_ctx=type_scoped_ctx)
                if inside_list and (is_array(e) or is_list(e)):
                    raise JsonLdError(
                        'Invalid JSON-LD syntax; lists of lists are not '
                        'permitted.', 'jsonld.SyntaxError',
                        code='list of lists')
                if e is None:
                    continue
                if is_array(e):
                    rval.extend(e)
                else:
                    rval.append(e)
            return rval

        # element is a map
        expanded_active_property = expand_iri(
            active_ctx, active_property, vocab=True)
        property_scoped_ctx = active_ctx.scoped_context(active_property)

        # revert a type-scoped context unless this is a value object or a
        # node reference
        if type_scoped_ctx is None and active_ctx.previous_context is not None:
            type_scoped_ctx = active_ctx
        keys = self._keys(element)
        must_revert = not inside_index
        if (must_revert and type_scoped_ctx is not None and
                len(keys) <= 2 and '@context' not in keys):
            for key in keys:
                expanded_property = expand_iri(
                    type_scoped_ctx, key, vocab=True)
                if expanded_property == '@value':
                    must_revert = False
                    active_ctx = type_scoped_ctx
                    break
                if expanded_property == '@id' and len(keys) == 1:
                    must_revert = False
                    break

        if must_revert:
            active_ctx = active_ctx.revert_to_previous_context()

        if property_scoped_ctx is not UNDEFINED:
            active_ctx = self._process(
                active_ctx, property_scoped_ctx, override_protected=True)

        if '@context' in element:
            active_ctx = self._process(active_ctx, element['@context'])

        type_scoped_ctx = active_ctx

        # apply type-scoped contexts in lexicographical order of the types
        type_key = None
        for key in keys:
            if expand_iri(active_ctx, key, vocab=True) != '@type':
                continue
            type_key = type_key or key
            types = sorted(
                t for t in arrayify(element[key]) if is_string(t))
            for type_ in types:
                ctx = type_scoped_ctx.scoped_context(type_)
                if ctx is not UNDEFINED:
                    active_ctx = self._process(
                        active_ctx, ctx, propagate=False)

        rval = {}
        self._expand_object(
            active_ctx, active_property, expanded_active_property, element,
            rval, inside_list, type_key, type_scoped_ctx)

        count = len(rval)

        if '@value' in rval:
            rval = self._validate_value_object(rval)
        elif '@type' in rval and not is_array(rval['@type']):
            rval['@type'] = [rval['@type']]
        elif '@set' in rval or '@list' in rval:
            if count > 1 and not (count == 2 and '@index' in rval):
                raise JsonLdError(
                    'Invalid JSON-LD syntax; if an element has the property '
                    '"@set" or "@list", then it can have at most one other '
                    'property, which is "@index".', 'jsonld.SyntaxError',
                    {'element': rval}, code='invalid set or list object')
            if '@set' in rval:
                rval = rval['@set']
                count = len(rval) if is_object(rval) else 0
        elif count == 1 and '@language' in rval:
            # drop objects with only @language
            rval = None

        # drop certain top-level objects that do not occur in lists
        if (is_object(rval) and
                not self.options.get('keepFreeFloatingNodes') and
                not inside_list and
                (active_property is None or
                 expanded_active_property == '@graph' or
                 '@graph' in active_ctx.container(active_property))):
            if (count == 0 or '@value' in rval or '@list' in rval or
                    (count == 1 and '@id' in rval)):
                rval = None

        return rval

    def _validate_value_object(self, rval):
        """
        Checks an expanded value object and returns it, or None if its
        @value is null.
        """
        if '@type' in rval and ('@language' in rval or '@direction' in rval):
            raise JsonLdError(
                'Invalid JSON-LD syntax; an element containing "@value" '
                'may not contain both "@type" and either "@language" or '
                '"@direction".', 'jsonld.SyntaxError', {'element': rval},
                code='invalid value object')
        allowed = ('@value', '@type', '@index', '@language', '@direction')
        if any(k not in allowed for k in rval):
            raise JsonLdError(
                'Invalid JSON-LD syntax; an element containing "@value" may '
                'only have an "@index" property and either "@type" or '
                '"@language" and "@direction".', 'jsonld.SyntaxError',
                {'element': rval}, code='invalid value object')

        if self.is_frame:
            return rval

        value = rval['@value']
        if value is None:
            return None
        if is_object(value) or is_array(value):
            raise JsonLdError(
                'Invalid JSON-LD syntax; "@value" value must not be an '
                'object or an array.', 'jsonld.SyntaxError',
                {'value': value}, code='invalid value object value')
        if '@language' in rval and not is_string(value):
            raise JsonLdError(
                'Invalid JSON-LD syntax; only strings may be '
                'language-tagged.', 'jsonld.SyntaxError', {'element': rval},
                code='invalid language-tagged value')
        if '@type' in rval:
            type_ = rval['@type']
            if not is_absolute_iri(type_) or is_bnode_id(type_):
                raise JsonLdError(
                    'Invalid JSON-LD syntax; an element containing "@value" '
                    'and "@type" must have an absolute IRI for the value '
                    'of "@type".', 'jsonld.SyntaxError', {'element': rval},
                    code='invalid typed value')
        return rval

    def _expand_object(
            self, active_ctx, active_property, expanded_active_property,
            element, expanded_parent, inside_list, type_key, type_scoped_ctx):
        """
        Expands the keys of a map into expanded_parent.

        :param active_ctx: the context to use.
        :param active_property: the property for the element.
        :param expanded_active_property: the expansion of active_property.
        :param element: the element to expand.
        :param expanded_parent: the expanded result to add to.
        :param inside_list: True if the element is inside a list.
        :param type_key: the first key of element expanding to @type.
        :param type_scoped_ctx: the context used to expand @type values.
        """
        nests = []

        for key in self._keys(element):
            value = element[key]

            if key == '@context':
                continue

            expanded_property = expand_iri(active_ctx, key, vocab=True)

            # drop non-absolute IRI keys that aren't keywords
            if expanded_property is None or not (
                    is_absolute_iri(expanded_property) or
                    is_keyword(expanded_property)):
                self._drop_key(key, expanded_property)
                continue

            if is_keyword(expanded_property):
                if expanded_active_property == '@reverse':
                    raise JsonLdError(
                        'Invalid JSON-LD syntax; a keyword cannot be used as '
                        'a @reverse property.', 'jsonld.SyntaxError',
                        {'value': value}, code='invalid reverse property map')
                if (expanded_property in expanded_parent and
                        expanded_property != '@type'):
                    raise JsonLdError(
                        'Invalid JSON-LD syntax; colliding keywords '
                        'detected.', 'jsonld.SyntaxError',
                        {'keyword': expanded_property},
                        code='colliding keywords')

            if expanded_property == '@id':
                self._expand_id(active_ctx, value, expanded_parent)
                continue

            if expanded_property == '@type':
                self._expand_type(type_scoped_ctx, value, expanded_parent)
                continue

            if (expanded_property == '@graph' and
                    not (is_object(value) or is_array(value))):
                raise JsonLdError(
                    'Invalid JSON-LD syntax; "@graph" value must be an '
                    'object or an array.', 'jsonld.SyntaxError',
                    {'value': value}, code='invalid @graph value')

            if expanded_property == '@value':
                if not self.is_frame and (is_object(value) or is_array(value)):
                    raise JsonLdError(
                        'Invalid JSON-LD syntax; "@value" value must not be '
                        'an object or an array.', 'jsonld.SyntaxError',
                        {'value': value}, code='invalid value object value')
                add_value(
                    expanded_parent, '@value', value,
                    property_is_array=self.is_frame)
                continue

            if expanded_property == '@language':
                if value is None:
                    continue
                if not is_string(value) and not self.is_frame:
                    raise JsonLdError(
                        'Invalid JSON-LD syntax; "@language" value must be '
                        'a string.', 'jsonld.SyntaxError', {'value': value},
                        code='invalid language-tagged string')
                value = [v.lower() if is_string(v) else v
                         for v in arrayify(value)]
                add_value(
                    expanded_parent, '@language', value,
                    property_is_array=self.is_frame)
                continue

            if expanded_property == '@direction':
                if value is None:
                    continue
                if value not in ('ltr', 'rtl') and not self.is_frame:
                    raise JsonLdError(
                        'Invalid JSON-LD syntax; "@direction" must be "ltr" '
                        'or "rtl".', 'jsonld.SyntaxError', {'value': value},
                        code='invalid base direction')
                add_value(
                    expanded_parent, '@direction', value,
                    property_is_array=self.is_frame)
                continue

            if expanded_property == '@index':
                if not is_string(value):
                    raise JsonLdError(
                        'Invalid JSON-LD syntax; "@index" value must be a '
                        'string.', 'jsonld.SyntaxError', {'value': value},
                        code='invalid @index value')
                add_value(expanded_parent, '@index', value)
                continue

            if expanded_property == '@reverse':
                self._expand_reverse(active_ctx, value, expanded_parent)
                continue

            if expanded_property == '@nest':
                nests.append(key)
                continue

            # use a term's scoped context for its value
            term_ctx = active_ctx
            ctx = active_ctx.scoped_context(key)
            if ctx is not UNDEFINED:
                term_ctx = self._process(
                    active_ctx, ctx, override_protected=True)

            container = active_ctx.container(key)

            if '@language' in container and is_object(value):
                direction = active_ctx.get(key, '@direction')
                expanded_value = self._expand_language_map(
                    term_ctx, value, direction)
            elif '@index' in container and is_object(value):
                expanded_value = self._expand_index_map(
                    term_ctx, key, value, '@index', '@graph' in container)
            elif '@id' in container and is_object(value):
                expanded_value = self._expand_index_map(
                    term_ctx, key, value, '@id', '@graph' in container)
            elif '@type' in container and is_object(value):
                expanded_value = self._expand_index_map(
                    term_ctx.revert_to_previous_context(), key, value,
                    '@type', False)
            else:
                is_list_ = expanded_property == '@list'
                if is_list_ or expanded_property == '@set':
                    next_active_property = active_property
                    if is_list_ and expanded_active_property == '@graph':
                        next_active_property = None
                    expanded_value = self.expand(
                        term_ctx, next_active_property, value,
                        inside_list=is_list_)
                    if is_list_ and is_list(expanded_value):
                        raise JsonLdError(
                            'Invalid JSON-LD syntax; lists of lists are not '
                            'permitted.', 'jsonld.SyntaxError',
                            code='list of lists')
                else:
                    expanded_value = self.expand(term_ctx, key, value)

            # drop null values if property is not @value
            if expanded_value is None and expanded_property != '@value':
                continue

            # convert expanded value to @list if container specifies it
            if (expanded_property != '@list' and
                    not is_list(expanded_value) and '@list' in container):
                expanded_value = {'@list': arrayify(expanded_value)}

            # convert to a graph object if container specifies it
            if ('@graph' in container and '@id' not in container and
                    '@index' not in container):
                expanded_value = [{'@graph': arrayify(v)}
                                  for v in arrayify(expanded_value)]

            # merge reverse properties into the @reverse map
            if active_ctx.get(key, 'reverse'):
                reverse_map = expanded_parent.setdefault('@reverse', {})
                for item in arrayify(expanded_value):
                    if is_value(item) or is_list(item):
                        raise JsonLdError(
                            'Invalid JSON-LD syntax; "@reverse" value must '
                            'not be an @value or an @list.',
                            'jsonld.SyntaxError', {'value': expanded_value},
                            code='invalid reverse property value')
                    add_value(
                        reverse_map, expanded_property, item,
                        property_is_array=True)
                continue

            use_array = expanded_property not in (
                '@index', '@id', '@type', '@value', '@language')
            add_value(
                expanded_parent, expanded_property, expanded_value,
                property_is_array=use_array)

        # expand each nested key
        for key in nests:
            for nv in arrayify(element[key]):
                if not is_object(nv) or any(
                        expand_iri(active_ctx, k, vocab=True) == '@value'
                        for k in nv):
                    raise JsonLdError(
                        'Invalid JSON-LD syntax; nested value must be a '
                        'node object.', 'jsonld.SyntaxError', {'value': nv},
                        code='invalid @nest value')
                self._expand_object(
                    active_ctx, active_property, expanded_active_property,
                    nv, expanded_parent, inside_list, type_key,
                    type_scoped_ctx)

    def _expand_id(self, active_ctx, value, expanded_parent):
        if is_string(value):
            value = expand_iri(active_ctx, value, base=True)
        elif self.is_frame:
            if is_object(value):
                if not is_empty_object(value):
                    raise JsonLdError(
                        'Invalid JSON-LD syntax; "@id" value must be an '
                        'empty object for framing.', 'jsonld.SyntaxError',
                        {'value': value}, code='invalid @id value')
                value = [value]
            elif is_array(value) and all(is_string(v) for v in value):
                value = [expand_iri(active_ctx, v, base=True)
                         for v in value]
            else:
                raise JsonLdError(
                    'Invalid JSON-LD syntax; "@id" value must be a string, '
                    'an array of strings or an empty object.',
                    'jsonld.SyntaxError', {'value': value},
                    code='invalid @id value')
        else:
            raise JsonLdError(
                'Invalid JSON-LD syntax; "@id" value must be a string.',
                'jsonld.SyntaxError', {'value': value},
                code='invalid @id value')
        add_value(
            expanded_parent, '@id', value, property_is_array=self.is_frame)

    def _expand_type(self, type_scoped_ctx, value, expanded_parent):
        validate_type_value(value, self.is_frame)
        if is_object(value) and '@default' in value:
            value = {'@default': expand_iri(
                type_scoped_ctx, value['@default'], vocab=True, base=True)}
        elif is_object(value):
            value = [value]
        else:
            value = [expand_iri(type_scoped_ctx, v, vocab=True, base=True)
                     if is_string(v) else v for v in arrayify(value)]
        add_value(
            expanded_parent, '@type', value, property_is_array=self.is_frame)

    def _expand_reverse(self, active_ctx, value, expanded_parent):
        if not is_object(value):
            raise JsonLdError(
                'Invalid JSON-LD syntax; "@reverse" value must be an object.',
                'jsonld.SyntaxError', {'value': value},
                code='invalid @reverse value')

        expanded_value = self.expand(active_ctx, '@reverse', value)

        # properties double-reversed become regular properties
        if '@reverse' in expanded_value:
            for rproperty, rvalue in expanded_value['@reverse'].items():
                add_value(
                    expanded_parent, rproperty, rvalue,
                    property_is_array=True)

        reverse_map = expanded_parent.get('@reverse')
        for property, items in expanded_value.items():
            if property == '@reverse':
                continue
            if reverse_map is None:
                reverse_map = expanded_parent['@reverse'] = {}
            add_value(reverse_map, property, [], property_is_array=True)
            for item in items:
                if is_value(item) or is_list(item):
                    raise JsonLdError(
                        'Invalid JSON-LD syntax; "@reverse" value must not '
                        'be an @value or an @list.', 'jsonld.SyntaxError',
                        {'value': expanded_value},
                        code='invalid reverse property value')
                add_value(
                    reverse_map, property, item, property_is_array=True)

    def _expand_language_map(self, active_ctx, language_map, direction):
        """
        Expands a language map.

        :param active_ctx: the active context to use.
        :param language_map: the language map to expand.
        :param direction: the direction to apply to the values.

        :return: the expanded language map.
        """
        rval = []
        for key in self._keys(language_map):
            expanded_key = expand_iri(active_ctx, key, vocab=True)
            for item in arrayify(language_map[key]):
                if item is None:
                    continue
                if not is_string(item):
                    raise JsonLdError(
                        'Invalid JSON-LD syntax; language map values must be '
                        'strings.', 'jsonld.SyntaxError',
                        {'languageMap': language_map},
                        code='invalid language map value')
                val = {'@value': item}
                if expanded_key != '@none':
                    val['@language'] = key.lower()
                if direction:
                    val['@direction'] = direction
                rval.append(val)
        return rval

    def _expand_index_map(
            self, active_ctx, active_property, value, index_key, as_graph):
        """
        Expands an @index, @id or @type map.
        """
        rval = []
        is_type_index = index_key == '@type'
        for key in self._keys(value):
            key_ctx = active_ctx
            if is_type_index:
                ctx = active_ctx.scoped_context(key)
                if ctx is not UNDEFINED:
                    key_ctx = self._process(active_ctx, ctx, propagate=False)

            val = self.expand(
                key_ctx, active_property, arrayify(value[key]),
                inside_index=True)

            expanded_key = expand_iri(active_ctx, key, vocab=True)
            if index_key == '@id':
                key = expand_iri(active_ctx, key, base=True)
            elif is_type_index:
                key = expanded_key

            for item in val:
                if as_graph and not is_graph(item):
                    item = {'@graph': [item]}
                if is_type_index:
                    if expanded_key == '@none':
                        pass
                    elif is_value(item):
                        raise JsonLdError(
                            'Invalid JSON-LD syntax; type map values must '
                            'be node objects.', 'jsonld.SyntaxError',
                            {'value': item}, code='invalid type mapping')
                    elif '@type' in item:
                        item['@type'] = [key] + item['@type']
                    else:
                        item['@type'] = [key]
                elif expanded_key != '@none' and index_key not in item:
                    item[index_key] = key
                rval.append(item)
        return rval

    def expand_value(self, active_ctx, active_property, value):
        """
        Expands the given scalar value by using the coercion and keyword
        rules in the given context.

        :param active_ctx: the active context to use.
        :param active_property: the property the value is associated with.
        :param value: the value to expand.

        :return: the expanded value.
        """
        if value is None:
            return None

        expanded_property = expand_iri(
            active_ctx, active_property, vocab=True)

        if expanded_property == '@id':
            return expand_iri(active_ctx, value, base=True)
        if expanded_property == '@type':
            return expand_iri(active_ctx, value, vocab=True, base=True)

        type_ = active_ctx.get(active_property, '@type')

        # do @id expansion (automatic for @graph)
        if (type_ == '@id' or expanded_property == '@graph') and \
                is_string(value):
            return {'@id': expand_iri(active_ctx, value, base=True)}
        if type_ == '@vocab' and is_string(value):
            return {'@id': expand_iri(
                active_ctx, value, vocab=True, base=True)}

        # do not expand keyword values
        if is_keyword(expanded_property):
            return value

        rval = {}
        if type_ is not None and type_ not in ('@id', '@vocab', '@none'):
            rval['@type'] = type_
        elif is_string(value):
            language = active_ctx.get(active_property, '@language')
            if language is not None:
                rval['@language'] = language
            direction = active_ctx.get(active_property, '@direction')
            if direction is not None:
                rval['@direction'] = direction

        if not (is_bool(value) or is_numeric(value) or is_string(value)):
            value = str(value)
        rval['@value'] = value
        return rval

