"""
The JSON-LD compaction algorithm.

.. module:: linkedjson.compaction
  :synopsis: JSON-LD compaction
"""

from linkedjson import util
from linkedjson.context import UNDEFINED
from linkedjson.errors import JsonLdError
from linkedjson.iri_resolver import compact_iri, expand_iri
from linkedjson.util import (
    add_value, arrayify, is_array, is_graph, is_keyword, is_list, is_object,
    is_simple_graph, is_string, is_value)


class Compactor(object):
    """
    Compacts expanded JSON-LD under an active context.

    :param context_processor: the ContextProcessor of the current call, used
      for scoped contexts.
    :param options: the call options; 'compactArrays' and 'link' are used.
    """

    def __init__(self, context_processor, options):
        self.context_processor = context_processor
        self.options = options
        self.compact_arrays = options.get('compactArrays', True)
        self.ordered = options.get('ordered', True)
        # compacted objects by @id, used to re-use @link embeds
        self.link = options.get('link')

    def _keys(self, element):
        return sorted(element) if self.ordered else list(element)

    def compact(self, active_ctx, active_property, element):
        """
        Recursively compacts an element using the given active context. All
        values must be in expanded form before this method is called.

        :param active_ctx: the active context to use.
        :param active_property: the compacted property with the element to
          compact, None for none.
        :param element: the element to compact.

        :return: the compacted value.
        """
        shape = util.classify(element)

        if shape == util.ARRAY:
            rval = []
            for e in element:
                e = self.compact(active_ctx, active_property, e)
                if e is not None:
                    rval.append(e)
            if self.compact_arrays and len(rval) == 1:
                # use single element if no container is specified
                if not active_ctx.container(active_property):
                    rval = rval[0]
            return rval

        # use any scoped context on active_property
        ctx = active_ctx.scoped_context(active_property)
        if ctx is not UNDEFINED:
            active_ctx = self.context_processor.process(
                active_ctx, ctx, override_protected=True)

        if shape in (util.SCALAR, util.NULL):
            return element

        # reuse an already compacted linked object
        if self.link is not None and '@id' in element and \
                element['@id'] in self.link:
            for linked in self.link[element['@id']]:
                if linked['expanded'] is element:
                    return linked['compacted']

        if shape in (util.VALUE, util.REFERENCE):
            rval = self.compact_value(active_ctx, active_property, element)
            if self.link is not None and shape == util.REFERENCE:
                self.link.setdefault(element['@id'], []).append(
                    {'expanded': element, 'compacted': rval})
            return rval

        if shape == util.LIST and '@list' in active_ctx.container(
                active_property):
            return self.compact(active_ctx, active_property, element['@list'])

        # element is a node object, list object or graph object
        inside_reverse = active_property == '@reverse'
        rval = {}

        # revert a type-scoped context, then re-apply the property-scoped one
        input_ctx = active_ctx
        active_ctx = active_ctx.revert_to_previous_context()
        property_scoped_ctx = input_ctx.scoped_context(active_property)
        if property_scoped_ctx is not UNDEFINED:
            active_ctx = self.context_processor.process(
                active_ctx, property_scoped_ctx, override_protected=True)

        if self.link is not None and '@id' in element:
            self.link.setdefault(element['@id'], []).append(
                {'expanded': element, 'compacted': rval})

        # apply type-scoped contexts in order of the compacted types
        types = element.get('@type', [])
        compacted_types = sorted(
            compact_iri(active_ctx, t, vocab=True) for t in types)
        for type_ in compacted_types:
            ctx = input_ctx.scoped_context(type_)
            if ctx is not UNDEFINED:
                active_ctx = self.context_processor.process(
                    active_ctx, ctx, propagate=False)

        for expanded_property in self._keys(element):
            expanded_value = element[expanded_property]

            if expanded_property == '@id':
                alias = compact_iri(active_ctx, '@id', vocab=True)
                rval[alias] = compact_iri(
                    active_ctx, expanded_value, vocab=False)
                continue

            if expanded_property == '@type':
                compacted_value = [
                    compact_iri(input_ctx, v, vocab=True)
                    for v in arrayify(expanded_value)]
                if len(compacted_value) == 1:
                    compacted_value = compacted_value[0]
                alias = compact_iri(active_ctx, '@type', vocab=True)
                container = active_ctx.container(alias)
                type_as_set = ('@set' in container and
                               active_ctx.is_processing_mode(1.1))
                is_array_ = type_as_set or (
                    is_array(compacted_value) and len(expanded_value) == 0)
                add_value(
                    rval, alias, compacted_value,
                    property_is_array=is_array_)
                continue

            if expanded_property == '@reverse':
                self._compact_reverse(active_ctx, expanded_value, rval)
                continue

            if expanded_property == '@preserve':
                compacted_value = self.compact(
                    active_ctx, active_property, expanded_value)
                if not (is_array(compacted_value) and
                        len(compacted_value) == 0):
                    add_value(rval, expanded_property, compacted_value)
                continue

            if expanded_property == '@index':
                # drop @index if inside an @index container
                if '@index' in active_ctx.container(active_property):
                    continue
                alias = compact_iri(active_ctx, '@index', vocab=True)
                add_value(rval, alias, expanded_value)
                continue

            # other keywords are aliased and copied
            if (expanded_property not in ('@graph', '@list') and
                    is_keyword(expanded_property)):
                alias = compact_iri(active_ctx, expanded_property, vocab=True)
                add_value(rval, alias, expanded_value)
                continue

            if not is_array(expanded_value):
                raise JsonLdError(
                    'JSON-LD compact error; "%s" is not an array.' %
                    expanded_property, 'jsonld.SyntaxError',
                    {'value': expanded_value}, code='invalid JSON-LD syntax')

            # preserve empty arrays
            if len(expanded_value) == 0:
                item_active_property = compact_iri(
                    active_ctx, expanded_property, expanded_value,
                    vocab=True, reverse=inside_reverse)
                nest_result = self._nest_result(
                    active_ctx, item_active_property, rval)
                add_value(
                    nest_result, item_active_property, [],
                    property_is_array=True)

            for expanded_item in expanded_value:
                self._compact_item(
                    active_ctx, expanded_property, expanded_item, rval,
                    inside_reverse)

        return rval

    def _nest_result(self, active_ctx, item_active_property, rval):
        """
        Gets the map that a property's compacted value goes into, which is
        a nested map when the term has a @nest mapping.
        """
        nest_property = active_ctx.get(item_active_property, '@nest')
        if nest_property is None:
            return rval
        if expand_iri(active_ctx, nest_property, vocab=True) != '@nest':
            raise JsonLdError(
                'JSON-LD compact error; nested property must have an @nest '
                'value resolving to @nest.', 'jsonld.SyntaxError',
                {'property': item_active_property},
                code='invalid @nest value')
        nest_result = rval.setdefault(nest_property, {})
        if not is_object(nest_result):
            nest_result = rval[nest_property] = {}
        return nest_result

    def _compact_reverse(self, active_ctx, expanded_value, rval):
        compacted_value = self.compact(active_ctx, '@reverse', expanded_value)

        # handle double-reversed properties
        for compacted_property, value in list(compacted_value.items()):
            mapping = active_ctx.get_term(compacted_property)
            if mapping is not None and mapping['reverse']:
                container = active_ctx.container(compacted_property)
                use_array = '@set' in container or not self.compact_arrays
                add_value(
                    rval, compacted_property, value,
                    property_is_array=use_array)
                del compacted_value[compacted_property]

        if len(compacted_value) > 0:
            alias = compact_iri(active_ctx, '@reverse', vocab=True)
            add_value(rval, alias, compacted_value)

    def _compact_item(
            self, active_ctx, expanded_property, expanded_item, rval,
            inside_reverse):
        item_active_property = compact_iri(
            active_ctx, expanded_property, expanded_item, vocab=True,
            reverse=inside_reverse)
        nest_result = self._nest_result(
            active_ctx, item_active_property, rval)

        container = active_ctx.container(item_active_property)
        is_graph_ = is_graph(expanded_item)
        is_list_ = is_list(expanded_item)

        inner = None
        if is_list_:
            inner = expanded_item['@list']
        elif is_graph_:
            inner = expanded_item['@graph']

        compacted_item = self.compact(
            active_ctx, item_active_property,
            inner if (is_list_ or is_graph_) else expanded_item)

        if is_list_:
            compacted_item = arrayify(compacted_item)
            if '@list' not in container:
                # wrap using @list alias
                wrapper = {
                    compact_iri(active_ctx, '@list', vocab=True):
                        compacted_item
                }
                if '@index' in expanded_item:
                    alias = compact_iri(active_ctx, '@index', vocab=True)
                    wrapper[alias] = expanded_item['@index']
                compacted_item = wrapper
            else:
                if item_active_property in nest_result:
                    raise JsonLdError(
                        'JSON-LD compact error; property has a "@list" '
                        '@container rule but there is more than a single '
                        '@list that matches the compacted term in the '
                        'document. Compaction might mix unwanted items into '
                        'the list.', 'jsonld.SyntaxError',
                        {'property': item_active_property},
                        code='compaction to list of lists')
                add_value(
                    nest_result, item_active_property, compacted_item,
                    value_is_array=True)
                return

        if is_graph_:
            self._add_graph(
                active_ctx, item_active_property, container, expanded_item,
                compacted_item, nest_result)
        elif any(c in container for c in (
                '@language', '@index', '@id', '@type')):
            self._add_to_map(
                active_ctx, item_active_property, container, expanded_item,
                compacted_item, nest_result)
        else:
            # use an array if compactArrays is off, the container is @set or
            # @list, the value is an empty array or the key is @list/@graph
            is_array_ = (
                not self.compact_arrays or
                '@set' in container or '@list' in container or
                (is_array(compacted_item) and len(compacted_item) == 0) or
                expanded_property in ('@list', '@graph'))
            add_value(
                nest_result, item_active_property, compacted_item,
                property_is_array=is_array_)

    def _add_graph(
            self, active_ctx, item_active_property, container, expanded_item,
            compacted_item, nest_result):
        as_array = not self.compact_arrays or '@set' in container

        if '@graph' in container and (
                '@id' in container or
                '@index' in container and is_simple_graph(expanded_item)):
            map_object = nest_result.setdefault(item_active_property, {})
            if '@id' in container:
                key = expanded_item.get('@id')
                if key is not None:
                    key = compact_iri(active_ctx, key, vocab=False)
            else:
                key = expanded_item.get('@index')
            if not key:
                key = compact_iri(active_ctx, '@none', vocab=True)
            add_value(
                map_object, key, compacted_item, property_is_array=as_array)
        elif ('@graph' in container and is_simple_graph(expanded_item) and
                not (is_array(compacted_item) and len(compacted_item) > 1)):
            add_value(
                nest_result, item_active_property, compacted_item,
                property_is_array=as_array)
        else:
            # wrap using @graph alias, keeping @id and @index
            if (is_array(compacted_item) and len(compacted_item) == 1 and
                    self.compact_arrays):
                compacted_item = compacted_item[0]
            wrapper = {
                compact_iri(active_ctx, '@graph', vocab=True): compacted_item
            }
            if '@id' in expanded_item:
                wrapper[compact_iri(active_ctx, '@id', vocab=True)] = \
                    compact_iri(active_ctx, expanded_item['@id'], vocab=False)
            if '@index' in expanded_item:
                wrapper[compact_iri(active_ctx, '@index', vocab=True)] = \
                    expanded_item['@index']
            add_value(
                nest_result, item_active_property, wrapper,
                property_is_array=as_array)

    def _add_to_map(
            self, active_ctx, item_active_property, container, expanded_item,
            compacted_item, nest_result):
        map_object = nest_result.setdefault(item_active_property, {})
        key = None

        if '@language' in container:
            # a language map holds bare strings
            if is_value(compacted_item):
                compacted_item = compacted_item['@value']
            key = expanded_item.get('@language')
        elif '@index' in container:
            key = expanded_item.get('@index')
            if is_object(compacted_item):
                compacted_item.pop(
                    compact_iri(active_ctx, '@index', vocab=True), None)
        elif '@id' in container:
            id_key = compact_iri(active_ctx, '@id', vocab=True)
            if is_object(compacted_item):
                key = compacted_item.pop(id_key, None)
        elif '@type' in container:
            type_key = compact_iri(active_ctx, '@type', vocab=True)
            types = []
            if is_object(compacted_item):
                types = arrayify(compacted_item.get(type_key, []))
            if types:
                key = types[0]
                types = types[1:]
            if len(types) == 0:
                if is_object(compacted_item):
                    compacted_item.pop(type_key, None)
            elif len(types) == 1:
                compacted_item[type_key] = types[0]
            else:
                compacted_item[type_key] = types

            # a lone @id is recompacted as a node reference
            if (is_object(compacted_item) and len(compacted_item) == 1 and
                    '@id' in expanded_item):
                compacted_item = self.compact(
                    active_ctx, item_active_property,
                    {'@id': expanded_item['@id']})

        if not key:
            key = compact_iri(active_ctx, '@none', vocab=True)

        add_value(
            map_object, key, compacted_item,
            property_is_array='@set' in container)

    def compact_value(self, active_ctx, active_property, value):
        """
        Performs value compaction on an object with '@value' or '@id' as the
        only property.

        :param active_ctx: the active context.
        :param active_property: the active property that points to the
          value.
        :param value: the value to compact.

        :return: the compacted value.
        """
        if is_value(value):
            type_ = active_ctx.get(active_property, '@type')
            language = active_ctx.get(active_property, '@language')
            direction = active_ctx.get(active_property, '@direction')
            container = active_ctx.container(active_property)

            # whether or not the value has an @index that must be preserved
            preserve_index = '@index' in value and '@index' not in container

            if not preserve_index and type_ != '@none':
                if '@type' in value and value['@type'] == type_:
                    return value['@value']
                if (('@language' in value or '@direction' in value) and
                        '@type' not in value and
                        value.get('@language') == language and
                        value.get('@direction') == direction):
                    return value['@value']

            key_count = len(value)
            is_value_only_key = key_count == 1 or (
                key_count == 2 and '@index' in value and not preserve_index)
            has_default_language = active_ctx.language is not None or \
                active_ctx.direction is not None
            is_value_string = is_string(value['@value'])
            mapping = active_ctx.get_term(active_property)
            has_null_mapping = (
                mapping is not None and '@language' in mapping and
                mapping['@language'] is None)
            if (is_value_only_key and type_ != '@none' and
                    (not has_default_language or not is_value_string or
                     has_null_mapping)):
                return value['@value']

            rval = {}

            if preserve_index:
                rval[compact_iri(active_ctx, '@index', vocab=True)] = \
                    value['@index']

            if '@type' in value:
                rval[compact_iri(active_ctx, '@type', vocab=True)] = \
                    compact_iri(active_ctx, value['@type'], vocab=True)
            elif '@language' in value:
                rval[compact_iri(active_ctx, '@language', vocab=True)] = \
                    value['@language']

            if '@direction' in value:
                rval[compact_iri(active_ctx, '@direction', vocab=True)] = \
                    value['@direction']

            rval[compact_iri(active_ctx, '@value', vocab=True)] = \
                value['@value']
            return rval

        # value is a subject reference
        expanded_property = expand_iri(active_ctx, active_property, vocab=True)
        type_ = active_ctx.get(active_property, '@type')
        compacted = compact_iri(
            active_ctx, value['@id'], vocab=type_ == '@vocab')

        # compact to scalar
        if type_ in ('@id', '@vocab') or expanded_property == '@graph':
            return compacted

        return {compact_iri(active_ctx, '@id', vocab=True): compacted}