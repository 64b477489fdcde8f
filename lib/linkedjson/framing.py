"""
The JSON-LD framing algorithm.

.. module:: linkedjson.framing
  :synopsis: JSON-LD framing
"""

from linkedjson.errors import JsonLdError
from linkedjson.flattening import create_node_map, merge_node_map_graphs
from linkedjson.identifier_issuer import IdentifierIssuer
from linkedjson.iri_resolver import compact_iri
from linkedjson.util import (
    add_value, arrayify, clone, compare_values, get_values, is_array,
    is_empty_object, is_keyword, is_list, is_object, is_subject,
    is_subject_reference, is_value)

EMBED_VALUES = ('@always', '@once', '@last', '@never', '@link')


def frame(input_, frame_, options):
    """
    Frames an expanded document.

    :param input_: the expanded JSON-LD to frame.
    :param frame_: the expanded frame.
    :param options: the framing options; 'merged' selects framing against
      the merge of all graphs instead of the default graph.

    :return: a tuple of the framed output and the list of blank node ids
      that are referenced only once.
    """
    state = {
        'options': options,
        'embedded': False,
        'graph': '@default',
        'graphMap': {'@default': {}},
        'subjectStack': [],
        'link': {},
        'bnodeMap': {},
        'uniqueEmbeds': {}
    }

    # produce a map of all graphs and name each bnode
    state['graphMap'] = create_node_map(input_, IdentifierIssuer('_:b'))
    if options['merged']:
        state['graphMap']['@merged'] = merge_node_map_graphs(
            state['graphMap'])
        state['graph'] = '@merged'
    state['subjects'] = state['graphMap'][state['graph']]

    framed = []
    match_frame(state, sorted(state['subjects']), frame_, framed, None)

    # find blank node identifiers to prune
    bnodes_to_clear = []
    if options['pruneBlankNodeIdentifiers']:
        bnodes_to_clear = [
            id_ for id_, outputs in state['bnodeMap'].items()
            if len(outputs) == 1]
    return framed, bnodes_to_clear


def match_frame(state, subjects, frame_, parent, property):
    """
    Frames subjects according to the given frame.

    :param state: the current framing state.
    :param subjects: the ids of the subjects to filter.
    :param frame_: the frame.
    :param parent: the parent subject or top-level array.
    :param property: the parent property, None at the top level.
    """
    _validate_frame(frame_)
    frame_ = frame_[0]

    options = state['options']
    flags = {
        'embed': _get_frame_flag(frame_, options, 'embed'),
        'explicit': _get_frame_flag(frame_, options, 'explicit'),
        'requireAll': _get_frame_flag(frame_, options, 'requireAll')
    }

    link = state['link'].setdefault(state['graph'], {})
    embeds = state['uniqueEmbeds'].setdefault(state['graph'], {})

    matches = _filter_subjects(state, subjects, frame_, flags)

    for id_ in sorted(matches):
        subject = matches[id_]

        if flags['embed'] == '@link' and id_ in link:
            _add_frame_output(parent, property, link[id_])
            continue

        output = {'@id': id_}
        if id_.startswith('_:'):
            add_value(state['bnodeMap'], id_, output, property_is_array=True)
        link[id_] = output

        # already embedded in an earlier result, refer to it
        if not state['embedded'] and id_ in embeds:
            _add_frame_output(parent, property, output)
            continue

        if state['embedded'] and (
                flags['embed'] == '@never' or
                _creates_circular_reference(
                    subject, state['graph'], state['subjectStack'])):
            _add_frame_output(parent, property, output)
            continue

        if (state['embedded'] and flags['embed'] == '@once' and
                id_ in embeds):
            _add_frame_output(parent, property, output)
            continue

        if flags['embed'] == '@last' and id_ in embeds:
            _remove_embed(state, id_)
        embeds[id_] = {'parent': parent, 'property': property}

        state['subjectStack'].append(
            {'subject': subject, 'graph': state['graph']})

        # subject is also the name of a graph
        if id_ in state['graphMap']:
            if '@graph' not in frame_:
                recurse = state['graph'] != '@merged'
                subframe = {}
            else:
                subframe = frame_['@graph'][0]
                recurse = id_ not in ('@merged', '@default')
                if not is_object(subframe):
                    subframe = {}
            if recurse:
                match_frame(
                    dict(state, graph=id_, embedded=False),
                    sorted(state['graphMap'][id_]), [subframe], output,
                    '@graph')

        for prop in sorted(subject):
            # copy keywords to output
            if is_keyword(prop):
                output[prop] = clone(subject[prop])
                if prop == '@type':
                    # count bnode values of @type
                    for type_ in subject['@type']:
                        if type_.startswith('_:'):
                            add_value(
                                state['bnodeMap'], type_, output,
                                property_is_array=True)
                continue

            # explicit is on and property isn't in frame, skip processing
            if flags['explicit'] and prop not in frame_:
                continue

            for o in subject[prop]:
                subframe = frame_[prop] if prop in frame_ else \
                    _create_implicit_frame(flags)

                if is_list(o):
                    if (prop in frame_ and frame_[prop] and
                            is_object(frame_[prop][0]) and
                            '@list' in frame_[prop][0]):
                        subframe = frame_[prop][0]['@list']
                    else:
                        subframe = _create_implicit_frame(flags)
                    list_ = {'@list': []}
                    _add_frame_output(output, prop, list_)
                    for item in o['@list']:
                        if is_subject_reference(item):
                            match_frame(
                                dict(state, embedded=True), [item['@id']],
                                subframe, list_, '@list')
                        else:
                            _add_frame_output(list_, '@list', clone(item))
                elif is_subject_reference(o):
                    match_frame(
                        dict(state, embedded=True), [o['@id']], subframe,
                        output, prop)
                elif _value_match(subframe[0], o):
                    _add_frame_output(output, prop, clone(o))

        # handle defaults in order
        for prop in sorted(frame_):
            if prop == '@type':
                # allow through default types
                if (not frame_[prop] or not is_object(frame_[prop][0]) or
                        '@default' not in frame_[prop][0]):
                    continue
            elif is_keyword(prop):
                continue
            next_ = frame_[prop][0] if frame_[prop] else {}
            omit_default_on = _get_frame_flag(next_, options, 'omitDefault')
            if not omit_default_on and prop not in output:
                preserve = '@null'
                if '@default' in next_:
                    preserve = clone(next_['@default'])
                output[prop] = [{'@preserve': arrayify(preserve)}]

        # embed reverse values by finding nodes that reference this subject
        reverse_frame = frame_.get('@reverse', {})
        for reverse_prop in sorted(reverse_frame):
            subframe = reverse_frame[reverse_prop]
            for subject_id in sorted(state['subjects']):
                node_values = get_values(
                    state['subjects'][subject_id], reverse_prop)
                if any(v.get('@id') == id_ for v in node_values
                       if is_object(v)):
                    reverse_output = output.setdefault('@reverse', {})
                    add_value(
                        reverse_output, reverse_prop, [],
                        property_is_array=True)
                    match_frame(
                        dict(state, embedded=True), [subject_id], subframe,
                        reverse_output[reverse_prop], property)

        _add_frame_output(parent, property, output)

        state['subjectStack'].pop()


def _create_implicit_frame(flags):
    """
    Creates a wildcard child frame that carries the flags of its parent
    frame.
    """
    return [dict(('@' + key, [value]) for key, value in flags.items())]


def _creates_circular_reference(subject_to_embed, graph, subject_stack):
    """
    Checks the subject stack to see if embedding the given subject would
    cause a circular reference.

    :param subject_to_embed: the subject to embed.
    :param graph: the graph the subject to embed is in.
    :param subject_stack: the current stack of subjects.

    :return: True if a circular reference would be created, False if not.
    """
    return any(
        s['graph'] == graph and s['subject']['@id'] == subject_to_embed['@id']
        for s in reversed(subject_stack))


def _get_frame_flag(frame_, options, name):
    """
    Gets the frame flag value for the given flag name.

    :param frame_: the frame.
    :param options: the framing options.
    :param name: the flag name.

    :return: the flag value.
    """
    flag = '@' + name
    rval = frame_[flag][0] if flag in frame_ else options[name]
    if is_value(rval):
        rval = rval['@value']
    if name == 'embed':
        # true => '@once', false => '@never'
        if rval is True:
            rval = '@once'
        elif rval is False:
            rval = '@never'
        elif rval not in EMBED_VALUES:
            raise JsonLdError(
                'Invalid JSON-LD syntax; invalid value of @embed.',
                'jsonld.SyntaxError', {'frame': frame_},
                code='invalid @embed value')
    return rval


def _validate_frame(frame_):
    """
    Raises an 'invalid frame' error unless the frame is a single object
    with a valid @id and @type.
    """
    if not is_array(frame_) or len(frame_) != 1 or \
            not is_object(frame_[0]):
        raise JsonLdError(
            'Invalid JSON-LD syntax; a JSON-LD frame must be a single '
            'object.', 'jsonld.SyntaxError', {'frame': frame_},
            code='invalid frame')

    if '@id' in frame_[0]:
        for id_ in arrayify(frame_[0]['@id']):
            if not (is_empty_object(id_) or
                    (isinstance(id_, str) and not id_.startswith('_:'))):
                raise JsonLdError(
                    'Invalid JSON-LD syntax; invalid @id in frame.',
                    'jsonld.SyntaxError', {'frame': frame_},
                    code='invalid frame')

    if '@type' in frame_[0]:
        for type_ in arrayify(frame_[0]['@type']):
            if isinstance(type_, str) and type_.startswith('_:'):
                raise JsonLdError(
                    'Invalid JSON-LD syntax; invalid @type in frame.',
                    'jsonld.SyntaxError', {'frame': frame_},
                    code='invalid frame')


def _filter_subjects(state, subjects, frame_, flags):
    """
    Returns a map of all of the subjects that match a parsed frame.

    :param state: the current framing state.
    :param subjects: the ids of the subjects to filter.
    :param frame_: the parsed frame.
    :param flags: the frame flags.

    :return: all of the matched subjects, keyed by id.
    """
    rval = {}
    graph = state['graphMap'][state['graph']]
    for id_ in subjects:
        subject = graph[id_]
        if _filter_subject(state, subject, frame_, flags):
            rval[id_] = subject
    return rval


def _filter_subject(state, subject, frame_, flags):
    """
    Returns True if the given subject matches the given frame.

    Matches on @id or @type first. A frame @type of {} matches any node with
    a type and an empty @type matches nodes without one. Otherwise the
    match is by duck typing: the node must have the non-keyword properties
    of the frame (all of them with requireAll).

    :param state: the current framing state.
    :param subject: the subject to check.
    :param frame_: the frame to check.
    :param flags: the frame flags.

    :return: True if the subject matches, False if not.
    """
    wildcard = True
    matches_some = False

    for key in sorted(frame_):
        match_this = False
        node_values = get_values(subject, key)
        is_empty = len(get_values(frame_, key)) == 0

        if key == '@id':
            # match on no @id or any matching @id, including wildcard
            ids = frame_['@id']
            if not ids or is_empty_object(ids[0]):
                match_this = True
            else:
                match_this = bool(node_values) and node_values[0] in ids
            if not flags['requireAll']:
                return match_this
        elif key == '@type':
            wildcard = False
            if is_empty:
                if node_values:
                    # don't match on no @type
                    return False
                match_this = True
            elif len(frame_['@type']) == 1 and \
                    is_empty_object(frame_['@type'][0]):
                # match on wildcard @type if there is a type
                match_this = len(node_values) > 0
            else:
                # match on a specific @type
                for type_ in frame_['@type']:
                    if is_object(type_) and '@default' in type_:
                        match_this = True
                    else:
                        match_this = match_this or type_ in node_values
                if not flags['requireAll']:
                    return match_this
        elif is_keyword(key):
            continue
        else:
            this_frame = get_values(frame_, key)
            this_frame = this_frame[0] if this_frame else None
            has_default = False
            if this_frame is not None:
                _validate_frame([this_frame])
                has_default = '@default' in this_frame

            # no longer a wildcard pattern if frame has any non-keyword
            # properties
            wildcard = False

            # skip, but allow match if node has no value for property and
            # frame has a default value
            if not node_values and has_default:
                continue

            # if frame value is empty, don't match if subject has any value
            if node_values and is_empty:
                return False

            if this_frame is None:
                # node does not match if values is not empty and the value
                # of property in frame is match none
                if node_values:
                    return False
                match_this = True
            elif is_list(this_frame):
                list_value = this_frame['@list'][0] \
                    if this_frame['@list'] else None
                if node_values and is_list(node_values[0]):
                    node_list_values = node_values[0]['@list']
                    if is_value(list_value):
                        match_this = any(
                            _value_match(list_value, lv)
                            for lv in node_list_values)
                    elif is_subject(list_value) or \
                            is_subject_reference(list_value):
                        match_this = any(
                            _node_match(state, list_value, lv, flags)
                            for lv in node_list_values)
            elif is_value(this_frame):
                match_this = any(
                    _value_match(this_frame, nv) for nv in node_values)
            elif is_subject_reference(this_frame):
                match_this = any(
                    _node_match(state, this_frame, nv, flags)
                    for nv in node_values)
            else:
                match_this = len(node_values) > 0

        # all non-defaulted values must match if requireAll is set
        if not match_this and flags['requireAll']:
            return False

        matches_some = matches_some or match_this

    # return True if wildcard or subject matches some properties
    return wildcard or matches_some


def _remove_embed(state, id_):
    """
    Replaces an existing embed of the given subject with a reference and
    drops the embeds that depended on it.

    :param state: the current framing state.
    :param id_: the @id of the embed to remove.
    """
    embeds = state['uniqueEmbeds'][state['graph']]
    embed = embeds[id_]
    parent = embed['parent']
    property = embed['property']

    subject = {'@id': id_}

    if is_array(parent):
        for i, p in enumerate(parent):
            if compare_values(p, subject):
                parent[i] = subject
                break
    else:
        values = parent[property]
        for i, v in enumerate(values):
            if compare_values(v, subject):
                values[i] = subject
                break

    def remove_dependents(id_):
        for next_ in list(embeds):
            if (next_ in embeds and is_object(embeds[next_]['parent']) and
                    embeds[next_]['parent'].get('@id') == id_):
                del embeds[next_]
                remove_dependents(next_)
    remove_dependents(id_)


def _add_frame_output(parent, property, output):
    """
    Adds framing output to the given parent.

    :param parent: the parent to add to.
    :param property: the parent property.
    :param output: the output to add.
    """
    if is_object(parent):
        add_value(parent, property, output, property_is_array=True)
    else:
        parent.append(output)


def _node_match(state, pattern, value, flags):
    """
    A node matches if it is a node that also matches the pattern as a frame.
    """
    if not is_object(value) or '@id' not in value:
        return False
    node_object = state['subjects'].get(value['@id'])
    return node_object is not None and \
        _filter_subject(state, node_object, pattern, flags)


def _value_match(pattern, value):
    """
    Returns True if the value object matches the value pattern.

    A value matches when the pattern is empty, or when each of @value,
    @type and @language is equal to one of the pattern's values, the
    pattern has a {} wildcard for it, or both sides lack it.

    :param pattern: used to match value.
    :param value: to check.
    """
    v1 = value.get('@value')
    t1 = value.get('@type')
    l1 = value.get('@language')
    v2 = get_values(pattern, '@value')
    t2 = get_values(pattern, '@type')
    l2 = get_values(pattern, '@language')

    if not v2 and not t2 and not l2:
        return True
    if not (v1 in v2 or (v2 and is_empty_object(v2[0]))):
        return False
    if not ((t1 is None and not t2) or t1 in t2 or
            (t1 is not None and t2 and is_empty_object(t2[0]))):
        return False
    if not ((l1 is None and not l2) or l1 in l2 or
            (l1 is not None and l2 and is_empty_object(l2[0]))):
        return False
    return True


def cleanup_preserve(input_, bnodes_to_clear, id_alias, seen=None):
    """
    Removes the @id of blank nodes that are referenced only once.

    :param input_: the compacted framed output.
    :param bnodes_to_clear: the blank node ids to remove.
    :param id_alias: the compacted alias of @id.
    :param seen: the ids of the objects already visited; @link embeds may
      make the output cyclic.

    :return: the cleaned output.
    """
    if seen is None:
        seen = set()
    if is_array(input_):
        return [cleanup_preserve(e, bnodes_to_clear, id_alias, seen)
                for e in input_]
    if is_object(input_):
        if id(input_) in seen:
            return input_
        seen.add(id(input_))
        if input_.get(id_alias) in bnodes_to_clear:
            del input_[id_alias]
        for key in list(input_):
            if key == '@context':
                continue
            input_[key] = cleanup_preserve(
                input_[key], bnodes_to_clear, id_alias, seen)
    return input_


def cleanup_null(input_, active_ctx, compact_arrays=True, seen=None):
    """
    Replaces @preserve objects with their values and '@null' with None,
    then drops the Nones from arrays.

    :param input_: the compacted framed output.
    :param active_ctx: the context used for compaction.
    :param compact_arrays: True to collapse single-element arrays left
      behind by removed values.
    :param seen: the ids of the objects already visited.

    :return: the cleaned output.
    """
    if seen is None:
        seen = set()
    if is_array(input_):
        rval = []
        for e in input_:
            e = cleanup_null(e, active_ctx, compact_arrays, seen)
            if e is not None:
                rval.append(e)
        return rval
    if input_ == '@null':
        return None
    if is_object(input_):
        if id(input_) in seen:
            return input_
        if '@preserve' in input_:
            value = cleanup_null(
                input_['@preserve'], active_ctx, compact_arrays, seen)
            if is_array(value) and len(value) == 1 and compact_arrays:
                value = value[0]
            return value
        seen.add(id(input_))
        graph_alias = compact_iri(active_ctx, '@graph', vocab=True)
        for key in list(input_):
            if key == '@context':
                continue
            value = cleanup_null(input_[key], active_ctx, compact_arrays, seen)
            container = active_ctx.container(key)
            if (compact_arrays and is_array(value) and len(value) == 1 and
                    '@set' not in container and '@list' not in container and
                    key != graph_alias):
                value = value[0]
            input_[key] = value
    return input_
