"""
Active contexts and the context processing algorithm.

An :class:`ActiveContext` is a snapshot: context processing always returns a
new instance and never modifies the one it was given, so sibling subtrees of
a document each keep the rules that were in effect for them.

.. module:: linkedjson.context
  :synopsis: JSON-LD context processing
"""

import json
import logging
import re

from linkedjson.errors import JsonLdError
from linkedjson.iri_resolver import expand_iri, resolve
from linkedjson.util import (
    arrayify, has_keyword_form, is_absolute_iri, is_array, is_bnode_id,
    is_bool, is_keyword, is_object, is_string, shortest_least_key)

log = logging.getLogger(__name__)

# maximum depth of nested remote contexts
MAX_CONTEXT_URLS = 10

# marks an absent scoped context (a scoped context may itself be null)
UNDEFINED = object()

# context entries that are not term definitions
CONTEXT_KEYWORDS = (
    '@base', '@direction', '@import', '@language', '@propagate',
    '@protected', '@version', '@vocab')

_TERM_LOOKS_LIKE_IRI = re.compile(r'(?::[^:])|/')
_TERM_HAS_DELIMITER = re.compile(r'[:/]')
_GEN_DELIM_END = re.compile(r'[:/?#\[\]@]$')
_WELL_FORMED_LANGUAGE = re.compile(r'^[a-zA-Z]{1,8}(-[a-zA-Z0-9]{1,8})*$')

_CONTAINERS_10 = ('@list', '@set', '@index', '@language')
_CONTAINERS_11 = _CONTAINERS_10 + ('@graph', '@id', '@type')


class ActiveContext(object):
    """
    The resolved term definitions and defaults in effect at some point in a
    document.

    Term definitions are plain dicts holding '@id', 'reverse' and optionally
    '@type', '@language', '@direction', '@container', '@context', '@nest',
    '_prefix' and 'protected'. They are never modified once the context that
    created them has been returned.

    The inverse context is derived from the definitions and kept only as a
    memo. Building it never changes what the context resolves to.
    """

    def __init__(self, base=None, processing_mode='json-ld-1.1'):
        self.base = base or None
        self.original_base = self.base
        self.vocab = None
        self.language = None
        self.direction = None
        self.processing_mode = processing_mode
        self.mappings = {}
        self.previous_context = None
        self._revision = 0
        self._inverse = None

    def clone(self):
        """
        Returns a copy of this context that can be updated without affecting
        this one.
        """
        ctx = ActiveContext.__new__(ActiveContext)
        ctx.base = self.base
        ctx.original_base = self.original_base
        ctx.vocab = self.vocab
        ctx.language = self.language
        ctx.direction = self.direction
        ctx.processing_mode = self.processing_mode
        ctx.mappings = dict(self.mappings)
        ctx.previous_context = self.previous_context
        ctx._revision = 0
        ctx._inverse = None
        return ctx

    def revert_to_previous_context(self):
        """
        Returns the context that was active before a non-propagated
        (type-scoped) context was applied, or this context if there was none.
        """
        if self.previous_context is None:
            return self
        return self.previous_context

    def is_processing_mode(self, version):
        if version == 1.0:
            return self.processing_mode == 'json-ld-1.0'
        return self.processing_mode != 'json-ld-1.0'

    def has_protected_terms(self):
        return any(
            m is not None and m.get('protected')
            for m in self.mappings.values())

    def set_term(self, term, mapping):
        self.mappings[term] = mapping
        self._revision += 1

    def remove_term(self, term):
        """
        Removes a term definition.

        :return: the removed definition or None.
        """
        self._revision += 1
        return self.mappings.pop(term, None)

    def get_term(self, term):
        if term is None:
            return None
        return self.mappings.get(term)

    def get(self, term, key, default=None):
        """
        Gets a value for a term from this context. '@language' and
        '@direction' fall back to the context defaults.

        :param term: the term to look up.
        :param key: the term definition entry to get.
        :param default: the value returned for a missing entry.

        :return: the value.
        """
        mapping = self.get_term(term)
        if key == '@language':
            if mapping is not None and '@language' in mapping:
                return mapping['@language']
            return self.language
        if key == '@direction':
            if mapping is not None and '@direction' in mapping:
                return mapping['@direction']
            return self.direction
        if mapping is None:
            return default
        return mapping.get(key, default)

    def container(self, term):
        mapping = self.get_term(term)
        if mapping is None:
            return []
        return mapping.get('@container', [])

    def scoped_context(self, term):
        """
        Gets the scoped context of a term, or UNDEFINED if it has none.
        """
        mapping = self.get_term(term)
        if mapping is None or '@context' not in mapping:
            return UNDEFINED
        return mapping['@context']

    def get_inverse(self):
        """
        Gets the inverse context used for term selection. It is rebuilt
        after any term definition, the default language or the default
        direction changes.

        The inverse context maps IRI -> container -> '@language'/'@type'/
        '@any' -> value -> term. Terms are visited shortest first, then
        lexicographically, and the first term registered for a slot wins.
        """
        state = (self._revision, self.language, self.direction)
        if self._inverse is not None and self._inverse[0] == state:
            return self._inverse[1]

        inverse = {}

        default_language = (self.language or '@none').lower()
        default_direction = self.direction

        for term in sorted(self.mappings, key=shortest_least_key):
            mapping = self.mappings[term]
            if mapping is None or mapping['@id'] is None:
                continue

            container = ''.join(sorted(mapping.get('@container', []))) or \
                '@none'

            container_map = inverse.setdefault(mapping['@id'], {})
            entry = container_map.get(container)
            if entry is None:
                entry = container_map[container] = {
                    '@language': {},
                    '@type': {},
                    '@any': {}
                }
            entry['@any'].setdefault('@none', term)
            language_map = entry['@language']
            type_map = entry['@type']

            if mapping['reverse']:
                type_map.setdefault('@reverse', term)
            elif mapping.get('@type') == '@none':
                language_map.setdefault('@any', term)
                type_map.setdefault('@any', term)
            elif '@type' in mapping:
                type_map.setdefault(mapping['@type'], term)
            elif '@language' in mapping and '@direction' in mapping:
                language = mapping['@language']
                direction = mapping['@direction']
                if language and direction:
                    key = ('%s_%s' % (language, direction)).lower()
                elif language:
                    key = language.lower()
                elif direction:
                    key = '_' + direction
                else:
                    key = '@null'
                language_map.setdefault(key, term)
            elif '@language' in mapping:
                language = mapping['@language'] or '@null'
                language_map.setdefault(language.lower(), term)
            elif '@direction' in mapping:
                direction = mapping['@direction']
                language_map.setdefault(
                    '_' + direction if direction else '@none', term)
            elif default_direction:
                language = '' if default_language == '@none' \
                    else default_language
                language_map.setdefault(
                    '%s_%s' % (language, default_direction), term)
                language_map.setdefault('@none', term)
                type_map.setdefault('@none', term)
            else:
                language_map.setdefault(default_language, term)
                language_map.setdefault('@none', term)
                type_map.setdefault('@none', term)

        self._inverse = (state, inverse)
        return inverse


def get_initial_context(options):
    """
    Gets the initial context for the given options.
    """
    return ActiveContext(
        base=options.get('base'),
        processing_mode=options.get('processingMode', 'json-ld-1.1'))


class ContextProcessor(object):
    """
    Runs the context processing algorithm for a single API call.

    Remote contexts are fetched through the configured document loader and
    cached for the lifetime of this processor only.
    """

    def __init__(self, options):
        self.options = options
        self._remote_contexts = {}

    def process(
            self, active_ctx, local_ctx, base_url=None, remote_contexts=None,
            override_protected=False, propagate=True):
        """
        Processes a local context and returns the resulting active context.

        :param active_ctx: the current active context.
        :param local_ctx: the local context to process (null, IRI, object or
          array of those).
        :param base_url: the IRI relative IRIs in remote contexts resolve
          against.
        :param remote_contexts: the remote context IRIs currently being
          resolved, used to detect recursive inclusion.
        :param override_protected: True to allow redefining protected terms
          (property-scoped contexts).
        :param propagate: False for contexts that do not propagate into node
          objects (type-scoped contexts).

        :return: the new active context.
        """
        if remote_contexts is None:
            remote_contexts = []
        if base_url is None:
            base_url = active_ctx.original_base

        # normalize a document wrapper to its context
        if (is_object(local_ctx) and '@context' in local_ctx and
                is_array(local_ctx['@context'])):
            local_ctx = local_ctx['@context']
        ctxs = arrayify(local_ctx)

        if len(ctxs) == 0:
            return active_ctx

        # @propagate on the first context object governs the whole array
        if is_object(ctxs[0]) and '@propagate' in ctxs[0]:
            propagate = ctxs[0]['@propagate']

        rval = active_ctx
        if not propagate and rval.previous_context is None:
            rval = rval.clone()
            rval.previous_context = active_ctx

        for ctx in ctxs:
            if ctx is None:
                if not override_protected and rval.has_protected_terms():
                    raise JsonLdError(
                        'Tried to nullify a context with protected terms '
                        'outside of a term definition.',
                        'jsonld.SyntaxError', {},
                        code='invalid context nullification')
                previous = rval
                rval = ActiveContext(
                    base=previous.original_base,
                    processing_mode=previous.processing_mode)
                if not propagate:
                    rval.previous_context = previous.clone()
                continue

            if is_string(ctx):
                rval = self._process_remote(
                    rval, ctx, base_url, remote_contexts,
                    override_protected)
                continue

            if not is_object(ctx):
                raise JsonLdError(
                    'Invalid JSON-LD syntax; @context must be an object.',
                    'jsonld.SyntaxError', {'context': ctx},
                    code='invalid local context')

            rval = self._process_object(
                rval, ctx, base_url, remote_contexts, override_protected)

        return rval

    def _process_remote(
            self, active_ctx, url, base_url, remote_contexts,
            override_protected):
        url = resolve(url, base_url)

        if url in remote_contexts:
            raise JsonLdError(
                'Invalid JSON-LD syntax; a context is included '
                'recursively.', 'jsonld.ContextUrlError', {'url': url},
                code='recursive context inclusion')
        if len(remote_contexts) >= MAX_CONTEXT_URLS:
            raise JsonLdError(
                'Maximum number of @context URLs exceeded.',
                'jsonld.ContextUrlError', {'max': MAX_CONTEXT_URLS},
                code='context overflow')

        context = self.load_context(url)
        return self.process(
            active_ctx, context, base_url=url,
            remote_contexts=remote_contexts + [url],
            override_protected=override_protected)

    def load_context(self, url):
        """
        Retrieves the @context of a remote context document.

        :param url: the absolute URL of the context document.

        :return: the value of its @context entry.
        """
        if url in self._remote_contexts:
            log.debug('Using cached remote context %s', url)
            return self._remote_contexts[url]

        loader = self.options['documentLoader']
        log.debug('Loading remote context %s', url)
        try:
            remote_doc = loader(url, {})
            document = remote_doc['document']
            if is_string(document):
                document = json.loads(document)
        except Exception as cause:
            raise JsonLdError(
                'Dereferencing a URL did not result in a valid JSON-LD '
                'context.', 'jsonld.ContextUrlError', {'url': url},
                code='loading remote context failed', cause=cause) from cause

        if not is_object(document) or '@context' not in document:
            raise JsonLdError(
                'Dereferencing a URL did not result in a JSON object '
                'containing a @context.', 'jsonld.ContextUrlError',
                {'url': url}, code='invalid remote context')

        context = document['@context']
        self._remote_contexts[url] = context
        return context

    def _process_object(
            self, active_ctx, ctx, base_url, remote_contexts,
            override_protected):
        rval = active_ctx.clone()

        if '@version' in ctx:
            if ctx['@version'] != 1.1:
                raise JsonLdError(
                    'Unsupported JSON-LD version: ' + str(ctx['@version']),
                    'jsonld.UnsupportedVersion', {'context': ctx},
                    code='invalid @version value')
            if active_ctx.processing_mode == 'json-ld-1.0':
                raise JsonLdError(
                    '@version: 1.1 not allowed in json-ld-1.0 processing '
                    'mode.', 'jsonld.ProcessingModeConflict',
                    {'context': ctx}, code='processing mode conflict')
            rval.processing_mode = 'json-ld-1.1'

        if '@import' in ctx:
            ctx = self._import(rval, ctx, base_url)

        # @base is ignored inside remote contexts
        if '@base' in ctx and not remote_contexts:
            base = ctx['@base']
            if base is None:
                rval.base = None
            elif not is_string(base):
                raise JsonLdError(
                    'Invalid JSON-LD syntax; the value of "@base" in a '
                    '@context must be a string or null.',
                    'jsonld.SyntaxError', {'context': ctx},
                    code='invalid base IRI')
            elif is_absolute_iri(base):
                rval.base = base
            elif rval.base is not None:
                rval.base = resolve(base, rval.base)
            else:
                raise JsonLdError(
                    'Invalid JSON-LD syntax; the value of "@base" in a '
                    '@context must be an absolute IRI or a relative IRI '
                    'with a base.', 'jsonld.SyntaxError', {'context': ctx},
                    code='invalid base IRI')

        if '@vocab' in ctx:
            value = ctx['@vocab']
            if value is None:
                rval.vocab = None
            elif not is_string(value):
                raise JsonLdError(
                    'Invalid JSON-LD syntax; the value of "@vocab" in a '
                    '@context must be a string or null.',
                    'jsonld.SyntaxError', {'context': ctx},
                    code='invalid vocab mapping')
            elif not is_absolute_iri(value) and rval.is_processing_mode(1.0):
                raise JsonLdError(
                    'Invalid JSON-LD syntax; the value of "@vocab" in a '
                    '@context must be an absolute IRI.',
                    'jsonld.SyntaxError', {'context': ctx},
                    code='invalid vocab mapping')
            else:
                vocab = expand_iri(rval, value, vocab=True, base=True)
                if not is_absolute_iri(vocab):
                    log.warning('@vocab "%s" is not an absolute IRI', vocab)
                rval.vocab = vocab

        if '@language' in ctx:
            value = ctx['@language']
            if value is None:
                rval.language = None
            elif not is_string(value):
                raise JsonLdError(
                    'Invalid JSON-LD syntax; the value of "@language" in a '
                    '@context must be a string or null.',
                    'jsonld.SyntaxError', {'context': ctx},
                    code='invalid default language')
            else:
                if not _WELL_FORMED_LANGUAGE.match(value):
                    log.warning('@language "%s" is not well-formed', value)
                rval.language = value.lower()

        if '@direction' in ctx:
            value = ctx['@direction']
            if rval.is_processing_mode(1.0):
                raise JsonLdError(
                    'Invalid context entry "@direction" in json-ld-1.0 '
                    'processing mode.', 'jsonld.SyntaxError',
                    {'context': ctx}, code='invalid context entry')
            if value is not None and value not in ('ltr', 'rtl'):
                raise JsonLdError(
                    'Invalid JSON-LD syntax; the value of "@direction" in a '
                    '@context must be null, "ltr", or "rtl".',
                    'jsonld.SyntaxError', {'context': ctx},
                    code='invalid base direction')
            rval.direction = value

        if '@propagate' in ctx:
            value = ctx['@propagate']
            if rval.is_processing_mode(1.0):
                raise JsonLdError(
                    'Invalid context entry "@propagate" in json-ld-1.0 '
                    'processing mode.', 'jsonld.SyntaxError',
                    {'context': ctx}, code='invalid context entry')
            if not is_bool(value):
                raise JsonLdError(
                    '@propagate value must be a boolean.',
                    'jsonld.SyntaxError', {'context': ctx},
                    code='invalid @propagate value')

        if '@protected' in ctx and not is_bool(ctx['@protected']):
            raise JsonLdError(
                '@protected value must be a boolean.',
                'jsonld.SyntaxError', {'context': ctx},
                code='invalid protected value')

        defined = {}
        for term in ctx:
            if term in CONTEXT_KEYWORDS:
                continue
            TermDefinitionBuilder(
                self, rval, ctx, defined, base_url,
                ctx.get('@protected', False),
                override_protected).define(term)

        return rval

    def _import(self, active_ctx, ctx, base_url):
        if active_ctx.is_processing_mode(1.0):
            raise JsonLdError(
                'Invalid context entry "@import" in json-ld-1.0 processing '
                'mode.', 'jsonld.SyntaxError', {'context': ctx},
                code='invalid context entry')
        value = ctx['@import']
        if not is_string(value):
            raise JsonLdError(
                '@import must be a string.', 'jsonld.SyntaxError',
                {'context': ctx}, code='invalid @import value')
        imported = self.load_context(resolve(value, base_url))
        if not is_object(imported):
            raise JsonLdError(
                'Imported context must be a single object.',
                'jsonld.SyntaxError', {'context': imported},
                code='invalid remote context')
        if '@import' in imported:
            raise JsonLdError(
                'Imported context must not include @import.',
                'jsonld.SyntaxError', {'context': imported},
                code='invalid context entry')

        # entries of the importing context take precedence
        merged = dict(imported)
        merged.update(ctx)
        del merged['@import']
        return merged


class TermDefinitionBuilder(object):
    """
    Creates the term definitions of one local context object, following
    dependencies between terms (and detecting cycles) on the way.
    """

    def __init__(
            self, processor, active_ctx, local_ctx, defined, base_url,
            protected, override_protected):
        self.processor = processor
        self.active_ctx = active_ctx
        self.local_ctx = local_ctx
        self.defined = defined
        self.base_url = base_url
        self.protected = protected
        self.override_protected = override_protected

    def _error(self, message, code, **details):
        details['context'] = self.local_ctx
        return JsonLdError(message, 'jsonld.SyntaxError', details, code=code)

    def expand(self, value, vocab=False, base=False):
        """
        Expands a value from the local context, defining any term or prefix
        it depends on first.
        """
        if value is None or is_keyword(value):
            return value
        if value in self.local_ctx and self.defined.get(value) is not True:
            self.define(value)
        colon = value.find(':', 1)
        if colon != -1:
            prefix = value[:colon]
            if prefix in self.local_ctx and \
                    self.defined.get(prefix) is not True:
                self.define(prefix)
        return expand_iri(self.active_ctx, value, vocab=vocab, base=base)

    def define(self, term):
        """
        Creates the term definition for the given term.

        :param term: the term in the local context to define.
        """
        active_ctx = self.active_ctx
        local_ctx = self.local_ctx
        defined = self.defined

        if term in defined:
            if defined[term]:
                return
            raise self._error(
                'Cyclical context definition detected.',
                'cyclic IRI mapping', term=term)

        # now defining term
        defined[term] = False

        value = local_ctx[term]

        if (term == '@type' and is_object(value) and
                value.get('@container', '@set') == '@set' and
                active_ctx.is_processing_mode(1.1)):
            if any(k not in ('@container', '@protected') for k in value):
                raise self._error(
                    'Invalid JSON-LD syntax; keywords cannot be overridden.',
                    'keyword redefinition', term=term)
        elif is_keyword(term):
            raise self._error(
                'Invalid JSON-LD syntax; keywords cannot be overridden.',
                'keyword redefinition', term=term)
        elif has_keyword_form(term):
            log.warning(
                'Terms beginning with "@" are reserved for future use '
                'and ignored: %s', term)
            defined[term] = True
            return
        elif term == '':
            raise self._error(
                'Invalid JSON-LD syntax; a term cannot be an empty string.',
                'invalid term definition')

        previous_mapping = active_ctx.remove_term(term)

        simple_term = is_string(value) or value is None
        if simple_term:
            value = {'@id': value}

        if not is_object(value):
            raise self._error(
                'Invalid JSON-LD syntax; @context term values must be '
                'strings or objects.', 'invalid term definition', term=term)

        valid_keys = ['@container', '@id', '@language', '@reverse', '@type']
        if active_ctx.is_processing_mode(1.1):
            valid_keys.extend([
                '@context', '@direction', '@nest', '@prefix', '@protected'])
        for kw in value:
            if kw not in valid_keys:
                raise self._error(
                    'Invalid JSON-LD syntax; a term definition must not '
                    'contain ' + kw, 'invalid term definition', term=term)

        mapping = {'reverse': False}
        colon = term.find(':', 1)
        term_has_colon = colon != -1

        if '@reverse' in value:
            if '@id' in value:
                raise self._error(
                    'Invalid JSON-LD syntax; an @reverse term definition '
                    'must not contain @id.', 'invalid reverse property',
                    term=term)
            if '@nest' in value:
                raise self._error(
                    'Invalid JSON-LD syntax; an @reverse term definition '
                    'must not contain @nest.', 'invalid reverse property',
                    term=term)
            reverse = value['@reverse']
            if not is_string(reverse):
                raise self._error(
                    'Invalid JSON-LD syntax; @context @reverse value must be '
                    'a string.', 'invalid IRI mapping', term=term)
            if has_keyword_form(reverse):
                log.warning(
                    'Values beginning with "@" are reserved for future use '
                    'and ignored: %s', reverse)
                self._restore(term, previous_mapping)
                return
            id_ = self.expand(reverse, vocab=True, base=False)
            if not is_absolute_iri(id_):
                raise self._error(
                    'Invalid JSON-LD syntax; @context @reverse value must be '
                    'an absolute IRI or a blank node identifier.',
                    'invalid IRI mapping', term=term)
            mapping['@id'] = id_
            mapping['reverse'] = True
        elif '@id' in value:
            id_ = value['@id']
            if id_ is None:
                mapping['@id'] = None
            elif not is_string(id_):
                raise self._error(
                    'Invalid JSON-LD syntax; @context @id value must be a '
                    'string.', 'invalid IRI mapping', term=term)
            elif id_ != term:
                if not is_keyword(id_) and has_keyword_form(id_):
                    log.warning(
                        'Values beginning with "@" are reserved for future '
                        'use and ignored: %s', id_)
                    self._restore(term, previous_mapping)
                    return
                id_ = self.expand(id_, vocab=True, base=False)
                if not is_absolute_iri(id_) and not is_keyword(id_):
                    raise self._error(
                        'Invalid JSON-LD syntax; @context @id value must be '
                        'an absolute IRI, a blank node identifier, or a '
                        'keyword.', 'invalid IRI mapping', term=term)

                # a term that looks like an IRI must expand to itself
                if _TERM_LOOKS_LIKE_IRI.search(term):
                    defined[term] = True
                    term_iri = self.expand(term, vocab=True, base=False)
                    defined[term] = False
                    if term_iri != id_:
                        raise self._error(
                            'Invalid JSON-LD syntax; term in form of IRI '
                            'must expand to definition.',
                            'invalid IRI mapping', term=term)

                mapping['@id'] = id_
                mapping['_prefix'] = bool(
                    simple_term and not term_has_colon and
                    _GEN_DELIM_END.search(id_))

        if '@id' not in mapping:
            if term_has_colon:
                prefix = term[:colon]
                if prefix in local_ctx:
                    self.define(prefix)
                prefix_mapping = active_ctx.mappings.get(prefix)
                if prefix_mapping is not None and \
                        prefix_mapping['@id'] is not None:
                    mapping['@id'] = prefix_mapping['@id'] + term[colon + 1:]
                else:
                    # term is an absolute IRI or blank node identifier
                    mapping['@id'] = term
            elif term == '@type':
                mapping['@id'] = term
            else:
                if active_ctx.vocab is None:
                    raise self._error(
                        'Invalid JSON-LD syntax; @context terms must define '
                        'an @id.', 'invalid IRI mapping', term=term)
                mapping['@id'] = active_ctx.vocab + term

        if value.get('@protected') is True or (
                self.protected and value.get('@protected') is not False):
            mapping['protected'] = True

        # term is defined from here on; later expansions may refer to it
        defined[term] = True
        active_ctx.set_term(term, mapping)

        if '@type' in value:
            type_ = value['@type']
            if not is_string(type_):
                raise self._error(
                    'Invalid JSON-LD syntax; an @context @type value must be '
                    'a string.', 'invalid type mapping', term=term)
            if type_ == '@none' and active_ctx.is_processing_mode(1.0):
                raise self._error(
                    'Invalid JSON-LD syntax; @type @none requires '
                    'json-ld-1.1.', 'invalid type mapping', term=term)
            if type_ not in ('@id', '@vocab', '@none'):
                type_ = self.expand(type_, vocab=True, base=False)
                if not is_absolute_iri(type_) or is_bnode_id(type_):
                    raise self._error(
                        'Invalid JSON-LD syntax; an @context @type value '
                        'must be an absolute IRI.', 'invalid type mapping',
                        term=term)
            mapping['@type'] = type_

        if '@container' in value:
            container = self._validate_container(
                term, value['@container'], mapping)
            if mapping['reverse'] and any(
                    c not in ('@index', '@set') for c in container):
                raise self._error(
                    'Invalid JSON-LD syntax; @context @container value for '
                    'an @reverse type definition must be @index or @set.',
                    'invalid reverse property', term=term)
            mapping['@container'] = container

        if '@context' in value:
            scoped = value['@context']
            if not (scoped is None or is_string(scoped) or
                    is_object(scoped) or is_array(scoped)):
                raise self._error(
                    'Invalid JSON-LD syntax; a scoped context must be null, '
                    'an IRI, an object or an array.',
                    'invalid scoped context', term=term)
            mapping['@context'] = scoped

        if '@language' in value and '@type' not in value:
            language = value['@language']
            if language is not None and not is_string(language):
                raise self._error(
                    'Invalid JSON-LD syntax; @context @language value must '
                    'be a string or null.', 'invalid language mapping',
                    term=term)
            if language is not None:
                language = language.lower()
            mapping['@language'] = language

        if '@direction' in value and '@type' not in value:
            direction = value['@direction']
            if direction is not None and direction not in ('ltr', 'rtl'):
                raise self._error(
                    'Invalid JSON-LD syntax; @direction value must be null, '
                    '"ltr", or "rtl".', 'invalid base direction', term=term)
            mapping['@direction'] = direction

        if '@prefix' in value:
            if _TERM_HAS_DELIMITER.search(term):
                raise self._error(
                    'Invalid JSON-LD syntax; @context @prefix used on a '
                    'compact IRI term.', 'invalid term definition',
                    term=term)
            if is_keyword(mapping['@id']):
                raise self._error(
                    'Invalid JSON-LD syntax; keywords may not be used as '
                    'prefixes.', 'invalid term definition', term=term)
            if not is_bool(value['@prefix']):
                raise self._error(
                    'Invalid JSON-LD syntax; @context value for @prefix '
                    'must be boolean.', 'invalid @prefix value', term=term)
            mapping['_prefix'] = value['@prefix']

        if '@nest' in value:
            nest = value['@nest']
            if not is_string(nest) or (nest != '@nest' and is_keyword(nest)):
                raise self._error(
                    'Invalid JSON-LD syntax; @context @nest value must be a '
                    'string which is not a keyword other than @nest.',
                    'invalid @nest value', term=term)
            mapping['@nest'] = nest

        if mapping['@id'] in ('@context', '@preserve'):
            raise self._error(
                'Invalid JSON-LD syntax; @context and @preserve cannot be '
                'aliased.', 'invalid keyword alias', term=term)

        if (previous_mapping is not None and
                previous_mapping.get('protected') and
                not self.override_protected):
            # the redefinition must be identical, including protection
            mapping['protected'] = True
            if previous_mapping != mapping:
                raise self._error(
                    'Invalid JSON-LD syntax; tried to redefine a protected '
                    'term.', 'protected term redefinition', term=term)

    def _restore(self, term, previous_mapping):
        if previous_mapping is not None:
            self.active_ctx.set_term(term, previous_mapping)
        self.defined[term] = True

    def _validate_container(self, term, value, mapping):
        is_11 = self.active_ctx.is_processing_mode(1.1)
        valid = _CONTAINERS_11 if is_11 else _CONTAINERS_10

        if is_11:
            if not (is_string(value) or is_array(value)):
                raise self._error(
                    'Invalid JSON-LD syntax; @context @container value must '
                    'be a string or an array.', 'invalid container mapping',
                    term=term)
        elif not is_string(value):
            raise self._error(
                'Invalid JSON-LD syntax; @context @container value must be '
                'a string.', 'invalid container mapping', term=term)

        container = arrayify(value)
        is_valid = all(c in valid for c in container)

        if '@list' in container:
            is_valid = is_valid and len(container) == 1
        elif '@graph' in container:
            is_valid = is_valid and all(
                c in ('@graph', '@id', '@index', '@set') for c in container)
            is_valid = is_valid and not (
                '@id' in container and '@index' in container)
        else:
            is_valid = is_valid and len(container) <= (
                2 if '@set' in container else 1)

        if '@type' in container:
            # a type map indexes node references
            mapping.setdefault('@type', '@id')
            if mapping['@type'] not in ('@id', '@vocab'):
                raise self._error(
                    'Invalid JSON-LD syntax; container: @type requires @type '
                    'to be @id or @vocab.', 'invalid type mapping',
                    term=term)

        if not is_valid:
            raise self._error(
                'Invalid JSON-LD syntax; @context @container value must be '
                'one of the following: ' + ', '.join(valid) + ' (or a '
                'valid combination of them).',
                'invalid container mapping', term=term)

        return sorted(set(container))
