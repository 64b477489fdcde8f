"""
Python implementation of a JSON-LD 1.1 processor.

The module level functions are the public entry points: expand, compact,
flatten, frame, to_rdf and from_rdf. Each takes an options dict with
camelCase keys; the caller's dict is never modified.

.. module:: linkedjson.jsonld
  :synopsis: JSON-LD processing
"""

import json
import logging
import re

from linkedjson import flattening, framing, rdf
from linkedjson.__about__ import (__copyright__, __license__, __version__)
from linkedjson.compaction import Compactor
from linkedjson.context import ContextProcessor, get_initial_context
from linkedjson.errors import JsonLdError
from linkedjson.expansion import Expander
from linkedjson.identifier_issuer import IdentifierIssuer
from linkedjson.iri_resolver import compact_iri, expand_iri
from linkedjson.nquads import parse_nquads, serialize_nquads
from linkedjson.util import arrayify, clone, is_array, is_object, is_string

__all__ = [
    '__copyright__', '__license__', '__version__',
    'compact', 'expand', 'flatten', 'frame', 'link', 'from_rdf', 'to_rdf',
    'set_document_loader', 'get_document_loader', 'load_document',
    'parse_link_header', 'dummy_document_loader',
    'requests_document_loader', 'aiohttp_document_loader',
    'register_rdf_parser', 'unregister_rdf_parser',
    'JsonLdProcessor', 'JsonLdError'
]

log = logging.getLogger(__name__)

# JSON-LD link header rel
LINK_HEADER_REL = 'http://www.w3.org/ns/json-ld#context'

NQUADS_FORMATS = ('application/n-quads', 'application/nquads')


def compact(input_, ctx, options=None):
    """
    Performs JSON-LD compaction.

    :param input_: the JSON-LD input to compact.
    :param ctx: the JSON-LD context to compact with.
    :param [options]: the options to use.
      [base] the base IRI to use.
      [compactArrays] True to compact arrays to single values when
        appropriate, False not to (default: True).
      [graph] True to always output a top-level graph (default: False).
      [expandContext] a context to expand with.
      [skipExpansion] True to treat the input as already expanded.
      [documentLoader(url, options)] the document loader
        (default: _default_document_loader).

    :return: the compacted JSON-LD output.
    """
    return JsonLdProcessor().compact(input_, ctx, options)


def expand(input_, options=None):
    """
    Performs JSON-LD expansion.

    :param input_: the JSON-LD input to expand.
    :param [options]: the options to use.
      [base] the base IRI to use.
      [expandContext] a context to expand with.
      [onKeyDropped(key)] called with each key that is dropped.
      [strict] True to raise instead of dropping keys (default: False).
      [documentLoader(url, options)] the document loader
        (default: _default_document_loader).

    :return: the expanded JSON-LD output.
    """
    return JsonLdProcessor().expand(input_, options)


def flatten(input_, ctx=None, options=None):
    """
    Performs JSON-LD flattening.

    :param input_: the JSON-LD input to flatten.
    :param ctx: the JSON-LD context to compact with (default: None).
    :param [options]: the options to use.
      [base] the base IRI to use.
      [expandContext] a context to expand with.
      [documentLoader(url, options)] the document loader
        (default: _default_document_loader).

    :return: the flattened JSON-LD output.
    """
    return JsonLdProcessor().flatten(input_, ctx, options)


def frame(input_, frame, options=None):
    """
    Performs JSON-LD framing.

    :param input_: the JSON-LD input to frame.
    :param frame: the JSON-LD frame to use.
    :param [options]: the options to use.
      [base] the base IRI to use.
      [expandContext] a context to expand with.
      [embed] default @embed flag: '@always', '@once', '@last', '@never'
        or '@link' (default: '@always').
      [explicit] default @explicit flag (default: False).
      [requireAll] default @requireAll flag (default: False).
      [omitDefault] default @omitDefault flag (default: False).
      [omitGraph] True to leave out a top-level @graph for a single
        result (default: True in json-ld-1.1 mode).
      [pruneBlankNodeIdentifiers] True to remove blank node identifiers
        that are referenced once (default: True in json-ld-1.1 mode).
      [documentLoader(url, options)] the document loader
        (default: _default_document_loader).

    :return: the framed JSON-LD output.
    """
    return JsonLdProcessor().frame(input_, frame, options)


def link(input_, ctx, options=None):
    """
    **Experimental**

    Links a JSON-LD document's nodes in memory.

    :param input_: the JSON-LD document to link.
    :param ctx: the JSON-LD context to apply or None.
    :param [options]: the options to use.
      [base] the base IRI to use.
      [expandContext] a context to expand with.
      [documentLoader(url, options)] the document loader
        (default: _default_document_loader).

    :return: the linked JSON-LD output.
    """
    # API matches running frame with a wildcard frame and embed: '@link'
    # get arguments
    frame_ = {'@embed': '@link'}
    if ctx:
        frame_['@context'] = ctx
    return frame(input_, frame_, options)


def from_rdf(input_, options=None):
    """
    Converts an RDF dataset to JSON-LD.

    :param input_: a serialized string of RDF in a format specified
      by the format option or a list of quads to convert.
    :param [options]: the options to use:
      [format] the format if input is a string:
        'application/n-quads' for N-Quads (default: 'application/n-quads').
      [useRdfType] True to use rdf:type, False to use @type (default: False).
      [useNativeTypes] True to convert XSD types into native types
        (boolean, integer, double), False not to (default: False).
      [rdfDirection] 'i18n-datatype' to decode language and direction from
        i18n datatypes.

    :return: the JSON-LD output.
    """
    return JsonLdProcessor().from_rdf(input_, options)


def to_rdf(input_, options=None):
    """
    Outputs the RDF dataset found in the given JSON-LD object.

    :param input_: the JSON-LD input.
    :param [options]: the options to use.
      [base] the base IRI to use.
      [format] the format to use to output a string:
        'application/n-quads' for N-Quads.
      [produceGeneralizedRdf] true to output generalized RDF, false
        to produce only standard RDF (default: false).
      [rdfDirection] 'i18n-datatype' to encode @direction in datatypes.
      [documentLoader(url, options)] the document loader
        (default: _default_document_loader).

    :return: the resulting list of quads (or a serialization of it).
    """
    return JsonLdProcessor().to_rdf(input_, options)


def set_document_loader(load_document):
    """
    Sets the default JSON-LD document loader.

    :param load_document(url, options): the document loader to use.
    """
    global _default_document_loader
    _default_document_loader = load_document


def get_document_loader():
    """
    Gets the default JSON-LD document loader.

    :return: the default document loader.
    """
    return _default_document_loader


def load_document(url, options):
    """
    Retrieves a JSON-LD document with the configured document loader.

    :param url: the URL of the document.
    :param options: the options holding the 'documentLoader'.

    :return: the RemoteDocument, with a parsed 'document'.
    """
    loader = options.get('documentLoader') or _default_document_loader
    log.debug('Loading document %s', url)
    try:
        remote_doc = loader(url, {})
        if remote_doc.get('document') is None:
            raise JsonLdError(
                'No remote document found at the given URL.',
                'jsonld.NullRemoteDocument', {'url': url},
                code='loading document failed')
        if is_string(remote_doc['document']):
            remote_doc = dict(
                remote_doc, document=json.loads(remote_doc['document']))
    except Exception as cause:
        raise JsonLdError(
            'Could not retrieve a JSON-LD document from the URL.',
            'jsonld.LoadDocumentError', {'url': url},
            code='loading document failed', cause=cause) from cause
    remote_doc.setdefault('contextUrl', None)
    remote_doc.setdefault('documentUrl', url)
    return remote_doc


def parse_link_header(header):
    """
    Parses a link header. The results will be key'd by the value of "rel".

    Link: <http://json-ld.org/contexts/person.jsonld>; \
      rel="http://www.w3.org/ns/json-ld#context"; type="application/ld+json"

    Parses as: {
      'http://www.w3.org/ns/json-ld#context': {
        target: http://json-ld.org/contexts/person.jsonld,
        type: 'application/ld+json'
      }
    }

    If there is more than one "rel" with the same IRI, then entries in the
    resulting map for that "rel" will be lists.

    :param header: the link header to parse.

    :return: the parsed result.
    """
    rval = {}
    # split on unbracketed/unquoted commas
    entries = re.findall(r'(?:<[^>]*?>|"[^"]*?"|[^,])+', header)
    if not entries:
        return rval
    r_link_header = r'\s*<([^>]*?)>\s*(?:;\s*(.*))?'
    for entry in entries:
        match = re.search(r_link_header, entry)
        if not match:
            continue
        target, params = match.groups()
        result = {'target': target}
        r_params = r'(.*?)=(?:(?:"([^"]*?)")|([^"]*?))\s*(?:(?:;\s*)|$)'
        for key, quoted, plain in re.findall(r_params, params or ''):
            result[key.strip()] = quoted if quoted else plain
        rel = result.get('rel', '')
        if isinstance(rval.get(rel), list):
            rval[rel].append(result)
        elif rel in rval:
            rval[rel] = [rval[rel], result]
        else:
            rval[rel] = result
    return rval


def dummy_document_loader(**kwargs):
    """
    Create a dummy document loader that will raise an exception on use.

    :param **kwargs: extra keyword args

    :return: the RemoteDocument loader function.
    """

    def loader(url, options=None):
        """
        Raises an exception on every call.

        :param url: the URL to retrieve.

        :return: the RemoteDocument.
        """
        raise JsonLdError(
            'No default document loader configured.',
            'jsonld.LoadDocumentError', {'url': url},
            code='loading document failed')

    return loader


def requests_document_loader(**kwargs):
    import linkedjson.documentloader.requests

    return linkedjson.documentloader.requests.requests_document_loader(
        **kwargs)


def aiohttp_document_loader(**kwargs):
    import linkedjson.documentloader.aiohttp

    return linkedjson.documentloader.aiohttp.aiohttp_document_loader(
        **kwargs)


def register_rdf_parser(content_type, parser):
    """
    Registers a global RDF parser by content-type, for use with
    from_rdf. Global parsers will be used by JsonLdProcessors that
    do not register their own parsers.

    :param content_type: the content-type for the parser.
    :param parser(input): the parser function (takes a string as
             a parameter and returns a list of quads).
    """
    _rdf_parsers[content_type] = parser


def unregister_rdf_parser(content_type):
    """
    Unregisters a global RDF parser by content-type.

    :param content_type: the content-type for the parser.
    """
    _rdf_parsers.pop(content_type, None)


def _wrap_error(message, type_, cause):
    """
    Wraps an inner error, keeping its code as the error identity.
    """
    return JsonLdError(
        message, type_, code=getattr(cause, 'code', None), cause=cause)


class JsonLdProcessor(object):
    """
    A JSON-LD processor.
    """

    def __init__(self):
        """
        Initialize the JSON-LD processor.
        """
        # processor-specific RDF parsers
        self.rdf_parsers = None

    def compact(self, input_, ctx, options):
        """
        Performs JSON-LD compaction.

        :param input_: the JSON-LD input to compact.
        :param ctx: the context to compact with.
        :param options: the options to use.
          [base] the base IRI to use.
          [compactArrays] True to compact arrays to single values when
            appropriate, False not to (default: True).
          [graph] True to always output a top-level graph (default: False).
          [expandContext] a context to expand with.
          [skipExpansion] True to assume the input is expanded and skip
            expansion, False not to, (default: False).
          [documentLoader(url, options)] the document loader
            (default: _default_document_loader).

        :return: the compacted JSON-LD output.
        """
        compacted, _ = self._compact(input_, ctx, options)
        return compacted

    def _compact(self, input_, ctx, options):
        """
        Compacts the input and also returns the active context that was
        used.
        """
        if ctx is None:
            raise JsonLdError(
                'The compaction context must not be null.',
                'jsonld.CompactError', code='invalid local context')

        # nothing to compact
        if input_ is None:
            return None, None

        # set default options
        options = options.copy() if options else {}
        options.setdefault('base', input_ if is_string(input_) else '')
        options.setdefault('compactArrays', True)
        options.setdefault('graph', False)
        options.setdefault('skipExpansion', False)
        options.setdefault('ordered', True)
        options.setdefault('documentLoader', _default_document_loader)

        if options['skipExpansion']:
            expanded = input_
        else:
            # expand input
            try:
                expanded = self.expand(input_, options)
            except JsonLdError as cause:
                raise _wrap_error(
                    'Could not expand input before compaction.',
                    'jsonld.CompactError', cause) from cause

        # follow @context key
        if is_object(ctx) and '@context' in ctx:
            ctx = ctx['@context']

        # process context
        log.debug('Compacting with context %r', ctx)
        processor = ContextProcessor(options)
        try:
            active_ctx = processor.process(get_initial_context(options), ctx)
        except JsonLdError as cause:
            raise _wrap_error(
                'Could not process context before compaction.',
                'jsonld.CompactError', cause) from cause

        # do compaction
        try:
            compacted = Compactor(processor, options).compact(
                active_ctx, None, expanded)
        except JsonLdError as cause:
            raise _wrap_error(
                'Could not compact input.', 'jsonld.CompactError',
                cause) from cause

        if (options['compactArrays'] and not options['graph'] and
                is_array(compacted)):
            # simplify to a single item
            if len(compacted) == 1:
                compacted = compacted[0]
            # simplify to an empty object
            elif len(compacted) == 0:
                compacted = {}
        # always use an array if graph options is on
        elif options['graph']:
            compacted = arrayify(compacted)

        # build output context, removing empty contexts
        ctx = [c for c in arrayify(clone(ctx))
               if not is_object(c) or len(c) > 0]
        has_context = len(ctx) > 0
        if len(ctx) == 1:
            ctx = ctx[0]

        # add context and/or @graph
        if is_array(compacted):
            kwgraph = compact_iri(active_ctx, '@graph', vocab=True)
            graph = compacted
            compacted = {}
            if has_context:
                compacted['@context'] = ctx
            compacted[kwgraph] = graph
        elif is_object(compacted) and has_context:
            # reorder keys so @context is first
            graph = compacted
            compacted = {'@context': ctx}
            compacted.update(graph)

        return compacted, active_ctx

    def expand(self, input_, options):
        """
        Performs JSON-LD expansion.

        :param input_: the JSON-LD input to expand.
        :param options: the options to use.
          [base] the base IRI to use.
          [expandContext] a context to expand with.
          [isFrame] True to allow framing keywords and interpretation,
            False not to (default: false).
          [keepFreeFloatingNodes] True to keep free-floating nodes,
            False not to (default: False).
          [documentLoader(url, options)] the document loader
            (default: _default_document_loader).

        :return: the expanded JSON-LD output.
        """
        # set default options
        options = options.copy() if options else {}
        options.setdefault('isFrame', False)
        options.setdefault('keepFreeFloatingNodes', False)
        options.setdefault('ordered', True)
        options.setdefault('documentLoader', _default_document_loader)

        # if input is a string, attempt to dereference remote document
        if is_string(input_):
            remote_doc = load_document(input_, options)
        else:
            remote_doc = {
                'contextUrl': None,
                'documentUrl': None,
                'document': input_
            }

        # set default base
        options.setdefault('base', remote_doc['documentUrl'] or '')

        document = clone(remote_doc['document'])
        processor = ContextProcessor(options)
        active_ctx = get_initial_context(options)

        log.debug('Expanding document with base %r', options['base'])
        try:
            # process optional expandContext
            if options.get('expandContext') is not None:
                expand_context = clone(options['expandContext'])
                if is_object(expand_context) and '@context' in expand_context:
                    expand_context = expand_context['@context']
                active_ctx = processor.process(active_ctx, expand_context)

            # process remote context from HTTP Link Header
            if remote_doc['contextUrl'] is not None:
                active_ctx = processor.process(
                    active_ctx, remote_doc['contextUrl'])

            expanded = Expander(processor, options).expand(
                active_ctx, None, document)
        except JsonLdError as cause:
            raise _wrap_error(
                'Could not perform JSON-LD expansion.', 'jsonld.ExpandError',
                cause) from cause

        # optimize away @graph with no other properties
        if (is_object(expanded) and '@graph' in expanded and
                len(expanded) == 1):
            expanded = expanded['@graph']
        elif expanded is None:
            expanded = []

        # normalize to an array
        return arrayify(expanded)

    def flatten(self, input_, ctx, options):
        """
        Performs JSON-LD flattening.

        :param input_: the JSON-LD input to flatten.
        :param ctx: the JSON-LD context to compact with (default: None).
        :param options: the options to use.
          [base] the base IRI to use.
          [expandContext] a context to expand with.
          [documentLoader(url, options)] the document loader
            (default: _default_document_loader).

        :return: the flattened JSON-LD output.
        """
        options = options.copy() if options else {}
        options.setdefault('base', input_ if is_string(input_) else '')
        options.setdefault('documentLoader', _default_document_loader)

        try:
            # expand input
            expanded = self.expand(input_, options)
        except JsonLdError as cause:
            raise _wrap_error(
                'Could not expand input before flattening.',
                'jsonld.FlattenError', cause) from cause

        # do flattening
        log.debug('Flattening %d top-level elements', len(expanded))
        flattened = flattening.flatten(expanded, IdentifierIssuer('_:b'))

        if ctx is None:
            return flattened

        # compact result (force @graph option to true, skip expansion)
        options['graph'] = True
        options['skipExpansion'] = True
        try:
            compacted = self.compact(flattened, ctx, options)
        except JsonLdError as cause:
            raise _wrap_error(
                'Could not compact flattened output.',
                'jsonld.FlattenError', cause) from cause

        return compacted

    def frame(self, input_, frame, options):
        """
        Performs JSON-LD framing.

        :param input_: the JSON-LD object to frame.
        :param frame: the JSON-LD frame to use.
        :param options: the options to use.
          [base] the base IRI to use.
          [expandContext] a context to expand with.
          [embed] default @embed flag: '@always', '@once', '@last',
            '@never' or '@link' (default: '@always').
          [explicit] default @explicit flag (default: False).
          [requireAll] default @requireAll flag (default: False).
          [omitDefault] default @omitDefault flag (default: False).
          [omitGraph] leave out a top-level @graph for a single result
            (default: True in json-ld-1.1 mode).
          [pruneBlankNodeIdentifiers] remove unnecessary blank node
            identifiers (default: True in json-ld-1.1 mode).
          [documentLoader(url, options)] the document loader
            (default: _default_document_loader).

        :return: the framed JSON-LD output.
        """
        # set default options
        options = options.copy() if options else {}
        options.setdefault('base', input_ if is_string(input_) else '')
        options.setdefault('processingMode', 'json-ld-1.1')
        is_11 = options['processingMode'] != 'json-ld-1.0'
        options.setdefault('compactArrays', True)
        options.setdefault('embed', '@always')
        options.setdefault('explicit', False)
        options.setdefault('requireAll', False)
        options.setdefault('omitDefault', False)
        options.setdefault('omitGraph', is_11)
        options.setdefault('pruneBlankNodeIdentifiers', is_11)
        options.setdefault('ordered', True)
        options.setdefault('documentLoader', _default_document_loader)

        # if frame is a string, attempt to dereference remote document
        if is_string(frame):
            remote_frame = load_document(frame, options)
        else:
            remote_frame = {
                'contextUrl': None,
                'documentUrl': None,
                'document': frame
            }

        # preserve frame context
        frame = remote_frame['document']
        ctx = frame.get('@context', {}) if is_object(frame) else {}
        if remote_frame['contextUrl'] is not None:
            ctx = arrayify(ctx) + [remote_frame['contextUrl']] if ctx \
                else remote_frame['contextUrl']
            frame = dict(frame, **{'@context': ctx})

        try:
            # expand input
            expanded = self.expand(input_, options)
        except JsonLdError as cause:
            raise _wrap_error(
                'Could not expand input before framing.',
                'jsonld.FrameError', cause) from cause

        try:
            # expand frame
            opts = dict(options, isFrame=True, keepFreeFloatingNodes=True)
            expanded_frame = self.expand(frame, opts)
        except JsonLdError as cause:
            raise _wrap_error(
                'Could not expand frame before framing.',
                'jsonld.FrameError', cause) from cause

        # frame the default graph if the frame has a key expanding to
        # @graph, otherwise the merged graph
        frame_ctx = self.process_context(
            get_initial_context(options), ctx, options)
        frame_keys = [
            expand_iri(frame_ctx, key, vocab=True)
            for key in (frame if is_object(frame) else {})]
        options['merged'] = '@graph' not in frame_keys

        # do framing
        log.debug('Framing with embed=%s merged=%s',
                  options['embed'], options['merged'])
        try:
            framed, bnodes_to_clear = framing.frame(
                expanded, expanded_frame, options)
        except JsonLdError as cause:
            raise _wrap_error(
                'Could not frame input.', 'jsonld.FrameError',
                cause) from cause

        try:
            # compact result (skip expansion and check for linked embeds)
            options['graph'] = not options['omitGraph']
            options['skipExpansion'] = True
            options['link'] = {}
            compacted, active_ctx = self._compact(framed, ctx, options)
        except JsonLdError as cause:
            raise _wrap_error(
                'Could not compact framed output.',
                'jsonld.FrameError', cause) from cause

        id_alias = compact_iri(active_ctx, '@id', vocab=True)
        compacted = framing.cleanup_preserve(
            compacted, bnodes_to_clear, id_alias)
        return framing.cleanup_null(
            compacted, active_ctx, options['compactArrays'])

    def from_rdf(self, dataset, options):
        """
        Converts an RDF dataset to JSON-LD.

        :param dataset: a serialized string of RDF in a format specified by
          the format option or a list of quads to convert.
        :param options: the options to use.
          [format] the format if input is a string:
            'application/n-quads' for N-Quads (default: 'application/n-quads').
          [useRdfType] True to use rdf:type, False to use @type
            (default: False).
          [useNativeTypes] True to convert XSD types into native types
            (boolean, integer, double), False not to (default: False).

        :return: the JSON-LD output.
        """
        # set default options
        options = options.copy() if options else {}
        options.setdefault('useRdfType', False)
        options.setdefault('useNativeTypes', False)
        options.setdefault('ordered', True)

        if 'format' not in options and is_string(dataset):
            options['format'] = 'application/n-quads'

        # handle special format
        if 'format' in options:
            # supported formats (processor-specific and global)
            parsers = self.rdf_parsers \
                if self.rdf_parsers is not None else _rdf_parsers
            if options['format'] not in parsers:
                raise JsonLdError(
                    'Unknown input format.',
                    'jsonld.UnknownFormat', {'format': options['format']},
                    code='unknown format')
            dataset = parsers[options['format']](dataset)

        # convert from RDF
        return rdf.from_rdf(dataset, options)

    def to_rdf(self, input_, options):
        """
        Outputs the RDF dataset found in the given JSON-LD object.

        :param input_: the JSON-LD input.
        :param options: the options to use.
          [base] the base IRI to use.
          [format] the format if input is a string:
            'application/n-quads' for N-Quads.
          [produceGeneralizedRdf] true to output generalized RDF, false
            to produce only standard RDF (default: false).
          [documentLoader(url, options)] the document loader
            (default: _default_document_loader).

        :return: the resulting list of quads (or a serialization of it).
        """
        # set default options
        options = options.copy() if options else {}
        options.setdefault('base', input_ if is_string(input_) else '')
        options.setdefault('produceGeneralizedRdf', False)
        options.setdefault('documentLoader', _default_document_loader)

        if 'format' in options and options['format'] not in NQUADS_FORMATS:
            raise JsonLdError(
                'Unknown output format.',
                'jsonld.UnknownFormat', {'format': options['format']},
                code='unknown format')

        try:
            # expand input
            expanded = self.expand(input_, options)
        except JsonLdError as cause:
            raise _wrap_error(
                'Could not expand input before serialization to RDF.',
                'jsonld.RdfError', cause) from cause

        quads = rdf.to_rdf(expanded, options)
        log.debug('Produced %d quads', len(quads))

        # convert to output format
        if 'format' in options:
            return serialize_nquads(quads)
        return quads

    def process_context(self, active_ctx, local_ctx, options):
        """
        Processes a local context, retrieving any URLs as necessary, and
        returns a new active context.

        :param active_ctx: the current active context.
        :param local_ctx: the local context to process.
        :param options: the options to use.
          [documentLoader(url, options)] the document loader
            (default: _default_document_loader).

        :return: the new active context.
        """
        # set default options
        options = options.copy() if options else {}
        options.setdefault('base', '')
        options.setdefault('documentLoader', _default_document_loader)

        # return initial context early for None context
        if local_ctx is None:
            return get_initial_context(options)

        if is_object(local_ctx) and '@context' in local_ctx:
            local_ctx = local_ctx['@context']

        return ContextProcessor(options).process(
            active_ctx, clone(local_ctx))

    def register_rdf_parser(self, content_type, parser):
        """
        Registers a processor-specific RDF parser by content-type.
        Global parsers will no longer be used by this processor.

        :param content_type: the content-type for the parser.
        :param parser(input): the parser function (takes a string as
                 a parameter and returns a list of quads).
        """
        if self.rdf_parsers is None:
            self.rdf_parsers = {}
        self.rdf_parsers[content_type] = parser

    def unregister_rdf_parser(self, content_type):
        """
        Unregisters a process-specific RDF parser by content-type.
        If there are no remaining processor-specific parsers, then the global
        parsers will be re-enabled.

        :param content_type: the content-type for the parser.
        """
        if (self.rdf_parsers is not None and
                content_type in self.rdf_parsers):
            del self.rdf_parsers[content_type]
            if len(self.rdf_parsers) == 0:
                self.rdf_parsers = None


# Registered global RDF parsers hashed by content-type.
_rdf_parsers = {}

register_rdf_parser('application/n-quads', parse_nquads)
register_rdf_parser('application/nquads', parse_nquads)

# The default JSON-LD document loader.
try:
    _default_document_loader = requests_document_loader()
except ImportError:
    try:
        _default_document_loader = aiohttp_document_loader()
    except ImportError:
        _default_document_loader = dummy_document_loader()
