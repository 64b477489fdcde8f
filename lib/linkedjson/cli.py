"""
linkedjson - command line interface to the JSON-LD processor

Reads a JSON-LD document (or an N-Quads dataset with --from-rdf) from a file,
a URL or stdin, runs one operation and prints the result.
"""
import argparse
import json
import logging
import os
import sys

from linkedjson import jsonld
from linkedjson.framing import EMBED_VALUES

log = logging.getLogger('linkedjson')


def load_json_argument(value):
    """
    Loads a JSON argument given as a file path, a URL or inline JSON.

    :param value: the argument value.

    :return: the parsed JSON, or the URL string for remote documents.
    """
    if value is None:
        return None
    if os.path.exists(value):
        with open(value, 'r', encoding='utf-8') as f:
            return json.load(f)
    if value.startswith('http://') or value.startswith('https://'):
        return value
    return json.loads(value)


def read_input(path, from_rdf=False):
    """
    Reads the input document.

    :param path: a file path, a URL or '-' for stdin.
    :param from_rdf: True when the input is N-Quads text.

    :return: the input for the processor.
    """
    if path == '-':
        text = sys.stdin.read()
    elif path.startswith('http://') or path.startswith('https://'):
        return path
    else:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    return text if from_rdf else json.loads(text)


def run(opts):
    """
    Runs the operation selected on the command line.

    :param opts: the parsed arguments.

    :return: the output document, or a string for N-Quads output.
    """
    options = {
        'compactArrays': not opts.dont_compact_arrays,
        'graph': opts.top_level_graph,
    }
    if opts.base is not None:
        options['base'] = opts.base
    if opts.expand_context is not None:
        options['expandContext'] = load_json_argument(opts.expand_context)
    if opts.processing_mode is not None:
        options['processingMode'] = opts.processing_mode

    input_ = read_input(opts.input, from_rdf=opts.from_rdf)
    log.debug('Running %s on %s', opts.action, opts.input)

    if opts.from_rdf:
        options['useRdfType'] = opts.rdf_type
        options['useNativeTypes'] = opts.native_types
        if opts.format is not None:
            options['format'] = opts.format
        output = jsonld.from_rdf(input_, options)
        # from_rdf output is expanded; apply the requested action to it
        options.pop('format', None)
        input_ = output
        if opts.action == 'expand':
            return output

    if opts.action == 'compact':
        return jsonld.compact(
            input_, load_json_argument(opts.compact), options)
    if opts.action == 'flatten':
        return jsonld.flatten(
            input_, load_json_argument(opts.flatten or None), options)
    if opts.action == 'frame':
        options['embed'] = opts.embed
        options['explicit'] = opts.explicit
        options['requireAll'] = opts.require_all
        options['omitDefault'] = opts.omit_default
        return jsonld.frame(input_, load_json_argument(opts.frame), options)
    if opts.action == 'to-rdf':
        options['format'] = 'application/n-quads'
        options['produceGeneralizedRdf'] = opts.generalized_rdf
        return jsonld.to_rdf(input_, options)
    return jsonld.expand(input_, options)


def build_parser():
    prs = argparse.ArgumentParser(
        prog='linkedjson', description='Process JSON-LD documents.')

    prs.add_argument('input',
                     help='input file, URL or - for stdin')

    actions = prs.add_mutually_exclusive_group()
    actions.add_argument('--expand',
                         help='ACTION: Perform JSON-LD expansion (default)',
                         dest='action', action='store_const',
                         const='expand')
    actions.add_argument('--compact',
                         help='ACTION: Compact with the given @context '
                              'file, URI or JSON',
                         dest='compact', action='store', metavar='CTX')
    actions.add_argument('--flatten',
                         help='ACTION: Perform JSON-LD flattening, then '
                              'compact with the optional @context',
                         dest='flatten', action='store', nargs='?',
                         const='', metavar='CTX')
    actions.add_argument('--frame',
                         help='ACTION: Frame with the given frame file, '
                              'URI or JSON',
                         dest='frame', action='store', metavar='FRAME')
    actions.add_argument('--to-rdf',
                         help='ACTION: Output N-Quads',
                         dest='action', action='store_const',
                         const='to-rdf')
    prs.set_defaults(action='expand')

    prs.add_argument('--from-rdf',
                     help='Read the input as an RDF dataset',
                     dest='from_rdf', action='store_true')
    prs.add_argument('--format',
                     help='Input format for --from-rdf '
                          '[default: application/n-quads]',
                     dest='format', action='store')
    prs.add_argument('--rdf-type',
                     help='Use rdf:type instead of @type',
                     dest='rdf_type', action='store_true')
    prs.add_argument('--native-types',
                     help='Convert XSD types into native types',
                     dest='native_types', action='store_true')
    prs.add_argument('--generalized-rdf',
                     help='Keep blank node predicates in --to-rdf output',
                     dest='generalized_rdf', action='store_true')

    prs.add_argument('--base',
                     help='Base IRI to use',
                     dest='base', action='store')
    prs.add_argument('--expand-context',
                     help='@context file, URI or JSON to expand with',
                     dest='expand_context', action='store')
    prs.add_argument('--processing-mode',
                     help='json-ld-1.0 or json-ld-1.1',
                     dest='processing_mode', action='store')
    prs.add_argument('--dont-compact-arrays',
                     help='Don\'t compact arrays to single values',
                     dest='dont_compact_arrays', action='store_true')
    prs.add_argument('--top-level-graph',
                     help='Always output a top level graph (default: False)',
                     dest='top_level_graph', action='store_true')

    prs.add_argument('--embed',
                     help='default @embed flag (default: @always)',
                     dest='embed', action='store',
                     choices=EMBED_VALUES,
                     default='@always')
    prs.add_argument('--explicit',
                     help='default @explicit flag (default: False)',
                     dest='explicit', action='store_true')
    prs.add_argument('--require-all',
                     help='default @requireAll flag (default: False)',
                     dest='require_all', action='store_true')
    prs.add_argument('--omit-default',
                     help='default @omitDefault flag (default: False)',
                     dest='omit_default', action='store_true')

    prs.add_argument('--indent',
                     help='Indent json with n spaces [default: 2]',
                     dest='indent', action='store', type=int, default=2)
    prs.add_argument('-v', '--verbose',
                     dest='verbose', action='store_true')
    prs.add_argument('-q', '--quiet',
                     dest='quiet', action='store_true')
    return prs


def main(argv=None):
    prs = build_parser()
    opts = prs.parse_args(args=argv)
    if opts.compact is not None:
        opts.action = 'compact'
    elif opts.flatten is not None:
        opts.action = 'flatten'
    elif opts.frame is not None:
        opts.action = 'frame'

    logging.basicConfig(
        level=logging.DEBUG if opts.verbose else
        logging.ERROR if opts.quiet else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s')

    try:
        output = run(opts)
    except jsonld.JsonLdError as e:
        log.error('%s', e)
        return 1

    if isinstance(output, str):
        sys.stdout.write(output)
    else:
        sys.stdout.write(json.dumps(output, indent=opts.indent))
        sys.stdout.write('\n')
    return 0


if __name__ == '__main__':
    sys.exit(main())
