"""
Remote document loader using Requests.

.. module:: linkedjson.documentloader.requests
  :synopsis: Remote document loader using Requests
"""
import logging
import re
import string
import urllib.parse as urllib_parse

from linkedjson.errors import JsonLdError
from linkedjson.iri_resolver import resolve
from linkedjson.jsonld import LINK_HEADER_REL, parse_link_header

log = logging.getLogger(__name__)

ACCEPT = 'application/ld+json, application/json'

_JSON_CONTENT_TYPE = re.compile(r'^application\/(\w*\+)?json$')


def validate_url(url, secure=False):
    """
    Checks that a URL can be dereferenced by the HTTP loaders.

    :param url: the URL to check.
    :param secure: True to only accept "https" URLs.
    """
    pieces = urllib_parse.urlparse(url)
    if (not all([pieces.scheme, pieces.netloc]) or
            pieces.scheme not in ['http', 'https'] or
            set(pieces.netloc) > set(
                string.ascii_letters + string.digits + '-.:')):
        raise JsonLdError(
            'URL could not be dereferenced; only "http" and "https" '
            'URLs are supported.',
            'jsonld.InvalidUrl', {'url': url},
            code='loading document failed')
    if secure and pieces.scheme != 'https':
        raise JsonLdError(
            'URL could not be dereferenced; secure mode enabled and '
            'the URL\'s scheme is not "https".',
            'jsonld.InvalidUrl', {'url': url},
            code='loading document failed')


def apply_link_header(doc, url, link_header):
    """
    Updates a RemoteDocument from the HTTP Link header of its response.

    Sets 'contextUrl' from a JSON-LD context link on non JSON-LD responses.
    Returns the absolute URL of an 'alternate' JSON-LD document to follow,
    or None.

    :param doc: the RemoteDocument being built.
    :param url: the URL that was requested.
    :param link_header: the value of the Link header.

    :return: the alternate URL or None.
    """
    links = parse_link_header(link_header)
    content_type = doc['contentType']
    linked_context = links.get(LINK_HEADER_REL)
    # only 1 related link header permitted
    if linked_context and content_type != 'application/ld+json':
        if isinstance(linked_context, list):
            raise JsonLdError(
                'URL could not be dereferenced, it has more than one '
                'associated HTTP Link Header.',
                'jsonld.LoadDocumentError', {'url': url},
                code='multiple context link headers')
        doc['contextUrl'] = resolve(linked_context['target'], url)

    # if not JSON-LD, alternate may point there
    linked_alternate = links.get('alternate')
    if (isinstance(linked_alternate, dict) and
            linked_alternate.get('type') == 'application/ld+json' and
            not _JSON_CONTENT_TYPE.match(content_type.split(';')[0].strip())):
        return resolve(linked_alternate['target'], url)
    return None


def requests_document_loader(secure=False, max_link_follows=2, **kwargs):
    """
    Create a Requests document loader.

    Can be used to setup extra Requests args such as verify, cert, timeout,
    or others.

    :param secure: require all requests to use HTTPS (default: False).
    :param max_link_follows: Maximum number of alternate link follows allowed.
    :param **kwargs: extra keyword args for Requests get() call.

    :return: the RemoteDocument loader function.
    """
    import requests

    def loader(url, options=None, link_follow_count=0):
        """
        Retrieves JSON-LD at the given URL.

        :param url: the URL to retrieve.
        :param options: the request options, 'headers' overrides the
          default Accept header.

        :return: the RemoteDocument.
        """
        options = options or {}
        try:
            validate_url(url, secure)
            headers = options.get('headers')
            if headers is None:
                headers = {'Accept': ACCEPT}
            log.debug('GET %s', url)
            response = requests.get(url, headers=headers, **kwargs)
            response.raise_for_status()

            content_type = response.headers.get('content-type')
            if not content_type:
                content_type = 'application/octet-stream'
            doc = {
                'contentType': content_type,
                'contextUrl': None,
                'documentUrl': response.url,
                'document': None
            }
            try:
                doc['document'] = response.json()
            except ValueError:
                # body is not JSON, the link header may point to JSON-LD
                pass

            link_header = response.headers.get('link')
            if link_header:
                alternate = apply_link_header(doc, url, link_header)
                if alternate is not None:
                    if link_follow_count >= max_link_follows:
                        raise JsonLdError(
                            'Exceeded maximum alternate link follows.',
                            'jsonld.LoadDocumentError',
                            {'url': url, 'max': max_link_follows},
                            code='loading document failed')
                    return loader(
                        alternate, options=options,
                        link_follow_count=link_follow_count + 1)
            return doc
        except JsonLdError:
            raise
        except Exception as cause:
            raise JsonLdError(
                'Could not retrieve a JSON-LD document from the URL.',
                'jsonld.LoadDocumentError', {'url': url},
                code='loading document failed', cause=cause) from cause

    return loader
