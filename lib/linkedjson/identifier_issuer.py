"""
Blank node label issuing.

An issuer lives for exactly one processing call (one flatten, frame or
to_rdf run), so canonical labels never leak between calls.
"""


class IdentifierIssuer(object):
    """
    Issues canonical blank node identifiers ('_:b0', '_:b1', ...) in
    first-encounter order and remembers which source label each one
    replaced.
    """

    def __init__(self, prefix='_:b'):
        """
        Initializes a new IdentifierIssuer.

        :param prefix: the prefix to use ('<prefix><counter>').
        """
        self.prefix = prefix
        self.counter = 0
        self.existing = {}

    def get_id(self, old=None):
        """
        Gets the canonical identifier for the given source identifier,
        issuing a new one on first encounter. Without a source identifier a
        fresh identifier is always issued.

        :param [old]: the source identifier.

        :return: the canonical identifier.
        """
        if old is not None and old in self.existing:
            return self.existing[old]

        id_ = '%s%d' % (self.prefix, self.counter)
        self.counter += 1

        if old is not None:
            self.existing[old] = id_
        return id_

    def has_id(self, old):
        return old in self.existing
