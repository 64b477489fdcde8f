"""
Error types raised by the JSON-LD algorithms.

Every algorithmic failure is a :class:`JsonLdError` whose ``code`` attribute
holds the normative JSON-LD error code (for example
``'recursive context inclusion'``).
"""


class JsonLdError(Exception):
    """
    Base class for JSON-LD errors.
    """

    def __init__(self, message, type_, details=None, code=None, cause=None):
        Exception.__init__(self, message)
        self.type = type_
        self.details = details
        self.code = code
        self.cause = cause

    def __str__(self):
        rval = str(self.args[0]) if self.args else ''
        rval += '\nType: ' + self.type
        if self.code:
            rval += '\nCode: ' + self.code
        if self.details:
            rval += '\nDetails: ' + repr(self.details)
        if self.cause:
            rval += '\nCause: ' + str(self.cause)
        return rval


class InvalidQuadError(JsonLdError):
    """
    Raised when N-Quads input is lexically malformed.
    """

    def __init__(self, message, line_number=None, line=None):
        JsonLdError.__init__(
            self, message, 'jsonld.ParseError',
            {'line': line, 'lineNumber': line_number},
            code='invalid quad')
        self.line_number = line_number
        self.line = line
