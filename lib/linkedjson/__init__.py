""" The linkedjson module is used to process JSON-LD. """
from . import jsonld
from .errors import InvalidQuadError, JsonLdError

__all__ = ['jsonld', 'JsonLdError', 'InvalidQuadError']
