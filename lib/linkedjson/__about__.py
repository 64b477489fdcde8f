# LinkedJSON JSON-LD meta data

__all__ = [
    '__copyright__', '__license__', '__version__'
]

__copyright__ = 'Copyright (c) 2026 LinkedJSON contributors'
__license__ = 'New BSD license'
__version__ = '1.0.0'
