"""
Remote document loaders. Each module exposes a factory that returns a
``loader(url, options)`` callable producing a RemoteDocument dict.
"""
