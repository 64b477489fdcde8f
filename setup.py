# -*- coding: utf-8 -*-
"""
LinkedJSON
==========

LinkedJSON is a Python JSON-LD 1.1 processor.

.. _JSON-LD: https://json-ld.org/
"""

from setuptools import setup
import os

# get meta data
about = {}
with open(os.path.join(
        os.path.dirname(__file__), 'lib', 'linkedjson', '__about__.py')) as fp:
    exec(fp.read(), about)

with open(os.path.join(os.path.dirname(__file__), 'README.rst')) as fp:
    long_description = fp.read()

setup(
    name='linkedjson',
    version=about['__version__'],
    description='Python implementation of the JSON-LD 1.1 API',
    long_description=long_description,
    long_description_content_type='text/x-rst',
    author='LinkedJSON contributors',
    packages=['linkedjson', 'linkedjson.documentloader'],
    package_dir={'': 'lib'},
    license='BSD 3-Clause license',
    python_requires='>=3.8',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Internet',
        'Topic :: Software Development :: Libraries',
    ],
    install_requires=[],
    extras_require={
        'requests': ['requests'],
        'aiohttp': ['aiohttp'],
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'linkedjson=linkedjson.cli:main',
        ],
    },
)
