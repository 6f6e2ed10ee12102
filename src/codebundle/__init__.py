"""
codebundle - concatenate a directory's source files into one bundle.

This package scans the working directory, keeps the files of the requested
languages, and writes them into a single text file with optional author and
source annotations. It can also record a set of ``bundle`` options in a
response file for later reuse via ``@file``.
"""

__version__ = "0.1.0"
__author__ = "Code Bundle Team"
