# coding: utf8
"""Chapter/volume parsing for manga archive filenames, and the sources that need it."""

from .__version__ import __version__  # noqa: F401

from .filename import ChapterInfo, Exclusions, FilenameParser, parse  # noqa: F401
from .utils import normalize  # noqa: F401
