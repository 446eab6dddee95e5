# coding: utf8
"""Utilities for hondana."""

import collections
import json
import logging
import os
import pathlib
import re
from typing import Any, Optional, Union
from urllib.parse import quote, unquote

import bs4  # type: ignore
import fake_useragent as ua  # type: ignore
import requests

_log = logging.getLogger("hondana")

BS4_PARSER = "html5lib"  # if you want, change to lxml for faster parsing
USER_AGENT = ua.UserAgent()

# the only entities that show up in directory listings.
ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&apos;": "'",
    "&#39;": "'",
    "&nbsp;": " ",
}
RE_ENTITY = re.compile("|".join(re.escape(e) for e in ENTITIES))

EXTENSIONS = (
    ".cbz",
    ".zip",
    ".cbr",
    ".rar",
    ".7z",
    ".pdf",
    ".epub",
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".xml",
    ".txt",
)

# only ASCII letters are case-folded in filenames.
ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)

# all config files are stored here.
ROOT = pathlib.Path.home() / ".local" / "share" / "hondana"


def plural(n_items, noun):
    return f"{n_items} {noun}{'s' if n_items != 1 else ''}"


def ascii_lower(string: str) -> str:
    """Lowercase ASCII letters only, other characters are kept as-is."""
    return string.translate(ASCII_LOWER)


def _is_valid_char(char):
    return char.isalnum()


def sanitize(name: str) -> str:
    """Sanitise a name so it can be used as a tag or filename.
    Args:
        name: The name to sanitise.
    Returns:
        The sanitised name as a string.
    """

    sanitised = "".join([c.lower() if _is_valid_char(c) else "_" for c in name])

    # remove duplicate underscores
    return re.sub("_{2,}", "_", sanitised).strip("_")


def url_decode(string: str) -> str:
    """Decode percent escapes (%XX) in a string.

    Invalid or truncated escapes are kept as-is, and '+' is not treated as a space.
    """
    if "%" not in string:
        return string

    return unquote(string, errors="replace")


def url_encode(string: str) -> str:
    """Percent-encode a string, keeping only unreserved characters (and !*') as-is."""
    return quote(string, safe="!~*'")


def unescape(string: str) -> str:
    """Decode the HTML entities in ENTITIES. Other entities are left alone."""
    return RE_ENTITY.sub(lambda m: ENTITIES[m.group(0)], string)


def strip_extension(name: str) -> str:
    """Remove a known archive/image extension from the end of a filename.

    Args:
        name: The filename.

    Returns:
        The filename without the extension (case preserved), or the filename unchanged
        if it does not end with a known extension.
    """

    lowered = ascii_lower(name)

    for ext in EXTENSIONS:
        if lowered.endswith(ext):
            return name[: -len(ext)]

    return name


def normalize(name: str) -> str:
    """Normalize a filename or title for comparison.

    The name is percent-decoded, HTML-unescaped, stripped of its extension,
    lowercased (ASCII letters only) and trimmed.
    """
    return ascii_lower(strip_extension(unescape(url_decode(name)).strip())).strip()


def soup(
    url: str, *args, session: Optional[requests.Session] = None, **kwargs
) -> bs4.BeautifulSoup:
    """Get a url as a BeautifulSoup.

    Args:
        url: The url to get a soup from.
        *args: Passed to session.get().
        session: The session to use to download the soup.
            Defaults to None.
        **kwargs: Passed to session.get().

    Raises:
        requests.HTTPError, if the server responded with an error status.
    """

    if session is None:
        session = requests.Session()

    response = session.get(url, *args, **kwargs)
    response.raise_for_status()

    return bs4.BeautifulSoup(response.text, BS4_PARSER)


class UserSession(requests.Session):
    """requests.Session with randomised user agent in the headers."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.headers.update({"User-Agent": USER_AGENT.random})


class PersistentDict(collections.UserDict):
    """A UserDict that can be loaded and dumped to disk persistently.
    (As long as the dictionary contents can be serialised to JSON.)

    Usage:

    ```python
    from hondana.utils import PersistentDict

    with PersistentDict("settings.json") as d:
        d["foo"] = "bar"

    # 'settings.json' now looks like this:
    # {
    #   "foo": "bar"
    # }
    ```

    It can also be used without a context manager.
    Just remember to close() it, or any changes won't be written to disk!
    """

    def __init__(self, path: Union[str, pathlib.Path], *args, **kwargs):
        super().__init__(*args, **kwargs)

        if isinstance(path, str):
            path = pathlib.Path(path)

        self.path = path

        try:
            with self.path.open(encoding="utf8") as f:
                self.data.update(json.load(f))

        except FileNotFoundError:
            pass

    def close(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)

        with self.path.open("w", encoding="utf8") as f:
            json.dump(self.data, f, indent=2)

    def __enter__(self):
        return self

    def __exit__(self, t, v, tb):
        self.close()


class Config(PersistentDict):
    """User configuration.

    Keys that are not in the config file are looked up in the environment as
    HONDANA_<KEY> (uppercased, with dots replaced by underscores),
    i.e 'madokami.username' -> HONDANA_MADOKAMI_USERNAME.
    """

    CONFIG = "config.json"
    DEFAULTS = {"lang": "en", "year_threshold": 1900}

    def __init__(self, path: Optional[pathlib.Path] = None):
        if path is None:
            path = ROOT / self.CONFIG

        super().__init__(path, **self.DEFAULTS)

    @staticmethod
    def envvar(key: str) -> str:
        return f"HONDANA_{key.upper().replace('.', '_')}"

    def __missing__(self, key):
        try:
            value = os.environ[self.envvar(key)]
        except KeyError:
            raise KeyError(key) from None

        _log.debug("config: %s loaded from environment", key)
        return value

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default


CONFIG = Config()
