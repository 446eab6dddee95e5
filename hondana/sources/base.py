# coding: utf8
"""Abstract base classes for implementing a source."""

from __future__ import annotations

import abc
import logging
import re
from typing import List, Type

import bs4  # type: ignore
import requests

from .. import models, utils
from ..exceptions import AuthenticationError, MangaNotFoundError, UnknownDomainError

_log = logging.getLogger("hondana")


class Parser(abc.ABC):

    # This allows subclasses to be registered.
    registered: List[Type[Parser]] = []

    def __init__(self):
        self.session = utils.UserSession()

    def create(self, url: str) -> models.Manga:
        """Create a new manga.

        Args:
            url: The manga url.

        Returns:
            A Manga object.
        """

        metadata = self.metadata(url)
        return models.Manga(metadata)

    @classmethod
    def by_url(cls, url: str) -> Parser:
        """Get the appropiate parser subclass for the domain in url.

        Args:
            url: The url to get the subclass for.

        Returns:
            The subclass instance that can be used to parse the url.

        Raises:
            UnknownDomainError, if there is no registered subclass for the url domain.
        """

        for subclass in cls.registered:
            if subclass.domain.search(url):  # type: ignore
                return subclass()

        raise UnknownDomainError(f"no source found for url '{url}'")

    @property
    @abc.abstractmethod
    def domain(self) -> str:
        pass

    @abc.abstractmethod
    def metadata(self, url: str) -> models.Metadata:
        """Parse metadata for a manga url.

        Args:
            url: The manga url.

        Returns:
            The Metadata object.
        """

    @abc.abstractmethod
    def add_chapters(self, manga: models.Manga):
        """Add chapters to the manga.

        This method should add every chapter in the manga as a Chapter object:

        ```python
        def add_chapters(self, manga):
            for ... in ...:
                # do your parsing here
                manga.add(Chapter(...))
        ```

        Only the 'id' and 'url' args are required when creating a Chapter.

        Args:
            manga: The manga object.
        """

    @abc.abstractmethod
    def add_pages(self, chapter: models.Chapter):
        """Add pages to the chapter as a list of urls.
        The pages must be in ascending order.

        Args:
            chapter: The chapter object (already added to the manga).
        """

    def soup(self, url: str) -> bs4.BeautifulSoup:
        """Get a soup from a url.

        Args:
            url: The url to get a soup from.

        Returns:
            The soup of the url.

        Raises:
            AuthenticationError, if the server needs (valid) credentials.
            MangaNotFoundError, if the page does not exist.
        """

        try:
            return utils.soup(url, session=self.session)

        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None

            if status == 401:
                raise AuthenticationError(f"{url} needs a username and password") from e
            elif status == 404:
                raise MangaNotFoundError(f"{url} does not exist") from e

            raise

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)

        cls.domain = re.compile(cls.domain)
        cls.registered.append(cls)
        _log.debug("registered source for %s", cls.domain.pattern)
