# coding: utf8
"""Model classes."""

from __future__ import annotations

import collections
import datetime
import hashlib
import logging
from dataclasses import dataclass, field
from typing import cast, Any, Dict, List, Optional

import natsort  # type: ignore

from . import utils
from .filename import UNKNOWN, ChapterInfo, as_known


# cast because mypy keeps complaining about generic types
def _list():
    return cast(List[Any], field(default_factory=list))


def _dict():
    return cast(Dict[str, Any], field(default_factory=dict))


_log = logging.getLogger("hondana")


def format_number(number: float) -> str:
    """Format a chapter/volume number without a trailing '.0' (i.e 5.0 -> '5', 10.5 -> '10.5')."""
    if number == UNKNOWN:
        return ""

    return str(int(number)) if number.is_integer() else str(number)


@dataclass
class Metadata:
    """Metadata for a manga.

    Args:
        url: The url to the manga title page.
        title: The manga name in English (romanized/translated).
        alt_titles: A list of alternative names for the manga.
        desc: The sypnosis (human-readable info) of the manga.
        cover: The url to the manga cover (must be an image).
        authors: A list of author names.
        genres: A list of catagories the manga belongs to.
            Note that the catagories are sanitised using utils.sanitize() on initalisation.
        completed: Whether or not the manga has finished publishing/scanlation.
        other: Miscellanious map of keys to values.
            May be used by parsers to store parser-specific info (keep state).

    Attributes:
        hash: A SHA-256 checksum of the manga url.
    """

    url: str
    title: str = ""

    alt_titles: List[str] = _list()

    desc: str = ""
    cover: str = ""

    authors: List[str] = _list()
    genres: List[str] = _list()

    completed: bool = False

    hash: str = ""

    other: Dict[str, Any] = _dict()

    def __post_init__(self):
        if self.genres:
            self.genres = [utils.sanitize(g.strip()) for g in self.genres]

        self.desc = self.desc.strip().replace("\r\n", "\n")

        if not self.hash:
            self.hash = hashlib.sha256(self.url.encode()).hexdigest()


@dataclass
class Chapter:
    """A manga chapter.

    Args:
        id: The chapter id as a string (i.e 1, 2, 10.5, v3).
        url: The chapter url.
        title: The chapter name.
        number: The chapter number, or UNKNOWN.
        volume: The volume the chapter belongs to, or UNKNOWN.
        lang: The ISO 639-1 language code of the chapter.
        updated: When the chapter was last updated, if known.
        pages: A list of image urls to the chapter pages.
        other: Miscellanious map of keys to values.
    """

    id: str
    url: str
    title: str = ""
    number: float = UNKNOWN
    volume: float = UNKNOWN
    lang: str = "en"
    updated: Optional[datetime.datetime] = None

    pages: List[str] = _list()

    other: Dict[str, Any] = _dict()

    @classmethod
    def from_info(cls, info: ChapterInfo, url: str, title: str, **kwargs) -> List[Chapter]:
        """Create chapters from parsed filename info.

        A chapter range becomes one chapter per number (titled 'Chapter N').
        Otherwise a single chapter is created, using the chapter number as the id if known,
        then the volume ('v3'), and finally the title.

        Args:
            info: The parsed filename info.
            url: The url of the file.
            title: The title to use for a single chapter.
            **kwargs: Passed to the Chapter constructor.

        Returns:
            A list of chapters.
        """

        volume = as_known(info.volume)
        numbers = info.chapters()

        # a range between two integers (10.2-10.8) is kept as one chapter.
        if info.chapter_range is not None and numbers:
            return [
                cls(
                    id=format_number(number),
                    url=url,
                    title=f"Chapter {format_number(number)}",
                    number=number,
                    volume=volume,
                    **kwargs,
                )
                for number in numbers
            ]

        number = as_known(info.chapter)

        if number != UNKNOWN:
            cid = format_number(number)
        elif volume != UNKNOWN:
            cid = f"v{format_number(volume)}"
        else:
            cid = title

        return [
            cls(id=cid, url=url, title=title, number=number, volume=volume, **kwargs)
        ]


class Manga:
    """A manga.

    Selecting chapters in this manga can be done by slicing:

    manga[start_cid:end_cid:lang]  # returns a list of Chapter objects

    where start_cid is the first chapter of the selection, and end_cid is the last chapter of the selection.
    lang is the ISO 639-1 language code of the chapters to select. i.e:

    # Select chapters 1 to 5 (inclusive of chapter 5).
    chapters = manga["1":"5":"en"]

    Args:
        meta: The manga metadata.
        chapters: The manga chapters.

    Attributes:
        chapters: A map of chapter ids to a map of ISO 639-1 language codes to Chapter objects.

        info: A dictionary which has the following keys:

            chapters (int)
                The total number of chapters across all languages.

            volumes (set)
                The (known) volumes that this manga has across all languages.

            langs (set)
                ISO 639-1 language codes that this manga was translated to.
    """

    def __init__(
        self,
        metadata: Metadata,
        chapters: Optional[dict] = None,
    ):
        self.meta = metadata

        self.chapters: Dict[str, Dict[str, Chapter]]

        self.chapters = collections.defaultdict(dict)

        if chapters is not None:
            self.chapters.update(chapters)

    @property
    def info(self):
        info = {
            "chapters": 0,
            "volumes": set(),
            "langs": set(),
        }

        for cid, langs in self.chapters.items():
            info["langs"].update(langs.keys())

            for chapter in langs.values():
                info["chapters"] += 1

                if chapter.volume != UNKNOWN:
                    info["volumes"].add(chapter.volume)

        return info

    def add(self, chapter: Chapter):
        """Add a chapter to this manga.
        The chapter will not be added if it already exists (has the same id and lang as the existing one).

        Args:
            chapter: The chapter to add.
        """

        if not self.exists(chapter):
            self.chapters[chapter.id][chapter.lang] = chapter
        else:
            _log.debug("manga: chapter %s (%s) already exists", chapter.id, chapter.lang)

    def remove(self, cid: str, lang: str = "en") -> Chapter:
        """Remove a chapter from this manga.

        Args:
            cid: The chapter id to remove.
            lang: The chapter language to remove.
                Defaults to 'en'.

        Returns:
            The removed chapter.
        """

        chapter = self.chapters[cid].pop(lang)

        if not self.chapters[cid]:
            del self.chapters[cid]

        return chapter

    def exists(self, chapter: Chapter) -> bool:
        """Check whether a chapter already exists in this manga.

        Args:
            chapter: The chapter object.

        Returns:
            True if it exists, otherwise False.
        """

        langs = self.chapters.get(chapter.id, {})

        return bool(langs) and chapter.lang in langs

    def summary(self, lang: str = "en") -> str:
        """Create a Markdown table summary of all volumes and chapters in this manga.

        Args:
            lang: The language to summerise for.

        Returns:
            The Markdown table as a string.
        """

        table = ["| volume | chapter | title ", "|--------|---------|-------"]

        for cid, langs in natsort.natsorted(self.chapters.items()):

            chapter = langs.get(lang)

            if chapter is None:
                # chapter does not have the language.
                continue

            table.append(
                "| {:<6} | {:<7} | [{}]({})".format(
                    format_number(chapter.volume) or "(empty)",
                    format_number(chapter.number) or "(empty)",
                    chapter.title or "(empty)",
                    chapter.url,
                )
            )

        return "\n".join(table)

    def select(self, cids: str, lang: str = "en") -> List[Chapter]:
        """Select chapters from this manga.

        Args:
            cids: A list of chapter ids as a string, delimited by a comma.
                Ranges are also valid (1-5).
                i.e '1,3,5,8-10' (select chapters 1,3,5 and 8-10 inclusive of 10).
            lang: The language of the chapters.
                Note that if a chapter does not have the language requested, it will be skipped.

        Returns:
            A list of Chapter objects.
        """

        chapters = []

        for cid in cids.split(","):
            cid = cid.strip()

            if "-" in cid:
                start, _, end = cid.partition("-")
                chapters.extend(self[start:end:lang])  # type: ignore

            else:
                chapter = self.chapters.get(cid, {}).get(lang)

                if chapter is not None:
                    chapters.append(chapter)

        return chapters

    def parsed(self) -> bool:
        """Check whether this manga has been parsed (has at least one chapter)."""
        return len(self.chapters) >= 1

    def __getitem__(self, key):
        if isinstance(key, slice):
            sorted_chapters = natsort.natsorted(self.chapters.keys())

            try:
                start = sorted_chapters.index(key.start)
                if key.stop is not None:
                    # include the last chapter also
                    stop = sorted_chapters.index(key.stop, start) + 1
                else:
                    stop = len(sorted_chapters)
            except ValueError:
                return []

            lang = "en" if key.step is None else key.step

            return [
                self.chapters[c][lang]
                for c in sorted_chapters[start:stop]
                if lang in self.chapters[c]
            ]

        else:
            return self.chapters[key]
