# coding: utf8
"""Chapter and volume numbers from archive filenames.

File hosts like madokami list a series as a folder of archives, and the only
place the chapter/volume number lives is the filename:

    Chainsaw Man v01 (2020) (Digital) (LuCaZ).cbz    -> volume 1
    Hunter x Hunter 400 (2022) (Digital) (LuCaZ).cbz -> chapter 400
    Some Title - c001-007.cbz                        -> chapters 1 to 7

Usage:

```python
from hondana import filename

info = filename.parse("Berserk v02 - 15.cbz", "Berserk")
info.volume  # 2.0
info.chapter  # 15.0
```

Some series have numerals in their title ('Mob Psycho 100'). These are listed in
the bundled exclusions.txt, and for them only explicit markers are trusted.
"""

from __future__ import annotations

import functools
import logging
import math
import pathlib
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from . import utils

_log = logging.getLogger("hondana")

EXCLUSIONS_PATH = pathlib.Path(__file__).parent / "exclusions.txt"

# caller-facing value for 'not determined'.
UNKNOWN = -1.0
TOLERANCE = 0.001

# four-digit numbers in [YEAR_THRESHOLD, YEAR_LIMIT) are years, not chapters.
YEAR_THRESHOLD = 1900
YEAR_LIMIT = 2100

# ranges spanning more chapters than this are not expanded.
MAX_RANGE = 1000

DELIMITER = " - "
ANNOTATION = " ("

RE_VOLUME_PAREN = re.compile(r"\(v([0-9]+)")
RE_VOLUME = re.compile(r" v([0-9]+)")
RE_VOLUME_SUFFIX = re.compile(r"(?:^|\s)v([0-9]+)$")

# numbers are ASCII digits only, numerals from other scripts are plain text.
DIGITS = "0123456789"
_NUMBER = r"[0-9]+(?:\.[0-9]+)?"
RE_LEADING = re.compile(_NUMBER)
RE_RANGE = re.compile(rf"c\s*({_NUMBER})-({_NUMBER})")


@dataclass(frozen=True)
class ChapterInfo:
    """Chapter/volume numbers parsed from a filename.

    Args:
        chapter: The chapter number, or 0.0 if not found.
        volume: The volume number, or 0.0 if not found.
        chapter_range: A (start, end) tuple if the file holds several chapters.
            When set, chapter is the start of the range.
    """

    chapter: float = 0.0
    volume: float = 0.0
    chapter_range: Optional[Tuple[float, float]] = None

    def __bool__(self):
        return bool(self.chapter or self.volume or self.chapter_range)

    def chapters(self) -> List[float]:
        """Get the chapter numbers this file holds.

        Returns:
            One number per integer in the range (inclusive) if there is a range,
            otherwise the chapter alone, or an empty list if the chapter is unknown.
        """

        if self.chapter_range is not None:
            start, end = self.chapter_range
            return [float(n) for n in range(math.ceil(start), math.floor(end) + 1)]

        if self.chapter:
            return [self.chapter]

        return []


def as_known(number: float) -> float:
    """Map the 0.0 sentinel (and anything not positive) to UNKNOWN."""
    return number if number > 0 else UNKNOWN


def _to_float(digits: str) -> Optional[float]:
    try:
        return float(digits)
    except ValueError:
        return None


def _same(a: Optional[float], b: float) -> bool:
    return a is not None and abs(a - b) < TOLERANCE


def trailing_number(text: str) -> Optional[str]:
    """Get the number (digits with at most one '.') at the end of text, if any.

    The text is scanned once from the end, so long digit runs stay cheap.
    """

    run = text[len(text.rstrip(DIGITS + ".")) :]
    head, dot, tail = run.rpartition(".")

    if not dot:
        return run or None

    whole = head[len(head.rstrip(DIGITS)) :]
    if whole:
        return f"{whole}.{tail}"

    # '1..2' or '.5': only the digits after the last '.' count.
    return tail or None


class Exclusions:
    """A read-only set of series titles that contain numerals.

    Titles are compared trimmed and case-insensitively, and must match exactly.

    Args:
        titles: The titles to exclude. Blank titles are ignored.
    """

    def __init__(self, titles: Iterable[str] = ()):
        self._titles = frozenset(
            utils.ascii_lower(t.strip()) for t in titles if t and not t.isspace()
        )

    @classmethod
    def load(cls, path: Union[str, pathlib.Path]) -> Exclusions:
        """Load an exclusion list from a text file (one title per line)."""
        if isinstance(path, str):
            path = pathlib.Path(path)

        with path.open(encoding="utf8") as f:
            exclusions = cls(f.read().splitlines())

        _log.debug("exclusions: loaded %s from %s", len(exclusions), path)

        return exclusions

    @staticmethod
    @functools.lru_cache(maxsize=None)
    def bundled() -> Exclusions:
        """The exclusion list shipped with hondana (loaded once)."""
        return Exclusions.load(EXCLUSIONS_PATH)

    def is_excluded(self, series_title: str) -> bool:
        return utils.ascii_lower(series_title.strip()) in self._titles

    def __contains__(self, series_title):
        return self.is_excluded(series_title)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._titles))

    def __len__(self):
        return len(self._titles)


class FilenameParser:
    """Parse chapter/volume numbers out of filenames.

    Parsing goes through these steps in order, and the first one to find a
    chapter wins:

    1. A filename that is just the series title (ignoring annotations like
       '(2020) (Digital)') has no numbers.
    2. Volume markers, '(v15)' or ' v15', are picked up but parsing continues.
    3. The chapter section (after the last ' - ', or the whole name) is checked for
       a 'c' prefix ('c042', or a range 'c001-007' after ' - '), then for a
       trailing number.
    4. If the name starts with the series title, the number right after it is used.

    For excluded series, step 3 does not look at bare trailing numbers.

    Args:
        exclusions: The exclusion list to use.
            Defaults to the bundled list.
        year_threshold: Four-digit numbers from this value up to YEAR_LIMIT are
            assumed to be years and are not used as chapters.
            None disables the check. Defaults to YEAR_THRESHOLD.
    """

    def __init__(
        self,
        exclusions: Optional[Exclusions] = None,
        year_threshold: Optional[int] = YEAR_THRESHOLD,
    ):
        if exclusions is None:
            exclusions = Exclusions.bundled()

        self.exclusions = exclusions
        self.year_threshold = year_threshold

    def is_year(self, digits: str) -> bool:
        if self.year_threshold is None or len(digits) != 4 or not digits.isdigit():
            return False

        return self.year_threshold <= int(digits) < YEAR_LIMIT

    def _number(self, digits: Optional[str]) -> Optional[float]:
        if digits is None or self.is_year(digits):
            return None

        return _to_float(digits)

    def parse(self, filename: str, series_title: str) -> ChapterInfo:
        """Parse a filename.

        Args:
            filename: The filename (may be percent-encoded and have an extension).
            series_title: The title of the series the file belongs to.

        Returns:
            The ChapterInfo. If nothing could be found, all fields are left at their defaults.
        """

        info = self._parse(utils.normalize(filename), utils.normalize(series_title))
        _log.debug("filename: %r -> %s", filename, info)

        return info

    def _parse(self, name: str, title: str) -> ChapterInfo:
        truncated = name.partition(ANNOTATION)[0].strip()

        if title in (name, truncated):
            return ChapterInfo()

        excluded = self.exclusions.is_excluded(title)
        prefixed = bool(title) and truncated.startswith(title)

        # markers are only searched after the title for excluded series,
        # so its numerals are never mistaken for them.
        if excluded and prefixed:
            full = name[len(title) :]
            subject = truncated[len(title) :]
        else:
            full = name
            subject = truncated

        volume = self._volume(full, subject)

        delimited = DELIMITER in subject
        if delimited:
            section = subject.rpartition(DELIMITER)[-1].strip()
        else:
            section = subject.strip()

        if volume:
            suffix = RE_VOLUME_SUFFIX.search(section)
            if suffix is not None and _same(_to_float(suffix.group(1)), volume):
                section = section[: suffix.start()].strip()

        if section.startswith("c"):
            info = self._explicit(section, volume, delimited)
            if info is not None:
                return info

        if not excluded:
            chapter = self._number(trailing_number(section))
            if chapter is not None:
                if volume and not delimited and _same(chapter, volume):
                    # 'Title v01' is a volume, not chapter 1 of volume 1.
                    return ChapterInfo(volume=volume)

                return ChapterInfo(chapter=chapter, volume=volume)

        if prefixed and DELIMITER not in truncated:
            remaining = truncated[len(title) :]

            # the number must be separated from the title ('Title 5', not 'Title5').
            if remaining and not remaining[0].isalnum():
                match = RE_LEADING.match(remaining.strip())
                chapter = self._number(match.group() if match else None)
                if chapter is not None:
                    return ChapterInfo(chapter=chapter, volume=volume)

        return ChapterInfo(volume=volume)

    def _volume(self, full: str, truncated: str) -> float:
        # parenthesised markers are annotations, so look for them before truncation.
        for pattern, text in ((RE_VOLUME_PAREN, full), (RE_VOLUME, truncated)):
            match = pattern.search(text)
            if match is not None:
                volume = _to_float(match.group(1))
                if volume is not None:
                    return volume

        return 0.0

    def _explicit(
        self, section: str, volume: float, delimited: bool
    ) -> Optional[ChapterInfo]:
        if delimited:
            match = RE_RANGE.match(section)
            if match is not None:
                start = _to_float(match.group(1))
                end = _to_float(match.group(2))

                # reversed or oversized ranges fall back to the start alone.
                if (
                    start is not None
                    and end is not None
                    and 0 <= end - start <= MAX_RANGE
                ):
                    return ChapterInfo(
                        chapter=start, volume=volume, chapter_range=(start, end)
                    )

        match = RE_LEADING.match(section[1:].lstrip())
        if match is not None:
            chapter = _to_float(match.group())
            if chapter is not None:
                return ChapterInfo(chapter=chapter, volume=volume)

        return None


@functools.lru_cache(maxsize=None)
def _default_parser() -> FilenameParser:
    return FilenameParser()


def parse(filename: str, series_title: str) -> ChapterInfo:
    """Parse a filename with the bundled exclusion list.
    See FilenameParser.parse() for details.
    """
    return _default_parser().parse(filename, series_title)
