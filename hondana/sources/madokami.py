# coding: utf8
"""Source for manga.madokami.al, a file host for manga archives.

Madokami needs an account. Set your credentials in the config file under
'madokami.username' and 'madokami.password', or in the environment as
HONDANA_MADOKAMI_USERNAME and HONDANA_MADOKAMI_PASSWORD.

Chapters are archives in a directory listing, so chapter/volume numbers are
parsed out of their filenames (see hondana.filename).
"""

import datetime
import json
import logging
from typing import List, Optional

from .. import filename, models, utils
from ..exceptions import PagesNotFoundError
from . import base

_log = logging.getLogger("hondana")

BASE_URL = "https://manga.madokami.al"
DATE_FORMAT = "%Y-%m-%d %H:%M"

# folders of these are alternate editions, not the series itself.
UNWANTED = ("VIZBIG",)

SELECTOR_RECENT = "table.mobile-files-table tbody tr td:nth-child(1) a:nth-child(1)"
SELECTOR_SEARCH = "div.container table tbody tr td:nth-child(1) a:nth-child(1)"


def title_from_path(path: str) -> str:
    """Get the manga title from a path.

    The last path segment that is not a '!' subfolder (i.e '!Vinland Saga [danke-Empire]')
    or an alternate edition is used.

    Args:
        path: The url path, i.e '/Manga/V/VI/VINL/Vinland%20Saga'.

    Returns:
        The (decoded) title, or an empty string if there is none.
    """

    for part in reversed(path.strip("/").split("/")):
        if not part:
            continue

        decoded = utils.url_decode(part)

        if not decoded.startswith("!") and not any(u in decoded for u in UNWANTED):
            return decoded

    return ""


def path_from_url(url: str) -> str:
    if url.startswith(BASE_URL):
        return url[len(BASE_URL) :]

    return url


def series_url(url: str) -> str:
    """Get the series url for a url.

    Reader urls ('/reader/Manga/.../file.cbz') point at a single file, so the folder
    the file is in is used. Other urls are returned unchanged.
    """

    path = path_from_url(url)
    if not path.startswith("/reader/"):
        return url

    return BASE_URL + path[len("/reader") :].rpartition("/")[0]


def _parse_date(text: str) -> Optional[datetime.datetime]:
    try:
        return datetime.datetime.strptime(text.strip(), DATE_FORMAT)
    except ValueError:
        return None


class Parser(base.Parser):

    domain = r"manga\.madokami\.al"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        username = utils.CONFIG.get("madokami.username", "")
        password = utils.CONFIG.get("madokami.password", "")

        if username and password:
            self.session.auth = (username, password)
        else:
            _log.warning("madokami: no credentials set, requests will probably fail")

        threshold = utils.CONFIG.get("year_threshold", filename.YEAR_THRESHOLD)
        self.filenames = filename.FilenameParser(
            year_threshold=int(threshold or 0) or None
        )

    def search(self, query: str = "") -> List[models.Metadata]:
        """Search for manga by title.

        Args:
            query: The title to search for.
                If empty, the recently updated manga are returned instead.

        Returns:
            A list of Metadata objects (only the url and title are filled in).
        """

        if query:
            soup = self.soup(f"{BASE_URL}/search?q={utils.url_encode(query)}")
            selector = SELECTOR_SEARCH
        else:
            soup = self.soup(f"{BASE_URL}/recent")
            selector = SELECTOR_RECENT

        results = []

        for tag in soup.select(selector):
            path = tag.get("href", "")
            if not path or path.endswith("/"):
                continue

            results.append(
                models.Metadata(url=f"{BASE_URL}{path}", title=title_from_path(path))
            )

        return results

    def metadata(self, url):
        url = series_url(url)
        soup = self.soup(url)

        cover = soup.select_one('div.manga-info img[itemprop="image"]')
        status = soup.select_one("span.scanstatus")

        return models.Metadata(
            url=url,
            title=title_from_path(path_from_url(url)),
            authors=[a.text.strip() for a in soup.select('a[itemprop="author"]')],
            genres=[a.text for a in soup.select("div.genres a.tag")],
            cover=cover["src"] if cover is not None else "",
            completed=status is not None and status.text.strip() == "Yes",
        )

    def add_chapters(self, manga):
        url = series_url(manga.meta.url)
        soup = self.soup(url)
        title = manga.meta.title or title_from_path(path_from_url(url))

        files = []

        for row in soup.select("table#index-table > tbody > tr"):
            link = row.select_one("td:nth-child(1) a")
            if link is None:
                continue

            name = link.text.strip()

            # skip folders and '!' subfolders
            if not name or name.endswith("/") or name.startswith("!"):
                continue

            reader = row.select_one("td:nth-child(6) a")
            if reader is None or "/reader" not in reader.get("href", ""):
                _log.debug("madokami: no reader link for %s", name)
                continue

            path = "/reader" + reader["href"].rpartition("/reader")[-1]

            date = row.select_one("td:nth-child(3)")
            info = self.filenames.parse(name, title)

            files.append(
                models.Chapter.from_info(
                    info,
                    url=f"{BASE_URL}{path}",
                    title=utils.url_decode(name),
                    updated=_parse_date(date.text) if date is not None else None,
                )
            )

        # the listing is newest first
        for chapters in reversed(files):
            for chapter in chapters:
                manga.add(chapter)

        _log.info(
            "madokami: [%s] found %s", title, utils.plural(len(manga.chapters), "chapter")
        )

    def add_pages(self, chapter):
        soup = self.soup(chapter.url)

        reader = soup.select_one("div#reader")
        if reader is None:
            raise PagesNotFoundError(f"chapter {chapter.id} does not have a reader")

        path = reader.get("data-path", "")

        try:
            files = json.loads(reader.get("data-files", "[]"))
        except ValueError:
            _log.warning("madokami: invalid file list on %s", chapter.url)
            files = []

        chapter.pages = [
            f"{BASE_URL}/reader/image?path={utils.url_encode(path)}&file={utils.url_encode(f)}"
            for f in files
            if isinstance(f, str)
        ]
