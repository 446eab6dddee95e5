# coding: utf8
"""This directory contains sources for several websites.

Sources are regular modules that have a `Parser` class, a subclass of `hondana.sources.base.Parser`.

`Parser`s must implement the methods `metadata`, `add_chapters` and `add_pages`.

It must also have a class attribute `domain`, which is a uncompiled regex pattern of the urls the parser can parse.
At minimum it should be the base of the url (**without** http(s):// or www. in front):

```python
domain = r"my-manga-host\.com"
```

When subclassed, the new parser will automatically be registered (as long as it runs, i.e import it).
The parser will then be delegated to based on the domain.

Sources that list archives instead of chapters (i.e madokami) should get chapter numbers with
`hondana.filename.FilenameParser` and create chapters with `hondana.models.Chapter.from_info`.

To use a source:

from hondana.sources import Parser

parser = Parser.by_url(manga_url)
manga = parser.create(manga_url)
parser.add_chapters(manga)
"""

from .base import Parser  # noqa: F401

# import to register default sources
from . import madokami  # noqa: F401
