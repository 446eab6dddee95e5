# coding: utf8


class HondanaError(Exception):
    pass


class MangaError(HondanaError):
    pass


class MangaNotFoundError(MangaError):
    pass


class PagesNotFoundError(MangaError):
    pass


class UnknownDomainError(HondanaError):
    pass


class AuthenticationError(HondanaError):
    pass
