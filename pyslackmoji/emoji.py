# -----------------------------------------------------------------------------
# emoji definitions and on-disk naming
# -----------------------------------------------------------------------------
from __future__ import annotations

import abc
import os.path
import posixpath
from typing import NamedTuple
from urllib.parse import urlsplit

ALIAS_MARKER = 'alias:'
DEFAULT_EXTENSION = '.png'


def extension_of(url: str, default: str = DEFAULT_EXTENSION) -> str:
    # only the path counts, "?v=2" or "#frag" must not leak into the filename
    ext = posixpath.splitext(urlsplit(url).path)[1]
    return ext or default


def emoji_filepath(target_dir: str, name: str, url: str) -> str:
    """
    Location of the image file for emoji ``name`` whose bytes come from ``url``.

    Aliases have no URL of their own and are passed the URL of the emoji they
    resolve to, so the alias file gets the same extension as its target.
    """
    return os.path.join(target_dir, name + extension_of(url))


class DownloadTask(NamedTuple):
    name: str
    url: str


# noinspection PyMethodMayBeStatic
class EmojiFactory:
    def from_url(self, name: str, target: str) -> AbstractEmoji:
        if target.startswith(ALIAS_MARKER):
            return EmojiAlias(name, target[len(ALIAS_MARKER):])
        return EmojiRegular(name, target)


class AbstractEmoji(metaclass=abc.ABCMeta):
    def __init__(self, name: str):
        self._name = name

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self) -> int:
        return hash((type(self), self._key()))

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}{self._key()!r}'

    @abc.abstractmethod
    def _key(self) -> tuple: ...

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_regular(self) -> bool:
        return isinstance(self, EmojiRegular)

    @property
    def is_alias(self) -> bool:
        return isinstance(self, EmojiAlias)


class EmojiRegular(AbstractEmoji):
    def __init__(self, name: str, url: str):
        super().__init__(name)
        self._url: str = url

    def _key(self) -> tuple:
        return self._name, self._url

    @property
    def url(self) -> str:
        return self._url

    def filepath(self, target_dir: str) -> str:
        return emoji_filepath(target_dir, self._name, self._url)

    def as_task(self) -> DownloadTask:
        return DownloadTask(self._name, self._url)


class EmojiAlias(AbstractEmoji):
    def __init__(self, name: str, alias_for_name: str):
        super().__init__(name)
        self._alias_for_name: str = alias_for_name

    def _key(self) -> tuple:
        return self._name, self._alias_for_name

    @property
    def alias_for_name(self) -> str:
        return self._alias_for_name
