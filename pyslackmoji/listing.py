# -----------------------------------------------------------------------------
# emoji.list retrieval and parsing
# -----------------------------------------------------------------------------
from __future__ import annotations

import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Union, cast

import requests

from pyslackmoji.core.logger import Logger
from pyslackmoji.emoji import AbstractEmoji, EmojiAlias, EmojiFactory, EmojiRegular
from pyslackmoji.errors import ApiError, ListingDecodeError, ListingError, ListingNetworkError

API_URL = 'https://slack.com/api/emoji.list'


class EmojiListing:
    """
    Immutable ``name -> target`` mapping from one ``emoji.list`` call.

    Every entry is classified exactly once, either as an :class:`EmojiAlias`
    (target starts with ``alias:``) or as an :class:`EmojiRegular` (target is
    an image URL).
    """

    def __init__(self, entries: Mapping[str, str]):
        self._entries: Mapping[str, str] = MappingProxyType(dict(entries))
        factory = EmojiFactory()
        self._emoji_map: Dict[str, AbstractEmoji] = {
            name: factory.from_url(name, target) for name, target in self._entries.items()
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    @property
    def entries(self) -> Mapping[str, str]:
        return self._entries

    def get_by_name(self, name: str) -> AbstractEmoji:
        if name not in self._emoji_map:
            raise KeyError(f'Emoji with name "{name}" not defined')
        return self._emoji_map[name]

    def regular(self) -> List[EmojiRegular]:
        return [cast(EmojiRegular, e) for e in self._sorted() if e.is_regular]

    def aliases(self) -> List[EmojiAlias]:
        return [cast(EmojiAlias, e) for e in self._sorted() if e.is_alias]

    def resolve(self, alias: EmojiAlias) -> EmojiRegular|None:
        # aliases may point to other aliases; None for dangling names
        # (usually stock emoji like "thumbsup") and for cycles
        seen = {alias.name}
        resolving = alias
        while True:
            target = self._emoji_map.get(resolving.alias_for_name)
            if target is None:
                return None
            if target.is_regular:
                return cast(EmojiRegular, target)
            if target.name in seen:
                return None
            seen.add(target.name)
            resolving = cast(EmojiAlias, target)

    def _sorted(self) -> List[AbstractEmoji]:
        return [self._emoji_map[name] for name in sorted(self._emoji_map)]


@dataclass(frozen=True)
class ListingSuccess:
    listing: EmojiListing


@dataclass(frozen=True)
class ListingFailure:
    message: str


ListingOutcome = Union[ListingSuccess, ListingFailure]


def parse_listing(payload: Any) -> ListingOutcome:
    if not isinstance(payload, dict):
        raise ListingDecodeError(f'Unexpected listing payload type: {type(payload).__name__}')

    ok = payload.get('ok')
    if not isinstance(ok, bool):
        raise ListingDecodeError('Listing payload has no boolean "ok" field')

    if not ok:
        message = payload.get('error')
        if not isinstance(message, str) or not message:
            message = 'unknown_error'
        return ListingFailure(message)

    emoji = payload.get('emoji', {})
    if not isinstance(emoji, dict):
        raise ListingDecodeError('Listing payload field "emoji" is not an object')
    for name, target in emoji.items():
        if not isinstance(target, str):
            raise ListingDecodeError(f'Invalid target for emoji "{name}": {target!r}')

    return ListingSuccess(EmojiListing(emoji))


def decode_listing(raw: str|bytes) -> ListingOutcome:
    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise ListingDecodeError(f'Listing response is not valid JSON: {e!s}') from e
    return parse_listing(payload)


def unwrap(outcome: ListingOutcome) -> EmojiListing:
    if isinstance(outcome, ListingFailure):
        raise ApiError(outcome.message)
    return outcome.listing


def load_listing_file(filepath: str) -> EmojiListing:
    # a saved emoji.list response, for backups without API access
    try:
        with open(filepath, 'rb') as fp:
            raw = fp.read()
    except OSError as e:
        raise ListingError(f'Reading failed: {filepath}') from e
    return unwrap(decode_listing(raw))


class EmojiDirectoryClient:
    def __init__(self, token: str, api_url: str = API_URL, timeout: float|None = None,
                 http=None, logger: Logger|None = None):
        self._token = token
        self._api_url = api_url
        self._timeout = timeout
        self._http = http or requests
        self._logger = logger or Logger.get_instance()

    def fetch_listing(self) -> EmojiListing:
        self._logger.debug(f'Fetching: {self._api_url}')
        try:
            response = self._http.get(self._api_url, params={'token': self._token}, timeout=self._timeout)
            raw = response.content
        except requests.RequestException as e:
            raise ListingNetworkError(f'Listing request failed: {e!s}') from e

        listing = unwrap(decode_listing(raw))
        self._logger.info(f'Loaded {len(listing):n} emoji definitions')
        return listing
