# -----------------------------------------------------------------------------
# single emoji image download
# -----------------------------------------------------------------------------
from __future__ import annotations

import enum
import os

import requests

from pyslackmoji.core.logger import Logger
from pyslackmoji.emoji import emoji_filepath
from pyslackmoji.errors import ImageFetchError
from pyslackmoji.util.io import fmt_sizeof


class FetchStatus(enum.Enum):
    SAVED = 'saved'
    EXISTS = 'exists'


class FetchResult:
    def __init__(self, status: FetchStatus, filepath: str, size: int = 0):
        self.status = status
        self.filepath = filepath
        self.size = size


class ImageFetcher:
    def __init__(self, timeout: float|None = None, http=None, logger: Logger|None = None):
        self._timeout = timeout
        self._http = http or requests
        self._logger = logger or Logger.get_instance()

    def fetch_one(self, name: str, url: str, target_dir: str) -> FetchResult:
        filepath = emoji_filepath(target_dir, name, url)
        if os.path.isfile(filepath):
            self._logger.info(f'exists {filepath}')
            return FetchResult(FetchStatus.EXISTS, filepath)

        self._logger.debug(f'Fetching: {url}')
        try:
            response = self._http.get(url, timeout=self._timeout)
            response.raise_for_status()
            blob = response.content
        except requests.RequestException as e:
            raise ImageFetchError(name, url, str(e)) from e

        if not self._write(filepath, blob):
            self._logger.info(f'exists {filepath}')
            return FetchResult(FetchStatus.EXISTS, filepath)

        self._logger.info(f'saved {filepath} ({fmt_sizeof(len(blob)).strip()})')
        return FetchResult(FetchStatus.SAVED, filepath, len(blob))

    def _write(self, filepath: str, blob: bytes) -> bool:
        # 'x' fails instead of truncating a file that appeared in the meantime
        try:
            fp = open(filepath, 'xb')
        except FileExistsError:
            return False

        try:
            with fp:
                fp.write(blob)
        except OSError:
            # a truncated image would be skipped as "exists" by the next run
            os.unlink(filepath)
            raise
        return True
