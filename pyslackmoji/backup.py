# -----------------------------------------------------------------------------
# listing -> downloads -> aliases
# -----------------------------------------------------------------------------
from __future__ import annotations

import os
from dataclasses import dataclass

from pyslackmoji.aliases import AliasResolver, AliasSummary
from pyslackmoji.config import BackupConfig
from pyslackmoji.core.logger import Logger
from pyslackmoji.fetcher import ImageFetcher
from pyslackmoji.listing import EmojiDirectoryClient, EmojiListing, load_listing_file
from pyslackmoji.scheduler import DownloadScheduler, DownloadSummary


@dataclass(frozen=True)
class BackupReport:
    listing: EmojiListing
    downloads: DownloadSummary
    aliases: AliasSummary


class EmojiBackup:
    """
    One backup run.

    Listing errors propagate unchanged and happen before anything is written.
    Alias resolution starts only after the download pool has drained, since
    alias files are derived from already downloaded images.
    """

    def __init__(self, config: BackupConfig,
                 client: EmojiDirectoryClient|None = None,
                 scheduler: DownloadScheduler|None = None,
                 resolver: AliasResolver|None = None,
                 logger: Logger|None = None,
                 http=None):
        self._config = config
        self._logger = logger or Logger.get_instance()
        self._client = client or EmojiDirectoryClient(
            config.token, api_url=config.api_url, timeout=config.timeout, http=http, logger=self._logger)
        self._scheduler = scheduler or DownloadScheduler(
            ImageFetcher(timeout=config.timeout, http=http, logger=self._logger),
            concurrency=config.concurrency, logger=self._logger)
        self._resolver = resolver or AliasResolver(config.link_mode, logger=self._logger)

    def run(self) -> BackupReport:
        listing = self._load_listing()
        target_dir = self._config.target_dir

        os.makedirs(target_dir, exist_ok=True)
        self._logger.debug(f'Output directory: {target_dir}')

        downloads = self._scheduler.run_all(listing.regular(), target_dir)
        aliases = self._resolver.resolve_aliases(listing, target_dir)
        return BackupReport(listing, downloads, aliases)

    def _load_listing(self) -> EmojiListing:
        if self._config.listing_file:
            listing = load_listing_file(self._config.listing_file)
            self._logger.info(f'Loaded {len(listing):n} emoji definitions from {self._config.listing_file}')
            return listing
        return self._client.fetch_listing()
