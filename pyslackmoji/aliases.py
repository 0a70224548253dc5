# -----------------------------------------------------------------------------
# alias emoji materialization
# -----------------------------------------------------------------------------
from __future__ import annotations

import enum
import os
import shutil
from typing import List

from pyslackmoji.core.logger import Logger
from pyslackmoji.emoji import emoji_filepath
from pyslackmoji.listing import EmojiListing


class LinkMode(enum.Enum):
    AUTO = 'auto'          # hardlink, copy if the filesystem refuses
    HARDLINK = 'hardlink'
    COPY = 'copy'


class AliasSummary:
    def __init__(self):
        self.linked = 0
        self.copied = 0
        self.exists = 0
        self.unresolved: List[str] = []
        self.failed: List[str] = []

    @property
    def total(self) -> int:
        return self.linked + self.copied + self.exists + len(self.unresolved) + len(self.failed)


class AliasResolver:
    def __init__(self, link_mode: LinkMode = LinkMode.AUTO, logger: Logger|None = None):
        self._link_mode = link_mode
        self._logger = logger or Logger.get_instance()

    def resolve_aliases(self, listing: EmojiListing, target_dir: str) -> AliasSummary:
        summary = AliasSummary()
        aliases = listing.aliases()
        if aliases:
            self._logger.info(f'Resolving {len(aliases):n} aliases')

        for alias in aliases:
            target = listing.resolve(alias)
            if target is None:
                self._logger.warn(f'No emoji named "{alias.alias_for_name}" found for alias "{alias.name}" '
                                  f'- probably generic non-slack emoji name')
                summary.unresolved.append(alias.name)
                continue

            source = target.filepath(target_dir)
            link = emoji_filepath(target_dir, alias.name, target.url)
            if os.path.lexists(link):
                self._logger.info(f'exists {link}')
                summary.exists += 1
                continue

            try:
                linked = self._materialize(source, link)
            except OSError as e:
                self._logger.error(f'failed {alias.name} -> {target.name}: {e!s}')
                summary.failed.append(alias.name)
                continue

            if linked:
                self._logger.info(f'linked {link}')
                summary.linked += 1
            else:
                self._logger.info(f'copied {link}')
                summary.copied += 1

        return summary

    def _materialize(self, source: str, link: str) -> bool:
        if not os.path.isfile(source):
            raise FileNotFoundError(f'Target image is missing: {source}')

        if self._link_mode is LinkMode.COPY:
            self._copy(source, link)
            return False

        try:
            os.link(source, link)
            return True
        except FileExistsError:
            raise
        except OSError as e:
            if self._link_mode is LinkMode.HARDLINK:
                raise
            self._logger.debug(f'Hardlink failed ({e!s}), copying instead: {link}')

        self._copy(source, link)
        return False

    # noinspection PyMethodMayBeStatic
    def _copy(self, source: str, link: str):
        # same create-if-absent rule as for downloaded images
        with open(source, 'rb') as src:
            dst = open(link, 'xb')
            try:
                with dst:
                    shutil.copyfileobj(src, dst)
            except OSError:
                os.unlink(link)
                raise
