#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# slack workspace custom emoji backup
# -----------------------------------------------------------------------------
# Token is read from --token or from SLACK_USER_TOKEN (environment or .env in
# the working directory). Running again with the same <dir> downloads only
# what is missing, so a rerun is also the way to retry failed items.
#    Example: pyslackmoji -c 20 ./.slack-backup/emoji/
# -----------------------------------------------------------------------------
from __future__ import annotations

import locale
import time
from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter
from typing import List

from pyslackmoji.aliases import LinkMode
from pyslackmoji.backup import BackupReport, EmojiBackup
from pyslackmoji.config import DEFAULT_TARGET_DIR, BackupConfig, TOKEN_ENV_VAR, load_env
from pyslackmoji.core.exception_handler import ExceptionHandler
from pyslackmoji.core.logger import Logger
from pyslackmoji.scheduler import DEFAULT_CONCURRENCY
from pyslackmoji.util.io import fmt_sizeof, fmt_time_delta


# noinspection PyMethodMayBeStatic
class EmojiDumper:
    def __init__(self, argv: List[str]|None = None, http=None):
        self._http = http
        try:
            locale.setlocale(locale.LC_ALL, '')
        except locale.Error:
            pass
        load_env()

        self.args: Namespace = self._parse_args(argv)
        self.logger = Logger.get_instance(require_new=True, filename=self.args.log_file)

    def run(self):
        _handler = ExceptionHandler(self.logger)
        try:
            self._invoke()
        except Exception as e:
            _handler.handle(e)
        finally:
            self.logger.close_io()

    def _parse_args(self, argv: List[str]|None) -> Namespace:
        parser = ArgumentParser(
            description='Backup Slack workspace emojis',
            formatter_class=RawDescriptionHelpFormatter,
            epilog='\n'.join([
                'ALIASES',
                'Alias emojis are saved next to their originals under their own name, as hardlinks '
                '(--link-mode hardlink), plain copies (copy), or hardlinks with a fallback to copies '
                'when the filesystem does not support them (auto, default).',
            ]),
        )
        parser.add_argument('dir', metavar='<dir>', nargs='?', default=DEFAULT_TARGET_DIR,
                            help=f"directory where downloaded images will be saved (default '{DEFAULT_TARGET_DIR}')")
        parser.add_argument('-t', '--token', metavar='<TOKEN>',
                            help=f'Slack API token with emoji:read scope (default ${TOKEN_ENV_VAR})')
        parser.add_argument('-c', '--concurrency', metavar='<NUM>', type=int, default=DEFAULT_CONCURRENCY,
                            help=f'amount of parallel downloads (default {DEFAULT_CONCURRENCY})')
        parser.add_argument('--link-mode', choices=[m.value for m in LinkMode], default=LinkMode.AUTO.value,
                            help='how alias files are created (default auto)')
        parser.add_argument('--timeout', metavar='<SEC>', type=float, default=None,
                            help='network timeout per request, in seconds (default none)')
        parser.add_argument('--from-file', metavar='<file>',
                            help='read emoji.list API response from a file instead of requesting it')
        parser.add_argument('--log-file', metavar='<file>',
                            help='log file path (default ./log/log.<date>.log)')
        return parser.parse_args(argv)

    def _invoke(self):
        config = BackupConfig.from_args(self.args)
        started_at = time.monotonic()
        report = EmojiBackup(config, logger=self.logger, http=self._http).run()
        self._print_report(report, time.monotonic() - started_at)

    def _print_report(self, report: BackupReport, elapsed_sec: float):
        downloads, aliases = report.downloads, report.aliases
        self.logger.info(
            f'Done in {fmt_time_delta(elapsed_sec)}: '
            f'{downloads.saved:n} saved ({fmt_sizeof(downloads.bytes_saved).strip()}), '
            f'{downloads.exists + aliases.exists:n} existed, '
            f'{aliases.linked + aliases.copied:n} aliases created'
        )
        failed = downloads.failed + aliases.failed
        if failed:
            self.logger.warn(f'{len(failed):n} emojis failed, run again to retry: ' +
                             ', '.join(sorted(failed)))
        if aliases.unresolved:
            self.logger.debug(f'Unresolved aliases: {", ".join(aliases.unresolved)}')


def main(argv: List[str]|None = None):
    EmojiDumper(argv).run()


if __name__ == '__main__':
    main()
