# -----------------------------------------------------------------------------
# run configuration
# -----------------------------------------------------------------------------
from __future__ import annotations

import os
from argparse import Namespace
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv

from pyslackmoji.aliases import LinkMode
from pyslackmoji.errors import ConfigError
from pyslackmoji.listing import API_URL
from pyslackmoji.scheduler import DEFAULT_CONCURRENCY

TOKEN_ENV_VAR = 'SLACK_USER_TOKEN'
DEFAULT_TARGET_DIR = 'emoji'


def load_env(directory: str|None = None) -> bool:
    env_file = os.path.join(directory or os.getcwd(), '.env')
    if os.path.isfile(env_file):
        return load_dotenv(env_file)
    return False


@dataclass(frozen=True)
class BackupConfig:
    token: str|None
    target_dir: str = DEFAULT_TARGET_DIR
    concurrency: int = DEFAULT_CONCURRENCY
    api_url: str = API_URL
    timeout: float|None = None
    link_mode: LinkMode = LinkMode.AUTO
    listing_file: str|None = None
    log_file: str|None = None

    def __post_init__(self):
        if not self.token and not self.listing_file:
            raise ConfigError(f'Missing API token: pass --token or set {TOKEN_ENV_VAR} in environment variables')
        if self.concurrency < 1:
            raise ConfigError(f'Concurrency should be a positive number, got {self.concurrency}')
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError(f'Timeout should be a positive number, got {self.timeout}')

    @classmethod
    def from_args(cls, args: Namespace, environ: Mapping[str, str]|None = None) -> BackupConfig:
        if environ is None:
            environ = os.environ
        return cls(
            token=args.token or environ.get(TOKEN_ENV_VAR) or None,
            target_dir=os.path.abspath(os.path.expanduser(os.path.expandvars(args.dir))),
            concurrency=args.concurrency,
            timeout=args.timeout,
            link_mode=LinkMode(args.link_mode),
            listing_file=args.from_file,
            log_file=args.log_file,
        )
