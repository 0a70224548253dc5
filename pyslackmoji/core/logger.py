# -----------------------------------------------------------------------------
# console + file logger shared by the dumper and its worker threads
# -----------------------------------------------------------------------------
from __future__ import annotations

import os
import sys
import threading
import time
from datetime import datetime
from typing import Optional, TextIO

from pyslackmoji.util.io import SGRRegistry


class Logger:
    PREFIX = 'PYSLACKMOJI'

    _instance: Logger|None = None
    _instance_lock = threading.Lock()

    @classmethod
    def get_instance(cls, require_new: bool = False, *args, **kwargs) -> Logger:
        with cls._instance_lock:
            if cls._instance and not require_new:
                return cls._instance
            instance = cls(*args, **kwargs)
            if not cls._instance or require_new:
                cls._instance = instance
            return instance

    def __init__(self, filename: str|None = None, echo: bool = True):
        self._echo = echo
        self._lock = threading.RLock()
        self._fileio: Optional[TextIO] = None

        self._open_io(filename)

    @property
    def filename(self) -> str|None:
        return self._fileio.name if self._fileio else None

    def log(self, text: str, level: str = 'info'):
        dt, micro = datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f").rsplit('.', 1)
        text = SGRRegistry.remove_sgr_seqs(text)
        thread_name = threading.current_thread().name
        with self._lock:
            # close_io() may have run in another thread
            if not self._fileio or self._fileio.closed:
                return
            print(f'{dt}.{micro:.3s} {self.PREFIX} {level.upper()} [{thread_name}]: {text}',
                  file=self._fileio, end='\n', flush=True)

    def debug(self, text: str, silent: bool = True):
        if not silent:
            self._print(SGRRegistry.wrap(text, SGRRegistry.FMT_CYAN), sys.stdout)
        self.log(text, 'debug')

    def info(self, text: str, silent: bool = False):
        if not silent:
            self._print(text, sys.stdout)
        self.log(text, 'info')

    def warn(self, text: str, silent: bool = False):
        if not silent:
            self._print(SGRRegistry.wrap(text, SGRRegistry.FMT_YELLOW), sys.stdout)
        self.log(text, 'warn')

    def error(self, text: str, silent: bool = False):
        if not silent:
            self._print(SGRRegistry.wrap(text, SGRRegistry.FMT_RED), sys.stderr)
        self.log(text, 'error')

    def close_io(self):
        with self._lock:
            if not self._fileio:
                return
            self._fileio.flush()
            self._fileio.close()
            self._fileio = None

    def _print(self, text: str, stream: TextIO):
        if not self._echo:
            return
        with self._lock:
            print(text, file=stream, flush=True)

    def _get_default_filename(self) -> str:
        return time.strftime("./log/log.%Y-%m-%d.log", time.gmtime())

    def _open_io(self, filename: str|None):
        log_filename = filename or self._get_default_filename()
        try:
            log_dir = os.path.dirname(log_filename)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            self._fileio = open(log_filename, 'a', encoding='utf-8')
        except OSError as e:
            print(f'WARNING: Opening log file {log_filename} failed: {e}', file=sys.stderr)
            return
        self.debug(f'Opened log file for appending: {log_filename}')
