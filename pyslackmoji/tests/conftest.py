import json

import pytest

from pyslackmoji.core.logger import Logger


@pytest.fixture()
def logger(tmp_path):
    instance = Logger(filename=str(tmp_path / "log" / "test.log"), echo=False)
    yield instance
    instance.close_io()


@pytest.fixture()
def log_lines(logger):
    def read():
        with open(logger.filename, encoding="utf-8") as fp:
            return fp.read().splitlines()

    return read


@pytest.fixture()
def target_dir(tmp_path):
    path = tmp_path / "emoji"
    path.mkdir()
    return path


@pytest.fixture()
def listing_payload():
    def build(emoji=None, ok=True, error=None):
        payload = {"ok": ok}
        if emoji is not None:
            payload["emoji"] = emoji
        if error is not None:
            payload["error"] = error
        return json.dumps(payload).encode()

    return build


@pytest.fixture(autouse=True)
def reset_logger_instance():
    yield
    if Logger._instance:
        Logger._instance.close_io()
    Logger._instance = None
