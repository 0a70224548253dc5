from unittest import mock

import pytest
import requests

from pyslackmoji.errors import ImageFetchError
from pyslackmoji.fetcher import FetchStatus, ImageFetcher
from pyslackmoji.tests.fakes import FakeHttp

URL = "https://x/smile.png"


def test_fetch_one_saves_file(target_dir, logger, log_lines):
    http = FakeHttp({URL: b"PNG-BYTES"})

    result = ImageFetcher(http=http, logger=logger).fetch_one("smile", URL, str(target_dir))

    assert result.status is FetchStatus.SAVED
    assert result.size == len(b"PNG-BYTES")
    assert (target_dir / "smile.png").read_bytes() == b"PNG-BYTES"
    assert any(f"saved {target_dir / 'smile.png'}" in line for line in log_lines())


def test_fetch_one_default_extension(target_dir, logger):
    http = FakeHttp({"https://x/smile": b"data"})

    ImageFetcher(http=http, logger=logger).fetch_one("smile", "https://x/smile", str(target_dir))

    assert (target_dir / "smile.png").read_bytes() == b"data"


def test_fetch_one_existing_file_skips_network(target_dir, logger, log_lines):
    (target_dir / "smile.png").write_bytes(b"old")
    http = mock.Mock()

    result = ImageFetcher(http=http, logger=logger).fetch_one("smile", URL, str(target_dir))

    assert result.status is FetchStatus.EXISTS
    http.get.assert_not_called()
    assert (target_dir / "smile.png").read_bytes() == b"old"
    assert any("exists" in line for line in log_lines())


def test_fetch_one_does_not_overwrite_concurrently_created_file(target_dir, logger):
    path = target_dir / "smile.png"

    def get(url, timeout=None):
        path.write_bytes(b"other writer")
        return mock.Mock(status_code=200, content=b"ours")

    result = ImageFetcher(http=mock.Mock(get=get), logger=logger).fetch_one("smile", URL, str(target_dir))

    assert result.status is FetchStatus.EXISTS
    assert path.read_bytes() == b"other writer"


def test_fetch_one_network_error(target_dir, logger):
    http = FakeHttp({URL: requests.ConnectionError("reset by peer")})

    with pytest.raises(ImageFetchError) as exc_info:
        ImageFetcher(http=http, logger=logger).fetch_one("smile", URL, str(target_dir))

    assert exc_info.value.name == "smile"
    assert str(exc_info.value) == "reset by peer"
    assert exc_info.value.reason == "reset by peer"
    assert not (target_dir / "smile.png").exists()


def test_fetch_one_http_error_status(target_dir, logger):
    http = FakeHttp({URL: (404, b"not found")})

    with pytest.raises(ImageFetchError):
        ImageFetcher(http=http, logger=logger).fetch_one("smile", URL, str(target_dir))

    assert not (target_dir / "smile.png").exists()


def test_fetch_one_missing_directory(tmp_path, logger):
    http = FakeHttp({URL: b"data"})

    with pytest.raises(OSError):
        ImageFetcher(http=http, logger=logger).fetch_one("smile", URL, str(tmp_path / "missing"))


def test_fetch_one_removes_partial_file_on_write_error(target_dir, logger):
    http = FakeHttp({URL: b"data"})
    fetcher = ImageFetcher(http=http, logger=logger)
    broken = mock.MagicMock()
    broken.write.side_effect = OSError("No space left on device")

    real_open = open

    def fake_open(path, mode="r", *args, **kwargs):
        if mode == "xb":
            real_open(path, mode).close()
            return broken
        return real_open(path, mode, *args, **kwargs)

    with mock.patch("builtins.open", side_effect=fake_open):
        with pytest.raises(OSError, match="No space left"):
            fetcher.fetch_one("smile", URL, str(target_dir))

    assert not (target_dir / "smile.png").exists()
