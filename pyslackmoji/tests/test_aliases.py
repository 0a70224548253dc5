import os
from unittest import mock

import pytest

from pyslackmoji.aliases import AliasResolver, LinkMode
from pyslackmoji.listing import EmojiListing

LISTING = EmojiListing({
    "smile": "https://x/smile.gif",
    "grin": "alias:smile",
    "grin2": "alias:grin",
    "thumbs": "alias:thumbsup",
})


@pytest.fixture()
def downloaded(target_dir):
    (target_dir / "smile.gif").write_bytes(b"GIF89a")
    return target_dir


@pytest.mark.parametrize("link_mode", list(LinkMode))
def test_alias_bytes_equal_target(downloaded, logger, link_mode):
    summary = AliasResolver(link_mode, logger=logger).resolve_aliases(LISTING, str(downloaded))

    for name in ("grin", "grin2"):
        assert (downloaded / f"{name}.gif").read_bytes() == b"GIF89a"
    assert summary.linked + summary.copied == 2
    assert summary.unresolved == ["thumbs"]


def test_hardlink_shares_inode(downloaded, logger):
    AliasResolver(LinkMode.HARDLINK, logger=logger).resolve_aliases(LISTING, str(downloaded))

    assert os.path.samefile(downloaded / "smile.gif", downloaded / "grin.gif")


def test_copy_is_independent_file(downloaded, logger):
    summary = AliasResolver(LinkMode.COPY, logger=logger).resolve_aliases(LISTING, str(downloaded))

    assert summary.copied == 2
    assert not os.path.samefile(downloaded / "smile.gif", downloaded / "grin.gif")


def test_auto_falls_back_to_copy(downloaded, logger, log_lines):
    with mock.patch("pyslackmoji.aliases.os.link", side_effect=PermissionError("Operation not permitted")):
        summary = AliasResolver(LinkMode.AUTO, logger=logger).resolve_aliases(LISTING, str(downloaded))

    assert summary.copied == 2
    assert summary.linked == 0
    assert (downloaded / "grin.gif").read_bytes() == b"GIF89a"
    assert any("copied" in line for line in log_lines())


def test_hardlink_mode_reports_link_failure(downloaded, logger, log_lines):
    with mock.patch("pyslackmoji.aliases.os.link", side_effect=PermissionError("Operation not permitted")):
        summary = AliasResolver(LinkMode.HARDLINK, logger=logger).resolve_aliases(LISTING, str(downloaded))

    assert sorted(summary.failed) == ["grin", "grin2"]
    assert not (downloaded / "grin.gif").exists()
    assert any("failed grin" in line for line in log_lines())


def test_existing_alias_is_skipped(downloaded, logger):
    (downloaded / "grin.gif").write_bytes(b"kept")

    summary = AliasResolver(logger=logger).resolve_aliases(LISTING, str(downloaded))

    assert summary.exists == 1
    assert (downloaded / "grin.gif").read_bytes() == b"kept"


def test_missing_target_file_is_isolated(target_dir, logger):
    listing = EmojiListing({
        "smile": "https://x/smile.png",
        "grin": "alias:smile",
        "party": "https://x/party.gif",
        "dance": "alias:party",
    })
    (target_dir / "party.gif").write_bytes(b"party")

    summary = AliasResolver(logger=logger).resolve_aliases(listing, str(target_dir))

    assert summary.failed == ["grin"]
    assert not (target_dir / "grin.png").exists()
    assert (target_dir / "dance.gif").read_bytes() == b"party"


def test_resolve_aliases_is_idempotent(downloaded, logger):
    resolver = AliasResolver(logger=logger)

    resolver.resolve_aliases(LISTING, str(downloaded))
    second = resolver.resolve_aliases(LISTING, str(downloaded))

    assert second.exists == 2
    assert second.linked + second.copied == 0
