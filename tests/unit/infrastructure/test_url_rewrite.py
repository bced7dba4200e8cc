"""Tests for hoster-specific stream URL rewriting."""

from __future__ import annotations

import pytest

from zannime.infrastructure.stremio.url_rewrite import PathRewrite, rewrite_stream_url


class TestRewriteStreamUrl:
    def test_pixeldrain_share_to_file_api(self) -> None:
        assert (
            rewrite_stream_url("https://pixeldrain.com/u/abc123")
            == "https://pixeldrain.com/api/file/abc123"
        )

    def test_host_match_is_case_insensitive(self) -> None:
        assert (
            rewrite_stream_url("https://PixelDrain.com/u/abc")
            == "https://PixelDrain.com/api/file/abc"
        )

    def test_query_is_preserved(self) -> None:
        assert (
            rewrite_stream_url("https://pixeldrain.com/u/abc?download")
            == "https://pixeldrain.com/api/file/abc?download"
        )

    @pytest.mark.parametrize(
        "url",
        [
            "https://pixeldrain.com/api/file/abc",
            "https://pixeldrain.com/l/list1",
            "https://mega.nz/file/u/abc",
            "https://cdn.test/video.mp4",
            "not a url",
        ],
    )
    def test_other_urls_unchanged(self, url: str) -> None:
        assert rewrite_stream_url(url) == url

    def test_custom_rules(self) -> None:
        rules = (PathRewrite(host_marker="hoster", share_prefix="/s/", direct_prefix="/d/"),)
        assert rewrite_stream_url("https://hoster.io/s/x", rules) == "https://hoster.io/d/x"
        assert rewrite_stream_url("https://pixeldrain.com/u/x", rules) == (
            "https://pixeldrain.com/u/x"
        )
