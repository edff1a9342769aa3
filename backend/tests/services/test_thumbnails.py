"""Tests for thumbnail proxy URL construction."""
import pytest

from services.thumbnails import IMAGE_PROXY_PATH, ThumbnailPresets, build_thumbnail_url


class TestBuildThumbnailUrl:
    """Tests for build_thumbnail_url."""

    def test__build_thumbnail_url__encodes_source_and_appends_params(self) -> None:
        result = build_thumbnail_url('https://example.com/og.png', 300, 75)
        assert result == (
            '/image-proxy?url=https%3A%2F%2Fexample.com%2Fog.png&w=300&fmt=webp&q=75'
        )

    def test__build_thumbnail_url__is_relative(self) -> None:
        result = build_thumbnail_url('https://example.com/a.png', 32, 75)
        assert result is not None
        assert result.startswith(IMAGE_PROXY_PATH + '?')

    def test__build_thumbnail_url__deterministic(self) -> None:
        source = 'https://cdn.example.com/images/hero.jpg?v=3&size=large'
        assert build_thumbnail_url(source, 300, 80) == build_thumbnail_url(source, 300, 80)

    @pytest.mark.parametrize('source', [None, ''])
    def test__build_thumbnail_url__missing_source_returns_none(self, source: str | None) -> None:
        assert build_thumbnail_url(source, 300, 75) is None

    def test__build_thumbnail_url__query_string_in_source_is_encoded(self) -> None:
        """The source's own query must not leak into the proxy's parameters."""
        result = build_thumbnail_url('https://example.com/i.png?w=1&q=2', 300, 75)
        assert result == (
            '/image-proxy?url=https%3A%2F%2Fexample.com%2Fi.png%3Fw%3D1%26q%3D2'
            '&w=300&fmt=webp&q=75'
        )

    def test__build_thumbnail_url__matches_encode_uri_component(self) -> None:
        """Characters encodeURIComponent leaves alone stay unescaped; spaces become %20."""
        result = build_thumbnail_url("https://example.com/a b/(x)!~*'.png", 300, 75)
        assert result == (
            "/image-proxy?url=https%3A%2F%2Fexample.com%2Fa%20b%2F(x)!~*'.png"
            "&w=300&fmt=webp&q=75"
        )

    def test__build_thumbnail_url__custom_proxy_path(self) -> None:
        result = build_thumbnail_url('https://e.com/x.png', 64, 90, proxy_path='/api/image-proxy')
        assert result == '/api/image-proxy?url=https%3A%2F%2Fe.com%2Fx.png&w=64&fmt=webp&q=90'

    @pytest.mark.parametrize('width', [0, -10, 1.5, True])
    def test__build_thumbnail_url__invalid_width(self, width: int) -> None:
        with pytest.raises(ValueError, match='width'):
            build_thumbnail_url('https://e.com/x.png', width, 75)

    @pytest.mark.parametrize('quality', [0, 101, -1, 50.0])
    def test__build_thumbnail_url__invalid_quality(self, quality: int) -> None:
        with pytest.raises(ValueError, match='quality'):
            build_thumbnail_url('https://e.com/x.png', 300, quality)

    def test__build_thumbnail_url__invalid_params_rejected_even_without_source(self) -> None:
        with pytest.raises(ValueError):
            build_thumbnail_url(None, 0, 75)


class TestThumbnailPresets:
    """Tests for the preset helpers used when storing bookmarks."""

    def test__presets__default_widths(self) -> None:
        presets = ThumbnailPresets()
        assert presets.og_image('https://e.com/x.png') == build_thumbnail_url(
            'https://e.com/x.png', 300, 75,
        )
        assert presets.favicon('https://e.com/favicon.ico') == build_thumbnail_url(
            'https://e.com/favicon.ico', 32, 75,
        )

    def test__presets__none_source(self) -> None:
        presets = ThumbnailPresets()
        assert presets.og_image(None) is None
        assert presets.favicon('') is None
