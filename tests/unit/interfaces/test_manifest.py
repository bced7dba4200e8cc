"""Tests for the Stremio manifest builder."""

from __future__ import annotations

from zannime.domain.entities.source import Genre, SourceRegistry
from zannime.infrastructure.config.schema import StremioConfig
from zannime.interfaces.api.stremio.manifest import build_manifest


class TestBuildManifest:
    def test_three_catalogs_per_source(self, registry: SourceRegistry) -> None:
        manifest = build_manifest(registry, StremioConfig())

        assert [c["id"] for c in manifest["catalogs"]] == [
            "otakudesu-anime-ongoing",
            "otakudesu-anime-completed",
            "otakudesu-anime-recent",
            "samehadaku-anime-ongoing",
            "samehadaku-anime-completed",
            "samehadaku-anime-recent",
        ]
        assert manifest["catalogs"][0]["name"] == "Otakudesu Anime (Ongoing)"
        assert {c["type"] for c in manifest["catalogs"]} == {"series"}

    def test_identity_and_resources(self, registry: SourceRegistry) -> None:
        manifest = build_manifest(registry, StremioConfig(addon_version="2.0.0"))

        assert manifest["id"] == "org.zannime.stremio"
        assert manifest["version"] == "2.0.0"
        assert manifest["types"] == ["series"]
        assert manifest["resources"] == ["catalog", "meta", "stream"]
        assert manifest["idPrefixes"] == ["otakudesu:", "samehadaku:"]

    def test_catalog_extras(self, registry: SourceRegistry) -> None:
        manifest = build_manifest(registry, StremioConfig())
        extra = manifest["catalogs"][0]["extra"]

        assert [e["name"] for e in extra] == ["search", "genre", "skip"]
        assert all(e["isRequired"] is False for e in extra)
        assert "options" not in extra[1]

    def test_genre_options(self, registry: SourceRegistry) -> None:
        manifest = build_manifest(
            registry,
            StremioConfig(),
            {"otakudesu": [Genre("action", "Action"), Genre("drama", "Drama")]},
        )

        otakudesu_extra = manifest["catalogs"][0]["extra"]
        samehadaku_extra = manifest["catalogs"][3]["extra"]
        assert otakudesu_extra[1]["options"] == ["action", "drama"]
        assert "options" not in samehadaku_extra[1]

    def test_empty_registry(self) -> None:
        manifest = build_manifest(SourceRegistry(), StremioConfig())
        assert manifest["catalogs"] == []
        assert manifest["idPrefixes"] == []
