"""Tests for BuildCache."""

import pytest
from unittest.mock import AsyncMock

from pymup.application.build_cache import BuildCache
from pymup.domain.entities.deployment_config import BuildOptions
from pymup.domain.errors import BuildCacheMiss, BuildFailure
from pymup.domain.value_objects.build_location import derive_build_location


class TestBuildCache:
    @pytest.mark.asyncio
    async def test_builds_at_derived_location(self):
        builder = AsyncMock()
        cache = BuildCache(builder, exists=lambda path: True)

        artifact = await cache.prepare("/srv/app", BuildOptions())

        expected = derive_build_location("/srv/app")
        builder.build.assert_awaited_once()
        app_path, options, verbose = builder.build.await_args.args
        assert app_path == "/srv/app"
        assert options.build_location == expected
        assert artifact.build_location == expected
        assert artifact.bundle_path.endswith("bundle.tar.gz")
        assert artifact.exists is True

    @pytest.mark.asyncio
    async def test_user_build_location_wins(self, tmp_path):
        (tmp_path / "bundle.tar.gz").write_bytes(b"bundle")
        builder = AsyncMock()
        cache = BuildCache(builder)
        options = BuildOptions(build_location=str(tmp_path))

        artifact = await cache.prepare("/srv/app", options)

        assert artifact.build_location == str(tmp_path)
        assert artifact.exists is True

    @pytest.mark.asyncio
    async def test_build_without_bundle_fails(self, tmp_path):
        builder = AsyncMock()
        cache = BuildCache(builder)

        with pytest.raises(BuildFailure, match="no bundle"):
            await cache.prepare("/srv/app", BuildOptions(build_location=str(tmp_path)))
        builder.build.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cached_build_reused(self, tmp_path):
        (tmp_path / "bundle.tar.gz").write_bytes(b"bundle")
        builder = AsyncMock()
        cache = BuildCache(builder)

        artifact = await cache.prepare(
            "/srv/app", BuildOptions(build_location=str(tmp_path)), use_cached=True
        )

        builder.build.assert_not_awaited()
        assert artifact.exists is True
        assert artifact.bundle_path == str(tmp_path / "bundle.tar.gz")

    @pytest.mark.asyncio
    async def test_cached_build_missing(self, tmp_path):
        builder = AsyncMock()
        cache = BuildCache(builder)

        with pytest.raises(BuildCacheMiss, match="--cached-build"):
            await cache.prepare(
                "/srv/app", BuildOptions(build_location=str(tmp_path)), use_cached=True
            )
        builder.build.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_builder_failure_propagates(self):
        builder = AsyncMock()
        builder.build = AsyncMock(side_effect=BuildFailure("meteor exploded"))
        cache = BuildCache(builder)

        with pytest.raises(BuildFailure):
            await cache.prepare("/srv/app", BuildOptions())
