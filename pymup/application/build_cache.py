"""
Build Cache

Architectural Intent:
- Decides whether the push stage invokes the builder or reuses the
  bundle left by a previous build at the same location
- The location is stable per application path, so concurrent invocations
  for one app share a bundle file; serialising them is the caller's job
"""

import logging
import os
from typing import Callable

from pymup.domain.entities.deployment_config import BuildOptions
from pymup.domain.errors import BuildCacheMiss, BuildFailure
from pymup.domain.ports.builder_port import BuilderPort
from pymup.domain.value_objects.artifact import BuildArtifact
from pymup.domain.value_objects.build_location import (
    bundle_path,
    derive_build_location,
)

logger = logging.getLogger(__name__)


class BuildCache:
    def __init__(
        self,
        builder: BuilderPort,
        exists: Callable[[str], bool] = os.path.exists,
    ):
        self.builder = builder
        self._exists = exists

    def location_for(self, app_path: str, build_options: BuildOptions) -> str:
        return build_options.build_location or derive_build_location(app_path)

    async def prepare(
        self,
        app_path: str,
        build_options: BuildOptions,
        use_cached: bool = False,
        verbose: bool = False,
    ) -> BuildArtifact:
        """Build the bundle, or locate the cached one when use_cached is set.

        Raises:
            BuildCacheMiss: use_cached is set but no bundle exists.
            BuildFailure: propagated from the builder, or the build left no
                bundle behind.
        """
        location = self.location_for(app_path, build_options)
        bundle = bundle_path(location)

        if not use_cached:
            logger.info("Building App Bundle Locally at %s", location)
            await self.builder.build(
                app_path, build_options.with_location(location), verbose
            )
            if not self._exists(bundle):
                raise BuildFailure(f"Build finished but no bundle at {bundle}")
            return BuildArtifact(location, bundle, True)

        if not self._exists(bundle):
            raise BuildCacheMiss(location)
        logger.info("Skipping build. Using previous build at %s", location)
        return BuildArtifact(location, bundle, True)
