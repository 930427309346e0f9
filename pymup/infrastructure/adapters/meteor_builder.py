"""
Meteor Bundle Builder

Architectural Intent:
- Infrastructure adapter implementing BuilderPort
- Runs `meteor build --directory` and archives the bundle directory into
  bundle.tar.gz inside the build location
- Uses subprocess for the Meteor CLI wrapped in async
"""

import asyncio
import logging
import os
import subprocess
import tarfile

from pymup.domain.entities.deployment_config import BuildOptions
from pymup.domain.errors import BuildFailure
from pymup.domain.ports.builder_port import BuilderPort
from pymup.domain.value_objects.build_location import bundle_path

logger = logging.getLogger(__name__)


class MeteorBundleBuilder(BuilderPort):
    def __init__(
        self,
        server_url: str = "http://localhost:3000",
        architecture: str = "os.linux.x86_64",
        executable: str = "meteor",
    ):
        self.server_url = server_url
        self.architecture = architecture
        self.executable = executable

    def command_for(self, build_options: BuildOptions) -> list[str]:
        executable = (
            build_options.executable
            if build_options.executable != "meteor"
            else self.executable
        )
        cmd = [
            executable,
            "build",
            "--directory",
            str(build_options.build_location),
            "--architecture",
            build_options.architecture or self.architecture,
            "--server",
            build_options.server or self.server_url,
        ]
        if build_options.debug:
            cmd.append("--debug")
        if build_options.server_only:
            cmd.append("--server-only")
        return cmd

    async def build(
        self, app_path: str, build_options: BuildOptions, verbose: bool = False
    ) -> None:
        if not build_options.build_location:
            raise BuildFailure("build location is not set")

        def _build() -> None:
            cmd = self.command_for(build_options)
            logger.info("Running %s in %s", " ".join(cmd), app_path)
            try:
                subprocess.run(
                    cmd,
                    cwd=app_path,
                    capture_output=not verbose,
                    text=True,
                    check=True,
                )
            except FileNotFoundError:
                raise BuildFailure(f"'{cmd[0]}' not found. Is Meteor installed?")
            except subprocess.CalledProcessError as e:
                raise BuildFailure(f"Meteor build failed: {e.stderr or e.returncode}")

            self._archive(build_options.build_location)

        await asyncio.get_event_loop().run_in_executor(None, _build)

    def _archive(self, build_location: str) -> None:
        bundle_dir = os.path.join(build_location, "bundle")
        if not os.path.isdir(bundle_dir):
            raise BuildFailure(f"Meteor build produced no bundle at {bundle_dir}")
        with tarfile.open(bundle_path(build_location), "w:gz") as archive:
            archive.add(bundle_dir, arcname="bundle")
        logger.info("Bundle archived at %s", bundle_path(build_location))
