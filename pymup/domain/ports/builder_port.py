"""
Builder Port

Architectural Intent:
- Port interface for the local bundler that compiles the app source
- Produces bundle.tar.gz inside build_options.build_location
"""

from abc import ABC, abstractmethod
from pymup.domain.entities.deployment_config import BuildOptions


class BuilderPort(ABC):
    @abstractmethod
    async def build(
        self, app_path: str, build_options: BuildOptions, verbose: bool = False
    ) -> None:
        """
        Builds the application bundle. Raises BuildFailure on error.
        """
        pass
