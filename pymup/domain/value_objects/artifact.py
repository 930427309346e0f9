from dataclasses import dataclass


@dataclass(frozen=True)
class BuildArtifact:
    """
    Value Object for a bundle produced by the builder or found on disk.
    """
    build_location: str
    bundle_path: str
    exists: bool
