"""
Build Location Value Object

Architectural Intent:
- Derives the local build-output directory for an application path
- Same application path always maps to the same directory, so a previous
  build can be reused with --cached-build
- Fingerprint is a content hash of the path, never a random source
"""

import hashlib
import os
import tempfile
import uuid
from typing import Optional

BUILD_DIR_PREFIX = "mup-meteor-"
BUNDLE_FILENAME = "bundle.tar.gz"


def fingerprint(app_path: str) -> uuid.UUID:
    """Lay the first 16 bytes of SHA-256(app_path) out as a version-4 UUID."""
    digest = hashlib.sha256(os.fsencode(app_path)).digest()
    # uuid.UUID forces the version nibble and RFC 4122 variant bits.
    return uuid.UUID(bytes=digest[:16], version=4)


def derive_build_location(app_path: str, tmp_dir: Optional[str] = None) -> str:
    base = tmp_dir if tmp_dir is not None else tempfile.gettempdir()
    return os.path.join(base, f"{BUILD_DIR_PREFIX}{fingerprint(app_path)}")


def bundle_path(build_location: str) -> str:
    return os.path.join(build_location, BUNDLE_FILENAME)
