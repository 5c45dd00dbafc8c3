"""Assemble selected guidelines into assistant-specific bundles."""

from .assembler import BundleArtifact, BundleError, BundlePlan, assemble_bundle
from .targets import (
    ALLOWED_MODES,
    ALLOWED_TARGETS,
    DEFAULT_MODE,
    DEFAULT_TARGET,
    MODE_INLINE,
    MODE_LINKED,
    TARGETS,
    BundleTarget,
    get_target,
)
from .writer import BundleWriteResult, write_bundle

__all__ = [
    "ALLOWED_MODES",
    "ALLOWED_TARGETS",
    "DEFAULT_MODE",
    "DEFAULT_TARGET",
    "MODE_INLINE",
    "MODE_LINKED",
    "TARGETS",
    "BundleArtifact",
    "BundleError",
    "BundlePlan",
    "BundleTarget",
    "BundleWriteResult",
    "assemble_bundle",
    "get_target",
    "write_bundle",
]
