# ABOUTME: Metadata package: the extracted-metadata record and per-format dispatch.
# ABOUTME: Exports ExtractedMetadata; dispatch lives in librarium.metadata.extract.

from librarium.metadata.types import ExtractedMetadata

__all__ = ["ExtractedMetadata"]
