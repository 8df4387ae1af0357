# ABOUTME: Librarium - a self-hosted digital library with a deduplicating ingestion pipeline.
# ABOUTME: Exposes the package version used by the CLI.

__version__ = "0.1.0"
