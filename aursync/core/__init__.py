"""Descriptor scanning, checksum resolution, patching and orchestration."""
