"""Checkpoint persistence for in-flight exports."""

from .checkpoint_store import CheckpointStore, STORAGE_KEY, get_checkpoint_path

__all__ = ["CheckpointStore", "STORAGE_KEY", "get_checkpoint_path"]
