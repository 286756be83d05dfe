"""Vault domain: note listings, descriptions, and note mutations."""

from .index import VaultIndex, sort_notes
from .metadata import DescriptionStore
from .notes import NoteStore, ensure_vault_layout
from .types import MutationResult, NoteEntry

__all__ = [
    "DescriptionStore",
    "MutationResult",
    "NoteEntry",
    "NoteStore",
    "VaultIndex",
    "ensure_vault_layout",
    "sort_notes",
]
