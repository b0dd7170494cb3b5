"""
Persistence - key-value stores, profiles with save slots, word list import.
"""

from .store import KeyValueStore, MemoryStore, JsonFileStore
from .profiles import ProfileStore, UserProfile, ProfileStats, MAX_PROFILES, SAVE_SLOTS, AUTO_SAVE_SLOT
from .ingest import parse_vocabulary
