"""
Profile store - player profiles, save slots and word mastery.

A profile is one JSON document in a ``KeyValueStore``, keyed by profile id:

    {id, name, createdAt, lastPlayed,
     stats: {runsStarted, wins, wordsMastered},
     currency, unlocks, actsCleared,
     masteryProgress: {word id: Vocabulary},
     saveSlots: {"0".."4": RunState},
     hasCompletedTutorial}

At most three profiles exist. Slot 0 is the auto-save written after every
won fight; slots 1-4 are manual. Records written by older versions are
migrated on load by backfilling missing fields.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..content.sanctum import get_upgrade
from ..content.vocabulary import Vocabulary, merge_progress
from ..errors import InvalidSlotError, ProfileLimitError, ProfileNotFoundError
from ..state.run import RunState
from .store import KeyValueStore

logger = logging.getLogger(__name__)

MAX_PROFILES = 3
SAVE_SLOTS = 5
AUTO_SAVE_SLOT = 0
DEFAULT_PROFILE_NAME = "Traveler"


def _now() -> int:
    return int(time.time() * 1000)


@dataclass
class ProfileStats:
    runs_started: int = 0
    wins: int = 0
    words_mastered: int = 0

    def to_dict(self) -> dict:
        return {
            "runsStarted": self.runs_started,
            "wins": self.wins,
            "wordsMastered": self.words_mastered,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ProfileStats":
        data = data or {}
        return cls(
            runs_started=data.get("runsStarted", 0),
            wins=data.get("wins", 0),
            words_mastered=data.get("wordsMastered", 0),
        )


@dataclass
class UserProfile:
    id: str
    name: str
    created_at: int = 0
    last_played: int = 0
    stats: ProfileStats = field(default_factory=ProfileStats)
    currency: int = 0
    unlocks: List[str] = field(default_factory=list)
    acts_cleared: List[int] = field(default_factory=list)
    mastery_progress: Dict[str, Vocabulary] = field(default_factory=dict)
    save_slots: Dict[int, dict] = field(default_factory=dict)
    has_completed_tutorial: bool = False

    def has_unlock(self, upgrade_id: str) -> bool:
        return upgrade_id in self.unlocks

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at,
            "lastPlayed": self.last_played,
            "stats": self.stats.to_dict(),
            "currency": self.currency,
            "unlocks": list(self.unlocks),
            "actsCleared": list(self.acts_cleared),
            "masteryProgress": {k: v.to_dict() for k, v in self.mastery_progress.items()},
            "saveSlots": {str(k): v for k, v in self.save_slots.items()},
            "hasCompletedTutorial": self.has_completed_tutorial,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        return cls(
            id=data["id"],
            name=data.get("name", DEFAULT_PROFILE_NAME),
            created_at=data.get("createdAt", 0),
            last_played=data.get("lastPlayed", 0),
            stats=ProfileStats.from_dict(data.get("stats")),
            currency=data.get("currency", 0),
            unlocks=list(data.get("unlocks", [])),
            acts_cleared=list(data.get("actsCleared", [])),
            mastery_progress={
                k: Vocabulary.from_dict(v) for k, v in (data.get("masteryProgress") or {}).items()
            },
            save_slots={int(k): v for k, v in (data.get("saveSlots") or {}).items()},
            has_completed_tutorial=data.get("hasCompletedTutorial", False),
        )


def _migrate_profile(data: dict) -> bool:
    """Backfill fields missing from older records. Returns True if changed."""
    defaults = {
        "saveSlots": dict,
        "currency": lambda: 0,
        "unlocks": list,
        "actsCleared": list,
        "masteryProgress": dict,
        "stats": lambda: ProfileStats().to_dict(),
    }
    changed = False
    for key, factory in defaults.items():
        if data.get(key) is None:
            data[key] = factory()
            changed = True
    if "activeRun" in data:
        # Single-save records predate slots; the old run is not carried over.
        data.pop("activeRun")
        changed = True
    return changed


def _check_slot(slot: int) -> None:
    if not 0 <= slot < SAVE_SLOTS:
        raise InvalidSlotError(f"Save slot must be 0-{SAVE_SLOTS - 1}, got {slot}")


class ProfileStore:
    """
    Profile operations on top of a key-value store.

    Every mutating call loads the current record, changes it and writes it
    back, so two stores over the same directory see each other's writes.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    # =========================================================================
    # Profiles
    # =========================================================================

    def _load(self, profile_id: str) -> Optional[UserProfile]:
        data = self.store.get(profile_id)
        if data is None:
            return None
        if _migrate_profile(data):
            logger.info("Migrated profile %s", profile_id)
            self.store.put(profile_id, data)
        return UserProfile.from_dict(data)

    def _require(self, profile_id: str) -> UserProfile:
        profile = self._load(profile_id)
        if profile is None:
            raise ProfileNotFoundError(f"No profile with id {profile_id!r}")
        return profile

    def _write(self, profile: UserProfile) -> None:
        self.store.put(profile.id, profile.to_dict())

    def list_profiles(self) -> List[UserProfile]:
        profiles = [p for p in (self._load(k) for k in self.store.keys()) if p is not None]
        profiles.sort(key=lambda p: p.created_at)
        return profiles

    def create_profile(self, name: str) -> UserProfile:
        if len(self.store.keys()) >= MAX_PROFILES:
            raise ProfileLimitError(f"At most {MAX_PROFILES} profiles are allowed")
        now = _now()
        profile = UserProfile(
            id=uuid.uuid4().hex[:9],
            name=name.strip() or DEFAULT_PROFILE_NAME,
            created_at=now,
            last_played=now,
        )
        self._write(profile)
        logger.info("Created profile %s (%s)", profile.name, profile.id)
        return profile

    def get_profile(self, profile_id: str) -> Optional[UserProfile]:
        return self._load(profile_id)

    def update_profile(self, profile: UserProfile) -> UserProfile:
        if self.store.get(profile.id) is None:
            raise ProfileNotFoundError(f"No profile with id {profile.id!r}")
        profile.last_played = _now()
        self._write(profile)
        return profile

    def delete_profile(self, profile_id: str) -> bool:
        return self.store.delete(profile_id)

    # =========================================================================
    # Save slots
    # =========================================================================

    def save_run(self, profile_id: str, slot: int, run_state: RunState) -> None:
        _check_slot(slot)
        profile = self._require(profile_id)
        run_state.saved_at = _now()
        profile.save_slots[slot] = run_state.to_dict()
        profile.last_played = run_state.saved_at
        self._write(profile)
        logger.info("Saved run to slot %d of profile %s", slot, profile_id)

    def load_run(self, profile_id: str, slot: int) -> Optional[RunState]:
        _check_slot(slot)
        data = self._require(profile_id).save_slots.get(slot)
        if data is None:
            return None
        return RunState.from_dict(data)

    def list_runs(self, profile_id: str) -> Dict[int, dict]:
        """Slot index -> ``{saveName, savedAt, act}`` for occupied slots."""
        profile = self._require(profile_id)
        return {
            slot: {
                "saveName": data.get("saveName", ""),
                "savedAt": data.get("savedAt", 0),
                "act": data.get("act", 1),
            }
            for slot, data in sorted(profile.save_slots.items())
        }

    def delete_run(self, profile_id: str, slot: int) -> bool:
        _check_slot(slot)
        profile = self._require(profile_id)
        if profile.save_slots.pop(slot, None) is None:
            return False
        self._write(profile)
        return True

    # =========================================================================
    # Mastery
    # =========================================================================

    def sync_mastery(self, profile_id: str, vocab_list: List[Vocabulary]) -> int:
        """Store the full state of every word; returns the mastered count."""
        profile = self._require(profile_id)
        for vocab in vocab_list:
            profile.mastery_progress[vocab.id] = vocab
        mastered = sum(1 for v in vocab_list if v.is_mastered)
        profile.stats.words_mastered = mastered
        self._write(profile)
        return mastered

    @staticmethod
    def apply_mastery_to_vocab(profile: UserProfile, vocab_list: List[Vocabulary]) -> List[Vocabulary]:
        """Carry a profile's saved progress onto a fresh word list."""
        result = []
        for vocab in vocab_list:
            saved = profile.mastery_progress.get(vocab.id)
            result.append(merge_progress(vocab, saved) if saved else vocab)
        return result

    # =========================================================================
    # Currency and unlocks
    # =========================================================================

    def add_currency(self, profile_id: str, amount: int) -> int:
        profile = self._require(profile_id)
        profile.currency = max(0, profile.currency + amount)
        self._write(profile)
        return profile.currency

    def purchase_unlock(self, profile_id: str, upgrade_id: str) -> bool:
        """Buy a sanctum upgrade. False if unknown, owned or unaffordable."""
        profile = self._require(profile_id)
        upgrade = get_upgrade(upgrade_id)
        if upgrade is None or profile.has_unlock(upgrade_id):
            return False
        if profile.currency < upgrade.cost:
            logger.debug("Cannot afford %s (%d < %d)", upgrade_id, profile.currency, upgrade.cost)
            return False
        profile.currency -= upgrade.cost
        profile.unlocks.append(upgrade_id)
        self._write(profile)
        return True

    def record_act_cleared(self, profile_id: str, act: int) -> bool:
        """Mark an act's boss as beaten. True on the first clear."""
        profile = self._require(profile_id)
        if act in profile.acts_cleared:
            return False
        profile.acts_cleared.append(act)
        self._write(profile)
        return True

    def record_run_started(self, profile_id: str) -> None:
        profile = self._require(profile_id)
        profile.stats.runs_started += 1
        self._write(profile)

    def record_win(self, profile_id: str) -> None:
        profile = self._require(profile_id)
        profile.stats.wins += 1
        self._write(profile)

    def complete_tutorial(self, profile_id: str) -> None:
        profile = self._require(profile_id)
        profile.has_completed_tutorial = True
        self._write(profile)
