"""
Persistence tests: key-value stores, the profile store and vocabulary import.
"""

import json
from dataclasses import replace

import pytest

from packages.speller.content.vocabulary import Vocabulary
from packages.speller.errors import (
    InvalidSlotError,
    ProfileLimitError,
    ProfileNotFoundError,
    SpellerError,
    VocabularyImportError,
)
from packages.speller.generation.map import generate_map
from packages.speller.persistence.ingest import DEFAULT_PHONETIC, parse_vocabulary
from packages.speller.persistence.profiles import MAX_PROFILES, ProfileStore
from packages.speller.persistence.store import JsonFileStore, KeyValueStore, MemoryStore
from packages.speller.state.combat import Player
from packages.speller.state.run import RunState


def make_run(act=1, name="Adventure - Act 1 - Floor 0"):
    return RunState(player=Player(gold=5), map_seed=42, act=act,
                    game_map=generate_map(42), save_name=name)


# =============================================================================
# Stores
# =============================================================================


class TestMemoryStore:

    def test_basic_operations(self):
        store = MemoryStore()
        store.put("b", {"x": 1})
        store.put("a", {"y": 2})
        assert store.get("b") == {"x": 1}
        assert store.keys() == ["a", "b"]
        assert store.delete("a")
        assert not store.delete("a")
        assert store.get("a") is None

    def test_values_are_copied(self):
        store = MemoryStore()
        doc = {"items": [1]}
        store.put("k", doc)
        doc["items"].append(2)
        store.get("k")["items"].append(3)
        assert store.get("k") == {"items": [1]}

    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(MemoryStore(), KeyValueStore)
        assert isinstance(JsonFileStore(tmp_path), KeyValueStore)


class TestJsonFileStore:

    def test_round_trip(self, tmp_path):
        store = JsonFileStore(tmp_path / "profiles")
        store.put("abc", {"name": "Ada", "words": ["café"]})
        assert store.get("abc") == {"name": "Ada", "words": ["café"]}
        assert (tmp_path / "profiles" / "abc.json").exists()
        assert store.keys() == ["abc"]

    def test_no_temp_files_left(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.put("abc", {"n": 1})
        store.put("abc", {"n": 2})
        assert sorted(p.name for p in tmp_path.iterdir()) == ["abc.json"]

    def test_missing_key(self, tmp_path):
        assert JsonFileStore(tmp_path).get("nope") is None

    def test_corrupt_document_ignored(self, tmp_path):
        (tmp_path / "bad.json").write_text("{not json", encoding="utf-8")
        assert JsonFileStore(tmp_path).get("bad") is None

    def test_keys_map_to_distinct_files(self, tmp_path):
        store = JsonFileStore(tmp_path)
        for n, key in enumerate(["a/b", "a_b", "ab", "a.b"]):
            store.put(key, {"n": n})
        assert store.keys() == ["a.b", "a/b", "a_b", "ab"]
        assert [store.get(k)["n"] for k in ("a/b", "a_b", "ab", "a.b")] == [0, 1, 2, 3]

    def test_keys_stay_in_directory(self, tmp_path):
        store = JsonFileStore(tmp_path / "profiles")
        store.put("../evil", {"n": 1})
        assert [p.name for p in tmp_path.iterdir()] == ["profiles"]
        assert store.get("../evil") == {"n": 1}
        assert store.keys() == ["../evil"]
        with pytest.raises(ValueError):
            store.put("", {})

    def test_delete(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.put("abc", {})
        assert store.delete("abc")
        assert not store.delete("abc")


# =============================================================================
# Profiles
# =============================================================================


class TestProfiles:

    def test_create(self, profile_store):
        profile = profile_store.create_profile("  Ada ")
        assert profile.name == "Ada"
        assert profile.currency == 0
        assert profile_store.get_profile(profile.id).name == "Ada"

    def test_blank_name_gets_default(self, profile_store):
        assert profile_store.create_profile("   ").name == "Traveler"

    def test_limit(self, profile_store):
        for i in range(MAX_PROFILES):
            profile_store.create_profile(f"p{i}")
        with pytest.raises(ProfileLimitError):
            profile_store.create_profile("one too many")

    def test_list_and_delete(self, profile_store):
        a = profile_store.create_profile("a")
        b = profile_store.create_profile("b")
        assert {p.id for p in profile_store.list_profiles()} == {a.id, b.id}
        assert profile_store.delete_profile(a.id)
        assert [p.id for p in profile_store.list_profiles()] == [b.id]

    def test_unknown_profile(self, profile_store):
        assert profile_store.get_profile("ghost") is None
        with pytest.raises(ProfileNotFoundError):
            profile_store.add_currency("ghost", 5)

    def test_not_found_is_key_error(self):
        err = ProfileNotFoundError("No profile with id 'x'")
        assert isinstance(err, KeyError)
        assert isinstance(err, SpellerError)
        assert str(err) == "No profile with id 'x'"

    def test_update_profile(self, profile_store, profile):
        profile.name = "Grace"
        profile_store.update_profile(profile)
        assert profile_store.get_profile(profile.id).name == "Grace"

    def test_migration_backfills_and_drops_single_save(self):
        store = MemoryStore()
        store.put("old", {"id": "old", "name": "Old", "activeRun": {"act": 2}, "currency": None})
        profiles = ProfileStore(store)
        profile = profiles.get_profile("old")
        assert profile.save_slots == {}
        assert profile.currency == 0
        assert profile.unlocks == []
        raw = store.get("old")
        assert "activeRun" not in raw
        assert raw["saveSlots"] == {}


class TestSaveSlots:

    def test_save_and_load(self, profile_store, profile):
        run = make_run()
        profile_store.save_run(profile.id, 2, run)
        assert run.saved_at > 0
        loaded = profile_store.load_run(profile.id, 2)
        assert loaded.to_dict() == run.to_dict()

    def test_empty_slot(self, profile_store, profile):
        assert profile_store.load_run(profile.id, 1) is None

    @pytest.mark.parametrize("slot", [-1, 5, 10])
    def test_invalid_slot(self, profile_store, profile, slot):
        with pytest.raises(InvalidSlotError):
            profile_store.save_run(profile.id, slot, make_run())
        with pytest.raises(ValueError):
            profile_store.load_run(profile.id, slot)

    def test_list_runs(self, profile_store, profile):
        profile_store.save_run(profile.id, 3, make_run(act=2, name="later"))
        profile_store.save_run(profile.id, 0, make_run())
        runs = profile_store.list_runs(profile.id)
        assert list(runs) == [0, 3]
        assert runs[3]["saveName"] == "later"
        assert runs[3]["act"] == 2

    def test_overwrite_slot(self, profile_store, profile):
        profile_store.save_run(profile.id, 0, make_run(name="first"))
        profile_store.save_run(profile.id, 0, make_run(name="second"))
        assert profile_store.load_run(profile.id, 0).save_name == "second"

    def test_delete_run(self, profile_store, profile):
        profile_store.save_run(profile.id, 1, make_run())
        assert profile_store.delete_run(profile.id, 1)
        assert not profile_store.delete_run(profile.id, 1)

    def test_survives_json_store(self, tmp_path):
        profiles = ProfileStore(JsonFileStore(tmp_path))
        profile = profiles.create_profile("Ada")
        profiles.save_run(profile.id, 1, make_run())
        reopened = ProfileStore(JsonFileStore(tmp_path))
        assert reopened.load_run(profile.id, 1).map_seed == 42
        json.loads((tmp_path / f"{profile.id}.json").read_text(encoding="utf-8"))


class TestMasteryAndUnlocks:

    def test_sync_and_apply_mastery(self, profile_store, profile, vocab_list):
        progressed = [replace(vocab_list[0], proficiency=5), replace(vocab_list[1], proficiency=2)]
        assert profile_store.sync_mastery(profile.id, progressed) == 1

        stored = profile_store.get_profile(profile.id)
        assert stored.stats.words_mastered == 1
        fresh = [Vocabulary.create("cat", meaning="new text"), Vocabulary.create("zebra")]
        applied = ProfileStore.apply_mastery_to_vocab(stored, fresh)
        assert applied[0].proficiency == 5
        assert applied[0].meaning == "new text"
        assert applied[1].proficiency == 0

    def test_currency_floors_at_zero(self, profile_store, profile):
        assert profile_store.add_currency(profile.id, 50) == 50
        assert profile_store.add_currency(profile.id, -80) == 0

    def test_purchase_unlock(self, profile_store, profile):
        profile_store.add_currency(profile.id, 120)
        assert profile_store.purchase_unlock(profile.id, "bonus_hp")
        stored = profile_store.get_profile(profile.id)
        assert stored.currency == 20
        assert stored.has_unlock("bonus_hp")

    def test_purchase_rules(self, profile_store, profile):
        profile_store.add_currency(profile.id, 120)
        assert not profile_store.purchase_unlock(profile.id, "bonus_energy")
        assert not profile_store.purchase_unlock(profile.id, "no_such_upgrade")
        profile_store.purchase_unlock(profile.id, "bonus_gold")
        assert not profile_store.purchase_unlock(profile.id, "bonus_gold")
        assert profile_store.get_profile(profile.id).currency == 20

    def test_act_cleared_once(self, profile_store, profile):
        assert profile_store.record_act_cleared(profile.id, 1)
        assert not profile_store.record_act_cleared(profile.id, 1)
        assert profile_store.get_profile(profile.id).acts_cleared == [1]

    def test_stats(self, profile_store, profile):
        profile_store.record_run_started(profile.id)
        profile_store.record_win(profile.id)
        profile_store.complete_tutorial(profile.id)
        stored = profile_store.get_profile(profile.id)
        assert stored.stats.runs_started == 1
        assert stored.stats.wins == 1
        assert stored.has_completed_tutorial


# =============================================================================
# Vocabulary import
# =============================================================================


class TestIngest:

    def test_json(self):
        content = json.dumps([
            {"word": "ocean", "phonetic": "/ˈoʊʃən/", "meaning": "sea"},
            {"word": "river"},
            {"meaning": "no word"},
            "junk",
        ])
        words = parse_vocabulary(content, filename="words.json")
        assert [v.word for v in words] == ["ocean", "river"]
        assert words[0].phonetic == "/ˈoʊʃən/"
        assert words[1].phonetic == DEFAULT_PHONETIC
        assert all(v.proficiency == 0 for v in words)

    def test_json_detected_by_content(self):
        assert parse_vocabulary('[{"word": "cat"}]')[0].word == "cat"

    def test_text_lines(self):
        content = "apple, a fruit\nbanana;yellow\ncherry\tred\n\n  \ndate\n"
        words = parse_vocabulary(content, filename="words.txt")
        assert [v.word for v in words] == ["apple", "banana", "cherry", "date"]
        assert [v.meaning for v in words] == ["a fruit", "yellow", "red", ""]

    @pytest.mark.parametrize("content,filename", [
        ("", None),
        ("\n\n", "a.txt"),
        ("[]", None),
        ('[{"meaning": "x"}]', None),
        ("{broken", "a.json"),
        ('{"word": "cat"}', "a.json"),
    ])
    def test_rejects_unusable_input(self, content, filename):
        with pytest.raises(VocabularyImportError):
            parse_vocabulary(content, filename=filename)
