"""
GameRunner tests.

Drives whole runs through the runner's public methods and the dict action
interface: map travel, fights, rewards, rooms, act transitions, saving and
loading, and the tutorial.
"""

import random
from dataclasses import replace

import pytest

from packages.speller.audio import AudioSink, RecordingAudio
from packages.speller.content.enemies import EnemyIntent, EnemyType, IntentType
from packages.speller.content.packs import get_pack
from packages.speller.errors import InvalidSlotError
from packages.speller.game import MAX_ACT, GameRunner
from packages.speller.generation.map import NodeType, get_node
from packages.speller.generation.shop import REMOVE_ITEM_ID
from packages.speller.state.run import GamePhase


def make_runner(vocab_list, **kwargs):
    kwargs.setdefault("seed", 1234)
    kwargs.setdefault("rng", random.Random(5))
    return GameRunner(vocab_list, **kwargs)


def enter(runner, node_type=None):
    """Travel to the first available node, optionally retyping it first."""
    node_id = runner.available_nodes()[0]
    if node_type is not None:
        get_node(runner.run_state.game_map, node_id).type = node_type
    assert runner.select_node(node_id)
    return node_id


def win_fight(runner):
    enemy = runner.combat.enemy
    enemy.hp = 1
    enemy.status.poison = 5
    assert runner.end_turn()


def lose_to_last_stand(runner):
    runner.player.hp = 1
    runner.player.revivals = 0
    runner.combat.enemy.intent = EnemyIntent(IntentType.ATTACK, 99)
    runner.end_turn()
    assert runner.phase == GamePhase.LAST_STAND


class ExplodingAudio(AudioSink):

    def play_bgm(self, track):
        raise OSError("no audio device")

    def speak_word(self, word):
        raise OSError("no speech engine")


# =============================================================================
# New run
# =============================================================================


class TestNewRun:

    def test_initial_state(self, vocab_list):
        runner = make_runner(vocab_list)
        assert runner.phase == GamePhase.MAP
        assert len(runner.run_state.deck) == 12
        assert runner.player.hp == 70
        assert runner.run_state.map_seed == 1234
        assert 3 <= len(runner.available_nodes()) <= 4
        assert runner.run_state.custom_vocab_list is not None

    def test_pack_run(self, scholar_words):
        runner = make_runner(scholar_words, pack_id="scholar")
        assert runner.run_state.vocab_pack_id == "scholar"
        assert runner.run_state.custom_vocab_list is None
        assert runner.save_name().startswith(get_pack("scholar").name)

    def test_custom_run_save_name(self, vocab_list):
        assert make_runner(vocab_list).save_name() == "Adventure - Act 1 - Floor 0"

    def test_profile_unlocks_and_mastery(self, profile_store, profile, vocab_list):
        profile_store.add_currency(profile.id, 100)
        profile_store.purchase_unlock(profile.id, "bonus_hp")
        profile_store.sync_mastery(profile.id, [replace(vocab_list[0], proficiency=3)])

        runner = make_runner(vocab_list, profiles=profile_store, profile_id=profile.id)
        assert runner.player.max_hp == 85
        assert runner.vocab_list[0].proficiency == 3
        assert profile_store.get_profile(profile.id).stats.runs_started == 1

    def test_map_actions(self, vocab_list):
        runner = make_runner(vocab_list)
        actions = runner.get_available_actions()
        assert [a["node_id"] for a in actions] == runner.available_nodes()

    def test_observation_shape(self, vocab_list):
        obs = make_runner(vocab_list).get_observation()
        assert obs["phase"] == "MAP"
        assert obs["combat"] is None
        assert obs["map"]["seed"] == 1234
        assert len(obs["map"]["available"]) >= 3
        assert len(obs["deck"]) == 12

    def test_locked_node_rejected(self, vocab_list):
        runner = make_runner(vocab_list)
        assert not runner.select_node("BOSS_NODE")
        assert not runner.select_node("nowhere")
        assert runner.phase == GamePhase.MAP

    def test_broken_audio_does_not_interrupt(self, vocab_list):
        runner = make_runner(vocab_list, audio=ExplodingAudio())
        enter(runner, NodeType.MONSTER)
        assert runner.begin_card(runner.combat.playable_cards()[0].instance_id)


# =============================================================================
# Combat
# =============================================================================


class TestCombat:

    def test_enter_combat(self, vocab_list):
        runner = make_runner(vocab_list)
        node_id = enter(runner, NodeType.MONSTER)
        assert runner.phase == GamePhase.COMBAT
        assert runner.run_state.current_map_node_id == node_id
        assert runner.run_state.current_enemy is runner.combat.enemy
        assert len(runner.run_state.hand) == 5
        assert len(runner.run_state.draw_pile) == 7
        assert runner.get_observation()["combat"]["enemy"]["id"] == runner.combat.enemy.id

    def test_deck_types_survive_balancing(self, vocab_list):
        runner = make_runner(vocab_list)
        before = sorted(c.type.value for c in runner.run_state.deck)
        enter(runner, NodeType.MONSTER)
        assert sorted(c.type.value for c in runner.run_state.deck) == before

    def test_spell_through_actions(self, vocab_list):
        audio = RecordingAudio()
        runner = make_runner(vocab_list, audio=audio)
        enter(runner, NodeType.MONSTER)
        card = runner.combat.playable_cards()[0]

        assert runner.take_action({"type": "begin_card", "card": card.instance_id})["success"]
        assert {"type": "spell"} in runner.get_available_actions()
        response = runner.take_action({"type": "spell", "text": card.word.upper()})
        assert response["success"]
        assert ("speak_word", card.word) in audio.calls
        assert "success" in audio.sfx()

    def test_misspelling_plays_error(self, vocab_list):
        audio = RecordingAudio()
        runner = make_runner(vocab_list, audio=audio)
        enter(runner, NodeType.MONSTER)
        card = runner.combat.playable_cards()[0]
        runner.begin_card(card.instance_id)
        assert not runner.submit_spelling("zzz")
        assert "error" in audio.sfx()
        assert runner.run_state.draw_pile[0].instance_id == card.instance_id

    def test_proficiency_flows_into_run_words(self, vocab_list):
        runner = make_runner(vocab_list)
        enter(runner, NodeType.MONSTER)
        card = runner.combat.playable_cards()[0]
        runner.begin_card(card.instance_id)
        runner.submit_spelling(card.word)
        word = next(v for v in runner.vocab_list if v.id == card.vocab.id)
        assert word.proficiency == 1

    def test_combat_calls_outside_combat(self, vocab_list):
        runner = make_runner(vocab_list)
        assert not runner.end_turn()
        assert not runner.begin_card("x")
        assert not runner.submit_last_stand("x")

    def test_victory_rewards(self, vocab_list, profile_store, profile):
        runner = make_runner(vocab_list, profiles=profile_store, profile_id=profile.id)
        enter(runner, NodeType.MONSTER)
        gold_before = runner.player.gold
        win_fight(runner)

        assert runner.phase == GamePhase.REWARD
        assert runner.combat is None
        assert runner.run_state.battles_won == 1
        assert runner.player.gold == gold_before + runner.gold_reward.total
        assert len(runner.reward_options) == 3
        assert runner.run_state.hand == []
        assert profile_store.load_run(profile.id, 0).phase == GamePhase.REWARD

    def test_burning_blood_heals_after_victory(self, vocab_list):
        runner = make_runner(vocab_list)
        runner.player.relics.append("burning_blood")
        enter(runner, NodeType.MONSTER)
        runner.player.hp = 30
        runner.combat.enemy.intent = EnemyIntent(IntentType.DEFEND, 5)
        win_fight(runner)
        assert runner.player.hp == 36

    def test_elite_drops_relic(self, vocab_list):
        runner = make_runner(vocab_list)
        enter(runner, NodeType.ELITE)
        assert runner.combat.enemy.type == EnemyType.ELITE
        win_fight(runner)
        assert runner.reward_relic is not None
        assert runner.player.has_relic(runner.reward_relic.id)
        assert runner.get_observation()["reward"]["relic"]["id"] == runner.reward_relic.id

    def test_choose_reward(self, vocab_list):
        runner = make_runner(vocab_list)
        enter(runner, NodeType.MONSTER)
        win_fight(runner)
        picked = runner.reward_options[1]
        assert not runner.choose_reward(7)
        assert runner.take_action({"type": "reward", "index": 1})["success"]
        assert runner.run_state.deck[-1] == picked
        assert runner.phase == GamePhase.MAP
        assert all(get_node(runner.run_state.game_map, n).y == 1 for n in runner.available_nodes())

    def test_skip_reward(self, vocab_list):
        runner = make_runner(vocab_list)
        enter(runner, NodeType.MONSTER)
        win_fight(runner)
        assert runner.choose_reward(None)
        assert len(runner.run_state.deck) == 12

    def test_last_stand_survival(self, vocab_list):
        runner = make_runner(vocab_list)
        enter(runner, NodeType.MONSTER)
        lose_to_last_stand(runner)
        assert runner.get_available_actions() == [{"type": "last_stand"}]
        for _ in range(3):
            word = runner.combat.current_last_stand_word.word
            assert runner.take_action({"type": "last_stand", "text": word})["success"]
        assert runner.phase == GamePhase.COMBAT
        assert runner.player.hp == 21

    def test_defeat(self, vocab_list, profile_store, profile):
        runner = make_runner(vocab_list, profiles=profile_store, profile_id=profile.id)
        enter(runner, NodeType.MONSTER)
        lose_to_last_stand(runner)
        assert not runner.submit_last_stand("definitely wrong")
        assert runner.phase == GamePhase.GAME_OVER
        assert runner.game_over
        assert runner.get_available_actions() == []
        stored = profile_store.get_profile(profile.id)
        assert set(stored.mastery_progress) == {v.id for v in vocab_list}


# =============================================================================
# Rooms
# =============================================================================


class TestRooms:

    def test_treasure(self, vocab_list):
        runner = make_runner(vocab_list)
        enter(runner, NodeType.TREASURE)
        assert runner.phase == GamePhase.REWARD
        assert runner.player.gold == 50
        assert runner.gold_reward.total == 50
        assert len(runner.reward_options) == 3

    def test_rest_sleep(self, vocab_list):
        runner = make_runner(vocab_list)
        runner.player.hp = 20
        enter(runner, NodeType.CAMPFIRE)
        assert runner.phase == GamePhase.REST
        assert {"type": "rest", "option": "sleep"} in runner.get_available_actions()
        assert runner.take_action({"type": "rest", "option": "sleep"})["success"]
        assert runner.player.hp == 41
        assert runner.phase == GamePhase.MAP

    def test_rest_smith(self, vocab_list):
        runner = make_runner(vocab_list)
        enter(runner, NodeType.CAMPFIRE)
        assert runner.rest(sleep=False)
        assert runner.pending_removal == "smith"
        target = runner.run_state.deck[0]
        assert runner.get_available_actions()[0] == {"type": "remove_card", "card": target.instance_id}
        assert not runner.remove_card("missing")
        assert runner.remove_card(target.instance_id)
        assert len(runner.run_state.deck) == 11
        assert runner.phase == GamePhase.MAP

    def test_shop_purchase_and_purge(self, vocab_list):
        runner = make_runner(vocab_list)
        runner.player.gold = 500
        enter(runner, NodeType.SHOP)
        assert runner.phase == GamePhase.SHOP
        assert runner.get_observation()["shop"] is not None

        assert runner.buy(REMOVE_ITEM_ID)
        assert runner.pending_removal == "shop"
        assert not runner.buy(REMOVE_ITEM_ID)
        assert runner.remove_card(runner.run_state.deck[0].instance_id)
        assert runner.phase == GamePhase.SHOP
        assert len(runner.run_state.deck) == 11

        assert runner.take_action({"type": "leave_shop"})["success"]
        assert runner.phase == GamePhase.MAP
        assert runner.run_state.shop_state is None

    def test_shop_too_poor(self, vocab_list):
        runner = make_runner(vocab_list)
        enter(runner, NodeType.SHOP)
        assert runner.get_available_actions() == [{"type": "leave_shop"}]
        assert not runner.buy(REMOVE_ITEM_ID)
        assert runner.last_shop_result.message == "Not enough gold"

    def test_event(self, vocab_list):
        runner = make_runner(vocab_list)
        enter(runner, NodeType.EVENT)
        assert runner.phase == GamePhase.EVENT
        assert runner.current_event is not None
        choice = runner.get_available_actions()[0]["choice"]
        response = runner.take_action({"type": "event", "choice": choice})
        assert response["success"]
        assert "message" in response["event"]
        assert runner.phase == GamePhase.MAP
        assert runner.get_observation()["lastEvent"] is not None


# =============================================================================
# Acts
# =============================================================================


class TestActs:

    def test_boss_leads_to_act_transition(self, vocab_list, profile_store, profile):
        runner = make_runner(vocab_list, profiles=profile_store, profile_id=profile.id)
        enter(runner, NodeType.BOSS)
        assert runner.combat.enemy.type == EnemyType.BOSS
        win_fight(runner)
        assert runner.phase == GamePhase.ACT_TRANSITION
        assert runner.reward_shards == 230
        stored = profile_store.get_profile(profile.id)
        assert stored.currency >= 230
        assert stored.acts_cleared == [1]

    def test_next_act(self, vocab_list):
        runner = make_runner(vocab_list)
        enter(runner, NodeType.BOSS)
        win_fight(runner)
        runner.player.hp = 10
        assert runner.take_action({"type": "next_act"})["success"]
        assert runner.run_state.act == 2
        assert runner.player.hp == 45
        assert runner.phase == GamePhase.MAP
        assert runner.run_state.visited_node_ids == []
        assert runner.available_nodes()

    def test_final_act_wins(self, vocab_list, profile_store, profile):
        runner = make_runner(vocab_list, profiles=profile_store, profile_id=profile.id)
        runner.run_state.act = MAX_ACT
        enter(runner, NodeType.BOSS)
        win_fight(runner)
        assert runner.next_act()
        assert runner.phase == GamePhase.VICTORY
        assert runner.game_over
        assert profile_store.get_profile(profile.id).stats.wins == 1

    def test_next_act_only_in_transition(self, vocab_list):
        assert not make_runner(vocab_list).next_act()


# =============================================================================
# Saving and loading
# =============================================================================


class TestSaveLoad:

    def test_save_requires_profile(self, vocab_list):
        assert not make_runner(vocab_list).save(1)

    def test_save_and_load_on_map(self, vocab_list, profile_store, profile):
        runner = make_runner(vocab_list, profiles=profile_store, profile_id=profile.id)
        assert runner.take_action({"type": "save", "slot": 2, "name": "before"})["success"]
        loaded = GameRunner.load(profile_store, profile.id, 2, rng=random.Random(1))
        assert loaded.phase == GamePhase.MAP
        assert loaded.run_state.save_name == "before"
        assert loaded.available_nodes() == runner.available_nodes()
        assert [c.instance_id for c in loaded.run_state.deck] == [
            c.instance_id for c in runner.run_state.deck
        ]
        assert [v.word for v in loaded.vocab_list] == [v.word for v in vocab_list]

    def test_load_empty_slot(self, profile_store, profile):
        assert GameRunner.load(profile_store, profile.id, 3) is None

    def test_invalid_slot_raises(self, vocab_list, profile_store, profile):
        runner = make_runner(vocab_list, profiles=profile_store, profile_id=profile.id)
        with pytest.raises(InvalidSlotError):
            runner.take_action({"type": "save", "slot": 9})

    def test_load_mid_combat(self, vocab_list, profile_store, profile):
        runner = make_runner(vocab_list, profiles=profile_store, profile_id=profile.id)
        enter(runner, NodeType.MONSTER)
        runner.save(1)

        loaded = GameRunner.load(profile_store, profile.id, 1, rng=random.Random(2))
        assert loaded.phase == GamePhase.COMBAT
        assert loaded.combat is not None
        assert [c.instance_id for c in loaded.combat.state.hand] == [
            c.instance_id for c in runner.combat.state.hand
        ]
        assert loaded.combat.enemy.hp == runner.combat.enemy.hp
        card = loaded.combat.playable_cards()[0]
        assert loaded.begin_card(card.instance_id)

    def test_pack_run_loads_pack_words(self, scholar_words, profile_store, profile):
        runner = make_runner(scholar_words, pack_id="scholar",
                             profiles=profile_store, profile_id=profile.id)
        runner.save(4)
        loaded = GameRunner.load(profile_store, profile.id, 4)
        assert loaded.pack_id == "scholar"
        assert len(loaded.vocab_list) == len(scholar_words)


# =============================================================================
# Tutorial and action interface
# =============================================================================


class TestTutorial:

    def test_tutorial_fight(self, vocab_list, profile_store, profile):
        runner = make_runner(vocab_list, profiles=profile_store, profile_id=profile.id)
        deck_before = [c.instance_id for c in runner.run_state.deck]
        assert runner.take_action({"type": "tutorial"})["success"]
        assert runner.combat.enemy.id == "dummy"
        assert sorted(c.word for c in runner.combat.state.hand) == ["Calm", "Hold", "Safe", "Stay", "Zap"]
        assert not runner.save(1)

        win_fight(runner)
        assert runner.phase == GamePhase.MAP
        assert not runner.tutorial
        assert runner.run_state.battles_won == 0
        assert [c.instance_id for c in runner.run_state.deck] == deck_before
        assert profile_store.get_profile(profile.id).has_completed_tutorial

    def test_tutorial_only_from_map(self, vocab_list):
        runner = make_runner(vocab_list)
        enter(runner, NodeType.MONSTER)
        assert not runner.start_tutorial()


class TestActionInterface:

    def test_unknown_action(self, vocab_list):
        response = make_runner(vocab_list).take_action({"type": "dance"})
        assert not response["success"]
        assert "Unknown action" in response["error"]

    def test_malformed_action(self, vocab_list):
        response = make_runner(vocab_list).take_action({"type": "select_node"})
        assert not response["success"]
        assert "Malformed" in response["error"]

    def test_rejected_action_reports_phase(self, vocab_list):
        response = make_runner(vocab_list).take_action({"type": "end_turn"})
        assert response == {"success": False, "phase": "MAP"}
