"""
Game Runner - orchestrator for a Spire Speller run.

This module provides the GameRunner class that manages a run from the first
map node to victory or game over:
- Run initialization from a word list, profile unlocks and a map seed
- Map navigation and room dispatch (combat, event, shop, rest, treasure)
- Combat through CombatEngine, with proficiency changes flowing back into
  the run's word list
- Victory rewards, relic drops, shards and the slot-0 auto-save
- Act transitions and the three-act victory
- A dict-based action interface used by the CLI and the web server

Usage:
    runner = GameRunner(get_pack("scholar").vocab_list(), pack_id="scholar", seed=42)
    runner.select_node(runner.available_nodes()[0])
    # OR the action interface:
    runner.take_action({"type": "select_node", "node_id": "node_0_3"})
    observation = runner.get_observation()
"""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Dict, List, Optional

from .audio import AudioSink, Bgm, SafeAudio, Sfx
from .combat_engine import CombatEngine, CombatPhase
from .content.cards import Card
from .content.enemies import EnemyType
from .content.events import GameEvent, get_event
from .content.packs import get_pack
from .content.relics import BURNING_BLOOD, Relic
from .content.sanctum import starting_player
from .content.vocabulary import Vocabulary
from .errors import SpellerError
from .generation.deck import build_tutorial_deck, generate_session_deck, get_random_reward_options
from .generation.dungeon import cognitive_balance_deck, create_training_dummy, generate_enemy_for_floor
from .generation.map import (
    COMBAT_NODE_TYPES, MapNode, NodeType, available_nodes, generate_map, get_node, select_node,
)
from .generation.rewards import GoldReward, boss_shard_reward, compute_gold_reward, roll_relic_drop
from .handlers.event_handler import EventApplication, EventHandler
from .handlers.rooms import RestHandler, TreasureHandler
from .handlers.shop_handler import ShopHandler, ShopResult
from .persistence.profiles import AUTO_SAVE_SLOT, ProfileStore, UserProfile
from .state.combat import CombatState
from .state.run import GamePhase, RunState

logger = logging.getLogger(__name__)

MAX_ACT = 3
ACT_TRANSITION_HEAL = 0.5
MASTERY_SHARD = 1

CUSTOM_PACK_ID = "custom"


def new_map_seed() -> int:
    return int(time.time() * 1000)


# =============================================================================
# Game Runner
# =============================================================================

class GameRunner:
    """
    One run of the game.

    The runner owns its RunState. ``vocab_list`` is the run's word list; it
    is updated in place as words are reviewed in combat and synced to the
    profile when the run ends.
    """

    def __init__(
        self,
        vocab_list: List[Vocabulary],
        pack_id: Optional[str] = None,
        seed: Optional[int] = None,
        profiles: Optional[ProfileStore] = None,
        profile_id: Optional[str] = None,
        audio: Optional[AudioSink] = None,
        rng: Optional[random.Random] = None,
        run_state: Optional[RunState] = None,
    ):
        self.profiles = profiles
        self.profile_id = profile_id
        self.audio = SafeAudio(audio)
        self.rng = rng or random.Random()
        self.pack_id = pack_id or CUSTOM_PACK_ID

        profile = self._profile()
        if profile is not None and run_state is None:
            vocab_list = ProfileStore.apply_mastery_to_vocab(profile, vocab_list)
        self.vocab_list: List[Vocabulary] = list(vocab_list)

        # Combat
        self.combat: Optional[CombatEngine] = None
        self.tutorial = False
        self._shards_granted = 0

        # Rewards (after a won fight or a chest)
        self.reward_options: List[Card] = []
        self.gold_reward: Optional[GoldReward] = None
        self.reward_relic: Optional[Relic] = None
        self.reward_shards = 0

        # Rooms
        self.pending_removal: Optional[str] = None  # "smith" | "shop"
        self.last_event: Optional[EventApplication] = None
        self.last_shop_result: Optional[ShopResult] = None

        if run_state is not None:
            self.run_state = run_state
            self._resume()
        else:
            self.run_state = self._new_run(seed, profile)

    # =========================================================================
    # Setup
    # =========================================================================

    def _profile(self) -> Optional[UserProfile]:
        if self.profiles is None or self.profile_id is None:
            return None
        return self.profiles.get_profile(self.profile_id)

    def _new_run(self, seed: Optional[int], profile: Optional[UserProfile]) -> RunState:
        map_seed = seed if seed is not None else new_map_seed()
        player = starting_player(profile.unlocks if profile else ())
        run_state = RunState(
            player=player,
            map_seed=map_seed,
            deck=generate_session_deck(self.vocab_list, rng=self.rng),
            game_map=generate_map(map_seed),
            vocab_pack_id=self.pack_id,
            custom_vocab_list=self.vocab_list if self.pack_id == CUSTOM_PACK_ID else None,
        )
        if profile is not None:
            self.profiles.record_run_started(profile.id)
        logger.info("New run: pack=%s seed=%d hp=%d deck=%d",
                    self.pack_id, map_seed, player.hp, len(run_state.deck))
        self.audio.play_bgm(Bgm.MAP)
        return run_state

    @classmethod
    def load(
        cls,
        profiles: ProfileStore,
        profile_id: str,
        slot: int,
        audio: Optional[AudioSink] = None,
        rng: Optional[random.Random] = None,
    ) -> Optional["GameRunner"]:
        """Resume a saved run. None if the slot is empty."""
        run_state = profiles.load_run(profile_id, slot)
        if run_state is None:
            return None
        profile = profiles.get_profile(profile_id)

        if run_state.custom_vocab_list is not None:
            vocab_list = run_state.custom_vocab_list
        else:
            pack = get_pack(run_state.vocab_pack_id or "")
            vocab_list = pack.vocab_list() if pack else []
        if profile is not None:
            vocab_list = ProfileStore.apply_mastery_to_vocab(profile, vocab_list)

        logger.info("Loaded run from slot %d of profile %s", slot, profile_id)
        return cls(vocab_list, pack_id=run_state.vocab_pack_id, profiles=profiles,
                   profile_id=profile_id, audio=audio, rng=rng, run_state=run_state)

    def _resume(self) -> None:
        """Rebuild transient state for a loaded RunState."""
        rs = self.run_state
        if rs.phase in (GamePhase.COMBAT, GamePhase.LAST_STAND) and rs.current_enemy is not None:
            state = CombatState(
                player=rs.player,
                enemy=rs.current_enemy,
                hand=list(rs.hand),
                draw_pile=list(rs.draw_pile),
                discard_pile=list(rs.discard_pile),
                turn=rs.turn_count,
            )
            self.combat = CombatEngine(state, vocab_list=self.vocab_list, rng=self.rng)
            self.combat.resume()
            self._sync_combat()
        elif rs.phase == GamePhase.REWARD:
            self.reward_options = get_random_reward_options(self.vocab_list, rng=self.rng)
        elif rs.phase == GamePhase.SHOP and rs.shop_state is None:
            ShopHandler.create_shop(rs, self.vocab_list, self.rng)
        elif rs.phase == GamePhase.EVENT and not rs.active_event_id:
            EventHandler.enter_event(rs, self.rng)

    # =========================================================================
    # State Access
    # =========================================================================

    @property
    def phase(self) -> GamePhase:
        return self.run_state.phase

    @property
    def player(self):
        return self.run_state.player

    @property
    def game_over(self) -> bool:
        return self.phase in (GamePhase.GAME_OVER, GamePhase.VICTORY)

    @property
    def current_event(self) -> Optional[GameEvent]:
        if self.run_state.active_event_id is None:
            return None
        return get_event(self.run_state.active_event_id)

    def available_nodes(self) -> List[str]:
        return [n.id for n in available_nodes(self.run_state.game_map)]

    def current_floor(self) -> int:
        node = get_node(self.run_state.game_map, self.run_state.current_map_node_id)
        return node.y if node else 0

    def save_name(self) -> str:
        pack = get_pack(self.pack_id)
        title = pack.name if pack else "Adventure"
        return f"{title} - Act {self.run_state.act} - Floor {self.current_floor()}"

    # =========================================================================
    # Map Navigation
    # =========================================================================

    def select_node(self, node_id: str) -> bool:
        """Travel to an available node and enter its room."""
        rs = self.run_state
        if rs.phase != GamePhase.MAP:
            logger.debug("select_node rejected in phase %s", rs.phase.value)
            return False
        updated = select_node(rs.game_map, node_id)
        if updated is None:
            logger.debug("Node %s is not available", node_id)
            return False

        rs.game_map = updated
        rs.visit(node_id)
        node = get_node(rs.game_map, node_id)
        self._enter_room(node)
        return True

    def _enter_room(self, node: MapNode) -> None:
        if node.type in COMBAT_NODE_TYPES:
            self._enter_combat(node)
        elif node.type == NodeType.TREASURE:
            self._enter_treasure()
        elif node.type == NodeType.CAMPFIRE:
            self.run_state.phase = GamePhase.REST
            self.audio.play_bgm(Bgm.MEDITATION)
        elif node.type == NodeType.SHOP:
            ShopHandler.create_shop(self.run_state, self.vocab_list, self.rng)
            self.run_state.phase = GamePhase.SHOP
            self.audio.play_bgm(Bgm.SHOP)
        elif node.type == NodeType.EVENT:
            self.last_event = None
            EventHandler.enter_event(self.run_state, self.rng)
            self.run_state.phase = GamePhase.EVENT

    def _enter_treasure(self) -> None:
        result = TreasureHandler.open_chest(self.run_state)
        self.gold_reward = GoldReward(base=result.gold, bounty=0, bounty_count=0, perfect=0,
                                      is_perfect=False, multiplier=1, total=result.gold)
        self.reward_relic = None
        self.reward_shards = 0
        self.reward_options = get_random_reward_options(self.vocab_list, rng=self.rng)
        self.run_state.phase = GamePhase.REWARD
        self.audio.play_sfx(Sfx.PURCHASE)

    # =========================================================================
    # Combat
    # =========================================================================

    def _enter_combat(self, node: Optional[MapNode]) -> None:
        rs = self.run_state
        if self.tutorial or node is None:
            enemy = create_training_dummy()
            draw_pile = build_tutorial_deck()
        else:
            enemy = generate_enemy_for_floor(rs.act, node.y, node.type, self.rng)
            rs.deck = cognitive_balance_deck(rs.deck, self.vocab_list, enemy.tier, self.rng)
            draw_pile = list(rs.deck)
            self.rng.shuffle(draw_pile)

        state = CombatState(player=rs.player, enemy=enemy, draw_pile=draw_pile)
        self.combat = CombatEngine(state, vocab_list=self.vocab_list, rng=self.rng)
        self._shards_granted = 0
        self.combat.start_combat()

        rs.current_enemy = enemy
        rs.phase = GamePhase.COMBAT
        self._snapshot_combat()
        logger.info("Combat: %s (%s, %d HP) on act %d floor %d",
                    enemy.name, enemy.tier.value, enemy.hp, rs.act, node.y if node else 0)
        self.audio.play_bgm(Bgm.BOSS if enemy.type == EnemyType.BOSS else Bgm.BATTLE)

    def start_tutorial(self) -> bool:
        """Training fight against the dummy with the fixed five-card deck."""
        if self.run_state.phase != GamePhase.MAP:
            return False
        self.tutorial = True
        self._enter_combat(None)
        return True

    def _snapshot_combat(self) -> None:
        """Mirror the engine's piles into the RunState for saving."""
        if self.combat is None:
            return
        rs = self.run_state
        state = self.combat.state
        rs.hand = list(state.hand)
        rs.draw_pile = list(state.draw_pile)
        rs.discard_pile = list(state.discard_pile)
        rs.turn_count = state.turn
        rs.current_enemy = state.enemy
        rs.is_player_turn = self.combat.phase == CombatPhase.PLAYER_TURN

    def _combat_call(self, fn: Callable[[], Any]) -> Any:
        if self.combat is None or self.phase not in (GamePhase.COMBAT, GamePhase.LAST_STAND):
            return False
        result = fn()
        self._sync_combat()
        return result

    def _sync_combat(self) -> None:
        """Propagate the engine's phase to the run after every combat action."""
        engine = self.combat
        self._grant_mastery_shards()
        self._snapshot_combat()
        if engine.phase == CombatPhase.LAST_STAND:
            if self.run_state.phase != GamePhase.LAST_STAND:
                self.audio.stop_bgm()
            self.run_state.phase = GamePhase.LAST_STAND
        elif engine.phase == CombatPhase.VICTORY:
            self._on_victory()
        elif engine.phase == CombatPhase.DEFEAT:
            self._on_defeat()
        else:
            self.run_state.phase = GamePhase.COMBAT

    def _grant_mastery_shards(self) -> None:
        mastered = self.combat.mastered_words
        new = len(mastered) - self._shards_granted
        if new <= 0:
            return
        self._shards_granted = len(mastered)
        if self.profiles is not None and self.profile_id is not None:
            self.profiles.add_currency(self.profile_id, new * MASTERY_SHARD)
        logger.info("Mastered %s (+%d shards)", ", ".join(mastered[-new:]), new * MASTERY_SHARD)

    def begin_card(self, instance_id: str) -> bool:
        def action():
            ok = self.combat.begin_card(instance_id)
            if ok and self.combat.active_card is not None:
                self.audio.speak_word(self.combat.active_card.word)
            return ok
        return bool(self._combat_call(action))

    def submit_spelling(self, text: str, used_hint: bool = False,
                        elapsed_seconds: Optional[float] = None) -> bool:
        def action():
            if self.combat.phase != CombatPhase.RESOLVING_CARD:
                return False
            correct = self.combat.submit_spelling(text, used_hint=used_hint,
                                                  elapsed_seconds=elapsed_seconds)
            self.audio.play_sfx(Sfx.SUCCESS if correct else Sfx.ERROR)
            return correct
        return bool(self._combat_call(action))

    def cancel_card(self) -> bool:
        return bool(self._combat_call(self.combat.cancel_card if self.combat else lambda: False))

    def time_out(self) -> bool:
        return bool(self._combat_call(self.combat.time_out if self.combat else lambda: False))

    def end_turn(self) -> bool:
        return bool(self._combat_call(self.combat.end_turn if self.combat else lambda: False))

    def submit_last_stand(self, text: str) -> bool:
        if self.phase != GamePhase.LAST_STAND:
            return False
        return bool(self._combat_call(lambda: self.combat.submit_last_stand(text)))

    def _clear_combat(self) -> None:
        rs = self.run_state
        rs.hand = []
        rs.draw_pile = []
        rs.discard_pile = []
        rs.current_enemy = None
        rs.turn_count = 1
        self.combat = None

    def _on_victory(self) -> None:
        rs = self.run_state
        enemy = self.combat.enemy
        result = self.combat.get_result()
        self.audio.play_sfx(Sfx.VICTORY)

        if self.tutorial:
            self.tutorial = False
            self._clear_combat()
            if self.profiles is not None and self.profile_id is not None:
                self.profiles.complete_tutorial(self.profile_id)
            rs.phase = GamePhase.MAP
            self.audio.play_bgm(Bgm.MAP)
            return

        player = rs.player
        if player.has_relic(BURNING_BLOOD.id):
            player.heal(BURNING_BLOOD.value)

        self.gold_reward = compute_gold_reward(rs.act, rs.battles_won, result.stats, rng=self.rng)
        player.gold += self.gold_reward.total

        self.reward_relic = None
        if enemy.type in (EnemyType.ELITE, EnemyType.BOSS):
            self.reward_relic = roll_relic_drop(player.relics, rng=self.rng)
            if self.reward_relic is not None:
                player.add_relic(self.reward_relic.id)

        self.reward_shards = 0
        if enemy.type == EnemyType.BOSS:
            profile = self._profile()
            acts_cleared = profile.acts_cleared if profile else []
            self.reward_shards = boss_shard_reward(rs.act, acts_cleared)
            if profile is not None:
                self.profiles.record_act_cleared(profile.id, rs.act)
                self.profiles.add_currency(profile.id, self.reward_shards)

        rs.battles_won += 1
        self._clear_combat()

        if enemy.type == EnemyType.BOSS:
            self.reward_options = []
            rs.phase = GamePhase.ACT_TRANSITION
        else:
            self.reward_options = get_random_reward_options(self.vocab_list, rng=self.rng)
            rs.phase = GamePhase.REWARD

        logger.info("Victory over %s: +%d gold%s, %d turns",
                    enemy.name, self.gold_reward.total,
                    f", relic {self.reward_relic.id}" if self.reward_relic else "",
                    result.turns)
        self.save(AUTO_SAVE_SLOT)

    def _on_defeat(self) -> None:
        self._clear_combat()
        self.tutorial = False
        self.run_state.phase = GamePhase.GAME_OVER
        logger.info("Game over on act %d after %d battles", self.run_state.act, self.run_state.battles_won)
        self._sync_mastery()
        self.audio.play_bgm(Bgm.GAME_OVER)

    def _sync_mastery(self) -> None:
        if self.profiles is not None and self.profile_id is not None:
            self.profiles.sync_mastery(self.profile_id, self.vocab_list)

    # =========================================================================
    # Rewards
    # =========================================================================

    def choose_reward(self, index: Optional[int]) -> bool:
        """Take one of the reward cards (None skips) and return to the map."""
        if self.phase != GamePhase.REWARD:
            return False
        if index is not None:
            if not 0 <= index < len(self.reward_options):
                return False
            self.run_state.deck.append(self.reward_options[index])
        self.reward_options = []
        self._proceed_to_map()
        return True

    def _proceed_to_map(self) -> None:
        self.run_state.phase = GamePhase.MAP
        self.reward_relic = None
        self.audio.play_bgm(Bgm.MAP)
        self.save(AUTO_SAVE_SLOT)

    # =========================================================================
    # Rest site
    # =========================================================================

    def rest(self, sleep: bool) -> bool:
        if self.phase != GamePhase.REST or self.pending_removal is not None:
            return False
        if sleep:
            result = RestHandler.sleep(self.run_state)
            if result is None:
                return False
            self.audio.play_sfx(Sfx.BUFF)
            self._proceed_to_map()
            return True
        if RestHandler.smith(self.run_state) is None:
            return False
        self.pending_removal = "smith"
        return True

    def remove_card(self, instance_id: str) -> bool:
        """Finish a pending removal (smith or the shop's purge service)."""
        if self.pending_removal is None:
            return False
        if self.run_state.remove_card(instance_id) is None:
            return False
        source = self.pending_removal
        self.pending_removal = None
        self.audio.play_sfx(Sfx.ERROR)
        if source == "smith":
            self._proceed_to_map()
        return True

    # =========================================================================
    # Shop
    # =========================================================================

    def buy(self, item_id: str) -> bool:
        if self.phase != GamePhase.SHOP or self.pending_removal is not None:
            return False
        result = ShopHandler.buy(self.run_state, item_id)
        self.last_shop_result = result
        if not result.success:
            self.audio.play_sfx(Sfx.ERROR)
            return False
        self.audio.play_sfx(Sfx.PURCHASE)
        if result.requires_card_selection:
            self.pending_removal = "shop"
        return True

    def leave_shop(self) -> bool:
        if self.phase != GamePhase.SHOP:
            return False
        self.pending_removal = None
        self.run_state.shop_state = None
        self._proceed_to_map()
        return True

    # =========================================================================
    # Events
    # =========================================================================

    def choose_event(self, choice_id: str) -> Optional[EventApplication]:
        if self.phase != GamePhase.EVENT:
            return None
        applied = EventHandler.choose(self.run_state, choice_id, self.vocab_list, self.rng)
        if applied is None:
            return None
        self.last_event = applied
        self._proceed_to_map()
        return applied

    # =========================================================================
    # Act transition
    # =========================================================================

    def next_act(self) -> bool:
        rs = self.run_state
        if rs.phase != GamePhase.ACT_TRANSITION:
            return False
        if rs.act >= MAX_ACT:
            rs.phase = GamePhase.VICTORY
            if self.profiles is not None and self.profile_id is not None:
                self.profiles.record_win(self.profile_id)
            self._sync_mastery()
            logger.info("Run won after %d battles", rs.battles_won)
            return True

        rs.act += 1
        rs.player.heal(int(rs.player.max_hp * ACT_TRANSITION_HEAL))
        rs.map_seed = new_map_seed()
        rs.game_map = generate_map(rs.map_seed)
        rs.current_map_node_id = None
        rs.visited_node_ids = []
        logger.info("Entering act %d (seed %d)", rs.act, rs.map_seed)
        self._proceed_to_map()
        return True

    # =========================================================================
    # Saving
    # =========================================================================

    def save(self, slot: int, name: Optional[str] = None) -> bool:
        """Write the run to a save slot. False without a profile."""
        if self.profiles is None or self.profile_id is None or self.tutorial:
            return False
        self.run_state.save_name = name or self.save_name()
        if self.run_state.custom_vocab_list is not None:
            self.run_state.custom_vocab_list = list(self.vocab_list)
        self.profiles.save_run(self.profile_id, slot, self.run_state)
        self._sync_mastery()
        return True

    # =========================================================================
    # Action Interface
    # =========================================================================

    def get_available_actions(self) -> List[Dict[str, Any]]:
        """Action dicts valid in the current phase."""
        rs = self.run_state
        phase = rs.phase
        if phase == GamePhase.MAP:
            return [{"type": "select_node", "node_id": n} for n in self.available_nodes()]
        if phase == GamePhase.COMBAT and self.combat is not None:
            if self.combat.phase == CombatPhase.RESOLVING_CARD:
                return [{"type": "spell"}, {"type": "cancel"}]
            actions = [{"type": "begin_card", "card": c.instance_id} for c in self.combat.playable_cards()]
            if self.combat.state.pending_action is not None:
                actions = [{"type": "begin_card", "card": c.instance_id} for c in self.combat.state.hand]
            actions.append({"type": "end_turn"})
            return actions
        if phase == GamePhase.LAST_STAND:
            return [{"type": "last_stand"}]
        if phase == GamePhase.REWARD:
            return [{"type": "reward", "index": i} for i in range(len(self.reward_options))] + \
                [{"type": "reward", "index": None}]
        if self.pending_removal is not None:
            return [{"type": "remove_card", "card": c.instance_id} for c in rs.deck]
        if phase == GamePhase.REST:
            return [{"type": "rest", "option": o} for o in RestHandler.get_options(rs)]
        if phase == GamePhase.SHOP:
            items = rs.shop_state.available_items() if rs.shop_state else []
            return [{"type": "buy", "item": i.id} for i in items if i.price <= rs.player.gold] + \
                [{"type": "leave_shop"}]
        if phase == GamePhase.EVENT:
            return [{"type": "event", "choice": c} for c in EventHandler.available_choices(rs)]
        if phase == GamePhase.ACT_TRANSITION:
            return [{"type": "next_act"}]
        return []

    def take_action(self, action: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute an action dict, e.g. ``{"type": "spell", "text": "apple"}``.

        Returns ``{"success": bool, ...}``; unknown or malformed actions fail
        without changing state.
        """
        kind = action.get("type")
        handlers: Dict[str, Callable[[], Any]] = {
            "select_node": lambda: self.select_node(action["node_id"]),
            "begin_card": lambda: self.begin_card(action["card"]),
            "spell": lambda: self.submit_spelling(
                action["text"], bool(action.get("hint", False)), action.get("elapsed")),
            "cancel": self.cancel_card,
            "time_out": self.time_out,
            "end_turn": self.end_turn,
            "last_stand": lambda: self.submit_last_stand(action["text"]),
            "reward": lambda: self.choose_reward(action.get("index")),
            "rest": lambda: self.rest(action.get("option") == "sleep"),
            "remove_card": lambda: self.remove_card(action["card"]),
            "buy": lambda: self.buy(action["item"]),
            "leave_shop": self.leave_shop,
            "event": lambda: self.choose_event(action["choice"]),
            "next_act": self.next_act,
            "save": lambda: self.save(int(action.get("slot", AUTO_SAVE_SLOT)), action.get("name")),
            "tutorial": self.start_tutorial,
        }
        handler = handlers.get(kind)
        if handler is None:
            return {"success": False, "error": f"Unknown action: {kind}"}
        try:
            outcome = handler()
        except SpellerError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            logger.debug("Malformed action %r: %s", action, e)
            return {"success": False, "error": f"Malformed action: {e}"}

        response: Dict[str, Any] = {"success": bool(outcome), "phase": self.phase.value}
        if isinstance(outcome, EventApplication):
            response["event"] = outcome.to_dict()
        return response

    # =========================================================================
    # Observation Interface
    # =========================================================================

    def get_observation(self) -> Dict[str, Any]:
        """JSON-serializable view of the run."""
        rs = self.run_state
        return {
            "phase": rs.phase.value,
            "act": rs.act,
            "floor": self.current_floor(),
            "battlesWon": rs.battles_won,
            "player": rs.player.to_dict(),
            "deck": [c.to_dict() for c in rs.deck],
            "map": {
                "seed": rs.map_seed,
                "currentNodeId": rs.current_map_node_id,
                "available": self.available_nodes(),
                "nodes": [n.to_dict() for n in rs.game_map],
            },
            "combat": self._build_combat_observation(),
            "reward": self._build_reward_observation() if rs.phase in (
                GamePhase.REWARD, GamePhase.ACT_TRANSITION) else None,
            "shop": rs.shop_state.to_dict() if rs.phase == GamePhase.SHOP and rs.shop_state else None,
            "event": self.current_event.to_dict() if self.current_event else None,
            "lastEvent": self.last_event.to_dict() if self.last_event else None,
            "pendingRemoval": self.pending_removal,
            "actions": self.get_available_actions(),
        }

    def _build_combat_observation(self) -> Optional[Dict[str, Any]]:
        if self.combat is None:
            return None
        engine = self.combat
        state = engine.state
        active = engine.active_card
        last_stand = engine.current_last_stand_word
        return {
            "phase": engine.phase.value,
            "turn": state.turn,
            "enemy": state.enemy.to_dict(),
            "hand": [c.to_dict() for c in state.hand],
            "drawPile": len(state.draw_pile),
            "discardPile": len(state.discard_pile),
            "exhaustPile": len(state.exhaust_pile),
            "pendingAction": state.pending_action.to_dict() if state.pending_action else None,
            "activeCard": active.to_dict() if active else None,
            "timeLimit": engine.time_limit,
            "stats": state.stats.to_dict(),
            "lastStand": {
                "word": last_stand.to_dict(),
                "index": engine.last_stand_index,
                "total": len(engine.last_stand_words),
            } if last_stand else None,
        }

    def _build_reward_observation(self) -> Dict[str, Any]:
        return {
            "gold": self.gold_reward.to_dict() if self.gold_reward else None,
            "relic": self.reward_relic.to_dict() if self.reward_relic else None,
            "shards": self.reward_shards,
            "cards": [c.to_dict() for c in self.reward_options],
        }
