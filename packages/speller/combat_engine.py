"""
Combat Engine - turn state machine for spelling combat.

This module runs one fight between the player and a single enemy:
1. Turn flow (player turn -> enemy turn -> next player turn)
2. Card casting gated by a spelling challenge (the "sticky" retry rule)
3. Card effect pipeline (damage, block, draw, banked energy, heal, cleanse)
4. Enemy intents, elite/boss card debuffs and poison ticking
5. Revival, Last Stand gauntlet and victory/defeat detection

Phases:
    PLAYER_TURN     hand is interactive
    RESOLVING_CARD  a spelling challenge is open for one card
    ENEMY_TURN      transient while the enemy acts
    LAST_STAND      player hit 0 HP; three words must be spelled to survive
    VICTORY / DEFEAT

Presentation delays of the game (end-turn animation, double-cast stagger)
are collapsed into synchronous calls; the order of state changes is kept.
Win/loss checks run explicitly at the end of card resolution and at the end
of the enemy turn.

Randomness here (reshuffles, debuff rolls, Last Stand picks) is not tied to
the map seed. Pass a ``random.Random`` for reproducible tests.

Usage:
    engine = CombatEngine(state, vocab_list=words)
    engine.start_combat()

    engine.begin_card(engine.state.hand[0].instance_id)
    engine.submit_spelling("hypothesis")
    engine.end_turn()

    if engine.is_combat_over():
        result = engine.get_result()
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .calc.damage import (
    HINT_MULT,
    REVIEW_MULT,
    apply_block,
    calculate_damage,
    lifesteal_heal,
    percent_of,
    scale_value,
)
from .content.cards import Card, CardDebuff, CardType
from .content.enemies import EnemyTier, IntentType, RITUAL, get_enemy_next_intent
from .content.relics import ANCHOR, BAG_OF_PREP, VAJRA
from .content.vocabulary import Vocabulary, update_proficiency
from .state.combat import CombatState, CombatStats, PendingAction, PendingActionType

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

HAND_LIMIT = 10
CARDS_PER_TURN = 5

RUSH_TIME_LIMIT = 20  # seconds

AFFIX_CHANCE = 0.3
AFFIX_TIERS = (EnemyTier.ELITE, EnemyTier.BOSS)
DEBUFF_INTENT_VULNERABLE = 2

REVIVE_HP_RATIO = 0.5
LAST_STAND_WORDS = 3
LAST_STAND_HP_RATIO = 0.3


def normalize_spelling(text: str) -> str:
    return text.strip().lower()


def is_correct_spelling(attempt: str, word: str) -> bool:
    """Case-insensitive comparison ignoring surrounding whitespace."""
    return normalize_spelling(attempt) == word.lower()


# =============================================================================
# COMBAT PHASE
# =============================================================================

class CombatPhase(Enum):
    """Current phase of combat."""
    NOT_STARTED = "NOT_STARTED"
    PLAYER_TURN = "PLAYER_TURN"
    RESOLVING_CARD = "RESOLVING_CARD"
    ENEMY_TURN = "ENEMY_TURN"
    LAST_STAND = "LAST_STAND"
    VICTORY = "VICTORY"
    DEFEAT = "DEFEAT"


# =============================================================================
# COMBAT RESULT
# =============================================================================

@dataclass
class CombatResult:
    """Result of a completed combat."""
    victory: bool
    hp_remaining: int
    turns: int
    cards_played: int
    damage_dealt: int
    stats: CombatStats
    mastered_words: List[str] = field(default_factory=list)
    cards_played_sequence: List[str] = field(default_factory=list)


# =============================================================================
# COMBAT LOG
# =============================================================================

@dataclass
class CombatLogEntry:
    """A single combat log entry."""
    turn: int
    event_type: str
    data: Dict[str, Any]


@dataclass
class CombatLog:
    """Structured event log of one fight."""
    entries: List[CombatLogEntry] = field(default_factory=list)

    def log(self, turn: int, event_type: str, **data):
        self.entries.append(CombatLogEntry(turn=turn, event_type=event_type, data=data))

    def get_events(self, event_type: str) -> List[CombatLogEntry]:
        return [e for e in self.entries if e.event_type == event_type]


# =============================================================================
# COMBAT ENGINE
# =============================================================================

class CombatEngine:
    """
    Spelling combat against one enemy.

    The engine mutates ``state`` in place. ``vocab_list`` is the run's word
    list; proficiency changes made during the fight are written back into
    it (entries are replaced, the list object is kept).
    """

    def __init__(
        self,
        state: CombatState,
        vocab_list: Optional[List[Vocabulary]] = None,
        rng: Optional[random.Random] = None,
        now_ms: Optional[int] = None,
    ):
        self.state = state
        self.vocab_list: List[Vocabulary] = vocab_list if vocab_list is not None else []
        self.rng = rng or random.Random()
        self.now_ms = now_ms

        self.phase = CombatPhase.NOT_STARTED
        self.log = CombatLog()

        self.active_card: Optional[Card] = None
        self.time_limit: Optional[int] = None

        self.last_stand_words: List[Vocabulary] = []
        self.last_stand_index = 0
        self._advance_after_last_stand = False

        self.temporary_strength = 0
        self.cards_played_sequence: List[str] = []
        self.damage_dealt = 0
        self.mastered_words: List[str] = []

    # =========================================================================
    # Core State Access
    # =========================================================================

    @property
    def player(self):
        return self.state.player

    @property
    def enemy(self):
        return self.state.enemy

    def is_combat_over(self) -> bool:
        return self.phase in (CombatPhase.VICTORY, CombatPhase.DEFEAT)

    def is_victory(self) -> bool:
        return self.phase == CombatPhase.VICTORY

    def is_defeat(self) -> bool:
        return self.phase == CombatPhase.DEFEAT

    @property
    def is_player_turn(self) -> bool:
        return self.phase == CombatPhase.PLAYER_TURN

    # =========================================================================
    # Combat Flow
    # =========================================================================

    def start_combat(self):
        """Reset per-fight player state, apply relics and draw the opening hand."""
        if self.phase != CombatPhase.NOT_STARTED:
            return

        player = self.player
        player.energy = player.max_energy
        player.block = 0
        player.status.weak = 0
        player.status.vulnerable = 0
        player.combo = 0
        player.next_turn_energy = 0

        self.state.turn = 1
        self.state.stats = CombatStats()
        self.state.pending_action = None
        self.state.hand = []
        self.state.discard_pile = []
        self.state.exhaust_pile = []
        self.state.wrong_answers = []

        self.log.log(0, "combat_start",
                     player_hp=player.hp,
                     enemy=self.enemy.name,
                     enemy_hp=self.enemy.hp)

        extra_draw = self._apply_combat_start_relics()

        self.phase = CombatPhase.PLAYER_TURN
        self.draw_cards(CARDS_PER_TURN + extra_draw)

    def resume(self):
        """Continue a saved fight from its piles without the combat-start reset."""
        if self.phase != CombatPhase.NOT_STARTED:
            return
        self.phase = CombatPhase.PLAYER_TURN
        self.log.log(self.state.turn, "resume", player_hp=self.player.hp, enemy_hp=self.enemy.hp)
        self._check_combat_end()

    def _apply_combat_start_relics(self) -> int:
        """Apply ON_COMBAT_START relics. Returns extra cards for the first draw."""
        player = self.player
        extra_draw = 0
        if player.has_relic(VAJRA.id):
            player.status.strength += VAJRA.value
            self.temporary_strength += VAJRA.value
            self.log.log(0, "relic", relic=VAJRA.id)
        if player.has_relic(ANCHOR.id):
            player.block += ANCHOR.value
            self.log.log(0, "relic", relic=ANCHOR.id)
        if player.has_relic(BAG_OF_PREP.id):
            extra_draw += BAG_OF_PREP.value
            self.log.log(0, "relic", relic=BAG_OF_PREP.id)
        return extra_draw

    def draw_cards(self, count: int) -> List[Card]:
        """
        Draw from the front of the draw pile, up to the hand limit.

        An empty draw pile takes the shuffled discard pile first.
        """
        drawn = []
        for _ in range(count):
            if len(self.state.hand) >= HAND_LIMIT:
                break
            if not self.state.draw_pile:
                if not self.state.discard_pile:
                    break
                self._reshuffle_discard()
            card = self.state.draw_pile.pop(0)
            self.state.hand.append(card)
            drawn.append(card)
        return drawn

    def _reshuffle_discard(self):
        pile = list(self.state.discard_pile)
        self.rng.shuffle(pile)
        self.state.draw_pile = pile
        self.state.discard_pile = []
        self.log.log(self.state.turn, "reshuffle", cards=len(pile))

    # =========================================================================
    # Card casting
    # =========================================================================

    def can_begin_card(self, card: Card) -> bool:
        if self.phase != CombatPhase.PLAYER_TURN:
            return False
        if self.state.pending_action is not None:
            return False
        if not card.can_cast:
            return False
        return self.player.energy >= card.energy_cost

    def playable_cards(self) -> List[Card]:
        return [c for c in self.state.hand if self.can_begin_card(c)]

    def begin_card(self, instance_id: str) -> bool:
        """
        Click a card in hand.

        During a discard selection the click discards the card. Otherwise,
        if the card can be cast, its spelling challenge opens.
        """
        idx = self.state.find_in_hand(instance_id)
        if idx is None:
            return False
        card = self.state.hand[idx]

        pending = self.state.pending_action
        if (pending is not None and pending.type == PendingActionType.DISCARD
                and self.phase == CombatPhase.PLAYER_TURN):
            self.state.hand.pop(idx)
            self.state.discard_pile.append(card)
            pending.count -= 1
            if pending.count <= 0:
                self.state.pending_action = None
            self.log.log(self.state.turn, "discard_select", card=card.word)
            return True

        if not self.can_begin_card(card):
            logger.debug("Rejected card %s (phase=%s, energy=%d)",
                         card.word, self.phase.value, self.player.energy)
            return False

        self.active_card = card
        self.time_limit = RUSH_TIME_LIMIT if card.debuff == CardDebuff.RUSH else None
        self.phase = CombatPhase.RESOLVING_CARD
        return True

    def cancel_card(self) -> bool:
        """Close the spelling challenge without casting."""
        if self.phase != CombatPhase.RESOLVING_CARD:
            return False
        self.active_card = None
        self.time_limit = None
        self.phase = CombatPhase.PLAYER_TURN
        return True

    def submit_spelling(self, attempt: str, used_hint: bool = False,
                        elapsed_seconds: Optional[float] = None) -> bool:
        """
        Answer the open spelling challenge. Returns True if the spelling was
        correct. A RUSH card answered after its time limit counts as a miss.
        """
        if self.phase != CombatPhase.RESOLVING_CARD or self.active_card is None:
            return False
        correct = is_correct_spelling(attempt, self.active_card.word)
        if (correct and self.time_limit is not None and elapsed_seconds is not None
                and elapsed_seconds > self.time_limit):
            correct = False
        self.resolve_spelling(correct, used_hint=used_hint)
        return correct

    def time_out(self) -> bool:
        """The RUSH timer of the open challenge ran out."""
        if self.phase != CombatPhase.RESOLVING_CARD or self.time_limit is None:
            return False
        self.resolve_spelling(False)
        return True

    def resolve_spelling(self, success: bool, used_hint: bool = False) -> Dict[str, Any]:
        """Apply the outcome of the open spelling challenge."""
        result: Dict[str, Any] = {"success": False}
        card = self.active_card
        if self.phase != CombatPhase.RESOLVING_CARD or card is None:
            return result

        self.active_card = None
        self.time_limit = None
        self.phase = CombatPhase.PLAYER_TURN

        idx = self.state.find_in_hand(card.instance_id)
        if idx is not None:
            self.state.hand.pop(idx)

        if success:
            result = self._cast_success(card, used_hint)
        else:
            result = self._cast_failure(card)

        self._check_combat_end()
        return result

    def _cast_success(self, card: Card, used_hint: bool) -> Dict[str, Any]:
        stats = self.state.stats
        player = self.player
        if used_hint:
            stats.hints += 1
        if card.is_review:
            stats.bounty_played += 1

        player.energy = max(0, player.energy - card.energy_cost)
        player.combo += 1

        multiplier = 1.0
        if used_hint:
            multiplier *= HINT_MULT
        if card.is_review:
            multiplier *= REVIEW_MULT

        mastered = False
        current = self._current_vocab(card.vocab)
        if not used_hint and (card.is_review or current.proficiency == 0):
            updated = update_proficiency(current, True, now=self.now_ms)
            self._store_vocab(updated)
            if current.proficiency < 5 <= updated.proficiency:
                mastered = True
                self.mastered_words.append(updated.word)

        if card.is_exhaust:
            self.state.exhaust_pile.append(card.with_debuff(None))
        else:
            self.state.discard_pile.append(card.with_debuff(None))

        self.cards_played_sequence.append(card.word)
        self.log.log(self.state.turn, "cast",
                     card=card.word, type=card.type.value,
                     multiplier=multiplier, hint=used_hint)

        casts = 2 if card.double_cast else 1
        effects: List[Dict[str, Any]] = []
        for _ in range(casts):
            effects.append(self.apply_card_effect(card, multiplier))
            if self.enemy.hp <= 0:
                break

        return {
            "success": True,
            "card": card.word,
            "multiplier": multiplier,
            "mastered": mastered,
            "effects": effects,
        }

    def _cast_failure(self, card: Card) -> Dict[str, Any]:
        self.state.stats.mistakes += 1
        self.player.combo = 0

        current = self._current_vocab(card.vocab)
        if all(v.id != current.id for v in self.state.wrong_answers):
            self.state.wrong_answers.append(current)

        # Sticky: the card is faced again on the next draw
        self.state.draw_pile.insert(0, card)

        self.log.log(self.state.turn, "miss", card=card.word)
        return {"success": False, "card": card.word, "sticky": True}

    def _current_vocab(self, vocab: Vocabulary) -> Vocabulary:
        for entry in self.vocab_list:
            if entry.id == vocab.id:
                return entry
        return vocab

    def _store_vocab(self, vocab: Vocabulary):
        for i, entry in enumerate(self.vocab_list):
            if entry.id == vocab.id:
                self.vocab_list[i] = vocab
                return

    # =========================================================================
    # Card effects
    # =========================================================================

    def apply_card_effect(self, card: Card, multiplier: float = 1.0) -> Dict[str, Any]:
        """
        Resolve one cast of a card, in fixed order:
        memory shield proc, damage or block, draw, banked energy, heal,
        cleanse, discard selection.
        """
        player = self.player
        enemy = self.enemy
        effects: Dict[str, Any] = {}

        if card.proc_chance and self.rng.random() < card.proc_chance:
            player.status.memory_shield += 1
            effects["memory_shield"] = 1

        value = scale_value(card.value, multiplier)
        dealt = 0

        if card.type == CardType.ATTACK or (card.type == CardType.HEAL and value > 0):
            damage = calculate_damage(
                value,
                strength=player.status.strength,
                weak=player.status.weak > 0,
                vuln=enemy.status.vulnerable > 0,
            )
            dealt, enemy.block = apply_block(damage, enemy.block)
            enemy.hp -= dealt
            self.damage_dealt += dealt
            effects["damage"] = dealt
            if card.apply_debuff:
                enemy.status.vulnerable += 1
                effects["vulnerable"] = 1
        elif card.type == CardType.DEFENSE:
            player.block += value
            effects["block"] = value

        if card.draw_effect:
            effects["drawn"] = len(self.draw_cards(card.draw_effect))

        if card.energy_next_turn:
            player.next_turn_energy += card.energy_next_turn
            effects["energy_next_turn"] = card.energy_next_turn

        if card.heal_value or card.lifesteal:
            heal = card.heal_value
            if card.is_rebirth:
                heal = percent_of(player.max_hp, card.heal_value / 100)
            if card.lifesteal:
                heal += lifesteal_heal(dealt)
            if heal > 0:
                effects["heal"] = player.heal(heal)

        if card.cleanse_debuff:
            player.status.clear_debuffs()
            effects["cleanse"] = True

        if card.discard_effect > 0:
            self.state.pending_action = PendingAction(PendingActionType.DISCARD, card.discard_effect)
            effects["discard"] = card.discard_effect

        self.log.log(self.state.turn, "effect", card=card.word, **effects)
        return effects

    # =========================================================================
    # End of turn / enemy turn
    # =========================================================================

    def end_turn(self) -> bool:
        """End the player turn: discard, then the enemy acts."""
        if self.phase != CombatPhase.PLAYER_TURN:
            return False

        self.state.pending_action = None
        retained = []
        for card in self.state.hand:
            if card.retain:
                retained.append(card)
            else:
                self.state.discard_pile.append(card.with_debuff(None))
        self.state.hand = retained
        guard = self.player.block
        self.player.block = 0
        self.log.log(self.state.turn, "end_turn", retained=len(retained), block=guard)

        self.resolve_enemy_turn(guard)
        return True

    def resolve_enemy_turn(self, guard: int = 0):
        """
        Enemy turn: debuff roll, intent, poison, then checks.

        ``guard`` is the block the player ended the turn with; the player's
        block is already cleared when the enemy acts.
        """
        self.phase = CombatPhase.ENEMY_TURN
        enemy = self.enemy
        player = self.player
        turn = self.state.turn
        intent = enemy.intent

        if enemy.tier in AFFIX_TIERS and self.state.hand and self.rng.random() < AFFIX_CHANCE:
            self._apply_random_card_debuff()

        if intent.type == IntentType.ATTACK:
            self._enemy_attack(intent.value, guard)
        elif intent.type == IntentType.DEFEND:
            enemy.block += intent.value
        elif intent.type == IntentType.BUFF:
            if intent.description == RITUAL:
                enemy.status.ritual += intent.value
            else:
                enemy.status.strength += intent.value
        elif intent.type == IntentType.DEBUFF:
            player.status.vulnerable += DEBUFF_INTENT_VULNERABLE

        self.log.log(turn, "enemy_intent", intent=str(intent), player_hp=player.hp)

        poison = enemy.status.poison
        if poison > 0:
            if enemy.hp - poison <= 0:
                enemy.hp = 0
            else:
                enemy.hp -= poison
                enemy.status.poison = max(0, poison - 1)
            self.log.log(turn, "poison", damage=poison, enemy_hp=enemy.hp)

        if self._check_combat_end():
            if self.phase == CombatPhase.LAST_STAND:
                self._advance_after_last_stand = True
            return

        self._start_next_turn()

    def _apply_random_card_debuff(self):
        hand = self.state.hand
        debuff = self.rng.choice([CardDebuff.BLIND, CardDebuff.RUSH, CardDebuff.SILENCE])
        target = self.rng.randrange(len(hand))
        if debuff == CardDebuff.SILENCE:
            for i, card in enumerate(hand):
                if card.energy_cost >= 3:
                    target = i
                    break
        hand[target] = hand[target].with_debuff(debuff)
        self.log.log(self.state.turn, "card_debuff", card=hand[target].word, debuff=debuff.value)

    def _enemy_attack(self, base: int, guard: int):
        enemy = self.enemy
        player = self.player
        damage = calculate_damage(
            base,
            strength=enemy.status.strength,
            weak=enemy.status.weak > 0,
            vuln=player.status.vulnerable > 0,
        )
        if player.status.memory_shield > 0:
            player.status.memory_shield -= 1
            damage = 0

        hp_damage, _ = apply_block(damage, guard)
        self.state.stats.damage_taken += hp_damage

        new_hp = player.hp - hp_damage
        if new_hp <= 0 and player.revivals > 0:
            player.hp = percent_of(player.max_hp, REVIVE_HP_RATIO)
            player.revivals -= 1
            self.log.log(self.state.turn, "revive", hp=player.hp)
        else:
            player.hp = new_hp

    def _start_next_turn(self):
        player = self.player
        enemy = self.enemy
        self.state.turn += 1
        player.energy = player.max_energy + player.next_turn_energy
        player.next_turn_energy = 0
        enemy.block = 0
        enemy.intent = get_enemy_next_intent(enemy.id, self.state.turn)
        self.phase = CombatPhase.PLAYER_TURN
        self.log.log(self.state.turn, "turn_start", energy=player.energy, intent=str(enemy.intent))
        self.draw_cards(CARDS_PER_TURN)

    # =========================================================================
    # Death / victory
    # =========================================================================

    def _check_combat_end(self) -> bool:
        """Post-condition check. Returns True if play cannot continue normally."""
        if self.player.hp <= 0:
            self._enter_last_stand()
            return True
        if self.enemy.hp <= 0:
            self._end_combat(victory=True)
            return True
        return False

    def _enter_last_stand(self):
        self.phase = CombatPhase.LAST_STAND
        self.active_card = None
        self.state.pending_action = None

        pool: List[Vocabulary] = list(self.state.wrong_answers)
        if len(pool) < LAST_STAND_WORDS:
            taken = {v.id for v in pool}
            longest = sorted((v for v in self.vocab_list if v.id not in taken),
                             key=lambda v: len(v.word), reverse=True)
            pool.extend(longest[:LAST_STAND_WORDS - len(pool)])
        self.rng.shuffle(pool)
        self.last_stand_words = pool[:LAST_STAND_WORDS]
        self.last_stand_index = 0
        self.log.log(self.state.turn, "last_stand", words=[v.word for v in self.last_stand_words])

        if not self.last_stand_words:
            self._end_combat(victory=False)

    @property
    def current_last_stand_word(self) -> Optional[Vocabulary]:
        if self.phase != CombatPhase.LAST_STAND:
            return None
        if self.last_stand_index >= len(self.last_stand_words):
            return None
        return self.last_stand_words[self.last_stand_index]

    def submit_last_stand(self, attempt: str) -> bool:
        """
        Spell the current Last Stand word. Any miss ends the fight in defeat;
        spelling all of them revives the player at 30% HP.
        """
        target = self.current_last_stand_word
        if target is None:
            return False

        if not is_correct_spelling(attempt, target.word):
            self.log.log(self.state.turn, "last_stand_fail", word=target.word)
            self._end_combat(victory=False)
            return False

        self.last_stand_index += 1
        if self.last_stand_index < len(self.last_stand_words):
            return True

        self.player.hp = percent_of(self.player.max_hp, LAST_STAND_HP_RATIO)
        self.last_stand_words = []
        self.phase = CombatPhase.PLAYER_TURN
        self.log.log(self.state.turn, "last_stand_success", hp=self.player.hp)

        if self.enemy.hp <= 0:
            self._end_combat(victory=True)
        elif self._advance_after_last_stand:
            self._advance_after_last_stand = False
            self._start_next_turn()
        return True

    def _end_combat(self, victory: bool):
        self.phase = CombatPhase.VICTORY if victory else CombatPhase.DEFEAT
        self.active_card = None
        self.state.pending_action = None
        if self.temporary_strength:
            self.player.status.strength -= self.temporary_strength
            self.temporary_strength = 0
        self.player.block = 0
        self.log.log(self.state.turn, "combat_end", victory=victory, player_hp=self.player.hp)
        logger.info("Combat vs %s ended: %s on turn %d",
                    self.enemy.name, "victory" if victory else "defeat", self.state.turn)

    def get_result(self) -> CombatResult:
        return CombatResult(
            victory=self.is_victory(),
            hp_remaining=self.player.hp,
            turns=self.state.turn,
            cards_played=len(self.cards_played_sequence),
            damage_dealt=self.damage_dealt,
            stats=self.state.stats,
            mastered_words=list(self.mastered_words),
            cards_played_sequence=list(self.cards_played_sequence),
        )
