"""
Event resolution (content/events.py), the event handler and the rest /
treasure room handlers.
"""

import random

import pytest

from packages.speller.content.cards import CardType, create_card
from packages.speller.content.events import (
    EVENTS,
    EventOutcome,
    EventResult,
    get_event,
    resolve_event_choice,
    roll_d20,
)
from packages.speller.generation.map import generate_map
from packages.speller.handlers.event_handler import EventHandler
from packages.speller.handlers.rooms import RestHandler, TreasureHandler
from packages.speller.state.combat import Player
from packages.speller.state.run import RunState


def make_run(hp=50, gold=100, cards=()):
    return RunState(player=Player(hp=hp, gold=gold), map_seed=3,
                    game_map=generate_map(3), deck=list(cards))


@pytest.fixture
def deck(vocab_list):
    return [create_card(CardType.ATTACK, v) for v in vocab_list[:4]]


# =============================================================================
# Resolution
# =============================================================================


class TestResolveEvent:

    def test_catalog(self):
        assert {e.id for e in EVENTS} == {"fountain", "dice_goblin", "cursed_book", "beggar", "mirror"}
        for event in EVENTS:
            assert 2 <= len(event.choices) <= 3

    def test_fountain_drink(self, vocab_list):
        result = resolve_event_choice("fountain", "drink", vocab_list)
        assert result.healed == 20
        assert result.outcome == EventOutcome.SUCCESS

    def test_fountain_coin(self, vocab_list):
        result = resolve_event_choice("fountain", "coin", vocab_list)
        assert result.gold_change == -10
        assert result.cards_removed == 1

    def test_dice_goblin_success(self, vocab_list):
        result = resolve_event_choice("dice_goblin", "roll", vocab_list, roll=10)
        assert result.gold_change == 50
        assert result.roll == 10
        assert "rolled a 10" in result.message

    def test_dice_goblin_failure(self, vocab_list):
        result = resolve_event_choice("dice_goblin", "roll", vocab_list, roll=9)
        assert result.gold_change == -20
        assert result.outcome == EventOutcome.FAILURE

    def test_dice_goblin_attack(self, vocab_list):
        result = resolve_event_choice("dice_goblin", "attack", vocab_list)
        assert (result.damage_taken, result.gold_change) == (5, 20)

    def test_cursed_book_read(self, vocab_list, rng):
        result = resolve_event_choice("cursed_book", "read", vocab_list, rng=rng)
        assert result.damage_taken == 10
        assert len(result.cards_added) == 1
        assert result.cards_added[0].type == CardType.UTILITY

    def test_cursed_book_read_without_words(self):
        result = resolve_event_choice("cursed_book", "read", [])
        assert result.damage_taken == 5
        assert result.cards_added == []

    def test_beggar(self, vocab_list):
        give = resolve_event_choice("beggar", "give", vocab_list)
        assert (give.gold_change, give.healed) == (-25, 30)
        assert resolve_event_choice("beggar", "purge", vocab_list).cards_removed == 1
        rob = resolve_event_choice("beggar", "rob", vocab_list)
        assert (rob.gold_change, rob.damage_taken) == (20, 5)

    def test_mirror(self, vocab_list):
        assert resolve_event_choice("mirror", "duplicate", vocab_list).duplicate_card
        assert resolve_event_choice("mirror", "smash", vocab_list, roll=12).gold_change == 75
        assert resolve_event_choice("mirror", "smash", vocab_list, roll=11).damage_taken == 10

    def test_leave(self, vocab_list):
        result = resolve_event_choice("fountain", "leave", vocab_list)
        assert result.message == "You leave the area."
        assert result.gold_change == 0

    @pytest.mark.parametrize("event_id,choice_id", [("nowhere", "leave"), ("fountain", "fly")])
    def test_unknown(self, vocab_list, event_id, choice_id):
        assert resolve_event_choice(event_id, choice_id, vocab_list).message == "Error"

    def test_d20_range(self, rng):
        rolls = {roll_d20(rng) for _ in range(400)}
        assert rolls == set(range(1, 21))

    def test_requirement_in_dict(self):
        choice = get_event("beggar").get_choice("give")
        assert choice.to_dict()["requirement"] == "25 Gold"
        assert not choice.is_available(24)


# =============================================================================
# Handler
# =============================================================================


class TestEventHandler:

    def test_enter_sets_active_event(self, rng):
        run = make_run()
        event = EventHandler.enter_event(run, rng)
        assert run.active_event_id == event.id

    def test_choose_applies_and_closes(self, vocab_list, rng):
        run = make_run(hp=50)
        run.active_event_id = "fountain"
        applied = EventHandler.choose(run, "drink", vocab_list, rng)
        assert applied.hp_delta == 20
        assert run.player.hp == 70
        assert run.active_event_id is None

    def test_locked_choice(self, vocab_list, rng):
        run = make_run(gold=5)
        run.active_event_id = "beggar"
        assert "give" not in EventHandler.available_choices(run)
        assert EventHandler.choose(run, "give", vocab_list, rng) is None
        assert run.active_event_id == "beggar"

    def test_no_active_event(self, vocab_list, rng):
        assert EventHandler.choose(make_run(), "drink", vocab_list, rng) is None
        assert EventHandler.available_choices(make_run()) == []

    def test_roll_choice_rolls(self, vocab_list, rng):
        run = make_run()
        run.active_event_id = "dice_goblin"
        applied = EventHandler.choose(run, "roll", vocab_list, rng)
        assert 1 <= applied.result.roll <= 20

    def test_gold_floors_at_zero(self, rng):
        run = make_run(gold=5)
        applied = EventHandler.apply_result(run, EventResult("x", gold_change=-20), rng)
        assert run.player.gold == 0
        assert applied.gold_delta == -5

    def test_event_damage_never_kills(self, rng):
        run = make_run(hp=4)
        EventHandler.apply_result(run, EventResult("x", damage_taken=10), rng)
        assert run.player.hp == 1

    def test_heal_capped(self, rng):
        run = make_run(hp=60)
        applied = EventHandler.apply_result(run, EventResult("x", healed=30), rng)
        assert run.player.hp == 70
        assert applied.hp_delta == 10

    def test_removal_takes_random_card(self, deck, rng):
        run = make_run(cards=deck)
        applied = EventHandler.apply_result(run, EventResult("x", cards_removed=1), rng)
        assert len(run.deck) == 3
        assert applied.cards_removed[0] in deck
        assert applied.cards_removed[0] not in run.deck

    def test_removal_with_empty_deck(self, rng):
        run = make_run()
        applied = EventHandler.apply_result(run, EventResult("x", cards_removed=1), rng)
        assert applied.cards_removed == []

    def test_duplicate_gets_new_instance(self, deck, rng):
        run = make_run(cards=deck)
        applied = EventHandler.apply_result(run, EventResult("x", duplicate_card=True), rng)
        copy = applied.cards_added[0]
        assert len(run.deck) == 5
        assert copy.word in {c.word for c in deck}
        assert copy.instance_id not in {c.instance_id for c in deck}

    def test_added_cards_join_deck(self, vocab_list, rng):
        run = make_run()
        run.active_event_id = "cursed_book"
        EventHandler.choose(run, "read", vocab_list, rng)
        assert len(run.deck) == 1
        assert run.player.hp == 40


# =============================================================================
# Rest and treasure
# =============================================================================


class TestRooms:

    def test_sleep_heals_thirty_percent(self):
        run = make_run(hp=30)
        result = RestHandler.sleep(run)
        assert result.hp_healed == 21
        assert run.player.hp == 51

    def test_sleep_capped(self):
        run = make_run(hp=65)
        assert RestHandler.sleep(run).hp_healed == 5

    def test_coffee_blocks_sleep(self, deck):
        run = make_run(cards=deck)
        run.player.relics.append("coffee_dripper")
        assert RestHandler.sleep(run) is None
        assert RestHandler.get_options(run) == ["smith"]

    def test_smith_needs_cards(self, deck):
        assert RestHandler.smith(make_run()) is None
        result = RestHandler.smith(make_run(cards=deck))
        assert result.requires_card_selection
        assert RestHandler.get_options(make_run()) == ["sleep"]

    def test_treasure(self):
        run = make_run(gold=10)
        assert TreasureHandler.open_chest(run).gold == 50
        assert run.player.gold == 60
