"""
Gold, relic and shard rewards after a won fight.
"""

import random

import pytest

from packages.speller.content.relics import RelicRarity, ALL_RELICS
from packages.speller.generation.rewards import (
    boss_shard_reward,
    compute_gold_reward,
    roll_relic_drop,
)
from packages.speller.state.combat import CombatStats


class TestGoldReward:

    def test_base_range(self):
        rng = random.Random(0)
        for _ in range(50):
            reward = compute_gold_reward(2, 10, CombatStats(mistakes=1), rng)
            assert 17 <= reward.base <= 22
            assert reward.total == reward.base
            assert reward.multiplier == 1

    def test_perfect_bonus(self):
        reward = compute_gold_reward(2, 10, CombatStats(), random.Random(0))
        assert reward.is_perfect
        assert reward.perfect == 30
        assert reward.total == reward.base + 30

    @pytest.mark.parametrize("stats", [
        CombatStats(damage_taken=1),
        CombatStats(mistakes=1),
        CombatStats(hints=1),
    ])
    def test_imperfect(self, stats):
        reward = compute_gold_reward(2, 10, stats, random.Random(0))
        assert not reward.is_perfect
        assert reward.perfect == 0

    def test_bounty(self):
        reward = compute_gold_reward(2, 10, CombatStats(damage_taken=3, bounty_played=2),
                                     random.Random(0))
        assert reward.bounty == 30
        assert reward.bounty_count == 2
        assert reward.total == reward.base + 30

    def test_early_bird_doubles_first_act_one_wins(self):
        stats = CombatStats(damage_taken=1, bounty_played=1)
        reward = compute_gold_reward(1, 2, stats, random.Random(0))
        assert reward.multiplier == 2
        assert reward.total == (reward.base + reward.bounty) * 2

    def test_no_early_bird_after_three_wins(self):
        reward = compute_gold_reward(1, 3, CombatStats(damage_taken=1), random.Random(0))
        assert reward.multiplier == 1

    def test_no_early_bird_outside_act_one(self):
        reward = compute_gold_reward(2, 0, CombatStats(damage_taken=1), random.Random(0))
        assert reward.multiplier == 1

    def test_to_dict(self):
        data = compute_gold_reward(1, 0, CombatStats(), random.Random(0)).to_dict()
        assert set(data) == {"base", "bounty", "bountyCount", "perfect", "isPerfect",
                             "multiplier", "total"}


class TestRelicDrop:

    def test_prefers_rare(self):
        relic = roll_relic_drop([], random.Random(0))
        assert relic.rarity == RelicRarity.RARE

    def test_never_owned(self):
        owned = ["bag_of_prep", "vajra"]
        for seed in range(10):
            assert roll_relic_drop(owned, random.Random(seed)).id not in owned

    def test_none_when_all_owned(self):
        assert roll_relic_drop([r.id for r in ALL_RELICS], random.Random(0)) is None


class TestShards:

    def test_first_clear_bonus(self):
        assert boss_shard_reward(1, []) == 230

    def test_repeat_clear(self):
        assert boss_shard_reward(1, [1]) == 30
        assert boss_shard_reward(2, [1]) == 230
