"""Unit tests for /src/xiangqi/adventure.py"""

import random

import pytest

from src.core.shared_types import AdventureType, RewardEffect
from src.xiangqi.adventure import (
    ADVENTURE_CATALOG,
    DARES,
    REWARDS,
    get_adventure,
    random_adventure,
)


def test_lookup_by_type_and_index() -> None:
    assert get_adventure(AdventureType.DARE, 0) == DARES[0]
    assert get_adventure(AdventureType.REWARD, 2) == REWARDS[2]


@pytest.mark.parametrize(
    "adventure_type, index",
    [
        (AdventureType.DARE, len(DARES)),
        (AdventureType.REWARD, len(REWARDS)),
        (AdventureType.DARE, -1),
    ],
)
def test_out_of_range_is_none(adventure_type: AdventureType, index: int) -> None:
    assert get_adventure(adventure_type, index) is None


def test_dares_have_no_effect() -> None:
    assert all(entry.effect is None for entry in DARES)


def test_every_reward_effect_is_reachable() -> None:
    """Each mechanical effect is carried by at least one reward entry."""
    effects = {entry.effect for entry in REWARDS}
    assert effects == set(RewardEffect)


def test_random_adventure_is_in_range() -> None:
    rng = random.Random(7)
    for _ in range(50):
        adventure_type, index = random_adventure(rng)
        assert 0 <= index < len(ADVENTURE_CATALOG[adventure_type])


@pytest.mark.parametrize(
    "dare_probability, expected",
    [(1.0, AdventureType.DARE), (0.0, AdventureType.REWARD)],
)
def test_random_adventure_category(
    dare_probability: float, expected: AdventureType
) -> None:
    rng = random.Random(3)
    assert all(
        random_adventure(rng, dare_probability)[0] == expected for _ in range(20)
    )
