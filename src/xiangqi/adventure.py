"""
Adventure content: the dares and rewards a capture can trigger.

Which entry gets opened is decided by whoever dispatches OPEN_ADVENTURE (see `random_adventure`).
The state machine only looks entries up by (type, index) and applies the `effect` of a reward when it closes.
The effect is carried next to the text, so rewording an entry never changes what it does.
"""

import random
from dataclasses import dataclass
from typing import Optional

from src.core.shared_types import AdventureType, RewardEffect


@dataclass(frozen=True)
class AdventureEntry:
    text: str
    effect: Optional[RewardEffect] = None


DARES: tuple[AdventureEntry, ...] = tuple(
    AdventureEntry(text)
    for text in (
        "Meow like a cat three times",
        "Do 5 push-ups",
        "Compliment your opponent for 30 seconds",
        "Act out a meme with your face",
        "Commentate your next three moves in a local dialect",
        "Hold eye contact with your opponent for 10 seconds",
        "Shout 'I am a rookie!'",
        "Sing a nursery rhyme",
        "Drink half a glass of water",
        "Truth or dare",
        "Compliment your opponent using only sarcasm",
        "Spin around five times, then make your next move",
        "Bark like a dog three times",
        "Make your next move with your eyes closed",
        "Make a heart with your fingers three times",
        "Describe your last blunder as a line of poetry",
        "Confess your love to a random piece for 10 seconds",
        "Give your General a fearsome nickname",
        "Rap your plan for the next move",
        "Clap ten times before moving",
        "Recap your last mistake like a news anchor",
        "Make your next move with your non-dominant hand",
        "Bow to the empty air three times as an apology",
        "Say in a robot voice: 'Recalculating'",
        "Tell the board: 'I am sorry I let you down'",
    )
)

REWARDS: tuple[AdventureEntry, ...] = (
    AdventureEntry(
        "Combo Time: move twice next turn (the second move cannot capture)",
        RewardEffect.DOUBLE_MOVE,
    ),
    AdventureEntry(
        "Swift Chariot: your chariot may move twice next turn",
        RewardEffect.DOUBLE_MOVE,
    ),
    AdventureEntry(
        "Absolute Zero: freeze a random enemy piece",
        RewardEffect.ABSOLUTE_ZERO,
    ),
    AdventureEntry(
        "Pacifism: your opponent cannot capture next turn",
        RewardEffect.PACIFISM,
    ),
    AdventureEntry(
        "Critical Strike: your next capture grants an extra move",
        RewardEffect.CRITICAL_STRIKE,
    ),
)

ADVENTURE_CATALOG: dict[AdventureType, tuple[AdventureEntry, ...]] = {
    AdventureType.DARE: DARES,
    AdventureType.REWARD: REWARDS,
}


def get_adventure(
    adventure_type: AdventureType, index: int
) -> Optional[AdventureEntry]:
    """Lookup by (type, index). Out of range (negative indices included) means there is no such adventure."""
    entries = ADVENTURE_CATALOG.get(adventure_type, ())
    if not 0 <= index < len(entries):
        return None
    return entries[index]


def random_adventure(
    rng: random.Random, dare_probability: float = 0.5
) -> tuple[AdventureType, int]:
    """Pick a category (dare with the given probability, reward otherwise) and a uniform entry in it."""
    adventure_type = (
        AdventureType.DARE if rng.random() < dare_probability else AdventureType.REWARD
    )
    index = rng.randrange(len(ADVENTURE_CATALOG[adventure_type]))
    return adventure_type, index
