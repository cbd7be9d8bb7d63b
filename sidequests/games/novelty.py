"""
Novelty Generators - Sidequests with no score, no clock and no win.

- cryptic-compliments: a backhanded compliment from beyond
- monster-name-generator: a freshly scanned monster
- curse-crafting: brew a curse from three ingredients
- wheel-of-misfortune: spin for your fate

Every generator takes the RandomContentProvider so a seeded provider
reproduces the same output.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import Any, Callable, Sequence

from pydantic import BaseModel, ConfigDict

from ..engine_core.content import ContentPool, RandomContentProvider
from ..errors import UnknownNoveltyError


# =============================================================================
# Cryptic Compliments
# =============================================================================

class Compliment(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    author: str


COMPLIMENTS = ContentPool.from_items("cryptic-compliments", (
    Compliment(id="1", text="Your soul radiates darkness in the most delightful way", author="The Shadow Council"),
    Compliment(id="2", text="Even the demons speak fondly of your wicked charm", author="Beelzebub's Secretary"),
    Compliment(id="3", text="Your presence makes the void feel less empty", author="The Abyss"),
    Compliment(id="4", text="The ravens whisper your name with admiration", author="Edgar Allan Poe's Ghost"),
    Compliment(id="5", text="Your malevolent grin could launch a thousand nightmares", author="The Nightmare Realm"),
    Compliment(id="6", text="Even the Grim Reaper takes notes on your style", author="Death Himself"),
    Compliment(id="7", text="Your dark aura is absolutely mesmerizing", author="Count Dracula"),
    Compliment(id="8", text="The gargoyles nod approvingly when you pass", author="Notre Dame Cathedral"),
    Compliment(id="9", text="Your sinister laugh could heal a broken heart", author="The Phantom of the Opera"),
    Compliment(id="10", text="Even the ancient curses speak of your magnificence", author="The Egyptian Underworld"),
    Compliment(id="11", text="Your wicked intelligence puts Machiavelli to shame", author="The Dark Arts Academy"),
    Compliment(id="12", text="The storm clouds gather just to witness your beauty", author="Mother Nature's Evil Twin"),
), key=lambda c: c.id)


def cryptic_compliment(random: RandomContentProvider, used_ids: set[str] | None = None) -> dict[str, Any]:
    """Draw a compliment; pass the same used_ids to avoid repeats until exhaustion."""
    unit = random.draw(COMPLIMENTS, used_ids if used_ids is not None else set())
    return unit.value.model_dump()


# =============================================================================
# Monster Name Generator
# =============================================================================

ADJECTIVES = (
    "Terrifying", "Ancient", "Cursed", "Bloodthirsty", "Sinister", "Ghastly", "Malevolent",
    "Spectral", "Putrid", "Ravenous", "Vile", "Wretched", "Demonic", "Abyssal", "Nightmarish",
)
NOUNS = (
    "Beast", "Demon", "Wraith", "Fiend", "Specter", "Ghoul", "Phantom", "Banshee",
    "Reaper", "Shade", "Horror", "Revenant", "Lurker", "Stalker", "Devourer",
)
SUFFIXES = (
    "of Doom", "the Destroyer", "from Beyond", "of Shadows", "the Damned",
    "of the Abyss", "the Cursed", "from Hell", "the Nightmare", "of Death",
)
MONSTER_TYPES = ("Undead", "Demon", "Spirit", "Beast", "Eldritch Horror")
WEAKNESSES = ("Holy Water", "Silver", "Salt Circle", "Sunlight", "Iron", "Sacred Ground")
ORIGINS = ("Ancient Cemetery", "Abandoned Asylum", "Cursed Forest", "Dark Dimension", "Forgotten Crypt")


@dataclass
class Monster:
    name: str
    type: str
    power: int
    weakness: str
    origin: str


def monster_name(random: RandomContentProvider) -> dict[str, Any]:
    monster = Monster(
        name=f"{random.choice(ADJECTIVES)} {random.choice(NOUNS)} {random.choice(SUFFIXES)}",
        type=random.choice(MONSTER_TYPES),
        power=random.randint(1, 100),
        weakness=random.choice(WEAKNESSES),
        origin=random.choice(ORIGINS),
    )
    return asdict(monster)


# =============================================================================
# Curse Crafting
# =============================================================================

@dataclass(frozen=True)
class Ingredient:
    id: str
    name: str
    description: str


INGREDIENTS = (
    Ingredient("potion-1", "Easther of Wood Rossen", "A botanical distillate no druid will take credit for."),
    Ingredient("potion-2", "Sneaker Worn Sock Lint", "Harvested from gym bags left overnight in warm cars."),
    Ingredient("potion-3", "Forgotten Credit Score", "Whispered by rejected loan officers in the dead of night."),
    Ingredient("potion-4", "Screaming Mushroom Extract", "Stored in a jar to keep the volume down."),
    Ingredient("potion-5", "Pickled Moonbeam", "Softly glowing. Slightly fermented. Faintly accusatory."),
    Ingredient("potion-6", "Whisper of Goat Spite", "Still resentful about that one time in 2013."),
    Ingredient("potion-7", "Dust from a Forgotten Sibling", "Don't ask whose. Or why it's still warm."),
    Ingredient("potion-8", "Cursed Caffeine Residue", "Found beneath an intern's eyelid. Do not microwave."),
    Ingredient("potion-9", "Banshee's Final Breath", "Smells like drama and singed lace."),
    Ingredient("potion-10", "Melted Plastic Halloween Fang", "Surprisingly chewy. Ghosts hate it."),
    Ingredient("potion-11", "Cat Hair from Another Timeline", "Somehow allergic to itself."),
    Ingredient("potion-12", "Spoiled Fortune Cookie", "\"Your doom is near.\" Reads the fortune."),
    Ingredient("potion-13", "Phantom Glitter", "Never leaves. Especially not your soul."),
    Ingredient("potion-14", "Eye of Newt, Store Brand™", "Budget-friendly. Mildly effective. Not FDA approved."),
    Ingredient("potion-15", "Essence of Teen Angst", "Bottled during Mercury retrograde. Handle with eye-rolls."),
    Ingredient("potion-16", "Frog Tears", "Extracted under emotional duress. Slightly minty."),
    Ingredient("potion-17", "Graveyard Dew", "Collected by moonlight and regret. Keep refrigerated."),
    Ingredient("potion-18", "Secondhand Hex Smoke", "Smells like thrift-store incense and broken promises."),
)
INGREDIENTS_BY_ID = {i.id: i for i in INGREDIENTS}

INGREDIENTS_OFFERED = 8
INGREDIENTS_PER_CURSE = 3

# Placeholders: i1-i3 ingredient names, l1-l3 lowercased
CURSE_TEMPLATES = (
    "May every shoelace they tie turn into {i1}.",
    "Whenever they speak, it sounds like {i2} and smells like {i3}.",
    "May their {l1} be haunted by whispers of {l2}.",
    "May {i1} and {i2} appear in their bathtub every Tuesday.",
    "May every mirror reflect their face wearing {i3}.",
    "Cursed to sneeze out {i1}, then apologize in {i2}.",
    "May their shadow be replaced by {i3}.",
    "They must explain {i2} to a panel of angry ghosts using only {i1}.",
)

CURSE_TARGETS = (
    "your old gym teacher",
    "that one barista who judged you",
    "your ex's new partner",
    "your least favorite coworker",
    "someone who calls you 'buddy'",
    "a guy named Chad (he knows what he did)",
    "your unfinished tax return",
    "the influencer who faked a haunting",
    "the cousin who ruined game night",
    "your childhood imaginary friend (they're back)",
)

SIDE_EFFECTS = (
    "Also, mild goat noises.",
    "Everything smells faintly of regret.",
    "They can't stop clapping at inappropriate times.",
    "Their shoes are always slightly damp.",
    "They cry whenever they hear a kazoo.",
    "Haunted by the scent of ham.",
    "Autocorrect now only speaks in riddles.",
    "They must start every sentence with 'Well, actually...'",
    "They age one day per curse crafted.",
    "Slightly more haunted than medically recommended.",
)


@dataclass
class Curse:
    curse: str
    target: str
    side_effect: str
    ingredients: list[str] = field(default_factory=list)


def offer_ingredients(random: RandomContentProvider) -> list[Ingredient]:
    """The shelf of ingredients shown to the player."""
    return random.sample(INGREDIENTS, INGREDIENTS_OFFERED)


def craft_curse(random: RandomContentProvider, ingredient_ids: Sequence[str] | None = None) -> dict[str, Any]:
    """
    Brew a curse from exactly three distinct ingredients.

    Without ingredient_ids, three are picked from a freshly offered shelf.
    Raises ValueError for unknown, repeated or miscounted ingredients.
    """
    if ingredient_ids is None:
        chosen = random.sample(offer_ingredients(random), INGREDIENTS_PER_CURSE)
    else:
        if len(ingredient_ids) != INGREDIENTS_PER_CURSE or len(set(ingredient_ids)) != INGREDIENTS_PER_CURSE:
            raise ValueError(f"A curse needs exactly {INGREDIENTS_PER_CURSE} different ingredients")
        unknown = [i for i in ingredient_ids if i not in INGREDIENTS_BY_ID]
        if unknown:
            raise ValueError(f"Unknown ingredients: {', '.join(unknown)}")
        chosen = [INGREDIENTS_BY_ID[i] for i in ingredient_ids]

    names = [i.name for i in chosen]
    text = random.choice(CURSE_TEMPLATES).format(
        i1=names[0], i2=names[1], i3=names[2],
        l1=names[0].lower(), l2=names[1].lower(), l3=names[2].lower(),
    )
    curse = Curse(
        curse=text,
        target=f"Target: {random.choice(CURSE_TARGETS)}",
        side_effect=random.choice(SIDE_EFFECTS),
        ingredients=[i.id for i in chosen],
    )
    return asdict(curse)


# =============================================================================
# Wheel of Misfortune
# =============================================================================

@dataclass(frozen=True)
class Slice:
    id: int
    label: str
    description: str
    reaction: str


WHEEL = (
    Slice(0, "Cursed!", "Dark magic surrounds you...", "Ah yes, the curse finds you! Delicious despair!"),
    Slice(1, "Mystery Prize", "A glowing ticket appears...", "Ooh, mysterious! What could it be? I'm not telling!"),
    Slice(2, "Ghosted", "Spectral energy flows through you...", "Boo! You've been ghosted by the supernatural realm!"),
    Slice(3, "Doomlight Savings Time", "Time melts away...", "We just sucked 0.666 seconds from your life!"),
    Slice(4, "Cringe Echo", "Your most embarrassing moment echoes...", "Oof! That memory still haunts you, doesn't it?"),
    Slice(5, "Physical Challenge", "Time to prove your worth...", "Show me what you're made of, mortal!"),
    Slice(6, "Glory by Accident", "Fireworks of fortune explode!", "Well, well! Even a broken clock is right twice a day!"),
    Slice(7, "Unknowable Insight", "Cosmic wisdom flows...", "The stars whisper... but I won't tell you what they said!"),
)
PHYSICAL_CHALLENGE_SLICE = 5
SLICE_ANGLE = 360 // len(WHEEL)

PHYSICAL_CHALLENGES = (
    "Do the zombie shuffle for 10 seconds",
    "Howl like a werewolf three times",
    "Perform the vampire cape swirl",
    "Channel your inner ghost and float around",
    "Do the monster mash dance",
    "Cackle like a witch for 5 seconds",
)


def spin_wheel(random: RandomContentProvider) -> dict[str, Any]:
    """Pick a slice and the rotation (5-8 full turns) that lands the pointer on it."""
    index = random.randint(0, len(WHEEL) - 1)
    spins = random.uniform(5, 8)
    result = asdict(WHEEL[index])
    result["rotation"] = round(spins * 360 + (360 - index * SLICE_ANGLE), 2)
    result["challenge"] = random.choice(PHYSICAL_CHALLENGES) if index == PHYSICAL_CHALLENGE_SLICE else None
    return result


# =============================================================================
# Registry
# =============================================================================

NOVELTIES: dict[str, Callable[[RandomContentProvider], dict[str, Any]]] = {
    "cryptic-compliments": cryptic_compliment,
    "monster-name-generator": monster_name,
    "curse-crafting": craft_curse,
    "wheel-of-misfortune": spin_wheel,
}


def generate_novelty(kind: str, random: RandomContentProvider | None = None) -> dict[str, Any]:
    """Run the named generator. Raises UnknownNoveltyError for unknown kinds."""
    generator = NOVELTIES.get(kind)
    if generator is None:
        raise UnknownNoveltyError(kind)
    return generator(random or RandomContentProvider())
