"""
Tests for the novelty generators.
"""

import pytest

from ..engine_core import RandomContentProvider
from ..errors import UnknownNoveltyError
from ..games.novelty import (
    ADJECTIVES,
    COMPLIMENTS,
    INGREDIENTS,
    INGREDIENTS_OFFERED,
    NOVELTIES,
    NOUNS,
    PHYSICAL_CHALLENGE_SLICE,
    SLICE_ANGLE,
    WHEEL,
    craft_curse,
    cryptic_compliment,
    generate_novelty,
    monster_name,
    offer_ingredients,
    spin_wheel,
)


class TestCompliments:

    def test_no_repeats_until_exhausted(self, provider):
        used: set[str] = set()
        texts = {cryptic_compliment(provider, used)["text"] for _ in range(len(COMPLIMENTS))}
        assert len(texts) == len(COMPLIMENTS)

    def test_fields(self, provider):
        compliment = cryptic_compliment(provider)
        assert set(compliment) == {"id", "text", "author"}


class TestMonsterName:

    def test_shape(self, provider):
        monster = monster_name(provider)
        adjective, noun = monster["name"].split(" ")[:2]
        assert adjective in ADJECTIVES
        assert noun in NOUNS
        assert 1 <= monster["power"] <= 100

    def test_seeded(self):
        assert monster_name(RandomContentProvider(seed=7)) == monster_name(RandomContentProvider(seed=7))


class TestCurseCrafting:

    def test_shelf(self, provider):
        shelf = offer_ingredients(provider)
        assert len(shelf) == INGREDIENTS_OFFERED
        assert len({i.id for i in shelf}) == INGREDIENTS_OFFERED

    def test_chosen_ingredients(self, provider):
        curse = craft_curse(provider, ["potion-1", "potion-16", "potion-17"])
        assert curse["ingredients"] == ["potion-1", "potion-16", "potion-17"]
        assert curse["target"].startswith("Target: ")
        assert curse["side_effect"]
        assert "{" not in curse["curse"]

    def test_random_ingredients(self, provider):
        curse = craft_curse(provider)
        known = {i.id for i in INGREDIENTS}
        assert len(set(curse["ingredients"])) == 3
        assert set(curse["ingredients"]) <= known

    @pytest.mark.parametrize("ids", [
        ["potion-1", "potion-2"],
        ["potion-1", "potion-1", "potion-2"],
        ["potion-1", "potion-2", "potion-99"],
        ["potion-1", "potion-2", "potion-3", "potion-4"],
    ])
    def test_bad_ingredients(self, provider, ids):
        with pytest.raises(ValueError):
            craft_curse(provider, ids)


class TestWheel:

    def test_rotation_lands_on_slice(self, provider):
        for _ in range(30):
            spin = spin_wheel(provider)
            index = spin["id"]
            assert spin["label"] == WHEEL[index].label
            landing = (spin["rotation"] - (360 - index * SLICE_ANGLE)) / 360
            assert 5 <= landing <= 8 + 1e-6

    def test_challenge_only_on_physical_slice(self, provider):
        for _ in range(60):
            spin = spin_wheel(provider)
            if spin["id"] == PHYSICAL_CHALLENGE_SLICE:
                assert spin["challenge"]
            else:
                assert spin["challenge"] is None


class TestGenerateNovelty:

    @pytest.mark.parametrize("kind", sorted(NOVELTIES))
    def test_every_kind(self, kind):
        assert generate_novelty(kind, RandomContentProvider(seed=3))

    def test_same_seed_same_result(self):
        a = generate_novelty("wheel-of-misfortune", RandomContentProvider(seed=11))
        b = generate_novelty("wheel-of-misfortune", RandomContentProvider(seed=11))
        assert a == b

    def test_unknown_kind(self):
        with pytest.raises(UnknownNoveltyError) as exc:
            generate_novelty("fortune-cookie")
        assert exc.value.kind == "fortune-cookie"
