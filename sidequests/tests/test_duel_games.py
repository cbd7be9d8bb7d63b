"""
Tests for the duel sidequests: Face the Chupacabra, Necromancer's Gambit.

Ties are neutral in both: no attempt, no counter change.
"""

import pytest

from ..engine_core import Action, Phase, Resolution
from ..games.face_the_chupacabra import BEATS, CHOICES, FaceTheChupacabra, judge
from ..games.necromancers_gambit import (
    HAND_SIZE,
    NECROMANCER_DECK,
    PLAYER_DECK,
    NecromancersGambit,
    fight,
)

CARDS = {card.name: card for card in PLAYER_DECK + NECROMANCER_DECK}


def beating(throw):
    return next(choice for choice in CHOICES if BEATS[choice] == throw)


def losing(throw):
    return BEATS[throw]


# =============================================================================
# Face the Chupacabra
# =============================================================================

class TestJudge:

    @pytest.mark.parametrize("player,opponent,expected", [
        ("rock", "scissors", Resolution.SUCCESS),
        ("paper", "rock", Resolution.SUCCESS),
        ("scissors", "paper", Resolution.SUCCESS),
        ("rock", "paper", Resolution.FAILURE),
        ("scissors", "rock", Resolution.FAILURE),
        ("paper", "paper", Resolution.NEUTRAL),
    ])
    def test_judge(self, player, opponent, expected):
        assert judge(player, opponent) == expected


class TestFaceTheChupacabra:

    @pytest.fixture
    def game(self, make_game):
        game = make_game(FaceTheChupacabra)
        game.start()
        return game

    def _throw(self, game, clock, pick):
        throw = game.session.active_content
        result = game.dispatch(Action.choose(pick(throw)))
        clock.advance(game.resolve_ms)
        return result

    def test_throw_hidden_until_resolving(self, game):
        view = game.snapshot()["content"]
        assert view["chupacabra_choice"] is None
        throw = game.session.active_content
        game.dispatch(Action.choose(beating(throw)))
        view = game.snapshot()["content"]
        assert view["chupacabra_choice"] == throw
        assert view["last_result"] == "success"

    def test_tie_is_neutral(self, game, clock):
        result = self._throw(game, clock, lambda throw: throw)
        assert result.resolution == Resolution.NEUTRAL
        assert game.session.attempts == 0
        assert game.phase == Phase.AWAITING_INPUT
        assert game.session.round == 2

    def test_invalid_throw_ignored(self, game):
        assert not game.dispatch(Action.choose("lizard")).accepted

    def test_three_keys_win(self, game, clock):
        for _ in range(3):
            self._throw(game, clock, beating)
        assert game.phase == Phase.WON
        assert game.session.score == 3

    def test_three_losses_lose(self, game, clock):
        for _ in range(2):
            self._throw(game, clock, losing)
        self._throw(game, clock, beating)
        self._throw(game, clock, losing)
        assert game.phase == Phase.LOST
        assert game.session.attempts == 4


# =============================================================================
# Necromancer's Gambit
# =============================================================================

class TestFight:

    def test_holy_water_burns_soul_cards(self, fixed_chance):
        battle = fight(CARDS["Holy Water"], CARDS["Soul Drain"], fixed_chance(False))
        assert (battle.player_power, battle.necromancer_power) == (11, 8)
        assert battle.resolution == Resolution.SUCCESS
        assert "Holy Water burns the undead!" in battle.effects

    def test_silver_cross_halves_dark_ritual_before_doubling(self, fixed_chance):
        battle = fight(CARDS["Silver Cross"], CARDS["Dark Ritual"], fixed_chance(False))
        assert battle.necromancer_power == 8
        assert battle.resolution == Resolution.FAILURE
        assert len(battle.effects) == 2

    def test_iron_stake_vs_spectral(self, fixed_chance):
        battle = fight(CARDS["Iron Stake"], CARDS["Spectral Chains"], fixed_chance(False))
        assert battle.player_power == 11

    def test_deaths_touch(self, fixed_chance):
        triggered = fight(CARDS["Ancient Tome"], CARDS["Death's Touch"], fixed_chance(True))
        assert triggered.necromancer_power == 999
        quiet = fight(CARDS["Ancient Tome"], CARDS["Death's Touch"], fixed_chance(False))
        assert quiet.necromancer_power == 10

    def test_bone_shield_only_against_weak_cards(self, fixed_chance):
        assert fight(CARDS["Garlic Bulbs"], CARDS["Bone Shield"], fixed_chance(False)).necromancer_power == 8
        assert fight(CARDS["Ancient Tome"], CARDS["Bone Shield"], fixed_chance(False)).necromancer_power == 6

    def test_equal_power_is_a_draw(self, fixed_chance):
        battle = fight(CARDS["Blessed Candle"], CARDS["Zombie Horde"], fixed_chance(False))
        assert battle.resolution == Resolution.NEUTRAL
        assert battle.describe().startswith("Draw!")


class TestNecromancersGambit:

    @pytest.fixture
    def game(self, make_game):
        game = make_game(NecromancersGambit)
        game.start()
        return game

    def _round(self, game, clock, player, necromancer):
        game.duel.necromancer_hand[:] = [CARDS[necromancer]]
        result = game.dispatch(Action.choose(CARDS[player].id))
        clock.advance(game.resolve_ms)
        return result

    def test_hands_dealt(self, game):
        assert len(game.duel.player_hand) == HAND_SIZE
        assert len(game.duel.necromancer_hand) == HAND_SIZE
        assert game.phase == Phase.AWAITING_INPUT

    def test_card_not_in_hand_ignored(self, game):
        held = {c.id for c in game.duel.player_hand}
        missing = next(c for c in PLAYER_DECK if c.id not in held)
        assert not game.dispatch(Action.choose(missing.id)).accepted

    def test_two_rounds_win(self, game, clock):
        game.duel.player_hand[:] = [CARDS["Ancient Tome"], CARDS["Holy Water"], CARDS["Garlic Bulbs"]]
        self._round(game, clock, "Ancient Tome", "Zombie Horde")
        assert game.phase == Phase.AWAITING_INPUT
        self._round(game, clock, "Holy Water", "Soul Drain")
        assert game.phase == Phase.WON
        assert len(game.duel.history) == 2

    def test_even_tally_goes_to_necromancer(self, game, clock):
        game.duel.player_hand[:] = [CARDS["Ancient Tome"], CARDS["Garlic Bulbs"], CARDS["Blessed Candle"]]
        self._round(game, clock, "Ancient Tome", "Zombie Horde")
        self._round(game, clock, "Garlic Bulbs", "Soul Drain")
        result = self._round(game, clock, "Blessed Candle", "Zombie Horde")

        assert result.resolution == Resolution.NEUTRAL
        assert game.session.successes == game.session.failures == 1
        assert game.phase == Phase.LOST

    def test_better_tally_wins_when_hands_run_out(self, game, clock):
        candle = CARDS["Blessed Candle"]
        game.duel.player_hand[:] = [CARDS["Ancient Tome"], candle, candle]
        self._round(game, clock, "Ancient Tome", "Zombie Horde")
        self._round(game, clock, "Blessed Candle", "Zombie Horde")
        assert game.phase == Phase.AWAITING_INPUT
        self._round(game, clock, "Blessed Candle", "Zombie Horde")
        assert game.session.successes == 1
        assert game.session.failures == 0
        assert game.phase == Phase.WON

    def test_battle_revealed_while_resolving(self, game):
        game.duel.necromancer_hand[:] = [CARDS["Zombie Horde"]]
        card = game.duel.player_hand[0]
        game.dispatch(Action.choose(card.id))
        battle = game.snapshot()["content"]["battle"]
        assert battle["player_card"]["id"] == card.id
        assert battle["necromancer_card"]["name"] == "Zombie Horde"
