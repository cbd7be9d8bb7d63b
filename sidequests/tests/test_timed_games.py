"""
Tests for the timer-driven sidequests.

Tests:
- Spectral Memory: flip-back delay, spectral events
- Wack-a-Chupacabra: sprite kinds, sprite lifetime, clock
- Glory Grab: per-vial fuses, decoys, chaos escalation
- Banshee's Wail: beat travel, hit zone, misses, intensity
- Chupacabra Challenge: detection risk and the hunt
"""

from collections import Counter

import pytest

from ..engine_core import Action, Phase, Resolution, TimerKind
from ..games.banshees_wail import BansheesWail, beat_speed, spawn_interval_ms
from ..games.chupacabra_challenge import HIDING_SPOTS, ChupacabraChallenge, detection_risk
from ..games.glory_grab import FUSE_MAX_MS, GloryGrab, max_vials, spawn_rate_ms
from ..games.spectral_memory import FOG_MS, PHANTOM_FLIP_MS, SYMBOLS, SpectralMemory
from ..games.wack_a_chupacabra import CHUPACABRA, DECOY, VIAL, Sprite, WackAChupacabra, roll_sprite


# =============================================================================
# Spectral Memory
# =============================================================================

class TestSpectralMemory:

    @pytest.fixture
    def game(self, make_game):
        game = make_game(SpectralMemory)
        game.start()
        game.timers.cancel(TimerKind.EVENT)
        return game

    def _mismatch(self, game):
        first = game.board.cards[0]
        other = next(c for c in game.board.cards if c.symbol != first.symbol)
        return first, other

    def test_board_is_sixteen_cards(self, game):
        assert len(game.board.cards) == 16
        assert Counter(c.symbol for c in game.board.cards) == Counter(SYMBOLS * 2)
        assert game.phase == Phase.AWAITING_INPUT

    def test_first_flip_is_partial(self, game):
        result = game.dispatch(Action.flip(0))
        assert result.accepted
        assert result.resolution is None
        assert game.session.attempts == 0
        assert not game.dispatch(Action.flip(0)).accepted

    def test_mismatch_flips_back_after_check(self, game, clock):
        first, other = self._mismatch(game)
        game.dispatch(Action.flip(first.index))
        result = game.dispatch(Action.flip(other.index))
        assert result.resolution == Resolution.FAILURE
        assert game.phase == Phase.RESOLVING

        clock.advance(999)
        assert first.face_up and other.face_up
        clock.advance(1)
        assert not first.face_up and not other.face_up
        assert game.phase == Phase.AWAITING_INPUT

    def test_out_of_range_flip_ignored(self, game):
        assert not game.dispatch(Action.flip(16)).accepted
        assert not game.dispatch(Action.flip("3")).accepted
        assert not game.dispatch(Action.flip(True)).accepted
        assert not game.dispatch(Action.flip([1])).accepted
        assert not any(card.face_up for card in game.board.cards)

    def test_fog_blocks_input_until_it_lifts(self, game, clock, monkeypatch):
        monkeypatch.setattr(game.random, "choice", lambda items: "spectral_fog")
        game._trigger_event()
        assert game.snapshot()["content"]["fogged"]
        assert not game.dispatch(Action.flip(0)).accepted

        clock.advance(FOG_MS)
        assert game.dispatch(Action.flip(0)).accepted

    def test_phantom_flip_reveals_then_hides(self, game, clock, monkeypatch):
        monkeypatch.setattr(game.random, "choice", lambda items: "phantom_flip")
        game._trigger_event()
        cards = game.snapshot()["content"]["cards"]
        assert all(c["symbol"] for c in cards)

        clock.advance(PHANTOM_FLIP_MS)
        cards = game.snapshot()["content"]["cards"]
        assert not any(c["symbol"] for c in cards)

    def test_shuffle_keeps_symbol_multiset(self, game, clock, monkeypatch):
        first, second = [c for c in game.board.cards if c.symbol == SYMBOLS[0]]
        game.dispatch(Action.flip(first.index))
        game.dispatch(Action.flip(second.index))
        clock.advance(game.resolve_ms)

        monkeypatch.setattr(game.random, "choice", lambda items: "ghostly_shuffle")
        game._trigger_event()

        assert Counter(c.symbol for c in game.board.cards) == Counter(SYMBOLS * 2)
        assert first.symbol == second.symbol == SYMBOLS[0]
        assert game.session.extras["last_event"] == "ghostly_shuffle"

    def test_events_keep_firing(self, make_game, clock):
        game = make_game(SpectralMemory)
        game.start()
        clock.advance(15_000)
        assert "last_event" in game.session.extras
        assert game.timers.is_running(TimerKind.EVENT)


# =============================================================================
# Wack-a-Chupacabra
# =============================================================================

class TestRollSprite:

    @pytest.mark.parametrize("roll,kind", [
        (0.0, CHUPACABRA),
        (0.69, CHUPACABRA),
        (0.7, DECOY),
        (0.89, DECOY),
        (0.9, VIAL),
        (0.999, VIAL),
    ])
    def test_odds(self, roll, kind):
        assert roll_sprite(roll) == kind


class TestWackAChupacabra:

    @pytest.fixture
    def game(self, make_game, clock):
        game = make_game(WackAChupacabra)
        game.start()
        clock.advance(game.intro_ms)
        return game

    def _show(self, game, kind, hole=2):
        game.session.active_content = Sprite(hole=hole, kind=kind)

    def test_whack_chupacabra(self, game):
        self._show(game, CHUPACABRA)
        result = game.dispatch(Action.whack(2))
        assert result.resolution == Resolution.SUCCESS
        assert game.session.score == 1

    def test_wrong_hole_ignored(self, game):
        self._show(game, CHUPACABRA, hole=0)
        assert not game.dispatch(Action.whack(4)).accepted

    def test_decoy_costs_a_point_not_below_zero(self, game, clock):
        self._show(game, DECOY)
        result = game.dispatch(Action.whack(2))
        assert result.resolution == Resolution.FAILURE
        assert game.session.score == 0
        assert game.session.failures == 1

    def test_vial_loses_instantly(self, game):
        self._show(game, VIAL)
        result = game.dispatch(Action.whack(2))
        assert result.resolution == Resolution.FAILURE
        assert game.phase == Phase.LOST
        assert "vial" in game.session.message

    def test_unhit_sprite_counts_for_nothing(self, game, clock):
        clock.advance(1200)
        assert game.phase == Phase.RESOLVING
        assert game.session.attempts == 0
        clock.advance(game.resolve_ms)
        assert game.phase == Phase.AWAITING_INPUT
        assert game.session.round == 2

    def test_fifteen_whacks_win(self, game, clock):
        for _ in range(15):
            self._show(game, CHUPACABRA)
            game.dispatch(Action.whack(2))
            clock.advance(game.resolve_ms)
        assert game.phase == Phase.WON

    def test_clock_runs_out(self, game, clock):
        clock.advance(45_000)
        assert game.phase == Phase.LOST
        assert game.last_result is not None


# =============================================================================
# Glory Grab
# =============================================================================

class TestGloryGrabChaos:

    def test_max_vials(self):
        assert [max_vials(c) for c in (1, 2, 5, 6)] == [8, 11, 20, 20]

    def test_spawn_rate(self):
        assert spawn_rate_ms(1) == 1000
        assert spawn_rate_ms(2) == pytest.approx(850)
        assert spawn_rate_ms(10) == pytest.approx(300)


class TestGloryGrab:

    @pytest.fixture
    def build(self, clock, emitter, fixed_chance):
        def _build(decoy: bool = False):
            game = GloryGrab(scheduler=clock, provider=fixed_chance(decoy), emitter=emitter)
            game.start()
            game.timers.cancel(TimerKind.SPAWN)
            return game
        return _build

    def test_collect_vial(self, build):
        game = build()
        game._spawn_vial()
        result = game.dispatch(Action.collect(0))
        assert result.resolution == Resolution.SUCCESS
        assert game.session.score == 10
        assert game.phase == Phase.AWAITING_INPUT
        assert not game.bench.vials

    def test_collected_vial_never_explodes(self, build, clock):
        game = build()
        game._spawn_vial()
        game.dispatch(Action.collect(0))
        clock.advance(FUSE_MAX_MS)
        assert game.bench.exploded == 0
        assert game.session.failures == 0

    def test_decoy_is_neutral(self, build):
        game = build(decoy=True)
        game._spawn_vial()
        assert game.bench.vials[0].empty
        result = game.dispatch(Action.collect(0))
        assert result.resolution == Resolution.NEUTRAL
        assert game.session.score == 0
        assert game.session.attempts == 0

    def test_unknown_vial_ignored(self, build):
        game = build()
        assert not game.dispatch(Action.collect(42)).accepted

    def test_malformed_vial_id_ignored(self, build):
        game = build()
        game._spawn_vial()
        assert not game.dispatch(Action.collect([0])).accepted
        assert not game.dispatch(Action.collect(False)).accepted
        assert not game.dispatch(Action.collect("0")).accepted
        assert 0 in game.bench.vials
        assert game.session.attempts == 0

    def test_fuse_explodes(self, build, clock):
        game = build()
        game._spawn_vial()
        game._spawn_vial()
        clock.advance(FUSE_MAX_MS)
        assert game.bench.exploded == 2
        assert game.session.failures == 2
        assert game.phase == Phase.AWAITING_INPUT

    def test_five_explosions_lose(self, build, clock):
        game = build()
        for _ in range(5):
            game._spawn_vial()
        clock.advance(FUSE_MAX_MS)
        assert game.phase == Phase.LOST
        assert game.bench.vials == {}

    def test_surviving_the_clock_wins(self, build, clock):
        game = build()
        clock.advance(20_000)
        assert game.phase == Phase.WON

    def test_idle_player_loses_to_explosions(self, make_game, clock):
        game = make_game(GloryGrab)
        game.start()
        clock.advance(20_000)
        assert game.phase == Phase.LOST
        assert game.bench.exploded == 5

    def test_chaos_escalates_on_replay(self, build, clock):
        game = build()
        clock.advance(20_000)
        game.restart()
        assert game.chaos_level == 2
        assert game.snapshot()["content"]["max_vials"] == 11

    def test_fuse_view(self, build, clock):
        game = build()
        game._spawn_vial()
        fuse = game.bench.vials[0].fuse_ms
        clock.advance(fuse * 0.8)
        vial = game.snapshot()["content"]["vials"][0]
        assert vial["glowing"]
        assert vial["fuse_ms_left"] <= fuse * 0.2


# =============================================================================
# Banshee's Wail
# =============================================================================

class TestBansheesWail:

    @pytest.fixture
    def game(self, make_game):
        game = make_game(BansheesWail)
        game.start()
        game.timers.cancel(TimerKind.SPAWN)
        return game

    def _spawn(self, game):
        game._on_spawn()
        game.timers.cancel(TimerKind.SPAWN)
        return max(game.lane.beats.values(), key=lambda b: b.id)

    def test_curves(self):
        assert beat_speed(1.0) == 2.5
        assert spawn_interval_ms(1.0) == 600
        assert spawn_interval_ms(3.0) == 400

    def test_beat_travel(self, game):
        beat = self._spawn(game)
        assert beat.travel_ms == 2000
        assert beat.position(1500) == 75
        assert beat.position(1800) == 90

    def test_hit_in_zone(self, game, clock):
        self._spawn(game)
        clock.advance(1600)
        result = game.dispatch(Action.hit())
        assert result.resolution == Resolution.SUCCESS
        assert game.session.score == 10
        assert game.lane.combo == 1
        assert game.phase == Phase.AWAITING_INPUT

    def test_combo_bonus(self, game, clock):
        self._spawn(game)
        clock.advance(100)
        self._spawn(game)
        clock.advance(1500)
        game.dispatch(Action.hit())
        clock.advance(100)
        game.dispatch(Action.hit())
        assert game.session.score == 10 + 12
        assert game.lane.max_combo == 2

    def test_off_beat(self, game):
        self._spawn(game)
        game.lane.combo = 4
        result = game.dispatch(Action.hit())
        assert result.accepted
        assert result.resolution is None
        assert result.message == "Off beat!"
        assert game.lane.combo == 0
        assert game.session.attempts == 0

    def test_missed_beat(self, game, clock):
        self._spawn(game)
        clock.advance(2000)
        assert game.session.failures == 1
        assert game.lane.beats == {}
        assert game.phase == Phase.AWAITING_INPUT

    def test_three_misses_lose(self, game, clock):
        for _ in range(3):
            self._spawn(game)
        clock.advance(2000)
        assert game.phase == Phase.LOST

    def test_surviving_wins(self, game, clock):
        clock.advance(60_000)
        assert game.phase == Phase.WON

    def test_intensity_rises(self, game, clock):
        clock.advance(15_000)
        assert game.lane.intensity == 1.5
        clock.advance(30_000)
        assert game.lane.intensity == 2.5
        assert game.wail_message() == "The banshee's wail grows stronger!"


# =============================================================================
# Chupacabra Challenge
# =============================================================================

SPOTS = {spot.id: spot for spot in HIDING_SPOTS}


class TestDetectionRisk:

    def test_exposed_spot_is_always_risky(self):
        assert detection_risk(SPOTS["6"], 90, 80) == 100

    def test_safe_spot_far_away(self):
        assert detection_risk(SPOTS["3"], 10, 80) == pytest.approx(20)

    def test_proximity_adds_risk(self):
        spot = SPOTS["4"]
        assert detection_risk(spot, spot.x + 15, spot.y) == pytest.approx(90)


class TestChupacabraChallenge:

    @pytest.fixture
    def build(self, clock, emitter, fixed_chance):
        def _build(discovered: bool):
            game = ChupacabraChallenge(scheduler=clock, provider=fixed_chance(discovered), emitter=emitter)
            game.start()
            return game
        return _build

    def test_waits_for_a_spot(self, build, clock):
        game = build(False)
        assert game.phase == Phase.AWAITING_INPUT
        clock.advance(60_000)
        assert game.phase == Phase.AWAITING_INPUT

    def test_unknown_spot_ignored(self, build):
        game = build(False)
        assert not game.dispatch(Action.choose("99")).accepted

    def test_only_one_choice(self, build):
        game = build(False)
        assert game.dispatch(Action.choose("3")).accepted
        assert not game.dispatch(Action.choose("1")).accepted
        assert game.snapshot()["content"]["hiding_in"] == "3"

    def test_surviving_the_hunt_wins(self, build, clock):
        game = build(False)
        game.dispatch(Action.choose("3"))
        clock.advance(29_999)
        assert game.phase == Phase.AWAITING_INPUT
        clock.advance(1)
        assert game.phase == Phase.WON
        assert game.session.score > 0

    def test_discovery_loses(self, build, clock):
        game = build(True)
        game.dispatch(Action.choose("6"))
        clock.advance(500)
        assert game.phase == Phase.LOST
        assert game.snapshot()["content"] is None
