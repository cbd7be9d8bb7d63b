"""
Necromancer's Gambit - A three-card duel against the necromancer.

Each side is dealt 3 cards from its own deck. Every round the player
plays a card, the necromancer answers with a random card from its hand,
and card effects adjust both powers before they are compared.

Winning 2 rounds wins the duel and losing 2 loses it. When the hands
run out first, the better tally wins; an even tally goes to the
necromancer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ..engine_core.action import Action, ActionResult, ActionType, Resolution
from ..engine_core.content import RandomContentProvider
from ..engine_core.game import SidequestGame
from ..engine_core.phase import Phase
from ..engine_core.scoring import Verdict
from ..engine_core.session import Outcome

HAND_SIZE = 3
DEATHS_TOUCH_CHANCE = 0.3
DEATHS_TOUCH_POWER = 999

# Necromancer reply, battle, result banner
REPLY_MS = 1000
BATTLE_MS = 1500
RESULT_MS = 3000


@dataclass(frozen=True)
class DuelCard:
    id: int
    name: str
    power: int
    description: str
    effect: str
    icon: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "power": self.power,
            "description": self.description,
            "effect": self.effect,
            "icon": self.icon,
        }


PLAYER_DECK = (
    DuelCard(1, "Holy Water", 8, "Purifies the unholy", "Burns undead for extra damage", "💧"),
    DuelCard(2, "Silver Cross", 6, "Sacred protection", "Blocks necromantic spells", "✝️"),
    DuelCard(3, "Garlic Bulbs", 4, "Natural repellent", "Weakens vampire minions", "🧄"),
    DuelCard(4, "Iron Stake", 7, "Cold iron pierces darkness", "Critical hit vs spirits", "🗡️"),
    DuelCard(5, "Blessed Candle", 5, "Light banishes shadow", "Reveals hidden traps", "🕯️"),
    DuelCard(6, "Ancient Tome", 9, "Knowledge is power", "Counters dark magic", "📖"),
)

NECROMANCER_DECK = (
    DuelCard(7, "Bone Shield", 6, "Armor of the dead", "Absorbs incoming damage", "🦴"),
    DuelCard(8, "Soul Drain", 8, "Steals life force", "Heals necromancer", "👻"),
    DuelCard(9, "Zombie Horde", 5, "Overwhelming numbers", "Swarms opponent", "🧟"),
    DuelCard(10, "Dark Ritual", 9, "Forbidden magic", "Doubles next spell", "⚫"),
    DuelCard(11, "Spectral Chains", 7, "Binds the living", "Prevents escape", "⛓️"),
    DuelCard(12, "Death's Touch", 10, "Ultimate darkness", "Instant defeat", "💀"),
)


@dataclass
class Battle:
    """Outcome of one round after card effects."""
    player_card: DuelCard
    necromancer_card: DuelCard
    player_power: int
    necromancer_power: int
    effects: list[str] = field(default_factory=list)

    @property
    def resolution(self) -> Resolution:
        if self.player_power > self.necromancer_power:
            return Resolution.SUCCESS
        if self.necromancer_power > self.player_power:
            return Resolution.FAILURE
        return Resolution.NEUTRAL

    def describe(self) -> str:
        p, n = self.player_card, self.necromancer_card
        if self.resolution == Resolution.SUCCESS:
            text = f"Victory! {p.name} ({self.player_power}) defeats {n.name} ({self.necromancer_power})"
        elif self.resolution == Resolution.FAILURE:
            text = f"Defeat! {n.name} ({self.necromancer_power}) overpowers {p.name} ({self.player_power})"
        else:
            text = f"Draw! Both cards have equal power ({self.player_power})"
        if self.effects:
            text += " " + " ".join(self.effects)
        return text


def fight(player: DuelCard, necromancer: DuelCard, random: RandomContentProvider) -> Battle:
    """Apply card effects (player's first, then the necromancer's) and build the battle."""
    battle = Battle(player, necromancer, player.power, necromancer.power)

    if player.name == "Holy Water" and "Soul" in necromancer.name:
        battle.player_power += 3
        battle.effects.append("Holy Water burns the undead!")
    if player.name == "Silver Cross" and necromancer.name == "Dark Ritual":
        battle.necromancer_power //= 2
        battle.effects.append("Silver Cross disrupts dark magic!")
    if player.name == "Iron Stake" and "Spectral" in necromancer.name:
        battle.player_power += 4
        battle.effects.append("Iron pierces spectral defenses!")

    if necromancer.name == "Death's Touch" and random.chance(DEATHS_TOUCH_CHANCE):
        battle.necromancer_power = DEATHS_TOUCH_POWER
        battle.effects.append("Death's Touch activates! Instant defeat!")
    if necromancer.name == "Dark Ritual":
        battle.necromancer_power *= 2
        battle.effects.append("Dark Ritual doubles the necromancer's power!")
    if necromancer.name == "Bone Shield" and battle.player_power < 7:
        battle.necromancer_power += 2
        battle.effects.append("Bone Shield absorbs weak attacks!")

    return battle


@dataclass
class Duel:
    """Both hands plus the round in play. Persists across rounds."""
    player_hand: list[DuelCard]
    necromancer_hand: list[DuelCard]
    battle: Battle | None = None
    history: list[str] = field(default_factory=list)


class NecromancersGambit(SidequestGame):
    """Card duel: best of three with card effects."""

    game_id = "necromancers-gambit"
    title = "Necromancer's Gambit"
    description = "A strategic battle of cards against the forces of darkness"
    difficulty = "Hard"

    resolve_ms = REPLY_MS + BATTLE_MS + RESULT_MS

    success_threshold = 2
    failure_threshold = 2

    accepted_actions = frozenset({ActionType.CHOOSE})

    def on_session_start(self):
        self.session.extras["duel"] = Duel(
            player_hand=self.random.sample(PLAYER_DECK, HAND_SIZE),
            necromancer_hand=self.random.sample(NECROMANCER_DECK, HAND_SIZE),
        )

    @property
    def duel(self) -> Duel:
        return self.session.extras["duel"]

    def next_content(self) -> Duel:
        self.duel.battle = None
        return self.duel

    def on_present(self, content: Duel):
        self.session.round += 1

    def handle_action(self, action: Action) -> ActionResult:
        duel = self.duel
        card = next((c for c in duel.player_hand if c.id == action.get("value")), None)
        if card is None:
            return ActionResult.ignored(self.phase)

        duel.player_hand.remove(card)
        reply = self.random.choice(duel.necromancer_hand)
        duel.necromancer_hand.remove(reply)

        duel.battle = fight(card, reply, self.random)
        text = duel.battle.describe()
        duel.history.append(text)
        if duel.battle.resolution == Resolution.SUCCESS:
            self.session.score += 1
        return self._resolve(duel.battle.resolution, message=text)

    def verdict(self) -> Verdict:
        verdict = super().verdict()
        if verdict != Verdict.CONTINUE or self.duel.player_hand:
            return verdict
        # Hands exhausted: final tally
        if self.session.successes > self.session.failures:
            return Verdict.WIN
        return Verdict.LOSE

    def on_finish(self, outcome: Outcome):
        if outcome == Outcome.WON:
            self.session.message = "Impossible! No mortal should possess such power!"
        else:
            self.session.message = "Your soul belongs to me now, foolish mortal!"

    def content_view(self) -> dict[str, Any]:
        duel = self.duel
        battle = duel.battle if self.phase == Phase.RESOLVING else None
        return {
            "round": self.session.round,
            "player_wins": self.session.successes,
            "necromancer_wins": self.session.failures,
            "hand": [c.to_dict() for c in duel.player_hand],
            "necromancer_cards_left": len(duel.necromancer_hand),
            "battle": {
                "player_card": battle.player_card.to_dict(),
                "necromancer_card": battle.necromancer_card.to_dict(),
                "player_power": battle.player_power,
                "necromancer_power": battle.necromancer_power,
                "effects": list(battle.effects),
            } if battle else None,
            "history": list(duel.history),
        }
