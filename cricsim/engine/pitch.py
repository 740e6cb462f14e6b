"""
Pitch modifiers and grounds.
Each named pitch type carries a per-format-family base run rate and wicket
multiplier plus format-independent bowling bonuses.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from cricsim.engine.errors import UnknownPitchError
from cricsim.engine.formats import FormatFamily

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormatPitchModifier:
    run_rate: float
    wicket_chance: float


@dataclass(frozen=True)
class PitchModifier:
    name: str
    by_family: Dict[FormatFamily, FormatPitchModifier]
    pace_bonus: float = 0.0
    spin_bonus: float = 0.0
    chase_penalty: float = 1.0
    deterioration: float = 0.0
    unpredictability: float = 0.0

    def for_family(self, family: FormatFamily) -> FormatPitchModifier:
        return self.by_family[family]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "formats": {
                fam.value: {"run_rate": m.run_rate, "wicket_chance": m.wicket_chance}
                for fam, m in self.by_family.items()
            },
            "pace_bonus": self.pace_bonus,
            "spin_bonus": self.spin_bonus,
            "chase_penalty": self.chase_penalty,
            "deterioration": self.deterioration,
            "unpredictability": self.unpredictability,
        }


def _mods(short: tuple, limited: tuple, multi_day: tuple) -> Dict[FormatFamily, FormatPitchModifier]:
    return {
        FormatFamily.SHORT: FormatPitchModifier(*short),
        FormatFamily.LIMITED: FormatPitchModifier(*limited),
        FormatFamily.MULTI_DAY: FormatPitchModifier(*multi_day),
    }


BALANCED_PITCH = "Balanced Sporting Pitch"

# Pitch presets
PITCHES: Dict[str, PitchModifier] = {
    BALANCED_PITCH: PitchModifier(
        BALANCED_PITCH, _mods((3.85, 1.20), (2.45, 1.15), (1.0, 1.0)),
        deterioration=0.02,
    ),
    "Dusty Spinner's Haven": PitchModifier(
        "Dusty Spinner's Haven", _mods((3.10, 1.40), (2.10, 1.25), (0.9, 1.15)),
        pace_bonus=-0.05, spin_bonus=0.15, chase_penalty=0.95, deterioration=0.1, unpredictability=0.005,
    ),
    "Green Top": PitchModifier(
        "Green Top", _mods((3.30, 1.45), (2.20, 1.30), (0.85, 1.2)),
        pace_bonus=0.15, spin_bonus=-0.05, deterioration=0.05,
    ),
    "Batting Paradise": PitchModifier(
        "Batting Paradise", _mods((4.40, 1.0), (2.85, 1.0), (1.2, 0.85)),
    ),
    "Dead Slow Track": PitchModifier(
        "Dead Slow Track", _mods((2.75, 1.30), (2.0, 1.20), (0.8, 1.1)),
        pace_bonus=-0.05, spin_bonus=0.1, deterioration=0.05,
    ),
    "Cracked Worn Surface": PitchModifier(
        "Cracked Worn Surface", _mods((3.30, 1.40), (2.20, 1.30), (0.75, 1.25)),
        pace_bonus=0.05, spin_bonus=0.1, chase_penalty=0.98, deterioration=0.15, unpredictability=0.015,
    ),
}


def get_pitch(name: str) -> PitchModifier:
    """Strict lookup, raises UnknownPitchError."""
    try:
        return PITCHES[name]
    except KeyError:
        raise UnknownPitchError(name) from None


@dataclass(frozen=True)
class Ground:
    name: str
    code: str
    pitch: str
    capacity: int = 0
    boundary_size: str = "Medium"

    @property
    def pitch_modifier(self) -> PitchModifier:
        return get_pitch(self.pitch)


GROUNDS: Dict[str, Ground] = {
    g.code: g for g in [
        Ground("Keenjhur Cricket Ground", "KCG", BALANCED_PITCH, 25000, "Medium"),
        Ground("School Ground", "SG", "Dusty Spinner's Haven", 5000, "Small"),
        Ground("Transformer Ground", "TG", "Green Top", 12000, "Large"),
        Ground("Lake Way Ground", "LWG", "Batting Paradise", 18000, "Small"),
        Ground("Home Gate Ground", "HGG", "Dead Slow Track", 8000, "Medium"),
        Ground("Mosque Cricket Ground", "MCG", "Cracked Worn Surface", 15000, "Large"),
    ]
}

DEFAULT_GROUND = "KCG"


def get_ground(code: Optional[str]) -> Ground:
    """Ground for a home-ground code. Teams without one play at the default ground."""
    if code is None:
        return GROUNDS[DEFAULT_GROUND]
    ground = GROUNDS.get(code)
    if ground is None:
        logger.warning("Unknown ground %r, using %s", code, DEFAULT_GROUND)
        return GROUNDS[DEFAULT_GROUND]
    return ground
