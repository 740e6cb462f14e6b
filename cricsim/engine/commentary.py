"""
Ball-by-ball commentary lines, looked up by outcome label.
"""
import random
from typing import Optional

COMMENTARY_TEMPLATES = {
    "0": [
        "Defended solidly back to the bowler.",
        "No run, straight to the fielder.",
        "Beaten! Lovely delivery.",
        "Leaves it alone outside off.",
        "Solid defense, respects the good ball.",
    ],
    "1": [
        "Pushed into the gap for a single.",
        "Quick single taken.",
        "Worked away to square leg for one.",
        "Edged but safe, they take a run.",
        "Tapped to mid-on for a sharp single.",
    ],
    "2": [
        "Driven through covers, they'll come back for two.",
        "Good running, two runs added.",
        "Flicked away, easy couple.",
        "Punched off the back foot for a brace.",
    ],
    "3": [
        "Great placement! They push hard for three.",
        "Stopped just inside the boundary, three runs saved.",
        "Timed well, but the outfield is slow. Three runs.",
    ],
    "4": [
        "FOUR! Glorious shot through the covers!",
        "Smashed down the ground for FOUR!",
        "Edged and four! Lucky boundary.",
        "FOUR! Pulled away with power.",
        "Beautiful drive, races to the fence for FOUR!",
    ],
    "6": [
        "SIX! That's huge! Out of the ground!",
        "SIX! Clean strike over long-on!",
        "Maximum! Picked the length early.",
        "Top edge... and it flies for SIX!",
        "Launched into the stands! Massive hit!",
    ],
    "W": [
        "OUT! Clean bowled! What a delivery!",
        "Through the gate, the stumps are shattered!",
        "Bowled him! Timber!",
    ],
}


def get_commentary(label: str, batter_name: str, bowler_name: str, rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    templates = COMMENTARY_TEMPLATES.get(label, COMMENTARY_TEMPLATES["0"])
    line = rng.choice(templates)
    return f"{bowler_name} to {batter_name}: {line}"
