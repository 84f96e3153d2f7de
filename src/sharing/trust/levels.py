"""Discretized trust levels.

A user's trust score is computed elsewhere; only a change of *level*
is notification-worthy. Levels are numbered from 1 and each has the
minimum number of points needed to reach it.
"""

from bisect import bisect_right

# (level, name, points needed)
TRUST_LEVELS = [
    (1, "Plankton", 0),
    (2, "Hatchling", 100),
    (3, "Shrimp", 240),
    (4, "Crab", 436),
    (5, "Lobster", 710),
    (6, "Jellyfish", 1095),
    (7, "Angelfish", 1632),
    (8, "Pufferfish", 2385),
    (9, "Big Tuna", 3439),
    (10, "Squid", 4915),
    (11, "Sea Turtle", 6981),
    (12, "Octopus", 9874),
    (13, "Otter", 13923),
    (14, "Seal", 19593),
    (15, "Penguin", 27530),
    (16, "Dolphin", 38642),
    (17, "Orca", 54199),
    (18, "Sperm Whale", 75978),
    (19, "Blue Whale", 106470),
    (20, "Mermaid", 149158),
    (21, "Ocean", 208921),
    (22, "Poseidon", 292589),
    (23, "Gaia", 409724),
    (24, "Moon", 573714),
    (25, "Sun", 803300),
    (26, "Solar System", 1124720),
    (27, "Shooting Star", 1574708),
    (28, "Comet", 2204691),
    (29, "North Star", 3086667),
    (30, "Galaxy", 4321434),
    (31, "Infinity", 6050108),
]

_THRESHOLDS = [points for _, _, points in TRUST_LEVELS]


def level_for(score) -> int:
    """Return the level reached by `score`. Negative scores count as zero."""
    score = max(score or 0, 0)
    return TRUST_LEVELS[bisect_right(_THRESHOLDS, score) - 1][0]


def level_name(level: int) -> str:
    return TRUST_LEVELS[level - 1][1]
