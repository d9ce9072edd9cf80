"""
Difficulty presets
Each preset fully determines the board shape and mine density
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class DifficultyConfig:
    """Board dimensions and mine count for one difficulty"""
    width: int
    height: int
    mine_count: int


# Difficulty presets (width, height, mines), easiest first
DIFFICULTIES: Dict[str, DifficultyConfig] = {
    'easy': DifficultyConfig(9, 9, 10),
    'normal': DifficultyConfig(16, 16, 40),
    'hard': DifficultyConfig(24, 16, 72),
    'hardest': DifficultyConfig(30, 16, 99),
}

DEFAULT_DIFFICULTY = 'easy'


def get_difficulty_config(difficulty: str) -> DifficultyConfig:
    """Look up a preset; raises ValueError for names outside DIFFICULTIES"""
    if difficulty not in DIFFICULTIES:
        raise ValueError(f"Unknown difficulty: {difficulty!r}")
    return DIFFICULTIES[difficulty]


def difficulty_rank(difficulty: str) -> int:
    """Position of the preset in DIFFICULTIES, unknown names sort last"""
    names = list(DIFFICULTIES)
    return names.index(difficulty) if difficulty in names else len(names)
