"""
AI Package for Tiger Sweeper
Constraint-based inference used for hints, auto-assist and the probability overlay
"""

from .inference import (
    AiMove,
    Hint,
    MoveKind,
    build_probability_map,
    get_ai_move,
    get_assist_move,
    get_certain_move,
    get_probability_hints,
    get_uncertain_hint,
)

__all__ = [
    'AiMove',
    'Hint',
    'MoveKind',
    'build_probability_map',
    'get_ai_move',
    'get_assist_move',
    'get_certain_move',
    'get_probability_hints',
    'get_uncertain_hint',
]
