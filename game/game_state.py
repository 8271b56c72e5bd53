"""
Game State Machine - level lifecycle
"""

import logging
from enum import Enum, auto

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Level lifecycle states"""
    GENERATING = auto()
    PLAYING = auto()
    WON = auto()
    GAME_OVER = auto()


# Allowed transitions; restart goes back to GENERATING from anywhere
TRANSITIONS = {
    GameState.GENERATING: {GameState.PLAYING, GameState.GENERATING},
    GameState.PLAYING: {GameState.WON, GameState.GAME_OVER, GameState.GENERATING},
    GameState.WON: {GameState.GENERATING},
    GameState.GAME_OVER: {GameState.GENERATING},
}


class GameStateManager:
    """
    Manages level state transitions
    """
    def __init__(self, state=GameState.GENERATING):
        self.current_state = state
        self.previous_state = None

    def transition_to(self, new_state):
        """
        Transition to a new state

        Raises:
            ValueError: If the transition is not allowed
        """
        if new_state not in TRANSITIONS[self.current_state]:
            raise ValueError(f"Cannot go from {self.current_state.name} to {new_state.name}")
        self.previous_state = self.current_state
        self.current_state = new_state
        logger.debug("state %s -> %s", self.previous_state.name, new_state.name)

    def is_state(self, state):
        """Check if current state matches"""
        return self.current_state == state

    def __repr__(self):
        return f"GameStateManager(state={self.current_state.name})"
