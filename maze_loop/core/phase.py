import logging
from enum import Enum

from maze_loop.core.errors import PhaseTransitionError

logger = logging.getLogger(__name__)

class Phase(Enum):
    IDLE = "idle"
    GENERATING = "generating"
    SOLVING = "solving"
    ADVANCING = "advancing"

# Every busy phase must drop back to IDLE before the next one starts,
# so GENERATING and SOLVING can never overlap.
ALLOWED_TRANSITIONS = {
    Phase.IDLE: {Phase.GENERATING, Phase.SOLVING, Phase.ADVANCING},
    Phase.GENERATING: {Phase.IDLE},
    Phase.SOLVING: {Phase.IDLE},
    Phase.ADVANCING: {Phase.IDLE},
}

class PhaseGuard:
    def __init__(self):
        self.phase = Phase.IDLE

    def can_enter(self, phase: Phase) -> bool:
        return phase in ALLOWED_TRANSITIONS[self.phase]

    def enter(self, phase: Phase):
        if not self.can_enter(phase):
            raise PhaseTransitionError(f"Cannot enter {phase.value} while {self.phase.value}")
        logger.debug(f"Phase {self.phase.value} -> {phase.value}")
        self.phase = phase

    def try_enter(self, phase: Phase) -> bool:
        if not self.can_enter(phase):
            return False
        self.enter(phase)
        return True

    def leave(self):
        if self.phase is not Phase.IDLE:
            logger.debug(f"Phase {self.phase.value} -> idle")
        self.phase = Phase.IDLE

    def reset(self):
        self.phase = Phase.IDLE

