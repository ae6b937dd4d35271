# Application Package
from .deck_config import DeckConfigResolver
from .learning_steps import LearningStepScheduler, StepDecision
from .review_service import ReviewSession
from .session import SessionStepRegistry
from .state_machine import ReviewStateMachine
from .undo import ReviewUndoStack

__all__ = [
    "DeckConfigResolver",
    "LearningStepScheduler",
    "StepDecision",
    "ReviewSession",
    "SessionStepRegistry",
    "ReviewStateMachine",
    "ReviewUndoStack",
]
