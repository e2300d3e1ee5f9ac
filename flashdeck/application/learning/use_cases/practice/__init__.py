from .complete_practice_session_use_case import CompletePracticeSessionUseCase
from .prepare_practice_session_use_case import PreparePracticeSessionUseCase

__all__ = ["CompletePracticeSessionUseCase", "PreparePracticeSessionUseCase"]
