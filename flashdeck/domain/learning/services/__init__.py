from .completion_metrics_calculator import CompletionMetricsCalculator
from .practice_card_selector import PracticeCardSelector

__all__ = ["CompletionMetricsCalculator", "PracticeCardSelector"]
