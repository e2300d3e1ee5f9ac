"""
Learning bounded context - Domain layer.

This context handles flashcard practice:
- Selecting which cards a learner practices
- The question/answer/label cycle of a practice session
- Known-card tracking and daily practice statistics

Aggregates:
- PracticeSession: In-memory state machine for one practice run
"""
