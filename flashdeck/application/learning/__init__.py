"""
Learning bounded context - Application layer.

Use cases for preparing, running and recording practice sessions, and
for querying and mutating learner progress.
"""
