"""
Background jobs.

Dramatiq broker, async runner and reward tasks.
"""
