"""Cadence - recurrence and scheduling engine for a personal task planner."""
