"""Scheduling core (dates, schedule, streaks, analytics) and application services."""
