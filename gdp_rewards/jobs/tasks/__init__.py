"""Dramatiq tasks."""
