"""Independently deployable functions."""
