"""Experiment scripts."""
