"""Scoring functions and model building for the selection of one feature per group."""
