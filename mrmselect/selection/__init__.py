"""Grouping of features along the retention time axis and windowed selection of one feature per group."""

from mrmselect.selection.selector import FeatureSelector, select_features

__all__ = ["FeatureSelector", "select_features"]
