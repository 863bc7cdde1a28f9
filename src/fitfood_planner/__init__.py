"""Nutrition and cost planner for the FitFoodWay product catalog."""

__version__ = "0.1.0"
