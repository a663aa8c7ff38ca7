"""StudySafe: study-planning and wellbeing guidance engine."""

__version__ = "0.1.0"
