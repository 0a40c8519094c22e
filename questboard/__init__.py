"""QuestBoard - gamified activity tracking service"""

__version__ = "1.0.0"
