"""
TaskHero CLI commands.
"""
