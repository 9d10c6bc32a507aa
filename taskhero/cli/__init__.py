"""
TaskHero command-line interface.
"""
