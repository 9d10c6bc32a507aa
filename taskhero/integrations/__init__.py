"""
TaskHero framework integrations.

The FastAPI adapter lives in taskhero.integrations.fastapi and needs the
``fastapi`` extra.
"""
