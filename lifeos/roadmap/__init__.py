"""Roadmap Generator - from current crisis to a one-year goal

Takes a user's goal, their most pressing worry, the constraints they are
living with (no ID, no bank account, ...) and a zip code, and asks the
model for a four-phase plan: Stabilization, Foundation, Growth, Thriving.

When the model is unavailable (quota, network, malformed output) the
user still gets a plan: a canned stabilization roadmap is returned and
flagged as a fallback.

Components:
    models.py: Pydantic schema the model output is validated against
    generator.py: Prompt building, the OpenAI call and the fallback plan
"""

# Constraint tags the prompt rules react to
CONSTRAINT_NO_ID = "No ID"
CONSTRAINT_NO_BANK_ACCOUNT = "No Bank Account"
WORRY_HOUSING = "Housing"

PHASE_NAMES = ("Stabilization", "Foundation", "Growth", "Thriving")

DEFAULT_MODEL = "gpt-4o"

__all__ = [
    "CONSTRAINT_NO_BANK_ACCOUNT",
    "CONSTRAINT_NO_ID",
    "DEFAULT_MODEL",
    "PHASE_NAMES",
    "WORRY_HOUSING",
]
