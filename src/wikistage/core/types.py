"""Core type definitions."""

from typing import Literal, NewType

# Page identifier that passed path validation (alphanumeric only)
# Distinct from raw URL segments to catch unvalidated use
Title = NewType("Title", str)

Action = Literal["view", "edit", "save"]
