"""
Shared helpers used by several modules.
"""

from .enums import TextChoices
from .text import contains_text, slugify

__all__ = ["TextChoices", "contains_text", "slugify"]
