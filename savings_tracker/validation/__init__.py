"""Form validation package."""

from savings_tracker.validation.validator import FormValidator

__all__ = ["FormValidator"]
