"""Input validation package."""

from fiscalforge.validation.validator import TransactionInputValidator

__all__ = ["TransactionInputValidator"]
