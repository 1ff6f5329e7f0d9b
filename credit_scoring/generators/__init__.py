"""Synthetic data generators."""

from credit_scoring.generators.registration import RegistrationEventGenerator

__all__ = ["RegistrationEventGenerator"]
