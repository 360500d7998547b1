"""Error taxonomy shared by the pipeline and pricing engines.

The engines never perform I/O, so these are the only errors they raise.
The HTTP layer maps them to 4xx responses.
"""

from __future__ import annotations


class PartnerDeskError(Exception):
    """Base class for domain errors."""


class ConfigurationError(PartnerDeskError):
    """An id (subscription, tier, scenario, currency) cannot be resolved against the pricing table."""


class ValidationError(PartnerDeskError):
    """Caller-supplied input is outside the accepted range (negative cameras, negative discount)."""


class NotFoundError(PartnerDeskError):
    """A referenced record has no match where a hard lookup is required."""
