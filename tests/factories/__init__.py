"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import PMScheduleFactory, PMTemplateFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.pm import PMCompletionFactory, PMScheduleFactory, PMTemplateFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # PM
    "PMCompletionFactory",
    "PMScheduleFactory",
    "PMTemplateFactory",
]
