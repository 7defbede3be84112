"""
Services.

Business logic layer over repositories.
"""

from commission_engine.services.unit_of_work import UnitOfWork

__all__ = ["UnitOfWork"]
