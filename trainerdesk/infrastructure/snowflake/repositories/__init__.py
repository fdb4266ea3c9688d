"""
Repository pattern implementations for Snowflake.

Repositories translate between domain models and database representations.
"""

from .trainer import SCHEMA_STATEMENTS, SnowflakeTrainerRepository

__all__ = ["SCHEMA_STATEMENTS", "SnowflakeTrainerRepository"]
