"""
Infrastructure layer - persistence for trainer data.

- repository: the TrainerRepository interface plus an in-memory implementation
- snowflake: Snowflake connection management and the SQL-backed repository

These wrappers translate between storage formats and our domain models.
"""
