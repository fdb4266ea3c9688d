"""
TrainerDesk - client, billing and schedule management for personal trainers.

This package contains the complete application:
- core: Framework-agnostic business logic (billing cycles, payments, availability)
- infrastructure: Persistence (in-memory and Snowflake)
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
