"""
FastAPI dependency injection.

Dependencies provide the repository, configuration and the requesting
trainer's identity to route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be overridden in tests via app.dependency_overrides
- Configuration is centralized
- Resource lifecycle (connections) is managed properly

Each dependency is a function that FastAPI calls when needed.
"""

import logging
from datetime import datetime
from typing import Annotated, Generator, Optional

from fastapi import Depends, Header, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from ..config.settings import Settings, get_settings
from ..infrastructure.repository import InMemoryTrainerRepository, TrainerRepository
from ..infrastructure.snowflake.client import SnowflakeConfig, get_snowflake_connection
from ..infrastructure.snowflake.repositories.trainer import SnowflakeTrainerRepository

logger = logging.getLogger(__name__)

# API Key security scheme
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

# Shared in-memory repository so mock-mode data persists across requests
_mock_repository: Optional[InMemoryTrainerRepository] = None


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

async def verify_api_key(
    settings: Annotated[Settings, Depends(get_settings)],
    api_key: str = Security(api_key_header),
) -> str:
    """
    Validate API key from request header.

    Raises 403 if key is invalid or missing.
    """
    if not api_key:
        logger.warning("Request missing API key")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="API key required. Provide X-API-Key header.",
        )

    if api_key not in settings.api_keys_list:
        logger.warning(
            "Invalid API key attempt",
            extra={"key_prefix": api_key[:8]}
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key",
        )

    return api_key


async def get_current_trainer(
    api_key: Annotated[str, Depends(verify_api_key)],
    x_user_id: Annotated[Optional[str], Header()] = None,
) -> str:
    """
    The trainer every query is scoped to, from the X-User-Id header.

    Raises 401 when the header is missing or blank.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header required",
        )
    return x_user_id.strip()


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_repository(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Generator[TrainerRepository, None, None]:
    """
    Provide the TrainerRepository for this request.

    This is a generator function because the Snowflake connection has
    to be closed after the request; FastAPI runs the code after `yield`
    once the response is sent.

    In mock mode, one in-memory repository is shared across requests
    so that data persists for the life of the process.
    """
    global _mock_repository

    if settings.snowflake_mock_mode:
        if _mock_repository is None:
            _mock_repository = InMemoryTrainerRepository()
            logger.info("Created shared in-memory repository")
        yield _mock_repository
    else:
        config = SnowflakeConfig(
            account=settings.snowflake_account,
            user=settings.snowflake_user,
            password=settings.snowflake_password or None,
            private_key_path=settings.snowflake_private_key_path,
            database=settings.snowflake_database,
            schema=settings.snowflake_schema,
            warehouse=settings.snowflake_warehouse,
            role=settings.snowflake_role,
        )

        with get_snowflake_connection(config) as conn:
            logger.debug("Created SnowflakeTrainerRepository")
            yield SnowflakeTrainerRepository(conn)


def get_now() -> datetime:
    """Current local time; overridden in tests to pin the clock."""
    return datetime.now()


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
AuthenticatedUser = Annotated[str, Depends(verify_api_key)]
CurrentTrainer = Annotated[str, Depends(get_current_trainer)]
RepositoryDep = Annotated[TrainerRepository, Depends(get_repository)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
NowDep = Annotated[datetime, Depends(get_now)]
