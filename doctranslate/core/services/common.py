"""
Helpers shared by the remote operations.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from ..exceptions import ValidationError
from ..llm import LLMProvider, create_llm_provider


@asynccontextmanager
async def provider_scope(provider: Optional[LLMProvider]) -> AsyncIterator[LLMProvider]:
    """
    Use the caller's provider, or a configured one that is closed afterwards.
    """
    if provider is not None:
        yield provider
        return

    owned = create_llm_provider()
    try:
        yield owned
    finally:
        await owned.close()


def require_fields(request, *fields: str):
    """Reject requests whose required string fields are empty"""
    missing = [name for name in fields if not str(getattr(request, name, '') or '').strip()]
    if missing:
        raise ValidationError(
            f"Missing or empty field: {missing[0]}",
            context={'missing': missing}
        )
