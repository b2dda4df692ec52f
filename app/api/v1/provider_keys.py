"""Provider key management: store, list (never reveal) and remove LLM API keys."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user
from app.core.exceptions import BadRequestError, NotFoundError
from app.db.postgres import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.provider_key import ProviderKeyListResponse, ProviderKeyRequest, ProviderKeyStatus
from app.services import provider_keys

router = APIRouter(prefix="/provider-keys", tags=["provider-keys"])


def _status(user: User) -> ProviderKeyListResponse:
    stored = set(provider_keys.stored_providers(user))
    available = set(provider_keys.configured_providers(user))
    return ProviderKeyListResponse(
        items=[
            ProviderKeyStatus(provider=name, stored=name in stored, available=name in available)
            for name in provider_keys.PROVIDERS
        ]
    )


@router.get("", response_model=ProviderKeyListResponse)
async def list_provider_keys(user: User = Depends(get_current_user)):
    return _status(user)


@router.post("", response_model=ProviderKeyListResponse, status_code=201)
async def save_provider_key(
    body: ProviderKeyRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    provider = provider_keys.normalize_provider(body.provider)
    if provider is None:
        raise BadRequestError(f"Unknown provider '{body.provider}'")

    api_key = body.api_key.strip()
    if not provider_keys.validate_api_key(provider, api_key):
        raise BadRequestError(f"Invalid {provider} API key format")

    provider_keys.set_user_key(user, provider, api_key)
    await db.flush()
    return _status(user)


@router.delete("/{provider}", response_model=MessageResponse)
async def delete_provider_key(
    provider: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    name = provider_keys.normalize_provider(provider)
    if name is None:
        raise BadRequestError(f"Unknown provider '{provider}'")
    if not provider_keys.clear_user_key(user, name):
        raise NotFoundError(f"No {name} key stored")
    await db.flush()
    return MessageResponse(message=f"{name} key removed")
