from pydantic import BaseModel, Field


class ProviderKeyRequest(BaseModel):
    provider: str = Field(min_length=1, max_length=20)
    api_key: str = Field(min_length=1, max_length=500)


class ProviderKeyStatus(BaseModel):
    provider: str
    stored: bool  # the user saved their own key
    available: bool  # a key is usable (own or server)


class ProviderKeyListResponse(BaseModel):
    items: list[ProviderKeyStatus]
