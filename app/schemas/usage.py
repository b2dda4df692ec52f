from pydantic import BaseModel


class UsageCounts(BaseModel):
    brand: int = 0
    competitor: int = 0
    total: int = 0


class UsageResponse(BaseModel):
    plan: str
    usage: UsageCounts
    limit: int
    remaining: int
    can_analyze: bool
