"""Per-client request limits for the analysis endpoints (slowapi)."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Keyed by client address; analysis endpoints set their own per-route limits
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
