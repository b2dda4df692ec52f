from app.models.api_usage import ApiUsage
from app.models.brand_analysis import BrandAnalysis
from app.models.competitor_analysis import CompetitorAnalysis
from app.models.user import User

__all__ = [
    "ApiUsage",
    "BrandAnalysis",
    "CompetitorAnalysis",
    "User",
]
