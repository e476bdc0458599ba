"""Database models."""

# Import all models in dependency order to ensure proper relationship initialization

# Base models (no foreign keys)
from jobboard.models.account import Account
from jobboard.models.province import Province
from jobboard.models.vip_package import VipPackage

# Models with foreign keys to base models
from jobboard.models.company import Company

# Models with foreign keys to other models
from jobboard.models.order import CompanyVipPackage

# Export all models
__all__ = [
    "Account",
    "Province",
    "VipPackage",
    "Company",
    "CompanyVipPackage",
]
