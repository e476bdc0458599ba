"""Job board backend: company onboarding, VIP packages and payments."""

__version__ = "1.0.0"
