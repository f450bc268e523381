"""
Settings Service Layer

Read access to restaurant-wide configuration for the order and customer
services, so business logic never queries the settings models directly.
"""

from dataclasses import dataclass

from .models import GlobalSettings


@dataclass(frozen=True)
class LoyaltyRatio:
    """Points credited per full spend amount of an order total."""

    spend_amount: int
    points_earned: int


class SettingsService:
    """
    Service layer for global application settings.
    """

    @staticmethod
    def get_global_settings() -> GlobalSettings:
        return GlobalSettings.load()

    @staticmethod
    def get_loyalty_ratio() -> LoyaltyRatio:
        obj = GlobalSettings.load()
        return LoyaltyRatio(
            spend_amount=obj.loyalty_spend_amount,
            points_earned=obj.loyalty_points_earned,
        )
