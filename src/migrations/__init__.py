"""Schema upgrades for legacy document-store exports."""

from src.migrations.records import upgrade_deal, upgrade_user

__all__ = ["upgrade_deal", "upgrade_user"]
