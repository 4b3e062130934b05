"""Key/value settings store.

Plugin settings live in the system_config table, either global (no
sales channel) or scoped to one sales channel.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from searchfeed.domain.entities import SystemConfigEntry
from searchfeed.infrastructure.database import Base

# Prefix of all plugin setting keys
CONFIG_PREFIX = "SearchFeed.config."


def config_key(name: str) -> str:
    """Get the full key of a plugin setting (e.g. "shopkey")."""
    return CONFIG_PREFIX + name


class SystemConfigModel(Base):
    """System configuration table.

    Attributes:
        id: Insertion sequence.
        configuration_key: Setting key (e.g. "SearchFeed.config.shopkey").
        configuration_value: JSON value.
        sales_channel_id: Owning channel, None for global settings.
    """

    __tablename__ = "system_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    configuration_key: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    configuration_value: Mapped[Any] = mapped_column(JSON, nullable=True)
    sales_channel_id: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<SystemConfig(key={self.configuration_key}, channel={self.sales_channel_id})>"

    def to_entity(self) -> SystemConfigEntry:
        return SystemConfigEntry(
            id=self.id,
            configuration_key=self.configuration_key,
            configuration_value=self.configuration_value,
            sales_channel_id=self.sales_channel_id,
        )


class SystemConfigRepository:
    """Repository for system configuration rows."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def find_by_key(self, configuration_key: str) -> list[SystemConfigEntry]:
        """Get every entry of a key across all scopes.

        Args:
            configuration_key: Setting key.

        Returns:
            Entries in insertion order.
        """
        result = await self.session.execute(
            select(SystemConfigModel)
            .where(SystemConfigModel.configuration_key == configuration_key)
            .order_by(SystemConfigModel.id)
        )
        return [model.to_entity() for model in result.scalars().all()]

    async def get_model(
        self,
        configuration_key: str,
        sales_channel_id: str | None,
    ) -> SystemConfigModel | None:
        """Get the row of a key in exactly one scope.

        Args:
            configuration_key: Setting key.
            sales_channel_id: Channel scope, None for the global scope.

        Returns:
            First matching row, None if the key is unset in that scope.
        """
        query = select(SystemConfigModel).where(
            SystemConfigModel.configuration_key == configuration_key
        )
        if sales_channel_id is None:
            query = query.where(SystemConfigModel.sales_channel_id.is_(None))
        else:
            query = query.where(SystemConfigModel.sales_channel_id == sales_channel_id)

        result = await self.session.execute(query.order_by(SystemConfigModel.id).limit(1))
        return result.scalar_one_or_none()


class SystemConfigService:
    """Reads and writes plugin settings.

    Channel-scoped values win over global ones.

    Example usage:
        service = SystemConfigService(session)
        shopkey = await service.get("SearchFeed.config.shopkey", sales_channel_id)
        await service.set("SearchFeed.config.isStaging", True, sales_channel_id)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.repository = SystemConfigRepository(session)

    async def get(self, key: str, sales_channel_id: str | None = None) -> Any:
        """Get a setting.

        Args:
            key: Setting key.
            sales_channel_id: Channel to read for, None for global only.

        Returns:
            The channel value if set, else the global value, else None.
        """
        if sales_channel_id is not None:
            model = await self.repository.get_model(key, sales_channel_id)
            if model is not None and model.configuration_value is not None:
                return model.configuration_value

        model = await self.repository.get_model(key, None)
        return model.configuration_value if model else None

    async def set(self, key: str, value: Any, sales_channel_id: str | None = None) -> None:
        """Store a setting in one scope, replacing any previous value.

        Args:
            key: Setting key.
            value: JSON-serializable value.
            sales_channel_id: Channel scope, None for the global scope.
        """
        model = await self.repository.get_model(key, sales_channel_id)
        if model is None:
            model = SystemConfigModel(
                configuration_key=key,
                configuration_value=value,
                sales_channel_id=sales_channel_id,
            )
            self.session.add(model)
        else:
            model.configuration_value = value

        await self.session.flush()
