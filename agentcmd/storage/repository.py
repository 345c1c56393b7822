"""Data access repository."""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import CommandUsage


class UsageRepository:
    """Repository for command usage tracking."""

    def __init__(self, db: AsyncSession):
        """Initialize with database session."""
        self.db = db

    async def record(
        self,
        command: str,
        arguments: str = "",
        valid: bool = True,
        error: Optional[str] = None,
        source: Optional[str] = None,
    ) -> CommandUsage:
        """Record a command invocation."""
        usage = CommandUsage(
            command=command.lstrip("/"),
            arguments=arguments,
            valid=valid,
            error=error,
            source=source,
            timestamp=datetime.now(timezone.utc),
        )

        self.db.add(usage)
        await self.db.flush()
        return usage

    async def recent(self, limit: int = 20) -> list[CommandUsage]:
        """List most recent invocations, newest first."""
        result = await self.db.execute(
            select(CommandUsage)
            .order_by(CommandUsage.timestamp.desc(), CommandUsage.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def counts(self) -> list[tuple[str, int]]:
        """Count valid invocations per command, most used first."""
        total = func.count(CommandUsage.id)
        result = await self.db.execute(
            select(CommandUsage.command, total)
            .where(CommandUsage.valid.is_(True))
            .group_by(CommandUsage.command)
            .order_by(total.desc(), CommandUsage.command)
        )
        return [(row[0], row[1]) for row in result.all()]
