from sqlalchemy.ext.asyncio import AsyncSession


class BaseRepository:
    """Holds the request's ``AsyncSession``.

    Repositories built from the same session form one unit of work: the
    routing service writes through one repository and commits or rolls
    back through it, and the others see the same transaction.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def flush(self) -> None:
        await self._db.flush()

    async def commit(self) -> None:
        await self._db.commit()

    async def rollback(self) -> None:
        await self._db.rollback()
