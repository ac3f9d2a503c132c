"""Dialect-aware INSERT ... ON CONFLICT helper."""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


def insert_for(session: AsyncSession, model):
    """Return an ``insert()`` construct that supports ``on_conflict_do_update``."""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"Upsert not supported on dialect: {dialect}")


async def upsert(
    session: AsyncSession,
    model,
    values: dict,
    *,
    conflict_columns: list[str],
) -> None:
    """Insert ``values`` or overwrite every non-key column of the existing row."""
    stmt = insert_for(session, model).values(**values)
    update_cols = {
        name: stmt.excluded[name]
        for name in values
        if name not in conflict_columns
    }
    stmt = stmt.on_conflict_do_update(index_elements=conflict_columns, set_=update_cols)
    await session.execute(stmt)
