"""Dialect-aware INSERT ... ON CONFLICT helper."""
from sqlalchemy import func
from sqlalchemy.dialects import mysql, postgresql, sqlite


def upsert(session, model, values: dict, conflict_columns: list, update_columns: list,
           protect_column: str = None) -> bool:
    """Insert ``values`` into ``model``'s table, updating on a unique-key clash.

    ``conflict_columns`` must match a unique constraint of the table. Only the
    columns in ``update_columns`` are overwritten on conflict. When
    ``protect_column`` is given, an existing row whose boolean
    ``protect_column`` is true is left untouched. The statement is executed on
    ``session``; committing is left to the caller.

    Returns True if a row was inserted or updated.
    """
    table = model.__table__
    dialect = session.get_bind().dialect.name

    if dialect in ('postgresql', 'sqlite'):
        insert = postgresql.insert if dialect == 'postgresql' else sqlite.insert
        stmt = insert(table).values(**values)
        where = table.c[protect_column].is_(False) if protect_column else None
        stmt = stmt.on_conflict_do_update(
            index_elements=conflict_columns,
            set_={col: stmt.excluded[col] for col in update_columns},
            where=where,
        )
    elif dialect in ('mysql', 'mariadb'):
        stmt = mysql.insert(table).values(**values)
        if protect_column:
            # Every assignment keeps the old value while the row is protected
            updates = {
                col: func.if_(table.c[protect_column], table.c[col], stmt.inserted[col])
                for col in update_columns
            }
        else:
            updates = {col: stmt.inserted[col] for col in update_columns}
        stmt = stmt.on_duplicate_key_update(updates)
    else:
        raise NotImplementedError(f"Upsert not supported for dialect '{dialect}'")

    result = session.execute(stmt)
    return result.rowcount != 0
