"""SQLite schema management (code-first, driven by the module registry)."""

import logging

from src.core import db_client, module_registry


logger = logging.getLogger(__name__)


async def init_db(*, db_path: str | None = None) -> None:
    """Create tables and indexes for every registered module.

    Statements use IF NOT EXISTS, so this is safe to run on every startup.
    """
    module_registry.register_default_modules()
    schemas = module_registry.get_all_table_schemas()
    indexes = module_registry.get_all_indexes()

    conn = await db_client.get_connection(db_path=db_path)
    for table_name, ddl in schemas.items():
        await conn.execute(ddl)
        logger.debug("Ensured table", extra={"table": table_name})
    for ddl in indexes:
        await conn.execute(ddl)
    await conn.commit()

    logger.info(
        "Database schema initialized",
        extra={"tables": sorted(schemas), "index_count": len(indexes)},
    )
