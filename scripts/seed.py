"""
Seed the default tenant, system permissions, system roles and the admin user.

Safe to run repeatedly: existing rows are left untouched.

Usage:
    python -m scripts.seed
    python -m scripts.seed --create-tables   # development databases without migrations
"""
import asyncio

from sqlalchemy import text

import wms.infrastructure.persistence.models  # noqa: F401  (registers tables)
from wms.application.services.seed_service import SeedService
from wms.infrastructure.config.settings import get_settings
from wms.infrastructure.persistence.database import (AsyncSessionLocal, Base,
                                                     engine)
from wms.shared.telemetry.logging import setup_logging


async def create_tables() -> None:
    settings = get_settings()
    async with engine.begin() as conn:
        if settings.database_schema and not settings.is_sqlite:
            await conn.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{settings.database_schema}"'))
        await conn.run_sync(Base.metadata.create_all)
    print("✓ Tables created")


async def seed(create: bool = False) -> None:
    if create:
        await create_tables()

    async with AsyncSessionLocal() as db:
        async with db.begin():
            result = await SeedService(db).seed()

    print(f"\n🌱 Seeded {len(result.created)} new row(s)")
    for item in result.created:
        print(f"  ✓ {item}")

    print(f"\nDefault tenant: {result.tenant.name} ({result.tenant.slug})")
    print(f"Admin user:     {result.admin_user.username}")
    if result.admin_password:
        print(f"Admin password: {result.admin_password}")
        print("  ⚠ Generated password, shown only once. Change it after the first login.")

    await engine.dispose()


def main():
    """CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(description="Seed default WMS data")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding",
    )
    args = parser.parse_args()

    setup_logging()
    asyncio.run(seed(create=args.create_tables))


if __name__ == "__main__":
    main()
