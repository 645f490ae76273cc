"""
Seed script: bootstrap admin plus sample students.

Run once after the database is reachable:
  SEED_ADMIN_EMAIL=admin@cambridge.edu.in
  SEED_ADMIN_PASSWORD=YourSecurePassword
  python -m feeledger.db.seed_accounts

Idempotent: existing accounts are left alone, except that students missing a
registration number or semester get them filled in.
"""
import asyncio
import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.auth.security import hash_password
from feeledger.core.config import settings
from feeledger.core.enums import AccountRole
from feeledger.core.logging import configure_logging
from feeledger.db.session import AsyncSessionLocal, create_all
from feeledger.db.stores import AccountStore

logger = logging.getLogger(__name__)

# Default admin (used when SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD not set)
DEFAULT_ADMIN_EMAIL = "admin@cambridge.edu.in"
DEFAULT_ADMIN_PASSWORD = "admin123"
DEFAULT_ADMIN_NAME = "Admin User"

SAMPLE_STUDENT_PASSWORD = "student123"
SAMPLE_STUDENTS = [
    {
        "email": "john.doe@cambridge.edu.in",
        "name": "John Doe",
        "registration_number": "1CR21CS101",
        "department": "Computer Science",
        "year": 3,
        "semester": 5,
        "total_fees": Decimal("150000"),
    },
    {
        "email": "jane.smith@cambridge.edu.in",
        "name": "Jane Smith",
        "registration_number": "1CR22EC045",
        "department": "Electronics",
        "year": 2,
        "semester": 3,
        "total_fees": Decimal("140000"),
    },
    {
        "email": "robert.wilson@cambridge.edu.in",
        "name": "Robert Wilson",
        "registration_number": "1CR20ME023",
        "department": "Mechanical",
        "year": 4,
        "semester": 7,
        "total_fees": Decimal("160000"),
    },
]


async def seed_admin(db: AsyncSession) -> None:
    accounts = AccountStore(db)
    email = (settings.seed_admin_email or DEFAULT_ADMIN_EMAIL).strip().lower()
    password = settings.seed_admin_password or DEFAULT_ADMIN_PASSWORD

    if await accounts.find_by_email(email):
        logger.info("Admin already exists: %s", email)
        return
    await accounts.create(
        email=email,
        password_hash=hash_password(password),
        role=AccountRole.admin.value,
        name=DEFAULT_ADMIN_NAME,
        total_fees=Decimal("0"),
    )
    logger.info("Admin created: %s", email)


async def seed_students(db: AsyncSession) -> None:
    accounts = AccountStore(db)
    for data in SAMPLE_STUDENTS:
        existing = await accounts.find_by_email(data["email"])
        if existing:
            backfill = {}
            if not existing.registration_number:
                backfill["registration_number"] = data["registration_number"]
            if not existing.semester:
                backfill["semester"] = data["semester"]
            if backfill:
                await accounts.update_fields(existing, backfill)
                logger.info("Student %s backfilled: %s", data["email"], ", ".join(backfill))
            else:
                logger.info("Student already exists: %s", data["email"])
            continue
        await accounts.create(
            password_hash=hash_password(SAMPLE_STUDENT_PASSWORD),
            role=AccountRole.student.value,
            **data,
        )
        logger.info("Student created: %s", data["email"])


async def main() -> None:
    configure_logging(settings.log_level)
    await create_all()
    async with AsyncSessionLocal() as db:
        try:
            await seed_admin(db)
            await seed_students(db)
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Seeding failed")
            raise
    logger.info("Seeding completed")


if __name__ == "__main__":
    asyncio.run(main())
