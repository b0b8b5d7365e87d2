"""Create the platform's super-admin account.

Run from the project root:  python -m scripts.setup_admin --email admin@example.com
The password is read from SUPER_ADMIN_PASSWORD when --password is not given.
"""
from config.database import Database
from crud.user_crud import create_user, get_user_by_email, update_user
from schemas.user import UserCreate, ROLE_SUPER_ADMIN
import argparse
import asyncio
import logging
import os

logger = logging.getLogger(__name__)


async def setup_admin(email: str, password: str, full_name: str = "Super Admin"):
    await Database.connect_db()
    try:
        existing = await get_user_by_email(email)
        if existing:
            if existing.role == ROLE_SUPER_ADMIN:
                logger.info(f"Super admin already exists: {email}")
            else:
                await update_user(existing.uid, {"role": ROLE_SUPER_ADMIN})
                logger.info(f"Promoted {email} ({existing.uid}) to super admin")
            return

        admin = await create_user(
            UserCreate(email=email, password=password, full_name=full_name, role=ROLE_SUPER_ADMIN),
            allow_any_role=True
        )
        logger.info(f"Created super admin {admin.uid} for {email}")
    finally:
        await Database.close_db()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create or promote the super-admin account")
    parser.add_argument("--email", default=os.getenv("SUPER_ADMIN_EMAIL"))
    parser.add_argument("--password", default=os.getenv("SUPER_ADMIN_PASSWORD"))
    parser.add_argument("--name", default="Super Admin")
    args = parser.parse_args()

    if not args.email or not args.password:
        parser.error("an email and a password are required")

    try:
        asyncio.run(setup_admin(args.email, args.password, args.name))
    except KeyboardInterrupt:
        logger.info("Setup interrupted by user")
