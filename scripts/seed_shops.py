"""Insert a few demo shops so discovery has something to show.

Run from the project root:  python -m scripts.seed_shops
"""
from config.database import Database
from crud.user_crud import create_user, get_user_by_email
from crud.shop_crud import add_service
from schemas.user import UserCreate, ShopServiceCreate, ROLE_SHOPKEEPER
import asyncio
import logging

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "shop1234"

DEMO_SHOPS = [
    {
        "email": "sharma.salon@example.com",
        "shop_name": "Sharma Hair Studio",
        "owner_name": "Ravi Sharma",
        "category": "Salon",
        "phone": "+919800000001",
        "address": "12 MG Road, Bengaluru",
        "location": {"latitude": 12.9756, "longitude": 77.6050},
        "timing": {"open": "09:00 AM", "close": "09:00 PM"},
        "off_days": ["Tuesday"],
        "services": [("Haircut", 150), ("Beard Trim", 80)],
    },
    {
        "email": "quickfix.mobiles@example.com",
        "shop_name": "QuickFix Mobiles",
        "owner_name": "Anil Kumar",
        "category": "Repair",
        "phone": "+919800000002",
        "address": "4 Brigade Road, Bengaluru",
        "location": {"latitude": 12.9719, "longitude": 77.6070},
        "timing": {"open": "10:00 AM", "close": "08:00 PM"},
        "off_days": ["Sunday"],
        "services": [("Screen Replacement", 1200), ("Battery Replacement", 900)],
    },
    {
        "email": "fresh.mart@example.com",
        "shop_name": "Fresh Mart Grocery",
        "owner_name": "Meena Iyer",
        "category": "Grocery",
        "phone": "+919800000003",
        "address": "88 Indiranagar, Bengaluru",
        "location": {"latitude": 12.9784, "longitude": 77.6408},
        "timing": {"open": "24 Hours", "close": "24 Hours", "is_open_24_hours": True},
        "off_days": [],
        "services": [("Home Delivery", 30)],
    },
]


async def insert_demo_shops():
    await Database.connect_db()
    try:
        for shop in DEMO_SHOPS:
            if await get_user_by_email(shop["email"]):
                logger.info(f"Demo shop already exists: {shop['shop_name']}")
                continue

            profile = {k: v for k, v in shop.items() if k != "services"}
            created = await create_user(UserCreate(**profile, role=ROLE_SHOPKEEPER, password=DEMO_PASSWORD))
            for name, price in shop["services"]:
                await add_service(created.uid, ShopServiceCreate(name=name, price=price))
            logger.info(f"Created demo shop {created.shop_name} ({created.uid})")

        count = await Database().users.count_documents({"role": ROLE_SHOPKEEPER})
        logger.info(f"Total shops in database: {count}")
    finally:
        await Database.close_db()


if __name__ == "__main__":
    asyncio.run(insert_demo_shops())
