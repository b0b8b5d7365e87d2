from motor.motor_asyncio import AsyncIOMotorClient
from dotenv import load_dotenv
import os
import logging
import asyncio
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(os.getenv('LOG_FILE', 'database.log')),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger('database')

REQUIRED_COLLECTIONS = ['users', 'bookings', 'messages', 'services', 'notifications', 'reviews', 'sessions']


class Database:
    client = None
    db = None
    MAX_RETRIES = 3
    RETRY_DELAY = 1  # seconds

    @classmethod
    async def connect_db(cls):
        """Create database connection with retries."""
        retries = 0
        last_error = None

        while retries < cls.MAX_RETRIES:
            try:
                mongodb_url = os.getenv('MONGODB_URL')
                database_name = os.getenv('DATABASE_NAME', 'shop_booking_db')

                if not mongodb_url:
                    raise ValueError("MONGODB_URL environment variable is not set")

                logger.info(f"Attempting to connect to MongoDB (Attempt {retries + 1}/{cls.MAX_RETRIES})")

                cls.client = AsyncIOMotorClient(
                    mongodb_url,
                    serverSelectionTimeoutMS=5000,
                    connectTimeoutMS=10000,
                    socketTimeoutMS=10000,
                    maxPoolSize=50,
                    retryWrites=True,
                    retryReads=True
                )
                cls.db = cls.client[database_name]

                # Test the connection
                await cls.db.command('ping')

                logger.info(f"Successfully connected to MongoDB database: {database_name}")

                collections = await cls.db.list_collection_names()
                for collection in REQUIRED_COLLECTIONS:
                    if collection not in collections:
                        await cls.db.create_collection(collection)
                        logger.info(f"Created collection: {collection}")

                await cls.ensure_indexes()
                return

            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                last_error = e
                retries += 1
                if retries < cls.MAX_RETRIES:
                    logger.warning(f"Failed to connect to MongoDB (Attempt {retries}/{cls.MAX_RETRIES}). Retrying in {cls.RETRY_DELAY} seconds...")
                    await asyncio.sleep(cls.RETRY_DELAY)
                continue
            except Exception as e:
                logger.error(f"Unexpected error connecting to MongoDB: {str(e)}")
                raise

        logger.error(f"Failed to connect to MongoDB after {cls.MAX_RETRIES} attempts")
        raise last_error

    @classmethod
    async def ensure_indexes(cls):
        """Create the lookup indexes the CRUD layer relies on."""
        await cls.db.users.create_index("uid", unique=True)
        await cls.db.users.create_index("email", unique=True)
        await cls.db.users.create_index("role")
        await cls.db.bookings.create_index("booking_id", unique=True)
        await cls.db.bookings.create_index("user_id")
        await cls.db.bookings.create_index("provider_id")
        await cls.db.messages.create_index([("booking_id", 1), ("timestamp", 1)])
        await cls.db.reviews.create_index("booking_id", unique=True)
        await cls.db.sessions.create_index("session_id", unique=True)

    @classmethod
    async def close_db(cls):
        """Close database connection."""
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("MongoDB connection closed.")

    def __init__(self):
        if self.db is None:
            raise Exception("Database not initialized. Call connect_db() first.")

        self.users = self.db.users
        self.bookings = self.db.bookings
        self.messages = self.db.messages
        self.services = self.db.services
        self.notifications = self.db.notifications
        self.reviews = self.db.reviews
        self.sessions = self.db.sessions
