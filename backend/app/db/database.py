"""
MongoDB Database Configuration and Connection
"""

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.server_api import ServerApi

from app.core.config import DATABASE_NAME, MONGODB_URI

# Global database client
_client = None
_database = None


def get_database():
    """
    Get MongoDB database instance
    Creates a new connection if one doesn't exist
    """
    global _client, _database

    if _database is None:
        if not MONGODB_URI:
            raise ValueError("MONGODB_URI environment variable is not set")

        # Create MongoDB client with server API version
        _client = AsyncIOMotorClient(MONGODB_URI, server_api=ServerApi("1"))
        _database = _client[DATABASE_NAME]

        print(f"✅ Connected to MongoDB database: {DATABASE_NAME}")

    return _database


async def init_indexes():
    """
    Initialize database indexes for the scheduling read paths
    """
    try:
        trips_collection = get_trips_collection()
        windows_collection = get_date_windows_collection()
        votes_collection = get_votes_collection()
        reactions_collection = get_date_reactions_collection()

        # Trips indexes
        await trips_collection.create_index("trip_code", unique=True, sparse=True)
        await trips_collection.create_index("members")

        # Date windows indexes
        await windows_collection.create_index([("trip_id", 1), ("created_at", 1)], name="trip_created")

        # Votes: one live vote per user per trip
        await votes_collection.create_index(
            [("trip_id", 1), ("user_id", 1)], unique=True, name="uniq_trip_user"
        )

        # Reactions indexes
        await reactions_collection.create_index([("trip_id", 1), ("window_id", 1)], name="trip_window")

        print("✅ Database indexes created successfully")
    except Exception as e:
        print(f"⚠️  Index creation warning: {e}")


async def close_database_connection():
    """
    Close the MongoDB connection
    Call this when shutting down the application
    """
    global _client, _database

    if _client:
        _client.close()
        _client = None
        _database = None
        print("🔌 Closed MongoDB connection")


async def test_connection():
    """
    Test the MongoDB connection
    """
    try:
        db = get_database()
        # Ping the database
        await db.command("ping")
        print("✅ MongoDB connection successful!")
        return True
    except Exception as e:
        print(f"❌ MongoDB connection failed: {e}")
        return False


def get_trips_collection():
    """
    Get the trips collection from the database
    """
    db = get_database()
    return db.trips


def get_date_windows_collection():
    """
    Get the date windows collection from the database
    """
    db = get_database()
    return db.date_windows


def get_votes_collection():
    db = get_database()
    return db.votes


def get_date_reactions_collection():
    db = get_database()
    return db.date_reactions
