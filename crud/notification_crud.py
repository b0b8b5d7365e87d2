from schemas.notification import Notification, NotificationFeed
from config.database import Database
from datetime import datetime


async def get_feed(user_id: str) -> NotificationFeed:
    db = Database()
    items = await db.notifications.find({"user_id": user_id}).to_list(length=None)
    items.sort(key=lambda n: n["created_at"], reverse=True)
    notifications = [Notification(**item) for item in items]
    return NotificationFeed(
        items=notifications,
        unread=sum(1 for n in notifications if not n.read)
    )


async def mark_all_read(user_id: str) -> int:
    db = Database()
    result = await db.notifications.update_many(
        {"user_id": user_id, "read": False},
        {"$set": {"read": True}}
    )
    return result.modified_count


async def set_push_token(user_id: str, push_token):
    db = Database()
    await db.users.update_one(
        {"uid": user_id},
        {"$set": {"push_token": push_token, "updated_at": datetime.utcnow()}}
    )
