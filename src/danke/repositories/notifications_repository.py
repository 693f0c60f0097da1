# repositories/notifications_repository.py
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlmodel import Session, select, and_

from danke.database import get_engine
from danke.models.notification import Notification
from danke.utils import utcnow


class NotificationsRepository:
    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine or get_engine()

    def create_notification(self, notification: Notification) -> Notification:
        with Session(self.engine) as session:
            session.add(notification)
            session.commit()
            session.refresh(notification)
            return notification

    def get_user_notifications(self, user_id: str, limit: int = 50, offset: int = 0) -> List[Notification]:
        with Session(self.engine) as session:
            statement = (
                select(Notification)
                .where(Notification.user_id == user_id)
                .order_by(Notification.created_at.desc())
                .limit(limit)
                .offset(offset)
            )
            return list(session.exec(statement).all())

    def get_unread_count(self, user_id: str) -> int:
        with Session(self.engine) as session:
            statement = select(func.count(Notification.id)).where(
                and_(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
            )
            return session.exec(statement).one()

    def mark_as_read(self, notification_id: str, user_id: str) -> bool:
        with Session(self.engine) as session:
            notification = session.get(Notification, notification_id)
            if notification is None or notification.user_id != user_id:
                return False
            notification.is_read = True
            notification.updated_at = utcnow()
            session.add(notification)
            session.commit()
            return True

    def mark_all_as_read(self, user_id: str) -> int:
        with Session(self.engine) as session:
            statement = select(Notification).where(
                and_(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
            )
            unread = list(session.exec(statement).all())
            for notification in unread:
                notification.is_read = True
                notification.updated_at = utcnow()
                session.add(notification)
            session.commit()
            return len(unread)
