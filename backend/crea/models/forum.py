from sqlalchemy import Column, String, DateTime, Integer, Text, JSON, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


class ForumTopic(Base):
    """Discussion topic; replies mirrors the number of posts"""
    __tablename__ = "forum_topics"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False)
    author_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    replies = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    posts = relationship("ForumPost", back_populates="topic", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<ForumTopic {self.title}>"


class ForumPost(Base):
    """Post in a topic. Likes are user ids; comments are embedded dicts."""
    __tablename__ = "forum_posts"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    topic_id = Column(GUID, ForeignKey("forum_topics.id", ondelete="CASCADE"), nullable=False, index=True)
    author = Column(String(255), nullable=False)
    author_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    content = Column(Text, nullable=False)
    liked_by = Column(JSON, default=list, nullable=False)
    comments = Column(JSON, default=list, nullable=False)  # [{author, author_id, content, created_at}]

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    topic = relationship("ForumTopic", back_populates="posts")

    @property
    def likes_count(self) -> int:
        return len(self.liked_by or [])

    def __repr__(self):
        return f"<ForumPost {self.id} topic={self.topic_id}>"
