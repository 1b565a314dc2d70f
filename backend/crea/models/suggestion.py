from sqlalchemy import Column, String, DateTime, Text, JSON, ForeignKey
from datetime import datetime

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


class Suggestion(Base):
    __tablename__ = "suggestions"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    user_name = Column(String(255), nullable=True)
    text = Column(Text, nullable=False)
    file_names = Column(JSON, default=list, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Suggestion {self.id}>"
