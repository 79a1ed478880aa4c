# hoa_portal/models/community.py
"""
Communities table: one row per HOA. The tenant every other record is scoped to.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime
from hoa_portal.database import Base


class Community(Base):
    __tablename__ = "communities"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default="active")  # active | suspended
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Community {self.id} name={self.name}>"
