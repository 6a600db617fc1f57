from sqlalchemy import Column, String, DateTime
from fleet_api.db.base_class import Base
from datetime import datetime

class Profile(Base):
    """Application profile of an auth provider user; ``id`` is the provider's user id."""
    __tablename__ = "profiles"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=True)
    email = Column(String, nullable=False, unique=True)
    role = Column(String, nullable=False)  # Fleet Manager, Dispatcher, Safety Officer, Financial Analyst
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Profile {self.email} ({self.role})>"
