from typing import Optional
from sqlalchemy.orm import Session

from fleet_api.models.profile import Profile

class CRUDProfile:
    def get(self, db: Session, id: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.id == id).first()

    def create(self, db: Session, *, id: str, name: str, email: str, role: str) -> Profile:
        db_obj = Profile(id=id, name=name, email=email, role=role)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

# Create a singleton instance
profile = CRUDProfile()
