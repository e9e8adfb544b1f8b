from sqlalchemy import Column, Numeric, String
from fittrack.db import Base, JSONType


class Profile(Base):
    __tablename__ = "profiles"

    # Same id the auth layer hands us in X-User-Id
    id = Column(String, primary_key=True)

    full_name = Column(String, nullable=True)
    weight_goal = Column(Numeric(5, 1), nullable=True)  # target body weight, lbs
    # {"calories": 2400, "protein": 180, ...}; missing keys fall back to defaults
    nutrition_targets = Column(JSONType, nullable=True)
