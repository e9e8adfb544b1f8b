from sqlalchemy import Column, Date, DateTime, Integer, Numeric, String
from sqlalchemy.sql import func
from fittrack.db import Base


class WeightLog(Base):
    __tablename__ = "weight_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    date = Column(Date, nullable=False, index=True)
    weight_lbs = Column(Numeric(5, 1), nullable=False)
    time_of_day = Column(String(20), nullable=True)  # morning, afternoon, evening

    logged_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
