from sqlalchemy import Column, Date, DateTime, Integer, Numeric, String
from sqlalchemy.sql import func
from fittrack.db import Base


class SleepLog(Base):
    __tablename__ = "sleep_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    # Night the user went to bed
    date = Column(Date, nullable=False, index=True)
    bedtime = Column(DateTime(timezone=True), nullable=False)
    wake_time = Column(DateTime(timezone=True), nullable=False)
    hours_slept = Column(Numeric(4, 2), nullable=False)
    quality_rating = Column(Integer, nullable=True)  # 1-5
    notes = Column(String, nullable=True)

    logged_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
