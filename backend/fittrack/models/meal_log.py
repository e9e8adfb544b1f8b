from sqlalchemy import Column, Date, DateTime, Integer, Numeric, String
from sqlalchemy.sql import func
from fittrack.db import Base


class MealLog(Base):
    __tablename__ = "meal_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    date = Column(Date, nullable=False, index=True)
    meal_type = Column(String(20), nullable=False)  # breakfast, lunch, dinner, snack, dessert
    name = Column(String, nullable=False)

    calories = Column(Integer, nullable=True)
    # grams
    protein = Column(Numeric(6, 1), nullable=True)
    carbs = Column(Numeric(6, 1), nullable=True)
    fats = Column(Numeric(6, 1), nullable=True)

    logged_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class WaterLog(Base):
    __tablename__ = "water_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    date = Column(Date, nullable=False, index=True)
    amount_oz = Column(Numeric(5, 1), nullable=False)

    logged_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
