from datetime import date as date_type, datetime
from typing import Optional
from enum import Enum

from pydantic import BaseModel, ConfigDict


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"
    dessert = "dessert"


class MealLogCreate(BaseModel):
    date: Optional[date_type] = None  # defaults to today
    meal_type: MealType
    name: str
    calories: Optional[int] = None
    # grams
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fats: Optional[float] = None


class MealLogRead(MealLogCreate):
    id: int
    date: date_type
    logged_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WaterLogCreate(BaseModel):
    date: Optional[date_type] = None
    amount_oz: float


class WeightLogCreate(BaseModel):
    date: Optional[date_type] = None
    weight_lbs: float
    time_of_day: Optional[str] = None  # morning, afternoon, evening


class WeightLogRead(BaseModel):
    id: int
    date: date_type
    weight_lbs: float
    time_of_day: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SleepLogCreate(BaseModel):
    date: Optional[date_type] = None  # defaults to the bedtime's day
    bedtime: datetime
    wake_time: datetime
    quality_rating: Optional[int] = None  # 1-5
    notes: Optional[str] = None


class SleepLogRead(BaseModel):
    id: int
    date: date_type
    bedtime: datetime
    wake_time: datetime
    hours_slept: float
    quality_rating: Optional[int] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
