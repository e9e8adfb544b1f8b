from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.sql import func
from fittrack.db import Base, JSONType


class Exercise(Base):
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    primary_muscle_group = Column(String, nullable=True)
    secondary_muscle_groups = Column(JSONType, nullable=True)  # ["triceps", ...]


class ProgramTemplate(Base):
    __tablename__ = "program_templates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    total_days = Column(Integer, nullable=False, default=1)


class ProgramInstance(Base):
    __tablename__ = "program_instances"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    program_id = Column(Integer, ForeignKey("program_templates.id"), nullable=False)

    status = Column(String(20), nullable=False, server_default="active")  # active, paused, completed
    current_cycle = Column(Integer, nullable=False, default=1)
    started_at = Column(DateTime(timezone=True), nullable=True)


class WorkoutInstance(Base):
    __tablename__ = "workout_instances"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    program_instance_id = Column(
        Integer,
        ForeignKey("program_instances.id", ondelete="SET NULL"),
        nullable=True,
    )

    name = Column(String, nullable=True)
    day_number = Column(Integer, nullable=True)

    status = Column(
        String(20),
        nullable=False,
        server_default="scheduled",  # scheduled, in_progress, completed, skipped
    )
    scheduled_date = Column(Date, nullable=True, index=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True, index=True)


class ExerciseInstance(Base):
    __tablename__ = "exercise_instances"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    workout_instance_id = Column(
        Integer,
        ForeignKey("workout_instances.id", ondelete="CASCADE"),
        nullable=False,
    )
    exercise_id = Column(Integer, ForeignKey("exercises.id"), nullable=False, index=True)

    exercise_order = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, server_default="pending")  # pending, completed
    # Falls back to the workout's scheduled_date when NULL
    performed_date = Column(Date, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class SetInstance(Base):
    __tablename__ = "set_instances"

    id = Column(Integer, primary_key=True, index=True)
    exercise_instance_id = Column(
        Integer,
        ForeignKey("exercise_instances.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    set_number = Column(Integer, nullable=False)
    # NULL weight means the set was not performed yet
    actual_weight_lbs = Column(Numeric(6, 1), nullable=True)
    actual_reps = Column(Integer, nullable=True)
    is_warmup = Column(Boolean, nullable=False, default=False)
