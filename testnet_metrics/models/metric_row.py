import datetime

from sqlmodel import SQLModel, Field


class MetricRow(SQLModel):
    """
    One day of aggregate counters from the `metrics` collection.
    Rows are returned ordered ascending by date.
    """
    date: datetime.date = Field(description="Calendar day the counter belongs to.")
    new_records_count: int = Field(ge=0, description="Node records first seen on that day.")

    class Config:
        extra = "ignore"
