"""SQLAlchemy ORM models for the Flexio gym datastore."""

from datetime import date, datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    DateTime,
    Float,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Gym(Base):
    __tablename__ = "gyms"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    gym_name: Mapped[str] = mapped_column(String)
    location_latitude: Mapped[float] = mapped_column(Float)
    location_longitude: Mapped[float] = mapped_column(Float)
    subscription_status: Mapped[str] = mapped_column(String, default="active", index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class Membership(Base):
    __tablename__ = "memberships"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    gym_id: Mapped[str] = mapped_column(String, index=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    start_date: Mapped[date] = mapped_column(Date)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)


class WalletTransactionDB(Base):
    __tablename__ = "wallet_transactions"
    # One monthly billing row per gym and period; NULL periods are not compared.
    __table_args__ = (
        UniqueConstraint("gym_id", "billing_period", name="uq_wallet_tx_gym_period"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    gym_id: Mapped[str] = mapped_column(String, index=True)
    transaction_type: Mapped[str] = mapped_column(String, index=True)
    amount_inr: Mapped[float] = mapped_column(Float)
    balance_before_inr: Mapped[float] = mapped_column(Float, default=0.0)
    balance_after_inr: Mapped[float] = mapped_column(Float, default=0.0)
    description: Mapped[str] = mapped_column(String, default="")
    payment_reference: Mapped[str | None] = mapped_column(String, nullable=True)
    billing_period: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)


class GymSetting(Base):
    __tablename__ = "gym_settings"
    __table_args__ = (UniqueConstraint("gym_id", "setting_type", name="uq_gym_setting_type"),)

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    gym_id: Mapped[str] = mapped_column(String, index=True)
    setting_type: Mapped[str] = mapped_column(String)
    setting_data: Mapped[dict] = mapped_column(JSONB, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class LocationHistory(Base):
    __tablename__ = "location_history"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    gym_id: Mapped[str] = mapped_column(String, index=True)
    latitude: Mapped[float] = mapped_column(Float)
    longitude: Mapped[float] = mapped_column(Float)
    distance_from_gym: Mapped[float] = mapped_column(Float)
    is_within_geofence: Mapped[bool] = mapped_column(Boolean)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)


class CheckIn(Base):
    __tablename__ = "check_ins"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    gym_id: Mapped[str] = mapped_column(String, index=True)
    user_name: Mapped[str] = mapped_column(String, default="")
    check_in_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    coins_earned: Mapped[int] = mapped_column(BigInteger, default=0)
    presence_duration_minutes: Mapped[int] = mapped_column(BigInteger, default=0)
