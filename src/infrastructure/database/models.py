"""SQLAlchemy ORM models for orders, installments and members."""

from datetime import datetime, date
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class MemberModel(Base):
    """Member record; only the lifetime-spend aggregate is written here."""

    __tablename__ = "members"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    branch_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    total_spent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class OrderModel(Base):
    """Persisted order record."""

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    member_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("members.id"),
        nullable=False,
        index=True,
    )
    branch_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    total_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="PENDING_PAYMENT",
    )
    payment_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="ONE_TIME",
    )
    is_installment: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )

    member: Mapped["MemberModel"] = relationship("MemberModel")
    installments: Mapped[list["InstallmentModel"]] = relationship(
        "InstallmentModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="InstallmentModel.installment_no",
    )


class InstallmentModel(Base):
    """Persisted installment record within an order's plan."""

    __tablename__ = "installments"
    __table_args__ = (
        UniqueConstraint("order_id", "installment_no", name="uq_installment_order_no"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    order_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    installment_no: Mapped[int] = mapped_column(Integer, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="UNPAID",
        index=True,
    )
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    payment_method: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_custom: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    auto_adjusted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )

    order: Mapped["OrderModel"] = relationship(
        "OrderModel",
        back_populates="installments",
    )
