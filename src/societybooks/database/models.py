"""SQLAlchemy models for societybooks database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Society(Base):
    """Cooperative society model."""

    __tablename__ = "societies"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    secretary_name = Column(String, nullable=False, default="")
    taluka = Column(String, nullable=False, default="")
    district = Column(String, nullable=False, default="")
    address = Column(String, nullable=False, default="")
    society_type = Column(String, nullable=False)
    initial_balance = Column(Numeric(14, 2), nullable=False, default=0)
    financial_year_start = Column(Date, nullable=True)
    financial_year_end = Column(Date, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    account_heads = relationship("AccountHead", back_populates="society", cascade="all, delete-orphan")
    entries = relationship("CashBookEntry", back_populates="society", cascade="all, delete-orphan")
    report_mappings = relationship("ReportMapping", back_populates="society", cascade="all, delete-orphan")


class AccountHead(Base):
    """Account head model.

    (society_id, head_type, name) is kept unique by the service layer only.
    """

    __tablename__ = "account_heads"

    id = Column(Integer, primary_key=True)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    head_type = Column(String, nullable=False)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, default="CashBook")
    opening_amount = Column(Numeric(14, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    society = relationship("Society", back_populates="account_heads")
    entries = relationship("CashBookEntry", back_populates="account_head")


class CashBookEntry(Base):
    """Cash book entry model."""

    __tablename__ = "cash_book_entries"

    id = Column(Integer, primary_key=True)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    entry_type = Column(String, nullable=False)
    account_head_id = Column(Integer, ForeignKey("account_heads.id"), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    society = relationship("Society", back_populates="entries")
    account_head = relationship("AccountHead", back_populates="entries")


class ReportMapping(Base):
    """Report classification of one (account head, side) row for one year."""

    __tablename__ = "report_mappings"

    id = Column(Integer, primary_key=True)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False)
    year = Column(Integer, nullable=False)
    account_head_id = Column(Integer, ForeignKey("account_heads.id"), nullable=False)
    side = Column(String, nullable=False)
    report_type = Column(String, nullable=False)
    total_amount = Column(Numeric(14, 2), nullable=False, default=0)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("society_id", "year", "account_head_id", "side", name="uq_mapping_row"),
    )

    # Relationships
    society = relationship("Society", back_populates="report_mappings")
    account_head = relationship("AccountHead")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
