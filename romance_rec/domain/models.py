"""SQLAlchemy ORM models for the book catalog."""

from datetime import datetime

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


class Book(Base):
    __tablename__ = "books"

    id = Column(String(64), primary_key=True)
    title = Column(String(500), nullable=False, index=True)
    author = Column(String(300), nullable=False, index=True)
    url = Column(String(1000), nullable=False, default="")
    average_rating = Column(Float, nullable=False, default=0.0, index=True)
    ratings_count = Column(Integer, nullable=False, default=0, index=True)
    spice_level = Column(String(20), nullable=True, index=True)
    summary = Column(Text, nullable=False, default="")
    series = Column(String(300), nullable=True)
    series_number = Column(Float, nullable=True)
    page_count = Column(Integer, nullable=True)
    published_date = Column(Date, nullable=True)
    scraped_status = Column(String(32), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    tag_links = relationship("BookTag", back_populates="book", lazy="selectin")
    warning_links = relationship("BookContentWarning", back_populates="book", lazy="selectin")


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), unique=True, nullable=False, index=True)
    count = Column(Integer, nullable=False, default=0)


class ContentWarning(Base):
    __tablename__ = "content_warnings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), unique=True, nullable=False, index=True)
    count = Column(Integer, nullable=False, default=0)


class BookTag(Base):
    __tablename__ = "book_tags"

    book_id = Column(String(64), ForeignKey("books.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)
    count = Column(Integer, nullable=False, default=1)

    book = relationship("Book", back_populates="tag_links")
    tag = relationship("Tag", lazy="joined")


class BookContentWarning(Base):
    __tablename__ = "book_content_warnings"

    book_id = Column(String(64), ForeignKey("books.id", ondelete="CASCADE"), primary_key=True)
    warning_id = Column(
        Integer, ForeignKey("content_warnings.id", ondelete="CASCADE"), primary_key=True
    )
    count = Column(Integer, nullable=False, default=1)

    book = relationship("Book", back_populates="warning_links")
    warning = relationship("ContentWarning", lazy="joined")
