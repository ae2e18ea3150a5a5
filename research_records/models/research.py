"""Research record SQLAlchemy models (book chapters, copyrights, journals)."""

from datetime import datetime
from enum import Enum as PyEnum
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    Enum,
    Float,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from research_records.core.database import Base
from research_records.models.enums import (
    AuthorType,
    JournalAccessType,
    JournalIndexing,
    JournalPublicationMode,
    JournalQuartile,
    JournalReviewType,
    JournalScope,
    ResearchStatus,
    TeacherStatus,
)
from research_records.models.user import User, utcnow


def enum_column(enum_cls: type[PyEnum], name: str) -> Enum:
    """Enum stored as a string, portable across PostgreSQL and SQLite."""
    return Enum(enum_cls, native_enum=False, length=32, name=name)


class AuthorMixin:
    """Columns shared by the per-kind author association tables."""

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_type: Mapped[AuthorType] = mapped_column(
        enum_column(AuthorType, "author_type"),
        nullable=False,
    )

    @declared_attr
    def user(cls) -> Mapped[User]:
        return relationship(User, lazy="selectin")


class RecordMixin:
    """Columns shared by every research record kind."""

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    abstract: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    document_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    registration_fees: Mapped[float | None] = mapped_column(Float, nullable=True)
    reimbursement: Mapped[float | None] = mapped_column(Float, nullable=True)
    teacher_status: Mapped[TeacherStatus] = mapped_column(
        enum_column(TeacherStatus, "teacher_status"),
        default=TeacherStatus.UPLOADED,
        nullable=False,
        index=True,
    )
    is_public: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        index=True,
        comment="Visible to every signed-in user when true",
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    @property
    def faculty_authors(self) -> list:
        return [a for a in self.authors if a.author_type == AuthorType.FACULTY]

    @property
    def student_authors(self) -> list:
        return [a for a in self.authors if a.author_type == AuthorType.STUDENT]

    def is_authored_by(self, user_id: UUID) -> bool:
        return any(a.user_id == user_id for a in self.authors)


class BookChapterAuthor(AuthorMixin, Base):
    __tablename__ = "book_chapter_authors"
    __table_args__ = (UniqueConstraint("book_chapter_id", "user_id", "author_type"),)

    record_id: Mapped[UUID] = mapped_column(
        "book_chapter_id",
        Uuid,
        ForeignKey("book_chapters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class BookChapter(RecordMixin, Base):
    """Book chapter authored by faculty and students."""

    __tablename__ = "book_chapters"

    book_chapter_status: Mapped[ResearchStatus] = mapped_column(
        enum_column(ResearchStatus, "research_status"),
        default=ResearchStatus.SUBMITTED,
        nullable=False,
        index=True,
    )
    isbn_issn: Mapped[str | None] = mapped_column(String(64), nullable=True)
    keywords: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    doi: Mapped[str | None] = mapped_column(String(255), nullable=True)
    publication_date: Mapped[datetime | None] = mapped_column(nullable=True)
    publisher: Mapped[str | None] = mapped_column(String(255), nullable=True)

    authors: Mapped[list[BookChapterAuthor]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=BookChapterAuthor.id,
    )

    def __repr__(self) -> str:
        return f"<BookChapter {self.id} {self.title[:40]!r}>"


class CopyrightAuthor(AuthorMixin, Base):
    __tablename__ = "copyright_authors"
    __table_args__ = (UniqueConstraint("copyright_id", "user_id", "author_type"),)

    record_id: Mapped[UUID] = mapped_column(
        "copyright_id",
        Uuid,
        ForeignKey("copyrights.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class Copyright(RecordMixin, Base):
    """Copyright filing with its lifecycle dates."""

    __tablename__ = "copyrights"

    serial_no: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    status: Mapped[ResearchStatus] = mapped_column(
        enum_column(ResearchStatus, "research_status"),
        default=ResearchStatus.SUBMITTED,
        nullable=False,
        index=True,
    )
    date_of_filing: Mapped[datetime | None] = mapped_column(nullable=True)
    date_of_submission: Mapped[datetime | None] = mapped_column(nullable=True)
    date_of_published: Mapped[datetime | None] = mapped_column(nullable=True)
    date_of_grant: Mapped[datetime | None] = mapped_column(nullable=True)

    authors: Mapped[list[CopyrightAuthor]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=CopyrightAuthor.id,
    )

    def __repr__(self) -> str:
        return f"<Copyright {self.serial_no} {self.title[:40]!r}>"


class JournalAuthor(AuthorMixin, Base):
    __tablename__ = "journal_authors"
    __table_args__ = (UniqueConstraint("journal_id", "user_id", "author_type"),)

    record_id: Mapped[UUID] = mapped_column(
        "journal_id",
        Uuid,
        ForeignKey("journals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class Journal(RecordMixin, Base):
    """Journal article with venue metadata."""

    __tablename__ = "journals"

    serial_no: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    journal_name: Mapped[str] = mapped_column(String(500), nullable=False)
    scope: Mapped[JournalScope] = mapped_column(
        enum_column(JournalScope, "journal_scope"), nullable=False
    )
    review_type: Mapped[JournalReviewType] = mapped_column(
        enum_column(JournalReviewType, "journal_review_type"), nullable=False
    )
    access_type: Mapped[JournalAccessType] = mapped_column(
        enum_column(JournalAccessType, "journal_access_type"), nullable=False
    )
    indexing: Mapped[JournalIndexing] = mapped_column(
        enum_column(JournalIndexing, "journal_indexing"), nullable=False
    )
    quartile: Mapped[JournalQuartile] = mapped_column(
        enum_column(JournalQuartile, "journal_quartile"),
        default=JournalQuartile.NOT_APPLICABLE,
        nullable=False,
    )
    publication_mode: Mapped[JournalPublicationMode] = mapped_column(
        enum_column(JournalPublicationMode, "journal_publication_mode"),
        nullable=False,
    )
    impact_factor: Mapped[float | None] = mapped_column(Float, nullable=True)
    impact_factor_date: Mapped[datetime | None] = mapped_column(nullable=True)
    publisher: Mapped[str | None] = mapped_column(String(255), nullable=True)
    publication_date: Mapped[datetime | None] = mapped_column(nullable=True)
    doi: Mapped[str | None] = mapped_column(String(255), nullable=True)
    paper_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    keywords: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    journal_status: Mapped[ResearchStatus] = mapped_column(
        enum_column(ResearchStatus, "research_status"),
        default=ResearchStatus.SUBMITTED,
        nullable=False,
        index=True,
    )

    authors: Mapped[list[JournalAuthor]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=JournalAuthor.id,
    )

    def __repr__(self) -> str:
        return f"<Journal {self.serial_no} {self.journal_name[:40]!r}>"
