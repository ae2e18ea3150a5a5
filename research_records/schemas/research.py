"""Research record Pydantic schemas (book chapters, copyrights, journals)."""

from typing import ClassVar
from uuid import UUID

from pydantic import Field, model_validator

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
from research_records.schemas.base import (
    CamelModel,
    NaiveUTCDateTime,
    Pagination,
    UTCDateTime,
)
from research_records.schemas.user import UserSummary

# --- Shared pieces ---


class AuthorResponse(CamelModel):
    """One author link, with the user embedded."""

    id: UUID
    user_id: UUID
    author_type: AuthorType
    user: UserSummary


class RecordCreate(CamelModel):
    """Fields every research record accepts on creation."""

    title: str = Field(min_length=1, max_length=500)
    abstract: str | None = None
    image_url: str | None = None
    document_url: str | None = None
    registration_fees: float | None = Field(default=None, ge=0)
    reimbursement: float | None = Field(default=None, ge=0)
    teacher_status: TeacherStatus = TeacherStatus.UPLOADED
    is_public: bool = False
    faculty_author_ids: list[UUID] = Field(default_factory=list)
    student_author_ids: list[UUID] = Field(default_factory=list)


class RecordUpdate(CamelModel):
    """Partial update; only fields present in the body are applied.

    Author id lists replace the existing authors of that type when sent.
    """

    # Columns that are NOT NULL; an explicit null for these is rejected
    required_fields: ClassVar[frozenset[str]] = frozenset(
        {"title", "teacher_status", "is_public"}
    )

    title: str | None = Field(default=None, min_length=1, max_length=500)
    abstract: str | None = None
    image_url: str | None = None
    document_url: str | None = None
    registration_fees: float | None = Field(default=None, ge=0)
    reimbursement: float | None = Field(default=None, ge=0)
    teacher_status: TeacherStatus | None = None
    is_public: bool | None = None
    faculty_author_ids: list[UUID] | None = None
    student_author_ids: list[UUID] | None = None

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in self.model_fields_set & self.required_fields:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class RecordResponse(CamelModel):
    id: UUID
    title: str
    abstract: str | None
    image_url: str | None
    document_url: str | None
    registration_fees: float | None
    reimbursement: float | None
    teacher_status: TeacherStatus
    is_public: bool
    created_at: UTCDateTime
    updated_at: UTCDateTime


class BulkDeleteRequest(CamelModel):
    ids: list[UUID]


class BulkDeleteResponse(CamelModel):
    message: str
    count: int


# --- Book chapters ---


class BookChapterAuthorResponse(AuthorResponse):
    record_id: UUID = Field(validation_alias="record_id", serialization_alias="bookChapterId")


class BookChapterCreate(RecordCreate):
    book_chapter_status: ResearchStatus = ResearchStatus.SUBMITTED
    isbn_issn: str | None = Field(default=None, max_length=64)
    keywords: list[str] = Field(default_factory=list)
    doi: str | None = Field(default=None, max_length=255)
    publication_date: NaiveUTCDateTime | None = None
    publisher: str | None = Field(default=None, max_length=255)


class BookChapterUpdate(RecordUpdate):
    required_fields: ClassVar[frozenset[str]] = RecordUpdate.required_fields | {
        "book_chapter_status",
        "keywords",
    }

    book_chapter_status: ResearchStatus | None = None
    isbn_issn: str | None = Field(default=None, max_length=64)
    keywords: list[str] | None = None
    doi: str | None = Field(default=None, max_length=255)
    publication_date: NaiveUTCDateTime | None = None
    publisher: str | None = Field(default=None, max_length=255)


class BookChapterResponse(RecordResponse):
    book_chapter_status: ResearchStatus
    isbn_issn: str | None
    keywords: list[str]
    doi: str | None
    publication_date: UTCDateTime | None
    publisher: str | None
    faculty_authors: list[BookChapterAuthorResponse]
    student_authors: list[BookChapterAuthorResponse]


class BookChapterEnvelope(CamelModel):
    book_chapter: BookChapterResponse


class BookChapterListResponse(CamelModel):
    book_chapters: list[BookChapterResponse]
    pagination: Pagination


# --- Copyrights ---


class CopyrightAuthorResponse(AuthorResponse):
    record_id: UUID = Field(validation_alias="record_id", serialization_alias="copyrightId")


class CopyrightCreate(RecordCreate):
    serial_no: str = Field(min_length=1, max_length=100)
    status: ResearchStatus = ResearchStatus.SUBMITTED
    date_of_filing: NaiveUTCDateTime | None = None
    date_of_submission: NaiveUTCDateTime | None = None
    date_of_published: NaiveUTCDateTime | None = None
    date_of_grant: NaiveUTCDateTime | None = None


class CopyrightUpdate(RecordUpdate):
    required_fields: ClassVar[frozenset[str]] = RecordUpdate.required_fields | {
        "serial_no",
        "status",
    }

    serial_no: str | None = Field(default=None, min_length=1, max_length=100)
    status: ResearchStatus | None = None
    date_of_filing: NaiveUTCDateTime | None = None
    date_of_submission: NaiveUTCDateTime | None = None
    date_of_published: NaiveUTCDateTime | None = None
    date_of_grant: NaiveUTCDateTime | None = None


class CopyrightResponse(RecordResponse):
    serial_no: str
    status: ResearchStatus
    date_of_filing: UTCDateTime | None
    date_of_submission: UTCDateTime | None
    date_of_published: UTCDateTime | None
    date_of_grant: UTCDateTime | None
    faculty_authors: list[CopyrightAuthorResponse]
    student_authors: list[CopyrightAuthorResponse]


class CopyrightEnvelope(CamelModel):
    copyright: CopyrightResponse


class CopyrightListResponse(CamelModel):
    copyrights: list[CopyrightResponse]
    pagination: Pagination


# --- Journals ---


class JournalAuthorResponse(AuthorResponse):
    record_id: UUID = Field(validation_alias="record_id", serialization_alias="journalId")


class JournalCreate(RecordCreate):
    serial_no: str = Field(min_length=1, max_length=100)
    journal_name: str = Field(min_length=1, max_length=500)
    scope: JournalScope
    review_type: JournalReviewType
    access_type: JournalAccessType
    indexing: JournalIndexing
    quartile: JournalQuartile = JournalQuartile.NOT_APPLICABLE
    publication_mode: JournalPublicationMode
    impact_factor: float | None = Field(default=None, ge=0)
    impact_factor_date: NaiveUTCDateTime | None = None
    publisher: str | None = Field(default=None, max_length=255)
    publication_date: NaiveUTCDateTime | None = None
    doi: str | None = Field(default=None, max_length=255)
    paper_link: str | None = None
    keywords: list[str] = Field(default_factory=list)
    journal_status: ResearchStatus = ResearchStatus.SUBMITTED


class JournalUpdate(RecordUpdate):
    required_fields: ClassVar[frozenset[str]] = RecordUpdate.required_fields | {
        "serial_no",
        "journal_name",
        "scope",
        "review_type",
        "access_type",
        "indexing",
        "quartile",
        "publication_mode",
        "keywords",
        "journal_status",
    }

    serial_no: str | None = Field(default=None, min_length=1, max_length=100)
    journal_name: str | None = Field(default=None, min_length=1, max_length=500)
    scope: JournalScope | None = None
    review_type: JournalReviewType | None = None
    access_type: JournalAccessType | None = None
    indexing: JournalIndexing | None = None
    quartile: JournalQuartile | None = None
    publication_mode: JournalPublicationMode | None = None
    impact_factor: float | None = Field(default=None, ge=0)
    impact_factor_date: NaiveUTCDateTime | None = None
    publisher: str | None = Field(default=None, max_length=255)
    publication_date: NaiveUTCDateTime | None = None
    doi: str | None = Field(default=None, max_length=255)
    paper_link: str | None = None
    keywords: list[str] | None = None
    journal_status: ResearchStatus | None = None


class JournalResponse(RecordResponse):
    serial_no: str
    journal_name: str
    scope: JournalScope
    review_type: JournalReviewType
    access_type: JournalAccessType
    indexing: JournalIndexing
    quartile: JournalQuartile
    publication_mode: JournalPublicationMode
    impact_factor: float | None
    impact_factor_date: UTCDateTime | None
    publisher: str | None
    publication_date: UTCDateTime | None
    doi: str | None
    paper_link: str | None
    keywords: list[str]
    journal_status: ResearchStatus
    faculty_authors: list[JournalAuthorResponse]
    student_authors: list[JournalAuthorResponse]


class JournalEnvelope(CamelModel):
    journal: JournalResponse


class JournalListResponse(CamelModel):
    journals: list[JournalResponse]
    pagination: Pagination
