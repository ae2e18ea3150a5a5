"""Enumerations shared by models and schemas."""

from enum import Enum


class UserRole(str, Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    FACULTY = "FACULTY"
    ADMIN = "ADMIN"


class AuthorType(str, Enum):
    FACULTY = "FACULTY"
    STUDENT = "STUDENT"


class ResearchStatus(str, Enum):
    """Workflow state of a book chapter, copyright or journal submission."""

    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    REVISION = "REVISION"
    APPROVED = "APPROVED"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"


class TeacherStatus(str, Enum):
    """Review state as tracked by the supervising teacher."""

    UPLOADED = "UPLOADED"
    ACCEPTED = "ACCEPTED"
    PUBLISHED = "PUBLISHED"
    UPDATE = "UPDATE"


class JournalScope(str, Enum):
    NATIONAL = "NATIONAL"
    INTERNATIONAL = "INTERNATIONAL"


class JournalReviewType(str, Enum):
    PEER_REVIEWED = "PEER_REVIEWED"
    NOT_PEER_REVIEWED = "NOT_PEER_REVIEWED"


class JournalAccessType(str, Enum):
    OPEN_ACCESS = "OPEN_ACCESS"
    SUBSCRIPTION = "SUBSCRIPTION"
    HYBRID = "HYBRID"


class JournalIndexing(str, Enum):
    SCOPUS = "SCOPUS"
    WEB_OF_SCIENCE = "WEB_OF_SCIENCE"
    SCI = "SCI"
    UGC_CARE = "UGC_CARE"
    PEER_REVIEWED = "PEER_REVIEWED"
    OTHER = "OTHER"


class JournalQuartile(str, Enum):
    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"
    NOT_APPLICABLE = "NOT_APPLICABLE"


class JournalPublicationMode(str, Enum):
    ONLINE = "ONLINE"
    PRINT = "PRINT"
    BOTH = "BOTH"
