from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Organizational roles as stored in the employee directory."""

    HEAD_OF_OFFICE = "head_of_office"
    ADMIN_STAFF = "admin_staff"
    DIVISION_CHIEF = "division_chief"
    PROJECT_STAFF = "project_staff"


class Permission(str, Enum):
    """Actor-level permissions, resolved once per actor from the role."""

    FILE_OWN_FORMS = "file_own_forms"
    VIEW_OWN_RECORDS = "view_own_records"
    ENCODE_DTR = "encode_dtr"
    VIEW_ALL_DTR = "view_all_dtr"
    VIEW_DIVISION_DTR = "view_division_dtr"
    REVIEW_FORMS = "review_forms"
    FINALIZE_FORMS = "finalize_forms"
    VIEW_ALL_FORMS = "view_all_forms"
    VIEW_DIVISION_FORMS = "view_division_forms"
    MANAGE_OFFICE_FORMS = "manage_office_forms"
    APPROVE_OFFICE_FORMS = "approve_office_forms"


class Capability(str, Enum):
    """Form-level capabilities the review workflow checks transitions against."""

    OWNER = "owner"
    REVIEWER = "reviewer"
    FINALIZER = "finalizer"


class FormKind(str, Enum):
    """IPCR is the individual commitment form, DPCR the office-level one."""

    IPCR = "ipcr"
    DPCR = "dpcr"


class FormStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    REVIEWED = "reviewed"
    FINALIZED = "finalized"
    RETURNED = "returned"
    APPROVED = "approved"


class FormAction(str, Enum):
    SUBMIT = "submit"
    REVIEW = "review"
    RETURN = "return"
    RATE = "rate"
    FINALIZE = "finalize"
    APPROVE = "approve"
    REOPEN = "reopen"
    REVERT = "revert"


class OutputCategory(str, Enum):
    STRATEGIC_PRIORITY = "Strategic Priority"
    CORE_FUNCTION = "Core Function"
    SUPPORT_FUNCTION = "Support Function"


class AdjectivalRating(str, Enum):
    OUTSTANDING = "Outstanding"
    VERY_SATISFACTORY = "Very Satisfactory"
    SATISFACTORY = "Satisfactory"
    UNSATISFACTORY = "Unsatisfactory"
    POOR = "Poor"
