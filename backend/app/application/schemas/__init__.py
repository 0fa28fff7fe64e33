from .registration_record import (
    ErrorResponse,
    FilteredStatsSchema,
    GroupStatsSchema,
    OverallStatsSchema,
    PaginationSchema,
    RecordDeleteResponse,
    RecordListResponse,
    RecordSubmitRequest,
    RecordSubmitResponse,
    RegistrationRecordResponse,
    StatisticsResponse,
)

__all__ = [
    "ErrorResponse",
    "FilteredStatsSchema",
    "GroupStatsSchema",
    "OverallStatsSchema",
    "PaginationSchema",
    "RecordDeleteResponse",
    "RecordListResponse",
    "RecordSubmitRequest",
    "RecordSubmitResponse",
    "RegistrationRecordResponse",
    "StatisticsResponse",
]
