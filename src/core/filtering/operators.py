from enum import StrEnum


class FilterOperator(StrEnum):
    EQUAL = "equal"
    LIKE = "like"
    OR = "or"
    GT = "gt"  # greater than
    BETWEEN = "between"


class SortDirection(StrEnum):
    ASC = "ASC"
    DESC = "DESC"
