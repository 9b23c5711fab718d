"""Pagination-related schemas and utilities."""

from .schemas import PaginationMeta, PaginationParams

__all__ = ["PaginationMeta", "PaginationParams"]
