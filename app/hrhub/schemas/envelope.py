from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(serialization_alias="totalPages")


class DataEnvelope(BaseModel, Generic[T]):
    data: T


class PaginatedEnvelope(BaseModel, Generic[T]):
    data: list[T]
    pagination: Pagination


def envelope(data) -> dict:
    return {"data": data}


def paginated(data: list, pagination: dict) -> dict:
    return {"data": data, "pagination": pagination}
