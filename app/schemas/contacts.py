from typing import Any

from pydantic import BaseModel


class CompaniesData(BaseModel):
    companies: list[dict[str, Any]]


class CompaniesResponse(BaseModel):
    data: CompaniesData


class PeopleData(BaseModel):
    people: list[dict[str, Any]]


class PeopleResponse(BaseModel):
    data: PeopleData
