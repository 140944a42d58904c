from fastapi import APIRouter, Depends, Query

from cmsauth.dependencies import get_access_token, get_directus_client
from cmsauth.errors import AuthError
from cmsauth.services.directus import DirectusClient

from app.schemas.contacts import CompaniesData, CompaniesResponse, PeopleData, PeopleResponse
from app.services.crm import find_companies, find_people
from app.settings import settings


router = APIRouter(prefix="/api", tags=["contacts"])


class MissingFilter(AuthError):
    status_code = 400
    default_message = "Filter parameter is required"


@router.get("/companies", response_model=CompaniesResponse)
async def list_companies(
    filter: str | None = Query(default=None),
    limit: int = Query(default=settings.COMPANIES_DEFAULT_LIMIT, ge=1, le=1000),
    access_token: str = Depends(get_access_token),
    client: DirectusClient = Depends(get_directus_client),
):
    """Companies in one sector, e.g. filter=bransch[containsAny]:[UTBILDNING]."""
    if not filter:
        raise MissingFilter()

    companies = await find_companies(client, access_token, filter, limit)
    return CompaniesResponse(data=CompaniesData(companies=companies))


@router.get("/people", response_model=PeopleResponse)
async def list_people(
    filter: str | None = Query(default=None),
    limit: int = Query(default=settings.PEOPLE_DEFAULT_LIMIT, ge=1, le=1000),
    access_token: str = Depends(get_access_token),
    client: DirectusClient = Depends(get_directus_client),
):
    """Contact people of one company, e.g. filter=companyId[eq]:42."""
    if not filter:
        raise MissingFilter()

    people = await find_people(client, access_token, filter, limit)
    return PeopleResponse(data=PeopleData(people=people))
