import logging
import re

from cmsauth.services.directus import DirectusClient

logger = logging.getLogger(__name__)


# Sector ("bransch") codes used by the client, mapped to the industry
# names stored on Directus companies
BRANSCH_TO_INDUSTRY: dict[str, str] = {
    "TILLVERKNING_OCH_UTVINNING": "Tillverkning och utvinning",
    "PARTIHANDEL_OCH_NATHANDEL": "Partihandel och näthandel",
    "INFORMATION_OCH_KOMMUNIKATION": "Information och kommunikation",
    "BYGG_OCH_ANLAGGNING": "Bygg och anläggning",
    "FINANS_OCH_FASTIGHETSVERKSAMHET": "Finans och fastighetsverksamhet",
    "KULTUR_FRITID_OCH_NOJEN_SAMFUND": "Kultur, fritid och nöjen, samfund",
    "HOTELL_OCH_RESTAURANG": "Hotell och restaurang",
    "VARD_OCH_OMSORG": "Vård- och omsorg",
    "AVANCERADE_FORETAGSTJANSTER": "Avancerade företagstjänster",
    "FORETAGSTJANSTER_OCH_PERSONLIGA_TJANSTER": "Företagstjänster och personliga tjänster",
    "TRANSPORT_OCH_LOGISTIK": "Transport och logistik",
    "UTBILDNING": "Utbildning",
    "JORD_OCH_SKOGSBRUK": "Jord- och skogsbruk",
    "DETALJHANDEL_OCH_SALLANKOP": "Detaljhandel och sällanköp",
}

PEOPLE_FIELDS = "id,name,title,email,company.id,company.name,company.industry"

BRANSCH_FILTER_RE = re.compile(r"bransch\[containsAny\]:\[([^\]]+)\]")
COMPANY_ID_FILTER_RE = re.compile(r"companyId\[eq\]:([^&]+)")


def build_companies_params(filter_: str, limit: int) -> list[tuple[str, str]]:
    """
    Translate a client filter such as
    "bransch[containsAny]:[INFORMATION_OCH_KOMMUNIKATION]" into Directus
    query parameters. Unknown codes leave the query unfiltered.
    """
    params = [("limit", str(limit)), ("sort", "name")]

    match = BRANSCH_FILTER_RE.search(filter_)
    if match:
        industry = BRANSCH_TO_INDUSTRY.get(match.group(1))
        if industry:
            params.append(("filter[industry][_eq]", industry))
            logger.info("Filtering companies by industry: %s", industry)

    return params


def build_people_params(filter_: str, limit: int) -> list[tuple[str, str]]:
    """Translate "companyId[eq]:<id>" into Directus query parameters."""
    params = [("limit", str(limit)), ("fields", PEOPLE_FIELDS)]

    match = COMPANY_ID_FILTER_RE.search(filter_)
    if match:
        # The relation field in Directus is "company", not "companyId"
        params.append(("filter[company][_eq]", match.group(1)))

    return params


async def find_companies(
    client: DirectusClient,
    access_token: str,
    filter_: str,
    limit: int,
) -> list[dict]:
    companies = await client.get_items("companies", build_companies_params(filter_, limit), access_token)
    logger.info("Fetched %s companies", len(companies))
    return companies


async def find_people(
    client: DirectusClient,
    access_token: str,
    filter_: str,
    limit: int,
) -> list[dict]:
    people = await client.get_items("people", build_people_params(filter_, limit), access_token)
    logger.info("Fetched %s people", len(people))
    return people
