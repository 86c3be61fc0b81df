"""Module: directory.

Scrapes the external clinic directory for a ZIP code and reconciles each
listing against the admin-curated partnered offices.

The source site renders one clinic across two table rows: a ``tr[valign=top]``
row with the name and detail link, followed by a row whose ``div.vetText``
holds the address. Pagination follows the "Next Page" link until it
disappears, bounded by ``settings.directory_max_pages``.
"""

import copy
import logging
import re
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup
from bs4.element import Tag
from sqlalchemy.orm import Session

from petvet.core.config import settings
from petvet.core.errors import FetchError, NotFoundError, ValidationError
from petvet.db.models.office_link import PreferredVetOffice, VetOfficeMember
from petvet.db.models.partnered_vet_office import PartneredVetOffice
from petvet.services.common import normalize_optional
from petvet.services.offices import (
    add_membership,
    add_preferred_office,
    find_partnered_office,
    office_key,
    partnered_keys,
)

logger = logging.getLogger(__name__)

ZIP_PATTERN = re.compile(r"[0-9]{5}")
SEARCH_PATH = "search_results.php"
USER_AGENT = "PetVet/0.1 (+clinic locator)"


@dataclass
class DirectoryListing:
    name: str
    address: str
    detail_link: str
    partnered: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class DirectoryPage:
    number: int
    listings: list[DirectoryListing] = field(default_factory=list)
    has_next: bool = False


def validate_zip(zip_code: str | None) -> str:
    # Exactly five ASCII digits with no surrounding whitespace.
    if not ZIP_PATTERN.fullmatch(zip_code or ""):
        raise ValidationError("Invalid zipcode")
    return zip_code


def _collapse(text: str) -> str:
    return " ".join(text.split())


def parse_listing_row(row: Tag, base_url: str) -> DirectoryListing | None:
    """Return the listing for one result row, or None when name or link is missing."""
    cells = row.select("td.vetText")
    if not cells:
        return None

    name_cell = copy.copy(cells[0])
    for distance in name_cell.select(".distanceText"):
        distance.decompose()
    name = _collapse(name_cell.get_text())

    anchor = cells[1].find("a") if len(cells) > 1 else None
    href = anchor.get("href") if anchor is not None else None
    if not name or not href:
        return None

    address = ""
    address_row = row.find_next_sibling("tr")
    if address_row is not None:
        address = _collapse("".join(div.get_text() for div in address_row.select("div.vetText")))

    return DirectoryListing(name=name, address=address, detail_link=urljoin(base_url, href))


def parse_directory_page(html: str, base_url: str, number: int = 1) -> DirectoryPage:
    soup = BeautifulSoup(html, "html.parser")
    page = DirectoryPage(number=number)

    for index, row in enumerate(soup.select('tr[valign="top"]')):
        try:
            listing = parse_listing_row(row, base_url)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError):
            # One malformed row never aborts the page.
            logger.warning("Skipping malformed directory row %d on page %d", index, number, exc_info=True)
            continue
        if listing is not None:
            page.listings.append(listing)

    page.has_next = soup.select_one("a[title='Next Page']") is not None
    return page


def page_params(zip_code: str, page: int, radius: int) -> dict:
    params = {"radius": radius, "zip": zip_code}
    if page > 1:
        params["page"] = page
    return params


def fetch_page_html(client: httpx.Client, url: str, params: dict) -> str:
    try:
        response = client.get(url, params=params)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.error("Directory request failed for %s %s: %r", url, params, exc)
        raise FetchError(f"Failed to fetch vet data (page {params.get('page', 1)})") from exc
    return response.text


def iter_directory_pages(
    client: httpx.Client,
    zip_code: str,
    *,
    base_url: str | None = None,
    radius: int | None = None,
    max_pages: int | None = None,
) -> Iterator[DirectoryPage]:
    """
    Lazily fetch result pages for ``zip_code`` starting at page 1.

    Stops after the first page without a "Next Page" link. Raises FetchError
    when the directory still advertises a next page after ``max_pages``.
    """
    base_url = base_url or settings.directory_base_url
    radius = radius if radius is not None else settings.directory_radius
    max_pages = max_pages if max_pages is not None else settings.directory_max_pages
    url = urljoin(base_url, SEARCH_PATH)

    for number in range(1, max_pages + 1):
        html = fetch_page_html(client, url, page_params(zip_code, number, radius))
        page = parse_directory_page(html, base_url, number)
        logger.debug("Directory page %d for %s: %d listings", number, zip_code, len(page.listings))
        yield page
        if not page.has_next:
            return

    logger.error("Directory pagination for %s exceeded %d pages", zip_code, max_pages)
    raise FetchError(f"Failed to fetch vet data (more than {max_pages} pages)")


def iter_directory_listings(client: httpx.Client, zip_code: str, **kwargs) -> Iterator[DirectoryListing]:
    for page in iter_directory_pages(client, zip_code, **kwargs):
        yield from page.listings


def build_directory_client() -> httpx.Client:
    return httpx.Client(
        timeout=settings.directory_timeout_seconds,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


@contextmanager
def _client_scope(client: httpx.Client | None):
    if client is not None:
        yield client
        return
    owned = build_directory_client()
    try:
        yield owned
    finally:
        owned.close()


def search_directory(db: Session, zip_code: str | None, client: httpx.Client | None = None) -> list[DirectoryListing]:
    """Scrape every page for ``zip_code`` and tag listings that match a partnered office."""
    zip_code = validate_zip(zip_code)
    keys = partnered_keys(db)

    listings: list[DirectoryListing] = []
    with _client_scope(client) as http:
        for listing in iter_directory_listings(http, zip_code):
            listing.partnered = office_key(listing.name, listing.address) in keys
            listings.append(listing)

    logger.info(
        "Directory search %s: %d listings, %d partnered",
        zip_code,
        len(listings),
        sum(1 for listing in listings if listing.partnered),
    )
    return listings


def resolve_partnered_office(db: Session, name: str | None, address: str | None) -> PartneredVetOffice:
    if not normalize_optional(name) or not normalize_optional(address):
        raise ValidationError("Name and address are required")
    office = find_partnered_office(db, name, address)
    if office is None:
        raise NotFoundError("Could not locate office")
    return office


def save_listing(db: Session, owner_id: uuid.UUID, name: str | None, address: str | None) -> PreferredVetOffice:
    office = resolve_partnered_office(db, name, address)
    return add_preferred_office(db, owner_id, office.id)


def join_listing(db: Session, vet_id: uuid.UUID, name: str | None, address: str | None) -> VetOfficeMember:
    office = resolve_partnered_office(db, name, address)
    return add_membership(db, vet_id, office.id)
