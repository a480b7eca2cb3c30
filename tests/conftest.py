from __future__ import annotations

import httpx
import pytest

BUSINESS_URL = "http://example.org/cafe"

BUSINESS_TTL = """\
@prefix schema: <http://schema.org/> .
@prefix ex: <http://example.org/> .

ex:biz1 a schema:LocalBusiness, schema:CafeOrCoffeeShop ;
    schema:name "Cafe" ;
    schema:telephone "+32 9 123 45 67" ;
    schema:location ex:place1 ;
    schema:openingHoursSpecification ex:ohs1, ex:ohs2 .

ex:place1 schema:name "Corner" ;
    schema:address ex:addr1 ;
    schema:geo [ schema:latitude "51.05" ; schema:longitude "3.72" ] .

ex:addr1 schema:streetAddress "Veldstraat 1" ;
    schema:postalCode "9000" ;
    schema:addressLocality "Gent" .

ex:ohs1 schema:opens "08:00" ;
    schema:closes "17:00" ;
    schema:dayOfWeek schema:Monday .

ex:ohs2 schema:opens "10:00" ;
    schema:closes "14:00" .

ex:biz2 a schema:LocalBusiness ;
    schema:name "Bakery" .

ex:person1 a schema:Person ;
    schema:name "Ada" .
"""


class FakeWeb:
    """Serves canned documents through an httpx mock transport and records requests."""

    def __init__(self, documents: dict[str, tuple[str, str]] | None = None):
        self.documents = dict(documents or {})
        self.requests: list[httpx.Request] = []
        self.unreachable: set[str] = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url in self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        if url not in self.documents:
            return httpx.Response(404, text="not found")
        content_type, body = self.documents[url]
        return httpx.Response(200, text=body, headers={"content-type": content_type})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture()
def web() -> FakeWeb:
    return FakeWeb({BUSINESS_URL: ("text/turtle", BUSINESS_TTL)})
