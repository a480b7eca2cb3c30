"""Declarative record shapes.

A shape lists output fields in order; each field says how its value is
reached from the record's entity. Paths may be given as dotted strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .paths import Path, as_path


@dataclass(frozen=True, slots=True)
class Scalar:
    """First value of a single-valued path, or ``None``."""

    path: Path

    def __post_init__(self):
        object.__setattr__(self, "path", as_path(self.path))


@dataclass(frozen=True, slots=True)
class Types:
    """Every value bound to the path, in engine order."""

    path: Path = Path.of("type")

    def __post_init__(self):
        object.__setattr__(self, "path", as_path(self.path))


@dataclass(frozen=True, slots=True)
class Nested:
    """Sub-record projected from the first node reached by the path.

    The sub-record is always emitted; with no node its fields are null.
    """

    path: Path
    shape: "RecordShape"

    def __post_init__(self):
        object.__setattr__(self, "path", as_path(self.path))


@dataclass(frozen=True, slots=True)
class Repeated:
    """One item per value of a multi-valued path; scalars when shape is None."""

    path: Path
    shape: "RecordShape | None" = None

    def __post_init__(self):
        object.__setattr__(self, "path", as_path(self.path))


@dataclass(frozen=True, slots=True)
class Gated:
    """Emit ``field`` only if ``discriminator`` has a value; otherwise omit the key."""

    discriminator: Path
    field: "Field"

    def __post_init__(self):
        object.__setattr__(self, "discriminator", as_path(self.discriminator))


Field = Union[Scalar, Types, Nested, Repeated, Gated]


@dataclass(frozen=True)
class RecordShape:
    fields: tuple[tuple[str, Field], ...]
    id_field: str | None = "uri"

    @classmethod
    def of(cls, id_field: str | None = "uri", **fields: Field) -> "RecordShape":
        return cls(fields=tuple(fields.items()), id_field=id_field)

    def field_names(self) -> list[str]:
        names = [self.id_field] if self.id_field else []
        return names + [name for name, _ in self.fields]


DAY_OF_WEEK_SHAPE = RecordShape.of(name=Scalar("name"))

OPENING_HOURS_SHAPE = RecordShape.of(
    opens=Scalar("opens"),
    closes=Scalar("closes"),
    validFrom=Scalar("validFrom"),
    validThrough=Scalar("validThrough"),
    dayOfWeek=Gated("dayOfWeek", Nested("dayOfWeek", DAY_OF_WEEK_SHAPE)),
)

ADDRESS_SHAPE = RecordShape.of(
    streetAddress=Scalar("streetAddress"),
    postalCode=Scalar("postalCode"),
    addressLocality=Scalar("addressLocality"),
    addressRegion=Scalar("addressRegion"),
    addressCountry=Scalar("addressCountry"),
)

GEO_SHAPE = RecordShape.of(
    latitude=Scalar("latitude"),
    longitude=Scalar("longitude"),
)

PLACE_SHAPE = RecordShape.of(
    name=Scalar("name"),
    address=Nested("address", ADDRESS_SHAPE),
    geo=Nested("geo", GEO_SHAPE),
)

BUSINESS_SHAPE = RecordShape.of(
    types=Types(),
    name=Scalar("name"),
    description=Scalar("description"),
    telephone=Scalar("telephone"),
    email=Scalar("email"),
    url=Scalar("url"),
    image=Scalar("image"),
    priceRange=Scalar("priceRange"),
    address=Nested("address", ADDRESS_SHAPE),
    location=Nested("location", PLACE_SHAPE),
    openingHoursSpecifications=Repeated("openingHoursSpecification", OPENING_HOURS_SHAPE),
)

ENTITY_SHAPE = RecordShape.of(
    types=Types(),
    name=Scalar("name"),
)
