from __future__ import annotations

from typing import Any

from ..rdf.terms import Term, value_of
from .paths import PathEvaluator
from .shapes import Field, Gated, Nested, RecordShape, Repeated, Scalar, Types

# sentinel for a gated field whose key must not appear
_OMIT = object()


class RecordProjector:
    """Builds JSON-shaped records from an entity by interpreting a ``RecordShape``.

    Every path step is a query; nothing is cached between entities.
    """

    def __init__(self, evaluator: PathEvaluator):
        self.evaluator = evaluator

    async def project(self, entity: Term | None, shape: RecordShape) -> dict[str, Any]:
        record: dict[str, Any] = {}
        if shape.id_field:
            record[shape.id_field] = value_of(entity)
        for name, field in shape.fields:
            value = await self._field(entity, field)
            if value is not _OMIT:
                record[name] = value
        return record

    async def _field(self, entity: Term | None, field: Field) -> Any:
        ev = self.evaluator
        if isinstance(field, Scalar):
            return value_of(await ev.evaluate_one(entity, field.path))
        if isinstance(field, Types):
            return [value_of(t) for t in await ev.evaluate_all(entity, field.path)]
        if isinstance(field, Nested):
            sub = await ev.evaluate_one(entity, field.path)
            return await self.project(sub, field.shape)
        if isinstance(field, Repeated):
            items = await ev.evaluate_all(entity, field.path)
            if field.shape is None:
                return [value_of(t) for t in items]
            return [await self.project(t, field.shape) for t in items]
        if isinstance(field, Gated):
            if await ev.evaluate_one(entity, field.discriminator) is None:
                return _OMIT
            return await self._field(entity, field.field)
        raise TypeError(f"unsupported field {field!r}")
