import uuid

from sqlalchemy import Select, func, select

from app.hrhub.core.scope import TenantScope


def as_uuid(value) -> uuid.UUID | None:
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class ScopedRepository:
    """Base for repositories over tenant-owned tables.

    Every statement built through :meth:`scoped` carries the company
    predicate of the request's :class:`TenantScope`. Subclasses set
    ``model`` and build their queries from :meth:`select_scoped`.
    """

    model = None

    def __init__(self, db, scope: TenantScope):
        self.db = db
        self.scope = scope

    def scoped(self, stmt: Select, model=None) -> Select:
        target = model or self.model
        if self.scope.company_id is not None:
            stmt = stmt.where(target.company_id == self.scope.company_id)
        return stmt

    def select_scoped(self, model=None) -> Select:
        target = model or self.model
        return self.scoped(select(target), target)

    def get(self, entity_id, *, for_update: bool = False):
        entity_uuid = as_uuid(entity_id)
        if entity_uuid is None:
            return None
        stmt = self.select_scoped().where(self.model.id == entity_uuid)
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalars().first()

    def paginate(self, stmt: Select, *, offset: int, limit: int, order_by=None):
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = self.db.execute(count_stmt).scalar_one()
        if order_by is not None:
            stmt = stmt.order_by(*order_by)
        rows = self.db.execute(stmt.offset(offset).limit(limit)).scalars().all()
        return rows, total
