from app.hrhub.db.models import PerformanceCycle
from app.hrhub.repos.base import ScopedRepository


class PerformanceCycleRepository(ScopedRepository):
    model = PerformanceCycle

    def list_cycles(self, *, year: int | None = None, status: str | None = None, offset: int, limit: int):
        stmt = self.select_scoped()
        if year is not None:
            stmt = stmt.where(PerformanceCycle.year == year)
        if status:
            stmt = stmt.where(PerformanceCycle.status == status)
        return self.paginate(
            stmt,
            offset=offset,
            limit=limit,
            order_by=(PerformanceCycle.year.desc(), PerformanceCycle.created_at.desc()),
        )
