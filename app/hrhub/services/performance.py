from app.hrhub.core.error_catalog import not_found
from app.hrhub.core.scope import TenantScope
from app.hrhub.db.models import PerformanceCycle
from app.hrhub.repos.performance import PerformanceCycleRepository
from app.hrhub.services.workflow import PERFORMANCE_SEQUENCE, next_in_sequence


class PerformanceCycleService:
    def __init__(self, db, scope: TenantScope):
        self.db = db
        self.scope = scope
        self.repo = PerformanceCycleRepository(db, scope)

    def get_cycle(self, cycle_id) -> PerformanceCycle:
        cycle = self.repo.get(cycle_id)
        if cycle is None:
            raise not_found("Performance cycle not found")
        return cycle

    def create_cycle(self, payload) -> PerformanceCycle:
        cycle = PerformanceCycle(
            company_id=self.scope.company_for_write(),
            name=payload.name,
            year=payload.year,
            half=payload.half,
            goal_start=payload.goal_start,
            goal_end=payload.goal_end,
            eval_start=payload.eval_start,
            eval_end=payload.eval_end,
            status="DRAFT",
        )
        self.db.add(cycle)
        self.db.commit()
        return cycle

    def advance(self, cycle_id) -> tuple[PerformanceCycle, str]:
        cycle = self.get_cycle(cycle_id)
        previous_status = cycle.status
        cycle.status = next_in_sequence(PERFORMANCE_SEQUENCE, cycle.status, subject="Performance cycle")
        self.db.commit()
        return cycle, previous_status
