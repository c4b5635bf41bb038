from app.hrhub.db.models import Company
from app.hrhub.repos.base import as_uuid


class CompanyRepository:
    def __init__(self, db):
        self.db = db

    def get_by_id(self, company_id):
        company_uuid = as_uuid(company_id)
        if company_uuid is None:
            return None
        return self.db.get(Company, company_uuid)
