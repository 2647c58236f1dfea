from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from gigdraft.db.models import JobPosting


class JobRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_jobs(self, limit: int = 50) -> list[JobPosting]:
        statement = select(JobPosting).order_by(JobPosting.posted_at.desc(), JobPosting.id.desc()).limit(limit)
        return list(self.session.scalars(statement).all())

    def get_job(self, job_id: int) -> JobPosting | None:
        return self.session.get(JobPosting, job_id)

    def get_by_source_id(self, source_id: str) -> JobPosting | None:
        return self.session.scalar(select(JobPosting).where(JobPosting.source_id == source_id))

    def upsert_job(self, values: dict) -> JobPosting:
        existing = self.get_by_source_id(values["source_id"])
        if existing:
            for key, value in values.items():
                setattr(existing, key, value)
            obj = existing
        else:
            obj = JobPosting(**values)
            self.session.add(obj)

        self.session.commit()
        self.session.refresh(obj)
        return obj

    def delete_all_jobs(self) -> int:
        result = self.session.execute(delete(JobPosting))
        self.session.commit()
        return result.rowcount or 0
