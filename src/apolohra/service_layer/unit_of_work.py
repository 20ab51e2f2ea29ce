# pylint: disable=attribute-defined-outside-init
from __future__ import annotations
import abc
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

from config import DatabaseConfig
from apolohra.adapters import repository

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(abc.ABC):
    users: repository.AbstractUserRepository
    patients: repository.AbstractPatientRepository
    communes: repository.AbstractCommuneRepository
    demographics: repository.AbstractDemographicRepository
    suspect_cases: repository.AbstractSuspectCaseRepository

    def __enter__(self) -> AbstractUnitOfWork:
        return self

    def __exit__(self, *args):
        self.rollback()

    def commit(self):
        self._commit()

    def collect_new_events(self):
        for suspect_case in self.suspect_cases.seen:
            while suspect_case.events:
                yield suspect_case.events.pop(0)

    @abc.abstractmethod
    def _commit(self):
        raise NotImplementedError

    @abc.abstractmethod
    def rollback(self):
        raise NotImplementedError


def make_session_factory(db_config: DatabaseConfig) -> sessionmaker:
    """Build the session factory once, at process start."""
    logger.info(f"Creating database engine for {db_config.safe_uri()}")
    engine = create_engine(
        db_config.uri,
        pool_pre_ping=True,
        pool_recycle=300,
    )
    return sessionmaker(bind=engine)


def check_connection(session_factory) -> bool:
    """Test database connectivity for health checks."""
    try:
        with session_factory() as session:
            session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return False


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, session_factory):
        self.session_factory = session_factory

    def __enter__(self):
        self.session = self.session_factory()  # type: Session
        self.users = repository.SqlAlchemyUserRepository(self.session)
        self.patients = repository.SqlAlchemyPatientRepository(self.session)
        self.communes = repository.SqlAlchemyCommuneRepository(self.session)
        self.demographics = repository.SqlAlchemyDemographicRepository(self.session)
        self.suspect_cases = repository.SqlAlchemySuspectCaseRepository(self.session)
        return super().__enter__()

    def __exit__(self, *args):
        super().__exit__(*args)
        self.session.close()

    def _commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()
