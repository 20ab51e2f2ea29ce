# pylint: disable=redefined-outer-name
import itertools

import pytest
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, clear_mappers
from sqlalchemy.pool import StaticPool

from config import ApiConfig, AuthConfig
from apolohra.adapters import orm, repository
from apolohra.service_layer.unit_of_work import AbstractUnitOfWork

TEST_SECRET = "test-secret-for-apolohra"


class FakeUserRepository(repository.AbstractUserRepository):
    def __init__(self):
        super().__init__()
        self._users = []

    def put(self, user):
        self._users.append(user)

    def _get_by_run(self, run):
        return next((u for u in self._users if u.run == run), None)


class FakePatientRepository(repository.AbstractPatientRepository):
    def __init__(self, ids):
        super().__init__()
        self._patients = []
        self._ids = ids

    def _add(self, patient):
        if patient.id is None:
            patient.id = next(self._ids)
        self._patients.append(patient)

    def _get(self, patient_id):
        return next((p for p in self._patients if p.id == patient_id), None)

    def _get_by_run(self, run):
        return next((p for p in self._patients if p.run == run), None)

    def _get_by_other_identification(self, other_identification):
        return next(
            (p for p in self._patients if p.other_identification == other_identification),
            None,
        )


class FakeCommuneRepository(repository.AbstractCommuneRepository):
    def __init__(self):
        self._communes = []

    def put(self, commune):
        self._communes.append(commune)

    def _get_by_code_deis(self, code_deis):
        return next((c for c in self._communes if c.code_deis == code_deis), None)


class FakeDemographicRepository(repository.AbstractDemographicRepository):
    def __init__(self, ids):
        super().__init__()
        self._demographics = []
        self._ids = ids

    def _add(self, demographic):
        if demographic.id is None:
            demographic.id = next(self._ids)
        self._demographics.append(demographic)

    def _get_by_patient_id(self, patient_id):
        return next((d for d in self._demographics if d.patient_id == patient_id), None)


class FakeSuspectCaseRepository(repository.AbstractSuspectCaseRepository):
    def __init__(self, ids):
        super().__init__()
        self._cases = []
        self._ids = ids

    def _add(self, suspect_case):
        if suspect_case.id is None:
            suspect_case.id = next(self._ids)
        self._cases.append(suspect_case)

    def _get(self, case_id):
        return next((c for c in self._cases if c.id == case_id), None)

    def _list_by_patient_id(self, patient_id):
        return [c for c in self._cases if c.patient_id == patient_id]


class FakeUnitOfWork(AbstractUnitOfWork):
    def __init__(self):
        self.users = FakeUserRepository()
        self.patients = FakePatientRepository(itertools.count(1))
        self.communes = FakeCommuneRepository()
        self.demographics = FakeDemographicRepository(itertools.count(1))
        self.suspect_cases = FakeSuspectCaseRepository(itertools.count(1))
        self.committed = False

    def _commit(self):
        self.committed = True

    def rollback(self):
        pass


class BrokenUnitOfWork(FakeUnitOfWork):
    """Every store access fails the way a lost MySQL connection does."""

    def __init__(self):
        super().__init__()
        error = OperationalError("SELECT 1", {}, Exception("Lost connection to MySQL server"))

        def fail(*args, **kwargs):
            raise error

        for repo in (self.users, self.patients, self.communes, self.demographics, self.suspect_cases):
            for name in ("_add", "_get", "_get_by_run", "_get_by_other_identification",
                         "_get_by_code_deis", "_get_by_patient_id", "_list_by_patient_id"):
                if hasattr(repo, name):
                    setattr(repo, name, fail)
        self._error = error

    def _commit(self):
        raise self._error


@pytest.fixture
def fake_uow():
    return FakeUnitOfWork()


@pytest.fixture
def broken_uow():
    return BrokenUnitOfWork()


@pytest.fixture
def sqlite_session_factory():
    """Create SQLite in-memory database for fast testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    orm.metadata.create_all(engine)
    orm.start_mappers()

    yield sessionmaker(bind=engine)

    clear_mappers()
    engine.dispose()


@pytest.fixture
def session(sqlite_session_factory):
    session = sqlite_session_factory()
    yield session
    session.close()


@pytest.fixture
def api_config():
    return ApiConfig(auth=AuthConfig(secret=TEST_SECRET))


@pytest.fixture
def make_token():
    def _make_token(secret=TEST_SECRET, **claims):
        payload = {"sub": "hra-integration", **claims}
        return jwt.encode(payload, secret, algorithm="HS256")
    return _make_token


@pytest.fixture
def api_client(api_config, sqlite_session_factory, make_token):
    """TestClient with a valid bearer token on every request."""
    from fastapi.testclient import TestClient
    from apolohra.entrypoints.apolohra_api import create_app

    app = create_app(api_config, session_factory=sqlite_session_factory)
    with TestClient(app) as client:
        client.headers.update({"Authorization": f"Bearer {make_token()}"})
        yield client


@pytest.fixture
def anonymous_client(api_config, sqlite_session_factory):
    from fastapi.testclient import TestClient
    from apolohra.entrypoints.apolohra_api import create_app

    app = create_app(api_config, session_factory=sqlite_session_factory)
    with TestClient(app) as client:
        yield client
