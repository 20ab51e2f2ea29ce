import abc
from typing import List, Optional, Set

from apolohra.domain import model


class AbstractUserRepository(abc.ABC):
    def __init__(self):
        self.seen = set()  # type: Set[model.User]

    def get_by_run(self, run: int) -> Optional[model.User]:
        user = self._get_by_run(run)
        if user:
            self.seen.add(user)
        return user

    @abc.abstractmethod
    def _get_by_run(self, run: int) -> Optional[model.User]:
        raise NotImplementedError


class AbstractPatientRepository(abc.ABC):
    def __init__(self):
        self.seen = set()  # type: Set[model.Patient]

    def add(self, patient: model.Patient) -> Optional[int]:
        self._add(patient)
        self.seen.add(patient)
        return patient.id

    def get(self, patient_id: int) -> Optional[model.Patient]:
        patient = self._get(patient_id)
        if patient:
            self.seen.add(patient)
        return patient

    def get_by_run(self, run: int) -> Optional[model.Patient]:
        patient = self._get_by_run(run)
        if patient:
            self.seen.add(patient)
        return patient

    def get_by_other_identification(self, other_identification: str) -> Optional[model.Patient]:
        patient = self._get_by_other_identification(other_identification)
        if patient:
            self.seen.add(patient)
        return patient

    @abc.abstractmethod
    def _add(self, patient: model.Patient):
        raise NotImplementedError

    @abc.abstractmethod
    def _get(self, patient_id: int) -> Optional[model.Patient]:
        raise NotImplementedError

    @abc.abstractmethod
    def _get_by_run(self, run: int) -> Optional[model.Patient]:
        raise NotImplementedError

    @abc.abstractmethod
    def _get_by_other_identification(self, other_identification: str) -> Optional[model.Patient]:
        raise NotImplementedError


class AbstractCommuneRepository(abc.ABC):
    def get_by_code_deis(self, code_deis: str) -> Optional[model.Commune]:
        return self._get_by_code_deis(code_deis)

    @abc.abstractmethod
    def _get_by_code_deis(self, code_deis: str) -> Optional[model.Commune]:
        raise NotImplementedError


class AbstractDemographicRepository(abc.ABC):
    def __init__(self):
        self.seen = set()  # type: Set[model.Demographic]

    def add(self, demographic: model.Demographic) -> Optional[int]:
        self._add(demographic)
        self.seen.add(demographic)
        return demographic.id

    def get_by_patient_id(self, patient_id: int) -> Optional[model.Demographic]:
        demographic = self._get_by_patient_id(patient_id)
        if demographic:
            self.seen.add(demographic)
        return demographic

    @abc.abstractmethod
    def _add(self, demographic: model.Demographic):
        raise NotImplementedError

    @abc.abstractmethod
    def _get_by_patient_id(self, patient_id: int) -> Optional[model.Demographic]:
        raise NotImplementedError


class AbstractSuspectCaseRepository(abc.ABC):
    def __init__(self):
        self.seen = set()  # type: Set[model.SuspectCase]

    def add(self, suspect_case: model.SuspectCase) -> Optional[int]:
        self._add(suspect_case)
        self.seen.add(suspect_case)
        return suspect_case.id

    def get(self, case_id: int) -> Optional[model.SuspectCase]:
        suspect_case = self._get(case_id)
        if suspect_case:
            self.seen.add(suspect_case)
        return suspect_case

    def list_by_patient_id(self, patient_id: int) -> List[model.SuspectCase]:
        suspect_cases = self._list_by_patient_id(patient_id)
        for suspect_case in suspect_cases:
            self.seen.add(suspect_case)
        return suspect_cases

    @abc.abstractmethod
    def _add(self, suspect_case: model.SuspectCase):
        raise NotImplementedError

    @abc.abstractmethod
    def _get(self, case_id: int) -> Optional[model.SuspectCase]:
        raise NotImplementedError

    @abc.abstractmethod
    def _list_by_patient_id(self, patient_id: int) -> List[model.SuspectCase]:
        raise NotImplementedError


class SqlAlchemyUserRepository(AbstractUserRepository):
    def __init__(self, session):
        super().__init__()
        self.session = session

    def _get_by_run(self, run):
        return self.session.query(model.User).filter_by(run=run).first()


class SqlAlchemyPatientRepository(AbstractPatientRepository):
    def __init__(self, session):
        super().__init__()
        self.session = session

    def _add(self, patient):
        self.session.add(patient)

    def _get(self, patient_id):
        return self.session.query(model.Patient).filter_by(id=patient_id).first()

    def _get_by_run(self, run):
        return self.session.query(model.Patient).filter_by(run=run).first()

    def _get_by_other_identification(self, other_identification):
        return self.session.query(model.Patient)\
            .filter_by(other_identification=other_identification)\
            .first()


class SqlAlchemyCommuneRepository(AbstractCommuneRepository):
    def __init__(self, session):
        self.session = session

    def _get_by_code_deis(self, code_deis):
        return self.session.query(model.Commune).filter_by(code_deis=code_deis).first()


class SqlAlchemyDemographicRepository(AbstractDemographicRepository):
    def __init__(self, session):
        super().__init__()
        self.session = session

    def _add(self, demographic):
        self.session.add(demographic)

    def _get_by_patient_id(self, patient_id):
        return self.session.query(model.Demographic).filter_by(patient_id=patient_id).first()


class SqlAlchemySuspectCaseRepository(AbstractSuspectCaseRepository):
    def __init__(self, session):
        super().__init__()
        self.session = session

    def _add(self, suspect_case):
        self.session.add(suspect_case)

    def _get(self, case_id):
        return self.session.get(model.SuspectCase, case_id)

    def _list_by_patient_id(self, patient_id):
        """Store order; no explicit sort."""
        return self.session.query(model.SuspectCase)\
            .filter(model.SuspectCase.patient_id == patient_id)\
            .all()
