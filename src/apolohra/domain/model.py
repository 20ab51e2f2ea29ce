from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from apolohra.domain import events

SYMPTOMS_YES = "Si"
SYMPTOMS_NO = "No"


def symptoms_flag(symptoms: Optional[str]) -> bool:
    """Only the exact text "Si" means the patient reported symptoms."""
    return symptoms == SYMPTOMS_YES


def symptoms_text(flag: Optional[bool]) -> str:
    return SYMPTOMS_YES if flag else SYMPTOMS_NO


@dataclass(eq=False)
class User:
    run: int
    id: Optional[int] = None
    dv: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    laboratory_id: Optional[int] = None
    establishment_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(eq=False)
class Patient:
    id: Optional[int] = None
    run: Optional[int] = None          # RUN without check digit
    dv: Optional[str] = None
    other_identification: Optional[str] = None   # passport, DNI, ...
    name: Optional[str] = None
    fathers_family: Optional[str] = None
    mothers_family: Optional[str] = None
    gender: Optional[str] = None       # 'male' | 'female' | 'other' | 'unknown'
    birthday: Optional[date] = None
    status: Optional[str] = None
    deceased_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(eq=False)
class Commune:
    code_deis: str
    id: Optional[int] = None
    name: Optional[str] = None
    region_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(eq=False)
class Demographic:
    patient_id: int
    id: Optional[int] = None
    street_type: Optional[str] = None
    address: Optional[str] = None
    number: Optional[str] = None
    department: Optional[str] = None
    city: Optional[str] = None
    suburb: Optional[str] = None
    commune_id: Optional[int] = None
    region_id: Optional[int] = None
    nationality: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    telephone: Optional[str] = None
    telephone2: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(eq=False)
class SuspectCase:
    patient_id: int
    id: Optional[int] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    sample_at: Optional[datetime] = None
    epidemiological_week: Optional[int] = None
    run_medic: Optional[str] = None
    symptoms: Optional[bool] = None
    symptoms_at: Optional[datetime] = None
    reception_at: Optional[datetime] = None
    receptor_id: Optional[int] = None
    pcr_sars_cov_2_at: Optional[datetime] = None
    pcr_sars_cov_2: Optional[str] = None   # 'pending' | 'negative' | 'positive' | ...
    sample_type: Optional[str] = None
    validator_id: Optional[int] = None
    epivigila: Optional[int] = None
    gestation: Optional[bool] = None
    gestation_week: Optional[int] = None
    close_contact: Optional[bool] = None
    functionary: Optional[bool] = None
    observation: Optional[str] = None
    laboratory_id: Optional[int] = None
    establishment_id: Optional[int] = None
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    events: List = field(default_factory=list, compare=False, repr=False)

    def create(self) -> None:
        """Mark the case as registered. Call once the store has assigned the id."""
        self.events.append(
            events.SuspectCaseCreated(
                case_id=self.id,
                patient_id=self.patient_id,
                pcr_sars_cov_2=self.pcr_sars_cov_2,
            )
        )

    def receive_sample(
        self,
        reception_at: Optional[datetime],
        receptor_id: Optional[int],
        laboratory_id: Optional[int],
        updated_at: Optional[datetime],
    ) -> None:
        """Sample reception touches only the reception fields and updated_at."""
        self.reception_at = reception_at
        self.receptor_id = receptor_id
        self.laboratory_id = laboratory_id
        self.updated_at = updated_at
        self.events.append(
            events.SampleReceived(
                case_id=self.id,
                laboratory_id=laboratory_id,
                reception_at=reception_at,
            )
        )

    def deliver_result(
        self,
        pcr_sars_cov_2_at: Optional[datetime],
        pcr_sars_cov_2: Optional[str],
        validator_id: Optional[int],
        updated_at: Optional[datetime],
    ) -> None:
        """Result delivery touches only the PCR fields, the validator and updated_at."""
        self.pcr_sars_cov_2_at = pcr_sars_cov_2_at
        self.pcr_sars_cov_2 = pcr_sars_cov_2
        self.validator_id = validator_id
        self.updated_at = updated_at
        self.events.append(
            events.ResultDelivered(
                case_id=self.id,
                pcr_sars_cov_2=pcr_sars_cov_2,
                validator_id=validator_id,
            )
        )
