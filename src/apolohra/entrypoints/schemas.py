"""Request/Response models of the ApoloHRA API (field names as the monitor uses them)."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class UserRequest(BaseModel):
    run: int


class UserRecord(BaseModel):
    id: Optional[int] = None
    run: Optional[int] = None
    dv: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    laboratory_id: Optional[int] = None
    establishment_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PacienteHRA(BaseModel):
    """Patient key as sent by HRA: the RUN wins over other_Id when present."""
    run: Optional[str] = None
    other_Id: Optional[str] = None

    @field_validator("run", "other_Id", mode="before")
    @classmethod
    def accept_numbers(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class PatientRecord(BaseModel):
    id: Optional[int] = None
    run: Optional[int] = None
    dv: Optional[str] = None
    other_identification: Optional[str] = None
    name: Optional[str] = None
    fathers_family: Optional[str] = None
    mothers_family: Optional[str] = None
    gender: Optional[str] = None
    birthday: Optional[date] = None
    status: Optional[str] = None
    deceased_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "run": 11111111,
                "dv": "1",
                "name": "Javier Andrés",
                "fathers_family": "Mandiola",
                "mothers_family": "Ovalle",
                "gender": "male",
                "birthday": "1975-04-03",
                "status": "",
                "created_at": "2020-10-28T12:00:00",
                "updated_at": "2020-10-28T12:00:00"
            }
        }
    }


class CommuneRecord(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    code_deis: Optional[str] = None
    region_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DemographicRecord(BaseModel):
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
    patient_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "street_type": "Calle",
                "address": "Avelino Contardo",
                "number": "1092",
                "department": "104",
                "nationality": "Chile",
                "commune_id": 12,
                "region_id": 2,
                "latitude": -23.62272150,
                "longitude": -70.38984400,
                "telephone": "552244405",
                "email": "test@mail.cl",
                "patient_id": 1,
                "created_at": "2020-11-28T12:00:00",
                "updated_at": "2020-11-28T12:00:00"
            }
        }
    }


class Sospecha(BaseModel):
    """Suspect case in wire form: symptoms as "Si"/"No", PCR fields as pscr_*."""
    id: Optional[int] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    sample_at: Optional[datetime] = None
    epidemiological_week: Optional[int] = None
    run_medic: Optional[str] = None
    symptoms: Optional[str] = None
    symptoms_at: Optional[datetime] = None
    pscr_sars_cov_2: Optional[str] = None
    pscr_sars_cov_2_at: Optional[datetime] = None
    sample_type: Optional[str] = None
    epivigila: Optional[int] = None
    gestation: Optional[bool] = None
    gestation_week: Optional[int] = None
    close_contact: Optional[bool] = None
    functionary: Optional[bool] = None
    observation: Optional[str] = None
    patient_id: Optional[int] = None
    laboratory_id: Optional[int] = None
    establishment_id: Optional[int] = None
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("run_medic", mode="before")
    @classmethod
    def accept_numeric_run(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class NewSospecha(Sospecha):
    """Body of addSospecha; a case always belongs to a patient."""
    patient_id: int

    model_config = {
        "json_schema_extra": {
            "example": {
                "gender": "male",
                "age": 45,
                "sample_at": "2020-10-27T08:30:00",
                "epidemiological_week": 7,
                "run_medic": "22222222",
                "symptoms": "Si",
                "symptoms_at": "2020-10-25T00:00:00",
                "pscr_sars_cov_2": "pending",
                "sample_type": "TÓRULAS NASOFARÍNGEAS",
                "epivigila": 1024,
                "gestation": False,
                "gestation_week": None,
                "close_contact": True,
                "functionary": True,
                "patient_id": 1,
                "laboratory_id": 3,
                "establishment_id": 3799,
                "user_id": 1,
                "created_at": "2020-10-28T09:00:00",
                "updated_at": "2020-10-28T09:00:00"
            }
        }
    }


class ReceptionRequest(BaseModel):
    id: int
    reception_at: Optional[datetime] = None
    receptor_id: Optional[int] = None
    laboratory_id: Optional[int] = None
    updated_at: Optional[datetime] = None


class ResultRequest(BaseModel):
    id: int
    pscr_sars_cov_2_at: Optional[datetime] = None
    pscr_sars_cov_2: Optional[str] = None
    validator_id: Optional[int] = None
    updated_at: Optional[datetime] = None


class CaseSummary(BaseModel):
    id: int
    sample_at: Optional[datetime] = None
    run_medic: Optional[str] = None
    symptoms: str
    symptoms_at: Optional[datetime] = None
    sample_type: Optional[str] = None
    epivigila: Optional[int] = None
    gestation: Optional[bool] = None
    gestation_week: Optional[int] = None
    observation: Optional[str] = None


class CasoResponse(BaseModel):
    """Suspect case together with its patient and the patient's demographic data."""
    caso: CaseSummary
    paciente: PatientRecord
    demografico: DemographicRecord
