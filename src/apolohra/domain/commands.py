"""Commands for the ApoloHRA write path."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from apolohra.domain import model


@dataclass
class Command:
    """Base class for all commands."""
    pass


@dataclass
class AddPatient(Command):
    """Command to register a patient not yet known to the monitor."""
    patient: model.Patient


@dataclass
class AddDemographic(Command):
    """Command to attach residence and contact data to a patient."""
    demographic: model.Demographic


@dataclass
class AddSuspectCase(Command):
    """Command to open a new COVID-19 suspect case.

    ``symptoms`` arrives in its wire form ("Si" / anything else).
    """
    patient_id: int
    age: Optional[int] = None
    gender: Optional[str] = None
    sample_at: Optional[datetime] = None
    epidemiological_week: Optional[int] = None
    run_medic: Optional[str] = None
    symptoms: Optional[str] = None
    symptoms_at: Optional[datetime] = None
    pcr_sars_cov_2: Optional[str] = None
    sample_type: Optional[str] = None
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


@dataclass
class ReceiveSample(Command):
    """Command to register that the laboratory received the case sample."""
    case_id: int
    reception_at: Optional[datetime]
    receptor_id: Optional[int]
    laboratory_id: Optional[int]
    updated_at: Optional[datetime]


@dataclass
class DeliverResult(Command):
    """Command to register the PCR result of a case."""
    case_id: int
    pcr_sars_cov_2_at: Optional[datetime]
    pcr_sars_cov_2: Optional[str]
    validator_id: Optional[int]
    updated_at: Optional[datetime]
