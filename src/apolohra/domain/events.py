"""Domain events raised along the suspect case lifecycle."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Event:
    """Base class for all domain events."""
    pass


@dataclass
class SuspectCaseCreated(Event):
    """Event raised when a suspect case has been stored."""
    case_id: int
    patient_id: int
    pcr_sars_cov_2: Optional[str]


@dataclass
class SampleReceived(Event):
    """Event raised when the laboratory confirms sample reception."""
    case_id: int
    laboratory_id: Optional[int]
    reception_at: Optional[datetime]


@dataclass
class ResultDelivered(Event):
    """Event raised when a PCR result is attached to a case."""
    case_id: int
    pcr_sars_cov_2: Optional[str]
    validator_id: Optional[int]
