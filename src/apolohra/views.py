"""
Views for read operations - separate from command/write path.
Following Cosmic Python CQRS pattern: views return plain dicts built inside
the unit of work, so no detached ORM instance ever leaves the session.

Every view returns an outcome (Found / NotFound / StoreFault) and leaves the
HTTP mapping to the endpoint.
"""
import logging
from dataclasses import fields
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from apolohra.domain import model
from apolohra.domain.outcomes import Found, NotFound, Outcome, StoreFault
from apolohra.service_layer.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)

# Fields of the case shown next to the patient in the composite lookup
CASE_SUMMARY_FIELDS = (
    "id",
    "sample_at",
    "run_medic",
    "symptoms",
    "symptoms_at",
    "sample_type",
    "epivigila",
    "gestation",
    "gestation_week",
    "observation",
)


def as_record(entity) -> Dict[str, Any]:
    """Full column set of a stored record, without transient attributes."""
    return {
        f.name: getattr(entity, f.name)
        for f in fields(entity)
        if f.name != "events"
    }


def to_sospecha(suspect_case: model.SuspectCase) -> Dict[str, Any]:
    """Project a stored case into its wire shape (symptoms as "Si"/"No")."""
    return {
        "id": suspect_case.id,
        "age": suspect_case.age,
        "gender": suspect_case.gender,
        "sample_at": suspect_case.sample_at,
        "epidemiological_week": suspect_case.epidemiological_week,
        "run_medic": suspect_case.run_medic,
        "symptoms": model.symptoms_text(suspect_case.symptoms),
        "pscr_sars_cov_2": suspect_case.pcr_sars_cov_2,
        "pscr_sars_cov_2_at": suspect_case.pcr_sars_cov_2_at,
        "sample_type": suspect_case.sample_type,
        "epivigila": suspect_case.epivigila,
        "gestation": suspect_case.gestation,
        "gestation_week": suspect_case.gestation_week,
        "close_contact": suspect_case.close_contact,
        "functionary": suspect_case.functionary,
        "patient_id": suspect_case.patient_id,
        "establishment_id": suspect_case.establishment_id,
        "user_id": suspect_case.user_id,
        "created_at": suspect_case.created_at,
        "updated_at": suspect_case.updated_at,
        "symptoms_at": suspect_case.symptoms_at,
        "observation": suspect_case.observation,
    }


def to_case_summary(suspect_case: model.SuspectCase) -> Dict[str, Any]:
    sospecha = to_sospecha(suspect_case)
    return {name: sospecha[name] for name in CASE_SUMMARY_FIELDS}


def parse_run(token: str) -> Optional[int]:
    """RUN as an integer when the token is plain ASCII digits, else None."""
    if token.isascii() and token.isdigit():
        return int(token)
    return None


def resolve_patient(search_token: str, uow: AbstractUnitOfWork) -> Optional[model.Patient]:
    """
    Resolve a RUN or alternate identifier (passport, DNI...) to one patient.

    A token made only of ASCII digits is tried as RUN first. When it is not,
    or no patient carries that RUN, the raw token is matched against
    other_identification. Must be called inside an open unit of work.

    Returns:
        The patient, or None when neither key matches
    """
    token = (search_token or "").strip()
    if not token:
        return None

    run = parse_run(token)
    if run is None:
        logger.debug(f"Search token {search_token!r} is not a RUN, trying other identification")
    else:
        patient = uow.patients.get_by_run(run)
        if patient is not None:
            return patient

    return uow.patients.get_by_other_identification(search_token)


def get_user(run: int, uow: AbstractUnitOfWork) -> Outcome[Dict[str, Any]]:
    try:
        with uow:
            user = uow.users.get_by_run(run)
            if user is None:
                return NotFound(what="usuario", key=run)
            return Found(as_record(user))
    except SQLAlchemyError as e:
        logger.error(f"User lookup failed for run {run}: {e}")
        return StoreFault(detail=str(e), error=e)


def get_patient_id(
    run: Optional[str],
    other_id: Optional[str],
    uow: AbstractUnitOfWork,
) -> Outcome[int]:
    """
    Internal id of a patient by RUN, or by other identification when the RUN
    is missing or empty.

    Raises:
        ValueError: if a non-empty RUN is not numeric
    """
    if run:
        run_number = parse_run(run.strip())
        if run_number is None:
            raise ValueError(f"RUN is not numeric: {run!r}")
    elif not other_id:
        return NotFound(what="paciente", key=None)

    try:
        with uow:
            if run:
                patient = uow.patients.get_by_run(run_number)
            else:
                patient = uow.patients.get_by_other_identification(other_id)
            if patient is None:
                return NotFound(what="paciente", key=run or other_id)
            return Found(patient.id)
    except SQLAlchemyError as e:
        logger.error(f"Patient id lookup failed for run={run} other_id={other_id}: {e}")
        return StoreFault(detail=str(e), error=e)


def get_commune(code_deis: str, uow: AbstractUnitOfWork) -> Outcome[Dict[str, Any]]:
    try:
        with uow:
            commune = uow.communes.get_by_code_deis(code_deis)
            if commune is None:
                return NotFound(what="comuna", key=code_deis)
            return Found(as_record(commune))
    except SQLAlchemyError as e:
        logger.error(f"Commune lookup failed for code_deis {code_deis}: {e}")
        return StoreFault(detail=str(e), error=e)


def get_patient(search_token: str, uow: AbstractUnitOfWork) -> Outcome[Dict[str, Any]]:
    try:
        with uow:
            patient = resolve_patient(search_token, uow)
            if patient is None:
                return NotFound(what="paciente", key=search_token)
            return Found(as_record(patient))
    except SQLAlchemyError as e:
        logger.error(f"Patient lookup failed for {search_token!r}: {e}")
        return StoreFault(detail=str(e), error=e)


def list_suspect_cases(search_token: str, uow: AbstractUnitOfWork) -> Outcome[List[Dict[str, Any]]]:
    """All suspect cases of the resolved patient, in store order."""
    try:
        with uow:
            patient = resolve_patient(search_token, uow)
            if patient is None:
                return NotFound(what="paciente", key=search_token)
            suspect_cases = uow.suspect_cases.list_by_patient_id(patient.id)
            return Found([to_sospecha(s) for s in suspect_cases])
    except SQLAlchemyError as e:
        logger.error(f"Suspect case listing failed for {search_token!r}: {e}")
        return StoreFault(detail=str(e), error=e)


def get_demographic(search_token: str, uow: AbstractUnitOfWork) -> Outcome[Optional[Dict[str, Any]]]:
    """
    Demographic record of the resolved patient.

    An unknown patient is NotFound; a known patient without demographic data
    is Found(None).
    """
    try:
        with uow:
            patient = resolve_patient(search_token, uow)
            if patient is None:
                return NotFound(what="paciente", key=search_token)
            demographic = uow.demographics.get_by_patient_id(patient.id)
            return Found(as_record(demographic) if demographic else None)
    except SQLAlchemyError as e:
        logger.error(f"Demographic lookup failed for {search_token!r}: {e}")
        return StoreFault(detail=str(e), error=e)


def get_suspect_case(case_id: int, uow: AbstractUnitOfWork) -> Outcome[Dict[str, Any]]:
    """
    Case, its patient and the patient's demographic data.

    Stops at the first missing link; no partial composite is ever returned.
    """
    try:
        with uow:
            suspect_case = uow.suspect_cases.get(case_id)
            if suspect_case is None:
                return NotFound(what="caso", key=case_id)

            patient = uow.patients.get(suspect_case.patient_id)
            if patient is None:
                return NotFound(what="paciente", key=suspect_case.patient_id)

            demographic = uow.demographics.get_by_patient_id(patient.id)
            if demographic is None:
                return NotFound(what="demografico", key=patient.id)

            return Found({
                "caso": to_case_summary(suspect_case),
                "paciente": as_record(patient),
                "demografico": as_record(demographic),
            })
    except SQLAlchemyError as e:
        logger.error(f"Suspect case lookup failed for case {case_id}: {e}")
        return StoreFault(detail=str(e), error=e)
