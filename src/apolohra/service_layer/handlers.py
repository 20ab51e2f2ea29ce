import logging

from sqlalchemy.exc import SQLAlchemyError

from apolohra.domain import commands, events, model
from apolohra.domain.outcomes import Found, NotFound, Outcome, StoreFault
from apolohra.service_layer.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("apolohra.audit")


def discard_events(uow: AbstractUnitOfWork):
    """Drop events raised by a change that was never committed."""
    list(uow.collect_new_events())


def add_patient(command: commands.AddPatient, uow: AbstractUnitOfWork) -> Outcome[int]:
    """
    Register a new patient.

    Returns:
        Found(patient id assigned by the store) or StoreFault
    """
    patient = command.patient
    logger.info(f"Adding patient run={patient.run} other_identification={patient.other_identification}")

    try:
        with uow:
            uow.patients.add(patient)
            uow.commit()
            patient_id = patient.id
    except SQLAlchemyError as e:
        logger.error(f"Patient not saved, run={patient.run}: {e}")
        return StoreFault(detail=str(e), error=e)

    logger.info(f"Added patient {patient_id}")
    return Found(patient_id)


def add_demographic(command: commands.AddDemographic, uow: AbstractUnitOfWork) -> Outcome[int]:
    demographic = command.demographic
    logger.info(f"Adding demographic data for patient {demographic.patient_id}")

    try:
        with uow:
            uow.demographics.add(demographic)
            uow.commit()
            demographic_id = demographic.id
    except SQLAlchemyError as e:
        logger.error(f"Demographic not saved for patient {demographic.patient_id}: {e}")
        return StoreFault(detail=str(e), error=e)

    return Found(demographic_id)


def add_suspect_case(command: commands.AddSuspectCase, uow: AbstractUnitOfWork) -> Outcome[int]:
    """
    Open a suspect case from its wire-format request.

    Only the exact text "Si" in ``symptoms`` is stored as true; anything
    else, including a missing value, is stored as false.
    """
    logger.info(f"Adding suspect case for patient {command.patient_id}")

    suspect_case = model.SuspectCase(
        patient_id=command.patient_id,
        age=command.age,
        gender=command.gender,
        sample_at=command.sample_at,
        epidemiological_week=command.epidemiological_week,
        run_medic=command.run_medic,
        symptoms=model.symptoms_flag(command.symptoms),
        symptoms_at=command.symptoms_at,
        pcr_sars_cov_2=command.pcr_sars_cov_2,
        sample_type=command.sample_type,
        epivigila=command.epivigila,
        gestation=command.gestation,
        gestation_week=command.gestation_week,
        close_contact=command.close_contact,
        functionary=command.functionary,
        observation=command.observation,
        laboratory_id=command.laboratory_id,
        establishment_id=command.establishment_id,
        user_id=command.user_id,
        created_at=command.created_at,
        updated_at=command.updated_at,
    )

    try:
        with uow:
            uow.suspect_cases.add(suspect_case)
            uow.commit()
            # id is assigned on commit, so the creation event is raised afterwards
            suspect_case.create()
            case_id = suspect_case.id
    except SQLAlchemyError as e:
        logger.error(f"Suspect case not saved for patient {command.patient_id}: {e}")
        return StoreFault(detail=str(e), error=e)

    return Found(case_id)


def receive_sample(command: commands.ReceiveSample, uow: AbstractUnitOfWork) -> Outcome[int]:
    """Register sample reception. A missing case is reported, never created."""
    logger.info(f"Registering sample reception for case {command.case_id}")

    try:
        with uow:
            suspect_case = uow.suspect_cases.get(command.case_id)
            if suspect_case is None:
                logger.warning(f"Suspect case {command.case_id} not found, reception not saved")
                return NotFound(what="caso", key=command.case_id)

            suspect_case.receive_sample(
                reception_at=command.reception_at,
                receptor_id=command.receptor_id,
                laboratory_id=command.laboratory_id,
                updated_at=command.updated_at,
            )
            uow.commit()
    except SQLAlchemyError as e:
        logger.error(f"Reception not saved for case {command.case_id}: {e}")
        discard_events(uow)
        return StoreFault(detail=str(e), error=e)

    return Found(command.case_id)


def deliver_result(command: commands.DeliverResult, uow: AbstractUnitOfWork) -> Outcome[int]:
    """Register the PCR result. A missing case is reported, never created."""
    logger.info(f"Registering PCR result for case {command.case_id}")

    try:
        with uow:
            suspect_case = uow.suspect_cases.get(command.case_id)
            if suspect_case is None:
                logger.warning(f"Suspect case {command.case_id} not found, result not saved")
                return NotFound(what="caso", key=command.case_id)

            suspect_case.deliver_result(
                pcr_sars_cov_2_at=command.pcr_sars_cov_2_at,
                pcr_sars_cov_2=command.pcr_sars_cov_2,
                validator_id=command.validator_id,
                updated_at=command.updated_at,
            )
            uow.commit()
    except SQLAlchemyError as e:
        logger.error(f"Result not saved for case {command.case_id}: {e}")
        discard_events(uow)
        return StoreFault(detail=str(e), error=e)

    return Found(command.case_id)


def log_suspect_case_created(event: events.SuspectCaseCreated, uow: AbstractUnitOfWork):
    audit_logger.info(
        f"Suspect case {event.case_id} opened for patient {event.patient_id} "
        f"(pcr={event.pcr_sars_cov_2})"
    )


def log_sample_received(event: events.SampleReceived, uow: AbstractUnitOfWork):
    audit_logger.info(
        f"Sample of case {event.case_id} received by laboratory {event.laboratory_id} "
        f"at {event.reception_at}"
    )


def log_result_delivered(event: events.ResultDelivered, uow: AbstractUnitOfWork):
    audit_logger.info(
        f"Result {event.pcr_sars_cov_2} delivered for case {event.case_id} "
        f"(validator {event.validator_id})"
    )
