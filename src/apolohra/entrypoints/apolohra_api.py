"""
ApoloHRA API Entrypoint - Thin API with Command Dispatch

Exposes the Esmeralda monitor tables (users, patients, communes, demographics,
suspect_cases) to the HRA hospital system under the /apolohra base path.
Reads go through views, writes through the message bus; both hand back an
outcome that each endpoint maps onto its own status code.
"""
import logging
import os
from datetime import datetime, timezone
from typing import List, Optional

import uvicorn
from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse

from config import ApiConfig
from apolohra import views
from apolohra.adapters import orm
from apolohra.domain import commands, model
from apolohra.domain.outcomes import NotFound, StoreFault
from apolohra.entrypoints import schemas
from apolohra.entrypoints.auth import require_bearer_token
from apolohra.service_layer import messagebus, unit_of_work

log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

GENERIC_ERROR = "Error.... Intente más tarde."
NOT_SAVED = "No se guardo correctamente...."

public_router = APIRouter(prefix="/apolohra")
router = APIRouter(prefix="/apolohra", dependencies=[Depends(require_bearer_token)])


def get_uow(request: Request) -> unit_of_work.AbstractUnitOfWork:
    """One unit of work (one session) per request."""
    return unit_of_work.SqlAlchemyUnitOfWork(request.app.state.session_factory)


def bad_request(request: Request, message: str, fault: Optional[StoreFault] = None) -> PlainTextResponse:
    """400 with a text body; the store error is appended only if the deployment allows it."""
    text = message
    if fault is not None and request.app.state.config.expose_error_detail:
        text = f"{message} Error: {fault.detail}"
    return PlainTextResponse(text, status_code=400)


def dispatch(command: commands.Command, uow: unit_of_work.AbstractUnitOfWork):
    [outcome] = messagebus.handle(command, uow)
    return outcome


# ---------- Endpoints ----------

@public_router.get("/echoping", response_model=bool, summary="Liveness check")
def echo_ping():
    """Answers true when the service is up. No authentication required."""
    return True


@router.post("/user", response_model=Optional[schemas.UserRecord], summary="Get monitor user by RUN")
def get_user(users: schemas.UserRequest, request: Request,
             uow: unit_of_work.AbstractUnitOfWork = Depends(get_uow)):
    outcome = views.get_user(users.run, uow)
    if isinstance(outcome, StoreFault):
        logger.error(f"User not found, user: {users}")
        return bad_request(request, GENERIC_ERROR, outcome)
    if isinstance(outcome, NotFound):
        return None
    return outcome.value


@router.post("/getPatient_ID", response_model=Optional[int], summary="Get internal patient id")
def get_patient_id(pa: schemas.PacienteHRA, request: Request,
                   uow: unit_of_work.AbstractUnitOfWork = Depends(get_uow)):
    """
    Internal id of a patient, looked up by RUN or, when the RUN is empty,
    by other identification. Unknown patients answer null.
    """
    try:
        outcome = views.get_patient_id(pa.run, pa.other_Id, uow)
    except ValueError as e:
        logger.error(f"Patient not retrieved, malformed run in {pa}: {e}")
        return bad_request(request, f"{GENERIC_ERROR} RUN inválido: {pa.run}")

    if isinstance(outcome, StoreFault):
        logger.error(f"Patient not retrieved, patient: {pa}")
        return bad_request(request, GENERIC_ERROR, outcome)
    if isinstance(outcome, NotFound):
        return None
    return outcome.value


@router.post("/AddPatients", response_model=Optional[int], summary="Add a patient to the monitor")
def add_patients(patients: schemas.PatientRecord, request: Request,
                 uow: unit_of_work.AbstractUnitOfWork = Depends(get_uow)):
    """Returns the internal id of the created patient."""
    patient = model.Patient(**patients.model_dump(exclude={"id"}))
    outcome = dispatch(commands.AddPatient(patient=patient), uow)
    if isinstance(outcome, StoreFault):
        logger.error(f"Patient not saved, patient: {patients}")
        return bad_request(request, GENERIC_ERROR, outcome)
    return outcome.value


@router.post("/getComuna", response_model=Optional[schemas.CommuneRecord], summary="Get commune by DEIS code")
def get_comuna(code_deis: str = Body(..., examples=["2101"]),
               uow: unit_of_work.AbstractUnitOfWork = Depends(get_uow)):
    """A valid DEIS code with no commune answers null, never an error."""
    outcome = views.get_commune(code_deis, uow)
    if isinstance(outcome, StoreFault):
        logger.error(f"Commune lookup failed, code_deis: {code_deis}")
        # no store detail on this route, whatever the deployment setting
        return PlainTextResponse(GENERIC_ERROR, status_code=400)
    if isinstance(outcome, NotFound):
        return None
    return outcome.value


@router.post("/AddDemograph", response_model=str, summary="Add demographic data to a patient")
def add_demograph(demographics: schemas.DemographicRecord, request: Request,
                  uow: unit_of_work.AbstractUnitOfWork = Depends(get_uow)):
    demographic = model.Demographic(**demographics.model_dump(exclude={"id"}))
    outcome = dispatch(commands.AddDemographic(demographic=demographic), uow)
    if isinstance(outcome, StoreFault):
        logger.error(f"Demographic not added, demographics: {demographics}")
        return bad_request(request, "Error.....Intente más Tarde", outcome)
    return "Se Guardo Correctamente la Demografía"


@router.post("/addSospecha", response_model=Optional[int], summary="Open a COVID-19 suspect case")
def add_sospecha(sospecha: schemas.NewSospecha, request: Request,
                 uow: unit_of_work.AbstractUnitOfWork = Depends(get_uow)):
    """Returns the number of the new suspect case."""
    command = commands.AddSuspectCase(
        patient_id=sospecha.patient_id,
        age=sospecha.age,
        gender=sospecha.gender,
        sample_at=sospecha.sample_at,
        epidemiological_week=sospecha.epidemiological_week,
        run_medic=sospecha.run_medic,
        symptoms=sospecha.symptoms,
        symptoms_at=sospecha.symptoms_at,
        pcr_sars_cov_2=sospecha.pscr_sars_cov_2,
        sample_type=sospecha.sample_type,
        epivigila=sospecha.epivigila,
        gestation=sospecha.gestation,
        gestation_week=sospecha.gestation_week,
        close_contact=sospecha.close_contact,
        functionary=sospecha.functionary,
        observation=sospecha.observation,
        laboratory_id=sospecha.laboratory_id,
        establishment_id=sospecha.establishment_id,
        user_id=sospecha.user_id,
        created_at=sospecha.created_at,
        updated_at=sospecha.updated_at,
    )
    outcome = dispatch(command, uow)
    if isinstance(outcome, StoreFault):
        logger.error(f"Suspect case not added, sospecha: {sospecha}")
        return bad_request(request, NOT_SAVED, outcome)
    return outcome.value


@router.post("/recepcionMuestra", response_model=str, summary="Register sample reception")
def recepcion_muestra(sospecha: schemas.ReceptionRequest,
                      uow: unit_of_work.AbstractUnitOfWork = Depends(get_uow)):
    command = commands.ReceiveSample(
        case_id=sospecha.id,
        reception_at=sospecha.reception_at,
        receptor_id=sospecha.receptor_id,
        laboratory_id=sospecha.laboratory_id,
        updated_at=sospecha.updated_at,
    )
    outcome = dispatch(command, uow)
    if isinstance(outcome, (NotFound, StoreFault)):
        logger.error(f"Suspect case not updated, sospecha: {sospecha}")
        return PlainTextResponse(NOT_SAVED, status_code=400)
    return "Se Guardo correctamente..."


@router.post("/resultado", response_model=str, summary="Register PCR result")
def resultado(sospecha: schemas.ResultRequest,
              uow: unit_of_work.AbstractUnitOfWork = Depends(get_uow)):
    """An unknown case answers 404 with the request echoed back."""
    command = commands.DeliverResult(
        case_id=sospecha.id,
        pcr_sars_cov_2_at=sospecha.pscr_sars_cov_2_at,
        pcr_sars_cov_2=sospecha.pscr_sars_cov_2,
        validator_id=sospecha.validator_id,
        updated_at=sospecha.updated_at,
    )
    outcome = dispatch(command, uow)
    if isinstance(outcome, NotFound):
        return JSONResponse(status_code=404, content=jsonable_encoder(sospecha))
    if isinstance(outcome, StoreFault):
        logger.error(f"Result not updated, sospecha: {sospecha}")
        return PlainTextResponse(NOT_SAVED, status_code=400)
    return "Exito... se actualizo los resultado.."


@router.get("/getPatients", response_model=Optional[schemas.PatientRecord], summary="Get patient by RUN or other id")
def get_patients(request: Request, buscador: str = Body(..., examples=["11111111"]),
                 uow: unit_of_work.AbstractUnitOfWork = Depends(get_uow)):
    outcome = views.get_patient(buscador, uow)
    if isinstance(outcome, StoreFault):
        logger.error(f"Cannot retrieve patient: {buscador}")
        return bad_request(request, "No se Encontro Paciente.... problema", outcome)
    if isinstance(outcome, NotFound):
        return None
    return outcome.value


@router.get(
    "/getSospecha",
    response_model=List[schemas.Sospecha],
    response_model_exclude_unset=True,
    summary="List suspect cases of a patient",
)
def get_sospecha(request: Request, buscador: str = Body(..., examples=["11111111"]),
                 uow: unit_of_work.AbstractUnitOfWork = Depends(get_uow)):
    """``buscador`` is the RUN without check digit or another identifier (passport, ...)."""
    outcome = views.list_suspect_cases(buscador, uow)
    if isinstance(outcome, NotFound):
        return PlainTextResponse("No se Encontro sospecha.... paciente no existe", status_code=400)
    if isinstance(outcome, StoreFault):
        logger.error(f"Cannot retrieve suspect cases of patient: {buscador}")
        return bad_request(request, "No se Encontro sospecha.... problema", outcome)
    return outcome.value


@router.get("/getDemograph", response_model=Optional[schemas.DemographicRecord], summary="Get demographic data of a patient")
def get_demograph(request: Request, buscador: str = Body(..., examples=["11111111"]),
                  uow: unit_of_work.AbstractUnitOfWork = Depends(get_uow)):
    outcome = views.get_demographic(buscador, uow)
    if isinstance(outcome, NotFound):
        return PlainTextResponse("No se Encontro demografico.... paciente no existe", status_code=400)
    if isinstance(outcome, StoreFault):
        logger.error(f"Cannot retrieve demographic data of patient: {buscador}")
        return bad_request(request, "No se Encontro demografico.... problema", outcome)
    return outcome.value


@router.post("/getSuspectCase", response_model=schemas.CasoResponse, summary="Get suspect case with patient data")
def get_suspect_case(request: Request, id_case: int = Body(..., examples=[1]),
                     uow: unit_of_work.AbstractUnitOfWork = Depends(get_uow)):
    outcome = views.get_suspect_case(id_case, uow)
    if isinstance(outcome, NotFound):
        return PlainTextResponse(f"No existe el {outcome.what}", status_code=400)
    if isinstance(outcome, StoreFault):
        return bad_request(request, "Computer system error.", outcome)
    return outcome.value


def create_app(api_config: Optional[ApiConfig] = None, session_factory=None) -> FastAPI:
    """
    Build the API around one configuration object.

    When no session factory is given, the engine is created and the ORM
    mappers started on startup.
    """
    api_config = api_config or ApiConfig.from_env()

    app = FastAPI(
        title="ApoloHRA API",
        description="Patient, demographic and suspect case records of the Esmeralda monitor for HRA",
        version="1.0.0"
    )
    app.state.config = api_config
    app.state.session_factory = session_factory

    @app.on_event("startup")
    async def startup_event():
        if app.state.session_factory is None:
            orm.start_mappers()
            app.state.session_factory = unit_of_work.make_session_factory(api_config.database)
            logger.info("✓ ApoloHRA database initialized")
        if not api_config.auth.secret:
            logger.warning("APOLOHRA_JWT_SECRET is not set, every bearer token will be rejected")

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        db_ok = unit_of_work.check_connection(app.state.session_factory)
        return {
            "status": "healthy" if db_ok else "degraded",
            "database": "healthy" if db_ok else "unhealthy",
            "service": "apolohra-api",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    app.include_router(public_router)
    app.include_router(router)
    return app


app = create_app()


def main():
    uvicorn.run(
        "apolohra.entrypoints.apolohra_api:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8000")),
        log_level=log_level.lower(),
    )


if __name__ == "__main__":
    main()
