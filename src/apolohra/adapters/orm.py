import logging
from sqlalchemy import (
    Table,
    Column,
    BigInteger,
    Integer,
    String,
    Text,
    Boolean,
    Date,
    DateTime,
    Float,
    event,
)
from sqlalchemy.orm import registry
from apolohra.domain import model

logger = logging.getLogger(__name__)

# SQLAlchemy 2.0 pattern: use registry
mapper_registry = registry()
metadata = mapper_registry.metadata

# BigInteger ids on MySQL, plain INTEGER on SQLite so autoincrement still works
IdType = BigInteger().with_variant(Integer, "sqlite")

# Tables mirror the Esmeralda monitor schema; only the columns this API reads
# or writes are declared.
users = Table(
    "users",
    metadata,
    Column("id", IdType, primary_key=True, autoincrement=True),
    Column("run", Integer, index=True),
    Column("dv", String(1)),
    Column("name", String(255)),
    Column("email", String(255)),
    Column("laboratory_id", IdType),
    Column("establishment_id", IdType),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
)

patients = Table(
    "patients",
    metadata,
    Column("id", IdType, primary_key=True, autoincrement=True),
    Column("run", Integer, index=True),
    Column("dv", String(1)),
    Column("other_identification", String(255), index=True),
    Column("name", String(255)),
    Column("fathers_family", String(255)),
    Column("mothers_family", String(255)),
    Column("gender", String(255)),
    Column("birthday", Date),
    Column("status", String(255)),
    Column("deceased_at", DateTime),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
)

communes = Table(
    "communes",
    metadata,
    Column("id", IdType, primary_key=True, autoincrement=True),
    Column("name", String(255)),
    Column("code_deis", String(255), index=True),
    Column("region_id", IdType),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
)

demographics = Table(
    "demographics",
    metadata,
    Column("id", IdType, primary_key=True, autoincrement=True),
    Column("street_type", String(255)),
    Column("address", String(255)),
    Column("number", String(255)),
    Column("department", String(255)),
    Column("city", String(255)),
    Column("suburb", String(255)),
    Column("commune_id", IdType),
    Column("region_id", IdType),
    Column("nationality", String(255)),
    Column("latitude", Float),
    Column("longitude", Float),
    Column("telephone", String(255)),
    Column("telephone2", String(255)),
    Column("email", String(255)),
    Column("patient_id", IdType, nullable=False, index=True),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
)

suspect_cases = Table(
    "suspect_cases",
    metadata,
    Column("id", IdType, primary_key=True, autoincrement=True),
    Column("age", Integer),
    Column("gender", String(255)),
    Column("sample_at", DateTime),
    Column("epidemiological_week", Integer),
    Column("run_medic", String(255)),
    Column("symptoms", Boolean),
    Column("symptoms_at", DateTime),
    Column("reception_at", DateTime),
    Column("receptor_id", IdType),
    Column("pcr_sars_cov_2_at", DateTime),
    Column("pcr_sars_cov_2", String(255)),
    Column("sample_type", String(255)),
    Column("validator_id", IdType),
    Column("epivigila", Integer),
    Column("gestation", Boolean),
    Column("gestation_week", Integer),
    Column("close_contact", Boolean),
    Column("functionary", Boolean),
    Column("observation", Text),
    Column("laboratory_id", IdType),
    Column("establishment_id", IdType),
    Column("user_id", IdType),
    Column("patient_id", IdType, nullable=False, index=True),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
)


def start_mappers():
    logger.info("Starting mappers")
    mapper_registry.map_imperatively(model.User, users)
    mapper_registry.map_imperatively(model.Patient, patients)
    mapper_registry.map_imperatively(model.Commune, communes)
    mapper_registry.map_imperatively(model.Demographic, demographics)
    mapper_registry.map_imperatively(model.SuspectCase, suspect_cases)


@event.listens_for(model.SuspectCase, "load")
def receive_load(suspect_case, _):
    suspect_case.events = []
