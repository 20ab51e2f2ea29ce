"""Unit tests for the read path (patient resolution and projections) on a fake unit of work."""
from datetime import date, datetime

import pytest

from apolohra import views
from apolohra.domain import model
from apolohra.domain.outcomes import Found, NotFound, StoreFault


@pytest.fixture
def seeded_uow(fake_uow):
    fake_uow.patients.add(model.Patient(
        run=11111111, dv="1", other_identification="AB123456",
        name="Javier Andrés", birthday=date(1975, 4, 3),
    ))
    fake_uow.patients.add(model.Patient(run=None, other_identification="P-998877", name="Ana"))
    fake_uow.patients.add(model.Patient(run=None, other_identification="22222222", name="Luis"))
    fake_uow.demographics.add(model.Demographic(patient_id=1, address="Avelino Contardo", number="1092"))
    fake_uow.suspect_cases.add(model.SuspectCase(
        patient_id=1, age=45, symptoms=True, pcr_sars_cov_2="pending",
        sample_at=datetime(2020, 10, 27, 8, 30), run_medic="22222222", epivigila=1024,
    ))
    fake_uow.suspect_cases.add(model.SuspectCase(patient_id=1, symptoms=None, pcr_sars_cov_2="negative"))
    fake_uow.suspect_cases.add(model.SuspectCase(patient_id=2, symptoms=False))
    return fake_uow


class TestResolvePatient:

    def test_run_wins_over_other_identification(self, seeded_uow):
        patient = views.resolve_patient("11111111", seeded_uow)

        assert patient.name == "Javier Andrés"

    def test_patient_without_run_is_found_by_other_identification(self, seeded_uow):
        patient = views.resolve_patient("P-998877", seeded_uow)

        assert patient.name == "Ana"

    def test_numeric_token_without_run_match_falls_back(self, seeded_uow):
        patient = views.resolve_patient("22222222", seeded_uow)

        assert patient.name == "Luis"

    def test_non_numeric_token_is_not_an_error(self, seeded_uow):
        assert views.resolve_patient("12.345.678-9", seeded_uow) is None

    def test_token_matching_nothing_is_none(self, seeded_uow):
        assert views.resolve_patient("99999999", seeded_uow) is None

    @pytest.mark.parametrize("token", ["11_111_111", "+11111111", "１１１１１１１１"])
    def test_only_plain_ascii_digits_are_tried_as_run(self, seeded_uow, token):
        assert views.resolve_patient(token, seeded_uow) is None

    def test_empty_token_matches_nobody(self, seeded_uow):
        seeded_uow.patients.add(model.Patient(run=None, other_identification=None, name="Sin id"))

        assert views.resolve_patient("", seeded_uow) is None
        assert views.resolve_patient(None, seeded_uow) is None


def test_get_user_found_and_missing(fake_uow):
    fake_uow.users.put(model.User(run=12345678, id=3, name="Tecnólogo"))

    found = views.get_user(12345678, fake_uow)
    missing = views.get_user(1, fake_uow)

    assert isinstance(found, Found)
    assert found.value["name"] == "Tecnólogo"
    assert isinstance(missing, NotFound)


class TestGetPatientId:

    def test_by_run(self, seeded_uow):
        assert views.get_patient_id("11111111", None, seeded_uow) == Found(1)

    def test_empty_run_uses_other_identification(self, seeded_uow):
        assert views.get_patient_id("", "P-998877", seeded_uow) == Found(2)

    def test_unknown_patient(self, seeded_uow):
        assert isinstance(views.get_patient_id(None, "nobody", seeded_uow), NotFound)

    @pytest.mark.parametrize("run, other_id", [(None, None), ("", ""), ("", None)])
    def test_no_key_finds_nobody(self, seeded_uow, run, other_id):
        seeded_uow.patients.add(model.Patient(run=None, other_identification=None, name="Sin id"))

        assert views.get_patient_id(run, other_id, seeded_uow) == NotFound(what="paciente", key=None)

    def test_malformed_run_raises(self, seeded_uow):
        with pytest.raises(ValueError):
            views.get_patient_id("12.345.678", None, seeded_uow)


def test_commune_lookup(fake_uow):
    fake_uow.communes.put(model.Commune(code_deis="2101", id=12, name="Antofagasta", region_id=2))

    assert views.get_commune("2101", fake_uow).value["name"] == "Antofagasta"
    assert isinstance(views.get_commune("9999", fake_uow), NotFound)


def test_patient_record_has_no_transient_fields(seeded_uow):
    outcome = views.get_patient("11111111", seeded_uow)

    assert outcome.value["birthday"] == date(1975, 4, 3)
    assert "events" not in outcome.value


class TestListSuspectCases:

    def test_lists_only_cases_of_the_patient_in_wire_shape(self, seeded_uow):
        outcome = views.list_suspect_cases("11111111", seeded_uow)

        assert isinstance(outcome, Found)
        assert [c["symptoms"] for c in outcome.value] == ["Si", "No"]
        assert [c["pscr_sars_cov_2"] for c in outcome.value] == ["pending", "negative"]
        assert all(c["patient_id"] == 1 for c in outcome.value)
        assert "pcr_sars_cov_2" not in outcome.value[0]

    def test_unknown_patient(self, seeded_uow):
        assert isinstance(views.list_suspect_cases("nobody", seeded_uow), NotFound)


class TestGetDemographic:

    def test_found(self, seeded_uow):
        outcome = views.get_demographic("AB123456", seeded_uow)

        assert outcome.value["address"] == "Avelino Contardo"

    def test_patient_without_demographic_is_found_none(self, seeded_uow):
        assert views.get_demographic("P-998877", seeded_uow) == Found(None)

    def test_unknown_patient(self, seeded_uow):
        assert isinstance(views.get_demographic("nobody", seeded_uow), NotFound)


class TestGetSuspectCase:

    def test_composite_with_redacted_case(self, seeded_uow):
        outcome = views.get_suspect_case(1, seeded_uow)

        composite = outcome.value
        assert set(composite) == {"caso", "paciente", "demografico"}
        assert set(composite["caso"]) == set(views.CASE_SUMMARY_FIELDS)
        assert composite["caso"]["symptoms"] == "Si"
        assert composite["caso"]["epivigila"] == 1024
        assert composite["paciente"]["run"] == 11111111
        assert composite["demografico"]["number"] == "1092"

    def test_missing_case(self, seeded_uow):
        outcome = views.get_suspect_case(404, seeded_uow)

        assert outcome == NotFound(what="caso", key=404)

    def test_missing_patient(self, seeded_uow):
        seeded_uow.suspect_cases.add(model.SuspectCase(patient_id=77))

        outcome = views.get_suspect_case(4, seeded_uow)

        assert outcome == NotFound(what="paciente", key=77)

    def test_patient_without_demographic_is_not_a_partial_composite(self, seeded_uow):
        outcome = views.get_suspect_case(3, seeded_uow)

        assert outcome == NotFound(what="demografico", key=2)


def test_store_faults_become_outcomes(broken_uow):
    assert isinstance(views.get_user(1, broken_uow), StoreFault)
    assert isinstance(views.get_patient("11111111", broken_uow), StoreFault)
    assert isinstance(views.get_commune("2101", broken_uow), StoreFault)
    assert isinstance(views.list_suspect_cases("11111111", broken_uow), StoreFault)
    assert isinstance(views.get_demographic("11111111", broken_uow), StoreFault)
    assert isinstance(views.get_suspect_case(1, broken_uow), StoreFault)
