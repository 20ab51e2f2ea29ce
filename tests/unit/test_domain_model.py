"""Unit tests for the suspect case domain model"""
from datetime import datetime

import pytest

from apolohra.domain import events, model


@pytest.mark.parametrize("text, expected", [
    ("Si", True),
    ("No", False),
    ("si", False),
    ("SI", False),
    (" Si", False),
    ("", False),
    (None, False),
])
def test_only_exact_si_means_symptoms(text, expected):
    assert model.symptoms_flag(text) is expected


def test_symptoms_flag_renders_as_si_or_no():
    assert model.symptoms_text(True) == "Si"
    assert model.symptoms_text(False) == "No"
    assert model.symptoms_text(None) == "No"


def make_case(**overrides):
    fields = dict(
        id=7,
        patient_id=1,
        pcr_sars_cov_2="pending",
        reception_at=None,
        receptor_id=None,
        laboratory_id=None,
        validator_id=None,
        updated_at=datetime(2020, 10, 28, 9, 0),
    )
    fields.update(overrides)
    return model.SuspectCase(**fields)


def test_suspect_case_starts_without_events():
    suspect_case = make_case()

    assert suspect_case.events == []


def test_receive_sample_leaves_result_fields_untouched():
    suspect_case = make_case(
        pcr_sars_cov_2="negative",
        pcr_sars_cov_2_at=datetime(2020, 10, 29, 10, 0),
        validator_id=4,
    )

    suspect_case.receive_sample(
        reception_at=datetime(2020, 10, 28, 18, 0),
        receptor_id=1,
        laboratory_id=3,
        updated_at=datetime(2020, 10, 28, 18, 0),
    )

    assert suspect_case.reception_at == datetime(2020, 10, 28, 18, 0)
    assert suspect_case.receptor_id == 1
    assert suspect_case.laboratory_id == 3
    assert suspect_case.updated_at == datetime(2020, 10, 28, 18, 0)
    assert suspect_case.pcr_sars_cov_2 == "negative"
    assert suspect_case.pcr_sars_cov_2_at == datetime(2020, 10, 29, 10, 0)
    assert suspect_case.validator_id == 4


def test_deliver_result_leaves_reception_fields_untouched():
    suspect_case = make_case(
        reception_at=datetime(2020, 10, 28, 18, 0),
        receptor_id=1,
        laboratory_id=3,
    )

    suspect_case.deliver_result(
        pcr_sars_cov_2_at=datetime(2020, 8, 29, 10, 30, 22),
        pcr_sars_cov_2="negative",
        validator_id=2,
        updated_at=datetime(2020, 8, 29, 10, 30, 22),
    )

    assert suspect_case.pcr_sars_cov_2 == "negative"
    assert suspect_case.pcr_sars_cov_2_at == datetime(2020, 8, 29, 10, 30, 22)
    assert suspect_case.validator_id == 2
    assert suspect_case.reception_at == datetime(2020, 10, 28, 18, 0)
    assert suspect_case.receptor_id == 1
    assert suspect_case.laboratory_id == 3


def test_lifecycle_raises_one_event_per_phase():
    suspect_case = make_case()

    suspect_case.create()
    suspect_case.receive_sample(datetime(2020, 10, 28, 18, 0), 1, 3, None)
    suspect_case.deliver_result(datetime(2020, 10, 29, 10, 0), "positive", 2, None)

    assert [type(e) for e in suspect_case.events] == [
        events.SuspectCaseCreated,
        events.SampleReceived,
        events.ResultDelivered,
    ]
    created, received, delivered = suspect_case.events
    assert created.case_id == 7
    assert created.patient_id == 1
    assert received.laboratory_id == 3
    assert delivered.pcr_sars_cov_2 == "positive"
