from __future__ import annotations

from datetime import datetime

import pytest

from ideabank.records import Idea


HEADER = (
    "IDEA BANK ID,PROJECT TITLE,SUBSYSTEM,REGION,PLATFORM,PLANT,FINAL STATUS,"
    "SUBMIT DATE,REQUESTER EMAIL,SCOPING LEADER,TOTAL SAVINGS,LINK"
)

SAMPLE_CSV = "\n".join(
    [
        HEADER,
        'IB-001,Lighter bracket,chassis,north america,fsr,Plant 1,approved,2024-03-01,alice@corp.com,jane doe,"$1,000",https://sheet/1',
        "IB-002,Foam insert,PACKAGING,Europe,wo,Plant 2,In Review,2023-06-15,bob@corp.com,john smith,$500,",
        'IB-003,"Seal, revised",chassis/body,Asia,ct,Plant 3,Rejected,2022-11-30,alice@corp.com,,$250,',
        "IB-004,Wiring clip,electrical,Europe,mwo,Plant 1,approved,2024-12-31,carol@corp.com,jane doe,$750,",
        "IB-005,Zero savings,chassis,Europe,fsr,Plant 1,approved,2024-01-10,dan@corp.com,,$0,",
        ",No id,chassis,Europe,fsr,Plant 1,approved,2024-01-10,dan@corp.com,,$100,",
        "IB-007,Bad date,chassis,Europe,fsr,Plant 1,approved,not a date,dan@corp.com,,$100,",
        "",
    ]
)


def make_idea(**overrides) -> Idea:
    values = dict(
        id="IB-100",
        title="Sample",
        subsystem="Chassis",
        region="Europe",
        platform="Fsr",
        plant="Plant 1",
        status="Approved",
        date=datetime(2024, 5, 1),
        submitter="someone@corp.com",
        scoping_leader="Unknown",
        savings=100.0,
        link="",
    )
    values.update(overrides)
    return Idea(**values)


@pytest.fixture()
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture()
def sample_ideas():
    from ideabank.parser import parse_ideas

    return parse_ideas(SAMPLE_CSV)
