from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from studio_metrics.data.resolver import FileResolver
from studio_metrics.main import create_app

PAYMENTS_CSV = """\
Invoice Number,Invoice Due Date,Transaction At,Transaction Amount,Payment Amount,Currency Code,Payer Home Location
1001,2023-01-15,2023-01-15 10:00:00,$50.00,$50.00,USD,"Basin Los Gatos, CA"
1002,2023-01-20,2023-01-20 18:30:00,$30.00,$30.00,USD,Pleasanton
1003,2023-02-01,2023-02-01 09:15:00,$20.00,$20.00,USD,Pleasanton

1004,2021-06-01,2021-06-01 12:00:00,$99.00,$99.00,USD,Los Gatos
1005,2023-02-10,,$45.00,$45.00,USD,Los Gatos
1006,2023-02-11,2023-02-11 11:00:00,"$1,050.00","$1,050.00",USD,Los Gatos
1007,2023-03-05,2023-03-05 08:00:00,n/a,n/a,USD,Los Gatos
1008,2023-03-06,2023-03-06 08:00:00,$55.49,$55.49,USD,Campbell
"""

MEMBERS_ALPHA_CSV = """\
Client,Plan Name,Start Date,End Date,Used for Client's First Visit?,Membership?,Canceled?,Client's First Pass/Plan?,Client's First Membership?,Client's Home Location,Client ID,Plan ID
Ada,Monthly Unlimited,2023-01-10,,Yes,Yes,,Yes,Yes,Los Gatos,c1,p1
Ben,Monthly Unlimited,2023-01-15,2023-02-05,,Yes,Yes,,,Pleasanton,c2,p1
Cy,Punch Card,2023-01-20,2023-03-01,,,,,,Los Gatos,c3,p2
Di,Annual,2023-02-02,2023-12-31,,Yes,,,,Los Gatos,c4,p3
Ed,Annual,2021-05-01,,,Yes,,,,Pleasanton,c5,p3
"""

MEMBERS_BETA_CSV = """\
Client,Plan Name,Start Date,End Date,Client's Home Location,Client ID,Plan ID
Ada,Monthly Unlimited,2023-01-10,,Los Gatos,c1,p1
Ben,Monthly Unlimited,2023-01-15,2023-02-05,Pleasanton,c2,p1
Di,Annual,2023-02-02,2023-04-30,Los Gatos,c4,p3
Fay,"Youth Team, Advanced",2023-03-01,,Pleasanton,c6,p4
"""


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    d = tmp_path / "public"
    d.mkdir()
    (d / "dataprimo.csv").write_text(PAYMENTS_CSV)
    (d / "membersalpha.csv").write_text(MEMBERS_ALPHA_CSV)
    (d / "membersbeta.csv").write_text(MEMBERS_BETA_CSV)
    return d


@pytest.fixture
def resolver(tmp_path: Path, data_dir: Path) -> FileResolver:
    # First candidate does not exist; lookups must fall through to data_dir
    return FileResolver([tmp_path / "missing", data_dir])


@pytest.fixture
def client(resolver: FileResolver):
    with TestClient(create_app(resolver)) as c:
        yield c
