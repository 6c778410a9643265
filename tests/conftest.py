from __future__ import annotations

from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
import requests

from shared_lib.schema import AgentSettings, RecordConfig


def make_response(
    status_code: int = 200,
    json_data: Any = None,
    text: str = "",
    json_error: bool = False,
) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    return response


def lookup_response(record_id: str = "rec-1", content: str = "1.2.3.4") -> MagicMock:
    return make_response(
        json_data={
            "success": True,
            "errors": [],
            "result": [
                {"id": record_id, "name": "home.example.com", "type": "A", "content": content},
            ],
        }
    )


def update_response(success: bool = True, errors: Optional[list] = None) -> MagicMock:
    return make_response(
        json_data={"success": success, "errors": errors or [], "result": {}},
    )


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def record() -> RecordConfig:
    return RecordConfig(
        authEmail="owner@example.com",
        authKey="global-key",
        zoneIdentifier="zone-123",
        recordName="home.example.com",
        proxy=True,
    )


@pytest.fixture
def settings(tmp_path) -> AgentSettings:
    return AgentSettings(
        config_path=tmp_path / "config.json",
        state_dir=tmp_path / "state",
    )
