"""Unit tests for the success envelope and its factories."""

import re
from datetime import datetime

import pytest
from pydantic import BaseModel, ValidationError

from juno.models.responses import (
    ApiResponse,
    ConstructionError,
    ResponseMetadata,
    created,
    make_success,
    no_content,
    ok,
    paginated,
)

ISO_MS = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


# ---------------------------------------------------------------------------
# make_success
# ---------------------------------------------------------------------------


class TestMakeSuccess:
    def test_defaults(self):
        resp = make_success(200, {"id": 1})
        assert resp.success is True
        assert resp.status_code == 200
        assert resp.data == {"id": 1}
        assert resp.message == "Success"
        assert resp.metadata is None
        assert isinstance(resp.timestamp, datetime)

    @pytest.mark.parametrize("status", [200, 201, 204, 302, 399])
    def test_accepts_success_range(self, status):
        assert make_success(status, None).status_code == status

    @pytest.mark.parametrize("status", [0, 100, 199, 400, 404, 500, 599])
    def test_rejects_out_of_range(self, status):
        with pytest.raises(ConstructionError, match="Must be between 200-399"):
            make_success(status, None)

    def test_rejects_non_integer_status(self):
        with pytest.raises(ConstructionError):
            make_success("200", None)  # type: ignore[arg-type]
        with pytest.raises(ConstructionError):
            make_success(True, None)  # type: ignore[arg-type]

    def test_metadata_dict_is_validated(self):
        resp = make_success(200, [], metadata={"total": 3, "hasNext": False})
        assert isinstance(resp.metadata, ResponseMetadata)
        assert resp.metadata.total == 3
        assert resp.metadata.has_next is False

    def test_envelope_is_immutable(self):
        resp = ok({"a": 1})
        with pytest.raises(ValidationError):
            resp.message = "changed"  # type: ignore[misc]

    def test_data_is_held_by_reference(self):
        payload = {"id": 1}
        resp = ok(payload)
        payload["id"] = 2
        assert resp.to_json()["data"] == {"id": 2}

    def test_zero_based_pagination_is_accepted(self):
        body = paginated([], {"page": 0, "limit": 0, "total": 0}).to_json()
        assert body["metadata"] == {"total": 0, "page": 0, "limit": 0}

    @pytest.mark.parametrize(
        "metadata",
        [
            {"total_pages": 5},
            {"totalPages": 5, "cursor": "abc"},
            {"page": "first"},
            {"hasNext": "sometimes"},
        ],
    )
    def test_invalid_metadata_is_construction_error(self, metadata):
        with pytest.raises(ConstructionError, match="Invalid response metadata"):
            paginated([], metadata)
        with pytest.raises(ConstructionError):
            make_success(200, [], metadata=metadata)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


class TestFactories:
    def test_ok(self):
        resp = ok({"message": "Server is running."})
        assert resp.status_code == 200
        assert resp.message == "Success"

    def test_created(self):
        resp = created({"id": "p1"})
        assert resp.status_code == 201
        assert resp.message == "Resource created successfully"

    def test_no_content(self):
        resp = no_content()
        assert resp.status_code == 204
        assert resp.data is None
        assert resp.message == "Operation completed successfully"

    def test_paginated(self):
        resp = paginated(["a", "b"], {"total": 2, "page": 1, "limit": 10})
        assert resp.status_code == 200
        assert resp.message == "Data retrieved successfully"
        assert resp.metadata == ResponseMetadata(total=2, page=1, limit=10)

    def test_classmethods_match_module_functions(self):
        assert ApiResponse.created("x", "made").to_json()["message"] == "made"
        assert ApiResponse.no_content().status_code == 204


# ---------------------------------------------------------------------------
# Wire format
# ---------------------------------------------------------------------------


class TestToJson:
    def test_success_shape_without_metadata(self):
        body = ok([1, 2], "Listed").to_json()
        assert list(body) == ["success", "statusCode", "message", "data", "timestamp"]
        assert body["success"] is True
        assert body["statusCode"] == 200
        assert body["message"] == "Listed"
        assert body["data"] == [1, 2]
        assert ISO_MS.match(body["timestamp"])

    def test_no_content_keeps_null_data(self):
        body = no_content().to_json()
        assert "data" in body
        assert body["data"] is None

    def test_paginated_scenario(self):
        body = paginated(
            ["a", "b", "c"], {"total": 50, "page": 1, "limit": 10, "totalPages": 5}
        ).to_json()
        assert body["success"] is True
        assert body["statusCode"] == 200
        assert body["data"] == ["a", "b", "c"]
        assert body["metadata"] == {"total": 50, "page": 1, "limit": 10, "totalPages": 5}
        assert body["message"] == "Data retrieved successfully"
        assert list(body) == [
            "success", "statusCode", "message", "data", "metadata", "timestamp"
        ]

    def test_serialization_is_stable(self):
        resp = created({"name": "Juno"})
        assert resp.to_json() == resp.to_json()

    def test_pydantic_payloads_are_dumped(self):
        class Project(BaseModel):
            name: str
            created_at: datetime

        project = Project(name="Apollo", created_at=datetime(2025, 8, 20, 7, 28))
        body = ok([project]).to_json()
        assert body["data"] == [{"name": "Apollo", "created_at": "2025-08-20T07:28:00"}]
