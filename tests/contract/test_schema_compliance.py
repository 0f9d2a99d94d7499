"""
Contract tests for schema compliance.

Ensures that scheduling output and policy diagnostics match the defined
schemas (fetch_request.schema.json, fetcher_policy.schema.json).
"""

import json
from pathlib import Path

import pytest
import jsonschema

from core.models import FetchRequest
from fetcher.logging import policy_to_dict
from fetcher.policy import FetcherPolicy


# Load schemas
SCHEMAS_DIR = Path(__file__).parent.parent.parent / "schemas"
FETCH_REQUEST_SCHEMA = json.loads((SCHEMAS_DIR / "fetch_request.schema.json").read_text())
FETCHER_POLICY_SCHEMA = json.loads((SCHEMAS_DIR / "fetcher_policy.schema.json").read_text())


# ============================================================================
# FetchRequest Schema Tests
# ============================================================================

@pytest.mark.contract
class TestFetchRequestSchema:
    """FetchRequest must conform to fetch_request.schema.json."""

    def test_fetch_request_against_schema(self, paced_policy: FetcherPolicy):
        """FetchRequest serialization matches schema."""
        data = json.loads(paced_policy.get_fetch_request(12).model_dump_json())
        try:
            jsonschema.validate(data, FETCH_REQUEST_SCHEMA)
        except jsonschema.ValidationError as e:
            pytest.fail(f"FetchRequest schema validation failed: {e.message}")

    def test_model_example_matches_schema(self):
        """The example embedded in the model is itself valid."""
        example = FetchRequest.model_json_schema()["examples"][0]
        jsonschema.validate(example, FETCH_REQUEST_SCHEMA)
        assert FetchRequest.model_validate(example).num_urls == example["num_urls"]

    def test_fetch_request_rejects_negative_count(self):
        """num_urls below zero fails validation."""
        with pytest.raises(jsonschema.ValidationError):
            jsonschema.validate({"num_urls": -1, "next_request_time": 0}, FETCH_REQUEST_SCHEMA)

    def test_fetch_request_rejects_extra_fields(self):
        """Extra fields fail validation (additionalProperties: false)."""
        invalid = {"num_urls": 1, "next_request_time": 0, "host": "example.com"}
        with pytest.raises(jsonschema.ValidationError):
            jsonschema.validate(invalid, FETCH_REQUEST_SCHEMA)


# ============================================================================
# FetcherPolicy Schema Tests
# ============================================================================

@pytest.mark.contract
class TestFetcherPolicySchema:
    """policy_to_dict output must conform to fetcher_policy.schema.json."""

    def test_default_policy_against_schema(self, default_policy: FetcherPolicy):
        data = json.loads(json.dumps(policy_to_dict(default_policy)))
        jsonschema.validate(data, FETCHER_POLICY_SCHEMA)

    def test_configured_policy_against_schema(self, html_only_policy: FetcherPolicy, clock):
        html_only_policy.crawl_end_time = clock() + 60_000
        html_only_policy.min_response_rate = 2048

        data = json.loads(json.dumps(policy_to_dict(html_only_policy)))

        jsonschema.validate(data, FETCHER_POLICY_SCHEMA)
        assert data["valid_mime_types"] == sorted(data["valid_mime_types"])

    def test_policy_schema_requires_all_limits(self):
        with pytest.raises(jsonschema.ValidationError):
            jsonschema.validate({"crawl_delay_ms": 1000}, FETCHER_POLICY_SCHEMA)
