"""Tests for request construction."""

import json
from datetime import date
from unittest.mock import Mock

import httpx
import pytest

from dwolla_toolkit.core.models import BusinessClassification, CustomerStatus, TransportError
from dwolla_toolkit.core.request_builder import (
    HAL_JSON,
    PRODUCTION_BASE_URL,
    SANDBOX_BASE_URL,
    RequestDescriptor,
    base_url_for,
    build_business_classifications_request,
    build_create_customer_request,
    build_list_customers_query,
    build_list_customers_request,
    build_token_request,
    receive_only_body,
    send_request,
    unverified_body,
    verified_business_body,
    verified_personal_body,
)


KYC = dict(
    address1="99-99 33rd St",
    address2="Apt 8",
    city="Some City",
    state="NY",
    postal_code="01101",
    ssn="1234",
    date_of_birth=date(1970, 1, 1),
)


def test_base_url_for_sandbox():
    assert base_url_for(True) == "https://api-sandbox.dwolla.com"
    assert base_url_for(True) == SANDBOX_BASE_URL


def test_base_url_for_production():
    assert base_url_for(False) == "https://api.dwolla.com"
    assert base_url_for(False) == PRODUCTION_BASE_URL


# ===== Token Request =====

def test_build_token_request():
    request = build_token_request(SANDBOX_BASE_URL, "aWQ6c2VjcmV0")

    assert request.method == "POST"
    assert request.url == "https://api-sandbox.dwolla.com/token"
    assert request.headers == {"Authorization": "Basic aWQ6c2VjcmV0"}
    assert request.form == {"grant_type": "client_credentials"}
    assert request.json_body is None


# ===== List Customers Query =====

def test_list_query_defaults():
    assert build_list_customers_query() == "offset=0&limit=30"


@pytest.mark.parametrize("limit", [201, 250, 1000])
def test_list_query_caps_limit(limit):
    assert build_list_customers_query(limit=limit) == "offset=0&limit=200"


def test_list_query_keeps_limit_at_cap():
    assert build_list_customers_query(limit=200) == "offset=0&limit=200"


def test_list_query_omits_empty_search():
    assert "search" not in build_list_customers_query(search="")


def test_list_query_percent_encodes_search():
    query = build_list_customers_query(search="jane doe@example.com")
    assert query == "offset=0&limit=30&search=jane%20doe%40example.com"


def test_list_query_omits_unspecified_status():
    assert "status" not in build_list_customers_query(status=None)
    assert "status" not in build_list_customers_query(status=CustomerStatus.UNKNOWN)


@pytest.mark.parametrize("status", [s for s in CustomerStatus if s is not CustomerStatus.UNKNOWN])
def test_list_query_includes_status_lowercased(status):
    query = build_list_customers_query(status=status)
    assert query.endswith(f"&status={status.name.lower()}")


def test_list_query_parameter_order():
    query = build_list_customers_query(
        offset=10, limit=5, search="acme", status=CustomerStatus.VERIFIED
    )
    assert query == "offset=10&limit=5&search=acme&status=verified"


def test_list_query_rejects_negative_offset():
    with pytest.raises(ValueError):
        build_list_customers_query(offset=-1)


def test_list_query_rejects_non_positive_limit():
    with pytest.raises(ValueError):
        build_list_customers_query(limit=0)


def test_build_list_customers_request_scenario():
    """limit=250 with no filters is capped in the final URL."""
    request = build_list_customers_request(
        SANDBOX_BASE_URL, "tok", offset=0, limit=250, search="", status=None
    )

    assert request.method == "GET"
    assert request.url == "https://api-sandbox.dwolla.com/customers?offset=0&limit=200"
    assert request.headers == {
        "Accept": "application/vnd.dwolla.v1.hal+json",
        "Authorization": "Bearer tok",
    }
    assert request.json_body is None


def test_build_business_classifications_request():
    request = build_business_classifications_request(PRODUCTION_BASE_URL, "tok")

    assert request.method == "GET"
    assert request.url == "https://api.dwolla.com/business-classifications"
    assert request.headers["Authorization"] == "Bearer tok"
    assert request.headers["Accept"] == HAL_JSON


# ===== Customer Bodies =====

def test_receive_only_body():
    assert receive_only_body("Jane", "Doe", "jane@example.com") == {
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane@example.com",
        "type": "receive-only",
    }


def test_unverified_body_has_no_type():
    assert unverified_body("Jane", "Doe", "jane@example.com") == {
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane@example.com",
    }


def test_verified_personal_body():
    body = verified_personal_body("Jane", "Doe", "jane@example.com", **KYC)

    assert body == {
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane@example.com",
        "type": "personal",
        "address1": "99-99 33rd St",
        "address2": "Apt 8",
        "city": "Some City",
        "state": "NY",
        "postalCode": "01101",
        "ssn": "1234",
        "dateOfBirth": "1970-01-01",
    }


def test_verified_business_body():
    body = verified_business_body(
        "Jane", "Doe", "jane@example.com", **KYC,
        business_classification="9ed3f67b-7d6f-11e3-b1ce-5404a6144203",
        business_name="Jane's Bakery",
        ein="00-0000000",
    )

    assert body["type"] == "business"
    assert body["businessType"] == "soleProprietorship"
    assert body["businessClassification"] == "9ed3f67b-7d6f-11e3-b1ce-5404a6144203"
    assert body["businessName"] == "Jane's Bakery"
    assert body["ein"] == "00-0000000"
    assert body["dateOfBirth"] == "1970-01-01"


def test_verified_business_body_accepts_classification_record():
    classification = BusinessClassification(id="abc-123", name="Food retail and service")

    body = verified_business_body(
        "Jane", "Doe", "jane@example.com", **KYC,
        business_classification=classification,
        business_name="Jane's Bakery",
        ein="00-0000000",
    )

    assert body["businessClassification"] == "abc-123"


def test_build_create_customer_request():
    body = receive_only_body("Jane", "Doe", "jane@example.com")
    request = build_create_customer_request(SANDBOX_BASE_URL, "tok", body)

    assert request.method == "POST"
    assert request.url == "https://api-sandbox.dwolla.com/customers"
    assert request.headers["Content-Type"] == HAL_JSON
    assert request.headers["Accept"] == HAL_JSON
    assert request.headers["Authorization"] == "Bearer tok"
    assert request.json_body == body


# ===== Transport =====

def test_send_request_serializes_json_body():
    http_client = Mock(spec=httpx.Client)
    request = RequestDescriptor(
        method="POST",
        url="https://api.test.com/customers",
        headers={"Content-Type": HAL_JSON},
        json_body={"firstName": "Jane"},
    )

    send_request(http_client, request)

    call_kwargs = http_client.request.call_args[1]
    assert call_kwargs["method"] == "POST"
    assert call_kwargs["url"] == "https://api.test.com/customers"
    assert json.loads(call_kwargs["content"]) == {"firstName": "Jane"}
    assert "data" not in call_kwargs


def test_send_request_sends_form():
    http_client = Mock(spec=httpx.Client)
    request = build_token_request(SANDBOX_BASE_URL, "creds")

    send_request(http_client, request)

    call_kwargs = http_client.request.call_args[1]
    assert call_kwargs["data"] == {"grant_type": "client_credentials"}
    assert "content" not in call_kwargs


def test_send_request_wraps_network_errors():
    http_client = Mock(spec=httpx.Client)
    http_client.request.side_effect = httpx.ConnectError("Connection refused")
    request = build_business_classifications_request(SANDBOX_BASE_URL, "tok")

    with pytest.raises(TransportError) as exc_info:
        send_request(http_client, request)

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
