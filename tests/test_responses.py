from decimal import Decimal

import httpx

from messaging.responses import Failure, Success, is_json, parse_response, price_units


def test_success_json_price():
    outcome = parse_response(httpx.Response(200, json={"price": 0.05}))
    assert outcome == Success(price=Decimal("0.05"))
    assert outcome.kind == "success"
    assert price_units(outcome.price) == 50

def test_success_non_json_defaults_price_zero():
    outcome = parse_response(httpx.Response(200, text="OK"))
    assert outcome == Success(price=Decimal(0))

def test_success_bad_json_degrades_to_default(caplog):
    resp = httpx.Response(202, content=b"{not json", headers={"content-type": "application/json"})
    assert parse_response(resp) == Success(price=Decimal(0))
    assert any(r.getMessage() == "own_sms_response_unparseable" for r in caplog.records)

def test_success_wrong_shape_degrades_to_default():
    assert parse_response(httpx.Response(200, json={"price": "cheap"})) == Success(price=Decimal(0))
    assert parse_response(httpx.Response(200, json=[1, 2])) == Success(price=Decimal(0))

def test_success_ignores_unknown_fields():
    outcome = parse_response(httpx.Response(200, json={"price": 1.25, "id": "abc"}))
    assert outcome == Success(price=Decimal("1.25"))

def test_failure_json():
    outcome = parse_response(httpx.Response(403, json={"status": 403, "message": "blocked"}))
    assert outcome == Failure(status=403, message="blocked")
    assert outcome.kind == "failure"

def test_failure_non_json_defaults():
    assert parse_response(httpx.Response(500, text="Internal Server Error")) == Failure(status=0, message="")

def test_failure_bad_json_defaults():
    resp = httpx.Response(400, content=b"oops", headers={"content-type": "application/json"})
    assert parse_response(resp) == Failure(status=0, message="")

def test_redirect_is_failure():
    assert isinstance(parse_response(httpx.Response(302, headers={"location": "https://elsewhere"})), Failure)

def test_json_content_type_with_charset():
    resp = httpx.Response(200, content=b'{"price": 2}', headers={"content-type": "Application/JSON; charset=utf-8"})
    assert is_json(resp)
    assert parse_response(resp) == Success(price=Decimal(2))

def test_price_units_truncates():
    assert price_units(Decimal("0.0459")) == 45
    assert price_units(Decimal("1.001")) == 1001
    assert price_units(Decimal(0)) == 0

def test_non_numeric_price_degrades_to_default():
    assert parse_response(httpx.Response(200, json={"price": True})) == Success(price=Decimal(0))
    assert parse_response(httpx.Response(200, json={"price": "0.05"})) == Success(price=Decimal(0))
    assert parse_response(httpx.Response(200, json={"price": 3})) == Success(price=Decimal(3))
