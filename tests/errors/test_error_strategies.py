"""
🧪 test_error_strategies.py — тести конвертації винятків httpx

Перевіряє:
- 401 → CommerceAuthenticationError з повідомленням з тіла відповіді
- Інші статуси → CommerceConnectionError зі статусом і URL
- Мережеві збої → CommerceConnectionError
- Ієрархію доменних помилок
"""

import httpx
import pytest

from pricecart.errors import (
    CartError,
    CommerceAuthenticationError,
    CommerceConnectionError,
    DivideByZeroError,
    ErrorCode,
    HttpxErrorStrategy,
    MergeStrategyError,
    PriceCartError,
    PriceError,
    ValidationError,
    convert_exception,
)

URL = "https://shop.test/api/products/tee"


def _status_error(status, **kwargs):
    request = httpx.Request("GET", URL)
    response = httpx.Response(status, request=request, **kwargs)
    return httpx.HTTPStatusError("boom", request=request, response=response)


def test_unauthorized_uses_nested_error_message():
    error = HttpxErrorStrategy().handle(_status_error(401, json={"error": {"message": "Bad token"}}))
    assert isinstance(error, CommerceAuthenticationError)
    assert error.message == "Bad token"


def test_unauthorized_default_message():
    error = HttpxErrorStrategy().handle(_status_error(401))
    assert error.message == "Unauthenticated."


def test_other_status_keeps_status_and_url():
    error = HttpxErrorStrategy().handle(_status_error(422, json={"message": "Invalid variant"}))
    assert isinstance(error, CommerceConnectionError)
    assert error.message == "Invalid variant"
    assert error.status_code == 422
    assert error.url == URL
    assert error.to_log_extra() == {
        "error_code": ErrorCode.COMMERCE,
        "details": error.details,
        "url": URL,
        "status_code": 422,
    }


def test_transport_error():
    exc = httpx.ReadTimeout("timed out", request=httpx.Request("GET", URL))
    error = HttpxErrorStrategy().handle(exc)
    assert isinstance(error, CommerceConnectionError)
    assert error.status_code is None
    assert error.details == "ReadTimeout"


def test_unknown_errors_are_not_converted():
    assert convert_exception(RuntimeError("x"), [HttpxErrorStrategy()]) is None


def test_error_hierarchy():
    assert issubclass(ValidationError, ValueError)
    assert issubclass(DivideByZeroError, PriceError)
    assert issubclass(DivideByZeroError, ZeroDivisionError)
    assert issubclass(MergeStrategyError, CartError)
    assert issubclass(CommerceAuthenticationError, PriceCartError)
    with pytest.raises(PriceCartError):
        raise MergeStrategyError("bad")
