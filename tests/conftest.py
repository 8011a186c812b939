"""Pytest configuration and shared fixtures."""
import pytest
from dataclasses import dataclass
from typing import List, Optional

from formstate import (
    Aggregate,
    Field,
    ListWrapper,
    OptionalWrapper,
    ParseError,
    converters,
    reset_form_config,
)


@dataclass
class LoginData:
    """Login form model."""
    username: str
    password: str


@dataclass
class Address:
    """Address sub-model used in optional and list tests."""
    city: str
    zip: int


@dataclass
class UserDetails:
    """Nested model: an optional address and a list of addresses."""
    name: str
    primary_address: Optional[Address]
    addresses: List[Address]


@dataclass
class ServerConfig:
    """Model with a value the form does not own (``notes``)."""
    host: str
    port: int
    notes: str = ""


@dataclass
class PortRange:
    """Model with a cross-field rule."""
    low: int
    high: int


def build_port_range(low: int, high: int) -> PortRange:
    if low > high:
        raise ParseError("Low port must not exceed high port")
    return PortRange(low, high)


def make_login_form() -> Aggregate:
    return Aggregate(
        {
            'username': Field(converters.text()),
            'password': Field(converters.password()),
        },
        build=LoginData,
    )


def make_address_form() -> Aggregate:
    return Aggregate(
        {
            'city': Field(converters.text()),
            'zip': Field(converters.number(int, "a zip code", 0, 99999)),
        },
        build=Address,
    )


def make_user_form() -> Aggregate:
    return Aggregate(
        {
            'name': Field(converters.text()),
            'primary_address': OptionalWrapper(make_address_form()),
            'addresses': ListWrapper(make_address_form()),
        },
        build=UserDetails,
    )


@pytest.fixture(autouse=True)
def reset_config():
    """Restore the default form config around each test."""
    reset_form_config()
    yield
    reset_form_config()


@pytest.fixture
def login_form():
    """Provide a blank login form."""
    return make_login_form()


@pytest.fixture
def address_form():
    """Provide a blank address form."""
    return make_address_form()


@pytest.fixture
def user_form():
    """Provide a blank user form with an optional address and an address list."""
    return make_user_form()
