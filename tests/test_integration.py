"""End-to-end form workflows."""
import ipaddress
import logging
from dataclasses import dataclass

import pytest

from formstate import (
    EMPTY,
    Aggregate,
    Field,
    FieldPath,
    ListWrapper,
    NumberOutOfRangeError,
    RequiredError,
    SubmitResult,
    UnknownKeyError,
    converters,
    form_config_context,
)

from conftest import Address, LoginData, UserDetails


@dataclass
class ConnectionDetails:
    """Network connection model."""
    ip: ipaddress.IPv4Address
    port: int


def make_connection_form():
    return Aggregate(
        {
            'ip': Field(converters.text(ipaddress.IPv4Address)),
            'port': Field(converters.number(int, "a number", 0, 65535)),
        },
        build=ConnectionDetails,
    )


class TestLoginWorkflow:
    """Login form from blank to submitted."""

    def test_missing_password_then_fixed(self, login_form):
        """Test the required-password round trip."""
        login_form.set_input(FieldPath.of('username'), "alice")
        login_form.set_input(FieldPath.of('password'), "")
        assert login_form.submit() == SubmitResult.failure({FieldPath.of('password'): RequiredError()})

        login_form.set_input(FieldPath.of('password'), "hunter2")
        assert login_form.submit() == SubmitResult.success(LoginData("alice", "hunter2"))

    def test_error_display_lifecycle(self, login_form):
        """Test what a UI shows before and after submitting."""
        assert login_form.status_snapshot()[FieldPath.of('password')] == EMPTY
        assert login_form.visible_errors() == {}
        assert not login_form.submit_attempted

        login_form.submit()
        assert login_form.submit_attempted
        assert set(login_form.visible_errors()) == {FieldPath.of('username'), FieldPath.of('password')}

        login_form.set_input(FieldPath.of('username'), "alice")
        assert set(login_form.visible_errors()) == {FieldPath.of('password')}

    def test_reset_clears_submit_state(self, login_form):
        """Test that reset() returns the form to a pristine state."""
        login_form.submit()
        login_form.reset(LoginData("bob", "pw"))
        assert not login_form.submit_attempted
        assert login_form.visible_errors() == {}
        assert not login_form.has_unsaved_changes(LoginData("bob", "pw"))


class TestConnectionWorkflow:
    """Typed leaves with custom model construction."""

    def test_submit_typed_values(self):
        """Test parsing an address and a bounded port."""
        form = make_connection_form()
        form.set_input(FieldPath.of('ip'), "127.0.0.1")
        form.set_input(FieldPath.of('port'), "80")
        assert form.submit().unwrap() == ConnectionDetails(ipaddress.IPv4Address("127.0.0.1"), 80)

    def test_port_out_of_range(self):
        """Test the range message shown for a bad port."""
        form = make_connection_form()
        form.set_input(FieldPath.of('ip'), "127.0.0.1")
        form.set_input(FieldPath.of('port'), "70000")
        result = form.submit()
        assert result.error_for(FieldPath.of('port')) == NumberOutOfRangeError("a number", 0, 65535)
        assert result.error_messages() == {'port': "Expected a number between 0 and 65535."}


class TestListWorkflow:
    """Keyed list of subforms."""

    def test_add_fill_remove(self):
        """Test add twice, fill both, remove the first."""
        form = Aggregate({'items': ListWrapper(Aggregate({'name': Field(converters.text())}))})
        items = FieldPath.of('items')
        k1 = form.add_item(items)
        k2 = form.add_item(items)
        form.set_input(FieldPath.of(('items', k1), 'name'), "a")
        form.set_input(FieldPath.of(('items', k2), 'name'), "b")
        assert form.submit().unwrap() == {'items': [{'name': "a"}, {'name': "b"}]}

        form.remove_item(FieldPath.of(('items', k1)))
        assert form.submit().unwrap() == {'items': [{'name': "b"}]}
        with pytest.raises(UnknownKeyError):
            form.set_input(FieldPath.of(('items', k1), 'name'), "a")

    def test_parsed_paths_route(self, user_form):
        """Test routing with paths parsed from their rendered form."""
        key = user_form.add_item(FieldPath.of('addresses'))
        user_form.set_input(FieldPath.parse(f"addresses[{key}].city"), "Oslo")
        assert user_form.field(FieldPath.of(('addresses', key), 'city')).raw == "Oslo"


class TestNestedWorkflow:
    """Optional subform and list of subforms together."""

    def test_full_user_edit(self, user_form):
        """Test editing every kind of node and submitting once."""
        original = UserDetails("Ada", None, [Address("Oslo", 150)])
        user_form.reset(original)
        assert not user_form.has_unsaved_changes(original)

        user_form.set_present(FieldPath.of('primary_address'), True)
        user_form.set_input(FieldPath.of('primary_address', 'city'), "Bergen")
        user_form.set_input(FieldPath.of('primary_address', 'zip'), "5003")
        new_key = user_form.add_item(FieldPath.of('addresses'), Address("Tromso", 9008))
        assert user_form.has_unsaved_changes(original)

        updated = user_form.submit_update(original).unwrap()
        assert updated == UserDetails(
            "Ada",
            Address("Bergen", 5003),
            [Address("Oslo", 150), Address("Tromso", 9008)],
        )
        assert user_form['addresses'].index_of(new_key) == 1

    def test_every_invalid_leaf_reported(self, user_form):
        """Test error completeness across nested nodes."""
        user_form.set_present(FieldPath.of('primary_address'), True)
        key = user_form.add_item(FieldPath.of('addresses'))
        user_form.set_input(FieldPath.of(('addresses', key), 'city'), "Oslo")
        result = user_form.submit()
        assert list(result.errors) == [
            FieldPath.of('name'),
            FieldPath.of('primary_address', 'city'),
            FieldPath.of('primary_address', 'zip'),
            FieldPath.of(('addresses', key), 'zip'),
        ]

    def test_whitespace_policy_in_form(self, user_form):
        """Test whitespace-only input under both policies."""
        user_form.set_input(FieldPath.of('name'), "   ")
        assert user_form.status_snapshot()[FieldPath.of('name')].is_invalid
        with form_config_context(whitespace_is_empty=True):
            assert user_form.status_snapshot()[FieldPath.of('name')] == EMPTY
            assert user_form.is_empty()

    def test_submit_logs_outcome(self, login_form, caplog):
        """Test that submit logs its outcome at debug level."""
        with caplog.at_level(logging.DEBUG, logger='formstate'):
            login_form.submit()
        assert any("Submit failed with 2 error(s)" in r.getMessage() for r in caplog.records)

    def test_optional_single_field_default(self):
        """Test an optional-value field that is empty on submit."""
        form = Aggregate({
            'nickname': Field(converters.optional(converters.text())),
            'retries': Field(converters.number_with_default(int)),
            'tags': Field(converters.delimited(converters.text())),
        })
        assert form.submit().unwrap() == {'nickname': None, 'retries': 0, 'tags': []}
