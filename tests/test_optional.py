"""Tests for OptionalWrapper presence handling."""
import pytest

from formstate import (
    Aggregate,
    Field,
    FieldPath,
    ListWrapper,
    OptionalWrapper,
    RequiredError,
    UnknownPathError,
    converters,
)

from conftest import Address, UserDetails

CITY = FieldPath.of('primary_address', 'city')
ZIP = FieldPath.of('primary_address', 'zip')
PRIMARY = FieldPath.of('primary_address')


def fill_name(form, name="Ada"):
    form.set_input(FieldPath.of('name'), name)


class TestPresence:
    """Toggling and construction."""

    def test_absent_by_default(self, user_form):
        """Test that optionals start absent."""
        assert not user_form['primary_address'].present

    def test_constructor_rejects_wrappers(self):
        """Test that the inner node must be an Aggregate or Field."""
        with pytest.raises(TypeError):
            OptionalWrapper(ListWrapper(Field(converters.text())))
        with pytest.raises(TypeError):
            OptionalWrapper(OptionalWrapper(Field(converters.text())))
        with pytest.raises(TypeError):
            OptionalWrapper("city")

    def test_set_present_through_form(self, user_form):
        """Test the structural routing helper."""
        user_form.set_present(PRIMARY, True)
        assert user_form['primary_address'].present

    def test_set_present_on_wrong_node(self, user_form):
        """Test that set_present needs an OptionalWrapper path."""
        with pytest.raises(UnknownPathError):
            user_form.set_present(FieldPath.of('name'), True)


class TestSubmitExclusion:
    """Absent optionals contribute None and no errors."""

    def test_absent_contributes_none(self, user_form):
        """Test that an absent optional yields None."""
        fill_name(user_form)
        assert user_form.submit().unwrap() == UserDetails("Ada", None, [])

    def test_absent_with_invalid_inner_is_ok(self, user_form):
        """Test that invalid inner data is ignored while absent."""
        fill_name(user_form)
        user_form.set_input(ZIP, "not a zip")
        result = user_form.submit()
        assert result.ok
        assert result.value.primary_address is None

    def test_absent_fields_not_marked(self, user_form):
        """Test that submit skips fields under an absent optional."""
        user_form.submit()
        inner = user_form['primary_address'].inner
        assert not inner['city'].submit_attempted
        assert not inner.submit_attempted

    def test_present_is_validated(self, user_form):
        """Test that toggling on re-enables validation."""
        fill_name(user_form)
        user_form.set_present(PRIMARY, True)
        user_form.set_input(CITY, "Oslo")
        result = user_form.submit()
        assert dict(result.errors) == {ZIP: RequiredError()}
        assert user_form['primary_address'].inner['zip'].submit_attempted

    def test_present_builds_inner_model(self, user_form):
        """Test the inner model of a present optional."""
        fill_name(user_form)
        user_form.set_present(PRIMARY, True)
        user_form.set_input(CITY, "Oslo")
        user_form.set_input(ZIP, "0150")
        assert user_form.submit().unwrap().primary_address == Address("Oslo", 150)

    def test_optional_field(self):
        """Test an OptionalWrapper around a single Field."""
        form = Aggregate({'nickname': OptionalWrapper(Field(converters.text()))})
        assert form.submit().unwrap() == {'nickname': None}
        form.set_present(FieldPath.of('nickname'), True)
        form.set_input(FieldPath.of('nickname'), "Addy")
        assert form.submit().unwrap() == {'nickname': "Addy"}


class TestRetainedInput:
    """Inner raw state survives toggling."""

    def test_toggle_keeps_raw(self, user_form):
        """Test that toggling off and on restores typed input."""
        user_form.set_present(PRIMARY, True)
        user_form.set_input(CITY, "Oslo")
        user_form.set_present(PRIMARY, False)
        user_form.set_present(PRIMARY, True)
        assert user_form.field(CITY).raw == "Oslo"

    def test_input_while_absent_is_retained(self, user_form):
        """Test that input into an absent optional is kept without toggling."""
        user_form.set_input(CITY, "Bergen")
        assert not user_form['primary_address'].present
        assert user_form.field(CITY).raw == "Bergen"


class TestSnapshotsAndReset:
    """Status, visible errors and reset of optionals."""

    def test_absent_omitted_from_snapshot(self, user_form):
        """Test that absent branches report no status."""
        assert CITY not in user_form.status_snapshot()
        user_form.set_present(PRIMARY, True)
        assert CITY in user_form.status_snapshot()

    def test_absent_omitted_from_visible_errors(self, user_form):
        """Test that absent branches report no errors."""
        user_form.set_input(ZIP, "x")
        assert ZIP not in user_form.visible_errors()
        user_form.set_present(PRIMARY, True)
        assert ZIP in user_form.visible_errors()

    def test_reset_none_makes_absent(self, user_form):
        """Test that reset(None) clears and hides the branch."""
        user_form.set_present(PRIMARY, True)
        user_form.set_input(CITY, "Oslo")
        user_form['primary_address'].reset(None)
        assert not user_form['primary_address'].present
        assert user_form.field(CITY).raw == ""

    def test_reset_from_model(self, user_form):
        """Test seeding a form whose optional is set."""
        user_form.reset(UserDetails("Ada", Address("Oslo", 150), []))
        assert user_form['primary_address'].present
        assert user_form.field(ZIP).raw == "150"
        assert not user_form.has_unsaved_changes(UserDetails("Ada", Address("Oslo", 150), []))

    def test_is_empty(self, user_form):
        """Test that an absent optional counts as empty."""
        user_form.set_input(CITY, "Oslo")
        assert user_form['primary_address'].is_empty()
        user_form.set_present(PRIMARY, True)
        assert not user_form['primary_address'].is_empty()
