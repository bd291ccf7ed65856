"""Tests for Model field declarations and the per-instance error bucket."""

import pytest

from dataknobs_schematics import (
    MISSING,
    Field,
    FieldTable,
    Model,
    ModelValidationError,
    SchemaDefinitionError,
    ValidatorChain,
    field,
)
from dataknobs_schematics.constraints import gte, min_length


class Address(Model):
    street = field(str, required=True, validators=[min_length(1)])
    zip_code = field(str, required=True)


class Customer(Model):
    name = field(str, required=True)
    address = field(Address | None)
    tags = field(list[str], default=[])


class Card(Model):
    label = field(str, required=True, validators=[min_length(2)])


class Board(Model):
    cards = field(list[Card], default=[])
    lanes = field(dict[str, Card], default={})


class TestFieldTable:
    """Test field table construction at class creation."""

    def test_table_attached_to_class(self, user_cls):
        """Test declaration order and descriptor replacement."""
        assert isinstance(user_cls.__fields__, FieldTable)
        assert user_cls.__fields__.names() == ["email", "username", "age", "role", "active"]
        assert isinstance(user_cls.email, Field)
        assert "email" in user_cls.__fields__
        assert user_cls.__fields__["age"] is user_cls.__fields__[2]

    def test_field_descriptor(self, user_cls):
        """Test built fields keep their configuration."""
        email = user_cls.__fields__["email"]
        assert email.required is True
        assert email.has_default is False
        assert isinstance(email.validator, ValidatorChain)
        assert len(email.validators) == 2

        active = user_cls.__fields__.get("active")
        assert active.default is True
        assert active.validator is active.base_validator
        assert user_cls.__fields__.get("missing") is None

    def test_base_model_has_no_fields(self):
        """Test the root class carries an empty table."""
        assert len(Model.__fields__) == 0

    def test_reserved_field_names(self):
        """Test runtime method names cannot be fields."""
        with pytest.raises(SchemaDefinitionError, match="errors"):

            class Bad(Model):
                errors = field(str)

    def test_private_field_names(self):
        """Test underscore names cannot be fields."""
        with pytest.raises(SchemaDefinitionError):

            class Bad(Model):
                _secret = field(str)

    def test_unsupported_field_type(self):
        """Test declaration errors name the field."""
        with pytest.raises(SchemaDefinitionError, match="coords"):

            class Bad(Model):
                coords = field(tuple[int, int])

    def test_inheritance(self, user_cls):
        """Test subclasses extend the parent table without changing it."""

        class Admin(user_cls):
            level = field(int, default=1, validators=[gte(1)])

        assert Admin.__fields__.names()[-1] == "level"
        assert Admin.__fields__.names()[:5] == user_cls.__fields__.names()
        assert "level" not in user_cls.__fields__

        admin = Admin(email="root@example.com", username="root", level=0)
        assert not admin.is_valid()
        assert admin.errors == {"level": ["must be >= 1"]}


class TestModelConstruction:
    """Test instance creation and defaults."""

    def test_defaults(self, user_cls):
        """Test missing fields take defaults or None."""
        user = user_cls(email="a@b.co")
        assert user.username is None
        assert user.age is None
        assert user.role == "user"
        assert user.active is True
        assert user.errors == {}

    def test_mutable_defaults_are_copied(self):
        """Test instances do not share a mutable default."""
        first = Customer(name="a")
        second = Customer(name="b")
        first.tags.append("x")
        assert second.tags == []
        assert Customer.__fields__["tags"].default == []

    def test_unknown_field(self, user_cls):
        """Test unknown keyword arguments are rejected."""
        with pytest.raises(TypeError, match="nickname"):
            user_cls(email="a@b.co", nickname="x")

    def test_missing_sentinel(self):
        """Test MISSING marks fields without defaults."""
        assert Address.__fields__["street"].default is MISSING
        assert Address.__fields__["street"].get_default() is None

    def test_equality_and_repr(self, user_cls):
        """Test value equality across instances of one type."""
        a = user_cls(email="test@example.com", username="testuser")
        b = user_cls(email="test@example.com", username="testuser")
        assert a == b
        assert a != user_cls(email="other@example.com", username="testuser")
        assert "email='test@example.com'" in repr(a)


class TestModelValidation:
    """Test is_valid/validate and the error bucket."""

    def test_valid_model(self, valid_user):
        """Test a model satisfying every rule."""
        assert valid_user.is_valid()
        assert valid_user.errors == {}
        assert valid_user.validate() is True

    def test_required_fields(self, user_cls):
        """Test absent required fields get 'is required'."""
        user = user_cls()
        assert not user.is_valid()
        assert user.errors == {"email": ["is required"], "username": ["is required"]}

    def test_all_rule_failures_collected(self, user_cls):
        """Test every failing rule of every field is reported."""
        user = user_cls(email="bad", username="ab", age=-5)
        assert not user.is_valid()
        assert len(user.errors["email"]) == 2
        assert user.errors["email"] == [
            "must be at least 5 characters",
            "does not match required format",
        ]
        assert user.errors["username"] == ["must be at least 3 characters"]
        assert user.errors["age"] == ["must be >= 0"]

    def test_optional_absent_field_skipped(self, valid_user):
        """Test None on an optional field runs no validators."""
        valid_user.age = None
        assert valid_user.is_valid()

    def test_enumeration_rule(self, valid_user):
        """Test one_of on a field."""
        valid_user.role = "superuser"
        assert not valid_user.is_valid()
        assert valid_user.errors == {"role": ["must be one of: admin, user, guest"]}

    def test_wrong_type(self, valid_user):
        """Test a wrong representation fails the field's type check."""
        valid_user.active = 1
        assert not valid_user.is_valid()
        assert valid_user.errors["active"] == ["expected type bool, got int"]

    def test_revalidation_clears_errors(self, user_cls):
        """Test the bucket reflects only the latest call."""
        user = user_cls(email="bad", username="testuser")
        assert not user.is_valid()
        assert "email" in user.errors

        user.email = "fixed@example.com"
        assert user.is_valid()
        assert user.errors == {}

    def test_validate_raises(self, user_cls):
        """Test validate bundles every field's messages."""
        user = user_cls(email="bad", username="testuser")
        with pytest.raises(ModelValidationError) as exc_info:
            user.validate()

        error = exc_info.value
        assert str(error).startswith("email: must be at least 5 characters")
        assert error.errors == {
            "email": ["must be at least 5 characters", "does not match required format"]
        }
        assert error.context["fields"] == ["email"]

    def test_cross_field_rule(self, user_cls):
        """Test validate_model can record errors after field checks."""

        class GovUser(user_cls):
            def validate_model(self):
                if self.age is not None and self.age < 18 and self.email.endswith(".gov"):
                    self.add_error("email", "Government emails require age 18+")

        minor = GovUser(email="kid@agency.gov", username="kiddo", age=15)
        assert not minor.is_valid()
        assert minor.errors == {"email": ["Government emails require age 18+"]}

        adult = GovUser(email="boss@agency.gov", username="boss", age=40)
        assert adult.is_valid()

    def test_model_level_error_key(self, user_cls):
        """Test validate_model may record errors under a non-field key."""

        class Strict(user_cls):
            def validate_model(self):
                if self.role == "admin" and not self.active:
                    self.add_error("base", "inactive admin")

        model = Strict(email="x@example.com", username="xuser", role="admin", active=False)
        with pytest.raises(ModelValidationError, match="base: inactive admin"):
            model.validate()

    def test_nested_model(self):
        """Test nested model errors are reported under the parent field."""
        customer = Customer(name="Ann", address=Address(street="", zip_code="12345"))
        assert not customer.is_valid()
        assert customer.errors == {"address": ["street: must be at least 1 character"]}

        customer.address.street = "Main St"
        assert customer.is_valid()

    def test_nested_wrong_type(self):
        """Test a non-model value in a model field."""
        customer = Customer(name="Ann", address={"street": "Main St"})
        assert not customer.is_valid()
        assert customer.errors["address"] == ["expected type Address, got dict"]

    def test_list_field_elements(self):
        """Test array fields report element errors."""
        customer = Customer(name="Ann", tags=["a", 2])
        assert not customer.is_valid()
        assert customer.errors == {"tags": ["expected type str, got int"]}

    def test_field_validate_path(self, user_cls):
        """Test Field.validate roots errors at the field name."""
        result = user_cls.__fields__["username"].validate("ab")
        assert result.paths() == ["username"]

    def test_models_inside_lists(self):
        """Test models held in a list field are validated with their index."""
        board = Board(cards=[Card(label="ok"), Card(label="x"), Card()])
        assert not board.is_valid()
        assert board.errors == {
            "cards": ["[1].label: must be at least 2 characters", "[2].label: is required"]
        }

        board.cards = [Card(label="ok")]
        assert board.is_valid()

    def test_models_inside_mappings(self):
        """Test models held in a dict field are validated with their key."""
        board = Board(lanes={"todo": Card(label="")})
        assert not board.is_valid()
        assert board.errors == {"lanes": ["[todo].label: must be at least 2 characters"]}
