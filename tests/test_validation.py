from datetime import date

from app.validation import coerce_startup_fields, validate_credentials, validate_startup

from payloads import VALID_FIELDS


def _doc(**overrides):
    doc = coerce_startup_fields(VALID_FIELDS)
    doc["startup_owner"] = 1
    doc.update(overrides)
    return doc


def _fields(violations):
    return {field for field, _ in violations}


def test_coerce_turns_text_into_values():
    doc = coerce_startup_fields(
        {
            "funding_amount": "1000",
            "years_in_op": "2.5",
            "newsletter_subscription": "false",
            "founded_date": "2019-01-31",
            "preferred_contact_method": "Email, Fax",
        }
    )
    assert doc["funding_amount"] == 1000 and isinstance(doc["funding_amount"], int)
    assert doc["years_in_op"] == 2.5
    assert doc["newsletter_subscription"] is False
    assert doc["founded_date"] == date(2019, 1, 31)
    assert doc["preferred_contact_method"] == ["Email", "Fax"]


def test_coerce_leaves_bad_values_for_validation():
    doc = coerce_startup_fields({"funding_amount": "lots", "founded_date": "yesterday"})
    assert doc == {"funding_amount": "lots", "founded_date": "yesterday"}
    assert {"fundingAmount", "foundedDate"} <= _fields(validate_startup(_doc(**doc)))


def test_valid_document_has_no_violations():
    assert validate_startup(_doc()) == []


def test_length_bounds():
    violations = validate_startup(_doc(name="A", tagline="x" * 161, revenue_model="short"))
    assert _fields(violations) == {"name", "tagline", "revenueModel"}


def test_enum_membership():
    violations = validate_startup(
        _doc(industry="retail", stage="growth", business_model="B2G", funding_status="ipo")
    )
    assert _fields(violations) == {"industry", "stage", "businessModel", "fundingStatus"}


def test_numeric_ranges():
    assert _fields(validate_startup(_doc(funding_amount=-1))) == {"fundingAmount"}
    assert _fields(validate_startup(_doc(years_in_op=10001))) == {"yearsInOp"}
    assert validate_startup(_doc(years_in_op=10000, funding_amount=0)) == []


def test_contact_methods_must_be_known():
    violations = validate_startup(_doc(preferred_contact_method=["Email", "Pigeon"]))
    assert _fields(violations) == {"preferredContactMethod"}


def test_required_fields_and_owner():
    violations = validate_startup({})
    assert {"name", "tagline", "industry", "foundedDate", "startupOwner"} <= _fields(violations)


def test_credentials_rules():
    assert validate_credentials("ab", "Str0ng!pw") == []
    assert _fields(validate_credentials("a", "Str0ng!pw")) == {"username"}
    assert _fields(validate_credentials("ab", "weakpassword")) == {"password"}
    assert _fields(validate_credentials("ab", "S1!a")) == {"password"}
    assert _fields(validate_credentials(None, None)) == {"username", "password"}


def test_non_finite_numbers():
    doc = coerce_startup_fields({"funding_amount": "inf", "years_in_op": "nan"})
    assert _fields(validate_startup(_doc(**doc))) == {"fundingAmount", "yearsInOp"}
