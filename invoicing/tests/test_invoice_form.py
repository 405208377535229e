import pytest

from invoicing.domain.invoice_form import validate_invoice_form, FIELD_MESSAGES


def test_valid_form_coerces_amount():
    data, errors = validate_invoice_form({"customerId": "c1", "amount": "12.34", "status": "paid"})
    assert errors == {}
    assert data.customer_id == "c1"
    assert data.amount == pytest.approx(12.34)
    assert data.status == "paid"


def test_snake_case_customer_id_accepted():
    data, errors = validate_invoice_form({"customer_id": "c1", "amount": 5, "status": "pending"})
    assert errors == {}
    assert data.customer_id == "c1"


@pytest.mark.parametrize("amount", ["0", "-1", "-0.01", 0, -20, "abc", "", None, "nan", "inf", "1e", "$12"])
def test_bad_amounts_fail_on_amount_only(amount):
    data, errors = validate_invoice_form({"customerId": "c1", "amount": amount, "status": "pending"})
    assert data is None
    assert errors == {"amount": [FIELD_MESSAGES["amount"]]}


@pytest.mark.parametrize("customer", [None, "", "   "])
def test_missing_customer(customer):
    data, errors = validate_invoice_form({"customerId": customer, "amount": "10", "status": "paid"})
    assert data is None
    assert errors == {"customerId": ["Please select a customer."]}


@pytest.mark.parametrize("status", [None, "", "overdue", "PAID"])
def test_status_outside_enum(status):
    data, errors = validate_invoice_form({"customerId": "c1", "amount": "10", "status": status})
    assert data is None
    assert errors == {"status": ["Please select an invoice status."]}


def test_empty_form_reports_every_field_once():
    data, errors = validate_invoice_form({})
    assert data is None
    assert errors == {
        "customerId": ["Please select a customer."],
        "amount": ["Please enter an amount greater than $0."],
        "status": ["Please select an invoice status."],
    }


@pytest.mark.parametrize("amount", ["0.004", 0.0049, "1e-9"])
def test_amount_rounding_to_zero_cents_is_rejected(amount):
    data, errors = validate_invoice_form({"customerId": "c1", "amount": amount, "status": "paid"})
    assert data is None
    assert errors == {"amount": ["Please enter an amount greater than $0."]}


def test_smallest_accepted_amount_is_one_cent():
    data, errors = validate_invoice_form({"customerId": "c1", "amount": "0.005", "status": "paid"})
    assert errors == {}
    assert data.amount == pytest.approx(0.005)


@pytest.mark.parametrize("amount", ["1e20", "92233720368547758.08", "1e300", 10**30])
def test_amount_beyond_integer_column_is_rejected(amount):
    data, errors = validate_invoice_form({"customerId": "c1", "amount": amount, "status": "paid"})
    assert data is None
    assert errors == {"amount": ["Please enter a smaller amount."]}
