from chamber.core.errors import format_validation_error


def test_missing_field():
    assert format_validation_error([{"type": "missing", "loc": ("body", "email"), "msg": "Field required"}]) == "email is required"


def test_validator_message_passes_through():
    errors = [{"type": "value_error", "loc": ("body", "title"), "msg": "Value error, Title is required"}]
    assert format_validation_error(errors) == "Title is required"


def test_other_errors_are_labelled():
    errors = [{"type": "int_parsing", "loc": ("path", "id"), "msg": "Input should be a valid integer"}]
    assert format_validation_error(errors) == "id: Input should be a valid integer"


def test_empty():
    assert format_validation_error([]) == "Invalid request"
