from api.response import error_response, success_response


def test_success_envelope_carries_data_and_meta() -> None:
    payload = success_response([{"id": "report-1", "status": "pending"}], {"count": 1})

    assert payload == {
        "success": True,
        "data": [{"id": "report-1", "status": "pending"}],
        "meta": {"count": 1},
    }


def test_success_envelope_defaults_meta_to_empty_object() -> None:
    assert success_response(None)["meta"] == {}


def test_error_envelope_has_code_and_message_only() -> None:
    payload = error_response("INVALID_TRANSITION", "cannot move report from completed to pending")

    assert payload == {
        "success": False,
        "error": {"code": "INVALID_TRANSITION", "message": "cannot move report from completed to pending"},
    }
