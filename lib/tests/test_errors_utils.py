from qc_client.errors_utils import error_message


def test_error_message_prefers_backend_error_field() -> None:
    assert error_message({"success": False, "error": "Defect not found"}, "fallback") == "Defect not found"
    assert error_message({"detail": "nope"}, "fallback") == "nope"


def test_error_message_falls_back() -> None:
    assert error_message({"success": False}, "fallback") == "fallback"
    assert error_message({"error": "  "}, "fallback") == "fallback"
    assert error_message("text", "fallback") == "fallback"
