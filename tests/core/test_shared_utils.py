import logging

import pytest

from mvb_shared import (
    ErrorCode,
    Result,
    content_type_for,
    get_logger,
    is_supported_video,
    request_id_var,
    sanitize_error_message,
)
from mvb_shared.log import EmojiFormatter


def test_result_ok_and_err():
    ok = Result.Ok([1, 2], count=2)
    assert ok.ok and ok.code == "OK" and ok.meta == {"count": 2}
    assert ok.unwrap() == [1, 2]

    err: Result[list] = Result.Err(ErrorCode.NOT_FOUND, "missing")
    assert not err.ok
    assert err.code == "NOT_FOUND"
    assert err.unwrap_or([]) == []
    with pytest.raises(ValueError):
        err.unwrap()


def test_result_map_only_applies_on_success():
    assert Result.Ok(2).map(lambda v: v * 3).data == 6
    err: Result[int] = Result.Err("X", "nope")
    assert err.map(lambda v: v * 3) is err


def test_supported_video_extensions_are_case_insensitive():
    for name in ("a.mp4", "b.MKV", "c.Avi", "d.mov"):
        assert is_supported_video(name)
    for name in ("e.webm", "f.txt", "noext", "mp4"):
        assert not is_supported_video(name)


def test_content_type_follows_extension_with_mp4_fallback():
    assert content_type_for("a.mp4") == "video/mp4"
    assert content_type_for("a.MKV") == "video/x-matroska"
    assert content_type_for("a.avi") == "video/x-msvideo"
    assert content_type_for("a.mov") == "video/quicktime"
    assert content_type_for("a.m4v") == "video/mp4"


def test_sanitize_error_message_masks_paths():
    msg = sanitize_error_message(RuntimeError("cannot read /srv/media/secret/file.mp4 now"), "Failed")
    assert "/srv/media" not in msg
    assert msg.startswith("Failed: ")


def test_sanitize_error_message_uses_oserror_reason_only(tmp_path):
    try:
        open(tmp_path / "missing" / "x.mp4", "rb")
    except OSError as exc:
        msg = sanitize_error_message(exc, "Media directory is not readable")
    assert str(tmp_path) not in msg
    assert msg.startswith("Media directory is not readable: ")


def test_sanitize_error_message_fallbacks():
    assert sanitize_error_message(None, "Fallback") == "Fallback"
    assert sanitize_error_message(RuntimeError(""), "") == "An error occurred"


def test_logger_is_namespaced_and_single_handler():
    logger = get_logger("mvb_backend.features.library.service")
    assert logger.name == "moviebrowser.backend.features.library.service"
    again = get_logger("mvb_backend.features.library.service")
    assert again is logger
    assert len(logger.handlers) == 1


def test_formatter_includes_request_id():
    logger = get_logger("mvb_backend.tests.formatter")
    record = logger.makeRecord(logger.name, logging.WARNING, __file__, 1, "hello", (), None)
    token = request_id_var.set("rid-123")
    try:
        for flt in logger.filters:
            flt.filter(record)
    finally:
        request_id_var.reset(token)
    line = EmojiFormatter().format(record)
    assert "[rid-123]" in line
    assert line.endswith(": hello")


def test_sanitize_error_message_debug_is_an_explicit_argument(monkeypatch):
    monkeypatch.setenv("MVB_DEBUG", "1")
    exc = RuntimeError("cannot read /srv/media/x.mp4")
    assert sanitize_error_message(exc, "Failed") == sanitize_error_message(exc, "Failed", debug=True)
    assert "/srv/media" not in sanitize_error_message(exc, "Failed", debug=True)
