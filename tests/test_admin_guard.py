import pytest

from api.exceptions import AccessDenied
from services.admin_guard import AdminKeyGuard


@pytest.fixture
def guard():
    return AdminKeyGuard("s3cr3t")


def test_correct_query_key_passes(guard):
    assert guard.authorize(query_key="s3cr3t") == "query"


def test_correct_body_key_passes(guard):
    assert guard.authorize(body_key="s3cr3t") == "body"


@pytest.mark.parametrize("query_key, body_key", [
    (None, None),
    ("", ""),
    ("wrong", None),
    (None, "wrong"),
    ("S3CR3T", None),
    ("s3cr3t ", None),
])
def test_absent_or_wrong_key_is_denied(guard, query_key, body_key):
    with pytest.raises(AccessDenied):
        guard.authorize(query_key=query_key, body_key=body_key)


def test_query_key_takes_precedence_over_body(guard):
    assert guard.authorize(query_key="s3cr3t", body_key="wrong") == "query"

    with pytest.raises(AccessDenied):
        guard.authorize(query_key="wrong", body_key="s3cr3t")


def test_mismatched_keys_are_logged(guard, caplog):
    with caplog.at_level("WARNING", logger="services.admin_guard"):
        guard.authorize(query_key="s3cr3t", body_key="other")

    assert "honoring query key" in caplog.text


@pytest.mark.parametrize("configured", [None, ""])
def test_unconfigured_secret_denies_everything(configured):
    guard = AdminKeyGuard(configured)

    assert guard.configured is False
    with pytest.raises(AccessDenied):
        guard.authorize(query_key="anything")
    with pytest.raises(AccessDenied):
        guard.authorize(query_key="")
