"""Unit tests for the safety gate."""

import pytest

from preview_reaper.services.safety import SafetyGate
from preview_reaper.utils.errors import UnsafeDatabaseError


@pytest.mark.parametrize("database", ["app_dev", "app_staging", "app_prod", "app_feature_prod"])
@pytest.mark.parametrize("require_preview", [True, False])
def test_protected_suffix_is_rejected(database, require_preview):
    gate = SafetyGate(require_preview_suffix=require_preview)

    with pytest.raises(UnsafeDatabaseError, match="protected database"):
        gate.check(database)


def test_protected_suffix_is_case_sensitive():
    SafetyGate(require_preview_suffix=False).check("app_PROD")


def test_protected_suffix_is_anchored():
    SafetyGate(require_preview_suffix=False).check("app_production_copy")


def test_preview_suffix_required():
    gate = SafetyGate(require_preview_suffix=True)

    with pytest.raises(UnsafeDatabaseError, match="non-preview database"):
        gate.check("app_my_feature")

    gate.check("app_my_feature_preview")


def test_preview_suffix_not_required():
    SafetyGate(require_preview_suffix=False).check("app_my_feature")


@pytest.mark.parametrize("database", ["app_x;drop_preview", "app x_preview", "app-x_preview"])
def test_unsafe_identifier_is_rejected(database):
    with pytest.raises(UnsafeDatabaseError, match="unsafe name"):
        SafetyGate().check(database)


def test_error_message_names_database():
    with pytest.raises(UnsafeDatabaseError) as exc_info:
        SafetyGate().check("app_staging")

    assert str(exc_info.value) == (
        "Error: Attempting to drop a protected database (app_staging). Operation aborted."
    )
    assert exc_info.value.database == "app_staging"
