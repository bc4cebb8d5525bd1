"""Key-value store for the admin-wide settings blobs.

Documented keys:

``theme_settings``
    UI theme for every tenant (primary colour, logo, favicon, colour mode,
    font family, border radius, layout density).
``global_notification``
    Banner shown to all tenants (``id``, ``message``, ``isActive``).
``admin_general_settings``
    ``registration`` (``allowRegistration``, ``initialCredits``),
    ``defaultInvoice`` (``currency``, ``taxRate``) and outgoing ``mail``.

Blobs are stored with camelCase keys, the shape the frontend consumes.
"""

from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from ..errors import NotFound, ValidationError
from ..models import GlobalSetting
from ..schemas.settings import AdminGeneralSettings, GlobalNotification, ThemeSettings

THEME_SETTINGS = "theme_settings"
GLOBAL_NOTIFICATION = "global_notification"
ADMIN_GENERAL_SETTINGS = "admin_general_settings"

SETTING_MODELS: dict[str, type[BaseModel]] = {
    THEME_SETTINGS: ThemeSettings,
    GLOBAL_NOTIFICATION: GlobalNotification,
    ADMIN_GENERAL_SETTINGS: AdminGeneralSettings,
}


def _model_for(key: str) -> type[BaseModel]:
    model = SETTING_MODELS.get(key)
    if model is None:
        raise NotFound(f"Unknown setting: {key}.")
    return model


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


def default_setting(key: str) -> dict[str, Any]:
    return _dump(_model_for(key)())


def get_setting(db: Session, key: str) -> dict[str, Any]:
    model = _model_for(key)
    row = db.get(GlobalSetting, key)
    if row is None:
        return _dump(model())
    return _dump(model.model_validate({**_dump(model()), **row.value}))


def get_all_settings(db: Session) -> dict[str, dict[str, Any]]:
    return {key: get_setting(db, key) for key in SETTING_MODELS}


def set_setting(
    db: Session, key: str, value: dict[str, Any], merge: bool = True
) -> dict[str, Any]:
    model = _model_for(key)
    current = get_setting(db, key) if merge else {}
    try:
        validated = model.model_validate({**current, **value})
    except PydanticValidationError as exc:
        raise ValidationError(
            "; ".join(error["msg"] for error in exc.errors())
        ) from exc

    stored = _dump(validated)
    row = db.get(GlobalSetting, key)
    if row is None:
        db.add(GlobalSetting(key=key, value=stored))
    else:
        row.value = stored
    db.commit()
    return stored


def general_settings(db: Session) -> AdminGeneralSettings:
    return AdminGeneralSettings.model_validate(get_setting(db, ADMIN_GENERAL_SETTINGS))
