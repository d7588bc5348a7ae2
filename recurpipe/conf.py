from functools import wraps

WEEKDAY_NAMES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")
CALENDAR_NAMES = ("gregorian",)


class SettingValidationError(ValueError):
    pass


default_settings = {
    "WEEK_START": "MO",
    "CALENDAR": "gregorian",
    "INCLUDE_START": False,
}


class Settings:
    """Control and configure default recurrence behavior of recurpipe.

    Currently supported settings:

    * `WEEK_START`: week start used when a rule does not name one, "MO" to "SU"
    * `CALENDAR`: name of the calendar metrics, "gregorian"
    * `INCLUDE_START`: always emit the start as the first instance, even when
      it does not match the rule
    """

    _default = True

    def __init__(self, settings=None):
        if settings:
            self._updateall(settings.items())
        else:
            self._updateall(default_settings.items())

    def _updateall(self, iterable):
        for key, value in iterable:
            setattr(self, key, value)

    def as_dict(self):
        return {key: value for key, value in vars(self).items() if not key.startswith("_")}

    def replace(self, mod_settings=None, **kwds):
        for k, v in kwds.items():
            if v is None:
                raise TypeError('Invalid {{"{}": {}}}'.format(k, v))

        new_settings = self.as_dict()
        new_settings.update(mod_settings or {})
        new_settings.update(kwds)

        settings = self.__class__(new_settings)
        settings._default = False
        check_settings(settings)
        return settings

    def __repr__(self):
        return "Settings(%r)" % self.as_dict()


settings = Settings()


def apply_settings(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        mod_settings = kwargs.get("settings")

        kwargs["settings"] = mod_settings or settings

        if isinstance(kwargs["settings"], dict):
            kwargs["settings"] = settings.replace(mod_settings=kwargs["settings"])

        if not isinstance(kwargs["settings"], Settings):
            raise TypeError(
                "settings can only be either dict or instance of Settings class"
            )

        return f(*args, **kwargs)

    return wrapper


def check_settings(settings):
    """
    Check if provided settings are valid, if not it raises `SettingValidationError`.
    """
    settings_values = {
        "WEEK_START": {
            "values": WEEKDAY_NAMES,
            "type": str,
        },
        "CALENDAR": {
            "values": CALENDAR_NAMES,
            "type": str,
        },
        "INCLUDE_START": {
            "type": bool,
        },
    }

    modified_settings = settings.as_dict()

    # check settings keys:
    for key in modified_settings:
        if key not in settings_values:
            raise SettingValidationError('"{}" is not a valid setting'.format(key))

    for setting_name, setting_value in modified_settings.items():
        setting_type = type(setting_value)
        setting_props = settings_values[setting_name]

        # check type:
        if not setting_type == setting_props["type"]:
            raise SettingValidationError(
                '"{}" must be "{}", not "{}".'.format(
                    setting_name, setting_props["type"].__name__, setting_type.__name__
                )
            )

        # check values:
        if setting_props.get("values") and setting_value not in setting_props["values"]:
            raise SettingValidationError(
                '"{}" is not a valid value for "{}", it should be: "{}"'.format(
                    setting_value,
                    setting_name,
                    '" or "'.join(setting_props["values"]),
                )
            )
