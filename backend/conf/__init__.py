"""
Settings and configuration for LingoStreet.

Values come from the module named by the LINGOSTREET_CONFIG environment
variable (core.settings by default), on top of conf.global_settings.
"""

import importlib
from pathlib import Path

import conf.global_settings as global_settings
from dotenv import load_dotenv
from exceptions import ImproperlyConfigured
from utils import get_env
from utils.functional import LazyObject, empty

ENVIRONMENT_VARIABLE = "LINGOSTREET_CONFIG"
ENV_FILE = Path(__file__).resolve().parent.parent.parent / ".env"
if ENV_FILE.exists():
    load_dotenv(
        str(ENV_FILE),
        verbose=False,
        override=False,
    )

# Settings that must hold a sequence of values.
TUPLE_SETTINGS = ("HISTORY_SEED", "CONTENT_BLOCK_FINISH_REASONS")


class LazySettings(LazyObject):
    """
    Loads the settings module on first attribute access and caches each
    value it hands out.
    """

    def _setup(self, name=None):
        settings_module = get_env(ENVIRONMENT_VARIABLE, "core.settings")
        if not settings_module:
            desc = ("setting %s" % name) if name else "settings"
            raise ImproperlyConfigured(
                "Requested %s, but %s is empty." % (desc, ENVIRONMENT_VARIABLE)
            )
        self._wrapped = Settings(settings_module)

    def __repr__(self):
        if self._wrapped is empty:
            return "<LazySettings [Unevaluated]>"
        return '<LazySettings "%s">' % self._wrapped.SETTINGS_MODULE

    def __getattr__(self, name):
        if self._wrapped is empty:
            self._setup(name)
        val = getattr(self._wrapped, name)
        self.__dict__[name] = val
        return val

    def __setattr__(self, name, value):
        # Swapping the wrapped settings drops every cached value.
        if name == "_wrapped":
            self.__dict__.clear()
        else:
            self.__dict__.pop(name, None)
        super().__setattr__(name, value)


class Settings:
    def __init__(self, settings_module):
        for setting in dir(global_settings):
            if setting.isupper():
                setattr(self, setting, getattr(global_settings, setting))

        self.SETTINGS_MODULE = settings_module
        mod = importlib.import_module(settings_module)

        for setting in dir(mod):
            if not setting.isupper():
                continue
            setting_value = getattr(mod, setting)
            if setting in TUPLE_SETTINGS and not isinstance(
                setting_value, (list, tuple)
            ):
                raise ImproperlyConfigured(
                    "The %s setting must be a list or a tuple." % setting
                )
            setattr(self, setting, setting_value)

        self.validate()

    def validate(self):
        low, high = global_settings.TEXT_TEMPERATURE_RANGE
        if not low <= self.TEXT_TEMPERATURE <= high:
            raise ImproperlyConfigured(
                "TEXT_TEMPERATURE must be between %s and %s, got %s."
                % (low, high, self.TEXT_TEMPERATURE)
            )
        if self.HISTORY_LIMIT < 1:
            raise ImproperlyConfigured("HISTORY_LIMIT must be at least 1.")

    def __repr__(self):
        return '<%s "%s">' % (self.__class__.__name__, self.SETTINGS_MODULE)


settings = LazySettings()
