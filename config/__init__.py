import os

_MODULES_BY_ENV = {
    "development": "config.development",
    "dev": "config.development",
    "testing": "config.testing",
    "test": "config.testing",
    "production": "config.production",
    "prod": "config.production",
}


def get_settings_module() -> str:
    """Dotted path of the settings module for this process.

    VISION_SETTINGS names a module directly; otherwise APP_ENV picks one of the
    bundled modules, falling back to development for unknown values.
    """
    explicit = os.getenv("VISION_SETTINGS", "").strip()
    if explicit:
        return explicit
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _MODULES_BY_ENV.get(env, "config.development")
