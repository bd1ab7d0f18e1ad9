import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-the-suite")
os.environ.setdefault("STARTUP_SETTINGS_PATH", os.path.join(os.getcwd(), "_pytest_settings.toml"))
