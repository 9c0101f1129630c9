import django
import pytest
from django.conf import settings


def pytest_configure():
    if not settings.configured:
        settings.configure(
            INSTALLED_APPS=["reader"],
            TEMPLATES=[
                {
                    "BACKEND": "django.template.backends.django.DjangoTemplates",
                    "APP_DIRS": True,
                }
            ],
            READER_CONTENT={},
        )
        django.setup()


@pytest.fixture
def reader_settings():
    """Temporarily override READER_CONTENT keys for one test."""
    original = dict(settings.READER_CONTENT)

    def apply(**overrides):
        settings.READER_CONTENT = {**original, **overrides}

    yield apply
    settings.READER_CONTENT = original
