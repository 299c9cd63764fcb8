# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
from .base import *  # noqa

#
# Standard Django settings.
#

DEBUG = False

SECRET_KEY = "modelclone-test-secret-key"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

INSTALLED_APPS = INSTALLED_APPS + [  # noqa: F405
    "modelclone.tests.testapp",
]

#
# Custom settings
#

# Show active environment
ENVIRONMENT = "test"
