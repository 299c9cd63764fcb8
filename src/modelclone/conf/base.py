# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
import os

import structlog

from .includes.environ import config

# Build paths inside the project like this: os.path.join(BASE_DIR, ...)
DJANGO_PROJECT_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), os.path.pardir)
)
BASE_DIR = os.path.abspath(
    os.path.join(DJANGO_PROJECT_DIR, os.path.pardir, os.path.pardir)
)

#
# Core Django settings
#
SECRET_KEY = config("SECRET_KEY", default="")

DEBUG = config("DEBUG", default=False)

ALLOWED_HOSTS = config("ALLOWED_HOSTS", default=[], split=True)

DATABASES = {
    "default": {
        "ENGINE": config("DB_ENGINE", default="django.db.backends.sqlite3"),
        "NAME": config(
            "DB_NAME", default=os.path.join(BASE_DIR, "modelclone.sqlite3")
        ),
        "USER": config("DB_USER", default=""),
        "PASSWORD": config("DB_PASSWORD", default=""),
        "HOST": config("DB_HOST", default=""),
        "PORT": config("DB_PORT", default=""),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.AutoField"

INSTALLED_APPS = [
    # Project applications.
    "modelclone",
]

USE_TZ = True

TIME_ZONE = "UTC"

#
# LOGGING
#
LOG_LEVEL = config(
    "LOG_LEVEL",
    default="WARNING",
    help_text="Log level of the modelclone loggers.",
)
LOG_FORMAT_CONSOLE = config(
    "LOG_FORMAT_CONSOLE",
    default="json",
    help_text="Format of the console logs, either ``json`` or ``plain_console``.",
)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processor": structlog.processors.JSONRenderer(),
        },
        "plain_console": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processor": structlog.dev.ConsoleRenderer(),
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": LOG_FORMAT_CONSOLE,
        },
    },
    "loggers": {
        "modelclone": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "django": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": True,
        },
    },
}

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

#
# Custom settings
#
MODELCLONE_MAX_DEPTH = config(
    "MODELCLONE_MAX_DEPTH",
    default=32,
    help_text=(
        "Maximum depth of the graph of related records that is duplicated. "
        "Guards against cycles in the clone policies."
    ),
)
MODELCLONE_DEFAULT_RECOGNIZE = config(
    "MODELCLONE_DEFAULT_RECOGNIZE",
    default="to_many,to_many_through,many_to_many",
    split=True,
    help_text=(
        "Relationship kinds that are traversed for clone policies that don't "
        "specify their own."
    ),
)
