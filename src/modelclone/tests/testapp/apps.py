# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
from django.apps import AppConfig


class TestAppConfig(AppConfig):
    name = "modelclone.tests.testapp"
    label = "testapp"
