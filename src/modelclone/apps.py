# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class ModelCloneConfig(AppConfig):
    name = "modelclone"
    verbose_name = _("Model duplication")

    def ready(self):
        from . import checks  # noqa
