#!/usr/bin/env python
# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
"""
Run management commands against the modelclone test project.

    python src/manage.py test modelclone
    python src/manage.py check
"""
import sys

from modelclone.setup import setup_env


def main(argv=None):
    setup_env()

    from django.core.management import execute_from_command_line

    execute_from_command_line(argv or sys.argv)


if __name__ == "__main__":
    main()
