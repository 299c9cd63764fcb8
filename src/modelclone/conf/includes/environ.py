# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
from decouple import Csv, config as _config, undefined


def config(option: str, default=undefined, *args, **kwargs):
    """
    Read ``option`` from the environment (or ``.env``/``settings.ini``).

    The cast defaults to the type of ``default``. ``split=True`` reads a comma
    separated list. ``help_text`` only serves as documentation of the option.
    """
    kwargs.pop("help_text", None)

    if "split" in kwargs:
        kwargs.pop("split")
        kwargs["cast"] = Csv()
        if default == []:
            default = ""

    if default is not undefined and default is not None:
        kwargs.setdefault("cast", type(default))
    return _config(option, default=default, *args, **kwargs)
