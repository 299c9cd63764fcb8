# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
from django.db import models
from django.utils.translation import gettext_lazy as _


class RelationKind(models.TextChoices):
    to_one = "to_one", _("To one (has one)")
    to_many = "to_many", _("To many (has many)")
    to_many_through = "to_many_through", _("To many through a join model")
    many_to_many = "many_to_many", _("Many to many (join table)")


class DirectiveType(models.TextChoices):
    clone = "clone", _("Clone")
    nullify = "nullify", _("Nullify")
    exclude = "exclude", _("Exclude")
    prepend = "prepend", _("Prepend")
    append = "append", _("Append")
    set = "set", _("Set")
    regex = "regex", _("Regex")


RELATION_KIND_ALIASES = {
    "has_one": RelationKind.to_one,
    "has_many": RelationKind.to_many,
    "has_many_through": RelationKind.to_many_through,
    "has_and_belongs_to_many": RelationKind.many_to_many,
}

DEFAULT_RECOGNIZED_KINDS = (
    RelationKind.to_many,
    RelationKind.to_many_through,
    RelationKind.many_to_many,
)

# directives that act on the copy's own fields rather than on relationships
VALUE_DIRECTIVES = (
    DirectiveType.set,
    DirectiveType.prepend,
    DirectiveType.append,
    DirectiveType.regex,
)
