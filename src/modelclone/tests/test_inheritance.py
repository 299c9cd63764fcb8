# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
from datetime import date

from django.test import SimpleTestCase, TestCase

from modelclone import (
    PolicyBuilder,
    PolicyRegistry,
    RelationKind,
    duplicate,
    persist,
    related,
)
from modelclone.inheritance import find_inherited_policy, get_ancestors

from .factories import ChildFactory, SuperParentChildFactory, SuperParentFactory
from .testapp.models import (
    ArchivedParent,
    Child,
    LegacySuperParent,
    Parent,
    SuperParent,
    SuperParentChild,
)
from .utils import RegistryMixin


class AncestorTests(SimpleTestCase):
    def test_proxy_ancestors(self):
        self.assertEqual(get_ancestors(SuperParent), (Parent,))

    def test_multi_table_ancestors(self):
        self.assertEqual(get_ancestors(ArchivedParent), (Parent,))

    def test_no_ancestors(self):
        self.assertEqual(get_ancestors(Parent), ())

    def test_nearest_first(self):
        self.assertEqual(get_ancestors(LegacySuperParent), (SuperParent, Parent))


class InheritedPolicyTests(SimpleTestCase):
    def setUp(self):
        super().setUp()
        self.registry = PolicyRegistry()

    def test_propagating_ancestor(self):
        self.registry.define(Parent, PolicyBuilder().enable().propagate())

        policy = find_inherited_policy(SuperParent, self.registry)

        self.assertIsNotNone(policy)
        self.assertIs(policy.model, SuperParent)
        self.assertTrue(policy.enabled)

    def test_ancestor_without_propagate(self):
        self.registry.define(Parent, PolicyBuilder().enable())

        self.assertIsNone(find_inherited_policy(SuperParent, self.registry))
        self.assertIsNone(self.registry.resolve(SuperParent))

    def test_explicit_policy_wins(self):
        self.registry.define(Parent, PolicyBuilder().enable().propagate())
        explicit = self.registry.define(SuperParent, PolicyBuilder())

        self.assertIs(self.registry.resolve(SuperParent), explicit)

    def test_nearest_ancestor_with_a_policy_decides(self):
        self.registry.define(Parent, PolicyBuilder().enable().propagate())
        self.registry.define(SuperParent, PolicyBuilder().enable())

        self.assertIsNone(self.registry.resolve(LegacySuperParent))

    def test_inherits_from_the_nearest_propagating_ancestor(self):
        self.registry.define(Parent, PolicyBuilder().propagate())
        nearest = self.registry.define(
            SuperParent, PolicyBuilder().enable().propagate().clone("children")
        )

        policy = self.registry.resolve(LegacySuperParent)

        self.assertIs(policy.model, LegacySuperParent)
        self.assertTrue(policy.enabled)
        self.assertIs(policy.directives, nearest.directives)

    def test_skips_ancestors_without_a_policy(self):
        self.registry.define(Parent, PolicyBuilder().enable().propagate())

        policy = self.registry.resolve(LegacySuperParent)

        self.assertIs(policy.model, LegacySuperParent)

    def test_inherits_directives_and_recognized_kinds(self):
        self.registry.define(
            Parent,
            PolicyBuilder()
            .enable()
            .propagate()
            .recognize(["has_one"])
            .clone("profile"),
        )

        policy = self.registry.resolve(SuperParent)

        self.assertEqual(policy.recognized, frozenset([RelationKind.to_one]))
        self.assertEqual(policy.get_relationship_directive("profile"), "clone")


class SingleTableInheritanceTests(RegistryMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.original = SuperParentFactory.create()
        ChildFactory.create_batch(3, parent=self.original)

    def test_with_propagate(self):
        self.define(Parent, PolicyBuilder().enable().propagate().clone("children"))

        copy = duplicate(self.original, registry=self.registry)

        self.assertIsInstance(copy, SuperParent)
        self.assertEqual(len(related(copy, "children")), 3)

        persist(copy)

        self.assertEqual(Child.objects.count(), 6)

    def test_without_propagate(self):
        self.define(Parent, PolicyBuilder().enable().clone("children"))

        copy = duplicate(self.original, registry=self.registry)

        self.assertEqual(related(copy, "children"), [])
        persist(copy)
        self.assertEqual(Child.objects.count(), 3)

    def test_explicit_subtype_policy_is_not_overridden(self):
        self.define(Parent, PolicyBuilder().enable().propagate().clone("children"))
        self.define(SuperParent, PolicyBuilder().enable())

        copy = duplicate(self.original, registry=self.registry)

        self.assertEqual(related(copy, "children"), [])

    def test_child_associated_to_inherited_type(self):
        SuperParentChildFactory.create_batch(3, parent=self.original)
        self.define(
            Parent, PolicyBuilder().enable().propagate().clone("sub_children")
        )

        copy = duplicate(self.original, registry=self.registry)

        self.assertEqual(len(related(copy, "sub_children")), 3)

        persist(copy)

        self.assertEqual(SuperParentChild.objects.count(), 6)
        self.assertEqual(copy.sub_children.count(), 3)
        # the relationship only exists for the subtype
        self.assertEqual(Child.objects.count(), 3)


class MultiTableInheritanceTests(RegistryMixin, TestCase):
    def test_duplicate_subclass_instance(self):
        original = ArchivedParent.objects.create(
            name="Archived", archived_on=date(2024, 5, 1)
        )
        ChildFactory.create_batch(2, parent=original)
        self.define(Parent, PolicyBuilder().enable().propagate().clone("children"))

        copy = duplicate(original, registry=self.registry)

        self.assertIsNone(copy.pk)
        self.assertIsNone(copy.parent_ptr_id)
        self.assertEqual(copy.name, "Archived")
        self.assertEqual(copy.archived_on, date(2024, 5, 1))

        persist(copy)

        self.assertNotEqual(copy.pk, original.pk)
        self.assertEqual(ArchivedParent.objects.count(), 2)
        self.assertEqual(Parent.objects.count(), 2)
        self.assertEqual(Child.objects.filter(parent=copy.pk).count(), 2)
        self.assertEqual(Child.objects.filter(parent=original.pk).count(), 2)
