# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
import factory

from .testapp.models import (
    Child,
    Label,
    Member,
    Membership,
    Node,
    Parent,
    Person,
    Project,
    SuperParent,
    SuperParentChild,
)


class ParentFactory(factory.django.DjangoModelFactory):
    name = factory.Sequence(lambda n: "Parent {}".format(n))

    class Meta:
        model = Parent


class SuperParentFactory(ParentFactory):
    class Meta:
        model = SuperParent


class ChildFactory(factory.django.DjangoModelFactory):
    name = factory.Sequence(lambda n: "Child {}".format(n))
    parent = factory.SubFactory(ParentFactory)

    class Meta:
        model = Child


class SuperParentChildFactory(factory.django.DjangoModelFactory):
    name = factory.Sequence(lambda n: "Child {}".format(n))
    parent = factory.SubFactory(SuperParentFactory)

    class Meta:
        model = SuperParentChild


class MemberFactory(factory.django.DjangoModelFactory):
    name = factory.Sequence(lambda n: "Member {}".format(n))

    class Meta:
        model = Member


class LabelFactory(factory.django.DjangoModelFactory):
    name = factory.Sequence(lambda n: "label-{}".format(n))

    class Meta:
        model = Label


class ProjectFactory(factory.django.DjangoModelFactory):
    title = factory.Sequence(lambda n: "Project {}".format(n))

    class Meta:
        model = Project

    @factory.post_generation
    def members(self, create, extracted, **kwargs):
        # optional M2M, do nothing when no arguments are passed
        if not create or not extracted:
            return

        for member in extracted:
            Membership.objects.create(project=self, member=member)

    @factory.post_generation
    def labels(self, create, extracted, **kwargs):
        if not create or not extracted:
            return

        self.labels.add(*extracted)


class NodeFactory(factory.django.DjangoModelFactory):
    name = factory.Sequence(lambda n: "node-{}".format(n))

    class Meta:
        model = Node


class PersonFactory(factory.django.DjangoModelFactory):
    name = factory.Sequence(lambda n: "Person {}".format(n))

    class Meta:
        model = Person
