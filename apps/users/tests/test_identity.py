"""Caller identity and role permissions."""

from __future__ import annotations

import pytest
from django.contrib.auth.models import AnonymousUser

from apps.users.identity import CallerIdentity
from apps.users.models import User

pytestmark = pytest.mark.django_db


def test_identity_from_student(student):
    caller = CallerIdentity.from_user(student)

    assert caller == CallerIdentity(id=student.pk, role="mahasiswa")
    assert not caller.is_admin


def test_admin_role_is_admin(admin_user):
    assert CallerIdentity.from_user(admin_user).is_admin


def test_superuser_maps_to_admin():
    superuser = User.objects.create_superuser(email="root@campus.test", password="RootPass123")
    superuser.role = User.RoleChoices.STAFF

    assert CallerIdentity.from_user(superuser).role == "admin"


def test_anonymous_user_has_no_identity():
    with pytest.raises(ValueError):
        CallerIdentity.from_user(AnonymousUser())


def test_display_name_falls_back_to_email():
    user = User.objects.create_user(email="nameless@campus.test", password="Pass12345")

    assert user.display_name == "nameless@campus.test"


def test_create_user_requires_email():
    with pytest.raises(ValueError):
        User.objects.create_user(email="", password="Pass12345")
