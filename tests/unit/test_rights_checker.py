"""Tests for the rights checker (ACL-only, read AND write required)."""

import pytest

from cloudcode.application.dtos.document import Document
from cloudcode.application.services.rights_checker import check_rights, ensure_rights
from cloudcode.domain.exceptions import AccessDeniedException
from cloudcode.domain.value_objects.acl import ACL


def _user(user_id: str) -> Document:
    return Document("_User", user_id)


def _entity(acl: ACL | None) -> Document:
    return Document("Model", "m1", {}, acl)


@pytest.mark.parametrize("actor", [_user("u1"), _user("someone-else"), None])
def test_entity_without_acl_is_open_to_everyone(actor: Document | None) -> None:
    assert check_rights(actor, _entity(None)) is True


def test_read_and_write_grant_passes() -> None:
    acl = ACL()
    acl.grant("u1", read=True, write=True)
    assert check_rights(_user("u1"), _entity(acl)) is True


def test_read_only_grant_is_insufficient() -> None:
    acl = ACL()
    acl.set_read_access("u1", True)
    assert check_rights(_user("u1"), _entity(acl)) is False


def test_write_only_grant_is_insufficient() -> None:
    acl = ACL()
    acl.set_write_access("u1", True)
    assert check_rights(_user("u1"), _entity(acl)) is False


def test_public_read_and_write_passes_for_anyone() -> None:
    acl = ACL("owner")
    acl.set_public_read_access(True)
    acl.set_public_write_access(True)
    assert check_rights(_user("stranger"), _entity(acl)) is True
    assert check_rights(None, _entity(acl)) is True


def test_public_read_only_does_not_pass() -> None:
    acl = ACL("owner")
    acl.set_public_read_access(True)
    assert check_rights(_user("stranger"), _entity(acl)) is False


def test_user_read_plus_public_write_does_not_mix() -> None:
    """Pairs are not combined across the user and public entries."""
    acl = ACL()
    acl.set_read_access("u1", True)
    acl.set_public_write_access(True)
    assert check_rights(_user("u1"), _entity(acl)) is False


def test_anonymous_actor_denied_on_private_entity() -> None:
    assert check_rights(None, _entity(ACL("owner"))) is False


def test_ensure_rights_raises_access_denied_with_details() -> None:
    with pytest.raises(AccessDeniedException) as exc_info:
        ensure_rights(_user("u2"), _entity(ACL("owner")))
    assert exc_info.value.message == "Access denied!"
    assert exc_info.value.error_code == "ACCESS_DENIED"
    assert exc_info.value.details == {
        "class_name": "Model",
        "object_id": "m1",
        "actor_id": "u2",
    }


def test_ensure_rights_passes_silently() -> None:
    ensure_rights(_user("owner"), _entity(ACL("owner")))
