"""Tests for domain value objects (ACL, PermissionSet, TableName) and the Role enum."""

import pytest

from cloudcode.domain.enums import PermissionVerb, Role
from cloudcode.domain.value_objects import ACL, PermissionSet, TableName

ALL_VERBS = set(PermissionVerb.values())


def _granted(perms: PermissionSet, identity: str) -> set[str]:
    """CLP verbs whose bucket holds identity."""
    return {verb for verb, bucket in perms.to_clp().items() if verb in ALL_VERBS and identity in bucket}


class TestACL:
    """ACL: per-identity read/write with a public entry; False removes the grant."""

    def test_owner_seed(self) -> None:
        acl = ACL("owner")
        assert acl.to_dict() == {"owner": {"read": True, "write": True}}

    def test_empty_without_owner(self) -> None:
        assert ACL().to_dict() == {}

    def test_revoking_both_flags_drops_entry(self) -> None:
        acl = ACL("owner")
        acl.grant("u1", read=True, write=True)
        acl.grant("u1", read=False, write=False)
        assert acl.to_dict() == {"owner": {"read": True, "write": True}}
        assert acl.get_read_access("u1") is False

    def test_revoking_write_keeps_read(self) -> None:
        acl = ACL()
        acl.grant("u1", read=True, write=True)
        acl.set_write_access("u1", False)
        assert acl.to_dict() == {"u1": {"read": True}}

    def test_public_access_uses_star(self) -> None:
        acl = ACL()
        acl.set_public_read_access(True)
        assert acl.to_dict() == {"*": {"read": True}}
        assert acl.get_public_read_access() is True
        assert acl.get_public_write_access() is False

    def test_from_dict_drops_false_flags_and_junk(self) -> None:
        acl = ACL.from_dict(
            {"u1": {"read": True, "write": False}, "u2": "bad", "*": {"read": True}}
        )
        assert acl.to_dict() == {"u1": {"read": True}, "*": {"read": True}}

    def test_copy_is_independent(self) -> None:
        acl = ACL("owner")
        clone = acl.copy()
        clone.set_read_access("u1", True)
        assert acl != clone
        assert acl.get_read_access("u1") is False


class TestPermissionSet:
    """PermissionSet: six CLP buckets, unknown CLP keys carried through."""

    def test_from_missing_clp_yields_empty_buckets(self) -> None:
        clp = PermissionSet.from_clp(None).to_clp()
        assert clp == {verb: {} for verb in PermissionVerb.values()}

    def test_apply_role_admin(self) -> None:
        perms = PermissionSet()
        perms.apply_role("a", Role.ADMIN)
        assert _granted(perms, "a") == ALL_VERBS

    def test_apply_role_editor(self) -> None:
        perms = PermissionSet()
        perms.apply_role("e", Role.EDITOR)
        assert _granted(perms, "e") == {"get", "find", "create", "update", "delete"}

    def test_apply_role_viewer(self) -> None:
        perms = PermissionSet()
        perms.apply_role("v", Role.VIEWER)
        assert _granted(perms, "v") == {"get", "find"}

    def test_apply_role_inactive_removes_everywhere(self) -> None:
        perms = PermissionSet()
        perms.apply_role("a", Role.ADMIN)
        perms.apply_role("a", Role.ADMIN, active=False)
        assert _granted(perms, "a") == set()

    def test_demotion_revokes_higher_buckets(self) -> None:
        perms = PermissionSet()
        perms.apply_role("u", Role.ADMIN)
        perms.apply_role("u", Role.VIEWER)
        assert _granted(perms, "u") == {"get", "find"}

    def test_for_collaborators(self) -> None:
        perms = PermissionSet.for_collaborators(["o", "a", "e", "v"], ["o", "a", "e"], ["o", "a"])
        clp = perms.to_clp()
        assert set(clp["get"]) == {"o", "a", "e", "v"}
        assert set(clp["update"]) == {"o", "a", "e"}
        assert set(clp["addField"]) == {"o", "a"}

    def test_unknown_keys_survive_round_trip(self) -> None:
        clp = {
            "get": {"u1": True, "u2": False},
            "count": {"*": True},
            "protectedFields": {"*": ["secret"]},
        }
        out = PermissionSet.from_clp(clp).to_clp()
        assert out["get"] == {"u1": True}
        assert out["count"] == {"*": True}
        assert out["protectedFields"] == {"*": ["secret"]}

    def test_verb_settings_survive_round_trip(self) -> None:
        clp = {
            "get": {"u1": True, "pointerFields": ["owner"]},
            "find": {"requiresAuthentication": True},
            "update": {"pointerFields": []},
        }
        perms = PermissionSet.from_clp(clp)
        perms.apply_role("v", Role.VIEWER)

        out = perms.to_clp()
        assert out["get"] == {"u1": True, "v": True, "pointerFields": ["owner"]}
        assert out["find"] == {"v": True, "requiresAuthentication": True}
        assert out["update"] == {"pointerFields": []}
        assert "pointerFields" not in perms.get
        assert "requiresAuthentication" not in perms.find


class TestTableName:
    """TableName: ct____{site}____{model}, reversible, separator-free parts."""

    def test_physical(self) -> None:
        assert TableName("acme", "Post").physical == "ct____acme____Post"
        assert str(TableName("acme", "Post")) == "ct____acme____Post"

    def test_parse_round_trip(self) -> None:
        assert TableName.parse("ct____acme____Post") == TableName("acme", "Post")

    def test_empty_part_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            TableName("", "Post")

    def test_separator_in_part_rejected(self) -> None:
        with pytest.raises(ValueError, match="____"):
            TableName("ac____me", "Post")

    def test_invalid_characters_rejected(self) -> None:
        with pytest.raises(ValueError):
            TableName("acme", "Blog Post")

    @pytest.mark.parametrize("physical", ["Post", "xx____acme____Post", "ct____acme"])
    def test_parse_rejects_outside_namespace(self, physical: str) -> None:
        with pytest.raises(ValueError):
            TableName.parse(physical)


class TestRole:
    def test_parse_known(self) -> None:
        assert Role.parse("Admin") is Role.ADMIN
        assert Role.parse("Editor") is Role.EDITOR

    @pytest.mark.parametrize("value", [None, "", "Owner", "admin"])
    def test_parse_unknown_is_viewer(self, value: str | None) -> None:
        assert Role.parse(value) is Role.VIEWER

    def test_capabilities(self) -> None:
        assert Role.ADMIN.is_admin and Role.ADMIN.can_write_content
        assert Role.EDITOR.can_write_content and not Role.EDITOR.is_admin
        assert not Role.VIEWER.can_write_content
