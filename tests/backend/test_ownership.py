"""
Tests for the ownership guard and ObjectId helpers.
"""

import pytest
from bson import ObjectId


class TestOwnershipGuard:

    def test_same_identity_in_different_forms_is_owner(self):
        from app.core.ownership import is_owner

        oid = ObjectId()

        assert is_owner(str(oid), oid) is True
        assert is_owner(oid, {"_id": oid}) is True
        assert is_owner(str(oid), {"id": str(oid)}) is True

    def test_different_identity_is_not_owner(self):
        from app.core.ownership import is_owner

        assert is_owner(str(ObjectId()), ObjectId()) is False

    def test_missing_side_never_matches(self):
        from app.core.ownership import is_owner

        assert is_owner(None, None) is False
        assert is_owner(str(ObjectId()), None) is False
        assert is_owner(None, {"_id": None}) is False

    def test_ensure_owner_raises_forbidden(self):
        from app.core.exceptions import Forbidden
        from app.core.ownership import ensure_owner

        with pytest.raises(Forbidden, match="not yours"):
            ensure_owner(str(ObjectId()), ObjectId(), "not yours")


class TestObjectIdParsing:

    def test_parse_valid_id(self):
        from app.database.ids import parse_object_id

        oid = ObjectId()

        assert parse_object_id(str(oid)) == oid
        assert parse_object_id(oid) is oid

    @pytest.mark.parametrize("value", ["", None, "123", "zzzzzzzzzzzzzzzzzzzzzzzz"])
    def test_parse_invalid_id_raises_invalid_argument(self, value):
        from app.core.exceptions import InvalidArgument
        from app.database.ids import parse_object_id

        with pytest.raises(InvalidArgument):
            parse_object_id(value, "video id")
