import unittest

from gdataminer.auth import READONLY_SCOPES, AuthInfo, scopes_for


class TestAuthInfo(unittest.TestCase):
    def test_auth_info_valid_oauth(self) -> None:
        info = AuthInfo(
            kind="oauth",
            data={
                "client_secrets_file": "/tmp/client_secrets.json",
                "token_file": "/tmp/token.json",
            },
        )
        self.assertEqual(info.client_secrets_file, "/tmp/client_secrets.json")
        self.assertEqual(info.token_file, "/tmp/token.json")

    def test_auth_info_invalid_kind(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="service_account", data={})

    def test_auth_info_missing_keys(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="oauth", data={"client_secrets_file": "x"})

    def test_auth_info_blank_value(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="oauth", data={"client_secrets_file": "x", "token_file": "  "})


class TestScopesFor(unittest.TestCase):
    def test_scopes_follow_collection_order(self) -> None:
        self.assertEqual(
            scopes_for(["photos", "documents"]),
            [READONLY_SCOPES["photos"], READONLY_SCOPES["documents"]],
        )

    def test_scopes_are_read_only(self) -> None:
        for scope in scopes_for(list(READONLY_SCOPES)):
            self.assertIn("readonly", scope)

    def test_unknown_collection(self) -> None:
        with self.assertRaises(ValueError):
            scopes_for(["documents", "calendar"])


if __name__ == "__main__":
    unittest.main()
