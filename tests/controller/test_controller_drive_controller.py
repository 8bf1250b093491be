import json
import unittest
from datetime import datetime, timezone
from unittest.mock import Mock, patch

from gdataminer.controller.base import RetryPolicy
from gdataminer.controller.drive_controller import (
    GoogleDriveController,
    _file_dict_to_item,
    _permission_to_rule,
)
from gdataminer.errors import NotFoundError, PermissionError, RateLimitError
from gdataminer.models import ItemKind
from gdataminer.util.time import to_rfc3339


def _http_error(status: int, reason: str, message: str = "err"):
    from googleapiclient.errors import HttpError

    resp = Mock()
    resp.status = status
    resp.reason = reason
    body = {"error": {"message": message, "errors": [{"reason": reason}]}}
    return HttpError(resp=resp, content=json.dumps(body).encode("utf-8"))


class TestDriveControllerHelpers(unittest.TestCase):
    def test_file_dict_to_item_parses_fields(self) -> None:
        dt = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
        data = {
            "id": "F1",
            "name": "Report",
            "mimeType": "application/vnd.google-apps.document",
            "parents": ["P1", "P2"],
            "starred": True,
            "webViewLink": "https://docs.google.com/document/d/F1",
            "modifiedTime": to_rfc3339(dt),
            "createdTime": to_rfc3339(dt),
            "owners": [{"displayName": "Alice", "emailAddress": "alice@example.com"}],
        }
        item = _file_dict_to_item(data)
        self.assertEqual(item.provider_id, "F1")
        self.assertEqual(item.kind, ItemKind.DOCUMENT)
        self.assertEqual(item.title, "Report")
        self.assertEqual(item.modified_time, dt)
        self.assertTrue(item.starred)
        self.assertEqual([p.provider_id for p in item.parents], ["P1", "P2"])
        self.assertTrue(all(p.kind is ItemKind.FOLDER for p in item.parents))
        self.assertEqual(item.authors[0].email, "alice@example.com")
        self.assertIsNone(item.media)
        self.assertIsNone(item.access_rules)

    def test_file_dict_to_item_reads_image_metadata(self) -> None:
        data = {
            "id": "I1",
            "name": "img.jpg",
            "mimeType": "image/jpeg",
            "imageMediaMetadata": {
                "width": 4000,
                "height": 3000,
                "cameraMake": "Canon",
                "cameraModel": "EOS 5D",
                "exposureTime": 0.004,
                "aperture": 2.8,
                "isoSpeed": 200,
            },
        }
        item = _file_dict_to_item(data)
        self.assertEqual(item.kind, ItemKind.PHOTO)
        self.assertIsNotNone(item.media)
        self.assertEqual(item.media.width, 4000)
        self.assertEqual(item.media.camera_make, "Canon")
        self.assertEqual(item.media.iso, 200)
        self.assertIsNone(item.modified_time)

    def test_permission_to_rule(self) -> None:
        rule = _permission_to_rule({"type": "anyone", "role": "reader"})
        self.assertEqual(rule.scope_type, "default")
        rule = _permission_to_rule({"type": "user", "emailAddress": "b@example.com"})
        self.assertEqual((rule.scope_type, rule.scope_value), ("user", "b@example.com"))
        rule = _permission_to_rule({"type": "domain", "domain": "example.com"})
        self.assertEqual((rule.scope_type, rule.scope_value), ("domain", "example.com"))
        self.assertIsNone(_permission_to_rule({"type": "unknown"}))
        self.assertIsNone(_permission_to_rule("junk"))


class TestDriveControllerMocked(unittest.TestCase):
    def _mock_service_with_list(self, files_payload, next_token=None):
        service = Mock()
        files_resource = Mock()
        request = Mock()

        service.files.return_value = files_resource
        request.execute.return_value = {
            "files": files_payload,
            "nextPageToken": next_token,
        }
        files_resource.list.return_value = request
        return service, files_resource, request

    def test_list_page_returns_cursor(self) -> None:
        service, files_resource, _ = self._mock_service_with_list(
            [{"id": "F1", "name": "a", "mimeType": "text/plain"}],
            next_token="tok",
        )
        controller = GoogleDriveController.from_service(service, page_size=10)

        page = controller.list_page(None)

        self.assertEqual([i.provider_id for i in page.items], ["F1"])
        self.assertEqual(page.next_cursor, "tok")
        kwargs = files_resource.list.call_args.kwargs
        self.assertEqual(kwargs["q"], "trashed=false")
        self.assertEqual(kwargs["pageSize"], 10)
        self.assertIsNone(kwargs["pageToken"])

    def test_list_page_empty_token_means_end(self) -> None:
        service, _, _ = self._mock_service_with_list([], next_token="")
        controller = GoogleDriveController.from_service(service)
        self.assertIsNone(controller.list_page("c1").next_cursor)

    def test_list_children_includes_supports_all_drives_kwargs(self) -> None:
        service, files_resource, _ = self._mock_service_with_list([])
        controller = GoogleDriveController.from_service(service, supports_all_drives=True)

        controller.list_children("P1")

        kwargs = files_resource.list.call_args.kwargs
        self.assertTrue(kwargs.get("supportsAllDrives"))
        self.assertTrue(kwargs.get("includeItemsFromAllDrives"))
        self.assertIn("'P1' in parents", kwargs["q"])

    def test_list_children_without_all_drives(self) -> None:
        service, files_resource, _ = self._mock_service_with_list([])
        controller = GoogleDriveController.from_service(service, supports_all_drives=False)

        controller.list_children("P1")

        kwargs = files_resource.list.call_args.kwargs
        self.assertNotIn("supportsAllDrives", kwargs)

    def test_folders_have_no_child_listing(self) -> None:
        controller = GoogleDriveController.from_service(Mock())
        folder = _file_dict_to_item(
            {"id": "D1", "mimeType": "application/vnd.google-apps.folder"}
        )
        self.assertEqual(folder.kind, ItemKind.FOLDER)
        self.assertFalse(controller.has_children(folder))

    def test_list_access_rules_follows_pages(self) -> None:
        service = Mock()
        permissions = Mock()
        req = Mock()
        service.permissions.return_value = permissions
        permissions.list.return_value = req
        req.execute.side_effect = [
            {
                "permissions": [{"type": "user", "emailAddress": "a@example.com"}],
                "nextPageToken": "p2",
            },
            {"permissions": [{"type": "anyone"}]},
        ]
        controller = GoogleDriveController.from_service(service)

        rules = controller.list_access_rules("F1")

        self.assertEqual([r.scope_type for r in rules], ["user", "default"])
        self.assertEqual(permissions.list.call_args.kwargs["pageToken"], "p2")
        self.assertEqual(permissions.list.call_args.kwargs["fileId"], "F1")

    def test_list_maps_http_404_to_not_found(self) -> None:
        service, _, req = self._mock_service_with_list([])
        req.execute.side_effect = _http_error(404, "notFound")
        controller = GoogleDriveController.from_service(service)

        with self.assertRaises(NotFoundError):
            controller.list_page(None)

    def test_permission_error_is_not_retried(self) -> None:
        service, _, req = self._mock_service_with_list([])
        req.execute.side_effect = _http_error(403, "insufficientPermissions")
        controller = GoogleDriveController.from_service(service)

        with patch("time.sleep", return_value=None) as sleep:
            with self.assertRaises(PermissionError):
                controller.list_page(None)

        self.assertEqual(req.execute.call_count, 1)
        sleep.assert_not_called()

    def test_retry_on_429(self) -> None:
        service, _, req = self._mock_service_with_list([])
        http_err = _http_error(429, "rateLimitExceeded", "rate limited")

        # Fail twice, then succeed.
        req.execute.side_effect = [
            http_err,
            http_err,
            {"files": [{"id": "F1", "name": "n", "mimeType": "text/plain"}]},
        ]
        controller = GoogleDriveController.from_service(service)

        with patch("time.sleep", return_value=None) as sleep:
            page = controller.list_page(None)

        self.assertEqual(page.items[0].provider_id, "F1")
        self.assertEqual(req.execute.call_count, 3)
        self.assertEqual([c.args[0] for c in sleep.call_args_list], [1.0, 2.0])

    def test_retry_on_403_user_rate_limit(self) -> None:
        service, _, req = self._mock_service_with_list([])
        req.execute.side_effect = [
            _http_error(403, "userRateLimitExceeded"),
            {"files": []},
        ]
        controller = GoogleDriveController.from_service(service)

        with patch("time.sleep", return_value=None):
            page = controller.list_page(None)

        self.assertEqual(page.items, [])
        self.assertEqual(req.execute.call_count, 2)

    def test_retry_on_5xx_and_network(self) -> None:
        service, _, req = self._mock_service_with_list([])
        req.execute.side_effect = [
            _http_error(503, "backendError"),
            TimeoutError("slow"),
            {"files": []},
        ]
        controller = GoogleDriveController.from_service(service)

        with patch("time.sleep", return_value=None):
            controller.list_page(None)

        self.assertEqual(req.execute.call_count, 3)

    def test_map_429_to_rate_limit_error_after_retries(self) -> None:
        service, _, req = self._mock_service_with_list([])
        req.execute.side_effect = _http_error(429, "rateLimitExceeded", "rate limited")
        controller = GoogleDriveController.from_service(
            service,
            retry_policy=RetryPolicy(max_retries=2, initial_delay_sec=0.5),
        )

        with patch("time.sleep", return_value=None):
            with self.assertRaises(RateLimitError):
                controller.list_page(None)

        self.assertEqual(req.execute.call_count, 3)


if __name__ == "__main__":
    unittest.main()
