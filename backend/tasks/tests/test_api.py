# backend/tasks/tests/test_api.py
import datetime

from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

TASKS_URL = "/api/tasks"


class TaskApiTests(APITestCase):
    def _create(self, title="Task", **extra):
        response = self.client.post(TASKS_URL, {"title": title, **extra}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.content)
        return response.json()

    def test_create(self):
        body = self._create("Write docs", dueDate="2025-09-15", progress=50)
        self.assertEqual(
            set(body),
            {"id", "title", "dueDate", "progress", "completed", "createdAt", "updatedAt"},
        )
        self.assertEqual(body["title"], "Write docs")
        self.assertEqual(body["dueDate"], "2025-09-15")
        self.assertEqual(body["progress"], 0)
        self.assertIs(body["completed"], False)
        # ISO 8601
        datetime.datetime.fromisoformat(body["createdAt"].replace("Z", "+00:00"))

    def test_create_without_due_date(self):
        self.assertIsNone(self._create()["dueDate"])

    def test_create_validation_error(self):
        response = self.client.post(TASKS_URL, {"title": "", "dueDate": "bad"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        body = response.json()
        self.assertEqual(body["code"], "VALIDATION_ERROR")
        self.assertEqual(body["error"], "Validation failed")
        self.assertEqual(len(body["details"]), 2)

    def test_create_rejects_non_object_body(self):
        response = self.client.post(TASKS_URL, ["title"], format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_malformed_json(self):
        response = self.client.post(TASKS_URL, data="{not json", content_type="application/json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["code"], "PARSE_ERROR")

    def test_unsupported_content_type(self):
        response = self.client.post(TASKS_URL, data="title=x", content_type="text/plain")
        self.assertEqual(response.status_code, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE)
        self.assertEqual(response.json()["code"], "UNSUPPORTED_MEDIA_TYPE")

    def test_get_one(self):
        created = self._create("T", dueDate="2025-09-15")
        response = self.client.get(f"{TASKS_URL}/{created['id']}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), created)

    def test_get_missing(self):
        response = self.client.get(f"{TASKS_URL}/999")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()["code"], "TASK_NOT_FOUND")

    def test_get_invalid_id(self):
        response = self.client.get(f"{TASKS_URL}/abc")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("invalid", response.json()["error"].lower())

    def test_list(self):
        for i in range(3):
            self._create(f"T{i}")
        response = self.client.get(TASKS_URL, {"limit": 1, "offset": 1})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(len(body["tasks"]), 1)
        self.assertEqual(body["tasks"][0]["title"], "T1")
        self.assertEqual(body["pagination"]["total"], 3)
        self.assertIs(body["pagination"]["hasMore"], True)
        self.assertEqual(body["sort"], {"sortBy": "createdAt", "sortOrder": "desc"})

    def test_list_filters_and_sort(self):
        a = self._create("a")
        self._create("b")
        self.client.patch(f"{TASKS_URL}/{a['id']}/toggle")
        response = self.client.get(TASKS_URL, {"completed": "true", "sortBy": "title", "sortOrder": "asc", "x": "1"})
        body = response.json()
        self.assertEqual([t["id"] for t in body["tasks"]], [a["id"]])
        self.assertEqual(body["filters"], {"completed": True})

    def test_list_blank_sort_is_not_an_error(self):
        response = self.client.get(TASKS_URL, {"sortBy": " ", "sortOrder": " "})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["sort"], {"sortBy": "createdAt", "sortOrder": "desc"})

    def test_list_bad_query(self):
        response = self.client.get(TASKS_URL, {"progressMin": 150, "dueDateFrom": "not-a-date"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        body = response.json()
        self.assertEqual(body["code"], "VALIDATION_ERROR")
        joined = " ".join(body["details"])
        self.assertIn("progressMin", joined)
        self.assertIn("dueDateFrom", joined)

    def test_put(self):
        created = self._create()
        response = self.client.put(f"{TASKS_URL}/{created['id']}", {"progress": 100}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual((response.json()["progress"], response.json()["completed"]), (100, True))

        response = self.client.put(f"{TASKS_URL}/{created['id']}", {"completed": False}, format="json")
        self.assertEqual((response.json()["progress"], response.json()["completed"]), (100, False))

    def test_put_errors(self):
        created = self._create()
        response = self.client.put(f"{TASKS_URL}/{created['id']}", {"progress": "high"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.put(f"{TASKS_URL}/999", {"title": "x"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete(self):
        created = self._create()
        url = f"{TASKS_URL}/{created['id']}"
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(response.content, b"")
        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_404_NOT_FOUND)

    def test_patch_progress(self):
        created = self._create()
        url = f"{TASKS_URL}/{created['id']}/progress"
        response = self.client.patch(url, {"progress": 45}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["progress"], 45)

        self.assertEqual(self.client.patch(url, {}, format="json").status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            self.client.patch(f"{TASKS_URL}/999/progress", {"progress": 1}, format="json").status_code,
            status.HTTP_404_NOT_FOUND,
        )

    def test_patch_toggle(self):
        created = self._create()
        response = self.client.patch(f"{TASKS_URL}/{created['id']}/toggle")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual((response.json()["completed"], response.json()["progress"]), (True, 100))

    def test_overdue_list(self):
        today = timezone.localdate()
        late = self._create("late", dueDate=(today - datetime.timedelta(days=1)).isoformat())
        self._create("today", dueDate=today.isoformat())
        response = self.client.get(f"{TASKS_URL}/overdue/list")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t["id"] for t in response.json()["tasks"]], [late["id"]])

    def test_stats_summary(self):
        response = self.client.get(f"{TASKS_URL}/stats/summary")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {
            "total": 0,
            "completed": 0,
            "inProgress": 0,
            "notStarted": 0,
            "overdue": 0,
            "completionRate": 0,
        })


class ServiceEndpointTests(APITestCase):
    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")

    def test_api_info(self):
        body = self.client.get("/api").json()
        self.assertIn("POST /api/tasks", body["endpoints"])

    def test_root(self):
        self.assertEqual(self.client.get("/").json()["documentation"], "/api")

    def test_request_id_is_echoed(self):
        response = self.client.get("/health", HTTP_X_REQUEST_ID="abc123")
        self.assertEqual(response["X-Request-ID"], "abc123")
        self.assertTrue(self.client.get("/health")["X-Request-ID"])

    def test_method_not_allowed(self):
        response = self.client.post("/api/tasks/stats/summary", {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(response.json()["code"], "METHOD_NOT_ALLOWED")
