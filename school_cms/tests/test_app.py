import unittest

from fastapi.testclient import TestClient

from school_cms.app import create_app
from school_cms.db import InMemoryDbClient, ResourceKind
from school_cms.dependencies import get_db_client, get_storage_client
from school_cms.errors import StorageError
from school_cms.storage import InMemoryStorageClient


class FailingStorageClient(InMemoryStorageClient):
    def upload(self, data, filename, content_type):
        raise StorageError("Failed to upload file")

    def delete(self, url):
        self.deleted_urls.append(url)
        raise StorageError("Failed to delete file")


def _png(name="photo.png"):
    return {"image": (name, b"\x89PNG fake bytes", "image/png")}


class BackendApiTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.storage = InMemoryStorageClient()
        self.app = create_app()
        self.app.dependency_overrides[get_db_client] = lambda: self.db
        self.app.dependency_overrides[get_storage_client] = lambda: self.storage
        self.client = TestClient(self.app)

    def test_health(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, "Backend server is running")

    def test_news_lifecycle(self):
        response = self.client.post(
            "/api/news",
            data={"title": "A", "description": "B", "publishedAt": "2024-01-01"},
        )
        self.assertEqual(response.status_code, 200)
        created = response.json()
        self.assertEqual(
            created,
            {
                "id": created["id"],
                "title": "A",
                "description": "B",
                "image": None,
                "publishedAt": "2024-01-01T00:00:00.000Z",
            },
        )

        response = self.client.put(
            f"/api/news/{created['id']}", files=_png("cover.png")
        )
        self.assertEqual(response.status_code, 200)
        updated = response.json()
        self.assertEqual(self.storage.deleted_urls, [])
        self.assertTrue(updated["image"].startswith(self.storage.base_url + "/"))
        self.assertTrue(updated["image"].endswith("-cover.png"))
        self.assertEqual(updated["title"], "A")
        self.assertEqual(updated["publishedAt"], "2024-01-01T00:00:00.000Z")

        response = self.client.delete(f"/api/news/{created['id']}")
        self.assertEqual(response.status_code, 204)
        self.assertEqual(response.content, b"")
        self.assertEqual(self.storage.deleted_urls, [updated["image"]])
        self.assertEqual(self.client.get("/api/news").json(), [])

    def test_replacing_image_deletes_previous_blob_once(self):
        created = self.client.post(
            "/api/sarana",
            data={"name": "Lab", "description": "Science lab"},
            files=_png("old.png"),
        ).json()
        old_url = created["image"]

        response = self.client.put(
            f"/api/sarana/{created['id']}",
            data={"name": "Lab IPA"},
            files=_png("new.png"),
        )
        self.assertEqual(response.status_code, 200)
        updated = response.json()
        self.assertEqual(self.storage.deleted_urls, [old_url])
        self.assertNotEqual(updated["image"], old_url)
        self.assertEqual(updated["name"], "Lab IPA")
        self.assertEqual(updated["description"], "Science lab")
        self.assertEqual(len(self.storage.stored_objects), 1)

    def test_update_without_file_keeps_image(self):
        created = self.client.post(
            "/api/alumni", data={"title": "Angkatan 2010"}, files=_png()
        ).json()
        response = self.client.put(
            f"/api/alumni/{created['id']}", data={"title": "Angkatan 2011"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["image"], created["image"])
        self.assertEqual(self.storage.deleted_urls, [])

    def test_delete_missing_returns_404_without_blob_call(self):
        for path in (
            "news",
            "extracurriculars",
            "kalender",
            "alumni",
            "galeri",
            "sarana",
            "sejarah",
            "contacts",
        ):
            response = self.client.delete(f"/api/{path}/999")
            self.assertEqual(response.status_code, 404, path)
            self.assertIn("not found", response.json()["error"])
        self.assertEqual(self.storage.deleted_urls, [])

    def test_update_missing_returns_404(self):
        response = self.client.put("/api/news/42", data={"title": "x"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "News not found"})

    def test_get_missing_returns_404(self):
        response = self.client.get("/api/extracurriculars/5")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Extracurricular not found"})

    def test_create_then_get_round_trip(self):
        created = self.client.post(
            "/api/extracurriculars",
            data={"name": "Pramuka", "description": "Scouting"},
            files=_png("pramuka.png"),
        ).json()
        fetched = self.client.get(f"/api/extracurriculars/{created['id']}").json()
        self.assertEqual(fetched, created)
        self.assertEqual(fetched["name"], "Pramuka")
        self.assertEqual(fetched["description"], "Scouting")

    def test_list_endpoints(self):
        for path in ("news", "extracurriculars", "kalender", "alumni", "galeri",
                     "sarana", "sejarah", "contacts"):
            response = self.client.get(f"/api/{path}")
            self.assertEqual(response.status_code, 200, path)
            self.assertEqual(response.json(), [])

        self.client.post("/api/sejarah", data={"period": "1980", "text": "Founded"})
        self.client.post("/api/sejarah", data={"period": "1995", "text": "Expanded"})
        periods = {row["period"] for row in self.client.get("/api/sejarah").json()}
        self.assertEqual(periods, {"1980", "1995"})

    def test_galeri_requires_image(self):
        response = self.client.post("/api/galeri", data={"title": "Upacara"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "image is required"})
        self.assertEqual(self.db.list_rows(ResourceKind.GALERI), [])

    def test_kalender_uses_file_field(self):
        response = self.client.post(
            "/api/kalender",
            data={"title": "Kalender 2024"},
            files={"file": ("kalender 2024.pdf", b"%PDF-1.4", "application/pdf")},
        )
        self.assertEqual(response.status_code, 200)
        created = response.json()
        self.assertIn("kalender%202024.pdf", created["file"])

        response = self.client.put(
            f"/api/kalender/{created['id']}",
            files={"file": ("kalender-2025.pdf", b"%PDF-1.5", "application/pdf")},
        )
        self.assertEqual(response.json()["title"], "Kalender 2024")
        self.assertEqual(self.storage.deleted_urls, [created["file"]])
        self.assertEqual(len(self.storage.stored_objects), 1)

    def test_hero_first_row_and_update(self):
        self.assertIsNone(self.client.get("/api/hero").json())
        self.db.create_row(
            ResourceKind.HERO,
            {
                "welcome_message": "Welcome",
                "description": "Our school",
                "image": f"{self.storage.base_url}/1-hero.png",
            },
        )
        hero = self.client.get("/api/hero").json()
        self.assertEqual(hero["welcomeMessage"], "Welcome")

        response = self.client.put(
            f"/api/hero/{hero['id']}",
            data={"welcomeMessage": "Selamat Datang"},
            files=_png("hero2.png"),
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["welcomeMessage"], "Selamat Datang")
        self.assertEqual(response.json()["description"], "Our school")
        self.assertEqual(self.storage.deleted_urls, [hero["image"]])

    def test_headmaster_message_update(self):
        row = self.db.create_row(
            ResourceKind.HEADMASTER_MESSAGE,
            {
                "message": "Halo",
                "description": "Sambutan",
                "image": f"{self.storage.base_url}/1-kepsek.png",
                "headmaster_name": "Bu Sari",
            },
        )
        response = self.client.put(
            f"/api/headmaster-message/{row['id']}",
            data={"headmasterName": "Pak Budi"},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["headmasterName"], "Pak Budi")
        self.assertEqual(body["message"], "Halo")
        self.assertEqual(self.client.get("/api/headmaster-message").json(), body)

    def test_visi_misi_update(self):
        row = self.db.create_row(
            ResourceKind.VISI_MISI, {"visi": "Unggul", "misi": ["Satu"]}
        )
        response = self.client.put(
            f"/api/visi-misi/{row['id']}", json={"misi": ["Satu", "Dua"]}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(), {"id": row["id"], "visi": "Unggul", "misi": ["Satu", "Dua"]}
        )
        self.assertEqual(self.client.put("/api/visi-misi/99", json={}).status_code, 404)

    def test_contacts(self):
        response = self.client.post(
            "/api/contacts",
            json={
                "name": "Rina",
                "email": "rina@example.com",
                "phone": "08123",
                "message": "Info PPDB?",
            },
        )
        self.assertEqual(response.status_code, 201)
        contact = response.json()
        self.assertTrue(contact["createdAt"].endswith("Z"))

        self.assertEqual(self.client.get("/api/contacts").json(), [contact])

        response = self.client.delete(f"/api/contacts/{contact['id']}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), contact)
        self.assertEqual(self.client.get("/api/contacts").json(), [])

    def test_invalid_published_at(self):
        response = self.client.post(
            "/api/news",
            data={"title": "A", "description": "B", "publishedAt": "yesterday"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Invalid publishedAt")

    def test_missing_form_field_is_rejected(self):
        response = self.client.post("/api/news", data={"title": "A"})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["error"], "Invalid request")


class StorageFailureTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.storage = FailingStorageClient()
        app = create_app()
        app.dependency_overrides[get_db_client] = lambda: self.db
        app.dependency_overrides[get_storage_client] = lambda: self.storage
        self.client = TestClient(app)

    def test_upload_failure_returns_500_with_details(self):
        response = self.client.post(
            "/api/news",
            data={"title": "A", "description": "B", "publishedAt": "2024-01-01"},
            files=_png(),
        )
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"error": "Failed to create news", "details": "Failed to upload file"},
        )
        self.assertEqual(self.db.list_rows(ResourceKind.NEWS), [])

    def test_blob_delete_failure_does_not_block_row_delete(self):
        row = self.db.create_row(
            ResourceKind.ALUMNI,
            {"title": "2001", "image": f"{self.storage.base_url}/1-a.png"},
        )
        response = self.client.delete(f"/api/alumni/{row['id']}")
        self.assertEqual(response.status_code, 204)
        self.assertEqual(self.storage.deleted_urls, [row["image"]])
        self.assertIsNone(self.db.get_row(ResourceKind.ALUMNI, row["id"]))


if __name__ == "__main__":
    unittest.main()
