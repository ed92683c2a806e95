import os
import unittest
from io import BytesIO
from unittest.mock import MagicMock, patch

os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("ANALYTICS_ENABLED", "0")

import httpx
from docx import Document
from fastapi.testclient import TestClient

from skillforge.ai.gateway import AIServiceError
from skillforge.core import resume_store
from skillforge.main import app

RESUME_TEXT = (
    "John Doe\n"
    "Email john@example.com\n"
    "Phone +1 555 222 1111\n"
    "Skills: Python React SQL Docker AWS\n"
    "Experience: Built APIs for SaaS products and improved response time by 35%."
)

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def docx_bytes(text: str) -> bytes:
    document = Document()
    for line in text.splitlines():
        document.add_paragraph(line)
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


class AtsApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_gap_analysis_contract_shape(self):
        reply = {
            "match_score": "64",
            "hard_skills_missing": ["Kubernetes", "Terraform"],
            "soft_skills_missing": "Stakeholder management",
            "formatting_issues": [],
            "correction": " Add a skills section. ",
        }
        with patch("skillforge.services.ats_service.generate_json", return_value=reply) as ai:
            response = self.client.post(
                "/api/ats",
                data={"jobDescription": "Python backend engineer with Kubernetes and Terraform."},
                files={"resume": ("cv.docx", docx_bytes(RESUME_TEXT), DOCX_MIME)},
            )

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["match_score"], 64)
        self.assertEqual(data["hard_skills_missing"], ["Kubernetes", "Terraform"])
        self.assertEqual(data["soft_skills_missing"], ["Stakeholder management"])
        self.assertEqual(data["correction"], "Add a skills section.")
        self.assertEqual(ai.call_args.kwargs["feature"], "ats-gap")

    def test_requires_job_description(self):
        response = self.client.post(
            "/api/ats",
            files={"resume": ("cv.docx", docx_bytes(RESUME_TEXT), DOCX_MIME)},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["code"], "NO_JD")

    def test_requires_resume(self):
        response = self.client.post("/api/ats", data={"jobDescription": "Python"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["message"], "Resume PDF is required.")

    def test_unreadable_resume_is_pdf_error(self):
        response = self.client.post(
            "/api/ats",
            data={"jobDescription": "Python"},
            files={"resume": ("cv.docx", docx_bytes("Short."), DOCX_MIME)},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["code"], "PDF_ERROR")

    def test_ai_failure_is_reported_as_ats_failure(self):
        error = AIServiceError("All configured AI keys failed.", code="ai_exhausted")
        with patch("skillforge.services.ats_service.generate_json", side_effect=error):
            response = self.client.post(
                "/api/ats",
                data={"jobDescription": "Python"},
                files={"resume": ("cv.docx", docx_bytes(RESUME_TEXT), DOCX_MIME)},
            )
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"]["message"], "ATS analysis failed.")


class GithubApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)
        cls.profile = {
            "name": "Octo Cat",
            "avatar_url": "https://avatars.example/octocat.png",
            "html_url": "https://github.com/octocat",
            "bio": "Builds things",
            "followers": 12,
            "public_repos": 3,
        }
        cls.repos = [
            {"name": "api", "description": "REST API", "language": "Python", "stargazers_count": 5},
            {"name": "web", "description": "Dashboard", "language": "TypeScript", "stargazers_count": 2},
            {"name": "cli", "description": None, "language": "Python", "stargazers_count": 0},
        ]

    def _fetch(self, *args, **kwargs):
        async def fake_fetch(username):
            return self.profile, self.repos

        return patch("skillforge.services.github_service.fetch_github_data", side_effect=fake_fetch)

    def test_scan_merges_stats_and_analysis(self):
        reply = {
            "developer_level": "Mid-Level",
            "tech_stack": {"frontend": ["Detected"], "backend": ["FastAPI", "PostgreSQL"]},
            "project_quality_score": 70,
        }
        with self._fetch(), patch("skillforge.services.github_service.generate_json", return_value=reply):
            response = self.client.post("/api/github", json={"username": "@octocat"})

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        stats = data["profile"]["stats"]
        self.assertEqual(stats["stars"], 7)
        self.assertEqual(stats["repos"], 3)
        self.assertEqual(stats["topLanguages"][0], {"language": "Python", "percentage": 67})
        self.assertEqual(data["analysis"]["tech_stack"]["frontend"], ["Python", "TypeScript"])
        self.assertEqual(data["analysis"]["tech_stack"]["backend"], ["FastAPI", "PostgreSQL"])
        self.assertEqual(data["analysis"]["developer_level"], "Mid-Level")

    def test_username_is_required_and_validated(self):
        response = self.client.post("/api/github", json={"username": "  "})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], {"code": "NO_USERNAME", "message": "Username required"})

        response = self.client.post("/api/github", json={"username": "bad/name"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["code"], "INVALID_USERNAME")

    def test_unknown_user_returns_404(self):
        from skillforge.services.github_service import GithubUserNotFound

        async def missing(username):
            raise GithubUserNotFound(username)

        with patch("skillforge.services.github_service.fetch_github_data", side_effect=missing):
            response = self.client.post("/api/github", json={"username": "ghost-user"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"]["message"], "User not found")

    def test_upstream_failure_is_scan_failed(self):
        async def broken(username):
            raise httpx.ConnectError("connection refused")

        with patch("skillforge.services.github_service.fetch_github_data", side_effect=broken):
            response = self.client.post("/api/github", json={"username": "octocat"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"]["message"], "Scan failed")

    def test_upload_resume_file_saves_for_github_user(self):
        resume_store.clear_saved_resumes()
        response = self.client.post(
            "/api/upload-resume-file",
            data={"githubUsername": "octocat"},
            files={"resume": ("cv.txt", RESUME_TEXT.encode("utf-8"), "text/plain")},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], "Resume processed successfully!")
        self.assertEqual(body["data"]["fileName"], "cv.txt")
        self.assertTrue(body["data"]["saved"])
        self.assertEqual(resume_store.get_saved_resume("octocat")["extracted_text"], RESUME_TEXT)

    def test_upload_resume_file_without_owner_is_not_saved(self):
        resume_store.clear_saved_resumes()
        response = self.client.post(
            "/api/upload-resume-file",
            files={"resume": ("cv.txt", RESUME_TEXT.encode("utf-8"), "text/plain")},
        )
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["data"]["saved"])

    def test_upload_resume_file_rejects_unknown_type(self):
        response = self.client.post(
            "/api/upload-resume-file",
            files={"resume": ("cv.rtf", b"{\\rtf1 hello}", "application/rtf")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["code"], "UNSUPPORTED_FILE")


class LinkedinApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_screenshot_is_sent_inline_and_normalized(self):
        reply = {
            "visual_score": 250,
            "critique": "Banner is generic.",
            "headline_suggestion": "Backend Engineer | Python | APIs",
            "action_items": ["Add a custom banner", "Pin a featured project"],
            "photo_report": {"quality_score": 80, "strengths": ["Good lighting"], "issues": "Cropped head"},
        }
        with patch("skillforge.services.linkedin_service.generate_json", return_value=reply) as ai:
            response = self.client.post(
                "/api/linkedin",
                files={"screenshot": ("profile.png", PNG_BYTES, "image/png")},
            )

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["visual_score"], 100)
        self.assertEqual(data["photo_report"]["issues"], ["Cropped head"])
        self.assertEqual(data["photo_report"]["helpful_data"], {})

        image = ai.call_args.kwargs["images"][0]
        self.assertEqual(image.mime_type, "image/png")
        self.assertEqual(image.data, PNG_BYTES)
        self.assertTrue(ai.call_args.kwargs["json_mode"])

    def test_screenshot_is_required(self):
        response = self.client.post("/api/linkedin")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["message"], "Image screenshot is required.")

    def test_mismatched_image_signature_is_rejected(self):
        response = self.client.post(
            "/api/linkedin",
            files={"screenshot": ("profile.png", b"GIF89a....", "image/png")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["code"], "INVALID_IMAGE")

    def test_vision_failure(self):
        error = AIServiceError("All configured AI keys failed.", code="ai_exhausted")
        with patch("skillforge.services.linkedin_service.generate_json", side_effect=error):
            response = self.client.post(
                "/api/linkedin",
                files={"screenshot": ("profile.png", PNG_BYTES, "image/png")},
            )
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], {"code": "VISION_ERROR", "message": "Failed to analyze image."})


class ResourcesApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def _settings(self, **overrides):
        from skillforge.core.config import settings

        values = {
            "youtube_api_key": "yt-key",
            "youtube_search_url": "https://youtube.example/search",
            "youtube_timeout_s": 5.0,
        }
        values.update(overrides)
        fake = MagicMock(wraps=settings)
        for name, value in values.items():
            setattr(fake, name, value)
        return patch("skillforge.services.resource_service.settings", fake)

    def test_returns_videos_from_search(self):
        upstream = httpx.Response(
            200,
            json={
                "items": [
                    {
                        "id": {"videoId": "abc123"},
                        "snippet": {
                            "title": "Docker in 100 minutes",
                            "channelTitle": "DevChannel",
                            "thumbnails": {"medium": {"url": "https://img.example/abc.jpg"}},
                        },
                    },
                    {"id": {}, "snippet": {"title": "Playlist without a video id"}},
                ]
            },
            request=httpx.Request("GET", "https://youtube.example/search"),
        )
        with self._settings(), patch("httpx.Client.get", return_value=upstream) as get:
            response = self.client.get("/api/resources", params={"skill": "Docker"})

        self.assertEqual(response.status_code, 200)
        videos = response.json()["data"]["videos"]
        self.assertEqual(len(videos), 1)
        self.assertEqual(videos[0]["url"], "https://www.youtube.com/watch?v=abc123")
        self.assertEqual(videos[0]["channel"], "DevChannel")
        self.assertEqual(get.call_args.kwargs["params"]["q"], "Docker tutorial roadmap")

    def test_skill_is_required(self):
        response = self.client.get("/api/resources")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["code"], "NO_SKILL")

    def test_missing_api_key(self):
        with self._settings(youtube_api_key=None):
            response = self.client.get("/api/resources", params={"skill": "Docker"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"]["message"], "YouTube API key not configured.")

    def test_upstream_failure(self):
        upstream = httpx.Response(403, json={}, request=httpx.Request("GET", "https://youtube.example/search"))
        with self._settings(), patch("httpx.Client.get", return_value=upstream):
            response = self.client.get("/api/resources", params={"skill": "Docker"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"]["message"], "Could not fetch resources. Please try again.")


class RoadmapApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_roadmap_phases_are_normalized(self):
        reply = {
            "estimatedDuration": "3 months",
            "phases": [
                {"title": "Foundations", "duration": "2 weeks", "topics": ["Images", "Containers"]},
                {"title": "", "topics": ["dropped"]},
                "not a phase",
            ],
            "tips": ["Build one project per phase"],
        }
        with patch("skillforge.services.roadmap_service.generate_json", return_value=reply):
            response = self.client.post("/api/roadmap", json={"skill": "Docker", "currentLevel": "Intermediate"})

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["currentLevel"], "Intermediate")
        self.assertEqual(len(data["phases"]), 1)
        self.assertEqual(data["phases"][0]["projects"], [])

    def test_roadmap_requires_skill(self):
        response = self.client.post("/api/roadmap", json={"skill": " "})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["code"], "NO_SKILL")


class HealthAndAnalyticsTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})

    def test_ai_summary_requires_api_key_when_configured(self):
        from skillforge.core.config import settings

        fake = MagicMock(wraps=settings)
        fake.api_key = "secret"
        with patch("skillforge.core.security.settings", fake):
            denied = self.client.get("/api/analytics/ai-summary")
            allowed = self.client.get("/api/analytics/ai-summary", headers={"X-API-Key": "secret"})
        self.assertEqual(denied.status_code, 401)
        self.assertEqual(denied.json()["error"]["code"], "UNAUTHORIZED")
        self.assertEqual(allowed.status_code, 200)

    def test_unknown_route_uses_error_envelope(self):
        response = self.client.get("/api/does-not-exist")
        self.assertEqual(response.status_code, 404)
        self.assertFalse(response.json()["success"])


REAL_ASYNC_CLIENT = httpx.AsyncClient


class GithubFetchTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        from skillforge.core.config import settings

        self.requests: list[httpx.Request] = []
        fake = MagicMock(wraps=settings)
        fake.github_api_base = "https://api.github.test"
        fake.github_token = "ghp_test"
        fake.github_timeout_s = 5.0
        self._settings_patch = patch("skillforge.services.github_service.settings", fake)
        self._settings_patch.start()

    def tearDown(self):
        self._settings_patch.stop()

    def _transport(self, routes: dict):
        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            outcome = routes[request.url.path]
            if isinstance(outcome, Exception):
                raise outcome
            status_code, body = outcome
            return httpx.Response(status_code, json=body)

        def factory(*args, **kwargs):
            return REAL_ASYNC_CLIENT(*args, transport=httpx.MockTransport(handler), **kwargs)

        return patch("skillforge.services.github_service.httpx.AsyncClient", side_effect=factory)

    def _scan(self, username: str):
        reply = {"developer_level": "Junior", "tech_stack": {"frontend": [], "backend": []}}
        with patch("skillforge.services.github_service.generate_json", return_value=reply):
            return self.client.post("/api/github", json={"username": username})

    def test_requests_send_token_and_repo_query(self):
        routes = {
            "/users/octocat": (200, {"name": "Octo", "followers": 1, "public_repos": 1}),
            "/users/octocat/repos": (200, [{"name": "api", "language": "Go", "stargazers_count": 3}]),
        }
        with self._transport(routes):
            response = self._scan("octocat")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["profile"]["stats"]["stars"], 3)
        self.assertEqual(len(self.requests), 2)
        for request in self.requests:
            self.assertEqual(request.headers["Authorization"], "token ghp_test")
        repo_request = next(r for r in self.requests if r.url.path.endswith("/repos"))
        self.assertEqual(repo_request.url.params["sort"], "updated")
        self.assertEqual(repo_request.url.params["per_page"], "100")

    def test_missing_user_maps_to_404(self):
        routes = {
            "/users/ghost": (404, {"message": "Not Found"}),
            "/users/ghost/repos": (404, {"message": "Not Found"}),
        }
        with self._transport(routes):
            response = self._scan("ghost")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"]["message"], "User not found")

    def test_repo_listing_failure_is_scan_failed(self):
        routes = {
            "/users/octocat": (200, {"name": "Octo"}),
            "/users/octocat/repos": (502, {"message": "Bad Gateway"}),
        }
        with self._transport(routes):
            response = self._scan("octocat")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"]["message"], "Scan failed")

    def test_transport_error_on_one_request_is_scan_failed(self):
        routes = {
            "/users/octocat": (200, {"name": "Octo"}),
            "/users/octocat/repos": httpx.ConnectError("connection reset"),
        }
        with self._transport(routes):
            response = self._scan("octocat")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"]["message"], "Scan failed")


class GithubStatsTests(unittest.TestCase):
    def test_language_shares_round_half_up(self):
        from skillforge.services.github_service import language_breakdown

        repos = [{"language": "Python"}] * 5 + [{"language": "Go"}, {"language": "Rust"}, {"language": "C"}]
        shares = {item["language"]: item["percentage"] for item in language_breakdown(repos)}
        self.assertEqual(shares, {"Python": 63, "Go": 13, "Rust": 13, "C": 13})

    def test_language_shares_ignore_repos_without_language(self):
        from skillforge.services.github_service import language_breakdown

        self.assertEqual(language_breakdown([{"language": None}, {}]), [])


class LegacyDocUploadTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_upload_resume_file_uses_its_own_message_for_doc(self):
        response = self.client.post(
            "/api/upload-resume-file",
            files={"resume": ("cv.doc", b"\xd0\xcf\x11\xe0", "application/msword")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["message"], "Unsupported file type. Use PDF, DOCX, or TXT.")

    def test_linkedin_uses_image_message_for_doc(self):
        response = self.client.post(
            "/api/linkedin",
            files={"screenshot": ("shot.doc", b"\xd0\xcf\x11\xe0", "application/msword")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["message"], "Please upload a PNG, JPG or WEBP screenshot.")


class AtsPromptTests(unittest.TestCase):
    def test_whitespace_is_collapsed_and_fields_are_cut(self):
        from skillforge.services.ats_service import analyze_gap

        resume_prefix = "Python developer with SQL "
        jd_prefix = "Need Python "
        extracted = "Python    developer\n\n\twith   SQL " + "r" * 4000
        jd = "Need   Python\n" + "j" * 2000
        reply = {"match_score": 50}
        with patch("skillforge.services.ats_service.generate_json", return_value=reply) as ai:
            analyze_gap(extracted, jd)

        prompt = ai.call_args.args[0]
        self.assertIn('"' + resume_prefix + "r" * (3000 - len(resume_prefix)) + '"', prompt)
        self.assertIn('"' + jd_prefix + "j" * (1500 - len(jd_prefix)) + '"', prompt)
        self.assertNotIn("\t", prompt.split("Candidate Resume:")[1].split("Target Job Description:")[0])


if __name__ == "__main__":
    unittest.main()
