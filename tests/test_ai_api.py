import asyncio
import json
import os
import sqlite3
import sys
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DATA_DIR = Path(tempfile.gettempdir()) / "nextgen-tests"
os.environ.setdefault("DATABASE_PATH", str(TEST_DATA_DIR / "nextgen.db"))
os.environ.setdefault("STORAGE_DIR", str(TEST_DATA_DIR / "storage"))
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("AI_RETRY_BACKOFF_S", "0")
os.environ["API_KEY"] = ""

from fastapi.testclient import TestClient  # noqa: E402

from nextgen.ai.config import load_ai_config  # noqa: E402
from nextgen.ai.fallback import generate_with_fallback, parse_json_object  # noqa: E402
from nextgen.ai.types import AIConfigurationError, AIProviderError, AIResponseError, ChatMessage  # noqa: E402
from nextgen.core.config import settings  # noqa: E402
from nextgen.db.connection import clear_all_tables, fetch_one  # noqa: E402
from nextgen.main import app  # noqa: E402


class FakeAIClient:
    def __init__(self, replies, *, supports_documents=True):
        self.replies = list(replies)
        self.supports_documents = supports_documents
        self.calls = []

    async def generate(self, messages, *, model=None, json_schema=None, attachments=()):
        self.calls.append(
            {"messages": list(messages), "model": model, "json_schema": json_schema, "attachments": list(attachments)}
        )
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def overloaded():
    return AIProviderError("The model is overloaded", status_code=503)


def create_user(client, email="mira@example.com"):
    response = client.post("/api/auth/signup", json={"email": email, "password": "pw-123456", "full_name": "Mira Chen"})
    return response.json()["user"]["user_id"]


class FallbackTests(unittest.TestCase):
    def setUp(self):
        self.messages = [ChatMessage(role="user", content="hi")]

    def test_primary_success(self):
        client = FakeAIClient(["hello"])
        text, model = asyncio.run(
            generate_with_fallback(client, self.messages, primary="p", fallback="f", attempts=2, backoff_s=0)
        )
        self.assertEqual((text, model), ("hello", "p"))
        self.assertEqual(len(client.calls), 1)

    def test_retries_primary_then_falls_back(self):
        client = FakeAIClient([overloaded(), overloaded(), "from fallback"])
        text, model = asyncio.run(
            generate_with_fallback(client, self.messages, primary="p", fallback="f", attempts=2, backoff_s=0)
        )
        self.assertEqual((text, model), ("from fallback", "f"))
        self.assertEqual([call["model"] for call in client.calls], ["p", "p", "f"])

    def test_non_overload_error_is_raised_immediately(self):
        client = FakeAIClient([AIProviderError("bad request", status_code=400), "unused"])
        with self.assertRaises(AIProviderError) as ctx:
            asyncio.run(generate_with_fallback(client, self.messages, primary="p", fallback="f", backoff_s=0))
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(len(client.calls), 1)

    def test_exhausted_fallback_raises_overload(self):
        client = FakeAIClient([overloaded()] * 4)
        with self.assertRaises(AIProviderError) as ctx:
            asyncio.run(generate_with_fallback(client, self.messages, primary="p", fallback="f", backoff_s=0))
        self.assertTrue(ctx.exception.overloaded)
        self.assertEqual(len(client.calls), 4)

    def test_backoff_sleeps_between_attempts_only(self):
        client = FakeAIClient([overloaded(), overloaded()])
        with patch("nextgen.ai.fallback.asyncio.sleep", new_callable=AsyncMock) as sleep:
            with self.assertRaises(AIProviderError):
                asyncio.run(
                    generate_with_fallback(client, self.messages, primary="p", fallback=None, attempts=2, backoff_s=0.8)
                )
        sleep.assert_called_once_with(0.8)

    def test_parse_json_object_strips_fences(self):
        self.assertEqual(parse_json_object('```json\n{"score": 80}\n```'), {"score": 80})
        with self.assertRaises(AIResponseError):
            parse_json_object("not json")
        with self.assertRaises(AIResponseError):
            parse_json_object("[1, 2]")


def ai_settings(provider, primary=None, fallback=None):
    return SimpleNamespace(
        ai_provider=provider,
        ai_primary_model=primary,
        ai_fallback_model=fallback,
        ai_retry_attempts=2,
        ai_retry_backoff_s=0.8,
    )


class AIConfigTests(unittest.TestCase):
    def test_default_models_follow_provider(self):
        with patch("nextgen.ai.config.settings", ai_settings("openai")):
            cfg = load_ai_config()
        self.assertEqual((cfg.provider, cfg.primary_model, cfg.fallback_model), ("openai", "gpt-4o-mini", "gpt-4.1-nano"))

        with patch("nextgen.ai.config.settings", ai_settings("gemini")):
            cfg = load_ai_config()
        self.assertEqual((cfg.primary_model, cfg.fallback_model), ("gemini-2.5-flash", "gemini-2.5-flash-lite"))

    def test_explicit_models_win(self):
        with patch("nextgen.ai.config.settings", ai_settings("openai", primary="gpt-4.1", fallback="gpt-4o")):
            cfg = load_ai_config()
        self.assertEqual((cfg.primary_model, cfg.fallback_model), ("gpt-4.1", "gpt-4o"))

    def test_factory_hands_provider_model_to_client(self):
        with patch("nextgen.ai.config.settings", ai_settings("openai")), patch(
            "nextgen.ai.factory.OpenAIProvider"
        ) as provider_cls:
            from nextgen.ai.factory import get_ai_client

            get_ai_client()
        provider_cls.assert_called_once_with(model="gpt-4o-mini")


class ChatApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        clear_all_tables()
        self.user_id = create_user(self.client)
        self.client.put(f"/api/profile/{self.user_id}/skills", json={"skills": ["Python"]})

    def test_empty_history(self):
        body = self.client.get(f"/api/chat/{self.user_id}").json()
        self.assertEqual(body, {"sessionId": None, "messages": []})

    def test_message_validation(self):
        blank = self.client.post(f"/api/chat/{self.user_id}", json={"message": "   "})
        self.assertEqual(blank.status_code, 400)
        self.assertEqual(blank.json()["detail"], "Message is required")

        with patch("nextgen.services.chat_service.get_ai_client", return_value=FakeAIClient(["hi"])):
            unknown = self.client.post("/api/chat/ghost", json={"message": "hello"})
        self.assertEqual(unknown.status_code, 404)

    def test_conversation_is_stored_and_resumed(self):
        fake = FakeAIClient(["**Great** question!\n\n# Next steps\nLearn `SQL`.", "Keep going."])
        with patch("nextgen.services.chat_service.get_ai_client", return_value=fake):
            first = self.client.post(f"/api/chat/{self.user_id}", json={"message": "How do I grow?"})
            self.assertEqual(first.status_code, 200)
            body = first.json()
            self.assertEqual(body["assistantMessage"]["content"], "Great question!\n\nNext steps\nLearn SQL.")
            self.assertEqual(len(body["allMessages"]), 2)
            session_id = body["sessionId"]

            second = self.client.post(
                f"/api/chat/{self.user_id}",
                json={"message": "Thanks", "sessionId": session_id},
            )
        self.assertEqual(second.json()["sessionId"], session_id)
        self.assertEqual(len(second.json()["allMessages"]), 4)

        system_prompt = fake.calls[0]["messages"][0]
        self.assertEqual(system_prompt.role, "system")
        self.assertIn("Mira Chen", system_prompt.content)
        self.assertIn("Python", system_prompt.content)
        roles = [message.role for message in fake.calls[1]["messages"]]
        self.assertEqual(roles, ["system", "user", "assistant", "user"])

        history = self.client.get(f"/api/chat/{self.user_id}").json()
        self.assertEqual(history["sessionId"], session_id)
        self.assertEqual(len(history["messages"]), 4)

        ended = self.client.delete(f"/api/chat/{self.user_id}/{session_id}")
        self.assertEqual(ended.json()["message"], "Chat session ended")
        self.assertIsNone(self.client.get(f"/api/chat/{self.user_id}").json()["sessionId"])

    def test_foreign_session_starts_new_one(self):
        other_id = create_user(self.client, email="other@example.com")
        with patch("nextgen.services.chat_service.get_ai_client", return_value=FakeAIClient(["a", "b"])):
            theirs = self.client.post(f"/api/chat/{other_id}", json={"message": "hi"}).json()["sessionId"]
            mine = self.client.post(f"/api/chat/{self.user_id}", json={"message": "hi", "sessionId": theirs}).json()
        self.assertNotEqual(mine["sessionId"], theirs)
        self.assertEqual(len(mine["allMessages"]), 2)

    def test_ended_session_is_not_resumed(self):
        fake = FakeAIClient(["first", "second"])
        with patch("nextgen.services.chat_service.get_ai_client", return_value=fake):
            ended_id = self.client.post(f"/api/chat/{self.user_id}", json={"message": "hi"}).json()["sessionId"]
            self.client.delete(f"/api/chat/{self.user_id}/{ended_id}")
            again = self.client.post(
                f"/api/chat/{self.user_id}",
                json={"message": "back again", "sessionId": ended_id},
            ).json()
        self.assertNotEqual(again["sessionId"], ended_id)
        self.assertEqual(len(again["allMessages"]), 2)
        self.assertEqual([message.role for message in fake.calls[1]["messages"]], ["system", "user"])

        history = self.client.get(f"/api/chat/{self.user_id}").json()
        self.assertEqual(history["sessionId"], again["sessionId"])
        stored = fetch_one("SELECT messages FROM chat_sessions WHERE session_id = ?", (ended_id,))
        self.assertEqual(len(stored["messages"]), 2)

    def test_overload_after_fallback_is_503(self):
        fake = FakeAIClient([overloaded()] * 4)
        with patch("nextgen.services.chat_service.get_ai_client", return_value=fake):
            response = self.client.post(f"/api/chat/{self.user_id}", json={"message": "hello"})
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"], "Model temporarily unavailable")


class ATSApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        clear_all_tables()
        self.user_id = create_user(self.client)
        self.client.put(
            f"/api/profile/{self.user_id}",
            json={
                "first_name": "Mira",
                "last_name": "Chen",
                "work_experience": [{"title": "Data Engineer", "company": "Flow", "duration": "2020 - Present"}],
            },
        )

    def test_generate_normalizes_and_persists_report(self):
        reply = json.dumps(
            {
                "score": "78",
                "summary": "",
                "strengths": ["Pipelines"],
                "gaps": "none",
                "recommendations": ["Quantify impact"],
                "keywordsToAdd": ["Airflow", "dbt"],
                "breakdown": {"skills": 70, "experience": 80.5},
            }
        )
        fake = FakeAIClient([f"```json\n{reply}\n```"])
        with patch("nextgen.services.ats_service.get_ai_client", return_value=fake):
            response = self.client.post(f"/api/ats/{self.user_id}")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["score"], 78)
        self.assertEqual(body["summary"], "No summary available.")
        self.assertEqual(body["gaps"], [])
        self.assertEqual(
            body["breakdown"],
            {"skills": 70, "experience": 80.5, "education": 0, "profileCompleteness": 0},
        )
        self.assertEqual(body["model"], load_ai_config().primary_model)
        self.assertTrue(body["reportId"])
        self.assertIn("Data Engineer", fake.calls[0]["messages"][0].content)

        latest = self.client.get(f"/api/ats/{self.user_id}").json()
        self.assertEqual(latest["score"], 78)
        self.assertEqual(latest["keywordsToAdd"], ["Airflow", "dbt"])

        skills = self.client.get(f"/api/skills/{self.user_id}").json()
        self.assertEqual(skills["atsReport"]["score"], 78)

    def test_missing_report_is_404(self):
        response = self.client.get(f"/api/ats/{self.user_id}")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "No ATS report found")

    def test_unparseable_reply_is_500(self):
        with patch("nextgen.services.ats_service.get_ai_client", return_value=FakeAIClient(["I think 80"])):
            response = self.client.post(f"/api/ats/{self.user_id}")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["detail"], "Failed to parse ATS response")
        self.assertIsNone(fetch_one("SELECT report_id FROM ats_reports"))

    def test_overload_and_missing_configuration(self):
        with patch("nextgen.services.ats_service.get_ai_client", return_value=FakeAIClient([overloaded()] * 4)):
            busy = self.client.post(f"/api/ats/{self.user_id}")
        self.assertEqual(busy.status_code, 503)

        with patch(
            "nextgen.services.ats_service.get_ai_client",
            side_effect=AIConfigurationError("GEMINI_API_KEY is not set"),
        ):
            unconfigured = self.client.post(f"/api/ats/{self.user_id}")
        self.assertEqual(unconfigured.status_code, 500)

    def test_unknown_user(self):
        response = self.client.post("/api/ats/ghost")
        self.assertEqual(response.status_code, 404)


PARSED_RESUME = {
    "personal_info": {"first_name": "Mira", "last_name": "Chen", "phone_number": "+1 555 0100", "current_city": ""},
    "education": [
        {"degree_type": "Masters", "degree_title": "MSc Data Science", "institution_name": "TU Delft",
         "start_date": "2016-09-01", "end_date": "2018-06-30", "is_current": False},
        {"degree_type": "", "degree_title": "", "institution_name": ""},
    ],
    "work_experience": [
        {"job_title": "Data Engineer", "company_name": "Flow", "employment_type": "contract",
         "start_date": "2020-01-01", "end_date": "Present", "is_current": True, "description": "Pipelines"},
    ],
    "skills": ["Python", "Airflow", " "],
}


class ResumeApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        clear_all_tables()
        self.user_id = create_user(self.client)

    def _upload(self, name="resume.txt", content=b"Mira Chen\nData Engineer at Flow\nPython, Airflow", user_id=None):
        return self.client.post(
            f"/api/resumes/upload/{user_id or self.user_id}",
            files={"file": (name, content, "text/plain")},
        )

    def test_upload_validates_and_stores_file(self):
        rejected = self._upload(name="resume.exe", content=b"MZ")
        self.assertEqual(rejected.status_code, 400)

        fake_pdf = self._upload(name="resume.pdf", content=b"not really a pdf")
        self.assertEqual(fake_pdf.status_code, 400)

        response = self._upload()
        self.assertEqual(response.status_code, 201)
        resume = response.json()["resume"]
        self.assertEqual(resume["parsing_status"], "pending")
        self.assertTrue(resume["file_path"].startswith(f"{self.user_id}/"))
        self.assertTrue(resume["file_path"].endswith("_resume.txt"))

        listing = self.client.get(f"/api/resumes/{self.user_id}").json()
        self.assertEqual([row["resume_id"] for row in listing], [resume["resume_id"]])

    def test_parse_requires_ids(self):
        response = self.client.post("/api/resumes/parse", json={"resume_id": 1})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "resume_id and file_path are required")

    def test_parse_then_apply_to_profile(self):
        resume = self._upload().json()["resume"]
        fake = FakeAIClient([json.dumps(PARSED_RESUME)])
        with patch("nextgen.services.resume_service.get_ai_client", return_value=fake):
            response = self.client.post(
                "/api/resumes/parse",
                json={"resume_id": resume["resume_id"], "file_path": resume["file_path"]},
            )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"]["education"][0]["degree_type"], "masters")
        self.assertIsNone(body["data"]["work_experience"][0]["employment_type"])
        self.assertIsNone(body["data"]["work_experience"][0]["end_date"])
        self.assertEqual(body["data"]["skills"], ["Python", "Airflow"])

        call = fake.calls[0]
        self.assertEqual(len(call["attachments"]), 1)
        self.assertEqual(call["attachments"][0].mime_type, "text/plain")
        self.assertIsNotNone(call["json_schema"])

        stored = fetch_one("SELECT parsing_status FROM resumes WHERE resume_id = ?", (resume["resume_id"],))
        self.assertEqual(stored["parsing_status"], "completed")

        applied = self.client.post(f"/api/resumes/{resume['resume_id']}/apply")
        self.assertEqual(applied.status_code, 200)
        self.assertEqual(applied.json()["skills"], 2)

        profile = self.client.get(f"/api/profile/{self.user_id}").json()
        self.assertEqual(profile["phone_number"], "+1 555 0100")
        self.assertEqual([row["degree"] for row in profile["education"]], ["MSc Data Science"])
        self.assertEqual(profile["current_job"], "Data Engineer")
        self.assertEqual(sorted(profile["skills"]), ["Airflow", "Python"])
        sources = {row["source"] for row in self.client.get(f"/api/profile/{self.user_id}/skills").json()}
        self.assertEqual(sources, {"resume_parsed"})

    def test_text_only_provider_receives_extracted_text(self):
        resume = self._upload().json()["resume"]
        fake = FakeAIClient([json.dumps(PARSED_RESUME)], supports_documents=False)
        with patch("nextgen.services.resume_service.get_ai_client", return_value=fake):
            self.client.post(
                "/api/resumes/parse",
                json={"resume_id": resume["resume_id"], "file_path": resume["file_path"]},
            )
        call = fake.calls[0]
        self.assertEqual(call["attachments"], [])
        self.assertIn("Data Engineer at Flow", call["messages"][0].content)

    def test_failed_parse_marks_row_failed(self):
        resume = self._upload().json()["resume"]
        with patch("nextgen.services.resume_service.get_ai_client", return_value=FakeAIClient(["garbage"])):
            response = self.client.post(
                "/api/resumes/parse",
                json={"resume_id": resume["resume_id"], "file_path": resume["file_path"]},
            )
        self.assertEqual(response.status_code, 500)
        stored = fetch_one("SELECT parsing_status FROM resumes WHERE resume_id = ?", (resume["resume_id"],))
        self.assertEqual(stored["parsing_status"], "failed")

        unparsed = self.client.post(f"/api/resumes/{resume['resume_id']}/apply")
        self.assertEqual(unparsed.status_code, 409)

    def test_overloaded_parse_is_503(self):
        resume = self._upload().json()["resume"]
        with patch("nextgen.services.resume_service.get_ai_client", return_value=FakeAIClient([overloaded()] * 4)):
            response = self.client.post(
                "/api/resumes/parse",
                json={"resume_id": resume["resume_id"], "file_path": resume["file_path"]},
            )
        self.assertEqual(response.status_code, 503)

    def test_parse_rejects_path_of_another_resume(self):
        other_id = create_user(self.client, email="other@example.com")
        theirs = self._upload(content=b"Other Person\nSecret Street 1", user_id=other_id).json()["resume"]
        mine = self._upload().json()["resume"]

        fake = FakeAIClient([json.dumps(PARSED_RESUME)])
        with patch("nextgen.services.resume_service.get_ai_client", return_value=fake):
            response = self.client.post(
                "/api/resumes/parse",
                json={"resume_id": mine["resume_id"], "file_path": theirs["file_path"]},
            )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "file_path does not match the resume")
        self.assertEqual(fake.calls, [])
        stored = fetch_one("SELECT parsing_status, parsed_data FROM resumes WHERE resume_id = ?", (mine["resume_id"],))
        self.assertEqual(stored["parsing_status"], "pending")
        self.assertIsNone(stored["parsed_data"])

    def test_failed_row_insert_removes_stored_file(self):
        user_dir = Path(settings.storage_dir) / settings.resume_bucket / self.user_id
        with patch(
            "nextgen.services.resume_service.resumes_db.insert_resume",
            side_effect=sqlite3.OperationalError("disk I/O error"),
        ):
            response = self._upload()
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["detail"], "Failed to upload resume")
        stored = list(user_dir.iterdir()) if user_dir.exists() else []
        self.assertEqual(stored, [])

    def test_failed_apply_leaves_profile_untouched(self):
        self.client.put(
            f"/api/profile/{self.user_id}",
            json={
                "first_name": "Mira",
                "phone_number": "+31 600",
                "education": [{"degree": "BSc Physics", "institution": "Leiden", "year": 2015}],
                "work_experience": [{"title": "Analyst", "company": "Acme", "duration": "2016 - 2019"}],
            },
        )
        self.client.put(f"/api/profile/{self.user_id}/skills", json={"skills": ["Excel"]})
        resume = self._upload().json()["resume"]
        with patch("nextgen.services.resume_service.get_ai_client", return_value=FakeAIClient([json.dumps(PARSED_RESUME)])):
            self.client.post(
                "/api/resumes/parse",
                json={"resume_id": resume["resume_id"], "file_path": resume["file_path"]},
            )

        with patch("nextgen.db.experience.insert_experience", side_effect=sqlite3.OperationalError("database is locked")):
            response = self.client.post(f"/api/resumes/{resume['resume_id']}/apply")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["detail"], "Failed to apply resume")

        profile = self.client.get(f"/api/profile/{self.user_id}").json()
        self.assertEqual(profile["phone_number"], "+31 600")
        self.assertEqual([row["degree"] for row in profile["education"]], ["BSc Physics"])
        self.assertEqual([row["title"] for row in profile["work_experience"]], ["Analyst"])
        self.assertEqual(profile["skills"], ["Excel"])


if __name__ == "__main__":
    unittest.main()
