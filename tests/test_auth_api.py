import os
import sys
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

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

from nextgen.db.connection import clear_all_tables, fetch_one  # noqa: E402
from nextgen.integrations.email import EmailDeliveryError, EmailNotConfiguredError  # noqa: E402
from nextgen.main import app  # noqa: E402


class AuthApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        clear_all_tables()

    def _signup(self, email="ada@example.com", password="s3cret-pass", full_name="Ada King Lovelace"):
        return self.client.post(
            "/api/auth/signup",
            json={"email": email, "password": password, "full_name": full_name},
        )

    def test_signup_creates_user_and_splits_name(self):
        response = self._signup()
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["message"], "User created successfully")
        self.assertEqual(body["user"]["email"], "ada@example.com")
        self.assertEqual(body["user"]["full_name"], "Ada King Lovelace")

        row = fetch_one("SELECT first_name, last_name, password_hash FROM users WHERE user_id = ?", (body["user"]["user_id"],))
        self.assertEqual(row["first_name"], "Ada")
        self.assertEqual(row["last_name"], "King Lovelace")
        self.assertNotEqual(row["password_hash"], "s3cret-pass")

    def test_signup_requires_email_and_password(self):
        response = self.client.post("/api/auth/signup", json={"email": "ada@example.com"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Email and password are required")

    def test_signup_rejects_existing_email(self):
        self._signup()
        response = self._signup()
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "User already exists")

    def test_login_success_and_bad_password(self):
        self._signup()
        ok = self.client.post("/api/auth/login", json={"email": "ada@example.com", "password": "s3cret-pass"})
        self.assertEqual(ok.status_code, 200)
        body = ok.json()
        self.assertEqual(body["message"], "Login successful")
        self.assertEqual(body["user"]["full_name"], "Ada King Lovelace")
        self.assertEqual(body["user"]["current_job"], "")
        self.assertFalse(body["two_factor_required"])

        bad = self.client.post("/api/auth/login", json={"email": "ada@example.com", "password": "wrong"})
        self.assertEqual(bad.status_code, 401)
        self.assertEqual(bad.json()["detail"], "Invalid credentials")

        unknown = self.client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "x"})
        self.assertEqual(unknown.status_code, 401)

    def test_login_current_job_is_first_sentence_of_bio(self):
        user_id = self._signup().json()["user"]["user_id"]
        self.client.put(
            f"/api/profile/{user_id}",
            json={"first_name": "Ada", "bio": "Backend engineer. Loves compilers."},
        )
        body = self.client.post("/api/auth/login", json={"email": "ada@example.com", "password": "s3cret-pass"}).json()
        self.assertEqual(body["user"]["current_job"], "Backend engineer")

    def test_api_key_is_enforced_when_configured(self):
        with patch("nextgen.core.security.settings", SimpleNamespace(api_key="top-secret")):
            denied = self.client.post("/api/auth/login", json={"email": "a@b.c", "password": "x"})
            self.assertEqual(denied.status_code, 401)
            self.assertEqual(denied.json()["detail"], "Please provide a valid API key.")

            german = self.client.post(
                "/api/auth/login",
                json={"email": "a@b.c", "password": "x"},
                headers={"Accept-Language": "de-DE"},
            )
            self.assertEqual(german.json()["detail"], "Bitte gib einen gültigen API-Schlüssel an.")

            allowed = self.client.post(
                "/api/auth/login",
                json={"email": "a@b.c", "password": "x"},
                headers={"X-API-Key": "top-secret"},
            )
            self.assertEqual(allowed.status_code, 401)
            self.assertEqual(allowed.json()["detail"], "Invalid credentials")

            health = self.client.get("/api/health")
            self.assertEqual(health.status_code, 200)


class OTPApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        clear_all_tables()
        self.sent = []
        self.client.post(
            "/api/auth/signup",
            json={"email": "grace@example.com", "password": "cobol-rules", "full_name": "Grace Hopper"},
        )

    def _capture(self, recipient, code, otp_type=None):
        self.sent.append({"recipient": recipient, "code": code, "type": otp_type})

    def _request_code(self, purpose="2fa_enable"):
        with patch("nextgen.services.otp_service.send_otp_email", side_effect=self._capture):
            return self.client.post("/api/auth/otp/request", json={"email": "Grace@Example.com", "purpose": purpose})

    def test_request_and_verify_enables_two_factor(self):
        response = self._request_code()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "OTP sent successfully")
        self.assertEqual(len(self.sent), 1)
        self.assertEqual(self.sent[0]["recipient"], "grace@example.com")
        self.assertEqual(self.sent[0]["type"], "2fa_enable")
        code = self.sent[0]["code"]
        self.assertRegex(code, r"^\d{6}$")

        stored = fetch_one("SELECT code_hash FROM otp_codes WHERE email = ?", ("grace@example.com",))
        self.assertNotEqual(stored["code_hash"], code)

        verified = self.client.post(
            "/api/auth/otp/verify",
            json={"email": "grace@example.com", "purpose": "2fa_enable", "code": code},
        )
        self.assertEqual(verified.status_code, 200)
        self.assertTrue(verified.json()["verified"])

        login = self.client.post("/api/auth/login", json={"email": "grace@example.com", "password": "cobol-rules"})
        self.assertTrue(login.json()["two_factor_required"])

        reused = self.client.post(
            "/api/auth/otp/verify",
            json={"email": "grace@example.com", "purpose": "2fa_enable", "code": code},
        )
        self.assertEqual(reused.status_code, 400)

    def test_new_request_invalidates_previous_code(self):
        self._request_code(purpose="login")
        self._request_code(purpose="login")
        first, second = self.sent[0]["code"], self.sent[1]["code"]
        if first != second:
            stale = self.client.post(
                "/api/auth/otp/verify",
                json={"email": "grace@example.com", "purpose": "login", "code": first},
            )
            self.assertEqual(stale.status_code, 400)
        fresh = self.client.post(
            "/api/auth/otp/verify",
            json={"email": "grace@example.com", "purpose": "login", "code": second},
        )
        self.assertEqual(fresh.status_code, 200)

    def test_code_locks_after_too_many_wrong_attempts(self):
        self._request_code(purpose="login")
        code = self.sent[0]["code"]
        wrong = "000000" if code != "000000" else "111111"
        for _ in range(5):
            response = self.client.post(
                "/api/auth/otp/verify",
                json={"email": "grace@example.com", "purpose": "login", "code": wrong},
            )
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json()["detail"], "Invalid verification code")

        locked = self.client.post(
            "/api/auth/otp/verify",
            json={"email": "grace@example.com", "purpose": "login", "code": code},
        )
        self.assertEqual(locked.status_code, 400)

    def test_expired_code_is_rejected(self):
        self._request_code(purpose="login")
        code = self.sent[0]["code"]
        from nextgen.db.connection import execute

        execute("UPDATE otp_codes SET expires_at = ?", ("2000-01-01T00:00:00+00:00",))
        response = self.client.post(
            "/api/auth/otp/verify",
            json={"email": "grace@example.com", "purpose": "login", "code": code},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Verification code has expired")

    def test_unknown_purpose_is_rejected(self):
        response = self._request_code(purpose="reset")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.sent, [])

    def test_request_fails_when_email_is_not_configured(self):
        with patch(
            "nextgen.services.otp_service.send_otp_email",
            side_effect=EmailNotConfiguredError("Email service not configured. Please contact administrator."),
        ):
            response = self.client.post("/api/auth/otp/request", json={"email": "grace@example.com", "purpose": "login"})
        self.assertEqual(response.status_code, 500)
        pending = fetch_one("SELECT COUNT(*) AS total FROM otp_codes WHERE consumed = 0")
        self.assertEqual(pending["total"], 0)


class EmailApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_send_otp_requires_email_and_code(self):
        response = self.client.post("/api/email/send-otp", json={"email": "grace@example.com"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Email and OTP are required")

    def test_send_otp_success(self):
        with patch("nextgen.api.v1.email.send_otp_email") as send:
            response = self.client.post(
                "/api/email/send-otp",
                json={"email": "grace@example.com", "otp": "123456", "type": "2fa_enable"},
            )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "message": "OTP sent successfully"})
        send.assert_called_once_with("grace@example.com", "123456", "2fa_enable")

    def test_send_otp_delivery_failure(self):
        with patch("nextgen.api.v1.email.send_otp_email", side_effect=EmailDeliveryError("boom")):
            response = self.client.post(
                "/api/email/send-otp",
                json={"email": "grace@example.com", "otp": "123456"},
            )
        self.assertEqual(response.status_code, 500)

    def test_smtp_message_uses_html_alternative(self):
        fake_settings = SimpleNamespace(
            smtp_host="smtp.example.com",
            smtp_port=587,
            smtp_user="mailer@example.com",
            smtp_password="abcd efgh",
            smtp_from=None,
            smtp_use_tls=True,
            smtp_fallback_ssl=False,
            otp_ttl_minutes=10,
        )
        with patch("nextgen.integrations.email.settings", fake_settings), patch(
            "nextgen.integrations.email.smtplib.SMTP"
        ) as smtp_cls:
            from nextgen.integrations.email import send_otp_email

            send_otp_email("grace@example.com", "654321", "2fa_enable")

        server = smtp_cls.return_value.__enter__.return_value
        server.login.assert_called_once_with("mailer@example.com", "abcdefgh")
        message = server.send_message.call_args[0][0]
        self.assertEqual(message["To"], "grace@example.com")
        self.assertIn("2FA", message["Subject"])
        html_part = message.get_body(preferencelist=("html",))
        self.assertIn("654321", html_part.get_content())
        self.assertIn("Two-Factor", html_part.get_content())


class HealthApiTests(unittest.TestCase):
    def test_health_reports_database_time(self):
        client = TestClient(app)
        response = client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "ok")
        self.assertTrue(body["time"])


if __name__ == "__main__":
    unittest.main()
