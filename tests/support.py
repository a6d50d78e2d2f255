import os
import shutil
import tempfile
import unittest
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from clubcms.app import create_app
from clubcms.config import Settings
from clubcms.controller.token_handler import TokenClaim, mint
from clubcms.exceptions import DeliveryFailure

ADMIN_EMAIL = "admin@club.test"
ADMIN_SECRET = "correct horse battery staple"
JWT_SECRET = "test-jwt-secret"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
GIF_BYTES = b"GIF89a" + b"\x00" * 64


class RecordingMailer:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send(self, to, subject, html):
        if self.fail:
            raise DeliveryFailure()
        self.sent.append({"to": to, "subject": subject, "html": html})


class FakeClock:
    def __init__(self, now=None):
        self.now = now or datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


def make_settings(tmpdir, **overrides) -> Settings:
    values = dict(
        admin_email=ADMIN_EMAIL,
        admin_secret=ADMIN_SECRET,
        admin_secret_hash=None,
        jwt_secret=JWT_SECRET,
        token_expire_minutes=60,
        otp_expire_minutes=10,
        otp_store="memory",
        database_url=f"sqlite:///{os.path.join(tmpdir, 'test.db')}",
        upload_dir=os.path.join(tmpdir, "uploads"),
        api_prefix="/api",
        cors_allow_origins="*",
    )
    values.update(overrides)
    return Settings(**values)


class ApiTestCase(unittest.TestCase):
    settings_overrides: dict = {}

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.mailer = RecordingMailer()
        self.clock = FakeClock()
        self.settings = make_settings(self.tmpdir, **self.settings_overrides)
        self.app = create_app(self.settings, mailer=self.mailer, clock=self.clock)
        self.client = TestClient(self.app)
        self.upload_dir = self.settings.upload_dir

    def tearDown(self):
        self.client.close()
        self.app.state.engine.dispose()
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def token(self, role="admin", identity_id="1"):
        return mint(TokenClaim(identity_id=identity_id, role=role), secret=JWT_SECRET)

    def auth_headers(self, role="admin"):
        return {"Authorization": f"Bearer {self.token(role=role)}"}

    def uploaded_files(self):
        return sorted(os.listdir(self.upload_dir))

    def disk_path(self, public_path):
        return os.path.join(self.upload_dir, public_path[len("/uploads/"):])
