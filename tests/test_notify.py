import pytest
from twilio.base.exceptions import TwilioRestException

import notify
from config import Settings
from errors import NotifyError

TWILIO = dict(
    twilio_account_sid="AC123",
    twilio_auth_token="secret",
    twilio_from_number="+15550001111",
    twilio_whatsapp_from="whatsapp:+14155238886",
)


class FakeMessages:
    def __init__(self, error=None):
        self.sent = []
        self.error = error

    def create(self, **kwargs):
        if self.error:
            raise self.error
        self.sent.append(kwargs)


class FakeTwilio:
    messages = FakeMessages()

    def __init__(self, sid, token):
        self.sid = sid


@pytest.fixture
def twilio(monkeypatch):
    FakeTwilio.messages = FakeMessages()
    monkeypatch.setattr(notify, "TwilioClient", FakeTwilio)
    return FakeTwilio


def test_email_without_smtp_settings_is_a_config_error():
    with pytest.raises(NotifyError) as exc:
        notify.send_email(Settings(), "jane@x.com", "Hi", "Quote attached")
    assert exc.value.status_code == 400
    assert "SMTP not configured" in exc.value.message


def test_email_sent_over_starttls(monkeypatch):
    sent = []

    class FakeSMTP:
        def __init__(self, host, port):
            self.host, self.port = host, port

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self):
            sent.append("starttls")

        def login(self, user, password):
            sent.append(("login", user))

        def send_message(self, msg):
            sent.append(msg)

    monkeypatch.setattr(notify.smtplib, "SMTP", FakeSMTP)
    settings = Settings(smtp_host="smtp.acme.com", smtp_port=587, smtp_user="sales@acme.com", smtp_pass="pw")
    notify.send_email(settings, "jane@x.com", notify.REPLY_SUBJECT, "Quote attached")

    assert sent[0] == "starttls"
    msg = sent[-1]
    assert msg["To"] == "jane@x.com"
    assert msg["From"] == "sales@acme.com"
    assert msg["Subject"] == "Reply from SBO Oil Seals"


def test_sms_without_twilio_is_a_config_error(twilio):
    with pytest.raises(NotifyError) as exc:
        notify.send_sms(Settings(), "+911234", "hello")
    assert exc.value.status_code == 400
    assert twilio.messages.sent == []


def test_sms_is_sent(twilio):
    notify.send_sms(Settings(**TWILIO), "+911234", "Your quote is ready")
    assert twilio.messages.sent == [{"from_": "+15550001111", "to": "+911234", "body": "Your quote is ready"}]


def test_whatsapp_prefixes_recipient(twilio):
    notify.send_whatsapp(Settings(**TWILIO), "+911234", "hello")
    notify.send_whatsapp(Settings(**TWILIO), "whatsapp:+915678", "hello")
    assert [m["to"] for m in twilio.messages.sent] == ["whatsapp:+911234", "whatsapp:+915678"]


def test_provider_failure_is_a_runtime_error(twilio):
    twilio.messages = FakeMessages(error=TwilioRestException(400, "https://api.twilio.com", msg="bad number"))
    with pytest.raises(NotifyError) as exc:
        notify.send_sms(Settings(**TWILIO), "+911234", "hello")
    assert exc.value.status_code == 500
    assert "bad number" not in exc.value.message
