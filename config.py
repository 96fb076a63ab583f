"""
Runtime configuration for the Oil Seals API.

All settings come from environment variables so the same build can run
against the hosted Supabase project or, with nothing configured, against the
local contacts file only.
"""
import os
from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel


def _env(name: str) -> Optional[str]:
    value = os.getenv(name)
    return value if value else None


class Settings(BaseModel):
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    admin_token: Optional[str] = None
    contacts_file: str = "data/contacts.json"
    cors_origins: List[str] = ["*"]
    port: int = 8000
    ping_message: str = "ping"
    debug: bool = False

    # Mail gateway
    smtp_host: Optional[str] = None
    smtp_port: Optional[int] = None
    smtp_user: Optional[str] = None
    smtp_pass: Optional[str] = None
    smtp_from: Optional[str] = None

    # SMS / WhatsApp gateway
    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    twilio_from_number: Optional[str] = None
    twilio_whatsapp_from: Optional[str] = None

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @classmethod
    def from_env(cls) -> "Settings":
        origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
        smtp_port = _env("SMTP_PORT")
        return cls(
            supabase_url=_env("SUPABASE_URL"),
            # SUPABASE_SERVICE_ROLE is the older name of the same key
            supabase_key=_env("SUPABASE_SERVICE_ROLE_KEY") or _env("SUPABASE_SERVICE_ROLE"),
            admin_token=_env("ADMIN_TOKEN"),
            contacts_file=os.getenv("CONTACTS_FILE", "data/contacts.json"),
            cors_origins=origins or ["*"],
            port=int(os.getenv("PORT", 8000)),
            ping_message=os.getenv("PING_MESSAGE", "ping"),
            debug=bool(_env("DEBUG")),
            smtp_host=_env("SMTP_HOST"),
            smtp_port=int(smtp_port) if smtp_port else None,
            smtp_user=_env("SMTP_USER"),
            smtp_pass=_env("SMTP_PASS"),
            smtp_from=_env("SMTP_FROM") or _env("SMTP_USER"),
            twilio_account_sid=_env("TWILIO_ACCOUNT_SID"),
            twilio_auth_token=_env("TWILIO_AUTH_TOKEN"),
            twilio_from_number=_env("TWILIO_FROM_NUMBER"),
            twilio_whatsapp_from=_env("TWILIO_WHATSAPP_FROM"),
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env()
