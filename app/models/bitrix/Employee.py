from typing import Dict, Optional

from pydantic import BaseModel, Field


SOCIAL_FIELDS = {
    "UF_FACEBOOK": "facebook",
    "UF_LINKEDIN": "linkedin",
    "UF_TWITTER": "twitter",
    "UF_SKYPE": "skype",
}


class EmployeeProfile(BaseModel):
    """Profile fields the dashboard shows next to the numbers."""

    id: str
    employee: str = ""
    role: str = ""
    employee_photo: str = ""
    email: str = ""
    socials: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_bitrix(cls, user: dict) -> "EmployeeProfile":
        name = " ".join(
            part for part in (_text(user.get("NAME")), _text(user.get("LAST_NAME"))) if part
        )
        socials = {
            label: _text(user.get(field))
            for field, label in SOCIAL_FIELDS.items()
            if _text(user.get(field))
        }
        return cls(
            id=_text(user.get("ID")),
            employee=name,
            role=_text(user.get("WORK_POSITION")),
            employee_photo=_text(user.get("PERSONAL_PHOTO")),
            email=_text(user.get("EMAIL")),
            socials=socials,
        )


def _text(value: Optional[object]) -> str:
    if value is None:
        return ""
    return str(value).strip()
