"""Factories for backend payloads used in tests.

Payloads are plain dicts shaped like the backend's camelCase JSON so that
they exercise schema parsing the same way real responses do.
"""

from datetime import UTC, datetime, timedelta

import jwt
from faker import Faker

from artemis_client.enums import NotificationType

fake = Faker()

SIGNING_SECRET = "artemis-test-signing-secret-0123456789"


def make_token(user_id: str | None = None, **claims) -> str:
    """Build a signed JWT carrying the given subject."""
    payload = {"sub": user_id or fake.uuid4(), **claims}
    return jwt.encode(payload, SIGNING_SECRET, algorithm="HS256")


def object_id() -> str:
    """Random 24-character hex ID like the backend's."""
    return fake.hexify(text="^" * 24)


def iso(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


def notification_payload(**overrides) -> dict:
    """Notification as pushed over the channel or returned over REST."""
    created_at = overrides.pop("created_at", None) or datetime.now(UTC)
    payload = {
        "_id": object_id(),
        "recipient": object_id(),
        "type": fake.random_element([t.value for t in NotificationType]),
        "title": fake.sentence(nb_words=4),
        "message": fake.text(max_nb_chars=120),
        "actionUrl": f"/contracts/{object_id()}",
        "read": False,
        "readAt": None,
        "metadata": {},
        "createdAt": iso(created_at),
        "updatedAt": iso(created_at),
    }
    payload.update(overrides)
    return payload


def notification_page_payload(
    notifications: list[dict] | None = None,
    page: int = 1,
    total_pages: int = 1,
    limit: int = 20,
) -> dict:
    """Response body of GET /api/notifications."""
    notifications = notifications if notifications is not None else []
    return {
        "notifications": notifications,
        "total": len(notifications),
        "page": page,
        "limit": limit,
        "totalPages": total_pages,
    }


def assessment_payload(**overrides) -> dict:
    payload = {
        "_id": object_id(),
        "title": fake.job(),
        "description": fake.paragraph(),
        "profession": "Software Engineering",
        "role": "Backend Developer",
        "skills": ["python", "sql"],
        "difficulty": "intermediate",
        "questionCount": 5,
        "timeLimitMinutes": 30,
        "createdBy": object_id(),
        "isActive": True,
    }
    payload.update(overrides)
    return payload


def invitation_payload(**overrides) -> dict:
    expires_at = overrides.pop("expires_at", None) or datetime.now(UTC) + timedelta(days=7)
    payload = {
        "_id": object_id(),
        "assessment": assessment_payload(),
        "employer": {
            "_id": object_id(),
            "firstName": fake.first_name(),
            "lastName": fake.last_name(),
            "email": fake.email(),
            "companyName": fake.company(),
        },
        "freelancer": None,
        "freelancerEmail": fake.email(),
        "status": "pending",
        "inviteToken": fake.sha1(),
        "expiresAt": iso(expires_at),
        "message": "",
    }
    payload.update(overrides)
    return payload


def session_payload(**overrides) -> dict:
    started_at = overrides.pop("started_at", None) or datetime.now(UTC)
    payload = {
        "_id": object_id(),
        "invitation": object_id(),
        "assessment": assessment_payload(),
        "freelancer": object_id(),
        "status": "in_progress",
        "startedAt": iso(started_at),
        "completedAt": None,
        "timeSpentSeconds": 0,
        "messages": [
            {
                "_id": object_id(),
                "role": "ai",
                "content": "Describe a system you designed.",
                "questionIndex": 0,
                "timestamp": iso(started_at),
            }
        ],
        "currentQuestionIndex": 0,
        "totalQuestions": 5,
        "score": None,
        "breakdown": {},
        "aiSummary": "",
        "strengths": [],
        "weaknesses": [],
    }
    payload.update(overrides)
    return payload
