"""Assessment session timer, session flow and invitations."""

from artemis_client.assessment.invitations import InvitationFlow
from artemis_client.assessment.session import AssessmentSessionFlow
from artemis_client.assessment.timer import AssessmentTimer

__all__ = ["AssessmentSessionFlow", "AssessmentTimer", "InvitationFlow"]
