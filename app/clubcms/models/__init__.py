from clubcms.models.admin_model import AdminAccount
from clubcms.models.otp_records_model import OTPRecord
from clubcms.models.event_model import Event
from clubcms.models.team_member_model import TeamMember

__all__ = ["AdminAccount", "OTPRecord", "Event", "TeamMember"]
