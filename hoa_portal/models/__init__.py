# HOA Portal: Database Models
# Import all models here for SQLAlchemy discovery

from hoa_portal.models.community import Community                        # noqa
from hoa_portal.models.identity_account import IdentityAccount          # noqa
from hoa_portal.models.admin_user import AdminUser                      # noqa
from hoa_portal.models.vehicle_sticker import VehicleSticker            # noqa
from hoa_portal.models.construction_permit import ConstructionPermit    # noqa
from hoa_portal.models.audit_log import AuditLog                        # noqa
from hoa_portal.models.outbound_notification import OutboundNotification  # noqa
