"""Orgs module - tenants and atomic org provisioning."""

from grokloc.modules.orgs.models import Org
from grokloc.modules.orgs.schemas import OrgCreate
from grokloc.modules.orgs.services import OrgService


__all__ = [
    "Org",
    "OrgCreate",
    "OrgService",
]
