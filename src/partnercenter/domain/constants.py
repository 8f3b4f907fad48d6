from enum import Enum

DEFAULT_PROVIDER_ID = "partnercenter"

AZURE_AD_AUTHORITY_HOST = "https://login.microsoftonline.com"
PARTNER_CENTER_RESOURCE = "https://api.partnercenter.microsoft.com"
PARTNER_CENTER_API_BASE_URL = "https://api.partnercenter.microsoft.com/v1"


class IdentityClaim(str, Enum):
    OBJECT_ID = "oid"
    SUBJECT = "sub"
    TENANT_ID = "tid"
    UPN = "upn"
