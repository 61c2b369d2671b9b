# Security module
from app.security.auth import (
    get_password_hash, verify_password, create_access_token, decode_token,
    get_current_client, get_security_context, build_security_context,
    require_capability, require_authenticated, require_admin,
    require_staff, require_admin_or_staff
)

__all__ = [
    'get_password_hash', 'verify_password', 'create_access_token', 'decode_token',
    'get_current_client', 'get_security_context', 'build_security_context',
    'require_capability', 'require_authenticated', 'require_admin',
    'require_staff', 'require_admin_or_staff'
]
