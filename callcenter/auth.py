import base64
import json
import logging
import time

import httpx
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.x509 import load_pem_x509_certificate
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from . import config
from .database import get_db
from .domain.profiles.repository import ProfileRepository
from .models import Profile

logger = logging.getLogger(__name__)

security = HTTPBearer()

GOOGLE_CERTS_URL = (
    "https://www.googleapis.com/robot/v1/metadata/x509/securetoken@system.gserviceaccount.com"
)
CLOCK_SKEW_SECONDS = 60

# Cache for Google's public keys
_cached_keys = None


async def get_google_public_keys():
    """Fetch Google's public keys for Firebase token verification"""
    global _cached_keys
    if _cached_keys:
        logger.debug("✅ Using cached Google public keys")
        return _cached_keys

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(GOOGLE_CERTS_URL)
            if response.status_code == 200:
                _cached_keys = response.json()
                logger.info(f"✅ Fetched {len(_cached_keys)} Google public keys")
                return _cached_keys
            logger.error(f"❌ Failed to fetch Google public keys: HTTP {response.status_code}")
    except httpx.HTTPError as e:
        logger.error(f"❌ Error fetching Google public keys: {str(e)}")
    return None


def _b64url_decode(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


async def verify_firebase_token(token: str) -> dict:
    """
    Verify a Firebase ID token: RS256 signature against Google's certificates,
    then audience, issuer and time claims.
    """
    if not config.FIREBASE_PROJECT_ID:
        logger.error("❌ FIREBASE_PROJECT_ID not configured")
        raise HTTPException(status_code=500, detail="Firebase not configured")

    try:
        return await _check_token(token)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Token verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Token verification failed") from e


async def _check_token(token: str) -> dict:
    parts = token.split(".")
    if len(parts) != 3:
        logger.error("❌ Invalid token format: wrong number of parts")
        raise HTTPException(status_code=401, detail="Invalid token format")

    header_b64, payload_b64, signature_b64 = parts

    try:
        header = json.loads(_b64url_decode(header_b64))
    except ValueError as e:
        logger.error(f"❌ Failed to decode token header: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token header") from e

    if not isinstance(header, dict):
        raise HTTPException(status_code=401, detail="Invalid token header")

    kid = header.get("kid")
    alg = header.get("alg")

    if alg != "RS256":
        logger.error(f"❌ Invalid token algorithm: {alg}")
        raise HTTPException(status_code=401, detail="Invalid token algorithm")

    if not kid:
        logger.error("❌ Token missing key ID")
        raise HTTPException(status_code=401, detail="Token missing key ID")

    public_keys = await get_google_public_keys()
    if not public_keys or kid not in public_keys:
        logger.warning(f"⚠️ Key ID {kid} not found in public keys, invalidating cache and retrying")
        global _cached_keys
        _cached_keys = None
        public_keys = await get_google_public_keys()
        if not public_keys or kid not in public_keys:
            logger.error(f"❌ Key ID {kid} not found in public keys after retry")
            raise HTTPException(status_code=401, detail="Unable to verify token signature")

    cert = load_pem_x509_certificate(public_keys[kid].encode(), default_backend())
    public_key = cert.public_key()

    try:
        signature = _b64url_decode(signature_b64)
    except ValueError as e:
        logger.error(f"❌ Failed to decode token signature: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token signature format") from e

    message = f"{header_b64}.{payload_b64}".encode()
    try:
        public_key.verify(signature, message, padding.PKCS1v15(), hashes.SHA256())
    except Exception as e:
        logger.error(f"❌ Token signature verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token signature") from e

    try:
        claims = json.loads(_b64url_decode(payload_b64))
    except ValueError as e:
        raise HTTPException(status_code=401, detail="Invalid token payload") from e

    if not isinstance(claims, dict):
        raise HTTPException(status_code=401, detail="Invalid token payload")

    if not all(isinstance(claims.get(name, 0), (int, float)) for name in ("exp", "iat")):
        logger.error("❌ Token time claims are not numeric")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    if claims.get("aud") != config.FIREBASE_PROJECT_ID:
        logger.error("❌ Token audience mismatch")
        raise HTTPException(status_code=401, detail="Invalid token audience")

    expected_issuer = f"https://securetoken.google.com/{config.FIREBASE_PROJECT_ID}"
    if claims.get("iss") != expected_issuer:
        logger.error("❌ Token issuer mismatch")
        raise HTTPException(status_code=401, detail="Invalid token issuer")

    now = time.time()
    if claims.get("exp", 0) < now:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        )

    if claims.get("iat", 0) > now + CLOCK_SKEW_SECONDS:
        logger.warning("⚠️ Token issued in the future")
        raise HTTPException(status_code=401, detail="Invalid token")

    if "auth_time" not in claims:
        raise HTTPException(status_code=401, detail="Invalid token claims")

    logger.debug(f"✅ Token verified for user: {claims.get('email')}")
    return claims


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Profile:
    """Resolve the caller's profile from a Firebase ID token, creating it on first sign-in"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    claims = await verify_firebase_token(credentials.credentials)

    # Firebase ID tokens use 'sub' as the user ID claim
    account_id = claims.get("sub") or claims.get("user_id") or claims.get("uid")
    if not account_id:
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(claims.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    return ProfileRepository.get_or_create(db, account_id, email=claims.get("email"))


async def require_admin(user: Profile = Depends(get_current_user)) -> Profile:
    """Allow only administrators through"""
    if not user.is_admin:
        logger.warning(f"🚫 Non-admin {user.id} attempted an admin operation")
        raise HTTPException(status_code=403, detail="Not authorized")
    return user
