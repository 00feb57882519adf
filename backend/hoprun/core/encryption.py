"""
DB 연결 비밀번호 암호화 (cryptography Fernet)

키 선택:
  1. ENCRYPTION_KEY (Fernet 키)가 있으면 그대로 사용
  2. 없으면 SECRET_KEY → PBKDF2-HMAC-SHA256 으로 파생
SECRET_KEY나 ENCRYPTION_KEY를 바꾸면 기존에 저장된 비밀번호는 복호화할 수 없습니다.
"""
import base64
import logging
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from hoprun.core.config import settings
from hoprun.core.exceptions import CredentialDecryptError

logger = logging.getLogger(__name__)

_KDF_SALT = b"hoprun-conn-salt"
_KDF_ITERATIONS = 100_000


def _derive_key(secret: str) -> bytes:
    kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=32, salt=_KDF_SALT, iterations=_KDF_ITERATIONS)
    return base64.urlsafe_b64encode(kdf.derive(secret.encode()))


@lru_cache()
def get_fernet() -> Fernet:
    key = settings.ENCRYPTION_KEY.encode() if settings.ENCRYPTION_KEY else _derive_key(settings.SECRET_KEY)
    return Fernet(key)


def encrypt_value(plaintext: str) -> str:
    return get_fernet().encrypt(plaintext.encode()).decode()


def decrypt_value(ciphertext: str) -> str:
    try:
        return get_fernet().decrypt(ciphertext.encode()).decode()
    except InvalidToken as e:
        logger.error("[CRYPTO] stored credential could not be decrypted (key rotated or value corrupted)")
        raise CredentialDecryptError() from e
