"""
security.py / encryption.py 단위 테스트
- 비밀번호 해싱/검증
- JWT 토큰 생성/검증
- 연결 비밀번호 암호화
"""
import pytest
from datetime import timedelta
from jose import jwt

from hoprun.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    decode_access_token,
    get_dummy_hash,
)
from hoprun.core.encryption import encrypt_value, decrypt_value
from hoprun.core.exceptions import CredentialDecryptError
from hoprun.core.config import settings


class TestPasswordHashing:
    """비밀번호 해싱 테스트"""

    def test_hash_password(self):
        hashed = get_password_hash("MyPassword123")
        assert hashed != "MyPassword123"
        assert hashed.startswith("$2b$")

    def test_verify_correct_password(self):
        hashed = get_password_hash("MyPassword123")
        assert verify_password("MyPassword123", hashed) is True

    def test_verify_wrong_password(self):
        hashed = get_password_hash("CorrectPass123")
        assert verify_password("WrongPass123", hashed) is False

    def test_different_hashes_for_same_password(self):
        """같은 비밀번호라도 다른 해시 생성 (salt)"""
        assert get_password_hash("SamePassword123") != get_password_hash("SamePassword123")

    def test_dummy_hash_verifiable(self):
        """더미 해시 검증은 실패하지만 예외 없이 동작"""
        assert verify_password("random_password", get_dummy_hash()) is False


class TestJWTToken:
    """JWT 토큰 테스트"""

    def test_decode_token(self):
        token = create_access_token(data={"sub": "test@example.com"})
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert payload["sub"] == "test@example.com"
        assert "exp" in payload
        assert "iat" in payload

    def test_custom_expiration(self):
        token = create_access_token(
            data={"sub": "test@example.com"},
            expires_delta=timedelta(minutes=5)
        )
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        diff = payload["exp"] - payload["iat"]
        assert 290 <= diff <= 310

    def test_decode_access_token_returns_subject(self):
        token = create_access_token(data={"sub": "user@example.com"})
        assert decode_access_token(token) == "user@example.com"

    def test_decode_access_token_expired(self):
        token = create_access_token(
            data={"sub": "user@example.com"},
            expires_delta=timedelta(seconds=-10)
        )
        assert decode_access_token(token) is None

    def test_decode_access_token_wrong_key(self):
        token = jwt.encode({"sub": "user@example.com"}, "x" * 40, algorithm="HS256")
        assert decode_access_token(token) is None

    def test_decode_access_token_garbage(self):
        assert decode_access_token("not-a-token") is None


class TestEncryption:
    """연결 비밀번호 암호화 테스트"""

    def test_roundtrip(self):
        ciphertext = encrypt_value("s3cr3t-db-pass")
        assert ciphertext != "s3cr3t-db-pass"
        assert decrypt_value(ciphertext) == "s3cr3t-db-pass"

    def test_ciphertext_is_randomized(self):
        assert encrypt_value("same") != encrypt_value("same")

    def test_tampered_value_raises(self):
        ciphertext = encrypt_value("s3cr3t")
        tampered = ciphertext[:-4] + ("AAAA" if not ciphertext.endswith("AAAA") else "BBBB")
        with pytest.raises(CredentialDecryptError):
            decrypt_value(tampered)
