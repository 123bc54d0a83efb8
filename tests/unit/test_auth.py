"""
Unit tests for authorization header generation.
"""

import base64
import time

import jwt
import pytest

from pubcontrol.auth import AuthHeaderGenerator, JWT_DEFAULT_TTL_SECONDS
from pubcontrol.core.models import (
    BasicCredential,
    BearerCredential,
    JwtCredential,
    NoCredential,
)


def _decode_bearer(header: str, key: bytes) -> dict:
    assert header.startswith("Bearer ")
    return jwt.decode(header[len("Bearer "):], key, algorithms=["HS256"])


class TestAuthHeaderGenerator:
    """Tests for AuthHeaderGenerator."""
    
    def test_no_credential(self):
        """Test that no header is produced by default."""
        auth = AuthHeaderGenerator()
        
        assert auth.generate() is None
        assert isinstance(auth.credential, NoCredential)
    
    def test_basic(self):
        """Test basic header encoding."""
        auth = AuthHeaderGenerator()
        auth.set_basic("user", "pass")
        
        header = auth.generate()
        
        assert header == "Basic " + base64.b64encode(b"user:pass").decode("ascii")
        assert isinstance(auth.credential, BasicCredential)
    
    def test_basic_utf8(self):
        """Test that non-ASCII credentials are UTF-8 encoded."""
        auth = AuthHeaderGenerator()
        auth.set_basic("üser", "päss")
        
        encoded = auth.generate()[len("Basic "):]
        
        assert base64.b64decode(encoded).decode("utf-8") == "üser:päss"
    
    def test_bearer(self):
        """Test static bearer token."""
        auth = AuthHeaderGenerator()
        auth.set_bearer("token-123")
        
        assert auth.generate() == "Bearer token-123"
        assert isinstance(auth.credential, BearerCredential)
    
    def test_jwt_injects_exp(self):
        """Test that a missing exp claim is set one hour ahead."""
        auth = AuthHeaderGenerator()
        auth.set_jwt({"iss": "realm"}, b"secret")
        
        before = int(time.time())
        claims = _decode_bearer(auth.generate(), b"secret")
        after = int(time.time())
        
        assert claims["iss"] == "realm"
        assert before + JWT_DEFAULT_TTL_SECONDS <= claims["exp"] <= after + JWT_DEFAULT_TTL_SECONDS
    
    def test_jwt_keeps_existing_exp(self):
        """Test that a caller-provided exp claim is not overwritten."""
        exp = int(time.time()) + 60
        auth = AuthHeaderGenerator()
        auth.set_jwt({"iss": "realm", "exp": exp}, b"secret")
        
        claims = _decode_bearer(auth.generate(), b"secret")
        
        assert claims["exp"] == exp
    
    def test_jwt_does_not_mutate_claims(self):
        """Test that the configured claims are copied before signing."""
        claims = {"iss": "realm"}
        auth = AuthHeaderGenerator()
        auth.set_jwt(claims, b"secret")
        auth.generate()
        
        assert claims == {"iss": "realm"}
        assert "exp" not in auth.credential.claims
    
    def test_jwt_string_key(self):
        """Test that a str key is encoded to bytes."""
        auth = AuthHeaderGenerator()
        auth.set_jwt({"iss": "realm"}, "secret")
        
        assert isinstance(auth.credential, JwtCredential)
        assert auth.credential.key == b"secret"
        assert _decode_bearer(auth.generate(), b"secret")["iss"] == "realm"
    
    def test_jwt_header_is_compact_token(self):
        """Test the JWT header is 'Bearer ' plus a three-part text token."""
        auth = AuthHeaderGenerator()
        auth.set_jwt({"iss": "realm"}, b"secret")
    
        header = auth.generate()
    
        assert isinstance(header, str)
        assert header.startswith("Bearer ey")
        assert len(header[len("Bearer "):].split(".")) == 3
    
    def test_jwt_wrong_key_fails_verification(self):
        """Test that the token is signed with the configured key."""
        auth = AuthHeaderGenerator()
        auth.set_jwt({"iss": "realm"}, b"secret")
        
        with pytest.raises(jwt.InvalidSignatureError):
            _decode_bearer(auth.generate(), b"other")
    
    def test_last_setter_wins(self):
        """Test that setting a credential replaces the previous one."""
        auth = AuthHeaderGenerator()
        auth.set_basic("user", "pass")
        auth.set_bearer("token")
        
        assert auth.generate() == "Bearer token"
        
        auth.set_basic("user", "pass")
        
        assert auth.generate().startswith("Basic ")
    
    def test_clear(self):
        """Test that clear() removes the credential."""
        auth = AuthHeaderGenerator()
        auth.set_bearer("token")
        auth.clear()
        
        assert auth.generate() is None
    
    def test_credential_repr_hides_secrets(self):
        """Test that credential reprs do not leak secrets."""
        assert "s3cr3t" not in repr(BasicCredential("user", "s3cr3t"))
        assert "t0k3n-s3cr3t" not in repr(BearerCredential("t0k3n-s3cr3t"))
        assert "s3cr3t-key" not in repr(JwtCredential({"iss": "x"}, b"s3cr3t-key"))
