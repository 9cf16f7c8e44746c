"""
Unit tests for Keycloak API payload models.
"""

import pydantic
import pytest

from workspace_provisioner.models.keycloak_api import (
    AccessToken,
    ClientRepresentation,
    JsonWebKeySet,
    ProtocolMapperRepresentation,
    RealmRepresentation,
    TokenSet,
)


def _dump(model):
    return model.model_dump(by_alias=True, exclude_none=True)


class TestPayloads:
    """Test request bodies sent to Keycloak."""

    def test_realm_payload(self):
        assert _dump(RealmRepresentation(realm="acme")) == {
            "realm": "acme",
            "enabled": True,
        }

    def test_confidential_client_payload(self):
        payload = _dump(ClientRepresentation(client_id="acme-client", secret="s3"))

        assert payload == {
            "clientId": "acme-client",
            "secret": "s3",
            "enabled": True,
            "publicClient": False,
            "directAccessGrantsEnabled": True,
            "authorizationServicesEnabled": True,
            "serviceAccountsEnabled": True,
            "standardFlowEnabled": True,
            "implicitFlowEnabled": False,
            "bearerOnly": False,
            "consentRequired": False,
            "fullScopeAllowed": True,
            "surrogateAuthRequired": False,
            "clientAuthenticatorType": "client-secret",
        }

    def test_role_mapper_payload(self):
        payload = _dump(ProtocolMapperRepresentation.role_mapper())

        assert payload == {
            "name": "realm-roles-mapper",
            "protocol": "openid-connect",
            "protocolMapper": "oidc-usermodel-realm-role-mapper",
            "consentRequired": False,
            "config": {
                "multivalued": "true",
                "user.attribute": "roles",
                "id.token.claim": "true",
                "access.token.claim": "true",
                "claim.name": "role",
                "jsonType.label": "String",
            },
        }


class TestTokenModels:
    """Test token response parsing."""

    def test_token_set_keeps_unknown_fields(self):
        token_set = TokenSet.model_validate(
            {"access_token": "a", "not-before-policy": 0, "expires_in": 300}
        )

        assert token_set.access_token == "a"
        assert token_set.model_dump()["not-before-policy"] == 0

    def test_token_set_requires_access_token(self):
        with pytest.raises(pydantic.ValidationError):
            TokenSet.model_validate({"token_type": "Bearer"})

    def test_access_token_header(self):
        token = AccessToken.from_token_set(TokenSet(access_token="abc", expires_in=60))

        assert token.authorization_header == "Bearer abc"
        assert token.expires_in == 60
        assert "abc" not in repr(token)


class TestJsonWebKeySet:
    """Test JWKS parsing."""

    def test_key_ids(self):
        jwks = JsonWebKeySet.model_validate(
            {"keys": [{"kid": "k1", "kty": "RSA"}, {"kty": "EC"}]}
        )

        assert jwks.key_ids() == ["k1"]
